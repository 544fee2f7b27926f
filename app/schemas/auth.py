# app/schemas/auth.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from app.models.user import UserRole


class LoginRequest(BaseModel):
    username: str
    password: str


class UserCreate(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    full_name: str = Field(alias="fullName", min_length=1)
    role: UserRole = UserRole.DAILY_ADMIN
    is_active: bool = Field(default=True, alias="isActive")

    class Config:
        populate_by_name = True


class UserOut(BaseModel):
    id: str
    username: str
    full_name: str = Field(alias="fullName")
    role: UserRole
    is_active: bool = Field(alias="isActive")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    permissions: dict[str, bool]

    class Config:
        from_attributes = True
        populate_by_name = True


class LoginOut(BaseModel):
    access_token: str
    user: UserOut
