# app/models/user.py
"""
Administrator accounts. One of three fixed role tiers per user.
The role drives both the permission set (app/services/permissions.py)
and the retention window applied by the cleanup jobs.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, String
from app.database import Base


class UserRole(str, enum.Enum):
    DAILY_ADMIN = "daily_admin"
    WEEKLY_ADMIN = "weekly_admin"
    YEARLY_ADMIN = "yearly_admin"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.DAILY_ADMIN,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    @property
    def permissions(self) -> dict[str, bool]:
        from app.services.permissions import get_permissions
        return get_permissions(self.role)

    def __repr__(self):
        return f"<User {self.username} role={self.role.value if self.role else None}>"
