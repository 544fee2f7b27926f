# app/routers/auth.py
"""Login, user registration (yearly admins only) and the current user's profile."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_roles
from app.models.user import User, UserRole
from app.schemas.auth import LoginOut, LoginRequest, UserCreate, UserOut
from app.services import auth_service

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=LoginOut, summary="Exchange username/password for a bearer token")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, body.username, body.password)
    return LoginOut(access_token=token, user=UserOut.model_validate(user))


@router.post(
    "/register",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.YEARLY_ADMIN))],
    summary="Create an administrator",
)
def register(body: UserCreate, db: Session = Depends(get_db)):
    return auth_service.create_user(db, body)


@router.get("/profile", response_model=UserOut, summary="Current user and permissions")
def profile(user: User = Depends(get_current_user)):
    return user
