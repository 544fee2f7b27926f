# app/services/auth_service.py
"""
Authentication: bcrypt password hashes + HS256 bearer tokens (JWT).

  login()          → checks username/password, returns (token, user)
  validate_user()  → binds a decoded token back to an active user row
  create_user()    → hashes the password and inserts the row
  seed_default_users() → one admin per tier, run once at startup

Every credential failure raises InvalidCredentials with the same generic
message so callers cannot tell "no such user" from "wrong password".
"""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import InvalidCredentials, UsernameTaken
from app.models.user import User, UserRole
from app.schemas.auth import UserCreate
from app.utils.logger import get_logger

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash or password over bcrypt's 72-byte limit
        return False


def create_access_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "username": user.username,
        "role": user.role.value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidCredentials("Token expired")
    except jwt.InvalidTokenError:
        raise InvalidCredentials("Invalid token")


def login(db: Session, username: str, password: str) -> tuple[str, User]:
    user = db.query(User).filter(User.username == username).first()
    if not user or not user.is_active:
        logger.warning(f"[AUTH] Rejected login for '{username}' (unknown or inactive)")
        raise InvalidCredentials()

    if not verify_password(password, user.password_hash):
        logger.warning(f"[AUTH] Rejected login for '{username}' (bad password)")
        raise InvalidCredentials()

    logger.info(f"[AUTH] {username} logged in as {user.role.value}")
    return create_access_token(user), user


def validate_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id) if user_id else None
    if not user or not user.is_active:
        raise InvalidCredentials("Invalid user")
    return user


def create_user(db: Session, data: UserCreate) -> User:
    if db.query(User).filter(User.username == data.username).first():
        raise UsernameTaken(f"Username '{data.username}' already exists")

    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        role=data.role,
        is_active=data.is_active,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent insert of the same username
        db.rollback()
        raise UsernameTaken(f"Username '{data.username}' already exists")
    db.refresh(user)
    logger.info(f"[AUTH] Created user {user.username} ({user.role.value})")
    return user


def default_users() -> list[UserCreate]:
    return [
        UserCreate(username="admin_diario", password=settings.DEFAULT_DAILY_PASSWORD,
                   full_name="Administrador Diario", role=UserRole.DAILY_ADMIN),
        UserCreate(username="admin_semanal", password=settings.DEFAULT_WEEKLY_PASSWORD,
                   full_name="Administrador Semanal", role=UserRole.WEEKLY_ADMIN),
        UserCreate(username="admin_anual", password=settings.DEFAULT_YEARLY_PASSWORD,
                   full_name="AZUMAT", role=UserRole.YEARLY_ADMIN),
    ]


def seed_default_users(db: Session) -> list[str]:
    """Create the default admins that do not exist yet. Returns the usernames created."""
    created = []
    for data in default_users():
        if db.query(User).filter(User.username == data.username).first():
            continue
        create_user(db, data)
        created.append(data.username)
    return created
