# app/dependencies.py
"""
FastAPI dependencies for bearer-token auth and role gating.

    @router.get("/x", dependencies=[Depends(require_roles(UserRole.YEARLY_ADMIN))])
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import InvalidCredentials, PermissionDenied
from app.models.user import User, UserRole
from app.services.auth_service import decode_access_token, validate_user

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise InvalidCredentials("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    return validate_user(db, payload.get("sub"))


def require_roles(*roles: UserRole):
    allowed = set(roles)

    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise PermissionDenied("You do not have permission to access this resource")
        return user

    return checker


ALL_ROLES = (UserRole.DAILY_ADMIN, UserRole.WEEKLY_ADMIN, UserRole.YEARLY_ADMIN)
HISTORY_ROLES = (UserRole.WEEKLY_ADMIN, UserRole.YEARLY_ADMIN)
