"""Shared fixtures: in-memory SQLite database, API client and user/token helpers."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="entry-photos-")
os.environ["CLEANUP_SCHEDULER_ENABLED"] = "false"
os.environ["SEED_DEFAULT_USERS"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, create_tables, engine
from app.main import app
from app.models.user import UserRole
from app.schemas.auth import UserCreate
from app.services.auth_service import create_access_token, create_user


@pytest.fixture
def db():
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=UserRole.DAILY_ADMIN, username=None, password="secret", is_active=True):
        counter["n"] += 1
        return create_user(db, UserCreate(
            username=username or f"{role.value}_{counter['n']}",
            password=password,
            full_name="Test Admin",
            role=role,
            is_active=is_active,
        ))

    return _make


@pytest.fixture
def headers_for():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}
    return _headers

