"""Unit tests for the auth service (passwords, tokens, login, seeding)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta, timezone

from unittest.mock import MagicMock

import jwt
import pytest
from sqlalchemy.exc import IntegrityError
from app.config import settings
from app.exceptions import InvalidCredentials, UsernameTaken
from app.models.user import User, UserRole
from app.schemas.auth import UserCreate
from app.services import auth_service


class TestPasswords:
    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = auth_service.hash_password("admin123")
        assert hashed != "admin123"
        assert auth_service.verify_password("admin123", hashed)
        assert not auth_service.verify_password("admin124", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not auth_service.verify_password("admin123", "not-a-bcrypt-hash")


class TestLogin:
    def test_token_carries_stored_role(self, db, make_user):
        user = make_user(UserRole.WEEKLY_ADMIN, username="semanal", password="pw")

        token, logged_in = auth_service.login(db, "semanal", "pw")
        payload = auth_service.decode_access_token(token)

        assert logged_in.id == user.id
        assert payload["sub"] == user.id
        assert payload["username"] == "semanal"
        assert payload["role"] == "weekly_admin"

    def test_wrong_password_rejected(self, db, make_user):
        make_user(username="diario", password="right")
        with pytest.raises(InvalidCredentials) as exc:
            auth_service.login(db, "diario", "wrong")
        assert exc.value.detail == "Invalid credentials"

    def test_inactive_user_rejected_even_with_right_password(self, db, make_user):
        make_user(username="old", password="right", is_active=False)
        with pytest.raises(InvalidCredentials) as exc:
            auth_service.login(db, "old", "right")
        assert exc.value.detail == "Invalid credentials"

    def test_unknown_user_gets_same_message(self, db):
        with pytest.raises(InvalidCredentials) as exc:
            auth_service.login(db, "nobody", "whatever")
        assert exc.value.detail == "Invalid credentials"


class TestTokens:
    def test_expired_token_rejected(self):
        payload = {"sub": "abc", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)}
        token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(InvalidCredentials, match="expired"):
            auth_service.decode_access_token(token)

    def test_foreign_signature_rejected(self):
        token = jwt.encode({"sub": "abc"}, "someone-else", algorithm="HS256")
        with pytest.raises(InvalidCredentials):
            auth_service.decode_access_token(token)

    def test_validate_user_rejects_inactive(self, db, make_user):
        user = make_user(is_active=False)
        with pytest.raises(InvalidCredentials):
            auth_service.validate_user(db, user.id)

    def test_validate_user_rejects_missing(self, db):
        with pytest.raises(InvalidCredentials):
            auth_service.validate_user(db, "00000000-0000-0000-0000-000000000000")


class TestUsers:
    def test_create_user_hashes_password(self, db):
        user = auth_service.create_user(db, UserCreate(
            username="nuevo", password="plain", full_name="Nuevo Admin", role=UserRole.YEARLY_ADMIN,
        ))
        assert user.password_hash != "plain"
        assert user.is_active
        assert user.role == UserRole.YEARLY_ADMIN

    def test_duplicate_username_rejected(self, db, make_user):
        make_user(username="taken")
        with pytest.raises(UsernameTaken):
            auth_service.create_user(db, UserCreate(username="taken", password="x", full_name="Dup"))

    def test_concurrent_duplicate_insert_is_conflict(self):
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None  # passes the pre-check
        db.commit.side_effect = IntegrityError("INSERT INTO users", {}, Exception("unique violation"))

        with pytest.raises(UsernameTaken):
            auth_service.create_user(db, UserCreate(username="taken", password="x", full_name="Dup"))
        db.rollback.assert_called_once()
        db.refresh.assert_not_called()

    def test_seeded_full_names(self, db):
        auth_service.seed_default_users(db)
        names = {u.username: u.full_name for u in db.query(User).all()}
        assert names == {
            "admin_diario": "Administrador Diario",
            "admin_semanal": "Administrador Semanal",
            "admin_anual": "AZUMAT",
        }

    def test_seed_is_idempotent(self, db):
        first = auth_service.seed_default_users(db)
        second = auth_service.seed_default_users(db)

        assert first == ["admin_diario", "admin_semanal", "admin_anual"]
        assert second == []
        roles = {u.username: u.role for u in db.query(User).all()}
        assert roles == {
            "admin_diario": UserRole.DAILY_ADMIN,
            "admin_semanal": UserRole.WEEKLY_ADMIN,
            "admin_anual": UserRole.YEARLY_ADMIN,
        }

    def test_seeded_admin_can_log_in(self, db):
        auth_service.seed_default_users(db)
        token, user = auth_service.login(db, "admin_anual", settings.DEFAULT_YEARLY_PASSWORD)
        assert auth_service.decode_access_token(token)["role"] == "yearly_admin"
