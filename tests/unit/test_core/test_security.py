"""Unit tests for security utilities."""
from datetime import timedelta
from unittest.mock import Mock

import pytest
from fastapi import HTTPException

from app.core import config
from app.core.security import (
    create_access_token,
    get_password_hash,
    verify_admin_password,
    verify_admin_token,
    verify_password,
)


def _request_with_cookie(token):
    request = Mock()
    request.cookies = {"admin_token": token} if token else {}
    return request


@pytest.mark.unit
class TestPasswords:
    """Argon2 hashing and organizer password checks."""

    def test_hash_and_verify(self):
        password_hash = get_password_hash("door-shift")

        assert password_hash.startswith("$argon2")
        assert verify_password("door-shift", password_hash) is True
        assert verify_password("wrong", password_hash) is False

    def test_plaintext_admin_password(self, monkeypatch):
        monkeypatch.setattr(config.settings, "ADMIN_PASSWORD", "testpass123")

        assert verify_admin_password("testpass123") is True
        assert verify_admin_password("nope") is False

    def test_hashed_admin_password(self, monkeypatch):
        monkeypatch.setattr(config.settings, "ADMIN_PASSWORD", get_password_hash("testpass123"))

        assert verify_admin_password("testpass123") is True
        assert verify_admin_password("nope") is False


@pytest.mark.unit
class TestAdminToken:
    """JWT cookie verification."""

    def test_valid_token(self):
        payload = verify_admin_token(_request_with_cookie(create_access_token({"is_admin": True})))

        assert payload["is_admin"] is True

    def test_missing_cookie(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_admin_token(_request_with_cookie(None))
        assert exc_info.value.status_code == 401

    def test_not_admin(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_admin_token(_request_with_cookie(create_access_token({"is_admin": False})))
        assert exc_info.value.status_code == 403

    def test_expired(self):
        token = create_access_token({"is_admin": True}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(HTTPException) as exc_info:
            verify_admin_token(_request_with_cookie(token))
        assert exc_info.value.detail == "Token expired"

    def test_garbage(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_admin_token(_request_with_cookie("not.a.jwt"))
        assert exc_info.value.detail == "Invalid token"
