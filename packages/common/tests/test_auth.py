"""Tests for token issuance and the route guards."""

from __future__ import annotations

import time
from collections.abc import Generator

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from jobly_common.auth import (
    ALGORITHM,
    RequestContext,
    create_token,
    optional_user,
    require_admin,
    verify_token,
)
from jobly_common.config import reset_config

SECRET = "test-secret"


@pytest.fixture(autouse=True)
def auth_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Configure a known signing secret."""
    monkeypatch.setenv("SECRET_KEY", SECRET)
    monkeypatch.setenv("JOBLY_ENV", "test")
    monkeypatch.setenv("TOKEN_EXP_MINUTES", "30")
    reset_config()
    yield
    reset_config()


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestVerifyToken:
    """Test token verification."""

    def test_admin_token(self) -> None:
        ctx = verify_token(create_token("admin", is_admin=True))

        assert ctx == RequestContext(username="admin", is_admin=True)

    def test_user_token(self) -> None:
        ctx = verify_token(create_token("u1"))

        assert ctx.username == "u1"
        assert ctx.is_admin is False

    def test_token_lifetime_from_config(self) -> None:
        payload = jwt.decode(create_token("u1"), SECRET, algorithms=[ALGORITHM])

        assert payload["exp"] - payload["iat"] == 30 * 60

    def test_expired_token(self) -> None:
        token = create_token("u1", exp_minutes=-1)

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token)

        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.detail.lower()

    def test_invalid_signature(self) -> None:
        token = jwt.encode(
            {"sub": "u1", "isAdmin": True, "exp": int(time.time()) + 60},
            "wrong-secret",
            algorithm=ALGORITHM,
        )

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token)

        assert exc_info.value.status_code == 401
        assert "invalid token" in exc_info.value.detail.lower()

    def test_malformed_token(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            verify_token("not-a-jwt")

        assert exc_info.value.status_code == 401

    def test_missing_sub(self) -> None:
        token = jwt.encode({"isAdmin": True, "exp": int(time.time()) + 60}, SECRET, algorithm=ALGORITHM)

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token)

        assert exc_info.value.status_code == 401
        assert "sub" in exc_info.value.detail

    def test_admin_claim_must_be_true(self) -> None:
        """A truthy non-boolean claim does not grant admin."""
        token = jwt.encode(
            {"sub": "u1", "isAdmin": "true", "exp": int(time.time()) + 60},
            SECRET,
            algorithm=ALGORITHM,
        )

        assert verify_token(token).is_admin is False


class TestGuards:
    """Test the FastAPI dependencies."""

    def test_anonymous_is_allowed_by_optional_user(self) -> None:
        assert optional_user(None) is None

    def test_optional_user_verifies_credentials(self) -> None:
        ctx = optional_user(bearer(create_token("u1")))

        assert ctx is not None
        assert ctx.username == "u1"

    def test_require_admin_accepts_admin(self) -> None:
        ctx = RequestContext(username="admin", is_admin=True)

        assert require_admin(ctx) is ctx

    def test_require_admin_rejects_anonymous(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            require_admin(None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_require_admin_rejects_non_admin(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            require_admin(RequestContext(username="u1"))

        assert exc_info.value.status_code == 401
        assert "admin" in exc_info.value.detail.lower()
