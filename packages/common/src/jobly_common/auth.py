"""
Authentication and Authorization for Jobly.

Requests authenticate with an HS256 JWT in the `Authorization: Bearer` header.
Tokens carry the username in the standard `sub` claim and an `isAdmin` flag.
Reads are public; every write route depends on `require_admin`.

Core Responsibilities:
- **Token Issuance**: `create_token` signs tokens with `SECRET_KEY`.
- **Token Verification**: `verify_token` checks signature and expiry and
  builds a `RequestContext`.
- **Route Guards**: `optional_user` and `require_admin` are FastAPI
  dependencies; a missing, invalid or non-admin token on a guarded route is a
  401.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import get_config

ALGORITHM = "HS256"

# auto_error is off so that anonymous requests reach the dependencies below,
# which decide between "anonymous is fine" and 401.
security = HTTPBearer(auto_error=False)


@dataclass
class RequestContext:
    """
    The authenticated identity behind a request.

    Attributes:
        username: The 'sub' claim of the token.
        is_admin: The 'isAdmin' claim; False when absent.
    """

    username: str
    is_admin: bool = False


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(token: str) -> RequestContext:
    """
    Decodes and verifies a token.

    Raises:
        HTTPException (401): If the token has expired, has a bad signature, or
            lacks a 'sub' claim.
    """
    config = get_config()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            config.secret_key,
            algorithms=[ALGORITHM],
            options={"verify_exp": True},
        )
    except jwt.ExpiredSignatureError as e:
        raise _unauthorized("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {e!s}") from e

    username = payload.get("sub")
    if not username:
        raise _unauthorized("Missing sub claim in token")

    return RequestContext(username=str(username), is_admin=payload.get("isAdmin") is True)


def optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> RequestContext | None:
    """FastAPI dependency: the caller's context, or None for anonymous requests."""
    if credentials is None:
        return None
    return verify_token(credentials.credentials)


def require_admin(
    ctx: Annotated[RequestContext | None, Depends(optional_user)],
) -> RequestContext:
    """
    FastAPI dependency guarding admin-only routes.

    Raises:
        HTTPException (401): For anonymous callers and non-admin users alike.
    """
    if ctx is None:
        raise _unauthorized("Authentication required")
    if not ctx.is_admin:
        raise _unauthorized("Admin privileges required")
    return ctx


def create_token(
    username: str,
    is_admin: bool = False,
    exp_minutes: int | None = None,
) -> str:
    """
    Creates a signed token for `username`.

    Args:
        username: Placed in the 'sub' claim.
        is_admin: Placed in the 'isAdmin' claim.
        exp_minutes: Lifetime in minutes; defaults to `TOKEN_EXP_MINUTES`.
            Negative values produce an already expired token (useful in tests).
    """
    config = get_config()
    if exp_minutes is None:
        exp_minutes = config.token_exp_minutes

    now = int(time.time())
    payload = {
        "sub": username,
        "isAdmin": is_admin,
        "iat": now,
        "exp": now + exp_minutes * 60,
    }
    return jwt.encode(payload, config.secret_key, algorithm=ALGORITHM)
