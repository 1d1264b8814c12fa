"""JWT access tokens carrying a principal's role claim."""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import jwt

from careauth.models.principal import Principal
from careauth.roles import RoleRegistry

logger = logging.getLogger(__name__)

DEFAULT_ISSUER = "careauth"
DEFAULT_AUDIENCE = "careauth-api"


class TokenExpiredError(Exception):
    """Raised when a JWT token has expired."""


class TokenInvalidError(Exception):
    """Raised when a JWT token is invalid."""


def _default_secret() -> str:
    return os.environ.get("CAREAUTH_JWT_SECRET", "test-secret-key-do-not-use")


def create_token(
    user_id: str,
    email: str,
    role: str,
    *,
    is_verified: bool = False,
    secret: str | None = None,
    exp_minutes: int = 15,
    issuer: str = DEFAULT_ISSUER,
    audience: str = DEFAULT_AUDIENCE,
) -> str:
    """Create an access token for a user."""
    now = int(time.time())
    payload = {
        "sub": user_id,
        "email": email,
        "role": str(role),
        "verified": is_verified,
        "iat": now,
        "exp": now + (exp_minutes * 60),
        "iss": issuer,
        "aud": audience,
    }
    return jwt.encode(payload, secret or _default_secret(), algorithm="HS256")


def verify_token(
    token: str,
    secret: str,
    *,
    issuer: str = DEFAULT_ISSUER,
    audience: str = DEFAULT_AUDIENCE,
) -> dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            issuer=issuer,
            audience=audience,
        )
        return payload
    except jwt.ExpiredSignatureError as e:
        logger.warning("Token expired: %s", e)
        raise TokenExpiredError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token: %s", e)
        raise TokenInvalidError("Token is invalid") from e


def principal_from_token(
    token: str,
    secret: str,
    registry: RoleRegistry,
    *,
    issuer: str = DEFAULT_ISSUER,
    audience: str = DEFAULT_AUDIENCE,
) -> Principal:
    """Verify a token and build its principal, re-validating the role claim."""
    payload = verify_token(token, secret, issuer=issuer, audience=audience)
    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email or "role" not in payload:
        raise TokenInvalidError("Token missing required claims")

    role = registry.parse(payload["role"])
    return Principal(
        user_id=user_id,
        email=email,
        role=role,
        is_verified=bool(payload.get("verified", False)),
    )
