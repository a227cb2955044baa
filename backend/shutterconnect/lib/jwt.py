"""Access tokens for signed-in users.

HS256 by default. Claims: `sub` (user id), `role`, `is_verified`, `iat`
and `exp`. Lifetime comes from `settings.jwt_expiration_minutes`.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError

from shutterconnect.lib.settings import settings

REQUIRED_CLAIMS = ["sub", "exp", "iat"]


@dataclass(frozen=True)
class AccessTokenClaims:
    user_id: UUID
    role: str
    is_verified: bool
    issued_at: datetime
    expires_at: datetime


def create_access_token(
    user_id: str,
    role: str,
    is_verified: bool = False,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign an access token for a user.

    Example:
        >>> token = create_access_token("123e4567-e89b-12d3-a456-426614174000", "CLIENT")
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expiration_minutes)

    payload = {
        "sub": user_id,
        "role": role,
        "is_verified": is_verified,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict:
    """Check signature, expiry and required claims; return the raw payload.

    Raises:
        InvalidTokenError: Bad signature, expired, or a required claim is missing
    """
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": REQUIRED_CLAIMS},
    )


def decode_access_token(token: str) -> AccessTokenClaims:
    """Verify a token and return its claims.

    Raises:
        InvalidTokenError: Token fails verification or `sub` is not a UUID
    """
    payload = verify_token(token)
    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise InvalidTokenError("Subject is not a user id")

    return AccessTokenClaims(
        user_id=user_id,
        role=payload.get("role", ""),
        is_verified=bool(payload.get("is_verified", False)),
        issued_at=datetime.fromtimestamp(payload["iat"], timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], timezone.utc),
    )


__all__ = [
    "AccessTokenClaims",
    "InvalidTokenError",
    "create_access_token",
    "decode_access_token",
    "verify_token",
]
