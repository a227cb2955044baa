"""
API dependencies for FastAPI dependency injection.

Provides common dependencies like database sessions and authentication.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from shutterconnect.api.middleware.error_handler import (
    ForbiddenException,
    UnauthorizedException,
)
from shutterconnect.lib.db import get_db as get_db_session
from shutterconnect.lib.jwt import InvalidTokenError, decode_access_token
from shutterconnect.lib.logging import get_logger
from shutterconnect.models.users import User, UserRole

logger = get_logger(__name__)


# Re-export get_db for convenience
get_db = get_db_session


# Missing headers are reported through UnauthorizedException, not HTTPBearer's own error
security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get current authenticated user from JWT token.

    Args:
        request: Incoming request; the user id is recorded on its state
        credentials: Bearer token from Authorization header
        db: Database session

    Returns:
        Authenticated, active user

    Raises:
        UnauthorizedException: 401 if token missing/invalid or user not found
    """
    if credentials is None:
        raise UnauthorizedException("Authentication required")

    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise UnauthorizedException("Invalid authentication token")

    user = db.get(User, claims.user_id)
    if not user or not user.is_active:
        raise UnauthorizedException("User not found")

    request.state.user_id = str(user.id)
    return user


def require_photographer(current_user: User = Depends(get_current_user)) -> User:
    """Only users with the PHOTOGRAPHER role."""
    if current_user.role != UserRole.PHOTOGRAPHER:
        raise ForbiddenException("Photographer access required")
    return current_user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Only users with the ADMIN role."""
    if current_user.role != UserRole.ADMIN:
        raise ForbiddenException("Admin access required")
    return current_user
