"""
FastAPI dependency injection utilities for authentication and database sessions.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from house_broker.database import get_db
from house_broker.models.user import User, UserRole
from house_broker.services.auth import AuthService
from house_broker.services.property import PropertyService
from house_broker.utils.auth import TokenPayload, verify_token
from house_broker.utils.exceptions import (
    UnauthorizedError,
    InvalidTokenError,
    TokenExpiredError,
    NotFoundError,
    InsufficientPermissionsError
)
from jose import ExpiredSignatureError, JWTError
import logging

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session

    Returns:
        AuthService instance
    """
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session

    Returns:
        PropertyService instance
    """
    return PropertyService(db)


async def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """
    Decode the bearer token of the current request.

    Args:
        credentials: HTTP Bearer credentials

    Returns:
        Verified token claims

    Raises:
        UnauthorizedError: If no token provided
        TokenExpiredError: If token is expired
        InvalidTokenError: If token is otherwise invalid
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    try:
        return verify_token(credentials.credentials)
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise InvalidTokenError()


async def get_current_user(
    payload: TokenPayload = Depends(get_token_payload),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        payload: Verified token claims
        auth_service: Authentication service

    Returns:
        Current User object

    Raises:
        NotFoundError: If the token names a user that no longer exists
    """
    user = await auth_service.get_user_by_id(payload.user_id)
    if user is None:
        raise NotFoundError("User", str(payload.user_id))
    return user


def require_role(*allowed_roles: UserRole):
    """
    Create a dependency that requires one of the given roles.

    The role is read from the token claims, so no database lookup is made.

    Args:
        allowed_roles: Roles permitted to call the route

    Returns:
        Dependency function yielding the caller's token claims
    """
    async def role_dependency(
        payload: TokenPayload = Depends(get_token_payload)
    ) -> TokenPayload:
        if payload.role not in allowed_roles:
            names = " or ".join(role.value for role in allowed_roles)
            raise InsufficientPermissionsError(f"access {names} resources")
        return payload

    return role_dependency


require_broker = require_role(UserRole.BROKER)
