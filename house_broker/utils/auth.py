"""
Authentication utilities for JWT token management.
Provides JWT token generation, validation, and role-based claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple
from jose import JWTError, jwt
from house_broker.config import settings
from house_broker.models.user import UserRole
import uuid

REQUIRED_CLAIMS = ("sub", "email", "role", "exp")


class TokenPayload:
    """JWT token payload structure."""

    def __init__(self, user_id: uuid.UUID, email: str, name: str, role: UserRole, exp: datetime):
        self.user_id = user_id
        self.email = email
        self.name = name
        self.role = role
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from dictionary."""
        return cls(
            user_id=uuid.UUID(data["sub"]),
            email=data["email"],
            name=data.get("name", ""),
            role=UserRole(data["role"]),
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    full_name: str,
    role: UserRole,
    expires_delta: Optional[timedelta] = None
) -> Tuple[str, datetime]:
    """
    Create JWT access token with user claims.

    Args:
        user_id: User's UUID
        email: User's email address
        full_name: User's display name
        role: User's role (house seeker/broker)
        expires_delta: Optional custom expiration time

    Returns:
        Tuple of (encoded JWT token string, expiry time)
    """
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = issued_at + expires_delta

    to_encode = {
        "sub": str(user_id),  # Subject (user ID)
        "email": email,
        "name": full_name,
        "role": role.value,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "exp": expire,
        "iat": issued_at,
    }

    encoded_jwt = jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )

    return encoded_jwt, expire


def verify_token(token: str) -> TokenPayload:
    """
    Verify and decode JWT token.

    Signature, issuer, audience and expiry are all checked with no clock skew.

    Args:
        token: JWT token string

    Returns:
        TokenPayload for a valid token

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )

        missing = [claim for claim in REQUIRED_CLAIMS if not payload.get(claim)]
        if missing:
            raise JWTError(f"Invalid token payload, missing: {', '.join(missing)}")

        return TokenPayload.from_dict(payload)

    except JWTError:
        raise
    except Exception as e:
        raise JWTError(f"Token validation error: {str(e)}")
