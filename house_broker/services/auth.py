"""
Authentication service for registration, login and token management.
Handles JWT token generation and validation and the user authentication flows.
"""

from typing import Optional, Tuple
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from house_broker.repositories.user import UserRepository
from house_broker.models.user import User, UserRole
from house_broker.schemas.auth import RegisterRequest
from house_broker.utils.auth import create_access_token, verify_token
from house_broker.utils.exceptions import (
    DuplicateResourceError,
    InvalidCredentialsError,
    InvalidRoleError,
    ValidationError,
)
from jose import JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing user accounts and their tokens.
    Every successful register or login yields a (user, token, expires_at) triple.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    def create_token(self, user: User) -> Tuple[str, datetime]:
        """
        Issue an access token for a user.

        Args:
            user: User object

        Returns:
            Tuple of (access_token, expires_at)
        """
        return create_access_token(
            user_id=user.id,
            email=user.email,
            full_name=user.full_name,
            role=user.role
        )

    async def register(self, data: RegisterRequest) -> Tuple[User, str, datetime]:
        """
        Create an account and sign the new user in.

        Args:
            data: Validated registration request

        Returns:
            Tuple of (user, access_token, expires_at)

        Raises:
            DuplicateResourceError: If the email is already registered
            InvalidRoleError: If the role is neither HouseSeeker nor Broker
            ValidationError: If the email cannot be normalised
        """
        try:
            email = User.normalize_email(data.email)
        except ValueError as e:
            raise ValidationError(str(e), field_errors=[{"field": "email", "message": str(e)}])

        if await self.user_repo.get_by_email(email):
            logger.warning(f"Registration rejected, email already in use: {email}")
            raise DuplicateResourceError("User", "email", email)

        role = UserRole.parse(data.role)
        if role is None:
            raise InvalidRoleError(data.role)

        user = await self.user_repo.create_user({
            "email": email,
            "password": data.password,
            "first_name": data.first_name,
            "last_name": data.last_name,
            "role": role,
            "is_active": True,
        })

        token, expires_at = self.create_token(user)
        logger.info(f"Registered {role.value} {user.email} (ID: {user.id})")
        return user, token, expires_at

    async def login(self, email: str, password: str) -> Tuple[User, str, datetime]:
        """
        Authenticate user and create a token.

        Unknown email, inactive account and wrong password all fail the same way.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Tuple of (user, access_token, expires_at)

        Raises:
            InvalidCredentialsError: If credentials are invalid
        """
        user = await self.user_repo.authenticate_user(email, password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        token, expires_at = self.create_token(user)
        logger.info(f"User logged in successfully: {user.email}")
        return user, token, expires_at

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: UUID of the user

        Returns:
            User object, or None if no such user exists
        """
        return await self.user_repo.get_by_id(user_id)

    def validate_token(self, token: str) -> bool:
        """
        Check a token's signature, issuer, audience and expiry.

        Args:
            token: JWT token string

        Returns:
            True if the token is valid, False otherwise
        """
        try:
            verify_token(token)
            return True
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            return False
