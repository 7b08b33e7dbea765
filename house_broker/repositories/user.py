"""
User repository for authentication and user management operations.
Provides secure user operations with password handling.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from house_broker.repositories.base import BaseRepository
from house_broker.models.user import User, UserRole
from house_broker.utils.exceptions import DuplicateResourceError
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication support.
    Emails are stored lower-cased so lookups are case-insensitive.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: email, password, first_name, last_name
                      Optional: role (defaults to HOUSE_SEEKER)

        Returns:
            Created user instance

        Raises:
            ValueError: If the email or password is malformed
            DuplicateResourceError: If the email is already registered
        """
        data = dict(user_data)
        email = User.normalize_email(data.pop("email"))

        if await self.get_by_email(email):
            raise DuplicateResourceError("User", "email", email)

        password = data.pop("password")
        create_data = {
            **data,
            "email": email,
            "hashed_password": User.hash_password(password),
            "role": data.get("role", UserRole.HOUSE_SEEKER),
            "is_active": data.get("is_active", True),
        }

        try:
            created_user = await self.create(create_data)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise DuplicateResourceError("User", "email", email)

        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        normalized_email = email.lower().strip()
        user = await self.get_by_field("email", normalized_email)

        if user:
            logger.debug(f"Retrieved user by email: {normalized_email}")
        else:
            logger.debug(f"User with email {normalized_email} not found")

        return user

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            User instance if authentication successful, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.is_active:
            logger.debug(f"Authentication failed: user {email} is inactive")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        logger.info(f"User authenticated successfully: {email}")
        return user
