"""
User model with authentication and role management.
Handles accounts for house seekers and the brokers who list properties.
"""

from sqlalchemy import String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from house_broker.config import settings
from house_broker.database import Base
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
from datetime import datetime
import enum
from typing import Optional

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    HOUSE_SEEKER = "HouseSeeker"
    BROKER = "Broker"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["UserRole"]:
        """
        Resolve a role name case-insensitively.

        Args:
            value: Role name such as "broker" or "HouseSeeker"

        Returns:
            Matching UserRole, or None when the name is unknown
        """
        if not value:
            return None
        candidate = value.strip().lower()
        for role in cls:
            if candidate == role.value.lower():
                return role
        return None


class User(Base):
    """
    User model for authentication and authorization.
    Supports house seekers and brokers with role-based permissions.
    """

    __tablename__ = "users"

    # User identification and authentication
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # User profile information
    first_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="User's first name"
    )

    last_name: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="User's last name"
    )

    # Role and status
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.HOUSE_SEEKER,
        index=True,
        comment="User role for access control"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Whether the user account is active"
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Last profile change, if any"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def normalize_email(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Lower-cased, normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email.strip(), check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        if not password:
            raise ValueError("Password is required")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """
        Verify a password against the stored hash.

        Args:
            password: Plain text password to verify

        Returns:
            True if password matches, False otherwise
        """
        return pwd_context.verify(password, self.hashed_password)

    @property
    def is_broker(self) -> bool:
        """Check if user has broker role."""
        return self.role == UserRole.BROKER

    def to_dict(self) -> dict:
        """
        Convert user to its public view (excluding sensitive data).

        Returns:
            Dictionary representation of user
        """
        return {
            "id": str(self.id),
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "role": self.role.value,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
        }
