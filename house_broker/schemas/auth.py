"""
Pydantic schemas for authentication requests and responses.
Handles registration, login, and token validation data.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from house_broker.models.user import UserRole
from house_broker.schemas.user import UserResponse

PASSWORD_SPECIAL_CHARACTERS = "@$!%*?&"
NAME_MAX_LENGTH = 50


class RegisterRequest(BaseModel):
    """Registration request schema."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["broker@example.com"]
    )
    password: str = Field(
        ...,
        description="At least 6 characters with upper and lower case letters, a digit and one of @$!%*?&",
        examples=["Secret1!"]
    )
    first_name: str = Field(..., description="User's first name", examples=["Jane"])
    last_name: str = Field(..., description="User's last name", examples=["Doe"])
    role: str = Field(
        ...,
        description="Either 'HouseSeeker' or 'Broker' (case-insensitive)",
        examples=["Broker"]
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        """Validate password strength."""
        if not v:
            raise ValueError("Password is required")
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if not any(c.isupper() for c in v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not any(c.islower() for c in v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one digit")
        if not any(c in PASSWORD_SPECIAL_CHARACTERS for c in v):
            raise ValueError(f"Password must contain at least one special character ({PASSWORD_SPECIAL_CHARACTERS})")
        return v

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, v, info):
        label = info.field_name.replace("_", " ").capitalize()
        v = v.strip()
        if not v:
            raise ValueError(f"{label} is required")
        if len(v) > NAME_MAX_LENGTH:
            raise ValueError(f"{label} must not exceed {NAME_MAX_LENGTH} characters")
        return v

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        """Only the two public roles may be requested."""
        if UserRole.parse(v) is None:
            raise ValueError("Role must be either 'HouseSeeker' or 'Broker'")
        return v.strip()


class LoginRequest(BaseModel):
    """Login request schema."""

    email: str = Field(
        ...,
        min_length=1,
        description="User's email address",
        examples=["broker@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        description="User's password",
        examples=["Secret1!"]
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class AuthResponse(BaseModel):
    """Token plus the authenticated user, returned by register and login."""

    token: str = Field(
        ...,
        description="JWT access token",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )
    token_type: str = Field(
        default="bearer",
        description="Token type",
        examples=["bearer"]
    )
    expires_at: datetime = Field(
        ...,
        description="Access token expiry (UTC)",
        examples=["2024-01-02T00:00:00Z"]
    )
    user: UserResponse = Field(
        ...,
        description="Authenticated user information"
    )


class TokenValidationResponse(BaseModel):
    """Token validation response schema."""

    valid: bool = Field(
        ...,
        description="Whether the token is valid",
        examples=[True]
    )
