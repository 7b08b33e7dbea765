"""
Pydantic schemas for user responses.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from house_broker.models.user import UserRole


class UserResponse(BaseModel):
    """Public view of a user (excluding sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(
        ...,
        description="User's unique identifier",
        examples=["123e4567-e89b-12d3-a456-426614174000"]
    )

    email: str = Field(
        ...,
        description="User's email address",
        examples=["broker@example.com"]
    )

    first_name: str = Field(..., description="User's first name", examples=["Jane"])

    last_name: str = Field(..., description="User's last name", examples=["Doe"])

    full_name: str = Field(
        ...,
        description="First and last name joined by a space",
        examples=["Jane Doe"]
    )

    role: UserRole = Field(
        ...,
        description="User's role",
        examples=["Broker"]
    )

    is_active: bool = Field(
        ...,
        description="Whether the user account is active",
        examples=[True]
    )

    created_at: datetime = Field(
        ...,
        description="Account creation timestamp",
        examples=["2024-01-01T00:00:00Z"]
    )
