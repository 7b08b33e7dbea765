"""
Pydantic schemas for request/response validation.
"""

# Authentication schemas
from .auth import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    TokenValidationResponse
)

# User schemas
from .user import UserResponse

# Property schemas
from .property import (
    PropertyFeatureIn,
    PropertyBase,
    PropertyCreate,
    PropertyUpdate,
    PropertyImageResponse,
    PropertyFeatureResponse,
    PropertyResponse,
    PropertySummaryResponse,
    PagedPropertyResponse,
    PropertySearchRequest
)

# Error schemas
from .error import ErrorDetail, ErrorResponse, APIErrorResponse

__all__ = [
    # Authentication
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "TokenValidationResponse",

    # User
    "UserResponse",

    # Property
    "PropertyFeatureIn",
    "PropertyBase",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyImageResponse",
    "PropertyFeatureResponse",
    "PropertyResponse",
    "PropertySummaryResponse",
    "PagedPropertyResponse",
    "PropertySearchRequest",

    # Error
    "ErrorDetail",
    "ErrorResponse",
    "APIErrorResponse",
]
