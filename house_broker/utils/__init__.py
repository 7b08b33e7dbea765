"""
Utility modules for the HouseBroker API.
"""

from .auth import (
    create_access_token,
    verify_token,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    BadRequestError,
    InvalidCredentialsError,
    TokenExpiredError,
    InvalidTokenError,
    InsufficientPermissionsError,
    InvalidRoleError,
    PropertyNotFoundError,
    PropertyOwnershipError,
    DuplicateResourceError
)

from .validators import ValidationUtils

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_access_token",
    "verify_token",
    "TokenPayload",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "BadRequestError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
    "InvalidRoleError",
    "PropertyNotFoundError",
    "PropertyOwnershipError",
    "DuplicateResourceError",

    # Validation
    "ValidationUtils",
]
