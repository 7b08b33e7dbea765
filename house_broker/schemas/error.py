"""
Error response schemas for API documentation and consistent error formatting.
Provides standardized error response models for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["email"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Password must contain at least one digit"]
    )


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(
        ...,
        description="Error code identifier",
        examples=["VALIDATION_ERROR"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Request validation failed"]
    )

    timestamp: str = Field(
        ...,
        description="Error timestamp in ISO format",
        examples=["2024-01-01T00:00:00Z"]
    )

    request_id: Optional[str] = Field(
        None,
        description="Unique request identifier for tracking",
        examples=["abc12345"]
    )

    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Ordered field errors for validation failures"
    )


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse = Field(
        ...,
        description="Error information"
    )


def _example(code: str, message: str, details: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    error = {
        "code": code,
        "message": message,
        "timestamp": "2024-01-01T00:00:00Z",
        "request_id": "abc12345",
    }
    if details:
        error["details"] = details
    return {"application/json": {"example": {"error": error}}}


# Common error response examples for documentation
COMMON_ERROR_RESPONSES = {
    400: {
        "description": "Bad Request - Validation failure or duplicate resource",
        "model": APIErrorResponse,
        "content": _example(
            "VALIDATION_ERROR",
            "Request validation failed",
            [{"field": "price", "message": "Price must be greater than 0"}]
        ),
    },
    401: {
        "description": "Unauthorized - Missing, invalid or expired token",
        "model": APIErrorResponse,
        "content": _example("UNAUTHORIZED", "Authentication required"),
    },
    403: {
        "description": "Forbidden - Wrong role or not the owner",
        "model": APIErrorResponse,
        "content": _example("FORBIDDEN", "You don't own this property"),
    },
    404: {
        "description": "Not Found - Resource not found",
        "model": APIErrorResponse,
        "content": _example("NOT_FOUND", "Property not found with ID: 123e4567-e89b-12d3-a456-426614174000"),
    },
    500: {
        "description": "Internal Server Error - Unexpected error",
        "model": APIErrorResponse,
        "content": _example("INTERNAL_SERVER_ERROR", "An unexpected error occurred. Please try again later."),
    },
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }
