"""
Error handling service for consistent error response formatting and logging.
Every error leaving the API is rendered here as {"error": {...}}.
"""

from typing import Dict, Any, Optional, List, Sequence
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from house_broker.utils.exceptions import APIException, ValidationError
from datetime import datetime, timezone
import logging
import uuid

logger = logging.getLogger(__name__)

# Location prefixes FastAPI adds in front of the offending field name
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}

# Substrings of driver messages mapped to safe constraint descriptions
_CONSTRAINT_MESSAGES = (
    ("unique", "Duplicate value for unique field"),
    ("foreign key", "Referenced record does not exist"),
    ("not null", "Required field cannot be empty"),
    ("check constraint", "Value does not meet validation requirements"),
)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class ErrorHandlerService:
    """
    Turns exceptions into structured JSON error responses.

    Client errors are logged at warning level, server errors at error level
    with the traceback. Internal details never reach the response body.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Format error response in a consistent structure.

        Args:
            error_code: Error code identifier
            message: Human-readable error message
            details: Optional ordered field errors
            request_id: Optional request identifier for tracking

        Returns:
            Formatted error response dictionary
        """
        error: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": ErrorHandlerService._get_current_timestamp(),
        }
        if details:
            error["details"] = details
        if request_id:
            error["request_id"] = request_id
        return {"error": error}

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Render one of our own typed exceptions with its status and code."""
        details = exception.field_errors if isinstance(exception, ValidationError) else None
        return ErrorHandlerService._respond(
            request,
            status_code=exception.status_code,
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            details=details,
            headers=exception.headers
        )

    @staticmethod
    def handle_validation_error(
        errors: Sequence[Dict[str, Any]],
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle request validation errors with ordered field information.

        Args:
            errors: Error dictionaries as produced by ``exc.errors()``
            request: Optional FastAPI request object

        Returns:
            400 JSON response listing every failed field
        """
        details = [
            {
                "field": ErrorHandlerService._field_path(error.get("loc", ())),
                "message": ErrorHandlerService._clean_message(error.get("msg", "Invalid value")),
            }
            for error in errors
        ]
        return ErrorHandlerService._respond(
            request,
            status_code=400,
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details=details
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle database errors without exposing driver messages.

        Integrity violations are the client's fault and reported as duplicates;
        everything else is a server error.

        Args:
            exception: SQLAlchemy error
            request: Optional FastAPI request object

        Returns:
            400 or 500 JSON response
        """
        if isinstance(exception, IntegrityError):
            constraint_info = ErrorHandlerService._extract_constraint_info(exception)
            message = f"Constraint violation: {constraint_info}" if constraint_info else "Data integrity constraint violation"
            return ErrorHandlerService._respond(
                request,
                status_code=400,
                error_code="DUPLICATE_RESOURCE",
                message=message,
                exception=exception
            )

        return ErrorHandlerService._respond(
            request,
            status_code=500,
            error_code="DATABASE_ERROR",
            message="Database operation failed",
            exception=exception
        )

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Framework HTTP errors such as unknown routes or disallowed methods."""
        return ErrorHandlerService._respond(
            request,
            status_code=exception.status_code,
            error_code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Anything unanticipated becomes a 500 with a generic message."""
        return ErrorHandlerService._respond(
            request,
            status_code=500,
            error_code="INTERNAL_SERVER_ERROR",
            message=GENERIC_ERROR_MESSAGE,
            exception=exception
        )

    @staticmethod
    def _respond(
        request: Optional[Request],
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        exception: Optional[Exception] = None
    ) -> JSONResponse:
        request_id = ErrorHandlerService._get_request_id(request)
        extra = {
            "error_code": error_code,
            "status_code": status_code,
            "request_id": request_id,
            "path": request.url.path if request else None,
        }

        if status_code >= 500:
            logger.error(
                f"Server Error [{request_id}]: {error_code} - {type(exception).__name__}: {exception}",
                extra=extra,
                exc_info=exception
            )
        else:
            summary = f"{len(details)} field errors" if details else message
            logger.warning(f"Client Error [{request_id}]: {error_code} - {summary}", extra=extra)

        return JSONResponse(
            status_code=status_code,
            content=ErrorHandlerService.format_error_response(error_code, message, details, request_id),
            headers=headers
        )

    @staticmethod
    def _get_request_id(request: Optional[Request]) -> str:
        """Reuse the id assigned by the middleware, or make a new one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")

    @staticmethod
    def _field_path(loc: Sequence[Any]) -> Optional[str]:
        parts = [str(part) for part in loc]
        if parts and parts[0] in _LOCATION_PREFIXES:
            parts = parts[1:]
        return ".".join(parts) or None

    @staticmethod
    def _clean_message(message: str) -> str:
        # pydantic prefixes messages raised from field validators
        return message.removeprefix("Value error, ")

    @staticmethod
    def _extract_constraint_info(exception: IntegrityError) -> Optional[str]:
        error_msg = str(exception.orig).lower()
        for marker, description in _CONSTRAINT_MESSAGES:
            if marker in error_msg:
                return description
        return None
