"""
Middleware package for the HouseBroker API.
Provides request validation and request tracking.
"""

from .validation import ValidationMiddleware

__all__ = [
    "ValidationMiddleware",
]
