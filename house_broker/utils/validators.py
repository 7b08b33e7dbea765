"""
Validation helpers shared by the route handlers.
"""

from typing import Optional, Tuple

from house_broker.config import settings


class ValidationUtils:
    """
    Utility class for request parameter normalisation.
    """

    @staticmethod
    def normalize_pagination(
        page_number: Optional[int],
        page_size: Optional[int],
        default_page_size: Optional[int] = None,
        max_page_size: Optional[int] = None
    ) -> Tuple[int, int]:
        """
        Clamp pagination parameters instead of rejecting them.

        A page number below 1 becomes 1. A page size below 1 or above the
        maximum falls back to the default size.

        Args:
            page_number: Requested 1-based page number
            page_size: Requested page size
            default_page_size: Size used when the request is out of range
            max_page_size: Largest size honoured as-is

        Returns:
            Tuple of (page_number, page_size)
        """
        default_page_size = default_page_size or settings.default_page_size
        max_page_size = max_page_size or settings.max_page_size

        if page_number is None or page_number < 1:
            page_number = 1

        if page_size is None or page_size < 1 or page_size > max_page_size:
            page_size = default_page_size

        return page_number, page_size
