"""
Repository layer for data access operations.
Provides database operations with proper error handling and logging.
"""

from house_broker.repositories.base import BaseRepository
from house_broker.repositories.property import PropertyRepository, PropertySearchFilters
from house_broker.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "UserRepository"
]
