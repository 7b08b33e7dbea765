"""
Database models for the HouseBroker API.
Includes User, Property, PropertyImage and PropertyFeature models.
"""

from house_broker.models.user import User, UserRole
from house_broker.models.property import Property, PropertyType
from house_broker.models.image import PropertyImage
from house_broker.models.feature import PropertyFeature

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyType",
    "PropertyImage",
    "PropertyFeature",
]
