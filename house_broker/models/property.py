"""
Property model for broker listings.
Handles property data with location, pricing, and ownership of images and features.
"""

from sqlalchemy import String, Integer, Numeric, Float, Boolean, DateTime, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from house_broker.database import Base
from datetime import datetime
from decimal import Decimal
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from house_broker.models.user import User
    from house_broker.models.image import PropertyImage
    from house_broker.models.feature import PropertyFeature


class PropertyType(str, enum.Enum):
    """Kinds of property a broker can list."""
    HOUSE = "House"
    APARTMENT = "Apartment"
    CONDO = "Condo"
    TOWNHOUSE = "Townhouse"
    VILLA = "Villa"
    STUDIO = "Studio"
    DUPLEX = "Duplex"
    COMMERCIAL = "Commercial"
    LAND = "Land"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PropertyType"]:
        """
        Resolve a property type name case-insensitively.

        Args:
            value: Type name such as "apartment"

        Returns:
            Matching PropertyType, or None when the name is unknown
        """
        if not value:
            return None
        candidate = value.strip().lower()
        for property_type in cls:
            if candidate == property_type.value.lower():
                return property_type
        return None


class Property(Base):
    """
    Property model for managing broker listings.
    Owns its images and features; references its broker without owning it.
    """

    __tablename__ = "properties"

    # Basic property information
    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        String(2000),
        nullable=False,
        comment="Detailed property description"
    )

    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, name="property_type"),
        nullable=False,
        index=True,
        comment="Kind of property"
    )

    # Pricing information
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=2),
        nullable=False,
        index=True,
        comment="Property price in local currency"
    )

    # Location information
    address: Mapped[str] = mapped_column(String(300), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    latitude: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        comment="Property latitude coordinate"
    )

    longitude: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        comment="Property longitude coordinate"
    )

    # Property specifications
    bedrooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Number of bedrooms"
    )

    bathrooms: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Number of bathrooms"
    )

    square_feet: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Property area in square feet"
    )

    year_built: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Year of construction"
    )

    # Status and ownership
    is_available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the property is still on the market"
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Set on every update, null until the first one"
    )

    broker_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        comment="ID of the broker who listed this property"
    )

    # Relationships
    broker: Mapped["User"] = relationship(
        "User",
        lazy="selectin",
        viewonly=True
    )

    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.display_order.asc()"
    )

    features: Mapped[List["PropertyFeature"]] = relationship(
        "PropertyFeature",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyFeature.created_at.asc()"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}..., price={self.price})>"

    @property
    def primary_image(self) -> Optional["PropertyImage"]:
        """Get the primary image for this property."""
        for image in self.images:
            if image.is_primary:
                return image
        # Return first image if no primary is set
        return self.images[0] if self.images else None

    @property
    def primary_image_url(self) -> str:
        image = self.primary_image
        return image.image_url if image else ""

    def _broker_dict(self) -> Optional[dict]:
        return self.broker.to_dict() if self.broker else None

    def to_dict(self) -> dict:
        """
        Convert property to its full view, including broker, images and features.

        Returns:
            Dictionary representation of property
        """
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "property_type": self.property_type.value,
            "price": float(self.price),
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "square_feet": self.square_feet,
            "year_built": self.year_built,
            "is_available": self.is_available,
            "broker_id": str(self.broker_id),
            "broker": self._broker_dict(),
            "images": [image.to_dict() for image in self.images],
            "features": [feature.to_dict() for feature in self.features],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_summary_dict(self) -> dict:
        """
        Convert property to the condensed view used in paged listings.

        Returns:
            Dictionary with the primary image URL in place of the gallery
        """
        return {
            "id": str(self.id),
            "title": self.title,
            "property_type": self.property_type.value,
            "price": float(self.price),
            "city": self.city,
            "state": self.state,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "square_feet": self.square_feet,
            "is_available": self.is_available,
            "primary_image_url": self.primary_image_url,
            "broker": self._broker_dict(),
            "created_at": self.created_at.isoformat(),
        }


# Database indexes for search optimization

# Default listing: available properties, newest first
available_created_index = Index(
    'idx_properties_available_created',
    Property.is_available,
    Property.created_at.desc()
)

# Broker's own listings, newest first
broker_created_index = Index(
    'idx_properties_broker_created',
    Property.broker_id,
    Property.created_at.desc()
)

# Common search combination
search_optimization_index = Index(
    'idx_properties_search_optimization',
    Property.city,
    Property.property_type,
    Property.price,
    Property.bedrooms
)
