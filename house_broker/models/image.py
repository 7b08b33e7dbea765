"""
PropertyImage model for the photos attached to a listing.
Images are referenced by URL; the listing owns them and they die with it.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from house_broker.database import Base
import uuid


class PropertyImage(Base):
    """
    PropertyImage model for the ordered gallery of a property.
    Exactly one image per property is marked primary.
    """

    __tablename__ = "property_images"

    # Property relationship
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    image_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Absolute URL of the image"
    )

    description: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default="",
        comment="Optional caption"
    )

    # Image status and ordering
    is_primary: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether this is the primary image for the property"
    )

    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        comment="1-based display order for the image gallery"
    )

    def __repr__(self) -> str:
        """String representation of the property image."""
        return f"<PropertyImage(id={self.id}, property_id={self.property_id}, order={self.display_order})>"

    def to_dict(self) -> dict:
        """
        Convert property image to dictionary.

        Returns:
            Dictionary representation of property image
        """
        return {
            "id": str(self.id),
            "image_url": self.image_url,
            "description": self.description,
            "is_primary": self.is_primary,
            "display_order": self.display_order,
            "created_at": self.created_at.isoformat(),
        }


# Gallery lookups read a property's images in display order
property_images_order_index = Index(
    'idx_property_images_property_order',
    PropertyImage.property_id,
    PropertyImage.display_order.asc()
)
