"""
PropertyFeature model for named amenities such as "Pool" or "Garage".
"""

from sqlalchemy import String, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from house_broker.database import Base
import uuid


class PropertyFeature(Base):
    """A name/description pair owned by a single property."""

    __tablename__ = "property_features"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this feature belongs to"
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Feature name"
    )

    description: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="",
        comment="Optional feature details"
    )

    def __repr__(self) -> str:
        return f"<PropertyFeature(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }
