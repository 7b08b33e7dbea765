"""
Property repository for managing property listings with search and filtering.
Provides database operations for listings and the images and features they own.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func, desc, delete
from sqlalchemy.orm import selectinload
from house_broker.database import utc_now
from house_broker.repositories.base import BaseRepository
from house_broker.models.property import Property, PropertyType
from house_broker.models.image import PropertyImage
from house_broker.models.feature import PropertyFeature
from typing import Optional, List, Dict, Any, Tuple
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertySearchFilters:
    """Data class for property search filters. ``None`` means no constraint."""

    def __init__(
        self,
        city: Optional[str] = None,
        state: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        property_type: Optional[PropertyType] = None,
        min_bedrooms: Optional[int] = None,
        max_bedrooms: Optional[int] = None,
        min_bathrooms: Optional[int] = None,
        max_bathrooms: Optional[int] = None,
        min_square_feet: Optional[int] = None,
        max_square_feet: Optional[int] = None,
        is_available: Optional[bool] = None,
        broker_id: Optional[uuid.UUID] = None
    ):
        self.city = city
        self.state = state
        self.min_price = min_price
        self.max_price = max_price
        self.property_type = property_type
        self.min_bedrooms = min_bedrooms
        self.max_bedrooms = max_bedrooms
        self.min_bathrooms = min_bathrooms
        self.max_bathrooms = max_bathrooms
        self.min_square_feet = min_square_feet
        self.max_square_feet = max_square_feet
        self.is_available = is_available
        self.broker_id = broker_id


# Descriptive columns a broker may overwrite on update
UPDATABLE_FIELDS = (
    "title",
    "description",
    "property_type",
    "price",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
    "latitude",
    "longitude",
    "bedrooms",
    "bathrooms",
    "square_feet",
    "year_built",
    "is_available",
)


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property management with search and filtering capabilities.
    Every read returns properties newest first with broker, images and features loaded.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    def _details_query(self):
        return select(Property).options(
            selectinload(Property.broker),
            selectinload(Property.images),
            selectinload(Property.features)
        )

    async def create_with_children(
        self,
        property_data: Dict[str, Any],
        images: List[Dict[str, Any]],
        features: List[Dict[str, Any]]
    ) -> Property:
        """
        Create a property together with its images and features in one commit.

        Args:
            property_data: Column values for the property
            images: Column values for each image, in gallery order
            features: Column values for each feature

        Returns:
            Created property with relationships loaded

        Raises:
            Exception: If database operation fails; nothing is persisted
        """
        try:
            property_obj = Property(**property_data)
            property_obj.images = [PropertyImage(**image) for image in images]
            property_obj.features = [PropertyFeature(**feature) for feature in features]

            self.db.add(property_obj)
            await self.db.commit()
            logger.info(f"Created property: {property_obj.title} (ID: {property_obj.id})")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property: {e}")
            raise

        return await self.get_property_with_details(property_obj.id)

    async def get_property_with_details(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get property with all related data (broker, images and features).

        Args:
            property_id: UUID of the property

        Returns:
            Property with loaded relationships or None if not found
        """
        try:
            query = (
                self._details_query()
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )

            result = await self.db.execute(query)
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with details: {property_id}")

            return property_obj
        except Exception as e:
            logger.error(f"Failed to get property with details {property_id}: {e}")
            raise

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination.

        Args:
            filters: PropertySearchFilters instance with search criteria
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            query = self._details_query()
            count_query = select(func.count(Property.id))

            # Apply filters to both queries
            conditions = self._build_filter_conditions(filters)
            if conditions:
                query = query.where(and_(*conditions))
                count_query = count_query.where(and_(*conditions))

            count_result = await self.db.execute(count_query)
            total_count = count_result.scalar() or 0

            query = query.order_by(desc(Property.created_at), desc(Property.id)).offset(skip).limit(limit)

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
            return list(properties), total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.

        Args:
            filters: PropertySearchFilters instance

        Returns:
            List of SQLAlchemy conditions, to be combined with AND
        """
        conditions = []

        # Location filters (case-insensitive literal substring)
        if filters.city:
            conditions.append(Property.city.icontains(filters.city, autoescape=True))
        if filters.state:
            conditions.append(Property.state.icontains(filters.state, autoescape=True))

        # Price range filters
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        if filters.property_type is not None:
            conditions.append(Property.property_type == filters.property_type)

        # Bedroom filters
        if filters.min_bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.min_bedrooms)
        if filters.max_bedrooms is not None:
            conditions.append(Property.bedrooms <= filters.max_bedrooms)

        # Bathroom filters
        if filters.min_bathrooms is not None:
            conditions.append(Property.bathrooms >= filters.min_bathrooms)
        if filters.max_bathrooms is not None:
            conditions.append(Property.bathrooms <= filters.max_bathrooms)

        # Area filters
        if filters.min_square_feet is not None:
            conditions.append(Property.square_feet >= filters.min_square_feet)
        if filters.max_square_feet is not None:
            conditions.append(Property.square_feet <= filters.max_square_feet)

        if filters.is_available is not None:
            conditions.append(Property.is_available == filters.is_available)

        if filters.broker_id is not None:
            conditions.append(Property.broker_id == filters.broker_id)

        return conditions

    async def get_available_properties(self, skip: int = 0, limit: int = 10) -> Tuple[List[Property], int]:
        """Available properties only, newest first."""
        return await self.search_properties(PropertySearchFilters(is_available=True), skip, limit)

    async def get_properties_by_broker(
        self,
        broker_id: uuid.UUID,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Property], int]:
        """
        Get properties listed by a specific broker, available or not.

        Args:
            broker_id: UUID of the broker
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (properties list, total count)
        """
        properties, total_count = await self.search_properties(
            PropertySearchFilters(broker_id=broker_id), skip, limit
        )
        logger.debug(f"Retrieved {len(properties)} properties for broker {broker_id}")
        return properties, total_count

    async def update_property(self, property_obj: Property, update_data: Dict[str, Any]) -> Property:
        """
        Overwrite the descriptive fields of a property.

        Ownership, creation time, images and features are never touched here.

        Args:
            property_obj: Loaded property to modify
            update_data: New values keyed by column name

        Returns:
            Updated property with relationships reloaded
        """
        try:
            for field in UPDATABLE_FIELDS:
                if field in update_data:
                    setattr(property_obj, field, update_data[field])
            property_obj.updated_at = utc_now()

            await self.db.commit()
            logger.info(f"Updated property {property_obj.id}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_obj.id}: {e}")
            raise

        return await self.get_property_with_details(property_obj.id)

    async def delete_property_with_children(self, property_id: uuid.UUID) -> None:
        """
        Delete a property and everything it owns in one transaction.

        Children are removed explicitly so the result does not depend on the
        database enforcing ON DELETE CASCADE.

        Args:
            property_id: UUID of the property to delete
        """
        try:
            await self.db.execute(delete(PropertyImage).where(PropertyImage.property_id == property_id))
            await self.db.execute(delete(PropertyFeature).where(PropertyFeature.property_id == property_id))
            await self.db.execute(delete(Property).where(Property.id == property_id))
            await self.db.commit()
            logger.info(f"Deleted property {property_id} with all associated images and features")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise
