"""
Property service for managing property listings with business logic validation.
Handles CRUD operations, ownership validation, search and pagination.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from house_broker.repositories.property import PropertyRepository, PropertySearchFilters
from house_broker.models.property import Property, PropertyType
from house_broker.schemas.property import PropertyCreate, PropertyUpdate, PropertySearchRequest
from house_broker.utils.exceptions import PropertyNotFoundError, PropertyOwnershipError
import math
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyPage:
    """A page of properties plus the totals needed to render pagination."""

    def __init__(self, items: List[Property], total_count: int, page_number: int, page_size: int):
        self.items = items
        self.total_count = total_count
        self.page_number = page_number
        self.page_size = page_size
        self.total_pages = math.ceil(total_count / page_size) if page_size > 0 else 0

    def __repr__(self) -> str:
        return (
            f"<PropertyPage(page={self.page_number}/{self.total_pages}, "
            f"items={len(self.items)}, total={self.total_count})>"
        )


def _offset(page_number: int, page_size: int) -> int:
    return max(page_number - 1, 0) * max(page_size, 0)


class PropertyService:
    """
    Property service for managing property listings.
    Mutations check existence first and ownership second.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)

    async def get_property(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get property by ID with broker, images and features.

        Args:
            property_id: UUID of the property

        Returns:
            Property instance with details, or None if it does not exist
        """
        property_obj = await self.property_repo.get_property_with_details(property_id)
        if property_obj is None:
            logger.debug(f"Property {property_id} not found")
        return property_obj

    async def get_all(self, page_number: int, page_size: int) -> PropertyPage:
        """
        Available properties, newest first.

        Args:
            page_number: 1-based page number
            page_size: Maximum items on the page

        Returns:
            PropertyPage with the slice and totals
        """
        properties, total_count = await self.property_repo.get_available_properties(
            skip=_offset(page_number, page_size),
            limit=max(page_size, 0)
        )
        return PropertyPage(properties, total_count, page_number, page_size)

    async def get_by_broker(self, broker_id: uuid.UUID, page_number: int, page_size: int) -> PropertyPage:
        """
        All of a broker's properties, available or not, newest first.

        Args:
            broker_id: UUID of the broker
            page_number: 1-based page number
            page_size: Maximum items on the page

        Returns:
            PropertyPage with the slice and totals
        """
        properties, total_count = await self.property_repo.get_properties_by_broker(
            broker_id,
            skip=_offset(page_number, page_size),
            limit=max(page_size, 0)
        )
        return PropertyPage(properties, total_count, page_number, page_size)

    async def search(self, criteria: PropertySearchRequest) -> PropertyPage:
        """
        Search properties, paginated by the criteria's own page settings.

        An unrecognised property type name applies no type filter.

        Args:
            criteria: Search criteria; unset fields impose no constraint

        Returns:
            PropertyPage with matching properties, newest first
        """
        property_type: Optional[PropertyType] = None
        if criteria.property_type:
            property_type = PropertyType.parse(criteria.property_type)
            if property_type is None:
                logger.debug(f"Ignoring unknown property type filter: {criteria.property_type}")

        filters = PropertySearchFilters(
            city=criteria.city,
            state=criteria.state,
            min_price=criteria.min_price,
            max_price=criteria.max_price,
            property_type=property_type,
            min_bedrooms=criteria.min_bedrooms,
            max_bedrooms=criteria.max_bedrooms,
            min_bathrooms=criteria.min_bathrooms,
            max_bathrooms=criteria.max_bathrooms,
            min_square_feet=criteria.min_square_feet,
            max_square_feet=criteria.max_square_feet,
            is_available=criteria.is_available
        )

        properties, total_count = await self.property_repo.search_properties(
            filters,
            skip=_offset(criteria.page_number, criteria.page_size),
            limit=max(criteria.page_size, 0)
        )
        return PropertyPage(properties, total_count, criteria.page_number, criteria.page_size)

    async def create_property(self, property_data: PropertyCreate, broker_id: uuid.UUID) -> Property:
        """
        Create a new listing owned by the given broker.

        The first image URL becomes the primary image; display orders run 1..N.

        Args:
            property_data: Property creation data
            broker_id: UUID of the broker creating the listing

        Returns:
            Created property instance with details
        """
        create_data = property_data.model_dump(exclude={"image_urls", "features"})
        create_data["broker_id"] = broker_id
        create_data["is_available"] = True

        images = [
            {"image_url": url, "is_primary": index == 0, "display_order": index + 1}
            for index, url in enumerate(property_data.image_urls)
        ]
        features = [feature.model_dump() for feature in property_data.features]

        property_obj = await self.property_repo.create_with_children(create_data, images, features)

        logger.info(f"Property created by broker {broker_id}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def update_property(self, property_data: PropertyUpdate, broker_id: uuid.UUID) -> Property:
        """
        Replace the descriptive fields of a listing the broker owns.

        Args:
            property_data: Property update data, carrying the target id
            broker_id: UUID of the broker making the change

        Returns:
            Updated property instance

        Raises:
            PropertyNotFoundError: If property doesn't exist
            PropertyOwnershipError: If the broker doesn't own the property
        """
        property_obj = await self._get_owned_property(property_data.id, broker_id)

        update_data = property_data.model_dump(exclude={"id"})
        updated_property = await self.property_repo.update_property(property_obj, update_data)

        logger.info(f"Property updated by broker {broker_id}: {updated_property.id}")
        return updated_property

    async def delete_property(self, property_id: uuid.UUID, broker_id: uuid.UUID) -> None:
        """
        Delete a listing the broker owns, along with its images and features.

        Args:
            property_id: UUID of the property to delete
            broker_id: UUID of the broker making the change

        Raises:
            PropertyNotFoundError: If property doesn't exist
            PropertyOwnershipError: If the broker doesn't own the property
        """
        await self._get_owned_property(property_id, broker_id)
        await self.property_repo.delete_property_with_children(property_id)
        logger.info(f"Property deleted by broker {broker_id}: {property_id}")

    async def _get_owned_property(self, property_id: uuid.UUID, broker_id: uuid.UUID) -> Property:
        property_obj = await self.property_repo.get_property_with_details(property_id)

        if not property_obj:
            raise PropertyNotFoundError(str(property_id))

        if property_obj.broker_id != broker_id:
            logger.warning(f"Broker {broker_id} attempted to modify property {property_id} owned by {property_obj.broker_id}")
            raise PropertyOwnershipError()

        return property_obj
