"""
Tests for repository classes.
Tests CRUD operations, search filters, ordering, and pagination against SQLite.
"""

import pytest
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy import select, func

from house_broker.models.user import User, UserRole
from house_broker.models.property import PropertyType
from house_broker.models.image import PropertyImage
from house_broker.models.feature import PropertyFeature
from house_broker.repositories.user import UserRepository
from house_broker.repositories.property import PropertyRepository, PropertySearchFilters
from house_broker.utils.exceptions import DuplicateResourceError
from tests.conftest import UserFactory, PropertyFactory, TEST_PASSWORD


class TestUserRepository:
    """Test UserRepository functionality."""

    @pytest.mark.asyncio
    async def test_create_user_hashes_password(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="new@example.com")

        assert user.id is not None
        assert user.hashed_password != TEST_PASSWORD
        assert user.verify_password(TEST_PASSWORD)
        assert user.role == UserRole.HOUSE_SEEKER

    @pytest.mark.asyncio
    async def test_create_user_normalizes_email(self, user_repository: UserRepository):
        user = await UserFactory.create_user(user_repository, email="Mixed.Case@Example.com")
        assert user.email == "mixed.case@example.com"

    @pytest.mark.asyncio
    async def test_create_user_duplicate_email(self, user_repository: UserRepository, db_session):
        await UserFactory.create_user(user_repository, email="dup@example.com")

        with pytest.raises(DuplicateResourceError):
            await UserFactory.create_user(user_repository, email="DUP@example.com")

        count = await db_session.scalar(select(func.count(User.id)))
        assert count == 1

    @pytest.mark.asyncio
    async def test_get_by_email_case_insensitive(self, user_repository: UserRepository, test_broker: User):
        user = await user_repository.get_by_email("BROKER@Test.com")
        assert user is not None
        assert user.id == test_broker.id

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, user_repository: UserRepository):
        assert await user_repository.get_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_authenticate_user(self, user_repository: UserRepository, test_broker: User):
        user = await user_repository.authenticate_user("broker@test.com", TEST_PASSWORD)
        assert user is not None
        assert user.id == test_broker.id

    @pytest.mark.asyncio
    async def test_authenticate_user_wrong_password(self, user_repository: UserRepository, test_broker: User):
        assert await user_repository.authenticate_user("broker@test.com", "Wrong1!") is None

    @pytest.mark.asyncio
    async def test_authenticate_inactive_user(self, user_repository: UserRepository, test_inactive_user: User):
        assert await user_repository.authenticate_user(test_inactive_user.email, TEST_PASSWORD) is None


class TestPropertyRepository:
    """Test PropertyRepository functionality."""

    @pytest.mark.asyncio
    async def test_create_with_children(self, property_repository: PropertyRepository, test_broker: User):
        property_obj = await PropertyFactory.create_property(
            property_repository,
            broker_id=test_broker.id,
            image_urls=["http://i/1.png", "http://i/2.png", "http://i/3.png"],
            features=[{"name": "Pool", "description": ""}, {"name": "Garage", "description": "Double"}]
        )

        assert [image.display_order for image in property_obj.images] == [1, 2, 3]
        assert [image.is_primary for image in property_obj.images] == [True, False, False]
        assert {feature.name for feature in property_obj.features} == {"Pool", "Garage"}
        assert property_obj.broker.id == test_broker.id

    @pytest.mark.asyncio
    async def test_get_property_with_details_missing(self, property_repository: PropertyRepository):
        assert await property_repository.get_property_with_details(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_search_newest_first(self, property_repository: PropertyRepository, test_broker: User):
        first = await PropertyFactory.create_property(property_repository, test_broker.id, title="First")
        second = await PropertyFactory.create_property(property_repository, test_broker.id, title="Second")
        third = await PropertyFactory.create_property(property_repository, test_broker.id, title="Third")

        properties, total = await property_repository.search_properties(PropertySearchFilters())

        assert total == 3
        assert [p.id for p in properties] == [third.id, second.id, first.id]

    @pytest.mark.asyncio
    async def test_search_pagination(self, property_repository: PropertyRepository, test_broker: User):
        for index in range(5):
            await PropertyFactory.create_property(property_repository, test_broker.id, title=f"P{index}")

        page, total = await property_repository.search_properties(PropertySearchFilters(), skip=4, limit=2)

        assert total == 5
        assert [p.title for p in page] == ["P0"]

    @pytest.mark.asyncio
    async def test_city_filter_is_case_insensitive_substring(
        self,
        property_repository: PropertyRepository,
        test_broker: User
    ):
        await PropertyFactory.create_property(property_repository, test_broker.id, city="Springfield")
        await PropertyFactory.create_property(property_repository, test_broker.id, city="Shelbyville")

        properties, total = await property_repository.search_properties(PropertySearchFilters(city="SPRING"))

        assert total == 1
        assert properties[0].city == "Springfield"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("city, state", [("_", None), ("%", None), (None, "_"), (None, "%")])
    async def test_location_wildcards_match_literally(
        self,
        property_repository: PropertyRepository,
        test_broker: User,
        city,
        state
    ):
        await PropertyFactory.create_property(property_repository, test_broker.id, city="Springfield")
        await PropertyFactory.create_property(property_repository, test_broker.id, city="Shelbyville")

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(city=city, state=state)
        )

        assert total == 0
        assert properties == []

    @pytest.mark.asyncio
    async def test_city_filter_matches_literal_percent(
        self,
        property_repository: PropertyRepository,
        test_broker: User
    ):
        await PropertyFactory.create_property(property_repository, test_broker.id, city="100% Town")
        await PropertyFactory.create_property(property_repository, test_broker.id, city="1000 Towers")

        properties, total = await property_repository.search_properties(PropertySearchFilters(city="0% t"))

        assert total == 1
        assert properties[0].city == "100% Town"

    @pytest.mark.asyncio
    async def test_state_filter_is_case_insensitive_substring(
        self,
        property_repository: PropertyRepository,
        test_broker: User
    ):
        await PropertyFactory.create_property(property_repository, test_broker.id, title="il", state="Illinois")
        await PropertyFactory.create_property(property_repository, test_broker.id, title="oh", state="Ohio")

        properties, total = await property_repository.search_properties(PropertySearchFilters(state="LINO"))

        assert total == 1
        assert properties[0].title == "il"

    @pytest.mark.asyncio
    async def test_bathroom_bounds_are_inclusive(self, property_repository: PropertyRepository, test_broker: User):
        for bathrooms in (1, 2, 3, 4):
            await PropertyFactory.create_property(
                property_repository, test_broker.id, title=str(bathrooms), bathrooms=bathrooms
            )

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(min_bathrooms=2, max_bathrooms=3)
        )

        assert total == 2
        assert {p.title for p in properties} == {"2", "3"}

    @pytest.mark.asyncio
    async def test_max_bedrooms_is_inclusive(self, property_repository: PropertyRepository, test_broker: User):
        for bedrooms in (2, 3, 4):
            await PropertyFactory.create_property(
                property_repository, test_broker.id, title=str(bedrooms), bedrooms=bedrooms
            )

        properties, total = await property_repository.search_properties(PropertySearchFilters(max_bedrooms=3))

        assert total == 2
        assert {p.title for p in properties} == {"2", "3"}

    @pytest.mark.asyncio
    async def test_min_bedrooms_is_inclusive(self, property_repository: PropertyRepository, test_broker: User):
        for bedrooms in (2, 3, 4):
            await PropertyFactory.create_property(
                property_repository, test_broker.id, title=str(bedrooms), bedrooms=bedrooms
            )

        properties, total = await property_repository.search_properties(PropertySearchFilters(min_bedrooms=3))

        assert total == 2
        assert {p.title for p in properties} == {"3", "4"}

    @pytest.mark.asyncio
    async def test_square_feet_bounds_are_inclusive(
        self,
        property_repository: PropertyRepository,
        test_broker: User
    ):
        for square_feet in (800, 1200, 1600, 2000):
            await PropertyFactory.create_property(
                property_repository, test_broker.id, title=str(square_feet), square_feet=square_feet
            )

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(min_square_feet=1200, max_square_feet=1600)
        )

        assert total == 2
        assert {p.title for p in properties} == {"1200", "1600"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("is_available, expected", [(True, {"on market"}), (False, {"sold"})])
    async def test_availability_filter_matches_exactly(
        self,
        property_repository: PropertyRepository,
        test_broker: User,
        is_available,
        expected
    ):
        await PropertyFactory.create_property(property_repository, test_broker.id, title="on market")
        await PropertyFactory.create_property(
            property_repository, test_broker.id, title="sold", is_available=False
        )

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(is_available=is_available)
        )

        assert total == 1
        assert {p.title for p in properties} == expected

    @pytest.mark.asyncio
    async def test_equal_created_at_pages_are_stable(
        self,
        property_repository: PropertyRepository,
        test_broker: User
    ):
        listed_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        created = [
            await PropertyFactory.create_property(
                property_repository, test_broker.id, title=f"P{index}", created_at=listed_at
            )
            for index in range(5)
        ]

        seen = []
        for skip in (0, 2, 4):
            page, total = await property_repository.search_properties(PropertySearchFilters(), skip=skip, limit=2)
            assert total == 5
            seen.extend(p.id for p in page)

        assert seen == sorted((p.id for p in created), key=lambda value: value.hex, reverse=True)

    @pytest.mark.asyncio
    async def test_price_bounds_are_inclusive(self, property_repository: PropertyRepository, test_broker: User):
        for price in ("100000", "200000", "300000"):
            await PropertyFactory.create_property(
                property_repository, test_broker.id, title=price, price=Decimal(price)
            )

        properties, total = await property_repository.search_properties(
            PropertySearchFilters(min_price=Decimal("100000"), max_price=Decimal("200000"))
        )

        assert total == 2
        assert {p.title for p in properties} == {"100000", "200000"}

    @pytest.mark.asyncio
    async def test_filters_compose_with_and(self, property_repository: PropertyRepository, test_broker: User):
        await PropertyFactory.create_property(
            property_repository, test_broker.id, title="match",
            property_type=PropertyType.APARTMENT, bedrooms=2, square_feet=900
        )
        await PropertyFactory.create_property(
            property_repository, test_broker.id, title="wrong type",
            property_type=PropertyType.HOUSE, bedrooms=2, square_feet=900
        )
        await PropertyFactory.create_property(
            property_repository, test_broker.id, title="too big",
            property_type=PropertyType.APARTMENT, bedrooms=2, square_feet=3000
        )
        await PropertyFactory.create_property(
            property_repository, test_broker.id, title="too few rooms",
            property_type=PropertyType.APARTMENT, bedrooms=1, square_feet=900
        )

        filters = PropertySearchFilters(
            property_type=PropertyType.APARTMENT,
            min_bedrooms=2,
            max_square_feet=1000
        )
        properties, total = await property_repository.search_properties(filters)

        assert total == 1
        assert properties[0].title == "match"

    @pytest.mark.asyncio
    async def test_available_properties_excludes_unavailable(
        self,
        property_repository: PropertyRepository,
        test_broker: User
    ):
        await PropertyFactory.create_property(property_repository, test_broker.id, title="on market")
        await PropertyFactory.create_property(
            property_repository, test_broker.id, title="sold", is_available=False
        )

        properties, total = await property_repository.get_available_properties()

        assert total == 1
        assert properties[0].title == "on market"

    @pytest.mark.asyncio
    async def test_properties_by_broker(
        self,
        property_repository: PropertyRepository,
        test_broker: User,
        other_broker: User
    ):
        await PropertyFactory.create_property(property_repository, test_broker.id, title="mine")
        await PropertyFactory.create_property(
            property_repository, test_broker.id, title="mine sold", is_available=False
        )
        await PropertyFactory.create_property(property_repository, other_broker.id, title="theirs")

        properties, total = await property_repository.get_properties_by_broker(test_broker.id)

        assert total == 2
        assert {p.title for p in properties} == {"mine", "mine sold"}

    @pytest.mark.asyncio
    async def test_update_property_sets_updated_at(
        self,
        property_repository: PropertyRepository,
        test_property
    ):
        created_at = test_property.created_at
        broker_id = test_property.broker_id

        updated = await property_repository.update_property(
            test_property,
            {"title": "Renamed", "is_available": False, "broker_id": uuid.uuid4()}
        )

        assert updated.title == "Renamed"
        assert updated.is_available is False
        assert updated.updated_at is not None
        assert updated.created_at == created_at
        assert updated.broker_id == broker_id
        assert len(updated.images) == 2

    @pytest.mark.asyncio
    async def test_delete_removes_children(
        self,
        property_repository: PropertyRepository,
        test_property,
        db_session
    ):
        property_id = test_property.id

        await property_repository.delete_property_with_children(property_id)

        assert await property_repository.get_property_with_details(property_id) is None
        image_count = await db_session.scalar(
            select(func.count(PropertyImage.id)).where(PropertyImage.property_id == property_id)
        )
        feature_count = await db_session.scalar(
            select(func.count(PropertyFeature.id)).where(PropertyFeature.property_id == property_id)
        )
        assert image_count == 0
        assert feature_count == 0
