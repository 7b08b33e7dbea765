"""
Tests for database models.
Tests enum parsing, password handling, and the dictionary views used by the API.
"""

import pytest
import uuid
from decimal import Decimal

from house_broker.models.user import User, UserRole
from house_broker.models.property import Property, PropertyType
from house_broker.models.image import PropertyImage
from house_broker.repositories.property import PropertyRepository
from tests.conftest import PropertyFactory, TEST_PASSWORD


class TestUserRole:
    """Test role name parsing."""

    @pytest.mark.parametrize("name", ["Broker", "broker", "BROKER", "  broker  "])
    def test_parse_broker_any_case(self, name):
        assert UserRole.parse(name) is UserRole.BROKER

    def test_parse_house_seeker(self):
        assert UserRole.parse("houseseeker") is UserRole.HOUSE_SEEKER

    @pytest.mark.parametrize("name", ["Admin", "", None, "House Seeker"])
    def test_parse_unknown_returns_none(self, name):
        assert UserRole.parse(name) is None


class TestPropertyType:
    """Test property type name parsing."""

    def test_parse_case_insensitive(self):
        assert PropertyType.parse("apartment") is PropertyType.APARTMENT
        assert PropertyType.parse("TownHouse") is PropertyType.TOWNHOUSE

    def test_parse_unknown_returns_none(self):
        assert PropertyType.parse("Castle") is None
        assert PropertyType.parse(None) is None


class TestUserModel:
    """Test User model validation and methods."""

    def test_full_name(self):
        user = User(first_name="Jane", last_name="Doe")
        assert user.full_name == "Jane Doe"

    def test_normalize_email_lowercases(self):
        assert User.normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"

    def test_normalize_email_rejects_garbage(self):
        with pytest.raises(ValueError, match="Invalid email format"):
            User.normalize_email("not-an-email")

    def test_hash_and_verify_password(self):
        user = User(hashed_password=User.hash_password(TEST_PASSWORD))

        assert user.hashed_password != TEST_PASSWORD
        assert user.verify_password(TEST_PASSWORD) is True
        assert user.verify_password("Wrong1!") is False

    def test_hash_password_requires_value(self):
        with pytest.raises(ValueError, match="Password is required"):
            User.hash_password("")

    def test_is_broker(self):
        assert User(role=UserRole.BROKER).is_broker is True
        assert User(role=UserRole.HOUSE_SEEKER).is_broker is False

    @pytest.mark.asyncio
    async def test_to_dict_hides_password(self, test_broker: User):
        data = test_broker.to_dict()

        assert "hashed_password" not in data
        assert "password" not in data
        assert data["role"] == "Broker"
        assert data["full_name"] == "Bella Broker"
        assert data["id"] == str(test_broker.id)


class TestPropertyModel:
    """Test Property helpers and views."""

    def test_primary_image_prefers_flagged_image(self):
        property_obj = Property(title="T")
        property_obj.images = [
            PropertyImage(image_url="http://i/1.png", is_primary=False, display_order=1),
            PropertyImage(image_url="http://i/2.png", is_primary=True, display_order=2),
        ]

        assert property_obj.primary_image_url == "http://i/2.png"

    def test_primary_image_falls_back_to_first(self):
        property_obj = Property(title="T")
        property_obj.images = [
            PropertyImage(image_url="http://i/1.png", is_primary=False, display_order=1),
            PropertyImage(image_url="http://i/2.png", is_primary=False, display_order=2),
        ]

        assert property_obj.primary_image_url == "http://i/1.png"

    def test_primary_image_url_empty_without_images(self):
        property_obj = Property(title="T")
        property_obj.images = []

        assert property_obj.primary_image is None
        assert property_obj.primary_image_url == ""

    @pytest.mark.asyncio
    async def test_to_dict_includes_children(self, test_property: Property, test_broker):
        data = test_property.to_dict()

        assert data["property_type"] == "House"
        assert data["price"] == 250000.0
        assert data["broker_id"] == str(test_broker.id)
        assert data["broker"]["email"] == test_broker.email
        assert [image["display_order"] for image in data["images"]] == [1, 2]
        assert data["features"][0]["name"] == "Pool"
        assert data["updated_at"] is None

    @pytest.mark.asyncio
    async def test_to_summary_dict(self, test_property: Property):
        data = test_property.to_summary_dict()

        assert data["primary_image_url"] == "http://img.example.com/a.png"
        assert "images" not in data
        assert "description" not in data

    @pytest.mark.asyncio
    async def test_created_property_gets_id_and_timestamp(
        self,
        property_repository: PropertyRepository,
        test_broker
    ):
        property_obj = await PropertyFactory.create_property(
            property_repository,
            broker_id=test_broker.id,
            price=Decimal("99.99")
        )

        assert isinstance(property_obj.id, uuid.UUID)
        assert property_obj.created_at is not None
        assert property_obj.is_available is True
        assert property_obj.images == []
