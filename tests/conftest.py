"""
Test configuration and fixtures for the HouseBroker API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Settings are read once at import time, so the environment must be set first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
import uuid
from typing import AsyncGenerator, Dict, List, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from house_broker.main import app
from house_broker.database import Base, get_db
from house_broker.models.user import User, UserRole
from house_broker.models.property import Property, PropertyType
from house_broker.repositories.user import UserRepository
from house_broker.repositories.property import PropertyRepository
from house_broker.services.auth import AuthService
from house_broker.services.property import PropertyService
from house_broker.utils.auth import create_access_token


TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "Secret1!"


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test, schema built from the ORM metadata."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session override."""
    def override_get_db():
        return db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    """Create a user repository instance."""
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    """Create a property repository instance."""
    return PropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    """Create an auth service instance."""
    return AuthService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession) -> PropertyService:
    """Create a property service instance."""
    return PropertyService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = "test@example.com",
        password: str = TEST_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
        role: UserRole = UserRole.HOUSE_SEEKER,
        is_active: bool = True
    ) -> dict:
        """Create user data dictionary."""
        return {
            "email": email,
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
            "is_active": is_active
        }

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: str = "test@example.com",
        password: str = TEST_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
        role: UserRole = UserRole.HOUSE_SEEKER,
        is_active: bool = True
    ) -> User:
        """Create a test user in the database."""
        user_data = UserFactory.create_user_data(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=is_active
        )
        return await user_repo.create_user(user_data)


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_payload(**overrides) -> dict:
        """JSON body accepted by the create endpoint and by PropertyCreate."""
        payload = {
            "title": "Sunny Family House",
            "description": "Three bedrooms close to the park.",
            "property_type": "House",
            "price": 250000,
            "address": "12 Elm Street",
            "city": "Springfield",
            "state": "Illinois",
            "zip_code": "62701",
            "country": "USA",
            "latitude": 39.78,
            "longitude": -89.65,
            "bedrooms": 3,
            "bathrooms": 2,
            "square_feet": 1800,
            "year_built": 1998,
            "image_urls": ["http://img.example.com/1.png", "http://img.example.com/2.png"],
            "features": [{"name": "Garage", "description": "Two cars"}],
        }
        payload.update(overrides)
        return payload

    @staticmethod
    def create_property_data(broker_id: uuid.UUID, **overrides) -> dict:
        """Column values for a property row."""
        data = {
            "title": "Test Property",
            "description": "A test property",
            "property_type": PropertyType.HOUSE,
            "price": Decimal("250000.00"),
            "address": "1 Test Road",
            "city": "Springfield",
            "state": "Illinois",
            "zip_code": "62701",
            "country": "USA",
            "latitude": 0.0,
            "longitude": 0.0,
            "bedrooms": 3,
            "bathrooms": 2,
            "square_feet": 1500,
            "year_built": 2000,
            "is_available": True,
            "broker_id": broker_id,
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        broker_id: uuid.UUID,
        image_urls: Optional[List[str]] = None,
        features: Optional[List[Dict[str, str]]] = None,
        **overrides
    ) -> Property:
        """Create a test property, with its images and features, in the database."""
        images = [
            {"image_url": url, "is_primary": index == 0, "display_order": index + 1}
            for index, url in enumerate(image_urls or [])
        ]
        return await property_repo.create_with_children(
            PropertyFactory.create_property_data(broker_id, **overrides),
            images,
            features or []
        )


def auth_headers(user: User) -> Dict[str, str]:
    """Authorization header carrying a fresh token for the user."""
    token, _ = create_access_token(
        user_id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role
    )
    return {"Authorization": f"Bearer {token}"}


# Common test fixtures
@pytest.fixture
async def test_broker(user_repository: UserRepository) -> User:
    """Create a test broker."""
    return await UserFactory.create_user(
        user_repository,
        email="broker@test.com",
        first_name="Bella",
        last_name="Broker",
        role=UserRole.BROKER
    )


@pytest.fixture
async def other_broker(user_repository: UserRepository) -> User:
    """Create a second broker who owns nothing by default."""
    return await UserFactory.create_user(
        user_repository,
        email="other.broker@test.com",
        first_name="Oscar",
        last_name="Other",
        role=UserRole.BROKER
    )


@pytest.fixture
async def test_seeker(user_repository: UserRepository) -> User:
    """Create a test house seeker."""
    return await UserFactory.create_user(
        user_repository,
        email="seeker@test.com",
        first_name="Sam",
        last_name="Seeker",
        role=UserRole.HOUSE_SEEKER
    )


@pytest.fixture
async def test_inactive_user(user_repository: UserRepository) -> User:
    """Create a test inactive user."""
    return await UserFactory.create_user(
        user_repository,
        email="inactive@test.com",
        role=UserRole.BROKER,
        is_active=False
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_broker: User) -> Property:
    """Create a test property owned by the test broker."""
    return await PropertyFactory.create_property(
        property_repository,
        broker_id=test_broker.id,
        image_urls=["http://img.example.com/a.png", "http://img.example.com/b.png"],
        features=[{"name": "Pool", "description": "Heated"}]
    )
