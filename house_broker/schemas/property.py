"""
Pydantic schemas for property requests and responses.
Handles property CRUD operations, search criteria, paging and validation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from urllib.parse import urlparse
import uuid
from house_broker.models.property import PropertyType
from house_broker.schemas.user import UserResponse

# Maximum lengths per text column
TEXT_LIMITS = {
    "title": 200,
    "description": 2000,
    "address": 300,
    "city": 100,
    "state": 100,
    "zip_code": 20,
    "country": 100,
}

EARLIEST_YEAR_BUILT = 1800
YEARS_AHEAD_ALLOWED = 5

# Paging inputs are 32-bit integers; larger values are rejected, not clamped
MAX_PAGE_INPUT = 2_147_483_647


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()


def _is_absolute_url(value: str) -> bool:
    parsed = urlparse(value)
    return bool(parsed.scheme and parsed.netloc)


class PropertyFeatureIn(BaseModel):
    """A feature supplied when creating a property."""

    name: str = Field(..., min_length=1, max_length=100, examples=["Pool"])
    description: str = Field("", max_length=500, examples=["Heated outdoor pool"])


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        description="Property listing title",
        examples=["Sunny 3BR House with Garden"]
    )

    description: str = Field(
        ...,
        description="Detailed property description",
        examples=["Family home close to schools and transport."]
    )

    property_type: PropertyType = Field(
        ...,
        description="Kind of property (case-insensitive)",
        examples=["House"]
    )

    price: Decimal = Field(
        ...,
        description="Property price in local currency",
        examples=[450000.00]
    )

    address: str = Field(..., description="Street address", examples=["12 Elm Street"])
    city: str = Field(..., description="City", examples=["Springfield"])
    state: str = Field(..., description="State or region", examples=["Illinois"])
    zip_code: str = Field(..., description="Postal code", examples=["62701"])
    country: str = Field(..., description="Country", examples=["USA"])

    latitude: float = Field(0.0, description="Latitude in degrees", examples=[39.7817])
    longitude: float = Field(0.0, description="Longitude in degrees", examples=[-89.6501])

    bedrooms: int = Field(..., description="Number of bedrooms", examples=[3])
    bathrooms: int = Field(..., description="Number of bathrooms", examples=[2])
    square_feet: int = Field(..., description="Property area in square feet", examples=[1800])
    year_built: int = Field(..., description="Year of construction", examples=[1998])

    @field_validator('title', 'description', 'address', 'city', 'state', 'zip_code', 'country')
    @classmethod
    def validate_text(cls, v, info):
        """Required, trimmed and within the column length."""
        label = _label(info.field_name)
        v = v.strip()
        if not v:
            raise ValueError(f"{label} is required")
        limit = TEXT_LIMITS[info.field_name]
        if len(v) > limit:
            raise ValueError(f"{label} must not exceed {limit} characters")
        return v

    @field_validator('property_type', mode='before')
    @classmethod
    def parse_property_type(cls, v):
        if isinstance(v, PropertyType):
            return v
        parsed = PropertyType.parse(v) if isinstance(v, str) else None
        if parsed is None:
            allowed = ", ".join(t.value for t in PropertyType)
            raise ValueError(f"Property type must be one of: {allowed}")
        return parsed

    @field_validator('price')
    @classmethod
    def validate_price(cls, v):
        if v <= 0:
            raise ValueError("Price must be greater than 0")
        return v

    @field_validator('bedrooms', 'bathrooms')
    @classmethod
    def validate_room_count(cls, v, info):
        if v < 0:
            raise ValueError(f"{_label(info.field_name)} cannot be negative")
        return v

    @field_validator('square_feet')
    @classmethod
    def validate_square_feet(cls, v):
        if v <= 0:
            raise ValueError("Square feet must be greater than 0")
        return v

    @field_validator('year_built')
    @classmethod
    def validate_year_built(cls, v):
        latest = datetime.now().year + YEARS_AHEAD_ALLOWED
        if v <= EARLIEST_YEAR_BUILT or v > latest:
            raise ValueError(f"Year built must be after {EARLIEST_YEAR_BUILT} and no later than {latest}")
        return v

    @field_validator('latitude')
    @classmethod
    def validate_latitude(cls, v):
        if not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90 degrees")
        return v

    @field_validator('longitude')
    @classmethod
    def validate_longitude(cls, v):
        if not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180 degrees")
        return v


class PropertyCreate(PropertyBase):
    """Schema for creating a new property. The first image becomes the primary one."""

    image_urls: List[str] = Field(
        ...,
        description="Absolute image URLs in display order",
        examples=[["https://img.example.com/front.jpg", "https://img.example.com/garden.jpg"]]
    )

    features: List[PropertyFeatureIn] = Field(
        default_factory=list,
        description="Named amenities"
    )

    @field_validator('image_urls')
    @classmethod
    def validate_image_urls(cls, v):
        if not v:
            raise ValueError("At least one image URL is required")
        cleaned = [url.strip() for url in v]
        for url in cleaned:
            if not _is_absolute_url(url):
                raise ValueError(f"Image URL '{url}' must be a valid absolute URL")
        return cleaned


class PropertyUpdate(PropertyBase):
    """
    Schema for updating an existing property.

    Every descriptive field is replaced; images and features are left as they are.
    """

    id: uuid.UUID = Field(..., description="ID of the property being updated")

    is_available: bool = Field(
        True,
        description="Whether the property is still on the market",
        examples=[True]
    )


class PropertyImageResponse(BaseModel):
    """Schema for an image in the property gallery."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    image_url: str
    description: str
    is_primary: bool
    display_order: int
    created_at: datetime


class PropertyFeatureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    created_at: datetime


class PropertyResponse(BaseModel):
    """Full view of a property with broker, gallery and features."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Property's unique identifier")
    title: str
    description: str
    property_type: PropertyType
    price: float
    address: str
    city: str
    state: str
    zip_code: str
    country: str
    latitude: float
    longitude: float
    bedrooms: int
    bathrooms: int
    square_feet: int
    year_built: int
    is_available: bool
    broker_id: str
    broker: Optional[UserResponse] = None
    images: List[PropertyImageResponse] = Field(default_factory=list)
    features: List[PropertyFeatureResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None


class PropertySummaryResponse(BaseModel):
    """Condensed view of a property used in paged listings."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    property_type: PropertyType
    price: float
    city: str
    state: str
    bedrooms: int
    bathrooms: int
    square_feet: int
    is_available: bool
    primary_image_url: str = Field(
        "",
        description="Primary image URL, the first image when none is marked, or empty"
    )
    broker: Optional[UserResponse] = None
    created_at: datetime


class PagedPropertyResponse(BaseModel):
    """Schema for a page of property summaries."""

    items: List[PropertySummaryResponse] = Field(
        ...,
        description="Properties on this page"
    )

    total_count: int = Field(
        ...,
        description="Total number of properties matching the criteria",
        examples=[42]
    )

    page_number: int = Field(..., description="Current page number (1-based)", examples=[1])

    page_size: int = Field(..., description="Maximum items per page", examples=[10])

    total_pages: int = Field(
        ...,
        description="Total number of pages",
        examples=[5]
    )


class PropertySearchRequest(BaseModel):
    """
    Search criteria. Every field is optional and present fields are combined with AND.

    ``property_type`` is matched case-insensitively; an unknown name applies no type filter.
    Page settings are read as ``pageNumber``/``pageSize``, like the list endpoints.
    """

    model_config = ConfigDict(populate_by_name=True)

    city: Optional[str] = Field(None, description="Case-insensitive substring match", examples=["spring"])
    state: Optional[str] = Field(None, description="Case-insensitive substring match")
    min_price: Optional[Decimal] = Field(None, description="Inclusive lower bound")
    max_price: Optional[Decimal] = Field(None, description="Inclusive upper bound")
    property_type: Optional[str] = Field(None, description="Type name such as 'Apartment'")
    min_bedrooms: Optional[int] = None
    max_bedrooms: Optional[int] = None
    min_bathrooms: Optional[int] = None
    max_bathrooms: Optional[int] = None
    min_square_feet: Optional[int] = None
    max_square_feet: Optional[int] = None
    is_available: Optional[bool] = None
    page_number: int = Field(1, alias="pageNumber", le=MAX_PAGE_INPUT, description="Page number (starts from 1)")
    page_size: int = Field(10, alias="pageSize", le=MAX_PAGE_INPUT, description="Items per page (1-100, otherwise 10)")
