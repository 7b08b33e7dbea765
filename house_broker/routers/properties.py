"""
Property management API endpoints for CRUD operations, search, and pagination.
Reads are public; writes require the Broker role and ownership of the listing.
"""

from fastapi import APIRouter, Depends, Query, Request, Response, status
from uuid import UUID

from house_broker.models.property import Property
from house_broker.services.property import PropertyService, PropertyPage
from house_broker.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertySummaryResponse,
    PagedPropertyResponse,
    PropertySearchRequest,
    MAX_PAGE_INPUT
)
from house_broker.schemas.error import get_error_responses
from house_broker.utils.auth import TokenPayload
from house_broker.utils.dependencies import get_property_service, require_broker
from house_broker.utils.exceptions import BadRequestError, PropertyNotFoundError
from house_broker.utils.validators import ValidationUtils


router = APIRouter(prefix="/properties", tags=["Properties"])


def _to_response(property_obj: Property) -> PropertyResponse:
    return PropertyResponse.model_validate(property_obj.to_dict())


def _to_paged_response(page: PropertyPage) -> PagedPropertyResponse:
    return PagedPropertyResponse(
        items=[PropertySummaryResponse.model_validate(p.to_summary_dict()) for p in page.items],
        total_count=page.total_count,
        page_number=page.page_number,
        page_size=page.page_size,
        total_pages=page.total_pages
    )


@router.get(
    "",
    response_model=PagedPropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="List available properties",
    description="Paginated list of available properties, newest first"
)
async def list_properties(
    page_number: int = Query(1, alias="pageNumber", le=MAX_PAGE_INPUT, description="Page number (starts from 1)"),
    page_size: int = Query(10, alias="pageSize", le=MAX_PAGE_INPUT, description="Items per page (1-100, otherwise 10)"),
    property_service: PropertyService = Depends(get_property_service)
) -> PagedPropertyResponse:
    page_number, page_size = ValidationUtils.normalize_pagination(page_number, page_size)
    page = await property_service.get_all(page_number, page_size)
    return _to_paged_response(page)


@router.post(
    "/search",
    response_model=PagedPropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Search properties",
    description="Filter properties; every supplied criterion must match",
    responses=get_error_responses(400)
)
async def search_properties(
    criteria: PropertySearchRequest,
    property_service: PropertyService = Depends(get_property_service)
) -> PagedPropertyResponse:
    """
    Search properties with optional filters.

    Args:
        criteria: Filters plus page settings
        property_service: Property service instance

    Returns:
        Page of matching properties
    """
    page_number, page_size = ValidationUtils.normalize_pagination(criteria.page_number, criteria.page_size)
    criteria = criteria.model_copy(update={"page_number": page_number, "page_size": page_size})
    page = await property_service.search(criteria)
    return _to_paged_response(page)


@router.get(
    "/broker/{broker_id}",
    response_model=PagedPropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="List a broker's properties",
    description="Paginated list of every property a broker has listed, available or not"
)
async def list_broker_properties(
    broker_id: UUID,
    page_number: int = Query(1, alias="pageNumber", le=MAX_PAGE_INPUT, description="Page number (starts from 1)"),
    page_size: int = Query(10, alias="pageSize", le=MAX_PAGE_INPUT, description="Items per page (1-100, otherwise 10)"),
    property_service: PropertyService = Depends(get_property_service)
) -> PagedPropertyResponse:
    page_number, page_size = ValidationUtils.normalize_pagination(page_number, page_size)
    page = await property_service.get_by_broker(broker_id, page_number, page_size)
    return _to_paged_response(page)


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property by ID",
    description="Full property details including broker, images and features",
    responses=get_error_responses(404)
)
async def get_property(
    property_id: UUID,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Get a single property.

    Raises:
        PropertyNotFoundError: If property doesn't exist
    """
    property_obj = await property_service.get_property(property_id)
    if property_obj is None:
        raise PropertyNotFoundError(str(property_id))
    return _to_response(property_obj)


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a new property listing. Requires the Broker role.",
    responses=get_error_responses(400, 401, 403, 500)
)
async def create_property(
    property_data: PropertyCreate,
    request: Request,
    response: Response,
    principal: TokenPayload = Depends(require_broker),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Create a new property listing owned by the caller.

    Args:
        property_data: Property creation data
        request: Incoming request, used to build the Location header
        response: Outgoing response
        principal: Verified token claims of a broker
        property_service: Property service instance

    Returns:
        Created property with details
    """
    property_obj = await property_service.create_property(property_data, principal.user_id)
    response.headers["Location"] = str(request.url_for("get_property", property_id=str(property_obj.id)))
    return _to_response(property_obj)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description="Replace a property's details. Only the owning broker can update it.",
    responses=get_error_responses(400, 401, 403, 404, 500)
)
async def update_property(
    property_id: UUID,
    property_data: PropertyUpdate,
    principal: TokenPayload = Depends(require_broker),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Update a property listing.

    Raises:
        BadRequestError: If the body id differs from the path id
        PropertyNotFoundError: If property doesn't exist
        PropertyOwnershipError: If the caller doesn't own the property
    """
    if property_data.id != property_id:
        raise BadRequestError("Property ID mismatch")

    property_obj = await property_service.update_property(property_data, principal.user_id)
    return _to_response(property_obj)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    description="Delete a property with its images and features. Only the owning broker can delete it.",
    responses=get_error_responses(401, 403, 404, 500)
)
async def delete_property(
    property_id: UUID,
    principal: TokenPayload = Depends(require_broker),
    property_service: PropertyService = Depends(get_property_service)
) -> Response:
    await property_service.delete_property(property_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
