"""Products API endpoints: listings rendered in catalog shape."""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Request, status
from pydantic import ValidationError as PydanticValidationError

from app.api.deps import get_services, limit_create, limit_general, require_csrf
from app.exceptions import ValidationError
from app.schemas.auth import CurrentUser
from app.schemas.product import CounterResult, ProductResponse, SuccessResponse
from app.schemas.property import ProductSearchParams, PropertyCreate, PropertyUpdate
from app.services.registry import ServiceRegistry
from app.utils.security import get_current_user

router = APIRouter()


def parse_search_params(raw: dict) -> ProductSearchParams:
    try:
        return ProductSearchParams.model_validate(raw)
    except PydanticValidationError as exc:
        field = ".".join(str(p) for p in exc.errors()[0]["loc"]) if exc.errors() else "query"
        raise ValidationError(f"Invalid {field} parameter")


def _query_to_dict(request: Request) -> dict[str, Any]:
    params: dict[str, Any] = {k: v for k, v in request.query_params.items() if k != "amenities"}
    amenities: List[str] = []
    for value in request.query_params.getlist("amenities"):
        amenities.extend(a.strip() for a in value.split(",") if a.strip())
    if amenities:
        params["amenities"] = amenities
    return params


@router.get("", response_model=List[ProductResponse], dependencies=[Depends(limit_general)])
async def list_products(
    request: Request,
    services: ServiceRegistry = Depends(get_services),
) -> List[ProductResponse]:
    """List visible listings filtered by query string parameters."""
    params = parse_search_params(_query_to_dict(request))
    return await services.catalog.list_products(params)


@router.post("", response_model=List[ProductResponse], dependencies=[Depends(limit_general)])
async def search_products(
    body: Optional[dict] = Body(None),
    services: ServiceRegistry = Depends(get_services),
) -> List[ProductResponse]:
    """List visible listings filtered by a JSON body."""
    params = parse_search_params(body or {})
    return await services.catalog.list_products(params)


@router.post(
    "/create",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_create)],
)
async def create_product(
    request: PropertyCreate,
    current_user: CurrentUser = Depends(get_current_user),
    _csrf: None = Depends(require_csrf),
    services: ServiceRegistry = Depends(get_services),
) -> ProductResponse:
    return await services.catalog.create_property(current_user.id, request)


@router.get("/user/{user_id}", response_model=List[ProductResponse], dependencies=[Depends(limit_general)])
async def list_owner_products(
    user_id: str,
    services: ServiceRegistry = Depends(get_services),
) -> List[ProductResponse]:
    """Every listing of an owner, any status, newest first."""
    return await services.catalog.list_owner_products(user_id)


@router.get("/{handle}", response_model=ProductResponse, dependencies=[Depends(limit_general)])
async def get_product(
    handle: str,
    services: ServiceRegistry = Depends(get_services),
) -> ProductResponse:
    return await services.catalog.get_product(handle)


@router.put("/{product_id}", response_model=ProductResponse, dependencies=[Depends(limit_create)])
async def update_product(
    product_id: str,
    request: PropertyUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    _csrf: None = Depends(require_csrf),
    services: ServiceRegistry = Depends(get_services),
) -> ProductResponse:
    return await services.catalog.update_property(current_user.id, product_id, request)


@router.delete("/{product_id}", response_model=SuccessResponse, dependencies=[Depends(limit_create)])
async def delete_product(
    product_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    _csrf: None = Depends(require_csrf),
    services: ServiceRegistry = Depends(get_services),
) -> SuccessResponse:
    await services.catalog.delete_property(current_user.id, product_id)
    return SuccessResponse(success=True)


@router.post("/{product_id}/views", response_model=CounterResult, dependencies=[Depends(limit_general)])
async def record_view(
    product_id: str,
    services: ServiceRegistry = Depends(get_services),
) -> CounterResult:
    """Public view tracking; a failed bump never fails the request."""
    return await services.counters.record_view(product_id)


@router.post("/{product_id}/leads", response_model=CounterResult, dependencies=[Depends(limit_general)])
async def record_lead(
    product_id: str,
    services: ServiceRegistry = Depends(get_services),
) -> CounterResult:
    """Public lead tracking (share/contact); a failed bump never fails the request."""
    return await services.counters.record_lead(product_id)
