"""Collections API endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_services, limit_general
from app.schemas.product import CollectionResponse, ProductResponse
from app.services.registry import ServiceRegistry

router = APIRouter(dependencies=[Depends(limit_general)])


@router.get("", response_model=List[CollectionResponse])
async def list_collections(
    services: ServiceRegistry = Depends(get_services),
) -> List[CollectionResponse]:
    return await services.catalog.list_collections()


@router.get("/{handle}", response_model=CollectionResponse)
async def get_collection(
    handle: str,
    services: ServiceRegistry = Depends(get_services),
) -> CollectionResponse:
    return await services.catalog.get_collection(handle)


@router.api_route("/{handle}/products", methods=["GET", "POST"], response_model=List[ProductResponse])
async def get_collection_products(
    handle: str,
    services: ServiceRegistry = Depends(get_services),
) -> List[ProductResponse]:
    """Listings matched to a collection by title keywords."""
    return await services.catalog.get_collection_products(handle)
