"""Admin moderation endpoints.

These are protected by the shared admin secret rather than a user session
and CSRF token; the admin tier is deliberately kept separate from user auth.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_services, limit_admin_write
from app.schemas.product import AdminUpdateResponse, SuccessResponse
from app.schemas.property import PropertyAdminUpdate
from app.services.registry import ServiceRegistry
from app.utils.security import require_admin_secret

router = APIRouter(dependencies=[Depends(limit_admin_write), Depends(require_admin_secret)])


@router.patch("/properties/{property_id}", response_model=AdminUpdateResponse)
async def moderate_property(
    property_id: str,
    request: PropertyAdminUpdate,
    services: ServiceRegistry = Depends(get_services),
) -> AdminUpdateResponse:
    """Change a listing's status and/or availability."""
    product = await services.catalog.admin_update(property_id, request)
    return AdminUpdateResponse(success=True, data=product)


@router.delete("/properties/{property_id}", response_model=SuccessResponse)
async def remove_property(
    property_id: str,
    services: ServiceRegistry = Depends(get_services),
) -> SuccessResponse:
    await services.catalog.admin_delete(property_id)
    return SuccessResponse(success=True)
