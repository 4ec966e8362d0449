"""Scheduled maintenance endpoints, called by the platform scheduler."""

from fastapi import APIRouter, Depends

from app.api.deps import get_services
from app.schemas.product import ArchiveResponse
from app.services.registry import ServiceRegistry
from app.utils.security import require_cron_secret

router = APIRouter(dependencies=[Depends(require_cron_secret)])


@router.get("/archive-properties", response_model=ArchiveResponse)
async def archive_properties(
    services: ServiceRegistry = Depends(get_services),
) -> ArchiveResponse:
    """Soft-archive approved listings past their shelf life."""
    archived = await services.catalog.archive_stale()
    days = services.catalog.archive_after_days
    return ArchiveResponse(
        success=True,
        message=f"Archived {len(archived)} properties older than {days} days.",
        archived_ids=archived,
    )
