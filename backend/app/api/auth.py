"""CSRF token issuance."""

from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_services, limit_auth
from app.schemas.auth import CSRFTokenResponse, CurrentUser
from app.services.csrf import ANONYMOUS_USER
from app.services.registry import ServiceRegistry
from app.utils.security import get_optional_user

router = APIRouter()


@router.get("/csrf-token", response_model=CSRFTokenResponse, dependencies=[Depends(limit_auth)])
async def issue_csrf_token(
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    services: ServiceRegistry = Depends(get_services),
) -> CSRFTokenResponse:
    """Issue a token bound to the caller, or to the anonymous user if signed out."""
    user_id = current_user.id if current_user else ANONYMOUS_USER
    return CSRFTokenResponse(csrf_token=services.csrf.generate(user_id))
