"""Shared router dependencies.

Declaration order in a route is the order checks run: rate limit, then
authentication, then CSRF. The request body is validated only after every
dependency has passed.
"""

from typing import Callable, Optional

from fastapi import Depends, Header, Request

from app.exceptions import CSRFError
from app.schemas.auth import CurrentUser
from app.services.registry import ServiceRegistry
from app.utils.logging import get_logger
from app.utils.security import client_identity, get_current_user

logger = get_logger("rentals.api")


def get_services(request: Request) -> ServiceRegistry:
    return request.app.state.services


def rate_limit(route_class: str) -> Callable:
    """Dependency factory enforcing the budget of ``route_class``."""
    async def limiter(request: Request, services: ServiceRegistry = Depends(get_services)) -> None:
        services.rate_limiter.check(client_identity(request), route_class)
    return limiter


async def require_csrf(
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceRegistry = Depends(get_services),
    x_csrf_token: Optional[str] = Header(None, alias="X-CSRF-Token"),
) -> None:
    if not services.csrf.validate(x_csrf_token, current_user.id):
        logger.warning("csrf_rejected", user_id=current_user.id, token_present=bool(x_csrf_token))
        raise CSRFError()


# Convenience dependencies
limit_general = rate_limit("general")
limit_auth = rate_limit("auth")
limit_create = rate_limit("create")
limit_admin_write = rate_limit("admin_write")
