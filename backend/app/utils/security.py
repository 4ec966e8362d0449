"""Security utilities: JWT verification, caller identity and shared-secret tiers."""

import hmac
import ipaddress
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import AuthenticationError
from app.schemas.auth import CurrentUser, TokenPayload
from app.utils.logging import get_logger

logger = get_logger("rentals.security")

# HTTP Bearer security; missing credentials are handled by the dependencies.
security = HTTPBearer(auto_error=False)

_IDENTITY_HEADERS = ("cf-connecting-ip", "x-forwarded-for", "x-real-ip")


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a JWT in the auth provider's format (used by tooling and tests)."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)

    to_encode = {
        "sub": user_id,
        "email": email,
        "role": "authenticated",
        "exp": expire,
    }
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[TokenPayload]:
    """Decode and validate a JWT access token. Expired or malformed tokens give None."""
    if not token or token.count(".") != 2:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience or None,
            options={"verify_aud": bool(settings.jwt_audience)},
        )
        if not payload.get("sub"):
            return None
        return TokenPayload(
            sub=str(payload["sub"]),
            email=payload.get("email"),
            role=payload.get("role"),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc) if payload.get("exp") else None,
        )
    except JWTError:
        return None


def _valid_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def client_identity(request: Request) -> str:
    """Best-effort caller identity for rate limiting."""
    for header in _IDENTITY_HEADERS:
        raw = request.headers.get(header)
        if not raw:
            continue
        candidate = raw.split(",")[0].strip()
        if _valid_ip(candidate):
            return candidate
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def secrets_match(provided: Optional[str], expected: str) -> bool:
    """Constant-time comparison; an unset secret never matches."""
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def _resolve_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing token")

    token_data = decode_access_token(credentials.credentials)
    if token_data is None:
        raise AuthenticationError("Invalid or expired token")

    # Accounts without a local profile row are still allowed through.
    user = await request.app.state.services.repository.get_user(token_data.sub)
    if user is not None and user.is_suspended:
        logger.warning("suspended_user_rejected", user_id=user.id)
        raise AuthenticationError("Account suspended")

    return CurrentUser(id=token_data.sub, email=token_data.email)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """Get the current authenticated user from the bearer token."""
    return await _resolve_user(request, credentials)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """Like ``get_current_user`` but anonymous callers get None."""
    if credentials is None:
        return None
    try:
        return await _resolve_user(request, credentials)
    except AuthenticationError:
        return None


async def require_admin_secret(
    x_admin_secret: Optional[str] = Header(None, alias="X-Admin-Secret"),
) -> None:
    """Admin trust tier: a shared server-side secret instead of a user session."""
    if not secrets_match(x_admin_secret, settings.admin_api_secret):
        raise AuthenticationError("Admin access required")


async def require_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    provided = credentials.credentials if credentials else None
    if not secrets_match(provided, settings.cron_secret):
        raise AuthenticationError("Unauthorized")
