"""Error taxonomy shared by services and routers.

Every client-facing failure is an ``HTTPException`` so FastAPI renders it as
``{"detail": reason}`` with the matching status code.
"""

from typing import Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for known failure classes."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal Server Error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to modify this listing"


class CSRFError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Invalid or missing CSRF token"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class RateLimitExceeded(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = "Too many requests. Please try again later."


class PersistenceError(AppError):
    """The store rejected or timed out an operation. Detail is always generic."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "A storage error occurred. Please try again later."


class UpstreamServiceError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Upstream service failed"


class ServiceUnavailableError(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service unavailable"


class CounterReconciliationFailure(Exception):
    """Both counter paths failed. Logged only, never surfaced to callers."""

    def __init__(self, property_id: str, counter: str, reason: str):
        super().__init__(f"{counter} increment failed for {property_id}: {reason}")
        self.property_id = property_id
        self.counter = counter
        self.reason = reason
