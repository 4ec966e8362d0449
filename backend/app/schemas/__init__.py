"""Schemas package initialization."""

from app.schemas.auth import CSRFTokenResponse, CurrentUser, TokenPayload
from app.schemas.product import (
    AdminUpdateResponse,
    ArchiveResponse,
    CollectionResponse,
    CounterResult,
    Image,
    Money,
    PriceRange,
    ProductResponse,
    ProductVariant,
    Seo,
    SuccessResponse,
)
from app.schemas.property import (
    ProductSearchParams,
    PropertyAdminUpdate,
    PropertyCreate,
    PropertyUpdate,
)

__all__ = [
    # Auth
    "TokenPayload",
    "CurrentUser",
    "CSRFTokenResponse",
    # Catalog
    "Money",
    "Image",
    "Seo",
    "PriceRange",
    "ProductVariant",
    "ProductResponse",
    "CollectionResponse",
    "CounterResult",
    "SuccessResponse",
    "AdminUpdateResponse",
    "ArchiveResponse",
    # Property requests
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyAdminUpdate",
    "ProductSearchParams",
]
