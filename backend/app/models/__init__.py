"""Models package initialization."""

from app.models.collection import Collection
from app.models.property import COUNTER_FIELDS, Property, PropertyStatus, PropertyType
from app.models.user import User, UserStatus

__all__ = [
    # User
    "User",
    "UserStatus",
    # Property
    "Property",
    "PropertyType",
    "PropertyStatus",
    "COUNTER_FIELDS",
    # Collection
    "Collection",
]
