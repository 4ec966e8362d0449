"""Property request schemas. Fields are validated here, before any handler reads them."""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.property import PropertyStatus, PropertyType
from app.utils.validation import MAX_IMAGES, ensure_text, validate


class RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _check_images(images: Optional[List[str]]) -> Optional[List[str]]:
    if images is None:
        return images
    if not images or len(images) > MAX_IMAGES:
        raise ValueError("Invalid images parameter")
    if not all(validate(url, "url") for url in images):
        raise ValueError("Invalid images parameter")
    return images


def _check_price(price: Optional[float]) -> Optional[float]:
    if price is None:
        return price
    if not validate(price, "number") or price <= 0:
        raise ValueError("Invalid price parameter")
    return price


class PropertyCreate(RequestModel):
    """Schema for creating a new listing."""
    title: str
    description: str
    price: float = Field(..., allow_inf_nan=False)
    address: str
    location: str
    locality: Optional[str] = None
    property_type: PropertyType = Field(..., alias="type")
    images: List[str]
    contact_number: str
    amenities: List[str] = Field(default_factory=list, max_length=50)

    @field_validator("title", "description", "address", "location", "contact_number")
    @classmethod
    def _bounded_text(cls, value: str, info) -> str:
        return ensure_text(info.field_name, value)

    @field_validator("locality")
    @classmethod
    def _locality(cls, value: Optional[str]) -> Optional[str]:
        return ensure_text("locality", value, required=False)

    @field_validator("price")
    @classmethod
    def _price(cls, value: float) -> float:
        return _check_price(value)

    @field_validator("images")
    @classmethod
    def _images(cls, value: List[str]) -> List[str]:
        return _check_images(value)

    @field_validator("amenities")
    @classmethod
    def _amenities(cls, value: List[str]) -> List[str]:
        if not all(validate(a, "string", max_length=100) and a.strip() for a in value):
            raise ValueError("Invalid amenities parameter")
        return value


class PropertyUpdate(RequestModel):
    """Schema for an owner editing a listing. Ownership is never editable."""
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, allow_inf_nan=False)
    address: Optional[str] = None
    location: Optional[str] = None
    locality: Optional[str] = None
    property_type: Optional[PropertyType] = Field(None, alias="type")
    images: Optional[List[str]] = None
    contact_number: Optional[str] = None
    amenities: Optional[List[str]] = Field(None, max_length=50)

    @field_validator("title", "description", "address", "location", "contact_number", "locality")
    @classmethod
    def _bounded_text(cls, value: Optional[str], info) -> Optional[str]:
        if value is None:
            return value
        return ensure_text(info.field_name, value, required=info.field_name != "locality")

    @field_validator("price")
    @classmethod
    def _price(cls, value: Optional[float]) -> Optional[float]:
        return _check_price(value)

    @field_validator("images")
    @classmethod
    def _images(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return _check_images(value)

    @field_validator("amenities")
    @classmethod
    def _amenities(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is not None and not all(validate(a, "string", max_length=100) and a.strip() for a in value):
            raise ValueError("Invalid amenities parameter")
        return value


class PropertyAdminUpdate(RequestModel):
    """Moderation fields an admin may change."""
    status: Optional[PropertyStatus] = None
    available_for_sale: Optional[bool] = Field(None, alias="available_for_sale")


SEARCH_PROPERTY_TYPES = ("PG", "Flat", "Room", "Hostel", "1BHK", "2BHK", "3BHK")


class ProductSearchParams(RequestModel):
    """Listing filters."""
    query: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    max_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    location: Optional[str] = None
    property_type: Optional[Literal["PG", "Flat", "Room", "Hostel", "1BHK", "2BHK", "3BHK"]] = None
    amenities: Optional[List[str]] = None
    sort_key: Literal["RELEVANCE", "CREATED_AT", "PRICE"] = "RELEVANCE"
    reverse: bool = False
    limit: int = 50

    @field_validator("query")
    @classmethod
    def _query(cls, value: Optional[str]) -> Optional[str]:
        return ensure_text("query", value, required=False)

    @field_validator("location")
    @classmethod
    def _location(cls, value: Optional[str]) -> Optional[str]:
        return ensure_text("location", value, required=False)

    @field_validator("amenities")
    @classmethod
    def _amenities(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is not None and not all(validate(a, "string", max_length=100) for a in value):
            raise ValueError("Invalid amenities parameter")
        return value

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return min(max(value, 1), 1000)
