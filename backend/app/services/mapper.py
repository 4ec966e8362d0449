"""Mapping between stored rows and the catalog product/collection shape."""

import json
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

from app.models.collection import Collection
from app.models.property import Property, PropertyStatus
from app.schemas.product import (
    CollectionResponse,
    Image,
    Money,
    PriceRange,
    ProductResponse,
    ProductVariant,
    Seo,
)

DEFAULT_IMAGE_WIDTH = 800
DEFAULT_IMAGE_HEIGHT = 600
DEFAULT_VARIANT_TITLE = "Default Title"


@dataclass(frozen=True)
class ListingTags:
    """Named view of the positional tags array."""
    category: str = ""
    city: str = ""
    address: str = ""

    def to_list(self) -> List[str]:
        return [self.category, self.city, self.address]

    @classmethod
    def from_list(cls, tags: Iterable[str]) -> "ListingTags":
        values = list(tags) + ["", "", ""]
        return cls(category=values[0], city=values[1], address=values[2])

    @classmethod
    def from_row(cls, row: Property) -> "ListingTags":
        return cls(
            category=row.property_type or "",
            city=row.city or "",
            address=row.address or "",
        )


def _load_json(raw: Optional[str], default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return default


def format_amount(value: Any) -> str:
    """Render a price as a plain decimal string: 5000.0 -> "5000", 5500.5 -> "5500.5"."""
    if value is None:
        return "0"
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return "0"
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal(1)))
    return format(amount.normalize(), "f")


def _image(raw: Any, alt_text: str) -> Optional[Image]:
    if isinstance(raw, str):
        raw = {"url": raw}
    if not isinstance(raw, dict) or not raw.get("url"):
        return None
    return Image(
        url=raw["url"],
        alt_text=raw.get("altText") or raw.get("alt_text") or alt_text,
        width=raw.get("width"),
        height=raw.get("height"),
    )


def map_property_to_product(row: Property) -> ProductResponse:
    currency = row.currency_code or "INR"
    price = Money(amount=format_amount(row.price), currency_code=currency)
    title = row.title or ""
    description = row.description or ""

    images = [img for img in (_image(raw, title) for raw in _load_json(row.images, [])) if img]
    stored_tags = _load_json(row.tags, None)
    tags = ListingTags.from_list(stored_tags) if stored_tags else ListingTags.from_row(row)

    return ProductResponse(
        id=row.id,
        handle=row.handle,
        title=title,
        description=description,
        price_range=PriceRange(min_variant_price=price, max_variant_price=price),
        currency_code=currency,
        seo=Seo(title=title, description=description),
        featured_image=images[0] if images else None,
        images=images,
        options=[],
        variants=[
            ProductVariant(
                id=f"{row.id}_default",
                title=DEFAULT_VARIANT_TITLE,
                price=price,
                available_for_sale=bool(row.available_for_sale),
                selected_options=[],
            )
        ],
        tags=tags.to_list(),
        available_for_sale=bool(row.available_for_sale),
        user_id=row.user_id,
        contact_number=row.contact_number,
        category_id=row.address,
        amenities=_load_json(row.amenities, []),
        status=row.status,
        view_count=row.view_count or 0,
        leads_count=row.leads_count or 0,
    )


def map_db_collection_to_collection(row: Collection) -> CollectionResponse:
    seo = _load_json(row.seo, None) or {"title": row.title, "description": row.description or ""}
    return CollectionResponse(
        id=row.id,
        handle=row.handle,
        title=row.title,
        description=row.description or "",
        path=row.path or f"/search/{row.handle}",
        updated_at=row.updated_at,
        seo=Seo(**seo),
    )


def build_image_list(urls: List[str], alt_text: str) -> str:
    return json.dumps(
        [
            {"url": url, "altText": alt_text, "width": DEFAULT_IMAGE_WIDTH, "height": DEFAULT_IMAGE_HEIGHT}
            for url in urls
        ]
    )


def build_property_row(
    *,
    handle: str,
    title: str,
    description: str,
    price: float,
    address: str,
    city: str,
    locality: Optional[str],
    property_type: str,
    images: List[str],
    contact_number: str,
    amenities: List[str],
    user_id: str,
) -> Property:
    """Build a new row from already sanitized values."""
    tags = ListingTags(category=property_type, city=city, address=address)
    return Property(
        handle=handle,
        title=title,
        description=description,
        property_type=property_type,
        price=price,
        currency_code="INR",
        address=address,
        city=city,
        locality=locality,
        images=build_image_list(images, title),
        tags=json.dumps(tags.to_list()),
        amenities=json.dumps(amenities),
        available_for_sale=True,
        status=PropertyStatus.PENDING.value,
        user_id=user_id,
        contact_number=contact_number,
        view_count=0,
        leads_count=0,
    )


def build_property_changes(current: Property, changes: dict) -> dict:
    """Turn sanitized owner edits into column values, rebuilding derived columns."""
    values = dict(changes)
    images = values.pop("images", None)
    amenities = values.pop("amenities", None)
    if "location" in values:
        values["city"] = values.pop("location")

    if images is not None:
        values["images"] = build_image_list(images, values.get("title", current.title))
    if amenities is not None:
        values["amenities"] = json.dumps(amenities)

    tags = ListingTags(
        category=values.get("property_type", current.property_type) or "",
        city=values.get("city", current.city) or "",
        address=values.get("address", current.address) or "",
    )
    values["tags"] = json.dumps(tags.to_list())
    return values
