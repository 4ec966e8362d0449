"""Catalog schemas: the product/collection shape consumed by storefront clients."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Serialized with camelCase keys, populated with either spelling."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Money(CatalogModel):
    amount: str
    currency_code: str = "INR"


class Image(CatalogModel):
    url: str
    alt_text: str = ""
    width: Optional[int] = None
    height: Optional[int] = None


class Seo(CatalogModel):
    title: str
    description: str


class PriceRange(CatalogModel):
    min_variant_price: Money
    max_variant_price: Money


class SelectedOption(CatalogModel):
    name: str
    value: str


class ProductOption(CatalogModel):
    id: str
    name: str
    values: List[str] = []


class ProductVariant(CatalogModel):
    id: str
    title: str
    price: Money
    available_for_sale: bool
    selected_options: List[SelectedOption] = []


class ProductResponse(CatalogModel):
    """A listing rendered as a single-variant catalog product."""
    id: str
    handle: str
    title: str
    description: str
    price_range: PriceRange
    currency_code: str
    seo: Seo
    featured_image: Optional[Image] = None
    images: List[Image] = []
    options: List[ProductOption] = []
    variants: List[ProductVariant] = []
    # Positional: [category, city, address]
    tags: List[str] = []
    available_for_sale: bool
    user_id: Optional[str] = None
    contact_number: Optional[str] = None
    category_id: Optional[str] = None
    amenities: List[str] = []
    status: Optional[str] = None
    view_count: int = 0
    leads_count: int = 0


class CollectionResponse(CatalogModel):
    id: str
    handle: str
    title: str
    description: str
    path: str
    updated_at: Optional[datetime] = None
    seo: Seo


class CounterResult(BaseModel):
    """Outcome of a view/lead counter increment."""
    success: bool
    method: Optional[Literal["primary", "fallback"]] = None
    error: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


class AdminUpdateResponse(BaseModel):
    success: bool = True
    data: ProductResponse


class ArchiveResponse(CatalogModel):
    success: bool = True
    message: str
    archived_ids: List[str] = Field(default_factory=list)
