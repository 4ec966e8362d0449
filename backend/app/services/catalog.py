"""Catalog operations composed from the repository, mapper and read cache.

Reads are cache-aside with fixed TTLs and no invalidation on write, so a
product read within its TTL after an edit may be stale.
"""

import html
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from app.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.property import Property
from app.schemas.product import CollectionResponse, ProductResponse
from app.schemas.property import (
    ProductSearchParams,
    PropertyAdminUpdate,
    PropertyCreate,
    PropertyUpdate,
)
from app.services.cache import COLLECTIONS_KEY, MISS, TTLCache, collection_key, product_key
from app.services.mapper import (
    build_property_changes,
    build_property_row,
    map_db_collection_to_collection,
    map_property_to_product,
)
from app.services.repository import PropertyRepository
from app.utils.logging import get_logger
from app.utils.validation import FIELD_LIMITS, sanitize, slugify, validate, validate_field

logger = get_logger("rentals.catalog")

MAX_ID_LENGTH = 64
MAX_HANDLE_LENGTH = FIELD_LIMITS["handle"][1]
HANDLE_SUFFIX_LENGTH = 6


def _check_id(value: str, name: str = "id") -> str:
    if not validate(value, "string", max_length=MAX_ID_LENGTH) or not value.strip():
        raise ValidationError(f"Invalid {name} parameter")
    return value


class CatalogService:
    def __init__(
        self,
        repository: PropertyRepository,
        cache: TTLCache,
        product_ttl: float = 15 * 60,
        collection_ttl: float = 30 * 60,
        archive_after_days: int = 60,
    ):
        self.repository = repository
        self.cache = cache
        self.product_ttl = product_ttl
        self.collection_ttl = collection_ttl
        self.archive_after_days = archive_after_days

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_product(self, handle: str) -> ProductResponse:
        """Look a visible listing up by handle, then by id."""
        validate_field("handle", handle)
        clean = sanitize(handle)

        key = product_key(clean)
        cached = self.cache.get(key)
        if cached is not MISS:
            return cached

        row = await self.repository.get_visible_by_handle(clean)
        if row is None:
            row = await self.repository.get_visible_by_id(clean)
        if row is None:
            raise NotFoundError("Product not found")

        product = map_property_to_product(row)
        self.cache.set(key, product, self.product_ttl)
        return product

    async def list_products(self, params: ProductSearchParams) -> List[ProductResponse]:
        clean = params.model_copy(
            update={
                "query": sanitize(params.query) if params.query else None,
                "location": sanitize(params.location) if params.location else None,
                "amenities": sanitize(params.amenities) if params.amenities else None,
            }
        )
        rows = await self.repository.list_visible(clean)
        return [map_property_to_product(row) for row in rows]

    async def list_owner_products(self, user_id: str) -> List[ProductResponse]:
        _check_id(user_id, "user id")
        rows = await self.repository.list_by_owner(sanitize(user_id))
        return [map_property_to_product(row) for row in rows]

    async def list_collections(self) -> List[CollectionResponse]:
        cached = self.cache.get(COLLECTIONS_KEY)
        if cached is not MISS:
            return cached

        collections = [map_db_collection_to_collection(c) for c in await self.repository.list_collections()]
        self.cache.set(COLLECTIONS_KEY, collections, self.collection_ttl)
        return collections

    async def get_collection(self, handle: str) -> CollectionResponse:
        validate_field("handle", handle)
        clean = sanitize(handle)

        key = collection_key(clean)
        cached = self.cache.get(key)
        if cached is not MISS:
            return cached

        row = await self.repository.get_collection(clean)
        if row is None:
            raise NotFoundError("Collection not found")

        collection = map_db_collection_to_collection(row)
        self.cache.set(key, collection, self.collection_ttl)
        return collection

    async def get_collection_products(self, handle: str) -> List[ProductResponse]:
        validate_field("handle", handle)
        rows = await self.repository.list_collection_products(sanitize(handle))
        return [map_property_to_product(row) for row in rows]

    # ------------------------------------------------------------------
    # Owner writes
    # ------------------------------------------------------------------

    async def create_property(self, user_id: str, payload: PropertyCreate) -> ProductResponse:
        clean = sanitize(payload.model_dump(mode="json"))
        # Slug from the unescaped text so entities do not leak into the handle.
        handle = await self._available_handle(slugify(html.unescape(clean["title"])))

        row = build_property_row(
            handle=handle,
            title=clean["title"],
            description=clean["description"],
            price=payload.price,
            address=clean["address"],
            city=clean["location"],
            locality=clean.get("locality"),
            property_type=clean["property_type"],
            images=clean["images"],
            contact_number=clean["contact_number"],
            amenities=clean.get("amenities") or [],
            user_id=user_id,
        )
        row = await self.repository.insert(row)
        logger.info("property_created", property_id=row.id, handle=row.handle, user_id=user_id)
        return map_property_to_product(row)

    async def update_property(self, user_id: str, property_id: str, payload: PropertyUpdate) -> ProductResponse:
        current = await self._owned(user_id, property_id)
        changes = sanitize(payload.model_dump(mode="json", exclude_unset=True, exclude_none=True))
        if not changes:
            raise ValidationError("No valid fields to update")

        row = await self.repository.update(property_id, build_property_changes(current, changes))
        if row is None:
            raise NotFoundError("Product not found")
        logger.info("property_updated", property_id=property_id, user_id=user_id, fields=sorted(changes))
        return map_property_to_product(row)

    async def delete_property(self, user_id: str, property_id: str) -> None:
        await self._owned(user_id, property_id)
        if not await self.repository.delete(property_id):
            raise NotFoundError("Product not found")
        logger.info("property_deleted", property_id=property_id, user_id=user_id)

    async def _owned(self, user_id: str, property_id: str) -> Property:
        _check_id(property_id)
        row = await self.repository.get_by_id(property_id)
        if row is None:
            raise NotFoundError("Product not found")
        if row.user_id != user_id:
            logger.warning("ownership_mismatch", property_id=property_id, user_id=user_id)
            raise ForbiddenError()
        return row

    async def _available_handle(self, base: str) -> str:
        # Best effort: a concurrent create can still claim the same handle.
        base = base[:MAX_HANDLE_LENGTH].rstrip("-") or "listing"
        if not await self.repository.handle_exists(base):
            return base
        stem = base[: MAX_HANDLE_LENGTH - HANDLE_SUFFIX_LENGTH - 1].rstrip("-")
        return f"{stem}-{uuid.uuid4().hex[:HANDLE_SUFFIX_LENGTH]}"

    # ------------------------------------------------------------------
    # Admin / maintenance
    # ------------------------------------------------------------------

    async def admin_update(self, property_id: str, payload: PropertyAdminUpdate) -> ProductResponse:
        _check_id(property_id)
        changes = payload.model_dump(mode="json", exclude_none=True)
        if not changes:
            raise ValidationError("No valid fields to update")

        row = await self.repository.admin_update(property_id, changes)
        if row is None:
            raise NotFoundError("Product not found")
        logger.info("property_moderated", property_id=property_id, changes=changes)
        return map_property_to_product(row)

    async def admin_delete(self, property_id: str) -> None:
        _check_id(property_id)
        if not await self.repository.delete(property_id):
            raise NotFoundError("Product not found")
        logger.info("property_removed_by_admin", property_id=property_id)

    async def archive_stale(self, now: Optional[datetime] = None) -> List[str]:
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=self.archive_after_days)
        archived = await self.repository.archive_older_than(cutoff)
        logger.info("properties_archived", count=len(archived), cutoff=cutoff.isoformat())
        return archived
