"""Data access for listings and collections.

Every call runs under a bounded timeout and translates store failures into
``PersistenceError`` so store-specific errors never reach callers.
"""

import json
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Final, List, Optional

import anyio
from sqlalchemy import func, or_, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import async_session_maker, service_session_maker
from app.exceptions import PersistenceError
from app.models.collection import Collection
from app.models.property import COUNTER_FIELDS, Property, PropertyStatus, PropertyType
from app.models.user import User
from app.schemas.property import ProductSearchParams
from app.utils.logging import get_logger

logger = get_logger("rentals.repository")

# Stored procedure and argument name per counter column.
COUNTER_PROCEDURES: Final[dict[str, tuple[str, str]]] = {
    "leads_count": ("increment_leads_count", "row_id"),
    "view_count": ("increment_view_count", "p_id"),
}

# Collections are virtual: a handle maps to title keywords.
COLLECTION_TITLE_KEYWORDS: Final[dict[str, tuple[str, ...]]] = {
    "pgs": ("PG",),
    "flats": ("Flat", "1BHK"),
    "private-rooms": ("Room",),
}

OWNER_EDITABLE_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "title",
        "description",
        "price",
        "address",
        "city",
        "locality",
        "property_type",
        "images",
        "tags",
        "amenities",
        "contact_number",
    }
)
ADMIN_EDITABLE_FIELDS: Final[frozenset[str]] = frozenset({"status", "available_for_sale"})


def _check_counter(counter: str) -> None:
    if counter not in COUNTER_FIELDS:
        raise ValueError(f"Unknown counter: {counter}")


class PropertyRepository:
    def __init__(
        self,
        session_maker: async_sessionmaker = async_session_maker,
        service_maker: async_sessionmaker = service_session_maker,
        timeout: float = 10.0,
    ) -> None:
        self._session_maker = session_maker
        self._service_maker = service_maker
        self._timeout = timeout

    @asynccontextmanager
    async def _session(self, operation: str, *, elevated: bool = False, **context) -> AsyncIterator[AsyncSession]:
        maker = self._service_maker if elevated else self._session_maker
        try:
            with anyio.fail_after(self._timeout):
                async with maker() as session:
                    yield session
        except TimeoutError:
            logger.error("store_timeout", operation=operation, timeout=self._timeout, **context)
            raise PersistenceError()
        except SQLAlchemyError as exc:
            logger.error("store_error", operation=operation, error=str(exc), **context)
            raise PersistenceError() from exc

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def get_visible_by_handle(self, handle: str) -> Optional[Property]:
        async with self._session("get_visible_by_handle", handle=handle) as db:
            result = await db.execute(
                select(Property)
                .where(Property.handle == handle, Property.available_for_sale.is_(True))
                .order_by(Property.created_at.asc(), Property.id.asc())
                .limit(1)
            )
            return result.scalar_one_or_none()

    async def get_visible_by_id(self, property_id: str) -> Optional[Property]:
        async with self._session("get_visible_by_id", property_id=property_id) as db:
            result = await db.execute(
                select(Property).where(Property.id == property_id, Property.available_for_sale.is_(True))
            )
            return result.scalar_one_or_none()

    async def get_by_id(self, property_id: str) -> Optional[Property]:
        async with self._session("get_by_id", property_id=property_id) as db:
            return await db.get(Property, property_id)

    async def handle_exists(self, handle: str) -> bool:
        async with self._session("handle_exists", handle=handle) as db:
            result = await db.execute(select(func.count()).where(Property.handle == handle))
            return (result.scalar() or 0) > 0

    async def list_visible(self, params: ProductSearchParams) -> List[Property]:
        query = select(Property).where(Property.available_for_sale.is_(True))

        if params.query:
            query = query.where(
                or_(
                    Property.title.icontains(params.query, autoescape=True),
                    Property.description.icontains(params.query, autoescape=True),
                )
            )
        if params.min_price is not None:
            query = query.where(Property.price >= params.min_price)
        if params.max_price is not None:
            query = query.where(Property.price <= params.max_price)
        if params.location:
            query = query.where(
                or_(
                    Property.city.icontains(params.location, autoescape=True),
                    Property.locality.icontains(params.location, autoescape=True),
                    Property.address.icontains(params.location, autoescape=True),
                )
            )
        if params.property_type:
            if params.property_type in {t.value for t in PropertyType}:
                query = query.where(Property.property_type == params.property_type)
            else:
                # BHK configurations are only recorded in the title.
                query = query.where(Property.title.icontains(params.property_type, autoescape=True))
        for amenity in params.amenities or []:
            query = query.where(Property.amenities.contains(json.dumps(amenity), autoescape=True))

        if params.sort_key == "PRICE":
            order = Property.price.desc() if params.reverse else Property.price.asc()
        elif params.sort_key == "CREATED_AT":
            order = Property.created_at.desc() if params.reverse else Property.created_at.asc()
        else:
            order = Property.created_at.asc() if params.reverse else Property.created_at.desc()
        query = query.order_by(order, Property.id.asc()).limit(params.limit)

        async with self._session("list_visible") as db:
            result = await db.execute(query)
            return list(result.scalars().all())

    async def list_by_owner(self, user_id: str) -> List[Property]:
        async with self._session("list_by_owner", user_id=user_id) as db:
            result = await db.execute(
                select(Property)
                .where(Property.user_id == user_id)
                .order_by(Property.created_at.desc(), Property.id.asc())
            )
            return list(result.scalars().all())

    async def insert(self, row: Property) -> Property:
        async with self._session("insert", handle=row.handle, user_id=row.user_id) as db:
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return row

    async def update(self, property_id: str, changes: dict) -> Optional[Property]:
        """Apply owner-editable columns. ``user_id`` is never written."""
        values = {k: v for k, v in changes.items() if k in OWNER_EDITABLE_FIELDS}
        return await self._update("update", property_id, values)

    async def admin_update(self, property_id: str, changes: dict) -> Optional[Property]:
        values = {k: v for k, v in changes.items() if k in ADMIN_EDITABLE_FIELDS}
        return await self._update("admin_update", property_id, values)

    async def _update(self, operation: str, property_id: str, values: dict) -> Optional[Property]:
        async with self._session(operation, property_id=property_id) as db:
            row = await db.get(Property, property_id)
            if row is None:
                return None
            for field, value in values.items():
                setattr(row, field, value)
            await db.commit()
            await db.refresh(row)
            return row

    async def delete(self, property_id: str) -> bool:
        async with self._session("delete", property_id=property_id) as db:
            row = await db.get(Property, property_id)
            if row is None:
                return False
            await db.delete(row)
            await db.commit()
            return True

    async def archive_older_than(self, cutoff: datetime) -> List[str]:
        """Mark approved listings created before ``cutoff`` inactive; return their ids."""
        async with self._session("archive_older_than", cutoff=cutoff.isoformat()) as db:
            result = await db.execute(
                select(Property.id).where(
                    Property.status == PropertyStatus.APPROVED.value,
                    Property.created_at < cutoff,
                )
            )
            ids = list(result.scalars().all())
            if ids:
                await db.execute(
                    update(Property)
                    .where(Property.id.in_(ids))
                    .values(status=PropertyStatus.INACTIVE.value, available_for_sale=False)
                )
            await db.commit()
            return ids

    # ------------------------------------------------------------------
    # Counters
    # ------------------------------------------------------------------

    async def call_increment_procedure(self, property_id: str, counter: str) -> None:
        """Atomic server-side increment via the stored procedure."""
        _check_counter(counter)
        procedure, argument = COUNTER_PROCEDURES[counter]
        async with self._session("call_increment_procedure", property_id=property_id, counter=counter) as db:
            await db.execute(
                text(f"SELECT {procedure}({argument} => :property_id)"),
                {"property_id": property_id},
            )
            await db.commit()

    async def read_counter(self, property_id: str, counter: str) -> Optional[int]:
        """Read a counter through the elevated path. ``None`` if the listing is missing."""
        _check_counter(counter)
        column = getattr(Property, counter)
        async with self._session("read_counter", elevated=True, property_id=property_id, counter=counter) as db:
            result = await db.execute(select(column).where(Property.id == property_id))
            row = result.first()
            if row is None:
                return None
            return int(row[0] or 0)

    async def write_counter(self, property_id: str, counter: str, value: int) -> bool:
        _check_counter(counter)
        async with self._session("write_counter", elevated=True, property_id=property_id, counter=counter) as db:
            result = await db.execute(
                update(Property).where(Property.id == property_id).values({counter: value})
            )
            await db.commit()
            return result.rowcount > 0

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def get_user(self, user_id: str) -> Optional[User]:
        async with self._session("get_user", user_id=user_id) as db:
            return await db.get(User, user_id)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def list_collections(self) -> List[Collection]:
        async with self._session("list_collections") as db:
            result = await db.execute(select(Collection).order_by(Collection.title.asc()))
            return list(result.scalars().all())

    async def get_collection(self, handle: str) -> Optional[Collection]:
        async with self._session("get_collection", handle=handle) as db:
            result = await db.execute(select(Collection).where(Collection.handle == handle))
            return result.scalar_one_or_none()

    async def list_collection_products(self, handle: str) -> List[Property]:
        query = select(Property).where(Property.available_for_sale.is_(True))
        keywords = COLLECTION_TITLE_KEYWORDS.get(handle)
        if keywords:
            query = query.where(or_(*(Property.title.icontains(k, autoescape=True) for k in keywords)))
        query = query.order_by(Property.created_at.desc(), Property.id.asc())

        async with self._session("list_collection_products", handle=handle) as db:
            result = await db.execute(query)
            return list(result.scalars().all())
