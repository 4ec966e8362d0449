"""Database connections for Postgres (production) and SQLite (local/tests)."""

from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.config import settings


class Base(DeclarativeBase):
    pass


def _async_url(url: str) -> str:
    # Managed providers hand out `postgres://...` which SQLAlchemy rejects.
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _make_engine(url: str):
    url = _async_url(url)
    if url.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them.
        return create_async_engine(url, echo=False, future=True, poolclass=NullPool)
    return create_async_engine(url, echo=False, future=True, pool_pre_ping=True)


engine = _make_engine(settings.database_url)

if _async_url(settings.effective_service_database_url) == _async_url(settings.database_url):
    service_engine = engine
else:
    service_engine = _make_engine(settings.effective_service_database_url)


async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Elevated path: bypasses row-level security on Postgres.
service_session_maker = async_sessionmaker(
    service_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


COUNTER_PROCEDURES = (
    """
    CREATE OR REPLACE FUNCTION increment_leads_count(row_id text)
    RETURNS void LANGUAGE sql SECURITY DEFINER AS $$
        UPDATE properties SET leads_count = COALESCE(leads_count, 0) + 1 WHERE id = row_id;
    $$
    """,
    """
    CREATE OR REPLACE FUNCTION increment_view_count(p_id text)
    RETURNS void LANGUAGE sql SECURITY DEFINER AS $$
        UPDATE properties SET view_count = COALESCE(view_count, 0) + 1 WHERE id = p_id;
    $$
    """,
)


def _install_counter_procedures(connection) -> None:
    if connection.dialect.name != "postgresql":
        return
    for ddl in COUNTER_PROCEDURES:
        connection.execute(text(ddl))


def _init_and_migrate(connection) -> None:
    # Import models so their tables are registered on Base.metadata.
    import app.models  # noqa: F401

    Base.metadata.create_all(connection)
    _install_counter_procedures(connection)


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(_init_and_migrate)


@asynccontextmanager
async def lifespan_db():
    await init_db()
    yield
    await engine.dispose()
    if service_engine is not engine:
        await service_engine.dispose()
