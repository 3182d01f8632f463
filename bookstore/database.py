"""
Database Configuration Module

This module is the connection provider: it turns Settings into a pooled
async engine and owns the declarative Base that the table models use.

Async SQLAlchemy
================
We use SQLAlchemy 2.0's asyncio extension:
- PostgreSQL through the asyncpg driver in production
- SQLite through aiosqlite for tests

The AsyncEngine returned by connect() is the shared pool handle. Services
check connections out of it per operation (engine.connect()) or per
transaction (conn.begin()); nothing else is shared between callers.
"""

import logging

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from bookstore.config import Settings, get_settings
from bookstore.exceptions import storage_errors

logger = logging.getLogger(__name__)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all table models.

    Base.metadata holds the authors, books and book_authors tables and is
    what create_tables() and drop_tables() operate on.
    """
    pass


# =============================================================================
# Connection Provider
# =============================================================================
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked on every connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Build an async engine without touching the database.

    Key parameters:
    - pool_size / max_overflow: pool sizing from settings (not for SQLite)
    - pool_pre_ping: test connection health before handing it out
    - echo: log all SQL statements in debug mode

    In-memory SQLite gets a StaticPool so that every checkout sees the
    same database.
    """
    if settings.is_sqlite:
        kwargs = {}
        if ":memory:" in settings.database_url or settings.database_url.endswith("://"):
            kwargs["poolclass"] = StaticPool
        engine = create_async_engine(
            settings.database_url,
            echo=settings.debug,
            **kwargs,
        )
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.debug,
    )


async def connect(settings: Settings | None = None) -> AsyncEngine:
    """
    Produce a ready pooled handle to the store.

    Args:
        settings: Explicit configuration; defaults to get_settings()

    Returns:
        An AsyncEngine that has already served one query

    Raises:
        StorageError: If the store cannot be reached
    """
    settings = settings or get_settings()
    engine = build_engine(settings)

    try:
        with storage_errors("connect"):
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
    except Exception:
        await engine.dispose()
        raise

    logger.info("Database connection pool ready")
    return engine


# =============================================================================
# Utility Functions
# =============================================================================
async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all tables that do not exist yet.

    This is a bootstrap helper for development and tests, not a migration
    tool: it never alters an existing table.
    """
    # Register the models on Base.metadata before creating anything.
    import bookstore.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine) -> None:
    """
    Drop all tables.

    DANGER: This deletes all data! Only use in development and tests.
    """
    import bookstore.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
