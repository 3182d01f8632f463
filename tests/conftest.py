"""
pytest Fixtures for Bookstore Tests

Shared fixtures used across all test files.

DATABASE FIXTURES
=================
Tests run against SQLite in memory through the aiosqlite driver:
- Fast: No disk I/O
- Isolated: Every test gets a brand new engine, hence a brand new database
- Simple: No external database needed

connect() turns on SQLite foreign key enforcement, so referential integrity
behaves like PostgreSQL for the cases tested here.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from bookstore.config import Settings
from bookstore.database import connect, create_tables, drop_tables
from bookstore.services.authors import create_author
from bookstore.services.books import create_book


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at an in-memory SQLite database, ignoring .env."""
    return Settings(database_url="sqlite+aiosqlite://", _env_file=None)


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a fresh engine with all tables for each test.

    Scope: function
    - The in-memory database lives as long as the engine
    - Tables are dropped and the pool disposed after the test
    """
    engine = await connect(settings)
    await create_tables(engine)

    yield engine

    await drop_tables(engine)
    await engine.dispose()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def sample_author(engine: AsyncEngine) -> int:
    """Create a sample author and return its id."""
    return await create_author(engine, "George Orwell")


@pytest_asyncio.fixture
async def sample_book(engine: AsyncEngine) -> int:
    """Create a sample book and return its id."""
    return await create_book(engine, "Animal Farm")
