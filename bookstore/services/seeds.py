"""
Seeding Service

Loads the sample dataset: authors, books and the links between them.

The three loads run inside a single transaction. A failing load is logged
and the remaining loads still run so every problem shows up in one pass,
but the transaction is committed only if all of them succeeded. Otherwise
it is rolled back and no seed data persists.

Fixture files live in bookstore/sql/ and are plain SQL, one statement per
file:
- authors.sql
- books.sql
- book_authors.sql (links resolved by name, not by generated id)
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from bookstore.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_SQL_DIR = Path(__file__).resolve().parent.parent / "sql"

# Load order matters: links reference both parent tables.
FIXTURE_FILES = (
    ("authors", "authors.sql"),
    ("books", "books.sql"),
    ("book_authors", "book_authors.sql"),
)


@dataclass(frozen=True)
class SeedStatement:
    """One data-loading statement and the name it is logged under."""

    label: str
    sql: str


def load_fixtures(sql_dir: Path | None = None) -> list[SeedStatement]:
    """
    Read the three fixture files in load order.

    Args:
        sql_dir: Directory holding the fixture files; defaults to the
            packaged bookstore/sql directory

    Returns:
        Seed statements for authors, books and book_authors

    Raises:
        FileNotFoundError: If a fixture file is missing
    """
    sql_dir = Path(sql_dir) if sql_dir else DEFAULT_SQL_DIR
    return [
        SeedStatement(label=label, sql=(sql_dir / filename).read_text(encoding="utf-8"))
        for label, filename in FIXTURE_FILES
    ]


async def seed_database(
    engine: AsyncEngine,
    statements: list[SeedStatement] | None = None,
) -> None:
    """
    Run the seed statements in one transaction, all or nothing.

    Args:
        engine: Pooled handle to the store
        statements: Statements to run; defaults to load_fixtures()

    Raises:
        StorageError: If any statement failed (after rolling back), or if
            the transaction itself could not be started or finished
    """
    if statements is None:
        statements = load_fixtures()

    failed: list[str] = []

    try:
        async with engine.connect() as conn:
            transaction = await conn.begin()

            for statement in statements:
                try:
                    # Raw driver SQL: fixture text is not parsed for bind params
                    await conn.exec_driver_sql(statement.sql)
                except SQLAlchemyError as exc:
                    logger.error(f"Error seeding {statement.label}: {exc}")
                    failed.append(statement.label)

            if failed:
                logger.warning("Reverting seeds")
                await transaction.rollback()
            else:
                await transaction.commit()
    except SQLAlchemyError as exc:
        raise StorageError(f"seeding failed: {exc}") from exc

    if failed:
        raise StorageError(f"seeding failed: {', '.join(failed)}")

    logger.info(f"Seeded {len(statements)} datasets")
