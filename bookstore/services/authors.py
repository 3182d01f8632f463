"""
Authors Service

CRUD operations for the authors table, plus the author-first entry points
into the relation composer.

Every function takes the pooled AsyncEngine and checks out a connection for
the duration of one statement. Store failures surface as StorageError; a
missing author is reported as None by get_author_by_id and silently ignored
by update_author and delete_author.
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from bookstore.exceptions import storage_errors
from bookstore.models import author_table
from bookstore.schemas import AuthorRead, Authors
from bookstore.services.relations import (
    create_and_link,
    fetch_links,
    group_authors_with_books,
    insert_author_stmt,
)

logger = logging.getLogger(__name__)


async def create_author(engine: AsyncEngine, name: str) -> int:
    """
    Insert an author and return the generated author_id.

    Raises:
        StorageError: If the insert is rejected
    """
    with storage_errors("create author"):
        async with engine.begin() as conn:
            result = await conn.execute(insert_author_stmt(name))
            author_id = result.scalar_one()

    logger.info(f"Created author {author_id}")
    return author_id


async def get_author_by_id(engine: AsyncEngine, author_id: int) -> AuthorRead | None:
    """
    Fetch a single author without its books.

    Only a zero-row result maps to None. Connectivity and query errors are
    raised, not hidden behind a missing author.

    Args:
        engine: Pooled handle to the store
        author_id: Id to look up

    Returns:
        The author, or None if no row has that id

    Raises:
        StorageError: On any store failure
    """
    stmt = select(author_table.c.author_id, author_table.c.name).where(
        author_table.c.author_id == author_id
    )

    with storage_errors("get author"):
        async with engine.connect() as conn:
            row = (await conn.execute(stmt)).one_or_none()

    if row is None:
        return None
    return AuthorRead.model_validate(row)


async def get_all_authors(engine: AsyncEngine) -> list[AuthorRead]:
    """Fetch every author, in the order the store returns them."""
    stmt = select(author_table.c.author_id, author_table.c.name)

    with storage_errors("list authors"):
        async with engine.connect() as conn:
            rows = (await conn.execute(stmt)).all()

    return [AuthorRead.model_validate(row) for row in rows]


async def update_author(engine: AsyncEngine, author_id: int, name: str) -> None:
    """Rename an author. An unknown id updates nothing and is not an error."""
    stmt = (
        update(author_table)
        .where(author_table.c.author_id == author_id)
        .values(name=name)
    )

    with storage_errors("update author"):
        async with engine.begin() as conn:
            result = await conn.execute(stmt)
            affected = result.rowcount

    if affected == 0:
        logger.debug(f"Update skipped: author {author_id} does not exist")


async def delete_author(engine: AsyncEngine, author_id: int) -> None:
    """
    Permanently delete an author.

    An unknown id deletes nothing and is not an error. Whether an author that
    still has book links can be deleted is decided by the store's foreign key
    constraint; a refusal surfaces as StorageError.
    """
    stmt = delete(author_table).where(author_table.c.author_id == author_id)

    with storage_errors("delete author"):
        async with engine.begin() as conn:
            result = await conn.execute(stmt)
            affected = result.rowcount

    if affected == 0:
        logger.debug(f"Delete skipped: author {author_id} does not exist")


async def create_author_and_book(
    engine: AsyncEngine,
    author_name: str,
    book_name: str,
) -> tuple[int, int]:
    """
    Create an author and a book and link them, all or nothing.

    The author row is inserted first.

    Returns:
        Tuple of (author_id, book_id)

    Raises:
        StorageError: "bulk insert failed" if any insert failed
    """
    return await create_and_link(engine, author_name, book_name, author_first=True)


async def get_all_authors_with_books(engine: AsyncEngine) -> Authors:
    """
    Fetch every author that has at least one book, with its books.

    Uses a single join query. Authors without books do not appear.

    Returns:
        Mapping of author_id to AuthorWithBooks, in author_id order
    """
    rows = await fetch_links(engine, order_by_author=True)
    return group_authors_with_books(rows)
