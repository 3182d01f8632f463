"""
Books Service

CRUD operations for the books table, plus the book-first entry points into
the relation composer. Mirrors bookstore.services.authors.
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from bookstore.exceptions import storage_errors
from bookstore.models import book_table
from bookstore.schemas import BookRead, Books
from bookstore.services.relations import (
    create_and_link,
    fetch_links,
    group_books_with_authors,
    insert_book_stmt,
)

logger = logging.getLogger(__name__)


async def create_book(engine: AsyncEngine, name: str) -> int:
    """Insert a book and return the generated book_id."""
    with storage_errors("create book"):
        async with engine.begin() as conn:
            result = await conn.execute(insert_book_stmt(name))
            book_id = result.scalar_one()

    logger.info(f"Created book {book_id}")
    return book_id


async def get_book_by_id(engine: AsyncEngine, book_id: int) -> BookRead | None:
    """
    Fetch a single book without its authors.

    Returns:
        The book, or None if no row has that id

    Raises:
        StorageError: On any store failure
    """
    stmt = select(book_table.c.book_id, book_table.c.name).where(
        book_table.c.book_id == book_id
    )

    with storage_errors("get book"):
        async with engine.connect() as conn:
            row = (await conn.execute(stmt)).one_or_none()

    if row is None:
        return None
    return BookRead.model_validate(row)


async def get_all_books(engine: AsyncEngine) -> list[BookRead]:
    """Fetch every book, in the order the store returns them."""
    stmt = select(book_table.c.book_id, book_table.c.name)

    with storage_errors("list books"):
        async with engine.connect() as conn:
            rows = (await conn.execute(stmt)).all()

    return [BookRead.model_validate(row) for row in rows]


async def update_book(engine: AsyncEngine, book_id: int, name: str) -> None:
    """Rename a book. An unknown id updates nothing and is not an error."""
    stmt = update(book_table).where(book_table.c.book_id == book_id).values(name=name)

    with storage_errors("update book"):
        async with engine.begin() as conn:
            result = await conn.execute(stmt)
            affected = result.rowcount

    if affected == 0:
        logger.debug(f"Update skipped: book {book_id} does not exist")


async def delete_book(engine: AsyncEngine, book_id: int) -> None:
    """Permanently delete a book. An unknown id is not an error."""
    stmt = delete(book_table).where(book_table.c.book_id == book_id)

    with storage_errors("delete book"):
        async with engine.begin() as conn:
            result = await conn.execute(stmt)
            affected = result.rowcount

    if affected == 0:
        logger.debug(f"Delete skipped: book {book_id} does not exist")


async def create_book_and_author(
    engine: AsyncEngine,
    book_name: str,
    author_name: str,
) -> tuple[int, int]:
    """
    Create a book and an author and link them, all or nothing.

    The book row is inserted first.

    Returns:
        Tuple of (book_id, author_id)

    Raises:
        StorageError: "bulk insert failed" if any insert failed
    """
    author_id, book_id = await create_and_link(
        engine, author_name, book_name, author_first=False
    )
    return book_id, author_id


async def get_all_books_with_authors(engine: AsyncEngine) -> Books:
    """
    Fetch every book that has at least one author, with its authors.

    Returns:
        Mapping of book_id to BookWithAuthors, in book_id order
    """
    rows = await fetch_links(engine, order_by_author=False)
    return group_books_with_authors(rows)
