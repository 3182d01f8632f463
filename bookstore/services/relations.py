"""
Relation Composer

Logic that spans both tables:

1. Dual create-and-link
   Insert an author and a book and link them, all in one transaction.
   Each parent insert is attempted even if the other failed, so both errors
   reach the log, but nothing is committed unless all three rows exist.

2. Join-and-group
   One query across book_authors, authors and books returns a flat row per
   (author, book) pair. The rows are then folded into nested views keyed by
   the owning entity's id.

The author and book services expose the public entry points; this module
holds the shared machinery.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import Insert, Select, insert, select
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from bookstore.exceptions import StorageError, storage_errors
from bookstore.models import author_table, book_authors, book_table
from bookstore.schemas import (
    AuthorRead,
    Authors,
    AuthorWithBooks,
    BookRead,
    Books,
    BookWithAuthors,
)

logger = logging.getLogger(__name__)

BULK_INSERT_FAILED = "bulk insert failed"


# =============================================================================
# Dual Create-and-Link
# =============================================================================
def insert_author_stmt(name: str) -> Insert:
    """INSERT INTO authors (name) VALUES (:name) RETURNING author_id"""
    return insert(author_table).values(name=name).returning(author_table.c.author_id)


def insert_book_stmt(name: str) -> Insert:
    """INSERT INTO books (name) VALUES (:name) RETURNING book_id"""
    return insert(book_table).values(name=name).returning(book_table.c.book_id)


async def _try_insert(conn: AsyncConnection, stmt: Insert, label: str) -> int | None:
    """
    Run one INSERT ... RETURNING inside the open transaction.

    Returns the generated id, or None after logging the failure. The caller
    decides whether to commit.
    """
    try:
        result = await conn.execute(stmt)
        return result.scalar_one()
    except SQLAlchemyError as exc:
        logger.error(f"Error inserting {label}: {exc}")
        return None


async def create_and_link(
    engine: AsyncEngine,
    author_name: str,
    book_name: str,
    author_first: bool = True,
) -> tuple[int, int]:
    """
    Insert an author and a book and link them atomically.

    Statement order inside the transaction is fixed: the first parent, the
    second parent, then the link row. author_first picks which parent goes
    first; the result is always (author_id, book_id).

    Args:
        engine: Pooled handle to the store
        author_name: Name for the new author
        book_name: Name for the new book
        author_first: Insert the author before the book

    Returns:
        Tuple of (author_id, book_id)

    Raises:
        StorageError: If any of the three inserts failed; nothing persists
    """
    try:
        async with engine.connect() as conn:
            transaction = await conn.begin()

            if author_first:
                author_id = await _try_insert(conn, insert_author_stmt(author_name), "author")
                book_id = await _try_insert(conn, insert_book_stmt(book_name), "book")
            else:
                book_id = await _try_insert(conn, insert_book_stmt(book_name), "book")
                author_id = await _try_insert(conn, insert_author_stmt(author_name), "author")

            if author_id is None or book_id is None:
                await transaction.rollback()
                raise StorageError(BULK_INSERT_FAILED)

            try:
                await conn.execute(
                    insert(book_authors).values(author_id=author_id, book_id=book_id)
                )
            except SQLAlchemyError as exc:
                logger.error(f"Error linking author {author_id} to book {book_id}: {exc}")
                await transaction.rollback()
                raise StorageError(BULK_INSERT_FAILED) from exc

            await transaction.commit()
    except SQLAlchemyError as exc:
        # Connection, begin, rollback or commit failed; leaving the
        # connection context has already discarded the transaction.
        logger.error(f"Bulk insert of author and book aborted: {exc}")
        raise StorageError(BULK_INSERT_FAILED) from exc

    logger.info(f"Created author {author_id} and book {book_id} with link")
    return author_id, book_id


# =============================================================================
# Join-and-Group
# =============================================================================
def book_authors_join() -> Select:
    """
    Flat join: one row per link with both names.

    SELECT book_authors.author_id, book_authors.book_id,
           authors.name AS author_name, books.name AS book_name
    FROM book_authors
        JOIN books ON books.book_id = book_authors.book_id
        JOIN authors ON authors.author_id = book_authors.author_id
    """
    return (
        select(
            book_authors.c.author_id,
            book_authors.c.book_id,
            author_table.c.name.label("author_name"),
            book_table.c.name.label("book_name"),
        )
        .select_from(book_authors)
        .join(book_table, book_table.c.book_id == book_authors.c.book_id)
        .join(author_table, author_table.c.author_id == book_authors.c.author_id)
    )


def group_authors_with_books(rows: Iterable[Row]) -> Authors:
    """
    Fold flat join rows into authors, each carrying its books.

    The first row seen for an author supplies its name; every row appends
    one book, in row order.
    """
    authors: Authors = {}
    for row in rows:
        author = authors.get(row.author_id)
        if author is None:
            author = AuthorWithBooks(author_id=row.author_id, name=row.author_name)
            authors[row.author_id] = author
        author.books.append(BookRead(book_id=row.book_id, name=row.book_name))
    return authors


def group_books_with_authors(rows: Iterable[Row]) -> Books:
    """Fold flat join rows into books, each carrying its authors."""
    books: Books = {}
    for row in rows:
        book = books.get(row.book_id)
        if book is None:
            book = BookWithAuthors(book_id=row.book_id, name=row.book_name)
            books[row.book_id] = book
        book.authors.append(AuthorRead(author_id=row.author_id, name=row.author_name))
    return books


async def fetch_links(engine: AsyncEngine, order_by_author: bool = True) -> list[Row]:
    """
    Run the join once and return every flat row.

    Rows are ordered by the owning side's id, then the other side's id, so
    grouped results come out in a stable order.
    """
    stmt = book_authors_join()
    if order_by_author:
        stmt = stmt.order_by(book_authors.c.author_id, book_authors.c.book_id)
    else:
        stmt = stmt.order_by(book_authors.c.book_id, book_authors.c.author_id)

    with storage_errors("fetch author-book links"):
        async with engine.connect() as conn:
            result = await conn.execute(stmt)
            rows = result.all()

    logger.debug(f"Fetched {len(rows)} author-book link rows")
    return rows
