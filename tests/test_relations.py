"""
Tests for the Relation Composer

Covers the all-or-nothing dual create-and-link transaction and the
join-and-group queries, through both the author and book entry points.
"""

import logging
from types import SimpleNamespace

import pytest
from sqlalchemy import insert, text

from bookstore.exceptions import StorageError
from bookstore.models import book_authors
from bookstore.schemas import AuthorRead, AuthorWithBooks, BookRead
from bookstore.services.authors import (
    create_author,
    create_author_and_book,
    get_all_authors,
    get_all_authors_with_books,
    get_author_by_id,
)
from bookstore.services.books import (
    create_book,
    create_book_and_author,
    get_all_books,
    get_all_books_with_authors,
    get_book_by_id,
)
from bookstore.services.relations import (
    group_authors_with_books,
    group_books_with_authors,
)


async def link(engine, author_id: int, book_id: int) -> None:
    async with engine.begin() as conn:
        await conn.execute(insert(book_authors).values(author_id=author_id, book_id=book_id))


# =============================================================================
# Dual Create-and-Link
# =============================================================================


@pytest.mark.asyncio
class TestCreateAuthorAndBook:
    """Tests for create_author_and_book and create_book_and_author."""

    async def test_creates_both_rows_and_link(self, engine):
        """All three rows exist after a successful call."""
        author_id, book_id = await create_author_and_book(engine, "Jane Austen", "Emma")

        assert (await get_author_by_id(engine, author_id)).name == "Jane Austen"
        assert (await get_book_by_id(engine, book_id)).name == "Emma"

        authors = await get_all_authors_with_books(engine)
        assert [b.book_id for b in authors[author_id].books] == [book_id]

    async def test_jane_austen_scenario(self, engine):
        """The first bulk insert into empty tables yields ids 1 and 1."""
        ids = await create_author_and_book(engine, "Jane Austen", "Pride and Prejudice")

        assert ids == (1, 1)
        authors = await get_all_authors_with_books(engine)
        assert {k: v.model_dump() for k, v in authors.items()} == {
            1: {
                "author_id": 1,
                "name": "Jane Austen",
                "books": [{"book_id": 1, "name": "Pride and Prejudice"}],
            }
        }

    async def test_book_first_returns_book_id_first(self, engine):
        """create_book_and_author returns (book_id, author_id)."""
        await create_author(engine, "Somebody Else")

        book_id, author_id = await create_book_and_author(engine, "Good Omens", "Terry Pratchett")

        assert (await get_book_by_id(engine, book_id)).name == "Good Omens"
        assert (await get_author_by_id(engine, author_id)).name == "Terry Pratchett"
        books = await get_all_books_with_authors(engine)
        assert books[book_id].authors == [AuthorRead(author_id=author_id, name="Terry Pratchett")]

    async def test_failed_author_insert_rolls_back_book(self, engine):
        """A rejected author leaves no orphan book behind."""
        with pytest.raises(StorageError, match="bulk insert failed"):
            await create_author_and_book(engine, None, "Emma")

        assert await get_all_authors(engine) == []
        assert await get_all_books(engine) == []

    async def test_failed_book_insert_rolls_back_author(self, engine):
        """A rejected book leaves no orphan author behind."""
        with pytest.raises(StorageError, match="bulk insert failed"):
            await create_book_and_author(engine, None, "Jane Austen")

        assert await get_all_authors(engine) == []
        assert await get_all_books(engine) == []

    async def test_failed_link_rolls_back_both_parents(self, engine):
        """If the link cannot be written, neither parent row persists."""
        async with engine.begin() as conn:
            await conn.execute(text("DROP TABLE book_authors"))

        with pytest.raises(StorageError, match="bulk insert failed") as exc_info:
            await create_author_and_book(engine, "Jane Austen", "Emma")

        assert exc_info.value.__cause__ is not None
        assert await get_all_authors(engine) == []
        assert await get_all_books(engine) == []

    async def test_each_parent_failure_is_logged(self, engine, caplog):
        """Both parent errors are reported, not just the first."""
        caplog.set_level(logging.ERROR, logger="bookstore.services.relations")

        with pytest.raises(StorageError):
            await create_author_and_book(engine, None, None)

        messages = [record.getMessage() for record in caplog.records]
        assert any(m.startswith("Error inserting author") for m in messages)
        assert any(m.startswith("Error inserting book") for m in messages)

    async def test_failure_leaves_existing_rows_alone(self, engine, sample_author):
        """A rolled back bulk insert does not touch earlier commits."""
        with pytest.raises(StorageError):
            await create_author_and_book(engine, "Jane Austen", None)

        authors = await get_all_authors(engine)
        assert [a.author_id for a in authors] == [sample_author]


# =============================================================================
# Join-and-Group
# =============================================================================


@pytest.mark.asyncio
class TestGetAllWithRelation:
    """Tests for get_all_authors_with_books and get_all_books_with_authors."""

    async def test_empty_join_returns_empty_mapping(self, engine):
        """No links means an empty mapping, not an error."""
        assert await get_all_authors_with_books(engine) == {}
        assert await get_all_books_with_authors(engine) == {}

    async def test_author_without_books_is_excluded(self, engine, sample_author):
        """Only authors with at least one link appear."""
        author_id, _ = await create_author_and_book(engine, "Jane Austen", "Emma")

        authors = await get_all_authors_with_books(engine)

        assert list(authors) == [author_id]
        assert sample_author not in authors

    async def test_book_without_authors_is_excluded(self, engine, sample_book):
        """Only books with at least one link appear."""
        book_id, _ = await create_book_and_author(engine, "Emma", "Jane Austen")

        books = await get_all_books_with_authors(engine)

        assert list(books) == [book_id]
        assert sample_book not in books

    async def test_groups_many_to_many(self, engine):
        """Each side collects all of its linked counterparts."""
        pratchett = await create_author(engine, "Terry Pratchett")
        gaiman = await create_author(engine, "Neil Gaiman")
        good_omens = await create_book(engine, "Good Omens")
        american_gods = await create_book(engine, "American Gods")
        await link(engine, pratchett, good_omens)
        await link(engine, gaiman, good_omens)
        await link(engine, gaiman, american_gods)

        authors = await get_all_authors_with_books(engine)
        books = await get_all_books_with_authors(engine)

        assert authors[gaiman] == AuthorWithBooks(
            author_id=gaiman,
            name="Neil Gaiman",
            books=[
                BookRead(book_id=good_omens, name="Good Omens"),
                BookRead(book_id=american_gods, name="American Gods"),
            ],
        )
        assert [b.name for b in authors[pratchett].books] == ["Good Omens"]
        assert [a.name for a in books[good_omens].authors] == ["Terry Pratchett", "Neil Gaiman"]
        assert [a.name for a in books[american_gods].authors] == ["Neil Gaiman"]


class TestGrouping:
    """Tests for the pure row-folding helpers."""

    rows = [
        SimpleNamespace(author_id=2, book_id=10, author_name="Neil Gaiman", book_name="Good Omens"),
        SimpleNamespace(author_id=1, book_id=10, author_name="Terry Pratchett", book_name="Good Omens"),
        SimpleNamespace(author_id=2, book_id=11, author_name="N. Gaiman", book_name="American Gods"),
    ]

    def test_authors_keep_first_seen_order_and_name(self):
        """Keys follow first appearance; the first row names the author."""
        authors = group_authors_with_books(self.rows)

        assert list(authors) == [2, 1]
        assert authors[2].name == "Neil Gaiman"
        assert [b.book_id for b in authors[2].books] == [10, 11]

    def test_books_collect_authors_in_row_order(self):
        """Each row appends one author to its book."""
        books = group_books_with_authors(self.rows)

        assert list(books) == [10, 11]
        assert [a.author_id for a in books[10].authors] == [2, 1]
        assert books[11].authors == [AuthorRead(author_id=2, name="N. Gaiman")]

    def test_no_rows(self):
        """Folding nothing gives an empty mapping."""
        assert group_authors_with_books([]) == {}
        assert group_books_with_authors([]) == {}
