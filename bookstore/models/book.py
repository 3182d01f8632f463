"""
Book Model

Represents a book, plus the book_authors association table.

WHY an Association Table?
=========================
Authors and books are many-to-many. The junction table holds one row per
(author, book) pair with foreign keys to both sides; the pair itself is the
primary key, so the same link cannot be stored twice. There is no extra data
on the relation, so it is a plain Table rather than a mapped class.

No ON DELETE action is declared: deleting a linked author or book is
governed by the store's default foreign key behaviour.
"""

from sqlalchemy import Column, ForeignKey, Integer, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base


book_authors = Table(
    "book_authors",
    Base.metadata,
    Column(
        "author_id",
        Integer,
        ForeignKey("authors.author_id"),
        primary_key=True,
    ),
    Column(
        "book_id",
        Integer,
        ForeignKey("books.book_id"),
        primary_key=True,
    ),
)


class Book(Base):
    """
    Book table.

    Table: books
    """

    __tablename__ = "books"

    book_id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"Book(book_id={self.book_id}, name='{self.name}')"
