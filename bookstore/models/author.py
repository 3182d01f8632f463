"""
Author Model

Represents an author in the bookstore database.

SQLAlchemy 2.0 Features Used:
- mapped_column(): Define columns with full type support
- Mapped[]: Type hint wrapper for SQLAlchemy columns
"""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.database import Base


class Author(Base):
    """
    Author table.

    Table: authors

    The author_id is generated by the store on insert and never changes
    afterwards. Links to books live in the book_authors table.
    """

    __tablename__ = "authors"

    # primary_key=True on an Integer column gives a store-generated id
    author_id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"Author(author_id={self.author_id}, name='{self.name}')"
