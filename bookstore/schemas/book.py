"""
Book Pydantic Schemas
"""

from pydantic import BaseModel, ConfigDict, Field


class BookRead(BaseModel):
    """A single book with just its id and name."""

    model_config = ConfigDict(from_attributes=True)

    book_id: int = Field(..., description="Store-generated book id")
    name: str = Field(..., description="Book title")


class BookWithAuthors(BookRead):
    """
    A book together with the authors linked to it.

    Symmetric to AuthorWithBooks; see bookstore.schemas.author.
    """

    # Forward reference resolved in bookstore.schemas to avoid a circular import
    authors: list["AuthorRead"] = Field(default_factory=list)


Books = dict[int, BookWithAuthors]
