"""
Author Pydantic Schemas

Value types handed back to callers by the author operations. They are built
from result rows (from_attributes=True), never persisted directly.
"""

from pydantic import BaseModel, ConfigDict, Field

from bookstore.schemas.book import BookRead


class AuthorRead(BaseModel):
    """
    A single author with just its id and name.

    Usage:
        row = (await conn.execute(stmt)).one()
        author = AuthorRead.model_validate(row)
    """

    model_config = ConfigDict(from_attributes=True)

    author_id: int = Field(..., description="Store-generated author id")
    name: str = Field(..., description="Author's full name")


class AuthorWithBooks(AuthorRead):
    """
    An author together with the books linked to it.

    Assembled in memory from a flat join on every query. The books keep the
    order in which the join returned them.
    """

    books: list[BookRead] = Field(default_factory=list)


# Insertion-ordered: keys follow the first appearance of each author in the
# join rows.
Authors = dict[int, AuthorWithBooks]
