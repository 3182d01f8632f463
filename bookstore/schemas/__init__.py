"""
Pydantic Schemas Package

Value types returned by the services:
- AuthorRead / BookRead: a single row
- AuthorWithBooks / BookWithAuthors: nested views built from a join
- Authors / Books: id -> nested view mappings
"""

from bookstore.schemas.book import BookRead, BookWithAuthors, Books
from bookstore.schemas.author import AuthorRead, AuthorWithBooks, Authors

# BookWithAuthors refers to AuthorRead by name; resolve it now that both exist
BookWithAuthors.model_rebuild()

__all__ = [
    "AuthorRead",
    "AuthorWithBooks",
    "Authors",
    "BookRead",
    "BookWithAuthors",
    "Books",
]
