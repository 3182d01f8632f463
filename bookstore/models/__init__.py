"""
SQLAlchemy Models Package

Table models for the bookstore:
- Author <-> Book: Many-to-Many through the book_authors table

Import all models here so that Base.metadata knows every table.
"""

from bookstore.models.author import Author
from bookstore.models.book import Book, book_authors

# Core tables, for statements run on plain connections
author_table = Author.__table__
book_table = Book.__table__

__all__ = [
    "Author",
    "Book",
    "book_authors",
    "author_table",
    "book_table",
]
