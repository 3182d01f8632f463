"""
Services Package

Async functions that talk to the store. Each takes the pooled AsyncEngine
from bookstore.database.connect() as its first argument.

Current services:
- authors.py: Author CRUD, author-first dual create, authors with books
- books.py: Book CRUD, book-first dual create, books with authors
- relations.py: Shared transactional dual insert and join-and-group logic
- seeds.py: Single-transaction loading of the sample dataset
"""
