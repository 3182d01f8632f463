"""
Bookstore Data-Access Package

Async data access for authors, books and the many-to-many links between
them, on top of SQLAlchemy's asyncio extension.

Package Structure:
- config.py: Configuration using Pydantic Settings
- database.py: Connection provider and table bootstrap helpers
- exceptions.py: StorageError and SQLAlchemy error translation
- models/: SQLAlchemy table models
- schemas/: Pydantic value types returned to callers
- services/: CRUD, relation composer and seeder
- sql/: Seed fixture files
"""

__version__ = "0.1.0"
