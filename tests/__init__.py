"""
Test Suite for the Bookstore Data-Access Layer

Test Organization:
- conftest.py: Shared fixtures (in-memory database, sample data)
- test_authors.py: Author CRUD
- test_books.py: Book CRUD
- test_relations.py: Dual create-and-link and join-and-group
- test_seeds.py: Single-transaction seeding
- test_config.py: Settings
- test_database.py: Connection provider and table helpers

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=bookstore --cov-report=html

    # Run specific file
    pytest tests/test_relations.py

    # Run with verbose output
    pytest -v
"""
