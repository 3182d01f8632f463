#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with the sample authors, books and links.

USAGE:
    # From the project root with the venv activated
    python scripts/seed_data.py

    # Drop and recreate the tables first
    python scripts/seed_data.py --drop

This script:
1. Loads settings (DATABASE_URL etc. from the environment or .env)
2. Connects to the database
3. Creates the tables if they don't exist
4. Runs the three seed loads in one transaction
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bookstore.config import get_settings
from bookstore.database import connect, create_tables, drop_tables
from bookstore.exceptions import StorageError
from bookstore.services.authors import get_all_authors_with_books
from bookstore.services.books import get_all_books
from bookstore.services.seeds import load_fixtures, seed_database


async def run(drop_existing: bool = False) -> None:
    """
    Connect, prepare the schema and seed.

    Args:
        drop_existing: If True, drops all tables before seeding.
    """
    settings = get_settings()
    engine = await connect(settings)

    try:
        if drop_existing:
            print("Dropping existing tables...")
            await drop_tables(engine)
        await create_tables(engine)

        await seed_database(engine, load_fixtures(settings.seed_sql_dir))

        authors = await get_all_authors_with_books(engine)
        books = await get_all_books(engine)
        links = sum(len(author.books) for author in authors.values())

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors with books: {len(authors)}")
        print(f"  - Books: {len(books)}")
        print(f"  - Links: {links}")
    finally:
        await engine.dispose()


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the bookstore database")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="drop all tables before seeding",
    )
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        asyncio.run(run(drop_existing=args.drop))
    except StorageError as e:
        print(f"Error seeding database: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
