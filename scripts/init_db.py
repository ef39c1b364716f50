#!/usr/bin/env python3
"""
Bring the database schema up to date.

Usage:
    python scripts/init_db.py               # alembic upgrade head
    python scripts/init_db.py --create-all  # create tables directly (local development)
"""

import argparse
import asyncio
import sys

import dotenv
from alembic import command
from alembic.config import Config

dotenv.load_dotenv()

from hands_of_hope.database import engine  # noqa: E402
from hands_of_hope.models import metadata  # noqa: E402


def run_migrations() -> None:
    """Upgrade to the latest alembic revision."""
    command.upgrade(Config("alembic.ini"), "head")


async def create_all() -> None:
    """Create every table from the table definitions."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialize the database schema")
    parser.add_argument(
        "--create-all",
        action="store_true",
        help="Skip migrations and create tables directly",
    )
    args = parser.parse_args()

    try:
        if args.create_all:
            asyncio.run(create_all())
        else:
            run_migrations()
    except Exception as e:
        print(f"✗ Database initialization failed: {e}", file=sys.stderr)
        sys.exit(1)

    print("✓ Database initialized successfully!")


if __name__ == "__main__":
    main()
