#!/usr/bin/env python3
"""
Create the super-admin account.

Usage:
    python scripts/create_admin.py <username> <email>
    python scripts/create_admin.py <username> <email> --password 'S3cret!pass'

The password is prompted for when not given. Only one super-admin may exist;
further admins are created from the dashboard by the super-admin.

Environment Variables:
    DATABASE_URL and the other settings read by hands_of_hope.config
"""

import argparse
import asyncio
import getpass
import sys

import dotenv

dotenv.load_dotenv()

from hands_of_hope.core.exceptions import UserExistsException  # noqa: E402
from hands_of_hope.database import AsyncSessionLocal, engine  # noqa: E402
from hands_of_hope.services.admin_service import AdminService  # noqa: E402

MIN_PASSWORD_LENGTH = 8


async def create_super_admin(username: str, email: str, password: str) -> dict:
    """Insert the super-admin row."""
    try:
        async with AsyncSessionLocal() as session:
            return await AdminService.create_super_admin(session, username, email, password)
    finally:
        await engine.dispose()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create the super-admin account")
    parser.add_argument("username", help="Login name")
    parser.add_argument("email", help="Address for reset and approval codes")
    parser.add_argument("--password", help="Password (prompted when omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Error: password must be at least {MIN_PASSWORD_LENGTH} characters", file=sys.stderr)
        sys.exit(1)

    try:
        admin = asyncio.run(create_super_admin(args.username, args.email, password))
    except UserExistsException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    print("✓ Super admin created!")
    print(f"  ID:       {admin['id']}")
    print(f"  Username: {admin['username']}")
    print(f"  Email:    {admin['email']}")


if __name__ == "__main__":
    main()
