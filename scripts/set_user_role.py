#!/usr/bin/env python3
"""
Set the role of an existing account.

Accounts are always created with the "user" role; this is the only way to
grant (or remove) admin access.

Usage:
    python scripts/set_user_role.py someone@example.com admin
    python scripts/set_user_role.py someone@example.com user

Environment variables required:
    MONGODB_URI - MongoDB connection string
    MONGODB_DATABASE - Database name (default: social)
"""

import asyncio
import os
import sys
from datetime import datetime, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient

from social.users.models import Role

load_dotenv()


async def set_role(email: str, role: Role) -> int:
    mongodb_uri = os.getenv("MONGODB_URI")
    database_name = os.getenv("MONGODB_DATABASE", "social")

    if not mongodb_uri:
        print("ERROR: MONGODB_URI environment variable not set")
        return 1

    client = AsyncIOMotorClient(mongodb_uri)
    try:
        users = client[database_name]["users"]
        result = await users.update_one(
            {"email": email.strip().lower()},
            {"$set": {"role": role.value, "date_updated": datetime.now(timezone.utc)}},
        )
        if result.matched_count == 0:
            print(f"ERROR: no account for {email}")
            return 1
        print(f"{email} -> {role.value}")
        return 0
    finally:
        client.close()


def main() -> int:
    if len(sys.argv) != 3:
        print(__doc__)
        return 2
    try:
        role = Role(sys.argv[2].lower())
    except ValueError:
        print(f"ERROR: role must be one of {[r.value for r in Role]}")
        return 2
    return asyncio.run(set_role(sys.argv[1], role))


if __name__ == "__main__":
    sys.exit(main())
