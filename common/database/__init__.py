"""
Database module - async MongoDB connectivity (Motor + Beanie).

Usage:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(uri, database_name)
    users = db.db["users"]
"""

from common.database.mongodb import MongoDB

__all__ = [
    "MongoDB",
]
