"""
Expired session cleanup job.

Sessions are invalidated lazily: a record whose ``token_expiration`` is in
the past never verifies, but its hash stays on the document. This job
clears those stale fields. The request path does not depend on it.

Usage:
    Run via CRON:
        0 3 * * * cd /path/to/project && python -m jobs.session_reaper

    Or run directly:
        python -m jobs.session_reaper
"""

import asyncio
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class SessionReaperJob:
    """
    Clears session fields on accounts whose session has expired.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Args:
            db: Application database
        """
        self._users = db["users"]

    async def run(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Clear every expired session in one update.

        Returns:
            Job summary (times, matched/cleared counts, errors)
        """
        start_time = datetime.now(timezone.utc)
        now = now or start_time
        errors = []
        cleared = 0

        logger.info(f"Reaping sessions expired before {now.isoformat()}")

        try:
            result = await self._users.update_many(
                {
                    "token": {"$ne": None},
                    "token_expiration": {"$lte": now},
                },
                {
                    "$set": {
                        "token": None,
                        "token_expiration": None,
                        "date_updated": now,
                    }
                },
            )
            cleared = result.modified_count
            logger.info(f"Cleared {cleared} expired sessions")
        except PyMongoError as e:
            logger.error(f"Session reaping failed: {e}")
            errors.append(str(e))

        end_time = datetime.now(timezone.utc)

        return {
            "startTime": start_time.isoformat(),
            "endTime": end_time.isoformat(),
            "durationSeconds": (end_time - start_time).total_seconds(),
            "sessionsCleared": cleared,
            "errors": errors,
        }


async def main():
    """Main entry point for the session reaper job."""
    db_uri = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    db_name = os.getenv("MONGODB_DATABASE", "social")

    client = AsyncIOMotorClient(db_uri)
    job = SessionReaperJob(client[db_name])

    try:
        results = await job.run()

        print("\n=== Session Reaper Results ===")
        print(f"Start Time: {results['startTime']}")
        print(f"Duration: {results['durationSeconds']:.2f} seconds")
        print(f"Sessions Cleared: {results['sessionsCleared']}")

        if results["errors"]:
            print(f"\nErrors ({len(results['errors'])}):")
            for error in results["errors"]:
                print(f"  - {error}")

        sys.exit(1 if results["errors"] else 0)
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
