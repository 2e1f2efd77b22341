"""
MongoDB connection manager using Motor and Beanie.

Models are provided at connection time, keeping database infrastructure
separate from application-specific schemas. Collections that are accessed
through raw Motor calls (like ``users``) need no model registration.

Example:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(
        uri="mongodb://localhost:27017",
        database_name="social",
        document_models=[],
    )
    users = db.db["users"]
"""

import logging
from typing import List, Type, Optional

from beanie import init_beanie, Document
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class MongoDB:
    """Async MongoDB connection manager."""

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._initialized: bool = False

    async def connect(
        self,
        uri: str,
        database_name: str,
        document_models: Optional[List[Type[Document]]] = None,
    ) -> None:
        """
        Connect to MongoDB and initialize Beanie with the given models.

        Args:
            uri: MongoDB connection string
            database_name: Name of the database to use
            document_models: Beanie Document classes to register (may be empty)
        """
        document_models = document_models or []

        # Never log credentials embedded in the URI
        masked_uri = uri.split("@")[-1] if "@" in uri else uri
        logger.info(f"Connecting to MongoDB: {masked_uri}")
        logger.debug(f"Document models: {[m.__name__ for m in document_models]}")

        try:
            self._client = AsyncIOMotorClient(uri)
            self._database_name = database_name

            await init_beanie(
                database=self._client[database_name],
                document_models=document_models,
            )
            self._initialized = True
            logger.info(f"Connected to MongoDB database: {database_name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def disconnect(self) -> None:
        """Close the MongoDB connection."""
        if self._client:
            logger.info(f"Disconnecting from MongoDB database: {self._database_name}")
            self._client.close()
            self._client = None
            self._database_name = None
            self._initialized = False

    @property
    def is_connected(self) -> bool:
        return self._initialized

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get the underlying Motor database instance."""
        if not self._client or not self._database_name:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]
