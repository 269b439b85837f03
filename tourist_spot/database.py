"""
Tourist Spot API — MongoDB Connection Management
=================================================

What:  Async MongoDB client, collection handle, and lifecycle helpers.
How:   Wraps pymongo's AsyncMongoClient (Stable API v1, strict) in a small
       object that the lifespan handler constructs, connects, stores on
       `app.state`, and closes on shutdown.
Who:   Built by main.lifespan; the collection is handed to TouristSpotService
       and the object itself to the health check.

Connection Pooling:
    AsyncMongoClient keeps its own connection pool (maxPoolSize=100 by
    default) and is safe to share between concurrent requests. One client is
    created per process.
"""

import logging
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.server_api import ServerApi

from tourist_spot.config import Settings

logger = logging.getLogger(__name__)


class MongoDatabase:
    """
    Owns the AsyncMongoClient for the lifetime of the application.

    Lifecycle:
        1. __init__: client is created (no network I/O yet)
        2. connect(): pings the deployment so bad credentials fail at startup
        3. collection: handle for the tourist-spot collection
        4. close(): returns every pooled connection
    """

    def __init__(self, settings: Settings, client: Optional[AsyncMongoClient] = None):
        self._settings = settings
        self.client = client or AsyncMongoClient(
            settings.database_url,
            server_api=ServerApi("1", strict=True, deprecation_errors=True),
        )
        self.db = self.client[settings.db_name]

    @property
    def collection(self) -> AsyncCollection:
        return self.db[self._settings.collection_name]

    async def connect(self) -> None:
        """Ping the admin database; raises the driver error if unreachable."""
        await self.client.admin.command("ping")
        logger.info("Pinged your deployment. Connected to MongoDB database '%s'", self.db.name)

    async def ping(self) -> bool:
        """Lightweight liveness probe used by GET /health."""
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed: %s", str(e))
            return False

    async def close(self) -> None:
        await self.client.close()
        logger.info("MongoDB client closed")
