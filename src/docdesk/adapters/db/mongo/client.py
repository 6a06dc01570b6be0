"""
MongoDB connection setup.

Turns ``DatabaseSettings`` into a store handle. A missing URI is not an
error at startup: the application runs with a ``StoreUnavailable`` handle,
reads come back empty and writes are refused.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import certifi
from motor.motor_asyncio import AsyncIOMotorClient

from docdesk.application.ports.collection_store import StoreHandle, StoreUnavailable
from docdesk.core.config import DatabaseSettings

from .collection_store import MongoCollectionStore

logger = logging.getLogger(__name__)


@dataclass
class MongoConnection:
    store: StoreHandle
    client: Optional[AsyncIOMotorClient] = None

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None


def connect(settings: DatabaseSettings) -> MongoConnection:
    """Create the motor client (lazy; no round-trip happens here)."""
    if not settings.is_configured:
        logger.error(
            "MongoDB configuration is incomplete. Set MONGO_URI to enable the document store."
        )
        return MongoConnection(store=StoreUnavailable("MONGO_URI is not set"))

    # Enable TLS only for Atlas SRV URIs
    if settings.uri.startswith("mongodb+srv://"):
        client = AsyncIOMotorClient(
            settings.uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    else:
        client = AsyncIOMotorClient(
            settings.uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        )

    logger.info(f"MongoDB client created for database '{settings.db_name}'")
    return MongoConnection(store=MongoCollectionStore(client[settings.db_name]), client=client)


async def ping(connection: MongoConnection) -> bool:
    """Round-trip to the server; False when unavailable or unreachable."""
    if connection.client is None:
        return False
    try:
        await connection.client.admin.command("ping")
    except Exception as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False
    return True
