"""Async MongoDB client for the record store.

Uses pymongo's native asyncio client. The client owns the connection pool
and is created once at startup; request handlers only borrow it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pymongo import AsyncMongoClient

if TYPE_CHECKING:
    from pymongo.asynchronous.collection import AsyncCollection

    from catalog_sync.config import Settings


def create_mongo_client(settings: Settings) -> AsyncMongoClient[dict[str, Any]]:
    """Create the MongoDB client with pool and timeout settings."""
    timeout_ms = int(settings.store_timeout_seconds * 1000)
    return AsyncMongoClient(
        settings.mongodb_uri,
        maxPoolSize=settings.mongodb_max_pool_size,
        serverSelectionTimeoutMS=timeout_ms,
        connectTimeoutMS=timeout_ms,
        socketTimeoutMS=timeout_ms,
        tz_aware=True,
    )


def get_collection(
    client: AsyncMongoClient[dict[str, Any]], settings: Settings
) -> AsyncCollection[dict[str, Any]]:
    """Get the catalog collection."""
    return client[settings.mongodb_db][settings.mongodb_collection]


async def health_check(client: AsyncMongoClient[dict[str, Any]]) -> bool:
    """Check MongoDB connectivity."""
    try:
        await client.admin.command("ping")
        return True
    except Exception:
        return False
