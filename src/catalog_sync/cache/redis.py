"""Redis cache implementation for catalog-sync.

Provides async key/value operations with expiry over a Redis Cluster.
Uses the redis-py async cluster client, created once at startup and shared
by every request.

When REDIS_CLUSTER_NODES is not configured the factory returns a NullCache,
so callers never branch on whether caching is enabled.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Protocol, cast

from redis.asyncio.cluster import ClusterNode, RedisCluster

if TYPE_CHECKING:
    from catalog_sync.config import Settings

logger = logging.getLogger(__name__)

# Default TTL (5 minutes)
DEFAULT_TTL = 300


class DocumentCache(Protocol):
    """Key/value store with expiry used by the synchronization core."""

    enabled: bool

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def health_check(self) -> bool: ...

    async def close(self) -> None: ...


class NullCache:
    """Cache used when no cluster is configured: every read misses."""

    enabled = False

    async def get(self, key: str) -> bytes | None:
        return None

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class RedisCache:
    """Cache operations backed by a Redis (Cluster) client.

    Values are opaque bytes; serialization is the caller's concern.
    """

    enabled = True

    def __init__(self, client: RedisCluster, ttl: int = DEFAULT_TTL):
        self.client = client
        self.ttl = ttl

    async def get(self, key: str) -> bytes | None:
        return cast(bytes | None, await self.client.get(key))

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        await self.client.set(key, value, ex=ttl or self.ttl)

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def health_check(self) -> bool:
        """Check Redis connectivity."""
        try:
            await cast(Awaitable[bool], self.client.ping())
            return True
        except Exception:
            return False

    async def close(self) -> None:
        await self.client.aclose()


def create_redis_cluster(settings: Settings) -> RedisCluster:
    """Build the cluster client from settings.

    Connections are opened lazily on the first command.
    """
    startup_nodes = [ClusterNode(host, port) for host, port in settings.redis_nodes()]
    return RedisCluster(
        startup_nodes=startup_nodes,
        username=settings.redis_username or None,
        password=settings.redis_password or None,
        ssl=settings.redis_tls,
        decode_responses=False,  # We're storing bytes
        socket_timeout=settings.store_timeout_seconds,
        socket_connect_timeout=settings.store_timeout_seconds,
    )


def create_cache(settings: Settings) -> DocumentCache:
    """Select the cache implementation for the current configuration."""
    nodes = settings.redis_nodes()
    if not nodes:
        logger.info("REDIS_CLUSTER_NODES not set; cache disabled")
        return NullCache()

    client = create_redis_cluster(settings)
    logger.info(f"Redis Cluster configured with {len(nodes)} node(s)")
    return RedisCache(client, ttl=settings.redis_ttl_seconds)


async def close_cache(cache: DocumentCache) -> None:
    """Close cache connections."""
    await cache.close()
