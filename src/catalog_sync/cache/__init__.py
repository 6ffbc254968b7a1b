"""Cache layer for catalog-sync.

Short-lived read-through cache (cache-aside) in front of the search index:
- Single-document entries are invalidated on write, never updated
- Search result pages expire after the configured TTL
- An unconfigured cache is a no-op NullCache, never an error
"""

from catalog_sync.cache.keys import CacheKeys
from catalog_sync.cache.redis import (
    DocumentCache,
    NullCache,
    RedisCache,
    close_cache,
    create_cache,
)

__all__ = [
    "CacheKeys",
    "DocumentCache",
    "NullCache",
    "RedisCache",
    "create_cache",
    "close_cache",
]
