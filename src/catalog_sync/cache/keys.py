"""Cache key schema for catalog-sync.

Key formats (colon-delimited, namespaced by a configurable prefix):
- single document: {prefix}doc:{tenant_id}:{identifier}
- search results:  {prefix}search:{tenant_id}:{offset}:{size}:{status_or_empty}:{query}

The prefix carries its own trailing separator (default "catelog:").
Search keys put the raw query text last, so any text, including text that
contains colons, yields a distinct key for every distinct request.
"""

from __future__ import annotations

DEFAULT_PREFIX = "catelog:"


class CacheKeys:
    """Cache key generator bound to a key prefix."""

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        self.prefix = prefix

    def document(self, tenant_id: str, identifier: str) -> str:
        """Key for a single cached document."""
        return f"{self.prefix}doc:{tenant_id}:{identifier}"

    def search(
        self,
        tenant_id: str,
        offset: int,
        size: int,
        status: str | None,
        query: str,
    ) -> str:
        """Key for a cached search result page."""
        return f"{self.prefix}search:{tenant_id}:{offset}:{size}:{status or ''}:{query}"
