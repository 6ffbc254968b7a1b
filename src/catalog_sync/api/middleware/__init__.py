"""Middleware for the catalog-sync API.

- Correlation context for request tracing
"""

from catalog_sync.api.middleware.correlation import CorrelationMiddleware

__all__ = [
    "CorrelationMiddleware",
]
