"""API routers for catalog-sync."""

from catalog_sync.api.routers import documents, health, metrics, search

__all__ = [
    "documents",
    "health",
    "metrics",
    "search",
]
