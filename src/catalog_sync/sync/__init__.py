"""Synchronization core between the record store, search index and cache."""

from catalog_sync.sync.service import CatalogSync

__all__ = ["CatalogSync"]
