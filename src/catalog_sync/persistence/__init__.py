"""Persistence layer for catalog-sync.

This module provides:
- Async MongoDB client factory (pymongo asyncio API)
- Record store adapter with tenant-scoped lookups
"""

from catalog_sync.persistence.db import create_mongo_client, get_collection
from catalog_sync.persistence.records import MongoRecordStore, RecordStore

__all__ = [
    "create_mongo_client",
    "get_collection",
    "MongoRecordStore",
    "RecordStore",
]
