"""Record store adapter.

The record store is the system of record for catalog documents. It is
consumed as a black box: a tenant-filtered lookup by identifier.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from bson import ObjectId

from catalog_sync.persistence.db import health_check
from catalog_sync.tenancy.isolation import TenantFilter

if TYPE_CHECKING:
    from pymongo import AsyncMongoClient
    from pymongo.asynchronous.collection import AsyncCollection


class RecordStore(Protocol):
    async def find_document(
        self, identifier: ObjectId, tenant_id: str
    ) -> dict[str, Any] | None: ...

    async def health_check(self) -> bool: ...


class MongoRecordStore:
    """Record store backed by a MongoDB collection."""

    def __init__(
        self,
        collection: AsyncCollection[dict[str, Any]],
        client: AsyncMongoClient[dict[str, Any]] | None = None,
    ):
        self.collection = collection
        self.client = client

    async def find_document(self, identifier: ObjectId, tenant_id: str) -> dict[str, Any] | None:
        """Fetch a document by id, scoped to the tenant.

        The tenant predicate is part of the lookup, so another tenant's
        document comes back as None exactly like a missing one.
        """
        query = {"_id": identifier, **TenantFilter.record(tenant_id)}
        return await self.collection.find_one(query)

    async def health_check(self) -> bool:
        if self.client is None:
            return True
        return await health_check(self.client)
