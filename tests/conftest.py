"""Global pytest configuration and fixtures.

Provides in-memory stand-ins for the three stores so the synchronization
core and the HTTP surface can be exercised without MongoDB, Elasticsearch
or Redis:
- FakeRecordStore: tenant-filtered lookup by ObjectId
- FakeSearchIndex: id-keyed documents with weighted term scoring
- FakeCache: dict-backed cache with switchable failures
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

import pytest
from bson import ObjectId

from catalog_sync.cache.keys import CacheKeys
from catalog_sync.core.model import SearchHit, SearchResult
from catalog_sync.search.query import SearchQuery
from catalog_sync.sync.service import CatalogSync

FIELD_WEIGHTS = {"name": 3.0, "alias": 2.0, "description": 1.0}


class StoreDown(ConnectionError):
    pass


class FakeRecordStore:
    def __init__(self) -> None:
        self.records: dict[ObjectId, dict[str, Any]] = {}
        self.calls = 0
        self.fail = False

    def add(self, tenant_id: str, **fields: Any) -> str:
        oid = ObjectId()
        self.records[oid] = {"_id": oid, "tenantId": tenant_id, **fields}
        return str(oid)

    def update(self, document_id: str, **fields: Any) -> None:
        self.records[ObjectId(document_id)].update(fields)

    async def find_document(self, identifier: ObjectId, tenant_id: str) -> dict[str, Any] | None:
        self.calls += 1
        if self.fail:
            raise StoreDown("record store unavailable")
        record = self.records.get(identifier)
        if record is None or record.get("tenantId") != tenant_id:
            return None
        return dict(record)

    async def health_check(self) -> bool:
        return not self.fail


def _tokens(value: Any) -> list[str]:
    if not isinstance(value, str):
        return []
    return re.findall(r"\w+", value.lower())


def _timestamp(value: Any) -> float:
    if not value:
        return float("-inf")
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).timestamp()


class FakeSearchIndex:
    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.queries: list[SearchQuery] = []
        self.operations: list[tuple[str, str]] = []
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise StoreDown("search index unavailable")

    async def upsert(self, doc_id: str, source: dict[str, Any]) -> None:
        self._check()
        self.operations.append(("upsert", doc_id))
        self.documents[doc_id] = dict(source)

    async def get(self, doc_id: str) -> dict[str, Any] | None:
        self._check()
        self.operations.append(("get", doc_id))
        source = self.documents.get(doc_id)
        return dict(source) if source is not None else None

    async def delete(self, doc_id: str) -> bool:
        self._check()
        self.operations.append(("delete", doc_id))
        return self.documents.pop(doc_id, None) is not None

    def _score(self, source: dict[str, Any], terms: list[str]) -> float:
        if not terms:
            return 1.0
        score = 0.0
        for field, weight in FIELD_WEIGHTS.items():
            field_tokens = _tokens(source.get(field))
            score += weight * sum(1 for term in terms if term in field_tokens)
        return score

    async def search(self, query: SearchQuery) -> SearchResult:
        self._check()
        self.queries.append(query)
        terms = _tokens(query.text)
        matched = []
        for doc_id, source in self.documents.items():
            if source.get("tenantId") != query.tenant_id:
                continue
            if query.status and source.get("status") != query.status:
                continue
            score = self._score(source, terms)
            if score <= 0:
                continue
            matched.append((doc_id, score, source))

        matched.sort(key=lambda item: (-item[1], -_timestamp(item[2].get("modifiedOn"))))
        page = matched[query.offset : query.offset + query.size]
        hits = [
            SearchHit.model_validate({**source, "id": doc_id, "score": score})
            for doc_id, score, source in page
        ]
        return SearchResult(total=len(matched), hits=hits)

    async def health_check(self) -> bool:
        return not self.fail


class FakeCache:
    enabled = True

    def __init__(self) -> None:
        self.store: dict[str, bytes] = {}
        self.ttls: dict[str, int | None] = {}
        self.fail = False
        self.deleted: list[str] = []

    def _check(self) -> None:
        if self.fail:
            raise StoreDown("cache unavailable")

    async def get(self, key: str) -> bytes | None:
        self._check()
        return self.store.get(key)

    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl

    async def delete(self, key: str) -> None:
        self._check()
        self.deleted.append(key)
        self.store.pop(key, None)

    async def health_check(self) -> bool:
        return not self.fail

    async def close(self) -> None:
        return None


@pytest.fixture
def records() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def index() -> FakeSearchIndex:
    return FakeSearchIndex()


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def keys() -> CacheKeys:
    return CacheKeys("catelog:")


@pytest.fixture
def sync(
    records: FakeRecordStore, index: FakeSearchIndex, cache: FakeCache, keys: CacheKeys
) -> CatalogSync:
    return CatalogSync(records=records, index=index, cache=cache, keys=keys, ttl=300, timeout=1.0)


@pytest.fixture
def uncached_sync(records: FakeRecordStore, index: FakeSearchIndex, keys: CacheKeys) -> CatalogSync:
    return CatalogSync(records=records, index=index, cache=None, keys=keys, ttl=300, timeout=1.0)
