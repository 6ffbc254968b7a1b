"""Search index adapter over Elasticsearch.

The index is a black-box document store keyed by the stringified record id:
- upsert/delete wait for a refresh, so writes are visible to the next read
- get is by id only; tenant ownership is checked by the caller
- search runs a SearchQuery and returns hits in index order
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from elasticsearch import AsyncElasticsearch
from elasticsearch import NotFoundError as EsNotFoundError

from catalog_sync.core.model import SearchHit, SearchResult

if TYPE_CHECKING:
    from catalog_sync.config import Settings
    from catalog_sync.search.query import SearchQuery

logger = logging.getLogger(__name__)

INDEX_SETTINGS: dict[str, Any] = {
    "number_of_shards": 1,
    "number_of_replicas": 0,
}

INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "name": {"type": "text", "fields": {"keyword": {"type": "keyword"}}},
        "description": {"type": "text"},
        "alias": {"type": "text", "fields": {"keyword": {"type": "keyword"}}},
        "tenantId": {"type": "keyword"},
        "status": {"type": "keyword"},
        "createOn": {"type": "date"},
        "modifiedOn": {"type": "date"},
    }
}


class SearchIndex(Protocol):
    async def upsert(self, doc_id: str, source: dict[str, Any]) -> None: ...

    async def get(self, doc_id: str) -> dict[str, Any] | None: ...

    async def delete(self, doc_id: str) -> bool: ...

    async def search(self, query: SearchQuery) -> SearchResult: ...

    async def health_check(self) -> bool: ...


def create_elasticsearch(settings: Settings) -> AsyncElasticsearch:
    """Create the Elasticsearch client (basic auth only when a username is set)."""
    kwargs: dict[str, Any] = {"request_timeout": settings.store_timeout_seconds}
    if settings.elasticsearch_username:
        kwargs["basic_auth"] = (
            settings.elasticsearch_username,
            settings.elasticsearch_password or "",
        )
    return AsyncElasticsearch(settings.elasticsearch_node, **kwargs)


def parse_search_response(response: Any) -> SearchResult:
    """Convert a raw search response into a SearchResult.

    total comes from the index metadata ({"value": n} on Elasticsearch 7+,
    a bare integer before), falling back to the page length when absent.
    """
    body = getattr(response, "body", response)
    hits_block = body.get("hits") or {}
    hits = [
        SearchHit.model_validate(
            {**(hit.get("_source") or {}), "id": hit["_id"], "score": hit.get("_score")}
        )
        for hit in hits_block.get("hits") or []
    ]

    total = hits_block.get("total")
    if isinstance(total, dict):
        count = int(total.get("value", len(hits)))
    elif total:
        count = int(total)
    else:
        count = len(hits)
    return SearchResult(total=count, hits=hits)


class ElasticsearchIndex:
    """Search index backed by a single Elasticsearch index."""

    def __init__(self, client: AsyncElasticsearch, index: str):
        self.client = client
        self.index = index

    async def ensure_index(self) -> bool:
        """Create the index with the catalog mapping if it does not exist.

        Returns True if the index was created.
        """
        if await self.client.indices.exists(index=self.index):
            return False
        await self.client.indices.create(
            index=self.index,
            settings=INDEX_SETTINGS,
            mappings=INDEX_MAPPINGS,
        )
        logger.info(f'Created index "{self.index}"')
        return True

    async def upsert(self, doc_id: str, source: dict[str, Any]) -> None:
        await self.client.index(
            index=self.index,
            id=doc_id,
            document=source,
            refresh="wait_for",
        )

    async def get(self, doc_id: str) -> dict[str, Any] | None:
        try:
            response = await self.client.get(index=self.index, id=doc_id)
        except EsNotFoundError:
            return None
        body = getattr(response, "body", response)
        if not body.get("found"):
            return None
        return dict(body.get("_source") or {})

    async def delete(self, doc_id: str) -> bool:
        """Delete by id, waiting for visibility.

        Returns False if the document was already gone.
        """
        try:
            await self.client.delete(index=self.index, id=doc_id, refresh="wait_for")
        except EsNotFoundError:
            return False
        return True

    async def search(self, query: SearchQuery) -> SearchResult:
        response = await self.client.search(index=self.index, **query.search_params())
        return parse_search_response(response)

    async def health_check(self) -> bool:
        """Check Elasticsearch connectivity."""
        try:
            return bool(await self.client.ping())
        except Exception:
            return False

    async def close(self) -> None:
        await self.client.close()
