"""Search index layer: tenant-scoped queries and the Elasticsearch adapter."""

from catalog_sync.search.index import (
    INDEX_MAPPINGS,
    ElasticsearchIndex,
    SearchIndex,
    create_elasticsearch,
    parse_search_response,
)
from catalog_sync.search.query import DEFAULT_OFFSET, DEFAULT_SIZE, SearchQuery

__all__ = [
    "DEFAULT_OFFSET",
    "DEFAULT_SIZE",
    "INDEX_MAPPINGS",
    "ElasticsearchIndex",
    "SearchIndex",
    "SearchQuery",
    "create_elasticsearch",
    "parse_search_response",
]
