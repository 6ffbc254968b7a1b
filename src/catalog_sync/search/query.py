"""Tenant-scoped search query construction.

Ranking contract:
- Non-empty text: multi_match over name^3, alias^2, description
- Empty text: match_all
- Mandatory filters: tenantId, plus status when overridden
- Order: relevance score desc, then modifiedOn desc (explicit, not left to
  engine defaults)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from catalog_sync.tenancy.isolation import TenantFilter

DEFAULT_OFFSET = 0
DEFAULT_SIZE = 10

TEXT_FIELDS = ("name^3", "alias^2", "description")

SORT: list[dict[str, Any]] = [
    {"_score": {"order": "desc"}},
    {"modifiedOn": {"order": "desc", "missing": "_last"}},
]


@dataclass(frozen=True)
class SearchQuery:
    """A ranked, tenant-filtered page request against the search index."""

    tenant_id: str
    text: str = ""
    offset: int = DEFAULT_OFFSET
    size: int = DEFAULT_SIZE
    status: str | None = None

    def filters(self) -> list[dict[str, Any]]:
        clauses = [TenantFilter.term(self.tenant_id)]
        if self.status:
            clauses.append({"term": {"status": self.status}})
        return clauses

    def to_query(self) -> dict[str, Any]:
        if self.text:
            must: dict[str, Any] = {
                "multi_match": {"query": self.text, "fields": list(TEXT_FIELDS)}
            }
        else:
            must = {"match_all": {}}
        return {"bool": {"must": [must], "filter": self.filters()}}

    def search_params(self) -> dict[str, Any]:
        """Keyword arguments for AsyncElasticsearch.search()."""
        return {
            "from_": self.offset,
            "size": self.size,
            "query": self.to_query(),
            "sort": SORT,
            "track_total_hits": True,
        }
