"""Search endpoint.

GET /search?q=&from=&size=&status=

- q: free text; empty matches all documents of the tenant
- from / size: pagination (defaults 0 / 10, non-numeric values fall back)
- status: optional status filter override
"""

from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.responses import ORJSONResponse

from catalog_sync.api.deps import SyncDep, TenantDep, parse_offset, parse_size

router = APIRouter(tags=["Search"])


@router.get("/search")
async def search(
    tenant_id: TenantDep,
    sync: SyncDep,
    q: str | None = Query(default=None, description="Free-text query"),
    from_: str | None = Query(default=None, alias="from", description="Pagination offset"),
    size: str | None = Query(default=None, description="Page size"),
    status: str | None = Query(default=None, description="Status filter override"),
) -> ORJSONResponse:
    """Search the tenant's documents by text."""
    result = await sync.search(
        tenant_id,
        text=q or "",
        offset=parse_offset(from_),
        size=parse_size(size),
        status=status or None,
    )
    return ORJSONResponse(content=result.to_body())
