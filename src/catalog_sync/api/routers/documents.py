"""Document endpoints.

- POST   /documents        - Index a record-store document by id
- GET    /documents/{id}   - Get an indexed document (tenant-checked)
- DELETE /documents/{id}   - Remove an indexed document (tenant-checked)

The tenant comes from the X-Tenant-ID header or the ``tenant`` query
parameter. Documents owned by another tenant are reported as 404.
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from catalog_sync.api.deps import SyncDep, TenantDep

router = APIRouter(prefix="/documents", tags=["Documents"])


class IndexRequest(BaseModel):
    """Body of an index request."""

    id: str = Field(..., min_length=1, description="Record-store (MongoDB) document id")


@router.post("", status_code=201)
async def index_document(body: IndexRequest, tenant_id: TenantDep, sync: SyncDep) -> ORJSONResponse:
    """Index a record-store document into the search index."""
    result = await sync.index_document(tenant_id, body.id)
    return ORJSONResponse(status_code=201, content=result.model_dump())


@router.get("/{document_id}")
async def get_document(document_id: str, tenant_id: TenantDep, sync: SyncDep) -> ORJSONResponse:
    """Get an indexed document by id."""
    document = await sync.get_document(tenant_id, document_id)
    return ORJSONResponse(content=document.to_body())


@router.delete("/{document_id}", status_code=204)
async def delete_document(document_id: str, tenant_id: TenantDep, sync: SyncDep) -> Response:
    """Delete an indexed document by id."""
    await sync.delete_document(tenant_id, document_id)
    return Response(status_code=204)
