"""Shared FastAPI dependencies for catalog-sync routers.

Provides:
- The shared CatalogSync instance built at startup
- Lenient pagination parsing (non-numeric values fall back to defaults)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from catalog_sync.core.errors import InternalError
from catalog_sync.search.query import DEFAULT_OFFSET, DEFAULT_SIZE
from catalog_sync.sync.service import CatalogSync
from catalog_sync.tenancy.resolver import require_tenant_id

MAX_PAGE_SIZE = 100


def get_sync(request: Request) -> CatalogSync:
    """FastAPI dependency returning the application's CatalogSync."""
    sync = getattr(request.app.state, "sync", None)
    if sync is None:
        raise InternalError("Service not initialized")
    return sync


SyncDep = Annotated[CatalogSync, Depends(get_sync)]
TenantDep = Annotated[str, Depends(require_tenant_id)]


def parse_int(raw: str | None, default: int) -> int:
    """Parse an integer query value, falling back to the default."""
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return default


def parse_offset(raw: str | None) -> int:
    return max(parse_int(raw, DEFAULT_OFFSET), 0)


def parse_size(raw: str | None) -> int:
    return min(max(parse_int(raw, DEFAULT_SIZE), 0), MAX_PAGE_SIZE)
