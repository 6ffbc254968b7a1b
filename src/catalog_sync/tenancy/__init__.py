"""Multi-tenancy module for catalog-sync.

Tenant isolation is folded into data filtering:
- TenantContext: Request-scoped tenant information
- TenantMiddleware / require_tenant_id: Resolve the tenant from requests
- TenantFilter / owned_by: Tenant predicates and ownership checks

Example:
    from fastapi import Depends, FastAPI
    from catalog_sync.tenancy import require_tenant_id
    from catalog_sync.tenancy.middleware import TenantMiddleware

    app = FastAPI()
    app.add_middleware(TenantMiddleware)

    @app.get("/search")
    async def search(tenant_id: str = Depends(require_tenant_id)):
        ...
"""

from catalog_sync.tenancy.context import (
    TenantContext,
    TenantScope,
    clear_tenant,
    get_current_tenant_or_none,
    get_tenant_context,
    set_tenant_context,
)
from catalog_sync.tenancy.isolation import TENANT_FIELD, TenantFilter, owned_by
from catalog_sync.tenancy.resolver import (
    MISSING_TENANT_MESSAGE,
    TENANT_HEADER,
    extract_tenant,
    require_tenant_id,
    validate_tenant,
)

__all__ = [
    # Context
    "TenantContext",
    "TenantScope",
    "get_current_tenant_or_none",
    "get_tenant_context",
    "set_tenant_context",
    "clear_tenant",
    # Resolution
    "MISSING_TENANT_MESSAGE",
    "TENANT_HEADER",
    "extract_tenant",
    "require_tenant_id",
    "validate_tenant",
    # Isolation
    "TENANT_FIELD",
    "TenantFilter",
    "owned_by",
]
