"""Tenant resolution from the inbound request.

The tenant is read from the X-Tenant-ID header, falling back to the
``tenant`` query parameter. Blank values count as missing. A missing tenant
is a request validation failure.
"""

from __future__ import annotations

from starlette.requests import Request

from catalog_sync.core.errors import ValidationError
from catalog_sync.tenancy.context import get_current_tenant_or_none

TENANT_HEADER = "X-Tenant-ID"
TENANT_QUERY_PARAM = "tenant"

MISSING_TENANT_MESSAGE = f"Missing tenant ({TENANT_HEADER} header or ?{TENANT_QUERY_PARAM}=)"


def extract_tenant(
    request: Request,
    header_name: str = TENANT_HEADER,
    query_param: str = TENANT_QUERY_PARAM,
) -> tuple[str, str] | None:
    """Extract (tenant_id, source) from a request, or None."""
    header_value = (request.headers.get(header_name) or "").strip()
    if header_value:
        return header_value, "header"
    query_value = (request.query_params.get(query_param) or "").strip()
    if query_value:
        return query_value, "query"
    return None


def validate_tenant(tenant_id: str | None) -> str:
    """Return the tenant if usable, raising ValidationError otherwise."""
    if tenant_id is None or not str(tenant_id).strip():
        raise ValidationError(MISSING_TENANT_MESSAGE)
    return str(tenant_id).strip()


def require_tenant_id(request: Request) -> str:
    """FastAPI dependency resolving the tenant for the current request.

    Prefers the tenant bound by TenantMiddleware, then reads the request
    directly.
    """
    bound = get_current_tenant_or_none()
    if bound:
        return bound
    extracted = extract_tenant(request)
    return validate_tenant(extracted[0] if extracted else None)
