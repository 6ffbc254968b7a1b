"""Tenant binding middleware.

Resolves the tenant once per request (X-Tenant-ID header, else ?tenant=)
and binds it to the tenant context and the logging context until the
response is produced. Operational paths (health, metrics, docs) are left
alone.

Example:
    app.add_middleware(TenantMiddleware, require_tenant=True)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from catalog_sync.api.errors import error_response
from catalog_sync.core.errors import ValidationError
from catalog_sync.observability.logging import LogContext
from catalog_sync.tenancy.context import TenantScope
from catalog_sync.tenancy.resolver import (
    MISSING_TENANT_MESSAGE,
    TENANT_HEADER,
    TENANT_QUERY_PARAM,
    extract_tenant,
)

logger = logging.getLogger(__name__)

UNSCOPED_PATHS = ("/health", "/metrics", "/docs", "/redoc", "/openapi.json")


class TenantMiddleware(BaseHTTPMiddleware):
    """Bind the request's tenant for handlers and log records.

    Args:
        app: The ASGI application
        header_name: Header carrying the tenant
        query_param: Query parameter read when the header is absent or blank
        require_tenant: Answer 400 before routing when no tenant is present;
            otherwise the require_tenant_id dependency reports it per route
        excluded_paths: Path prefixes that never carry a tenant
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = TENANT_HEADER,
        query_param: str = TENANT_QUERY_PARAM,
        require_tenant: bool = False,
        excluded_paths: Sequence[str] = UNSCOPED_PATHS,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name
        self.query_param = query_param
        self.require_tenant = require_tenant
        self.excluded_paths = tuple(excluded_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path.startswith(self.excluded_paths):
            return await call_next(request)

        resolved = extract_tenant(request, self.header_name, self.query_param)
        if resolved is None:
            if self.require_tenant:
                logger.debug(f"No tenant on {request.method} {request.url.path}")
                return error_response(ValidationError(MISSING_TENANT_MESSAGE), 400)
            return await call_next(request)

        tenant_id, source = resolved
        with TenantScope(tenant_id, source=source), LogContext(tenant_id=tenant_id):
            return await call_next(request)

