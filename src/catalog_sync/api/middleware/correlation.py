"""Request correlation for catalog-sync.

Every request gets a request id (taken from ``x-request-id`` or generated)
and a correlation id (``x-correlation-id``, else the request id). Both are
bound to the logging context for the duration of the request and echoed
back on the response.
"""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from catalog_sync.observability.logging import LogContext

REQUEST_ID_HEADER = "x-request-id"
CORRELATION_ID_HEADER = "x-correlation-id"


def resolve_ids(request: Request) -> tuple[str, str]:
    """Return (request_id, correlation_id) for an inbound request."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    correlation_id = request.headers.get(CORRELATION_ID_HEADER) or request_id
    return request_id, correlation_id


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind request and correlation ids to logs and response headers."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id, correlation_id = resolve_ids(request)
        request.state.request_id = request_id

        with LogContext(request_id=request_id, correlation_id=correlation_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
