"""Prometheus metrics for catalog-sync.

Instruments are created once per process on first use of get_metrics().
With ENABLE_METRICS=false every instrument stays None and the record_*
helpers do nothing.

Exposed series:
- catalog_http_requests_total / catalog_http_request_duration_seconds
- catalog_store_call_duration_seconds{store,operation}
- catalog_cache_{hits,misses}_total{kind} and catalog_cache_errors_total{operation}
- catalog_sync_operations_total{operation,outcome}
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from catalog_sync.config import settings

logger = logging.getLogger(__name__)

HTTP_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
STORE_BUCKETS = (0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0)

_DOCUMENT_PATH = re.compile(r"^/documents/[^/]+$")


@dataclass
class MetricsRegistry:
    """Holder for the process-wide instruments."""

    http_requests_total: Any = None
    http_request_duration_seconds: Any = None
    store_call_duration_seconds: Any = None
    cache_hits_total: Any = None
    cache_misses_total: Any = None
    cache_errors_total: Any = None
    sync_operations_total: Any = None

    _initialized: bool = field(default=False, repr=False)

    def initialize(self) -> None:
        if self._initialized:
            return
        self._initialized = True

        if not settings.enable_metrics:
            logger.info("Metrics are disabled")
            return

        self.http_requests_total = Counter(
            "catalog_http_requests_total", "HTTP requests", ["method", "path", "status"]
        )
        self.http_request_duration_seconds = Histogram(
            "catalog_http_request_duration_seconds",
            "HTTP request latency",
            ["method", "path"],
            buckets=HTTP_BUCKETS,
        )
        self.store_call_duration_seconds = Histogram(
            "catalog_store_call_duration_seconds",
            "Record store, search index and cache call latency",
            ["store", "operation"],
            buckets=STORE_BUCKETS,
        )
        self.cache_hits_total = Counter("catalog_cache_hits_total", "Cache hits", ["kind"])
        self.cache_misses_total = Counter("catalog_cache_misses_total", "Cache misses", ["kind"])
        self.cache_errors_total = Counter(
            "catalog_cache_errors_total",
            "Cache failures treated as a miss or no-op",
            ["operation"],
        )
        self.sync_operations_total = Counter(
            "catalog_sync_operations_total",
            "Synchronization operations by outcome",
            ["operation", "outcome"],
        )

    @property
    def enabled(self) -> bool:
        return self.sync_operations_total is not None

    def generate_latest(self) -> bytes:
        if not self.enabled:
            return b"# Metrics disabled\n"
        return generate_latest(REGISTRY)


metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Return the process-wide registry, creating instruments on first call."""
    metrics_registry.initialize()
    return metrics_registry


class MetricsMiddleware(BaseHTTPMiddleware):
    """Count and time HTTP requests, skipping probes and scrapes."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        path = request.url.path
        if path.startswith(("/health", "/metrics")):
            return await call_next(request)

        metrics = get_metrics()
        route = self._normalize_path(path)
        status_code = 500
        start = time.perf_counter()
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            if metrics.enabled:
                metrics.http_requests_total.labels(request.method, route, status_code).inc()
                metrics.http_request_duration_seconds.labels(request.method, route).observe(
                    time.perf_counter() - start
                )

    def _normalize_path(self, path: str) -> str:
        """Collapse document ids so label cardinality stays bounded."""
        if _DOCUMENT_PATH.match(path):
            return "/documents/{id}"
        return path


def record_store_call(store: str, operation: str, duration: float) -> None:
    metrics = get_metrics()
    if metrics.enabled:
        metrics.store_call_duration_seconds.labels(store, operation).observe(duration)


def record_cache_hit(kind: str) -> None:
    metrics = get_metrics()
    if metrics.enabled:
        metrics.cache_hits_total.labels(kind).inc()


def record_cache_miss(kind: str) -> None:
    metrics = get_metrics()
    if metrics.enabled:
        metrics.cache_misses_total.labels(kind).inc()


def record_cache_error(operation: str) -> None:
    """Count a swallowed cache failure (get, set, delete, decode)."""
    metrics = get_metrics()
    if metrics.enabled:
        metrics.cache_errors_total.labels(operation).inc()


def record_sync_operation(operation: str, outcome: str) -> None:
    """Count a finished operation: index/search/get/delete by ok/invalid/not_found/error."""
    metrics = get_metrics()
    if metrics.enabled:
        metrics.sync_operations_total.labels(operation, outcome).inc()
