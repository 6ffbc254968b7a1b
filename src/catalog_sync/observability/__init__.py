"""Observability module for catalog-sync.

Provides metrics and structured logging:
- Prometheus metrics
- Request instrumentation
- JSON structured logging with correlation and tenant IDs
"""

from catalog_sync.observability.logging import (
    LogContext,
    configure_logging,
    correlation_id_var,
    request_id_var,
    tenant_id_var,
)
from catalog_sync.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    metrics_registry,
)

__all__ = [
    # Logging
    "configure_logging",
    "LogContext",
    "request_id_var",
    "correlation_id_var",
    "tenant_id_var",
    # Metrics
    "metrics_registry",
    "get_metrics",
    "MetricsMiddleware",
]
