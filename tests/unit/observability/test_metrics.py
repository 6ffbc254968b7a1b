"""Tests for Prometheus metrics."""

from prometheus_client import REGISTRY

from catalog_sync.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    record_cache_hit,
    record_sync_operation,
)


def sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricsRegistry:
    """Tests for the global registry."""

    def test_initialization_is_idempotent(self) -> None:
        first = get_metrics()
        second = get_metrics()

        assert first is second
        assert first.cache_hits_total is not None

    def test_cache_hit_counter(self) -> None:
        get_metrics()
        before = sample("catalog_cache_hits_total", {"kind": "doc"})

        record_cache_hit("doc")

        assert sample("catalog_cache_hits_total", {"kind": "doc"}) == before + 1

    def test_sync_operation_counter(self) -> None:
        get_metrics()
        labels = {"operation": "search", "outcome": "ok"}
        before = sample("catalog_sync_operations_total", labels)

        record_sync_operation("search", "ok")

        assert sample("catalog_sync_operations_total", labels) == before + 1

    def test_exposition(self) -> None:
        output = get_metrics().generate_latest()
        assert b"catalog_sync_operations_total" in output


class TestPathNormalization:
    def test_document_ids_collapse(self) -> None:
        middleware = MetricsMiddleware.__new__(MetricsMiddleware)

        assert middleware._normalize_path("/documents/65f0c0ffee") == "/documents/{id}"
        assert middleware._normalize_path("/documents") == "/documents"
        assert middleware._normalize_path("/search") == "/search"
