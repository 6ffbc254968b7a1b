"""Tests for health and metrics endpoints."""

from fastapi.testclient import TestClient

from catalog_sync.api.app import create_app


class TestHealthEndpoints:
    """Liveness and readiness probes."""

    def test_health(self, sync) -> None:
        client = TestClient(create_app(sync=sync))

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_live(self, sync) -> None:
        client = TestClient(create_app(sync=sync))
        assert client.get("/health/live").json() == {"status": "ok"}

    def test_ready_all_healthy(self, sync) -> None:
        client = TestClient(create_app(sync=sync))

        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        names = {c["name"]: c["status"] for c in body["components"]}
        assert names == {"records": "healthy", "index": "healthy", "cache": "healthy"}

    def test_ready_with_cache_disabled(self, uncached_sync) -> None:
        client = TestClient(create_app(sync=uncached_sync))

        response = client.get("/health/ready")

        assert response.status_code == 200
        names = {c["name"]: c["status"] for c in response.json()["components"]}
        assert names["cache"] == "disabled"

    def test_ready_with_index_down(self, sync, index) -> None:
        index.fail = True
        client = TestClient(create_app(sync=sync))

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_ready_with_cache_down(self, sync, cache) -> None:
        cache.fail = True
        client = TestClient(create_app(sync=sync))

        assert client.get("/health/ready").status_code == 503

    def test_ready_before_startup(self) -> None:
        client = TestClient(create_app())

        assert client.get("/health/ready").status_code == 503

    def test_health_needs_no_tenant(self, sync) -> None:
        client = TestClient(create_app(sync=sync))
        assert client.get("/health").status_code == 200


class TestMetricsEndpoint:
    def test_exposition_format(self, sync) -> None:
        client = TestClient(create_app(sync=sync))
        client.get("/search", headers={"X-Tenant-ID": "acme"})

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "catalog_http_requests_total" in response.text
