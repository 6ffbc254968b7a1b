"""Health check endpoints for catalog-sync.

Provides Kubernetes-compatible liveness and readiness probes:
- /health       - Liveness (always OK if the process is running)
- /health/live  - Liveness probe
- /health/ready - Readiness probe (record store, search index, cache)
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])

CHECK_TIMEOUT = 5.0  # seconds


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DISABLED = "disabled"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    latency_ms: float
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != HealthStatus.UNHEALTHY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "latency_ms": round(self.latency_ms, 2),
        }
        if self.message:
            result["message"] = self.message
        return result


async def check_component(name: str, probe: Callable[[], Awaitable[bool]]) -> ComponentHealth:
    """Run one store's connectivity probe, bounded by CHECK_TIMEOUT."""
    start = time.monotonic()
    message: str | None = None
    try:
        healthy = await asyncio.wait_for(probe(), timeout=CHECK_TIMEOUT)
        if not healthy:
            message = f"{name} unreachable"
    except asyncio.TimeoutError:
        healthy, message = False, f"{name} check timed out"
    except Exception as exc:
        healthy, message = False, f"{name} check failed: {type(exc).__name__}"

    return ComponentHealth(
        name=name,
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        latency_ms=(time.monotonic() - start) * 1000,
        message=message,
    )


@router.get("/health")
async def health() -> dict[str, bool]:
    """Liveness check kept for existing clients."""
    return {"ok": True}


@router.get("/health/live")
async def live() -> dict[str, str]:
    """Liveness probe.

    Returns OK if the process is running.
    """
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(request: Request) -> JSONResponse:
    """Readiness probe.

    Checks the record store, the search index and, when configured, the
    cache. Returns 200 if every configured store is reachable, 503 otherwise.
    """
    sync = getattr(request.app.state, "sync", None)
    if sync is None:
        return JSONResponse(
            content={"status": HealthStatus.UNHEALTHY.value, "components": []},
            status_code=503,
        )

    checks = [
        check_component("records", sync.records.health_check),
        check_component("index", sync.index.health_check),
    ]
    if sync.cache.enabled:
        checks.append(check_component("cache", sync.cache.health_check))

    components = list(await asyncio.gather(*checks))
    if not sync.cache.enabled:
        components.append(ComponentHealth(name="cache", status=HealthStatus.DISABLED, latency_ms=0))

    all_ok = all(c.ok for c in components)
    result = {
        "status": (HealthStatus.HEALTHY if all_ok else HealthStatus.UNHEALTHY).value,
        "components": [c.to_dict() for c in components],
    }
    return JSONResponse(content=result, status_code=200 if all_ok else 503)
