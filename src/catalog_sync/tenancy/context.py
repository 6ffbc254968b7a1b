"""Request-scoped tenant binding.

TenantMiddleware binds the tenant resolved from a request; handlers and
the resolver dependency read it back. Each asyncio task sees its own
binding, so concurrent requests never observe each other's tenant.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class TenantContext:
    """The tenant a request acts for.

    source records where it came from ("header", "query" or "scope").
    Tenant ids are opaque and trusted as supplied.
    """

    tenant_id: str
    source: str = "unknown"
    bound_at: datetime = field(default_factory=lambda: datetime.now(UTC))


_current: ContextVar[TenantContext | None] = ContextVar("tenant_context", default=None)


def get_tenant_context() -> TenantContext | None:
    return _current.get()


def get_current_tenant_or_none() -> str | None:
    ctx = _current.get()
    return ctx.tenant_id if ctx is not None else None


def set_tenant_context(ctx: TenantContext) -> None:
    _current.set(ctx)


def clear_tenant() -> None:
    _current.set(None)


class TenantScope:
    """Bind a tenant for a block, restoring the previous binding on exit.

    Example:
        with TenantScope("acme"):
            await sync.search(get_current_tenant_or_none(), text="mug")
    """

    def __init__(self, tenant_id: str, source: str = "scope"):
        self.context = TenantContext(tenant_id=tenant_id, source=source)
        self._token: Token[TenantContext | None] | None = None

    def __enter__(self) -> TenantContext:
        self._token = _current.set(self.context)
        return self.context

    def __exit__(self, *exc: Any) -> None:
        if self._token is not None:
            _current.reset(self._token)
            self._token = None
