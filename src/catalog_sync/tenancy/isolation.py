"""Tenant isolation for store queries.

Tenant isolation is enforced by filter predicates, never by separate
connections:
- TenantFilter: tenant predicates for record-store and search-index queries
- owned_by: ownership check for documents fetched by id alone

Example:
    from catalog_sync.tenancy.isolation import TenantFilter, owned_by

    record = await collection.find_one({"_id": oid, **TenantFilter.record("acme")})
    query = {"bool": {"filter": [TenantFilter.term("acme")]}}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Field holding the tenant in both the record store and the search index
TENANT_FIELD = "tenantId"


class TenantFilter:
    """Tenant predicates for store queries."""

    @staticmethod
    def record(tenant_id: str) -> dict[str, Any]:
        """Record-store (MongoDB) filter fragment.

        Merged into the lookup itself so a document owned by another tenant
        is indistinguishable from a missing one.
        """
        return {TENANT_FIELD: tenant_id}

    @staticmethod
    def term(tenant_id: str) -> dict[str, Any]:
        """Search-index (Elasticsearch) exact-match filter clause."""
        return {"term": {TENANT_FIELD: tenant_id}}


def owned_by(source: Mapping[str, Any] | None, tenant_id: str) -> bool:
    """Check that a document fetched by id belongs to the tenant.

    Args:
        source: Document source as returned by the store (None if absent)
        tenant_id: Requesting tenant

    Returns:
        True only if the document exists and carries exactly this tenant
    """
    if source is None:
        return False
    return source.get(TENANT_FIELD) == tenant_id
