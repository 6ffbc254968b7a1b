"""Catalog document models.

CatalogDocument is the system-of-record shape read from the record store.
IndexedDocument is its projection, the shape stored in the search index and
in the cache. Index field names keep the wire names already used by
existing indices (tenantId, createOn, modifiedOn).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator


class CatalogModel(BaseModel):
    """Base model for catalog documents.

    Unknown fields are ignored: records and index sources may carry fields
    outside the projection allow-list.
    """

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }


class DocumentStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    UNPUBLISHED = "unpublished"


class CatalogDocument(CatalogModel):
    """Document as stored in the system of record."""

    identifier: str = Field(alias="_id")
    tenant_id: str = Field(alias="tenantId", min_length=1)
    name: Any = None
    description: Any = None
    alias: Any = None
    status: Any = None
    created_at: Any = Field(
        default=None, validation_alias=AliasChoices("createOn", "createdAt", "created_at")
    )
    modified_at: Any = Field(
        default=None, validation_alias=AliasChoices("modifiedOn", "modifiedAt", "modified_at")
    )

    @field_validator("identifier", mode="before")
    @classmethod
    def _stringify_identifier(cls, value: Any) -> str:
        return str(value)


class IndexedDocument(CatalogModel):
    """Projected document stored in the search index and cache.

    Every field is always present; absent values serialize as explicit null.
    """

    name: str | None = None
    description: str | None = None
    alias: str | None = None
    tenant_id: str | None = Field(default=None, alias="tenantId")
    status: DocumentStatus | None = None
    created_at: datetime | None = Field(default=None, alias="createOn")
    modified_at: datetime | None = Field(default=None, alias="modifiedOn")

    @field_validator("status", mode="before")
    @classmethod
    def _read_status(cls, value: Any) -> DocumentStatus | None:
        # Older indexers stored status verbatim; unknown values read as null
        if value is None or isinstance(value, DocumentStatus):
            return value
        try:
            return DocumentStatus(str(value).strip().lower())
        except ValueError:
            return None

    def to_source(self) -> dict[str, Any]:
        """Index document body, keyed by index field names."""
        return self.model_dump(mode="json", by_alias=True)


class StoredDocument(IndexedDocument):
    """An indexed document addressed by its external id."""

    id: str

    def to_body(self) -> dict[str, Any]:
        """Response and cache shape: id plus every projected field."""
        return self.model_dump(mode="json", by_alias=True)


class SearchHit(StoredDocument):
    score: float | None = None


class SearchResult(CatalogModel):
    total: int
    hits: list[SearchHit] = Field(default_factory=list)

    def to_body(self) -> dict[str, Any]:
        return {"total": self.total, "hits": [hit.to_body() for hit in self.hits]}


class IndexResult(CatalogModel):
    id: str
    indexed: bool = True
