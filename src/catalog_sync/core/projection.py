"""Document projection: record-store document -> indexed document.

The projection is the single place where record fields are selected and
normalized for the search index and the cache:
- Only allow-listed fields are carried over (name, description, alias,
  tenantId, status, createOn, modifiedOn)
- Missing fields become explicit nulls so the index schema stays stable
- Values are coerced to the index types (text, status enum, UTC timestamps)

Projection is deterministic: the same record always yields the same
IndexedDocument, which makes re-indexing idempotent.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from catalog_sync.core.model import CatalogDocument, DocumentStatus, IndexedDocument

logger = logging.getLogger(__name__)

PROJECTED_FIELDS = (
    "name",
    "description",
    "alias",
    "tenantId",
    "status",
    "createOn",
    "modifiedOn",
)

_datetime_adapter: TypeAdapter[datetime] = TypeAdapter(datetime)


def coerce_text(value: Any) -> str | None:
    """Coerce a scalar to text; structured values are dropped."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    logger.warning(f"Dropping non-scalar text value of type {type(value).__name__}")
    return None


def coerce_status(value: Any) -> DocumentStatus | None:
    """Map a raw status to the status enum, case-insensitively."""
    if value is None or value == "":
        return None
    if isinstance(value, DocumentStatus):
        return value
    try:
        return DocumentStatus(str(value).strip().lower())
    except ValueError:
        logger.warning(f"Unknown document status {value!r}, indexing as null")
        return None


def coerce_timestamp(value: Any) -> datetime | None:
    """Coerce a timestamp to an aware UTC datetime.

    Accepts datetimes (naive values are UTC, as returned by MongoDB),
    ISO-8601 strings and epoch milliseconds. Empty or unparsable values
    become null.
    """
    if not value:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            logger.warning(f"Out-of-range epoch timestamp {value!r}, indexing as null")
            return None

    try:
        parsed = _datetime_adapter.validate_python(value)
    except PydanticValidationError:
        logger.warning(f"Unparsable timestamp {value!r}, indexing as null")
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def project(document: CatalogDocument) -> IndexedDocument:
    """Project a record-store document into its indexed representation."""
    return IndexedDocument(
        name=coerce_text(document.name),
        description=coerce_text(document.description),
        alias=coerce_text(document.alias),
        tenant_id=document.tenant_id,
        status=coerce_status(document.status),
        created_at=coerce_timestamp(document.created_at),
        modified_at=coerce_timestamp(document.modified_at),
    )


def project_record(record: Mapping[str, Any]) -> tuple[str, IndexedDocument]:
    """Project a raw record, returning (external id, indexed document)."""
    document = CatalogDocument.model_validate(record)
    return document.identifier, project(document)
