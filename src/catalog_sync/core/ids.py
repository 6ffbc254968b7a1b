from __future__ import annotations

from bson import ObjectId
from bson.errors import InvalidId


class InvalidRecordId(ValueError):
    pass


def parse_record_id(value: object) -> ObjectId:
    """Parse a record-store identifier (24-hex MongoDB ObjectId)."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not value:
        raise InvalidRecordId("empty value")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise InvalidRecordId(f"invalid record id: {value!r}") from exc


def stringify_record_id(value: object) -> str:
    """External id used by the search index and cache keys."""
    return str(value)
