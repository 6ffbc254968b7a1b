"""Tests for record-to-index projection."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from bson import ObjectId
from pydantic import ValidationError as PydanticValidationError

from catalog_sync.core.model import CatalogDocument, DocumentStatus
from catalog_sync.core.projection import (
    coerce_status,
    coerce_text,
    coerce_timestamp,
    project,
    project_record,
)


class TestCoerceText:
    """Tests for text coercion."""

    def test_strings_pass_through(self) -> None:
        assert coerce_text("Blue Shirt") == "Blue Shirt"

    def test_scalars_become_text(self) -> None:
        assert coerce_text(42) == "42"
        assert coerce_text(True) == "True"

    def test_structured_values_are_dropped(self) -> None:
        assert coerce_text({"en": "Shirt"}) is None
        assert coerce_text(["a", "b"]) is None

    def test_none_stays_none(self) -> None:
        assert coerce_text(None) is None


class TestCoerceStatus:
    """Tests for status coercion."""

    def test_case_insensitive(self) -> None:
        assert coerce_status("PUBLISHED") == DocumentStatus.PUBLISHED
        assert coerce_status(" Draft ") == DocumentStatus.DRAFT

    def test_unknown_status_is_null(self) -> None:
        assert coerce_status("archived") is None

    def test_empty_status_is_null(self) -> None:
        assert coerce_status("") is None
        assert coerce_status(None) is None


class TestCoerceTimestamp:
    """Tests for timestamp coercion."""

    def test_naive_datetime_is_utc(self) -> None:
        result = coerce_timestamp(datetime(2024, 1, 1, 12, 0))
        assert result == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_offset_datetime_is_converted(self) -> None:
        value = datetime(2024, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert coerce_timestamp(value) == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_iso_string(self) -> None:
        result = coerce_timestamp("2024-03-05T10:00:00Z")
        assert result == datetime(2024, 3, 5, 10, 0, tzinfo=UTC)

    def test_epoch_milliseconds(self) -> None:
        assert coerce_timestamp(1_700_000_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    @pytest.mark.parametrize("value", [10**20, float("nan"), float("inf"), -(10**20)])
    def test_out_of_range_epoch_is_null(self, value: float) -> None:
        assert coerce_timestamp(value) is None

    def test_unparsable_is_null(self) -> None:
        assert coerce_timestamp("yesterday") is None

    def test_empty_is_null(self) -> None:
        assert coerce_timestamp("") is None
        assert coerce_timestamp(None) is None
        assert coerce_timestamp(0) is None


class TestProject:
    """Tests for the projection itself."""

    def test_projects_allow_listed_fields_only(self) -> None:
        document = CatalogDocument.model_validate(
            {
                "_id": ObjectId("65f0c0ffee0000000000abcd"),
                "tenantId": "acme",
                "name": "Blue Shirt",
                "status": "published",
                "price": 42,
                "internalNotes": "do not index",
            }
        )

        source = project(document).to_source()

        assert set(source) == {
            "name",
            "description",
            "alias",
            "tenantId",
            "status",
            "createOn",
            "modifiedOn",
        }
        assert source["name"] == "Blue Shirt"
        assert source["description"] is None

    def test_project_record_returns_external_id(self) -> None:
        oid = ObjectId()
        external_id, indexed = project_record({"_id": oid, "tenantId": "acme", "name": "Mug"})

        assert external_id == str(oid)
        assert indexed.tenant_id == "acme"

    def test_accepts_alternate_timestamp_names(self) -> None:
        _, indexed = project_record(
            {
                "_id": ObjectId(),
                "tenantId": "acme",
                "createdAt": "2024-01-01T00:00:00Z",
                "modified_at": "2024-01-02T00:00:00Z",
            }
        )

        assert indexed.created_at == datetime(2024, 1, 1, tzinfo=UTC)
        assert indexed.modified_at == datetime(2024, 1, 2, tzinfo=UTC)

    def test_projection_is_deterministic(self) -> None:
        record = {"_id": ObjectId(), "tenantId": "acme", "name": "Mug", "status": "DRAFT"}
        assert project_record(record) == project_record(record)

    def test_record_without_tenant_is_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            project_record({"_id": ObjectId(), "name": "Mug"})
