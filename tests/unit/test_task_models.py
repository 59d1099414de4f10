"""Tests for task payload validation."""

from datetime import date

import pytest
from pydantic import ValidationError

from src.domain.create_models import TaskCreate
from src.domain.task import parse_due_date
from src.domain.update_models import TaskUpdate


def _messages(exc_info: pytest.ExceptionInfo[ValidationError]) -> dict[str, str]:
    return {str(error["loc"][0]): str(error["ctx"]["error"]) for error in exc_info.value.errors()}


@pytest.mark.unit
class TestParseDueDate:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2026-02-03", date(2026, 2, 3)),
            ("2026-02-03T10:00:00", date(2026, 2, 3)),
            ("2026-02-03T23:30:00+02:00", date(2026, 2, 3)),
            ("2024-01-15T23:00:00-05:00", date(2024, 1, 16)),
            ("2024-01-16T01:00:00+03:00", date(2024, 1, 15)),
            ("2024-01-15T23:00:00Z", date(2024, 1, 15)),
            (None, None),
            ("", None),
        ],
    )
    def test_accepted_values(self, value, expected):
        assert parse_due_date(value) == expected

    @pytest.mark.parametrize("value", ["tomorrow", "2026-13-01", "03/02/2026", 20260203])
    def test_rejected_values(self, value):
        with pytest.raises(ValueError, match="Invalid date format"):
            parse_due_date(value)


@pytest.mark.unit
class TestTaskCreate:
    def test_defaults(self):
        payload = TaskCreate(title="Buy milk")

        assert payload.model_dump(mode="json", by_alias=True) == {
            "title": "Buy milk",
            "description": "",
            "status": "pending",
            "priority": "medium",
            "dueDate": None,
        }

    def test_title_and_description_trimmed(self):
        payload = TaskCreate(title="  Buy milk ", description="  two litres  ")

        assert payload.title == "Buy milk"
        assert payload.description == "two litres"

    def test_null_description_becomes_empty(self):
        assert TaskCreate(title="x", description=None).description == ""

    def test_owner_key_ignored(self):
        payload = TaskCreate.model_validate({"title": "x", "owner": "someone"})

        assert "owner" not in payload.model_dump()

    def test_missing_title(self):
        with pytest.raises(ValidationError) as exc_info:
            TaskCreate.model_validate({})

        assert _messages(exc_info) == {"title": "Title is required"}

    def test_non_string_title(self):
        with pytest.raises(ValidationError) as exc_info:
            TaskCreate.model_validate({"title": 42})

        assert _messages(exc_info) == {"title": "Title must be a string"}

    def test_reports_every_bad_field(self):
        with pytest.raises(ValidationError) as exc_info:
            TaskCreate.model_validate({"title": "", "status": "done", "priority": "asap", "dueDate": "soon"})

        assert _messages(exc_info) == {
            "title": "Title is required",
            "status": "Invalid status",
            "priority": "Invalid priority",
            "dueDate": "Invalid date format",
        }


@pytest.mark.unit
class TestTaskUpdate:
    def test_changes_only_include_sent_fields(self):
        payload = TaskUpdate.model_validate({"priority": "low"})

        assert payload.changes() == {"priority": "low"}

    def test_explicit_null_due_date_is_a_change(self):
        payload = TaskUpdate.model_validate({"dueDate": None})

        assert payload.changes() == {"dueDate": None}

    def test_offset_due_date_stored_as_utc_date(self):
        payload = TaskUpdate.model_validate({"dueDate": "2024-01-15T23:00:00-05:00"})

        assert payload.changes() == {"dueDate": "2024-01-16"}

    def test_due_date_serialized_as_iso_date(self):
        payload = TaskUpdate.model_validate({"dueDate": "2026-07-04T08:00:00Z"})

        assert payload.changes() == {"dueDate": "2026-07-04"}

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_blank_title_rejected(self, title):
        with pytest.raises(ValidationError) as exc_info:
            TaskUpdate.model_validate({"title": title})

        assert _messages(exc_info) == {"title": "Title cannot be empty"}

    def test_null_status_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            TaskUpdate.model_validate({"status": None})

        assert _messages(exc_info) == {"status": "Invalid status"}

    def test_empty_payload_has_no_changes(self):
        assert TaskUpdate.model_validate({}).changes() == {}
