"""Task domain models, enums, and field rules shared by create and update payloads."""

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TaskStatus(StrEnum):
    """Task progress state."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """Task priority level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def validate_status(value: Any) -> Any:
    """Reject anything that is not a TaskStatus value."""
    if value not in {s.value for s in TaskStatus}:
        raise ValueError("Invalid status")
    return value


def validate_priority(value: Any) -> Any:
    """Reject anything that is not a TaskPriority value."""
    if value not in {p.value for p in TaskPriority}:
        raise ValueError("Invalid priority")
    return value


def _utc_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.date()


def parse_due_date(value: Any) -> date | None:
    """Parse an ISO-8601 date or date-time into a calendar date.

    A date-time with an offset is converted to UTC before taking its date.
    ``None`` and the empty string both mean "no due date".
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _utc_date(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("Invalid date format")

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return _utc_date(datetime.fromisoformat(text))
    except ValueError as err:
        raise ValueError("Invalid date format") from err


def clean_description(value: Any) -> str:
    """Trim a description; null becomes empty."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("Description must be a string")
    return value.strip()


class Task(BaseModel):
    """Task data transfer object."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique task ID assigned by the store")
    title: str = Field(..., description="Task title")
    description: str = Field(default="", description="Free-form task description")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current task status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    due_date: date | None = Field(default=None, alias="dueDate", description="Optional due date")
    owner: str = Field(..., description="ID of the user who created the task")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp")

    def to_public(self) -> dict[str, Any]:
        """Serialize with the API's camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
