"""Update models for partial record changes."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.domain.task import (
    TaskPriority,
    TaskStatus,
    clean_description,
    parse_due_date,
    validate_priority,
    validate_status,
)
from src.domain.user import clean_name


class TaskUpdate(BaseModel):
    """Partial task update. Only keys present in the request are applied."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = Field(default=None, alias="dueDate")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> str:
        """A present title must not be blank."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> str:
        return clean_description(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Any:
        return validate_status(v)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v: Any) -> Any:
        return validate_priority(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v: Any) -> date | None:
        return parse_due_date(v)

    def changes(self) -> dict[str, Any]:
        """Return the fields the client sent, keyed by stored document name."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ProfileUpdate(BaseModel):
    """Partial profile update for the authenticated user."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: EmailStr | None = None
    bio: str | None = None
    avatar: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return clean_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Email is required")
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("bio", "avatar", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("Must be a string")
        return v.strip()

    def changes(self) -> dict[str, Any]:
        """Return the fields the client sent."""
        return self.model_dump(mode="json", exclude_unset=True)
