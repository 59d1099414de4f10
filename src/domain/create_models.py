"""Pydantic models for request payloads that create records."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.core.config import constants
from src.domain.task import (
    TaskPriority,
    TaskStatus,
    clean_description,
    parse_due_date,
    validate_priority,
    validate_status,
)
from src.domain.user import clean_name


class TaskCreate(BaseModel):
    """Payload for creating a task. Unknown keys such as ``owner`` are dropped."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(default=None, validate_default=True, description="Task title")  # type: ignore[assignment]
    description: str = Field(default="", description="Task description")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Initial status")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Priority")
    due_date: date | None = Field(default=None, alias="dueDate", description="Optional due date")

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> str:
        """Title is required and must not be blank."""
        if v is None:
            raise ValueError("Title is required")
        if not isinstance(v, str):
            raise ValueError("Title must be a string")
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

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


class UserCreate(BaseModel):
    """Signup payload."""

    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Email address, unique per user")
    password: str = Field(..., description="Plain-text password, hashed before storage")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return clean_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password meets the minimum length."""
        if len(v) < constants.PASSWORD_MIN_LENGTH:
            msg = f"Password must be at least {constants.PASSWORD_MIN_LENGTH} characters"
            raise ValueError(msg)
        return v


class LoginRequest(BaseModel):
    """Login payload."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Plain-text password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()
