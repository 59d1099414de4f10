"""User domain models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.config import constants


def clean_name(value: Any) -> str:
    """Validate a display name is a non-empty string of bounded length."""
    if not isinstance(value, str):
        raise ValueError("Name is required")

    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    if len(value) > constants.NAME_MAX_LENGTH:
        raise ValueError(f"Name too long (max {constants.NAME_MAX_LENGTH} characters)")
    return value


@dataclass(frozen=True)
class RequestContext:
    """Identity of the authenticated caller, resolved once per request."""

    user_id: str
    email: str


class User(BaseModel):
    """Public user profile. The password hash never leaves the service layer."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique user ID assigned by the store")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Lower-cased email address")
    bio: str = Field(default="", description="Short profile text")
    avatar: str = Field(default="", description="Avatar URL")
    created_at: datetime | None = Field(default=None, alias="createdAt", description="Signup timestamp")

    def to_public(self) -> dict[str, Any]:
        """Serialize with the API's camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)


class AuthResult(BaseModel):
    """A user together with a freshly issued bearer token."""

    user: User
    token: str

    def to_public(self) -> dict[str, Any]:
        return {
            "id": self.user.id,
            "name": self.user.name,
            "email": self.user.email,
            "token": self.token,
        }
