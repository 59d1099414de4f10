"""Configuration management for tasklist."""

import secrets

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Runtime
    environment: str = Field(default="development", description="Deployment environment name")
    api_prefix: str = Field(default="/api", description="Path prefix for every API route")
    cors_origins: list[str] = Field(default=["*"], description="Origins allowed by the CORS middleware")

    # Storage
    sqlite_db_path: str = Field(default="./data/tasklist.db", description="SQLite document store file path")

    # Token signing
    secret_key: str | None = Field(default=None, description="Secret used to sign bearer tokens")
    token_max_age_seconds: int = Field(
        default=30 * 24 * 60 * 60, description="Lifetime of an issued bearer token (in seconds)"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    @property
    def is_production(self) -> bool:
        """Return True when running with production settings."""
        return self.environment.lower() == "production"

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value

    def signing_key(self) -> str:
        """Return the token signing key, generating a per-process key when unset."""
        if not self.secret_key:
            self.secret_key = secrets.token_urlsafe(32)
        return self.secret_key


# Application Constants
class Constants:
    """Application-wide constants."""

    # Collections
    USERS_COLLECTION: str = "users"
    TASKS_COLLECTION: str = "tasks"

    # Account rules
    PASSWORD_MIN_LENGTH: int = 6
    NAME_MAX_LENGTH: int = 50

    # Task listing defaults
    DEFAULT_SORT_FIELD: str = "createdAt"
    DEFAULT_SORT_ORDER: str = "desc"

    # Token serializer salt
    TOKEN_SALT: str = "access-token"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
