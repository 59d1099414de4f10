"""Error taxonomy for request handling.

Every failure a handler can report maps to one of five kinds. Each kind is an
exception carrying the HTTP status used to render it.
"""

from pydantic import BaseModel


class FieldError(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """JSON envelope returned for every failed request."""

    success: bool = False
    message: str
    errors: list[FieldError] | None = None


class AppError(Exception):
    """Base class for errors that are reported to the client."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Build the public error envelope for this error."""
        return ErrorResponse(message=self.message)


class UnauthenticatedError(AppError):
    """No token, or a token that does not resolve to a user."""

    status_code = 401
    default_message = "Not authorized, no token"


class InvalidInputError(AppError):
    """One or more request fields failed validation."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[FieldError] | None = None, message: str | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(message=self.message, errors=self.errors or None)


class NotFoundError(AppError):
    """The referenced record does not exist."""

    status_code = 404
    default_message = "Not found"


class ForbiddenError(AppError):
    """The record exists but belongs to another user."""

    status_code = 403
    default_message = "Not authorized to access this resource"


class InternalError(AppError):
    """Unexpected store or infrastructure failure.

    The message is always generic; the underlying cause is logged server-side
    and chained via ``raise ... from``.
    """

    status_code = 500
    default_message = "Server error"
