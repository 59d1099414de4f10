"""Render errors as the API's ``{success: false, message, errors?}`` envelope."""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.errors import AppError, ErrorResponse, FieldError, InternalError, InvalidInputError


logger = logging.getLogger(__name__)

_LOCATION_SOURCES = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_SOURCES and len(parts) > 1:
        parts = parts[1:]
    return ".".join(parts)


def _field_message(error: dict[str, Any]) -> str:
    # Custom validators raise ValueError; report their text without pydantic's prefix
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    return str(error.get("msg", "Invalid value"))


def field_errors_from_validation(errors: Sequence[dict[str, Any]]) -> list[FieldError]:
    """Convert pydantic/FastAPI error dicts into field errors, one per failure."""
    return [FieldError(field=_field_name(error.get("loc", ())), message=_field_message(error)) for error in errors]


def _render(error: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if error.status_code == 401 else None  # noqa: PLR2004
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response().model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("internal_error", extra={"path": request.url.path, "error": exc.message})
    return _render(exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = field_errors_from_validation(exc.errors())
    logger.info("request_validation_failed", extra={"path": request.url.path, "fields": [e.field for e in errors]})
    return _render(InvalidInputError(errors=errors))


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=str(exc.detail)).model_dump(mode="json", exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", extra={"path": request.url.path})
    return _render(InternalError())


def register_error_handlers(app: FastAPI) -> None:
    """Install every error handler on the application."""
    app.add_exception_handler(AppError, handle_app_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)
