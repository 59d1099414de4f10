"""tasklist - multi-user to-do list API."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.core import db_client
from src.core.config import settings
from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.auth_router import router as auth_router
from src.interface.error_handlers import register_error_handlers
from src.interface.task_router import router as task_router


logger = logging.getLogger(__name__)


def validate_startup_configuration() -> None:
    """Validate required credentials before serving requests.

    Production deployments must configure a signing secret; elsewhere a
    per-process key is generated and tokens do not survive a restart.
    """
    logger.info("startup_validation_begin")

    try:
        if settings.is_production:
            settings.require_credential("secret_key", "Token signing")
        elif not settings.secret_key:
            logger.warning("startup_validation", extra={"stage": "credentials", "status": "ephemeral_secret_key"})

        logger.info("startup_validation_complete", extra={"status": "ok"})

    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so validation logs are captured
    configure_logfire()
    validate_startup_configuration()

    await db_client.init_db()
    logger.info("Database initialized")

    yield

    await db_client.close_connection()


app = FastAPI(
    title="tasklist",
    description="Multi-user to-do list API",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Register routers
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(task_router, prefix=settings.api_prefix)


@app.get(f"{settings.api_prefix}/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "OK", "message": "Server is running"}, status_code=200)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)  # noqa: S104
