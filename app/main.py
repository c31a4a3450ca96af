from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.schemas.snapshot_upload import HealthResponse


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any database connection is initialised and raises
    RuntimeError listing every missing or invalid variable.
    """

    from db.config import configured_database_url

    errors: list[str] = []

    if configured_database_url() is None:
        errors.append(
            "No database URL configured. Set DATABASE_URL, or LOCAL_DATABASE_URL, "
            "or CLOUD_DATABASE_URL with a cloud ENVIRONMENT."
        )

    chunk_size_raw = os.getenv("SNAPSHOT_IMPORT_CHUNK_SIZE", "").strip()
    if chunk_size_raw and not chunk_size_raw.isdigit():
        errors.append(
            f"SNAPSHOT_IMPORT_CHUNK_SIZE='{chunk_size_raw}' is not a positive integer."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed. Missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity on boot; dispose the engine on exit."""
    from db.session import dispose_engine

    await _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    try:
        yield
    finally:
        await dispose_engine()
        logging.getLogger(__name__).info("Database engine disposed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Snapshot Import API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import snapshot_upload_router

    application.include_router(snapshot_upload_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok")

    return application


app = create_app()
