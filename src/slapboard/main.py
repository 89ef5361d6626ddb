# src/slapboard/main.py
"""Main entry point for the Slapboard application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from slapboard.api.errors import install_error_handlers
from slapboard.api.middleware import RequestLoggingMiddleware
from slapboard.api.v1 import (
    actions_router,
    admin_router,
    posts_router,
    rankings_router,
    system_router,
    votes_router,
)
from slapboard.core.settings import settings
from slapboard.db.session import SessionLocal, create_tables
from slapboard.services.catalog import CatalogService

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Prepare storage on startup."""
    configure_logging()
    logger.info("Starting %s %s", settings.app_name, settings.app_version)

    if settings.auto_create_tables:
        create_tables()

    if settings.seed_default_actions:
        with SessionLocal() as db:
            CatalogService(db).ensure_default_actions()

    yield

    logger.info("Shutting down %s", settings.app_name)


# Initialize FastAPI app
app = FastAPI(
    title="Slapboard API",
    description="Anonymous voting on public figures",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)
app.add_middleware(RequestLoggingMiddleware)

install_error_handlers(app)

# Include API routers
app.include_router(posts_router, prefix="/api/v1")
app.include_router(actions_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(rankings_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Anonymous voting on public figures",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("slapboard.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
