# src/snippetbin/main.py
"""Main entry point for the SnippetBin application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from snippetbin.api.errors import register_error_handlers
from snippetbin.api.v1 import (
    auth_router,
    comments_router,
    pastes_router,
    system_router,
    users_router,
)
from snippetbin.core.settings import settings
from snippetbin.db.session import SessionLocal, create_tables
from snippetbin.services.backup import BackupWorker

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="SnippetBin API",
    description="Pastebin-style snippet sharing with role-aware ranking",
    version=settings.app_version,
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

register_error_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(pastes_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    create_tables()
    if settings.backup_enabled:
        worker = BackupWorker(SessionLocal)
        await worker.start()
        app.state.backup_worker = worker
        logger.info(
            "Paste backups every %ss into %s", settings.backup_interval_seconds, settings.backup_dir
        )
    else:
        app.state.backup_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: BackupWorker | None = getattr(app.state, "backup_worker", None)
    if worker:
        await worker.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "SnippetBin API",
        "version": settings.app_version,
        "description": "Pastebin-style snippet sharing with role-aware ranking",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("snippetbin.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
