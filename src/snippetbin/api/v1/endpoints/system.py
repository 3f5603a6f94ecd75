# src/snippetbin/api/v1/endpoints/system.py
"""System endpoints: on-demand backups and public configuration."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from snippetbin.api.v1.dependencies import SessionFactoryDep
from snippetbin.core.errors import StorageFailure
from snippetbin.core.settings import settings
from snippetbin.services.backup import export_paste_snapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system", tags=["system"])


@router.post("/backup")
def backup_pastes(session_factory: SessionFactoryDep) -> dict[str, str]:
    """Write a paste snapshot immediately and return its path."""
    try:
        path = export_paste_snapshot(session_factory)
    except OSError as exc:
        logger.error("Manual paste backup failed: %s", exc)
        raise StorageFailure("Failed to backup posts") from exc
    return {"message": "Backup created successfully", "file": str(path)}


@router.get("/config")
def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes connection strings and file system paths.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "backup": {
            "enabled": settings.backup_enabled,
            "interval_seconds": settings.backup_interval_seconds,
            "retention": settings.backup_retention,
        },
        "auth": {
            "min_password_length": settings.min_password_length,
        },
    }
