"""JSON snapshot backups of the paste and user tables.

Snapshots are written as ``<prefix><epoch-ms>.json`` files in the backup
directory; after each write only the newest ``retention`` files for that
prefix are kept. The ``BackupWorker`` runs paste snapshots on an interval in
the background. A failed snapshot is logged and the loop carries on; request
handlers are never affected.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from snippetbin.core.settings import settings
from snippetbin.repositories.paste_repo import PasteRepository
from snippetbin.services.auth_service import AuthService
from snippetbin.services.paste_service import to_paste_out

__all__ = [
    "POSTS_PREFIX",
    "USERS_PREFIX",
    "BackupWorker",
    "backup_users_quietly",
    "export_paste_snapshot",
    "export_user_snapshot",
    "prune_snapshots",
    "write_snapshot",
]

logger = logging.getLogger(__name__)

POSTS_PREFIX = "posts_backup_"
USERS_PREFIX = "users_backup_"

SessionFactory = Callable[[], Session]


def _snapshot_stamp(path: Path, prefix: str) -> int:
    try:
        return int(path.stem[len(prefix):])
    except ValueError:
        return -1


def prune_snapshots(directory: Path, prefix: str, retention: int) -> list[Path]:
    """Delete all but the newest ``retention`` snapshots and return the removed paths."""
    snapshots = sorted(
        directory.glob(f"{prefix}*.json"),
        key=lambda path: _snapshot_stamp(path, prefix),
        reverse=True,
    )
    removed = snapshots[max(retention, 0):]
    for stale in removed:
        stale.unlink(missing_ok=True)
    return removed


def write_snapshot(
    directory: Path,
    prefix: str,
    records: list[dict[str, Any]],
    retention: int,
) -> Path:
    """Atomically write ``records`` to a new snapshot file, then prune old ones."""
    directory.mkdir(parents=True, exist_ok=True)
    stamp = int(time.time() * 1000)
    path = directory / f"{prefix}{stamp}.json"
    while path.exists():
        stamp += 1
        path = directory / f"{prefix}{stamp}.json"

    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(json.dumps(records, indent=2), encoding="utf-8")
    os.replace(tmp_path, path)

    removed = prune_snapshots(directory, prefix, retention)
    if removed:
        logger.debug("Pruned %d old %s snapshots", len(removed), prefix.rstrip("_"))
    return path


def export_paste_snapshot(
    session_factory: SessionFactory,
    directory: Path | str | None = None,
    retention: int | None = None,
) -> Path:
    """Write every paste (expired and private included) to a new snapshot."""
    directory = Path(directory or settings.backup_dir)
    retention = retention or settings.backup_retention
    with session_factory() as session:
        pastes = PasteRepository(session).export_all()
        records = [to_paste_out(paste).model_dump() for paste in pastes]
    path = write_snapshot(directory, POSTS_PREFIX, records, retention)
    logger.info("Paste backup created: %s (%d pastes)", path, len(records))
    return path


def export_user_snapshot(
    session_factory: SessionFactory,
    directory: Path | str | None = None,
    retention: int | None = None,
) -> Path:
    """Write all accounts to a new snapshot; TOTP secrets are left out."""
    directory = Path(directory or settings.backup_dir)
    retention = retention or settings.user_backup_retention
    with session_factory() as session:
        records = [
            {
                "id": user.id,
                "username": user.username,
                "password_hash": user.password_hash,
                "role": user.role,
                "created_at": user.created_at,
            }
            for user in AuthService(session).list_users()
        ]
    path = write_snapshot(directory, USERS_PREFIX, records, retention)
    logger.info("User backup created: %s", path)
    return path


def backup_users_quietly(session_factory: SessionFactory) -> None:
    """Snapshot users, logging instead of raising on failure."""
    try:
        export_user_snapshot(session_factory)
    except Exception:  # noqa: BLE001 - backups must never fail a request
        logger.exception("User backup failed")


class BackupWorker:
    """Periodically snapshots the paste table in a worker thread."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        directory: Path | str | None = None,
        interval_seconds: float | None = None,
        retention: int | None = None,
        sweep_expired: bool | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.directory = Path(directory or settings.backup_dir)
        self.interval = max(
            0.01,
            float(interval_seconds if interval_seconds is not None else settings.backup_interval_seconds),
        )
        self.retention = retention or settings.backup_retention
        self.sweep_expired = (
            settings.expired_sweep_enabled if sweep_expired is None else sweep_expired
        )
        self.runs = 0
        self.failures = 0
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        """Start the background backup loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background backup loop."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    def run_once(self) -> Path:
        """Take one snapshot, sweeping expired pastes first when enabled."""
        if self.sweep_expired:
            with self.session_factory() as session:
                PasteRepository(session).sweep_expired()
        return export_paste_snapshot(self.session_factory, self.directory, self.retention)

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except TimeoutError:
                pass
            if self._stopping.is_set():
                return

            try:
                await asyncio.to_thread(self.run_once)
            except Exception:  # noqa: BLE001 - log and keep the loop alive
                self.failures += 1
                logger.exception("Scheduled paste backup failed")
            finally:
                self.runs += 1
