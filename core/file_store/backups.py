"""Timestamped snapshots of the live prompt records directory.

Each snapshot lives in ``<backup_dir>/<timestamp>/`` and holds a copy of every
readable record file. ``manifest.json`` is always written last and replaced
into place atomically, so a snapshot directory that carries a manifest is a
complete snapshot; one without a manifest was interrupted.

Updates:
  v0.3.0 - 2026-10-10 - Advance colliding timestamps so snapshot names stay unique.
  v0.2.0 - 2026-10-08 - Report -1 counts for snapshots with unreadable manifests.
  v0.1.0 - 2026-09-26 - Initial snapshot creation and listing.
"""

from __future__ import annotations

import shutil
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from models.backup_model import (
    MANIFEST_FILENAME,
    UNKNOWN_BACKUP_COUNT,
    BackupManifest,
    BackupResult,
    BackupSummary,
    ManifestEntry,
)

from ..exceptions import BackupError, PromptStorageError, RecordParseError
from .base import logger, read_json_document, write_json_document

if TYPE_CHECKING:
    from collections.abc import Callable

    from .records import PromptFileStore


def format_backup_timestamp(moment: datetime) -> str:
    """Return a fixed-width, directory-safe UTC timestamp such as ``2026-10-18T09-30-00-125Z``."""
    utc = moment.astimezone(UTC)
    iso = utc.strftime("%Y-%m-%dT%H:%M:%S") + f".{utc.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def check_backup_timestamp(timestamp: str) -> str:
    """Reject timestamps that could escape the backup root."""
    if not timestamp or "/" in timestamp or "\\" in timestamp or timestamp in {".", ".."}:
        raise BackupError(f"Invalid backup timestamp {timestamp!r}")
    return timestamp


class BackupManager:
    """Create and enumerate snapshots of a :class:`PromptFileStore`."""

    def __init__(
        self,
        store: PromptFileStore,
        backup_dir: str | Path,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._backup_dir = Path(backup_dir)
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir

    def snapshot_path(self, timestamp: str) -> Path:
        return self._backup_dir / check_backup_timestamp(timestamp)

    def _allocate_snapshot(self) -> tuple[str, Path, datetime]:
        """Create a fresh snapshot directory, stepping past names already taken."""
        moment = self._clock()
        try:
            self._backup_dir.mkdir(parents=True, exist_ok=True)
            while True:
                timestamp = format_backup_timestamp(moment)
                path = self._backup_dir / timestamp
                try:
                    path.mkdir()
                except FileExistsError:
                    moment += timedelta(milliseconds=1)
                    continue
                return timestamp, path, moment
        except OSError as exc:
            raise PromptStorageError(f"Unable to create snapshot under {self._backup_dir}") from exc

    def create_backup(self) -> BackupResult:
        """Copy every readable record into a new snapshot and write its manifest."""
        timestamp, snapshot_dir, moment = self._allocate_snapshot()
        documents = self._store.scan_documents()
        entries: list[ManifestEntry] = []
        for document in documents.items:
            try:
                shutil.copy2(document.path, snapshot_dir / document.path.name)
            except OSError as exc:
                logger.error(
                    "Backup %s aborted while copying %s; snapshot left without manifest",
                    timestamp,
                    document.path.name,
                )
                raise PromptStorageError(
                    f"Unable to copy {document.path.name} into backup {timestamp}"
                ) from exc
            entries.append(
                ManifestEntry(id=document.identifier, name=str(document.data.get("name") or ""))
            )

        manifest = BackupManifest(
            timestamp=timestamp,
            count=len(entries),
            prompts=entries,
            date=moment.astimezone(UTC).isoformat(),
        )
        # Manifest last: its presence marks the snapshot as complete.
        write_json_document(snapshot_dir / MANIFEST_FILENAME, manifest.to_record())
        logger.info(
            "Created backup %s with %d prompts (%d skipped)",
            timestamp,
            len(entries),
            len(documents.skipped),
        )
        return BackupResult(
            timestamp=timestamp,
            path=snapshot_dir,
            count=len(entries),
            skipped=list(documents.skipped),
        )

    def read_manifest(self, timestamp: str) -> BackupManifest | None:
        """Return the manifest for *timestamp*, or None when missing or unreadable."""
        manifest_path = self.snapshot_path(timestamp) / MANIFEST_FILENAME
        try:
            return BackupManifest.from_record(read_json_document(manifest_path))
        except FileNotFoundError:
            return None
        except (RecordParseError, PromptStorageError, ValueError) as exc:
            logger.warning("Unreadable manifest for backup %s: %s", timestamp, exc)
            return None

    def list_backups(self) -> list[BackupSummary]:
        """Return every snapshot, newest first."""
        if not self._backup_dir.is_dir():
            return []
        try:
            candidates = [path for path in self._backup_dir.iterdir() if path.is_dir()]
        except OSError as exc:
            raise PromptStorageError(f"Unable to list backups in {self._backup_dir}") from exc

        summaries: list[BackupSummary] = []
        for path in candidates:
            manifest = self.read_manifest(path.name)
            if manifest is None:
                summaries.append(
                    BackupSummary(
                        timestamp=path.name,
                        path=path,
                        count=UNKNOWN_BACKUP_COUNT,
                        complete=False,
                    )
                )
                continue
            summaries.append(
                BackupSummary(timestamp=path.name, path=path, count=manifest.count, complete=True)
            )
        summaries.sort(key=lambda summary: summary.timestamp, reverse=True)
        return summaries


__all__ = [
    "BackupManager",
    "check_backup_timestamp",
    "format_backup_timestamp",
]
