"""Copy a snapshot's record files back into the live records directory.

Restore merges: snapshot records overwrite live records with the same
identifier, and live records missing from the snapshot are left alone.

Updates:
  v0.1.2 - 2026-10-18 - Ignore reserved artifact names in any case when copying back.
  v0.1.1 - 2026-10-10 - Warn when restoring a snapshot that never received its manifest.
  v0.1.0 - 2026-09-27 - Initial restore implementation.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from models.backup_model import MANIFEST_FILENAME, RestoreResult

from ..exceptions import BackupNotFoundError, PromptStorageError
from .backups import check_backup_timestamp
from .base import RECORD_SUFFIX, identifier_from_path, is_reserved_stem, logger

if TYPE_CHECKING:
    from .records import PromptFileStore


class RestoreManager:
    """Restore snapshots created by :class:`~core.file_store.backups.BackupManager`."""

    def __init__(self, store: PromptFileStore, backup_dir: str | Path) -> None:
        self._store = store
        self._backup_dir = Path(backup_dir)

    def locate(self, timestamp: str) -> Path:
        """Return the snapshot directory for *timestamp* or raise BackupNotFoundError."""
        snapshot_dir = self._backup_dir / check_backup_timestamp(timestamp)
        if not snapshot_dir.is_dir():
            raise BackupNotFoundError(f"Backup {timestamp} not found")
        return snapshot_dir

    def restore_from_backup(self, timestamp: str) -> RestoreResult:
        """Copy every record file of the snapshot into the live store."""
        snapshot_dir = self.locate(timestamp)
        if not (snapshot_dir / MANIFEST_FILENAME).is_file():
            logger.warning("Backup %s has no manifest; it may be incomplete", timestamp)

        records_dir = self._store.records_dir
        try:
            records_dir.mkdir(parents=True, exist_ok=True)
            sources = sorted(
                path
                for path in snapshot_dir.glob(f"*{RECORD_SUFFIX}")
                if not is_reserved_stem(identifier_from_path(path)) and path.is_file()
            )
        except OSError as exc:
            raise PromptStorageError(f"Unable to prepare restore of backup {timestamp}") from exc

        identifiers: list[str] = []
        for source in sources:
            try:
                shutil.copy2(source, records_dir / source.name)
            except OSError as exc:
                raise PromptStorageError(
                    f"Unable to restore {source.name} from backup {timestamp} "
                    f"after {len(identifiers)} record(s)"
                ) from exc
            identifiers.append(identifier_from_path(source))

        logger.info("Restored %d prompts from backup %s", len(identifiers), timestamp)
        return RestoreResult(
            timestamp=timestamp,
            count=len(identifiers),
            success=True,
            identifiers=identifiers,
        )


__all__ = ["RestoreManager"]
