"""Index, backup, and restore workflows for the Prompt Manager facade.

Updates:
  v0.2.0 - 2026-10-13 - Take a safety backup before restoring and rebuild the index after.
  v0.1.0 - 2026-09-30 - Expose index rebuilds and backup listing on the facade.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from models.backup_model import BackupResult, BackupSummary, RestoreResult

    from ..file_store import (
        BackupManager,
        IndexBuildResult,
        PromptIndexBuilder,
        RestoreManager,
    )

logger = logging.getLogger("prompt_store.manager")

__all__ = ["MaintenanceMixin"]


class MaintenanceMixin:
    """Operational helpers over the file store."""

    _index_builder: PromptIndexBuilder
    _backup_manager: BackupManager
    _restore_manager: RestoreManager

    def rebuild_index(self) -> IndexBuildResult:
        return self._index_builder.build()

    def create_backup(self) -> BackupResult:
        return self._backup_manager.create_backup()

    def list_backups(self) -> list[BackupSummary]:
        return self._backup_manager.list_backups()

    def restore_backup(
        self,
        timestamp: str,
        *,
        backup_current: bool = True,
        rebuild_index: bool = True,
    ) -> RestoreResult:
        """Restore snapshot *timestamp* into the live records directory.

        The snapshot is located first, so an unknown timestamp raises
        :class:`~core.exceptions.BackupNotFoundError` before anything is
        written. With ``backup_current`` the live state is snapshotted before
        the restore; with ``rebuild_index`` the index is regenerated after it.
        """
        self._restore_manager.locate(timestamp)
        if backup_current:
            safety = self._backup_manager.create_backup()
            logger.info("Safety backup %s taken before restoring %s", safety.timestamp, timestamp)
        result = self._restore_manager.restore_from_backup(timestamp)
        if rebuild_index:
            self._index_builder.build()
        return result
