"""Prompt Manager package facade and orchestration layer.

The facade owns one file store and, optionally, one relational mirror. Plain
CRUD only touches the file store; the mirror is written through explicit
flags or the transfer workflows.

Updates:
  v0.3.0 - 2026-10-14 - Add mirror export, import, and sync workflows.
  v0.2.0 - 2026-10-13 - Move index, backup, and restore helpers into a maintenance mixin.
  v0.1.0 - 2026-09-28 - Initial facade over the file store and mirror.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import MirrorUnavailableError
from ..file_store import BackupManager, PromptFileStore, PromptIndexBuilder, RestoreManager
from ..templating import TemplateRenderer
from .maintenance import MaintenanceMixin
from .storage import PromptStorageMixin
from .transfer import MirrorTransferMixin, SyncPreference, SyncReport, TransferReport

if TYPE_CHECKING:  # pragma: no cover - typing only
    from pathlib import Path
    from types import TracebackType

    from ..repository import PromptRepository

logger = logging.getLogger("prompt_store.manager")


class PromptManager(PromptStorageMixin, MaintenanceMixin, MirrorTransferMixin):
    """Coordinate prompt records, index, backups, and the relational mirror."""

    def __init__(
        self,
        prompts_dir: str | Path,
        backup_dir: str | Path,
        *,
        repository: PromptRepository | None = None,
        file_store: PromptFileStore | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        """Initialise the manager with its storage backends.

        Args:
            prompts_dir: Directory holding one JSON document per prompt.
            backup_dir: Root directory for timestamped snapshots.
            repository: Optional relational mirror; mirror workflows raise
                :class:`MirrorUnavailableError` without one.
            file_store: Optional preconfigured file store (for example, in tests).
            renderer: Optional template renderer override.
        """
        self._closed = False
        self._file_store = file_store or PromptFileStore(prompts_dir)
        self._repository = repository
        self._renderer = renderer or TemplateRenderer()
        self._index_builder = PromptIndexBuilder(self._file_store)
        self._backup_manager = BackupManager(self._file_store, backup_dir)
        self._restore_manager = RestoreManager(self._file_store, backup_dir)
        logger.debug(
            "Prompt manager ready (records=%s, backups=%s, mirror=%s)",
            self._file_store.records_dir,
            backup_dir,
            "enabled" if repository is not None else "disabled",
        )

    @property
    def file_store(self) -> PromptFileStore:
        return self._file_store

    @property
    def repository(self) -> PromptRepository | None:
        return self._repository

    @property
    def mirror_enabled(self) -> bool:
        return self._repository is not None

    def _require_repository(self) -> PromptRepository:
        if self._repository is None:
            raise MirrorUnavailableError("Relational mirror is disabled")
        return self._repository

    def close(self) -> None:
        """Release backend references; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._repository = None
        logger.debug("Prompt manager closed")

    def __enter__(self) -> PromptManager:
        """Support use of PromptManager as a context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close resources when exiting a context manager block."""
        self.close()


__all__ = [
    "PromptManager",
    "SyncPreference",
    "SyncReport",
    "TransferReport",
]
