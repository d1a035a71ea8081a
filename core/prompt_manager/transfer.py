"""Export, import, and sync workflows between the file store and the mirror.

Every workflow snapshots the file store before it writes anything. Per-record
failures are collected in the returned report and never abort the batch.

Updates:
  v0.2.0 - 2026-10-14 - Report diverging records as sync conflicts unless a side is preferred.
  v0.1.1 - 2026-10-07 - Skip existing files on import unless overwrite is requested.
  v0.1.0 - 2026-10-06 - Initial export and import workflows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from ..exceptions import PromptStoreError

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from models.prompt_model import Prompt

    from ..file_store import BackupManager, PromptFileStore
    from ..repository import PromptRepository

logger = logging.getLogger("prompt_store.manager")

SyncPreference = Literal["file", "mirror"]
_PREFERENCES: frozenset[str] = frozenset({"file", "mirror"})

__all__ = ["MirrorTransferMixin", "SyncPreference", "SyncReport", "TransferReport"]


@dataclass(slots=True)
class TransferReport:
    """Outcome of a one-directional transfer."""

    backup_timestamp: str
    transferred: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.transferred) + len(self.skipped) + len(self.failed)


@dataclass(slots=True)
class SyncReport:
    """Outcome of a two-way sync between the file store and the mirror."""

    backup_timestamp: str
    added_to_mirror: list[str] = field(default_factory=list)
    added_to_files: list[str] = field(default_factory=list)
    updated_mirror: list[str] = field(default_factory=list)
    updated_files: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def changed(self) -> int:
        return (
            len(self.added_to_mirror)
            + len(self.added_to_files)
            + len(self.updated_mirror)
            + len(self.updated_files)
        )


class MirrorTransferMixin:
    """Move prompts between the file store and the relational mirror."""

    _file_store: PromptFileStore
    _backup_manager: BackupManager

    if TYPE_CHECKING:

        def _require_repository(self) -> PromptRepository: ...

    def export_to_mirror(self) -> TransferReport:
        """Upsert every readable file record into the mirror."""
        repository = self._require_repository()
        report = TransferReport(backup_timestamp=self._backup_manager.create_backup().timestamp)
        scan = self._file_store.list()
        report.skipped.extend(scan.skipped_identifiers)
        for prompt in scan.items:
            try:
                repository.save(prompt)
            except PromptStoreError as exc:
                logger.warning("Failed to export prompt %s: %s", prompt.id, exc)
                report.failed.append((prompt.id, str(exc)))
                continue
            report.transferred.append(prompt.id)
        logger.info(
            "Exported %d prompts to mirror (%d skipped, %d failed)",
            len(report.transferred),
            len(report.skipped),
            len(report.failed),
        )
        return report

    def import_from_mirror(self, *, overwrite: bool = False) -> TransferReport:
        """Write mirror rows to files; existing files are kept unless *overwrite*."""
        repository = self._require_repository()
        report = TransferReport(backup_timestamp=self._backup_manager.create_backup().timestamp)
        for prompt in repository.get_all():
            try:
                if not overwrite and self._file_store.exists(prompt.id):
                    report.skipped.append(prompt.id)
                    continue
                self._file_store.put(prompt.id, prompt)
            except PromptStoreError as exc:
                logger.warning("Failed to import prompt %s: %s", prompt.id, exc)
                report.failed.append((prompt.id, str(exc)))
                continue
            report.transferred.append(prompt.id)
        logger.info(
            "Imported %d prompts from mirror (%d skipped, %d failed)",
            len(report.transferred),
            len(report.skipped),
            len(report.failed),
        )
        return report

    def sync_with_mirror(self, *, prefer: SyncPreference | None = None) -> SyncReport:
        """Bring both sinks to the union of their records.

        Records present on both sides with diverging content are reported in
        ``conflicts`` and left alone, unless *prefer* names the side to copy
        from.
        """
        if prefer is not None and prefer not in _PREFERENCES:
            raise ValueError(f"prefer must be 'file' or 'mirror', not {prefer!r}")
        repository = self._require_repository()
        report = SyncReport(backup_timestamp=self._backup_manager.create_backup().timestamp)

        scan = self._file_store.list()
        from_files: dict[str, Prompt] = {prompt.id: prompt for prompt in scan.items}
        from_mirror: dict[str, Prompt] = {prompt.id: prompt for prompt in repository.get_all()}
        unreadable = set(scan.skipped_identifiers)

        for identifier in sorted(from_files.keys() | from_mirror.keys()):
            file_prompt = from_files.get(identifier)
            mirror_prompt = from_mirror.get(identifier)
            try:
                if mirror_prompt is None and file_prompt is not None:
                    repository.save(file_prompt)
                    report.added_to_mirror.append(identifier)
                elif file_prompt is None and mirror_prompt is not None:
                    if identifier in unreadable:
                        # A corrupt file still occupies the identifier.
                        report.conflicts.append(identifier)
                        continue
                    self._file_store.put(identifier, mirror_prompt)
                    report.added_to_files.append(identifier)
                elif file_prompt is not None and mirror_prompt is not None:
                    self._reconcile(report, identifier, file_prompt, mirror_prompt, prefer)
            except PromptStoreError as exc:
                logger.warning("Failed to sync prompt %s: %s", identifier, exc)
                report.failed.append((identifier, str(exc)))

        if report.conflicts:
            logger.warning(
                "Sync left %d diverging prompt(s) unresolved: %s",
                len(report.conflicts),
                ", ".join(report.conflicts),
            )
        logger.info("Synced file store and mirror: %d change(s)", report.changed)
        return report

    def _reconcile(
        self,
        report: SyncReport,
        identifier: str,
        file_prompt: Prompt,
        mirror_prompt: Prompt,
        prefer: SyncPreference | None,
    ) -> None:
        if file_prompt.content_signature() == mirror_prompt.content_signature():
            report.unchanged.append(identifier)
        elif prefer == "file":
            self._require_repository().save(file_prompt)
            report.updated_mirror.append(identifier)
        elif prefer == "mirror":
            self._file_store.put(identifier, mirror_prompt)
            report.updated_files.append(identifier)
        else:
            report.conflicts.append(identifier)
