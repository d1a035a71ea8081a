"""Regenerate the records-root ``index.json`` summary from stored prompt files.

Updates:
  v0.3.0 - 2026-10-18 - Index records under their file name rather than the stored id.
  v0.2.0 - 2026-10-06 - Report validation skips alongside parse failures.
  v0.1.0 - 2026-09-24 - Port index regeneration into the file store package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from models.index_model import INDEX_FORMAT_VERSION, IndexEntry, missing_index_fields

from ..exceptions import PromptStorageError, RecordParseError
from .base import (
    INDEX_FILENAME,
    SkippedRecord,
    SkipReason,
    logger,
    read_json_document,
    write_json_document,
)

if TYPE_CHECKING:
    from pathlib import Path

    from .records import PromptFileStore


def _utc_timestamp(moment: datetime) -> str:
    """Return an ISO-8601 UTC timestamp with a ``Z`` suffix."""
    return moment.astimezone(UTC).replace(tzinfo=None).isoformat() + "Z"


@dataclass(slots=True)
class IndexBuildResult:
    """Entries written to the index plus the records left out of it."""

    path: Path
    entries: list[IndexEntry]
    built_at: str
    skipped: list[SkippedRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.entries)


class PromptIndexBuilder:
    """Build the sorted index artifact for a :class:`PromptFileStore`."""

    def __init__(self, store: PromptFileStore) -> None:
        self._store = store

    @property
    def index_path(self) -> Path:
        return self._store.records_dir / INDEX_FILENAME

    def build(self) -> IndexBuildResult:
        """Scan every record, keep the well-formed ones, and rewrite the index."""
        documents = self._store.scan_documents()
        skipped = list(documents.skipped)
        entries: list[IndexEntry] = []
        for document in documents.items:
            missing = missing_index_fields(document.data)
            if missing:
                reason = f"missing required field(s): {', '.join(missing)}"
                logger.warning("Excluding %s from index: %s", document.identifier, reason)
                skipped.append(SkippedRecord(document.identifier, reason, SkipReason.VALIDATION))
                continue
            try:
                entries.append(
                    IndexEntry.from_document(document.data, identifier=document.identifier)
                )
            except (TypeError, ValueError) as exc:
                logger.warning("Excluding %s from index: %s", document.identifier, exc)
                skipped.append(
                    SkippedRecord(document.identifier, str(exc), SkipReason.VALIDATION)
                )
        entries.sort(key=lambda entry: entry.id)

        built_at = _utc_timestamp(datetime.now(UTC))
        payload = {
            "prompts": [entry.to_record() for entry in entries],
            "metadata": {
                "totalPrompts": len(entries),
                "lastUpdated": built_at,
                "version": INDEX_FORMAT_VERSION,
            },
        }
        path = write_json_document(self.index_path, payload)
        logger.info(
            "Regenerated index with %d prompts (%d skipped) at %s",
            len(entries),
            len(skipped),
            path,
        )
        return IndexBuildResult(path=path, entries=entries, built_at=built_at, skipped=skipped)

    def load(self) -> dict[str, Any] | None:
        """Return the current index payload, or None when absent or unreadable."""
        try:
            return read_json_document(self.index_path)
        except FileNotFoundError:
            return None
        except (RecordParseError, PromptStorageError) as exc:
            logger.warning("Unable to load index %s: %s", self.index_path, exc)
            return None


__all__ = ["IndexBuildResult", "PromptIndexBuilder"]
