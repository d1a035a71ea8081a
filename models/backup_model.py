"""Backup snapshot manifests and result records.

Updates: v0.2.0 - 2026-10-09 - Add restore results and incomplete snapshot markers.
Updates: v0.1.0 - 2026-09-26 - Initial manifest dataclass.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from core.file_store.base import SkippedRecord

MANIFEST_FILENAME = "manifest.json"
UNKNOWN_BACKUP_COUNT = -1


@dataclass(slots=True, frozen=True)
class ManifestEntry:
    """Identifier/name pair listed in a snapshot manifest."""

    id: str
    name: str


@dataclass(slots=True)
class BackupManifest:
    """Describe the contents of a completed snapshot."""

    timestamp: str
    count: int
    prompts: list[ManifestEntry] = field(default_factory=list)
    date: str | None = None

    def to_record(self) -> dict[str, Any]:
        """Return the JSON payload written as ``manifest.json``."""
        record: dict[str, Any] = {
            "timestamp": self.timestamp,
            "count": self.count,
            "prompts": [{"id": entry.id, "name": entry.name} for entry in self.prompts],
        }
        if self.date is not None:
            record["date"] = self.date
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> BackupManifest:
        """Hydrate a manifest, raising ValueError for structurally invalid payloads."""
        try:
            count = int(data["count"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("manifest is missing a numeric 'count'") from exc
        raw_prompts = data.get("prompts") or []
        if not isinstance(raw_prompts, list):
            raise ValueError("manifest 'prompts' must be a list")
        prompts: list[ManifestEntry] = []
        for item in raw_prompts:
            if not isinstance(item, Mapping):
                raise ValueError("manifest prompt entries must be objects")
            prompts.append(ManifestEntry(id=str(item.get("id")), name=str(item.get("name") or "")))
        date_value = data.get("date")
        return cls(
            timestamp=str(data.get("timestamp") or ""),
            count=count,
            prompts=prompts,
            date=str(date_value) if date_value is not None else None,
        )


@dataclass(slots=True, frozen=True)
class BackupSummary:
    """Listing entry for one snapshot directory."""

    timestamp: str
    path: Path
    count: int
    complete: bool


@dataclass(slots=True)
class BackupResult:
    """Outcome of creating a snapshot."""

    timestamp: str
    path: Path
    count: int
    skipped: list[SkippedRecord] = field(default_factory=list)


@dataclass(slots=True)
class RestoreResult:
    """Outcome of copying a snapshot back into the live records directory."""

    timestamp: str
    count: int
    success: bool = True
    identifiers: list[str] = field(default_factory=list)


__all__ = [
    "MANIFEST_FILENAME",
    "UNKNOWN_BACKUP_COUNT",
    "BackupManifest",
    "BackupResult",
    "BackupSummary",
    "ManifestEntry",
    "RestoreResult",
]
