"""Data models for the prompt store.

Updates: v0.3.0 - 2026-10-09 - Export backup manifest and result dataclasses.
Updates: v0.2.0 - 2026-09-24 - Export IndexEntry projection.
Updates: v0.1.0 - 2026-09-21 - Export Prompt dataclass.
"""

from .backup_model import (
    BackupManifest,
    BackupResult,
    BackupSummary,
    ManifestEntry,
    RestoreResult,
)
from .index_model import IndexEntry
from .prompt_model import Prompt

__all__ = [
    "Prompt",
    "IndexEntry",
    "BackupManifest",
    "BackupResult",
    "BackupSummary",
    "ManifestEntry",
    "RestoreResult",
]
