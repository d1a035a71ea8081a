"""File-backed prompt persistence: records, index, backups, and restore.

Updates:
  v0.2.0 - 2026-10-09 - Export backup and restore managers.
  v0.1.0 - 2026-09-22 - Package scaffold with the record store and index builder.
"""

from __future__ import annotations

from .backups import BackupManager, check_backup_timestamp, format_backup_timestamp
from .base import (
    INDEX_FILENAME,
    LookupStatus,
    RecordDocument,
    RecordLookup,
    ScanResult,
    SkippedRecord,
    SkipReason,
    validate_identifier,
)
from .index import IndexBuildResult, PromptIndexBuilder
from .records import PromptFileStore
from .restore import RestoreManager

__all__ = [
    "BackupManager",
    "INDEX_FILENAME",
    "IndexBuildResult",
    "LookupStatus",
    "PromptFileStore",
    "PromptIndexBuilder",
    "RecordDocument",
    "RecordLookup",
    "RestoreManager",
    "ScanResult",
    "SkipReason",
    "SkippedRecord",
    "check_backup_timestamp",
    "format_backup_timestamp",
    "validate_identifier",
]
