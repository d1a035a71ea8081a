"""Core service layer for the prompt store.

Updates:
  v0.4.0 - 2026-10-18 - Export prompt authoring errors.
  v0.3.0 - 2026-10-15 - Export the sink protocol and mirror transfer reports.
  v0.2.0 - 2026-10-09 - Export backup and restore managers.
  v0.1.0 - 2026-09-28 - Surface the file store, repository, and PromptManager API.
"""

from models.backup_model import BackupResult, BackupSummary, RestoreResult
from models.prompt_model import Prompt

from .exceptions import (
    BackupError,
    BackupNotFoundError,
    InvalidIdentifierError,
    MirrorUnavailableError,
    PromptAlreadyExistsError,
    PromptNotFoundError,
    PromptStorageError,
    PromptStoreError,
    PromptValidationError,
    RecordParseError,
)
from .factory import build_prompt_manager
from .file_store import (
    BackupManager,
    IndexBuildResult,
    LookupStatus,
    PromptFileStore,
    PromptIndexBuilder,
    RecordLookup,
    RestoreManager,
    ScanResult,
    SkippedRecord,
    SkipReason,
)
from .prompt_manager import PromptManager, SyncReport, TransferReport
from .repository import PromptRepository, RepositoryError
from .sinks import MirrorSink, PromptSink
from .templating import TemplateRenderer, TemplateRenderResult

__all__ = [
    "BackupError",
    "BackupManager",
    "BackupNotFoundError",
    "BackupResult",
    "BackupSummary",
    "IndexBuildResult",
    "InvalidIdentifierError",
    "LookupStatus",
    "MirrorSink",
    "MirrorUnavailableError",
    "Prompt",
    "PromptAlreadyExistsError",
    "PromptFileStore",
    "PromptIndexBuilder",
    "PromptManager",
    "PromptNotFoundError",
    "PromptRepository",
    "PromptSink",
    "PromptStorageError",
    "PromptStoreError",
    "PromptValidationError",
    "RecordLookup",
    "RecordParseError",
    "RepositoryError",
    "RestoreManager",
    "RestoreResult",
    "ScanResult",
    "SkipReason",
    "SkippedRecord",
    "SyncReport",
    "TemplateRenderResult",
    "TemplateRenderer",
    "TransferReport",
    "build_prompt_manager",
]
