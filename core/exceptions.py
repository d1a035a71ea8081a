"""Common exception classes for core package.

This module centralises shared exception definitions for the file store,
the backup/restore managers and the orchestration facade.

All exceptions ultimately inherit from :class:`PromptStoreError`, allowing
callers to catch a single base class for any store-related failure while
still distinguishing individual error categories when needed.

Updates:
  v0.5.0 - 2026-10-18 - Add duplicate and invalid prompt document errors.
  v0.4.0 - 2026-10-09 - Add backup exception hierarchy.
  v0.3.0 - 2026-10-02 - Add identifier validation error.
  v0.2.0 - 2026-09-27 - Split parse failures from storage failures.
  v0.1.0 - 2026-09-21 - Created module.
"""

from __future__ import annotations


class PromptStoreError(Exception):
    """Base exception for prompt store failures."""


# ---------------------------------------------------------------------------
# Record errors
# ---------------------------------------------------------------------------


class PromptNotFoundError(PromptStoreError):
    """Raised when a prompt cannot be located in the backing store."""


class RecordParseError(PromptStoreError):
    """Raised when a stored prompt document is not valid structured data."""


class InvalidIdentifierError(PromptStoreError, ValueError):
    """Raised when an identifier cannot be mapped to a record file name."""


class PromptAlreadyExistsError(PromptStoreError):
    """Raised when a new prompt would replace an existing record."""


class PromptValidationError(PromptStoreError, ValueError):
    """Raised when caller-supplied prompt data does not describe a valid prompt."""


class PromptStorageError(PromptStoreError):
    """Raised when the underlying storage is unreachable or refuses an operation."""


# ---------------------------------------------------------------------------
# Snapshot errors
# ---------------------------------------------------------------------------


class BackupError(PromptStoreError):
    """Base class for backup and restore failures."""


class BackupNotFoundError(BackupError):
    """Raised when a requested snapshot directory does not exist."""


# ---------------------------------------------------------------------------
# Mirror errors
# ---------------------------------------------------------------------------


class MirrorUnavailableError(PromptStoreError):
    """Raised when a workflow needs the relational mirror but none is configured."""
