"""Shared file-store helpers, result dataclasses, and JSON document I/O.

Updates:
  v0.4.0 - 2026-10-18 - Share the reserved file name check with record scans.
  v0.3.0 - 2026-10-09 - Write documents through a temporary file and os.replace.
  v0.2.0 - 2026-10-02 - Reject reserved and path-like identifiers.
  v0.1.0 - 2026-09-22 - Extract scan result types and logger from the record store.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from models.backup_model import MANIFEST_FILENAME

from ..exceptions import InvalidIdentifierError, PromptStorageError, RecordParseError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from models.prompt_model import Prompt

logger = logging.getLogger("prompt_store.file_store")

RECORD_SUFFIX = ".json"
INDEX_FILENAME = "index.json"

_RESERVED_STEMS = frozenset(
    {
        INDEX_FILENAME.removesuffix(RECORD_SUFFIX),
        MANIFEST_FILENAME.removesuffix(RECORD_SUFFIX),
    }
)

T = TypeVar("T")


class SkipReason(str, Enum):
    """Why a record was left out of a bulk scan."""

    PARSE = "parse"
    VALIDATION = "validation"
    IO = "io"


@dataclass(slots=True, frozen=True)
class SkippedRecord:
    """Identifier and reason for a record excluded from a bulk operation."""

    identifier: str
    reason: str
    kind: SkipReason = SkipReason.PARSE


@dataclass(slots=True)
class ScanResult(Generic[T]):
    """Successful items of a bulk scan plus the records it skipped."""

    items: list[T] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    @property
    def skipped_identifiers(self) -> list[str]:
        return [entry.identifier for entry in self.skipped]


@dataclass(slots=True, frozen=True)
class RecordDocument:
    """A parsed record file before hydration into a :class:`Prompt`."""

    identifier: str
    path: Path
    data: dict[str, Any]


class LookupStatus(str, Enum):
    """Outcome categories for a single-record read."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    PARSE_FAILURE = "parse_failure"


@dataclass(slots=True, frozen=True)
class RecordLookup:
    """Result of reading one record by identifier."""

    identifier: str
    status: LookupStatus
    prompt: Prompt | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @classmethod
    def hit(cls, identifier: str, prompt: Prompt) -> RecordLookup:
        return cls(identifier=identifier, status=LookupStatus.FOUND, prompt=prompt)

    @classmethod
    def not_found(cls, identifier: str) -> RecordLookup:
        return cls(identifier=identifier, status=LookupStatus.NOT_FOUND)

    @classmethod
    def parse_failure(cls, identifier: str, error: str) -> RecordLookup:
        return cls(identifier=identifier, status=LookupStatus.PARSE_FAILURE, error=error)


def is_reserved_stem(stem: str) -> bool:
    """Return whether *stem* names a store artifact (index or manifest) in any case."""
    return stem.lower() in _RESERVED_STEMS


def validate_identifier(identifier: str) -> str:
    """Return *identifier* when it maps safely onto ``<identifier>.json``."""
    if not isinstance(identifier, str) or not identifier.strip():
        raise InvalidIdentifierError("Prompt identifier must be a non-empty string")
    if identifier != identifier.strip():
        raise InvalidIdentifierError(f"Prompt identifier {identifier!r} has surrounding whitespace")
    if "/" in identifier or "\\" in identifier or "\x00" in identifier:
        raise InvalidIdentifierError(f"Prompt identifier {identifier!r} contains a path separator")
    if identifier in {".", ".."}:
        raise InvalidIdentifierError(f"Prompt identifier {identifier!r} is not a file name")
    if is_reserved_stem(identifier):
        raise InvalidIdentifierError(f"Prompt identifier {identifier!r} is reserved")
    return identifier


def identifier_from_path(path: Path) -> str:
    """Return the record identifier encoded in a record file name."""
    return path.name.removesuffix(RECORD_SUFFIX)


def read_json_document(path: Path) -> dict[str, Any]:
    """Load a JSON object from *path*.

    Raises :class:`FileNotFoundError` untouched so callers can map it to a
    not-found result, :class:`RecordParseError` for content that is not a JSON
    object, and :class:`PromptStorageError` for any other I/O failure.
    """
    try:
        contents = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except UnicodeDecodeError as exc:
        raise RecordParseError(f"{path.name} is not valid UTF-8") from exc
    except OSError as exc:
        raise PromptStorageError(f"Unable to read {path}") from exc
    try:
        payload: object = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise RecordParseError(f"Invalid JSON in {path.name}: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise RecordParseError(f"{path.name} must contain a JSON object")
    return payload


def write_json_document(path: Path, payload: Mapping[str, Any]) -> Path:
    """Serialise *payload* to *path*, replacing any existing file in one step."""
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with temp_path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        os.replace(temp_path, path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise PromptStorageError(f"Unable to write {path}") from exc
    return path


__all__ = [
    "INDEX_FILENAME",
    "RECORD_SUFFIX",
    "LookupStatus",
    "RecordDocument",
    "RecordLookup",
    "ScanResult",
    "SkipReason",
    "SkippedRecord",
    "identifier_from_path",
    "is_reserved_stem",
    "logger",
    "read_json_document",
    "validate_identifier",
    "write_json_document",
]
