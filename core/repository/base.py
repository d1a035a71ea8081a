"""Shared repository helpers and error hierarchy.

Updates:
  v0.3.0 - 2026-10-17 - Decode JSON columns through one tolerant helper.
  v0.2.0 - 2026-10-04 - Derive repository errors from the package error base.
  v0.1.0 - 2026-09-23 - Extract logger, connection, and JSON column helpers.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from ..exceptions import PromptStoreError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("prompt_store.repository")


class RepositoryError(PromptStoreError):
    """Base exception for relational mirror failures."""


def ensure_directory(path: Path) -> None:
    """Create the directory that will hold the database file."""
    path.parent.mkdir(parents=True, exist_ok=True)


def connect(db_path: Path) -> sqlite3.Connection:
    """Open *db_path* with name-addressable rows and WAL journaling."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    return conn


def encode_json(value: Any | None) -> str | None:
    """Return *value* as JSON column text; None stays NULL."""
    return None if value is None else json.dumps(value, ensure_ascii=False)


def _decode_json(value: str | None) -> object:
    """Return the decoded column, None for empty columns, or the raw text when it is not JSON."""
    if value is None or value in ("", "null"):
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        logger.debug("Mirror column is not JSON: %.60r", value)
        return value


def decode_string_list(value: str | None) -> list[str]:
    """Return a JSON array column as strings; a scalar becomes a one-item list."""
    decoded = _decode_json(value)
    if decoded is None:
        return []
    if isinstance(decoded, list):
        return [str(item) for item in cast("list[object]", decoded)]
    return [str(decoded)]


def decode_mapping(value: str | None) -> dict[str, Any]:
    """Return a JSON object column as a dict; anything else decodes to ``{}``."""
    decoded = _decode_json(value)
    if not isinstance(decoded, dict):
        return {}
    return {str(key): item for key, item in cast("dict[object, Any]", decoded).items()}


def parse_datetime(value: Any) -> datetime:
    """Return a timezone-aware datetime parsed from a SQLite column.

    Unparseable or empty values fall back to the current UTC time so a
    damaged row still hydrates.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if not isinstance(value, str) or not value.strip():
        return datetime.now(UTC)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparseable timestamp %r in mirror row", value)
        return datetime.now(UTC)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


__all__ = [
    "RepositoryError",
    "connect",
    "decode_mapping",
    "decode_string_list",
    "encode_json",
    "ensure_directory",
    "logger",
    "parse_datetime",
]
