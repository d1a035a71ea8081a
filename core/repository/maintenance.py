"""Schema bootstrap and maintenance helpers for the relational mirror.

Updates:
  v0.2.0 - 2026-10-11 - Add an extra column for unknown record keys.
  v0.1.0 - 2026-09-23 - Extract schema management and reset helpers.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from pathlib import Path

from .base import RepositoryError, connect as _connect, logger


class RepositoryMaintenanceMixin:
    """Tasks that create and reset mirror storage."""

    _db_path: Path

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        """Create required tables if they do not exist."""
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS prompts (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                content TEXT NOT NULL,
                description TEXT,
                category TEXT,
                tags TEXT,
                is_template INTEGER NOT NULL DEFAULT 0,
                variables TEXT,
                version TEXT NOT NULL,
                metadata TEXT,
                extra TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_prompts_category ON prompts(category);")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_prompts_name ON prompts(name);")
        logger.debug("Mirror schema ensured at %s", self._db_path)

    def reset_all_data(self) -> None:
        """Clear every mirrored prompt."""
        try:
            with _connect(self._db_path) as conn:
                conn.execute("DELETE FROM prompts;")
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to reset repository data") from exc


__all__ = ["RepositoryMaintenanceMixin"]
