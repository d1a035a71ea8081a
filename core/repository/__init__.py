"""SQLite-backed relational mirror for prompt records.

Updates:
  v0.2.0 - 2026-10-04 - Compose the repository from prompt and maintenance mixins.
  v0.1.0 - 2026-09-23 - Initial SQLite mirror.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .base import (
    RepositoryError,
    connect as _connect,
    ensure_directory as _ensure_directory,
    logger,
)
from .maintenance import RepositoryMaintenanceMixin
from .prompts import PromptStoreMixin


class PromptRepository(RepositoryMaintenanceMixin, PromptStoreMixin):
    """Compose repository mixins for SQLite-backed storage."""

    def __init__(self, db_path: str | Path) -> None:
        """Initialise repository storage and ensure the schema exists."""
        self._db_path = Path(db_path)
        self.init()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def init(self) -> None:
        """Create the database file and schema if they are missing."""
        try:
            _ensure_directory(self._db_path)
            with _connect(self._db_path) as conn:
                self._ensure_schema(conn)
        except OSError as exc:
            raise RepositoryError(f"Unable to create directory for {self._db_path}") from exc
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to initialise SQLite schema") from exc
        logger.debug("Repository ready at %s", self._db_path)


__all__ = [
    "PromptRepository",
    "RepositoryError",
    "_connect",
]
