"""Prompt persistence helpers for the relational mirror.

Updates:
  v0.2.0 - 2026-10-11 - Preserve unknown record keys in the extra column.
  v0.1.1 - 2026-09-30 - Generate UUID4 identifiers for prompts saved without one.
  v0.1.0 - 2026-09-23 - Extract prompt upsert/get/delete helpers into a mixin.
"""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar

from models.prompt_model import DEFAULT_PROMPT_VERSION, Prompt

from .base import (
    RepositoryError,
    connect as _connect,
    decode_mapping,
    decode_string_list,
    encode_json,
    logger,
    parse_datetime as _parse_datetime,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class PromptStoreMixin:
    """Upsert, fetch, and delete mirrored prompts."""

    _db_path: Path

    _COLUMNS: ClassVar[Sequence[str]] = (
        "id",
        "name",
        "content",
        "description",
        "category",
        "tags",
        "is_template",
        "variables",
        "version",
        "metadata",
        "extra",
        "created_at",
        "updated_at",
    )

    def save(self, prompt: Prompt) -> str:
        """Insert or replace *prompt* keyed by its identifier and return the identifier.

        An empty identifier is replaced with a freshly generated UUID4 string.
        ``updated_at`` is always set to the time of the write.
        """
        prompt_id = prompt.id or str(uuid.uuid4())
        stored = replace(prompt, id=prompt_id, updated_at=datetime.now(UTC))
        payload = self._prompt_to_row(stored)
        placeholders = ", ".join(f":{column}" for column in self._COLUMNS)
        assignments = ", ".join(
            f"{column} = excluded.{column}"
            for column in self._COLUMNS
            if column not in {"id", "created_at"}
        )
        query = (
            f"INSERT INTO prompts ({', '.join(self._COLUMNS)}) VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {assignments};"
        )
        try:
            with _connect(self._db_path) as conn:
                conn.execute(query, payload)
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to save prompt {prompt_id}") from exc
        logger.debug("Mirrored prompt %s", prompt_id)
        return prompt_id

    def get_by_id(self, prompt_id: str) -> Prompt | None:
        """Return the mirrored prompt or None when absent."""
        try:
            with _connect(self._db_path) as conn:
                row = conn.execute("SELECT * FROM prompts WHERE id = ?;", (prompt_id,)).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to load prompt {prompt_id}") from exc
        if row is None:
            return None
        return self._row_to_prompt(row)

    def get_all(self) -> list[Prompt]:
        """Return every mirrored prompt ordered by name."""
        try:
            with _connect(self._db_path) as conn:
                rows = conn.execute(
                    "SELECT * FROM prompts ORDER BY name COLLATE NOCASE, id;"
                ).fetchall()
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to fetch prompt list") from exc
        return [self._row_to_prompt(row) for row in rows]

    def delete(self, prompt_id: str) -> bool:
        """Delete a mirrored prompt, returning whether a row was removed."""
        try:
            with _connect(self._db_path) as conn:
                cursor = conn.execute("DELETE FROM prompts WHERE id = ?;", (prompt_id,))
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to delete prompt {prompt_id}") from exc
        return cursor.rowcount > 0

    def count(self) -> int:
        """Return the number of mirrored prompts."""
        try:
            with _connect(self._db_path) as conn:
                row = conn.execute("SELECT COUNT(*) FROM prompts;").fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to count prompts") from exc
        return int(row[0])

    # Row mapping -------------------------------------------------------- #

    def _prompt_to_row(self, prompt: Prompt) -> dict[str, Any]:
        """Serialise Prompt into SQLite mapping."""
        return {
            "id": prompt.id,
            "name": prompt.name,
            "content": prompt.content,
            "description": prompt.description,
            "category": prompt.category,
            "tags": encode_json(list(prompt.tags)),
            "is_template": int(prompt.is_template),
            "variables": encode_json(list(prompt.variables)),
            "version": prompt.version,
            "metadata": encode_json(dict(prompt.metadata)),
            "extra": encode_json(dict(prompt.extra)) if prompt.extra else None,
            "created_at": prompt.created_at.isoformat(),
            "updated_at": prompt.updated_at.isoformat(),
        }

    def _row_to_prompt(self, row: sqlite3.Row) -> Prompt:
        """Hydrate Prompt from SQLite row."""
        return Prompt(
            id=row["id"],
            name=row["name"],
            content=row["content"],
            description=row["description"],
            category=row["category"],
            tags=decode_string_list(row["tags"]),
            is_template=bool(row["is_template"]),
            variables=decode_string_list(row["variables"]),
            version=row["version"] or DEFAULT_PROMPT_VERSION,
            metadata=decode_mapping(row["metadata"]),
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
            extra=decode_mapping(row["extra"]),
        )


__all__ = ["PromptStoreMixin"]
