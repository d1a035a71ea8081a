"""Shared CLI utility functions for prompt store commands.

Updates:
  v0.2.0 - 2026-10-18 - Load prompt JSON documents for the authoring commands.
  v0.1.0 - 2026-09-29 - Extract stdout logging, path, and variable parsing helpers.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from collections.abc import Sequence
    from logging import Logger
    from pathlib import Path


def print_and_log(logger: Logger, level: int, message: str) -> None:
    """Log *message* at *level* and mirror it to stdout."""
    logger.log(level, message)
    print(message)


def describe_path(path: Path | None, *, expect_directory: bool) -> str:
    """Return *path* followed by a short health note for the settings summary."""
    if path is None:
        return "not set"
    path = path.expanduser()
    if path.is_dir():
        note = "directory" if expect_directory else "expected a file, found a directory"
    elif path.exists():
        note = "expected a directory, found a file" if expect_directory else "file"
    else:
        note = "missing, created on first write"
        if not path.parent.exists():
            note += f"; parent {path.parent} also missing"
    return f"{path} ({note})"


def parse_variable_assignments(assignments: Sequence[str]) -> dict[str, str]:
    """Return ``KEY=VALUE`` pairs as a mapping; raise ValueError on malformed entries."""
    variables: dict[str, str] = {}
    for entry in assignments:
        key, separator, value = entry.partition("=")
        key = key.strip()
        if not separator or not key:
            raise ValueError(f"Expected KEY=VALUE, got {entry!r}")
        variables[key] = value
    return variables


def load_json_object(path: Path) -> dict[str, Any]:
    """Return the JSON object stored at *path*; raise ValueError when it is unusable."""
    try:
        payload = json.loads(path.expanduser().read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Unable to read {path}: {exc.strerror or exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc.msg} (line {exc.lineno})") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return payload
