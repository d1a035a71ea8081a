"""Printable summaries for prompt store configuration.

Updates:
  v0.1.0 - 2026-09-29 - Extract CLI settings summary rendering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .utils import describe_path

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from config import PromptStoreSettings


def print_settings_summary(settings: PromptStoreSettings) -> None:
    """Emit a readable summary of storage configuration and path health."""
    mirror_line = (
        describe_path(settings.db_path, expect_directory=False)
        if settings.mirror_enabled
        else f"disabled ({settings.db_path})"
    )
    lines = [
        "Prompt store configuration summary",
        "----------------------------------",
        f"Prompts directory: {describe_path(settings.prompts_dir, expect_directory=True)}",
        f"Backup directory: {describe_path(settings.backup_dir, expect_directory=True)}",
        f"Relational mirror: {mirror_line}",
        f"Log level: {settings.log_level}",
    ]
    print("\n".join(lines))


__all__ = ["print_settings_summary"]
