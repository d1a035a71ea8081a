"""Factories for constructing PromptManager instances from validated settings.

Updates:
  v0.2.0 - 2026-10-15 - Skip the relational mirror when it is disabled in settings.
  v0.1.0 - 2026-09-28 - Initial settings-driven builder.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .prompt_manager import PromptManager
from .repository import PromptRepository

if TYPE_CHECKING:  # pragma: no cover - typing only
    from config import PromptStoreSettings

    from .file_store import PromptFileStore

factory_logger = logging.getLogger("prompt_store.factory")


def _resolve_repository(
    settings: PromptStoreSettings,
    repository: PromptRepository | None,
) -> PromptRepository | None:
    """Return the mirror to use, building one from settings when enabled."""
    if repository is not None:
        return repository
    if not settings.mirror_enabled:
        factory_logger.info("Relational mirror disabled by configuration")
        return None
    return PromptRepository(settings.db_path)


def build_prompt_manager(
    settings: PromptStoreSettings,
    *,
    repository: PromptRepository | None = None,
    file_store: PromptFileStore | None = None,
) -> PromptManager:
    """Return a PromptManager configured from validated settings."""
    resolved_repository = _resolve_repository(settings, repository)
    manager = PromptManager(
        settings.prompts_dir,
        settings.backup_dir,
        repository=resolved_repository,
        file_store=file_store,
    )
    factory_logger.debug(
        "Built prompt manager for %s (mirror: %s)",
        settings.prompts_dir,
        settings.db_path if resolved_repository is not None else "disabled",
    )
    return manager


__all__ = ["build_prompt_manager"]
