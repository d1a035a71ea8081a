"""Configuration helpers for the prompt store.

Updates: v0.2.0 - 2026-10-08 - Export path defaults alongside the settings loader.
Updates: v0.1.0 - 2026-09-24 - Package scaffold.
"""

from .settings import (
    DEFAULT_BACKUP_DIR,
    DEFAULT_DB_PATH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROMPTS_DIR,
    PromptStoreSettings,
    SettingsError,
    load_settings,
)

__all__ = [
    "DEFAULT_BACKUP_DIR",
    "DEFAULT_DB_PATH",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_PROMPTS_DIR",
    "PromptStoreSettings",
    "SettingsError",
    "load_settings",
]
