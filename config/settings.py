"""Settings management utilities for prompt store configuration.

Updates:
  v0.2.1 - 2026-10-16 - Only fail on a missing config file when it was named explicitly.
  v0.2.0 - 2026-10-08 - Add mirror toggle and validated log level.
  v0.1.1 - 2026-09-30 - Read .env values through python-dotenv without mutating os.environ.
  v0.1.0 - 2026-09-24 - Initial pydantic-settings model with JSON config support.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger("prompt_store.settings")

_DOTENV_FALLBACK_PATH = ".env"
_ENV_PREFIX = "PROMPT_STORE_"
_DEFAULT_CONFIG_PATH = Path("config") / "config.json"

DEFAULT_PROMPTS_DIR = Path("data") / "prompts"
DEFAULT_BACKUP_DIR = Path("data") / "backups" / "prompts"
DEFAULT_DB_PATH = Path("data") / "prompt_store.db"
DEFAULT_LOG_LEVEL = "INFO"

# Field name -> accepted environment keys, checked with and without the prefix.
ENV_ALIASES: dict[str, list[str]] = {
    "prompts_dir": ["PROMPTS_DIR", "prompts_dir"],
    "backup_dir": ["BACKUP_DIR", "backup_dir"],
    "db_path": ["DB_PATH", "DATABASE_PATH", "db_path", "database_path"],
    "mirror_enabled": ["MIRROR_ENABLED", "mirror_enabled"],
    "log_level": ["LOG_LEVEL", "log_level"],
}

_PATH_FIELDS = ("prompts_dir", "backup_dir", "db_path")
_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


def _read_dotenv_values() -> dict[str, str]:
    """Load ``.env`` entries into a mapping without mutating ``os.environ``."""
    env_file_override = os.getenv(f"{_ENV_PREFIX}ENV_FILE")
    if env_file_override is not None:
        candidate = env_file_override.strip()
        if not candidate:
            return {}
        path = Path(candidate).expanduser()
    else:
        path = Path(_DOTENV_FALLBACK_PATH).expanduser()
    if not path.is_file():
        return {}
    raw_values = dotenv_values(str(path))
    return {str(key): str(value) for key, value in raw_values.items() if value is not None}


class SettingsError(Exception):
    """Raised when prompt store configuration cannot be loaded or validated."""


class PromptStoreSettings(BaseSettings):
    """Application configuration sourced from environment variables or JSON files."""

    prompts_dir: Path = Field(
        default=DEFAULT_PROMPTS_DIR,
        description="Directory holding one JSON document per prompt plus index.json.",
    )
    backup_dir: Path = Field(
        default=DEFAULT_BACKUP_DIR,
        description="Root directory for timestamped prompt snapshots.",
    )
    db_path: Path = Field(
        default=DEFAULT_DB_PATH,
        description="SQLite database file used as the relational mirror.",
    )
    mirror_enabled: bool = Field(
        default=True,
        description="Open the relational mirror; mirror workflows fail when disabled.",
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)

    model_config = cast(
        "SettingsConfigDict",
        {
            "env_prefix": _ENV_PREFIX,
            "case_sensitive": False,
            "populate_by_name": True,
        },
    )

    @field_validator(*_PATH_FIELDS, mode="before")
    def _normalise_path(cls, value: Any) -> Path:
        """Expand user-relative paths and coerce values to Path instances."""
        if value is None or not str(value).strip():
            raise ValueError("a filesystem path is required")
        path = Path(str(value).strip()).expanduser()
        return path.resolve()

    @field_validator("log_level", mode="before")
    def _normalise_log_level(cls, value: Any) -> str:
        """Accept logging level names in any case."""
        text = str(value or DEFAULT_LOG_LEVEL).strip().upper()
        if text not in _LOG_LEVELS:
            choices = ", ".join(sorted(_LOG_LEVELS))
            raise ValueError(f"log_level must be one of {choices}")
        return text

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        """Define configuration source precedence.

        Order (highest first):
            1. Explicit keyword arguments (e.g. load_settings(prompts_dir="...")).
            2. JSON configuration file.
            3. Environment variables / aliases, then ``.env`` values.
            4. File secrets.
        """

        def env_with_aliases(_: BaseSettings | None = None) -> dict[str, Any]:
            data: dict[str, Any] = {}
            dotenv_data = _read_dotenv_values()

            def _lookup(candidate: str) -> str | None:
                value = os.getenv(candidate)
                if value is None:
                    value = dotenv_data.get(candidate)
                if value is None:
                    return None
                stripped_value = str(value).strip()
                return stripped_value or None

            for field, keys in ENV_ALIASES.items():
                for key in keys:
                    candidates = [f"{_ENV_PREFIX}{key}", f"{_ENV_PREFIX}{key.upper()}"]
                    if key.isupper():
                        candidates.append(key)
                    value = next(
                        (found for found in map(_lookup, candidates) if found is not None),
                        None,
                    )
                    if value is not None:
                        data[field] = value
                        break
            return data

        return (
            init_settings,
            cls._json_config_settings_source(settings_cls),
            cast("PydanticBaseSettingsSource", env_with_aliases),
            file_secret_settings,
        )

    @classmethod
    def _json_config_settings_source(
        cls,
        _: type[BaseSettings],
    ) -> PydanticBaseSettingsSource:
        """Return settings extracted from an optional JSON config file."""

        def _loader(_: BaseSettings | None = None) -> dict[str, Any]:
            explicit_path = os.getenv(f"{_ENV_PREFIX}CONFIG_JSON")
            if explicit_path:
                path = Path(explicit_path).expanduser()
                if not path.exists():
                    raise SettingsError(f"Configuration file not found: {path}")
            else:
                path = _DEFAULT_CONFIG_PATH
                if not path.exists():
                    return {}
            try:
                raw_contents = path.read_text(encoding="utf-8")
            except OSError as exc:  # pragma: no cover - filesystem failure is env-specific
                raise SettingsError(f"Unable to read configuration file: {path}") from exc
            try:
                data = json.loads(raw_contents)
            except json.JSONDecodeError as exc:
                raise SettingsError(f"Invalid JSON in configuration file: {path}") from exc
            if not isinstance(data, dict):
                raise SettingsError(f"Configuration file {path} must contain a JSON object")
            mapping_data = cast("Mapping[object, Any]", data)
            data_dict: dict[str, Any] = {str(key): value for key, value in mapping_data.items()}
            mapped: dict[str, Any] = {}
            if "database_path" in data_dict and "db_path" not in data_dict:
                mapped["db_path"] = data_dict["database_path"]
            for key in ENV_ALIASES:
                if key in data_dict:
                    mapped[key] = data_dict[key]
            unknown = sorted(set(data_dict) - set(ENV_ALIASES) - {"database_path"})
            if unknown:
                logger.warning(
                    "Ignoring unknown key(s) %s in configuration file %s",
                    ", ".join(unknown),
                    path,
                )
            return mapped

        return cast("PydanticBaseSettingsSource", _loader)


def load_settings(**overrides: Any) -> PromptStoreSettings:
    """Return validated settings, raising SettingsError on failure."""
    try:
        return PromptStoreSettings(**overrides)
    except SettingsError:
        raise
    except ValidationError as exc:
        raise SettingsError("Invalid prompt store configuration") from exc

