"""Tests for configuration loading and validation logic.

Updates:
  v0.2.0 - 2026-10-16 - Cover optional default config file and explicit missing files.
  v0.1.1 - 2026-10-08 - Cover log level validation and the mirror toggle.
  v0.1.0 - 2026-09-24 - Cover JSON/env precedence, aliases, and .env loading.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest
from pytest import LogCaptureFixture, MonkeyPatch

from config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROMPTS_DIR,
    PromptStoreSettings,
    SettingsError,
    load_settings,
)


def test_defaults_apply_without_configuration() -> None:
    """Ensure defaults resolve relative to the working directory."""
    settings = load_settings()
    assert settings.prompts_dir == DEFAULT_PROMPTS_DIR.resolve()
    assert settings.mirror_enabled is True
    assert settings.log_level == DEFAULT_LOG_LEVEL


def test_load_settings_reads_json_and_env(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Ensure JSON configuration wins over environment values for shared keys."""
    config_path = tmp_path / "settings.json"
    config_path.write_text(
        json.dumps(
            {
                "prompts_dir": str(tmp_path / "json_prompts"),
                "database_path": str(tmp_path / "from_json.db"),
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("PROMPT_STORE_CONFIG_JSON", str(config_path))
    monkeypatch.setenv("PROMPT_STORE_PROMPTS_DIR", str(tmp_path / "env_prompts"))
    monkeypatch.setenv("PROMPT_STORE_BACKUP_DIR", str(tmp_path / "env_backups"))

    settings = load_settings()

    assert isinstance(settings, PromptStoreSettings)
    assert settings.prompts_dir == (tmp_path / "json_prompts").resolve()
    assert settings.db_path == (tmp_path / "from_json.db").resolve()
    assert settings.backup_dir == (tmp_path / "env_backups").resolve()


def test_default_config_file_is_picked_up_from_working_directory() -> None:
    """Ensure config/config.json is read when present and ignored when absent."""
    config_dir = Path("config")
    config_dir.mkdir()
    (config_dir / "config.json").write_text(
        json.dumps({"mirror_enabled": False}),
        encoding="utf-8",
    )
    assert load_settings().mirror_enabled is False


def test_missing_explicit_config_file_raises(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Ensure a named configuration file must exist."""
    monkeypatch.setenv("PROMPT_STORE_CONFIG_JSON", str(tmp_path / "absent.json"))
    with pytest.raises(SettingsError):
        load_settings()


def test_invalid_json_config_raises(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Ensure malformed JSON surfaces as a settings error."""
    config_path = tmp_path / "broken.json"
    config_path.write_text("{", encoding="utf-8")
    monkeypatch.setenv("PROMPT_STORE_CONFIG_JSON", str(config_path))
    with pytest.raises(SettingsError):
        load_settings()


def test_unknown_json_keys_are_logged(
    monkeypatch: MonkeyPatch,
    tmp_path: Path,
    caplog: LogCaptureFixture,
) -> None:
    """Ensure unrecognised JSON keys are reported and ignored."""
    config_path = tmp_path / "settings.json"
    config_path.write_text(json.dumps({"colour": "blue"}), encoding="utf-8")
    monkeypatch.setenv("PROMPT_STORE_CONFIG_JSON", str(config_path))
    with caplog.at_level(logging.WARNING, logger="prompt_store.settings"):
        load_settings()
    assert "colour" in caplog.text


def test_bare_alias_environment_variables(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """Ensure unprefixed aliases such as DATABASE_PATH are honoured."""
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "alias.db"))
    monkeypatch.setenv("MIRROR_ENABLED", "false")
    settings = load_settings()
    assert settings.db_path == (tmp_path / "alias.db").resolve()
    assert settings.mirror_enabled is False


def test_dotenv_values_fill_gaps_without_touching_environ(
    monkeypatch: MonkeyPatch,
    tmp_path: Path,
) -> None:
    """Ensure .env entries load but process environment variables take precedence."""
    env_file = tmp_path / "custom.env"
    env_file.write_text(
        f"PROMPT_STORE_BACKUP_DIR={tmp_path / 'dotenv_backups'}\n"
        "PROMPT_STORE_LOG_LEVEL=warning\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("PROMPT_STORE_ENV_FILE", str(env_file))
    monkeypatch.setenv("PROMPT_STORE_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.backup_dir == (tmp_path / "dotenv_backups").resolve()
    assert settings.log_level == "DEBUG"
    assert "PROMPT_STORE_BACKUP_DIR" not in os.environ


def test_invalid_log_level_is_rejected(monkeypatch: MonkeyPatch) -> None:
    """Ensure unknown logging levels fail validation."""
    monkeypatch.setenv("PROMPT_STORE_LOG_LEVEL", "chatty")
    with pytest.raises(SettingsError):
        load_settings()


def test_overrides_take_precedence(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    """Ensure explicit keyword overrides beat every other source."""
    monkeypatch.setenv("PROMPT_STORE_PROMPTS_DIR", str(tmp_path / "env"))
    settings = load_settings(prompts_dir=str(tmp_path / "explicit"))
    assert settings.prompts_dir == (tmp_path / "explicit").resolve()
