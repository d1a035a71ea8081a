"""Pytest configuration for shared test fixtures and environment hooks.

Updates:
  v0.2.0 - 2026-10-17 - Add file store, manager, and prompt builder fixtures.
  v0.1.0 - 2026-09-24 - Isolate tests from prompt store environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from core import PromptFileStore, PromptManager, PromptRepository
from models.prompt_model import Prompt

PromptFactory = Callable[..., Prompt]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Drop prompt store variables and run every test from an empty directory."""
    for key in list(os.environ):
        if key.upper().startswith("PROMPT_STORE_"):
            monkeypatch.delenv(key, raising=False)
    for key in ("PROMPTS_DIR", "BACKUP_DIR", "DB_PATH", "DATABASE_PATH", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("MIRROR_ENABLED", raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def make_prompt() -> PromptFactory:
    """Return a builder for populated Prompt instances."""

    def _make_prompt(identifier: str = "greeting", **overrides: Any) -> Prompt:
        values: dict[str, Any] = {
            "id": identifier,
            "name": f"Prompt {identifier}",
            "content": "Hello {{ name }}",
            "description": f"Description of {identifier}",
            "category": "general",
            "tags": ["test", "storage"],
            "is_template": True,
            "variables": ["name"],
        }
        values.update(overrides)
        return Prompt(**values)

    return _make_prompt


@pytest.fixture
def records_dir(tmp_path: Path) -> Path:
    return tmp_path / "prompts"


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    return tmp_path / "backups"


@pytest.fixture
def file_store(records_dir: Path) -> PromptFileStore:
    return PromptFileStore(records_dir)


@pytest.fixture
def repository(tmp_path: Path) -> PromptRepository:
    return PromptRepository(tmp_path / "mirror.db")


@pytest.fixture
def manager(
    records_dir: Path,
    backup_dir: Path,
    repository: PromptRepository,
) -> Iterator[PromptManager]:
    with PromptManager(records_dir, backup_dir, repository=repository) as instance:
        yield instance
