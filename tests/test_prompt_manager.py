"""PromptManager facade tests for CRUD, index, backup, and restore workflows.

Updates:
  v0.3.0 - 2026-10-18 - Cover authoring, filtered listing, search, and Jinja2 variable detection.
  v0.2.0 - 2026-10-13 - Cover safety backups and restore of unknown timestamps.
  v0.1.0 - 2026-09-28 - Cover CRUD through the facade.
"""

from __future__ import annotations

import json
import uuid
from typing import TYPE_CHECKING

import pytest

from core import (
    BackupNotFoundError,
    MirrorUnavailableError,
    PromptAlreadyExistsError,
    PromptManager,
    PromptNotFoundError,
    PromptValidationError,
    RecordParseError,
)

if TYPE_CHECKING:
    from pathlib import Path

    from conftest import PromptFactory
    from core import PromptRepository


def test_save_prompt_detects_variables_and_touches_timestamp(
    manager: PromptManager,
    make_prompt: PromptFactory,
) -> None:
    prompt = make_prompt("greet", content="Hi {{ name }} from {{ place }}", variables=[])
    before = prompt.updated_at
    stored = manager.save_prompt(prompt)
    assert stored.variables == ["name", "place"]
    assert stored.updated_at >= before
    assert manager.get_prompt("greet") == stored


def test_plain_crud_never_touches_the_mirror(
    manager: PromptManager,
    repository: PromptRepository,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("files-only"))
    assert repository.count() == 0
    manager.save_prompt(make_prompt("both"), mirror=True)
    assert repository.get_by_id("both") is not None
    assert manager.delete_prompt("both") is True
    assert repository.get_by_id("both") is not None
    assert manager.delete_prompt("both", mirror=True) is True
    assert repository.get_by_id("both") is None


def test_get_prompt_distinguishes_missing_and_corrupt(
    manager: PromptManager,
    records_dir: Path,
) -> None:
    with pytest.raises(PromptNotFoundError):
        manager.get_prompt("ghost")
    records_dir.mkdir(parents=True, exist_ok=True)
    (records_dir / "broken.json").write_text("{", encoding="utf-8")
    with pytest.raises(RecordParseError):
        manager.get_prompt("broken")


def test_mirror_flags_require_a_repository(
    records_dir: Path,
    backup_dir: Path,
    make_prompt: PromptFactory,
) -> None:
    with PromptManager(records_dir, backup_dir) as manager:
        assert manager.mirror_enabled is False
        with pytest.raises(MirrorUnavailableError):
            manager.save_prompt(make_prompt("x"), mirror=True)
        assert not (records_dir / "x.json").exists()
        with pytest.raises(MirrorUnavailableError):
            manager.export_to_mirror()


def test_index_backup_delete_restore_scenario(
    manager: PromptManager,
    records_dir: Path,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("A", tags=["x"]))
    manager.save_prompt(make_prompt("B", description=None))

    index = manager.rebuild_index()
    assert [entry.id for entry in index.entries] == ["A"]

    backup = manager.create_backup()
    assert backup.count == 2
    manifest = json.loads((backup.path / "manifest.json").read_text(encoding="utf-8"))
    assert manifest["count"] == 2
    assert sorted(path.name for path in backup.path.glob("*.json")) == [
        "A.json",
        "B.json",
        "manifest.json",
    ]

    assert manager.delete_prompt("A") is True
    result = manager.restore_backup(backup.timestamp)

    assert result.count == 2
    assert sorted(prompt.id for prompt in manager.list_prompts()) == ["A", "B"]
    index_payload = json.loads((records_dir / "index.json").read_text(encoding="utf-8"))
    assert [entry["id"] for entry in index_payload["prompts"]] == ["A"]


def test_restore_takes_a_safety_backup_first(
    manager: PromptManager,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("kept"))
    snapshot = manager.create_backup()
    manager.save_prompt(make_prompt("later"))

    manager.restore_backup(snapshot.timestamp)

    backups = manager.list_backups()
    assert len(backups) == 2
    safety = next(entry for entry in backups if entry.timestamp != snapshot.timestamp)
    assert safety.count == 2
    assert safety.complete is True


def test_restore_without_safety_backup_or_index(
    manager: PromptManager,
    records_dir: Path,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("only"))
    snapshot = manager.create_backup()
    manager.restore_backup(snapshot.timestamp, backup_current=False, rebuild_index=False)
    assert len(manager.list_backups()) == 1
    assert not (records_dir / "index.json").exists()


def test_restore_unknown_timestamp_changes_nothing(
    manager: PromptManager,
    records_dir: Path,
    backup_dir: Path,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("a"))
    before = sorted(path.name for path in records_dir.iterdir())
    with pytest.raises(BackupNotFoundError):
        manager.restore_backup("2000-01-01T00-00-00-000Z")
    assert sorted(path.name for path in records_dir.iterdir()) == before
    assert not backup_dir.exists()


def test_render_prompt_reports_missing_variables(
    manager: PromptManager,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("tpl", content="{{ greeting }}, {{ name }}!"))
    rendered = manager.render_prompt("tpl", {"greeting": "Hello", "name": "Ada"})
    assert rendered.ok
    assert rendered.rendered_text == "Hello, Ada!"
    missing = manager.render_prompt("tpl", {})
    assert not missing.ok
    assert missing.missing_variables == {"greeting", "name"}


def test_close_is_idempotent(
    records_dir: Path,
    backup_dir: Path,
    repository: PromptRepository,
) -> None:
    manager = PromptManager(records_dir, backup_dir, repository=repository)
    manager.close()
    manager.close()
    assert manager.mirror_enabled is False


def test_save_prompt_detects_variables_used_in_filters_and_blocks(
    manager: PromptManager,
    make_prompt: PromptFactory,
) -> None:
    content = "{% if formal %}Dear {{ name | title }}{% else %}Hi {{ nickname }}{% endif %}"
    stored = manager.save_prompt(make_prompt("letter", content=content, variables=[]))
    assert stored.variables == ["formal", "name", "nickname"]
    assert manager.render_prompt("letter", {"formal": True, "name": "ada"}).missing_variables == {
        "nickname"
    }


def test_save_prompt_with_broken_template_falls_back_to_plain_placeholders(
    manager: PromptManager,
    make_prompt: PromptFactory,
) -> None:
    stored = manager.save_prompt(make_prompt("broken", content="{{ who }} {% if %}", variables=[]))
    assert stored.variables == ["who"]


def test_add_prompt_generates_identifier_and_refuses_duplicates(
    manager: PromptManager,
    records_dir: Path,
) -> None:
    added = manager.add_prompt({"name": "Fresh", "content": "Body", "tags": ["x"]})
    assert str(uuid.UUID(added.id)) == added.id
    assert (records_dir / f"{added.id}.json").is_file()
    assert manager.get_prompt(added.id).name == "Fresh"

    named = manager.add_prompt({"id": "chosen", "name": "Named", "content": "Body"})
    assert named.id == "chosen"
    with pytest.raises(PromptAlreadyExistsError):
        manager.add_prompt({"id": "chosen", "name": "Again", "content": "Body"})
    with pytest.raises(PromptValidationError):
        manager.add_prompt({"name": "No content"})
    assert manager.get_prompt("chosen").name == "Named"


def test_update_prompt_merges_changes_and_keeps_identity(
    manager: PromptManager,
    make_prompt: PromptFactory,
) -> None:
    original = manager.save_prompt(make_prompt("doc"))

    updated = manager.update_prompt(
        "doc",
        {"id": "elsewhere", "content": "Bye {{ friend }}", "createdAt": "2000-01-01T00:00:00Z"},
    )

    assert updated.id == "doc"
    assert updated.content == "Bye {{ friend }}"
    assert updated.variables == ["friend"]
    assert updated.created_at == original.created_at
    assert updated.name == original.name
    assert manager.get_prompt("doc") == updated
    with pytest.raises(PromptNotFoundError):
        manager.update_prompt("ghost", {"name": "x"})
    with pytest.raises(PromptValidationError):
        manager.update_prompt("doc", {"isTemplate": "yes"})


def test_update_prompt_can_mirror(
    manager: PromptManager,
    repository: PromptRepository,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("shared"))
    manager.update_prompt("shared", {"name": "Renamed"}, mirror=True)
    mirrored = repository.get_by_id("shared")
    assert mirrored is not None
    assert mirrored.name == "Renamed"


def test_list_prompts_filters_and_pages(
    manager: PromptManager,
    records_dir: Path,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("alpha", tags=["Code", "review"], category="dev"))
    manager.save_prompt(make_prompt("bravo", tags=["code"], is_template=False, content="Static"))
    manager.save_prompt(make_prompt("charlie", tags=["docs"], description="Release notes"))
    (records_dir / "broken.json").write_text("{", encoding="utf-8")

    def ids(**filters: object) -> list[str]:
        return [prompt.id for prompt in manager.list_prompts(**filters)]

    assert ids() == ["alpha", "bravo", "charlie"]
    assert ids(tags=["CODE"]) == ["alpha", "bravo"]
    assert ids(tags=["code", "review"]) == ["alpha"]
    assert ids(is_template=False) == ["bravo"]
    assert ids(category="dev") == ["alpha"]
    assert ids(search="release") == ["charlie"]
    assert ids(limit=2) == ["alpha", "bravo"]
    assert ids(offset=1, limit=1) == ["bravo"]
    assert ids(offset=5) == []
    assert manager.list_prompts(tags=["docs"]).skipped_identifiers == ["broken"]
    with pytest.raises(ValueError):
        manager.list_prompts(limit=0)
    with pytest.raises(ValueError):
        manager.list_prompts(offset=-1)


def test_search_prompts_matches_text_fields_ignoring_case(
    manager: PromptManager,
    make_prompt: PromptFactory,
) -> None:
    manager.save_prompt(make_prompt("by-name", name="Weekly REPORT"))
    manager.save_prompt(make_prompt("by-content", content="Summarise the report"))
    manager.save_prompt(make_prompt("by-tag", tags=["reporting"]))
    manager.save_prompt(make_prompt("unrelated"))

    found = [prompt.id for prompt in manager.search_prompts("Report")]

    assert found == ["by-content", "by-name", "by-tag"]
    assert [prompt.id for prompt in manager.search_prompts("report", limit=1)] == ["by-content"]
    with pytest.raises(ValueError):
        manager.search_prompts("  ")
