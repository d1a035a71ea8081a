"""Tests for index.json regeneration.

Updates: v0.2.0 - 2026-10-18 - Key entries by file name and reject non-boolean template flags.
Updates: v0.1.0 - 2026-09-24 - Cover sorting, required fields, and the metadata block.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from core import BackupManager, PromptIndexBuilder, SkipReason

if TYPE_CHECKING:
    from pathlib import Path

    from conftest import PromptFactory
    from core import PromptFileStore


def test_build_sorts_entries_and_writes_metadata(
    records_dir: Path,
    file_store: PromptFileStore,
    make_prompt: PromptFactory,
) -> None:
    for identifier in ("charlie", "alpha", "bravo"):
        file_store.put(identifier, make_prompt(identifier, metadata={"rank": identifier}))

    result = PromptIndexBuilder(file_store).build()

    payload = json.loads((records_dir / "index.json").read_text(encoding="utf-8"))
    assert [entry["id"] for entry in payload["prompts"]] == ["alpha", "bravo", "charlie"]
    assert payload["metadata"]["totalPrompts"] == 3
    assert payload["metadata"]["version"] == "1.0"
    assert payload["metadata"]["lastUpdated"].endswith("Z")
    assert payload["prompts"][0] == {
        "id": "alpha",
        "name": "Prompt alpha",
        "description": "Description of alpha",
        "tags": ["test", "storage"],
        "isTemplate": True,
        "metadata": {"rank": "alpha"},
    }
    assert result.total == 3
    assert result.skipped == []


def test_build_excludes_malformed_records_without_deleting_them(
    records_dir: Path,
    file_store: PromptFileStore,
    make_prompt: PromptFactory,
) -> None:
    file_store.put("complete", make_prompt("complete"))
    file_store.put("undescribed", make_prompt("undescribed", description=None))
    (records_dir / "corrupt.json").write_text("{", encoding="utf-8")

    result = PromptIndexBuilder(file_store).build()

    assert [entry.id for entry in result.entries] == ["complete"]
    reasons = {entry.identifier: entry.kind for entry in result.skipped}
    assert reasons == {"corrupt": SkipReason.PARSE, "undescribed": SkipReason.VALIDATION}
    assert (records_dir / "undescribed.json").exists()
    assert (records_dir / "corrupt.json").exists()


def test_build_with_no_valid_records_writes_empty_index(
    records_dir: Path,
    file_store: PromptFileStore,
) -> None:
    builder = PromptIndexBuilder(file_store)
    result = builder.build()
    assert result.total == 0
    payload = builder.load()
    assert payload is not None
    assert payload["prompts"] == []
    assert payload["metadata"]["totalPrompts"] == 0
    assert (records_dir / "index.json").is_file()


def test_rebuilding_does_not_index_the_index(
    file_store: PromptFileStore,
    make_prompt: PromptFactory,
) -> None:
    file_store.put("only", make_prompt("only"))
    builder = PromptIndexBuilder(file_store)
    builder.build()
    second = builder.build()
    assert [entry.id for entry in second.entries] == ["only"]
    assert second.skipped == []


def test_load_returns_none_when_index_is_absent(file_store: PromptFileStore) -> None:
    assert PromptIndexBuilder(file_store).load() is None


def test_record_without_tags_is_left_out(
    records_dir: Path,
    file_store: PromptFileStore,
    make_prompt: PromptFactory,
) -> None:
    file_store.put("tagged", make_prompt("tagged"))
    record = make_prompt("untagged").to_record()
    del record["tags"]
    (records_dir / "untagged.json").write_text(json.dumps(record), encoding="utf-8")

    result = PromptIndexBuilder(file_store).build()

    assert [entry.id for entry in result.entries] == ["tagged"]
    assert result.skipped[0].identifier == "untagged"
    assert "tags" in result.skipped[0].reason


def test_index_and_manifest_agree_on_file_name_identifier(
    tmp_path: Path,
    records_dir: Path,
    file_store: PromptFileStore,
    make_prompt: PromptFactory,
) -> None:
    records_dir.mkdir(parents=True)
    (records_dir / "a.json").write_text(json.dumps(make_prompt("b").to_record()), "utf-8")

    result = PromptIndexBuilder(file_store).build()
    backup = BackupManager(file_store, tmp_path / "snapshots").create_backup()

    assert [entry.id for entry in result.entries] == ["a"]
    manifest = json.loads((backup.path / "manifest.json").read_text(encoding="utf-8"))
    assert [entry["id"] for entry in manifest["prompts"]] == ["a"]


def test_non_boolean_template_flag_is_left_out(
    records_dir: Path,
    file_store: PromptFileStore,
    make_prompt: PromptFactory,
) -> None:
    record = make_prompt("quoted").to_record()
    record["isTemplate"] = "false"
    records_dir.mkdir(parents=True)
    (records_dir / "quoted.json").write_text(json.dumps(record), encoding="utf-8")

    result = PromptIndexBuilder(file_store).build()

    assert result.entries == []
    assert result.skipped[0].identifier == "quoted"
    assert result.skipped[0].kind is SkipReason.VALIDATION
