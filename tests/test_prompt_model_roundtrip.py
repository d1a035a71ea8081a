"""Prompt dataclass serialization and helper coverage tests.

Updates: v0.2.0 - 2026-10-18 - Cover file-name ids, boolean isTemplate, and supplied variables.
Updates: v0.1.0 - 2026-09-28 - Cover record serialisation, hydration errors, and placeholders.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from models.backup_model import BackupManifest, ManifestEntry
from models.index_model import IndexEntry, missing_index_fields
from models.prompt_model import Prompt, extract_placeholders


def test_to_record_uses_camel_case_and_omits_missing_optionals() -> None:
    prompt = Prompt(id="p1", name="Name", content="Body", is_template=True)
    record = prompt.to_record()
    assert record["isTemplate"] is True
    assert "createdAt" in record and "updatedAt" in record
    assert "description" not in record
    assert "category" not in record
    assert record["version"] == "1.0"


def test_from_record_round_trips_and_keeps_unknown_keys() -> None:
    created = datetime(2026, 10, 1, 8, 30, tzinfo=UTC)
    prompt = Prompt(
        id="p1",
        name="Name",
        content="Hi {{ who }}",
        description="desc",
        category="cat",
        tags=["a", "a", "b"],
        is_template=True,
        variables=["who"],
        metadata={"owner": "ops"},
        created_at=created,
        updated_at=created,
        extra={"author": "someone"},
    )
    record = prompt.to_record()
    assert record["author"] == "someone"
    assert Prompt.from_record(record) == prompt


def test_from_record_accepts_z_suffix_and_identifier_fallback() -> None:
    record = {"name": "n", "content": "c", "createdAt": "2026-10-18T09:30:00.125Z"}
    prompt = Prompt.from_record(record, identifier="from-file")
    assert prompt.id == "from-file"
    assert prompt.created_at == datetime(2026, 10, 18, 9, 30, 0, 125000, tzinfo=UTC)


def test_from_record_identifier_overrides_stored_id() -> None:
    record = {"id": "b", "name": "n", "content": "c"}
    assert Prompt.from_record(record, identifier="a").id == "a"
    assert Prompt.from_record(record).id == "b"


@pytest.mark.parametrize(
    "record",
    [
        {"id": "x", "content": "c"},
        {"id": "x", "name": 3, "content": "c"},
        {"id": "x", "name": "n", "content": "c", "tags": "solo"},
        {"id": "x", "name": "n", "content": "c", "metadata": []},
        {"id": "x", "name": "n", "content": "c", "createdAt": "yesterday"},
        {"name": "n", "content": "c"},
        {"id": "x", "name": "n", "content": "c", "isTemplate": "false"},
        {"id": "x", "name": "n", "content": "c", "isTemplate": 1},
    ],
)
def test_from_record_rejects_malformed_documents(record: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        Prompt.from_record(record)


def test_with_detected_variables_merges_placeholders_for_templates() -> None:
    prompt = Prompt(
        id="t",
        name="T",
        content="{{ a }} and {{b}} and {{ a }}",
        is_template=True,
        variables=["z"],
    )
    assert prompt.with_detected_variables().variables == ["z", "a", "b"]
    assert prompt.with_detected_variables(["b", "c"]).variables == ["z", "b", "c"]
    plain = Prompt(id="p", name="P", content="{{ a }}")
    assert plain.with_detected_variables().variables == []


def test_extract_placeholders_preserves_first_appearance_order() -> None:
    assert extract_placeholders("{{ second }} {{ first }} {{ second }}") == ["second", "first"]
    assert extract_placeholders("") == []


def test_content_signature_ignores_timestamps() -> None:
    first = Prompt(id="p", name="n", content="c")
    second = Prompt(
        id="p",
        name="n",
        content="c",
        updated_at=datetime(2020, 1, 1, tzinfo=UTC),
    )
    assert first.content_signature() == second.content_signature()


def test_index_entry_projection_and_missing_fields() -> None:
    document = {
        "id": "p",
        "name": "n",
        "description": "d",
        "content": "c",
        "isTemplate": False,
        "tags": ["x"],
        "version": "1.0",
    }
    assert missing_index_fields(document) == []
    entry = IndexEntry.from_document(document)
    assert entry.to_record() == {
        "id": "p",
        "name": "n",
        "description": "d",
        "tags": ["x"],
        "isTemplate": False,
        "metadata": {},
    }
    assert missing_index_fields({"id": "p", "content": "c"}) == [
        "name",
        "description",
        "isTemplate",
        "tags",
        "version",
    ]


def test_manifest_from_record_validates_structure() -> None:
    manifest = BackupManifest(
        timestamp="2026-10-18T09-30-00-125Z",
        count=1,
        prompts=[ManifestEntry(id="p", name="n")],
        date="2026-10-18T09:30:00.125000+00:00",
    )
    assert BackupManifest.from_record(manifest.to_record()) == manifest
    with pytest.raises(ValueError):
        BackupManifest.from_record({"timestamp": "t"})
    with pytest.raises(ValueError):
        BackupManifest.from_record({"count": 1, "prompts": "nope"})
