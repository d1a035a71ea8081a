"""Prompt record definitions shared by the file store and the SQLite mirror.

Updates: v0.4.0 - 2026-10-18 - Let the file name key a record and reject non-boolean isTemplate.
Updates: v0.3.0 - 2026-10-12 - Preserve unknown document keys so stored records round-trip.
Updates: v0.2.1 - 2026-10-05 - Omit empty optional fields from serialised documents.
Updates: v0.2.0 - 2026-09-28 - Add template variable detection helper.
Updates: v0.1.0 - 2026-09-21 - Initial Prompt schema with record serialisation helpers.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

DEFAULT_PROMPT_VERSION = "1.0"

# Document keys owned by the dataclass; everything else lands in ``extra``.
_KNOWN_KEYS = frozenset(
    {
        "id",
        "name",
        "content",
        "description",
        "category",
        "tags",
        "isTemplate",
        "variables",
        "version",
        "metadata",
        "createdAt",
        "updatedAt",
    }
)

_PLACEHOLDER_PATTERN = re.compile(r"{{\s*([A-Za-z_][A-Za-z0-9_]*)\s*}}")


def _utc_now() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(UTC)


def _ensure_datetime(value: Any) -> datetime:
    """Parse incoming datetime values (isoformat strings or datetime)."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if value is None or value == "":
        return _utc_now()
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _require_string_list(data: Mapping[str, Any], key: str) -> list[str]:
    """Return ``data[key]`` as a list of strings, rejecting non-list payloads."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return [str(item) for item in value]


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def extract_placeholders(content: str) -> list[str]:
    """Return ``{{ name }}`` placeholder names in order of first appearance."""
    seen: list[str] = []
    for match in _PLACEHOLDER_PATTERN.finditer(content or ""):
        name = match.group(1)
        if name not in seen:
            seen.append(name)
    return seen


@dataclass(slots=True)
class Prompt:
    """Dataclass representation of a stored prompt record."""
    id: str
    name: str
    content: str
    description: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    is_template: bool = False
    variables: list[str] = field(default_factory=list)
    version: str = DEFAULT_PROMPT_VERSION
    metadata: MutableMapping[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
    extra: MutableMapping[str, Any] = field(default_factory=dict)

    def touch(self) -> None:
        """Refresh the modification timestamp."""
        self.updated_at = _utc_now()

    def with_detected_variables(self, detected: Iterable[str] | None = None) -> Prompt:
        """Return a copy whose ``variables`` include the placeholders in ``content``.

        *detected* lets a caller supply names found by a full template parser;
        without it only plain ``{{ name }}`` placeholders are recognised.
        """
        if not self.is_template:
            return replace(self)
        if detected is None:
            detected = extract_placeholders(self.content)
        merged = list(self.variables)
        for name in detected:
            if name not in merged:
                merged.append(name)
        return replace(self, variables=merged)

    def content_signature(self) -> dict[str, Any]:
        """Return the fields used to decide whether two copies of a prompt diverge."""
        return {
            "name": self.name,
            "content": self.content,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "isTemplate": self.is_template,
            "variables": list(self.variables),
        }

    def to_record(self) -> dict[str, Any]:
        """Return the JSON document persisted for this prompt."""
        record: dict[str, Any] = dict(self.extra)
        record.update(
            {
                "id": self.id,
                "name": self.name,
                "content": self.content,
            }
        )
        if self.description is not None:
            record["description"] = self.description
        if self.category is not None:
            record["category"] = self.category
        record.update(
            {
                "tags": list(self.tags),
                "isTemplate": self.is_template,
                "variables": list(self.variables),
                "version": self.version,
                "metadata": dict(self.metadata),
                "createdAt": self.created_at.isoformat(),
                "updatedAt": self.updated_at.isoformat(),
            }
        )
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any], *, identifier: str | None = None) -> Prompt:
        """Create a Prompt from a stored document.

        ``identifier`` is the key the record is stored under (its file name) and
        takes precedence over any ``id`` inside the document.
        Raises :class:`ValueError` when the document cannot describe a prompt.
        """
        raw_id = identifier if identifier is not None else data.get("id")
        if not raw_id:
            raise ValueError("prompt document has no 'id'")
        is_template = data.get("isTemplate", False)
        if not isinstance(is_template, bool):
            raise ValueError(f"'isTemplate' must be a boolean, got {type(is_template).__name__}")
        for key in ("name", "content"):
            if key not in data:
                raise ValueError(f"prompt document is missing '{key}'")
            if not isinstance(data[key], str):
                raise ValueError(f"'{key}' must be a string")
        metadata_value = data.get("metadata")
        if metadata_value is not None and not isinstance(metadata_value, Mapping):
            raise ValueError("'metadata' must be an object")
        try:
            created_at = _ensure_datetime(data.get("createdAt"))
            updated_at = _ensure_datetime(data.get("updatedAt"))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid timestamp: {exc}") from exc
        return cls(
            id=str(raw_id),
            name=data["name"],
            content=data["content"],
            description=_optional_text(data.get("description")),
            category=_optional_text(data.get("category")),
            tags=_require_string_list(data, "tags"),
            is_template=is_template,
            variables=_require_string_list(data, "variables"),
            version=str(data.get("version") or DEFAULT_PROMPT_VERSION),
            metadata=dict(metadata_value or {}),
            created_at=created_at,
            updated_at=updated_at,
            extra={key: value for key, value in data.items() if key not in _KNOWN_KEYS},
        )


__all__ = [
    "DEFAULT_PROMPT_VERSION",
    "Prompt",
    "extract_placeholders",
]
