"""Index entry projection written to the records root ``index.json``.

Updates: v0.2.0 - 2026-10-18 - Key entries by the record file name when one is given.
Updates: v0.1.1 - 2026-10-06 - Default missing metadata to an empty mapping.
Updates: v0.1.0 - 2026-09-24 - Initial IndexEntry projection.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

INDEX_FORMAT_VERSION = "1.0"

# A stored document must carry every one of these keys to be indexed.
REQUIRED_INDEX_FIELDS: tuple[str, ...] = (
    "id",
    "name",
    "description",
    "content",
    "isTemplate",
    "tags",
    "version",
)


def missing_index_fields(document: Mapping[str, Any]) -> list[str]:
    """Return required keys absent from *document* in declaration order."""
    return [key for key in REQUIRED_INDEX_FIELDS if key not in document]


@dataclass(slots=True, frozen=True)
class IndexEntry:
    """Read-only summary of a well-formed prompt document."""

    id: str
    name: str
    description: str
    tags: list[str]
    is_template: bool
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(
        cls, document: Mapping[str, Any], *, identifier: str | None = None
    ) -> IndexEntry:
        """Project a validated document into an index entry.

        *identifier* is the record's file name stem and replaces the stored ``id``.
        """
        tags = document["tags"]
        if not isinstance(tags, list):
            raise ValueError("'tags' must be a list")
        if not isinstance(document["isTemplate"], bool):
            raise ValueError("'isTemplate' must be a boolean")
        metadata = document.get("metadata")
        return cls(
            id=identifier if identifier is not None else str(document["id"]),
            name=document["name"],
            description=document["description"],
            tags=list(tags),
            is_template=document["isTemplate"],
            metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
            "isTemplate": self.is_template,
            "metadata": dict(self.metadata),
        }


__all__ = [
    "INDEX_FORMAT_VERSION",
    "REQUIRED_INDEX_FIELDS",
    "IndexEntry",
    "missing_index_fields",
]
