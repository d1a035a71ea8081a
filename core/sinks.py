"""Common put/get/list/delete surface over the file store and the mirror.

:class:`~core.file_store.PromptFileStore` already satisfies
:class:`PromptSink`; :class:`MirrorSink` adapts the relational mirror so
callers can swap one sink for the other.

Updates:
  v0.1.0 - 2026-10-05 - Introduce the sink protocol and mirror adapter.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .file_store.base import RecordLookup, ScanResult

if TYPE_CHECKING:
    from models.prompt_model import Prompt

    from .repository import PromptRepository


@runtime_checkable
class PromptSink(Protocol):
    """Minimal storage contract shared by both prompt sinks."""

    def put(self, identifier: str, prompt: Prompt) -> object: ...

    def get(self, identifier: str) -> RecordLookup: ...

    def list(self) -> ScanResult[Prompt]: ...

    def delete(self, identifier: str) -> bool: ...


class MirrorSink:
    """Expose :class:`PromptRepository` through the :class:`PromptSink` contract."""

    def __init__(self, repository: PromptRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> PromptRepository:
        return self._repository

    def put(self, identifier: str, prompt: Prompt) -> str:
        if prompt.id != identifier:
            prompt = replace(prompt, id=identifier)
        return self._repository.save(prompt)

    def get(self, identifier: str) -> RecordLookup:
        prompt = self._repository.get_by_id(identifier)
        if prompt is None:
            return RecordLookup.not_found(identifier)
        return RecordLookup.hit(identifier, prompt)

    def list(self) -> ScanResult[Prompt]:
        # Rows are typed columns, so nothing is ever skipped.
        return ScanResult(items=self._repository.get_all())

    def delete(self, identifier: str) -> bool:
        return self._repository.delete(identifier)


__all__ = ["MirrorSink", "PromptSink"]
