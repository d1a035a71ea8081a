"""Prompt CRUD mixin for the Prompt Manager facade.

Writes always land in the file store; the relational mirror is only touched
when the caller asks for it.

Updates:
  v0.3.0 - 2026-10-18 - Add authoring, filtered listing, and search; detect variables via Jinja2.
  v0.2.0 - 2026-10-12 - Add template rendering for stored prompts.
  v0.1.1 - 2026-10-05 - Add explicit mirror flags to save and delete.
  v0.1.0 - 2026-09-28 - Extract prompt CRUD helpers from the facade.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateSyntaxError

from models.prompt_model import Prompt

from ..exceptions import (
    PromptAlreadyExistsError,
    PromptNotFoundError,
    PromptValidationError,
    RecordParseError,
)
from ..file_store.base import LookupStatus, ScanResult

if TYPE_CHECKING:  # pragma: no cover - typing helpers only
    from collections.abc import Iterable, Mapping

    from ..file_store import PromptFileStore
    from ..repository import PromptRepository
    from ..templating import TemplateRenderer, TemplateRenderResult

logger = logging.getLogger("prompt_store.manager")

__all__ = ["PromptStorageMixin"]

# Keys a caller may not change through ``update_prompt``.
_IMMUTABLE_KEYS = frozenset({"id", "createdAt"})


def _build_prompt(record: Mapping[str, Any], identifier: str) -> Prompt:
    try:
        return Prompt.from_record(record, identifier=identifier)
    except ValueError as exc:
        raise PromptValidationError(f"Prompt {identifier} is not valid: {exc}") from exc


def _matches_search(prompt: Prompt, needle: str) -> bool:
    fields = [prompt.name, prompt.description or "", prompt.content, prompt.category or ""]
    fields.extend(prompt.tags)
    return any(needle in value.lower() for value in fields)


def _filter_prompts(
    prompts: Iterable[Prompt],
    *,
    tags: Iterable[str] | None,
    is_template: bool | None,
    category: str | None,
    search: str | None,
) -> list[Prompt]:
    wanted_tags = {tag.lower() for tag in tags or ()}
    needle = search.strip().lower() if search else ""
    selected: list[Prompt] = []
    for prompt in prompts:
        if is_template is not None and prompt.is_template is not is_template:
            continue
        if category is not None and prompt.category != category:
            continue
        if wanted_tags and not wanted_tags <= {tag.lower() for tag in prompt.tags}:
            continue
        if needle and not _matches_search(prompt, needle):
            continue
        selected.append(prompt)
    return selected


class PromptStorageMixin:
    """Save, author, query, delete, and render prompts."""

    _file_store: PromptFileStore
    _renderer: TemplateRenderer

    if TYPE_CHECKING:

        def _require_repository(self) -> PromptRepository: ...

    def _detect_variables(self, prompt: Prompt) -> list[str] | None:
        """Return the names the renderer will require, or None when the template does not parse."""
        if not prompt.is_template:
            return None
        try:
            return self._renderer.extract_variables(prompt.content)
        except TemplateSyntaxError as exc:
            logger.warning(
                "Prompt %s has template syntax errors; detecting plain placeholders only: %s",
                prompt.id,
                exc,
            )
            return None

    def save_prompt(self, prompt: Prompt, *, mirror: bool = False) -> Prompt:
        """Persist *prompt* to the file store, and to the mirror when requested."""
        repository = self._require_repository() if mirror else None
        prompt.touch()
        stored = prompt.with_detected_variables(self._detect_variables(prompt))
        self._file_store.put(stored.id, stored)
        if repository is not None:
            repository.save(stored)
        logger.info("Saved prompt %s%s", stored.id, " (mirrored)" if mirror else "")
        return stored

    def add_prompt(self, record: Mapping[str, Any], *, mirror: bool = False) -> Prompt:
        """Create a new prompt from a record document.

        A UUID4 identifier is generated when the document has no ``id``.
        Raises :class:`PromptAlreadyExistsError` when the identifier is taken
        and :class:`PromptValidationError` when the document is not a prompt.
        """
        raw_id = record.get("id")
        identifier = str(raw_id) if raw_id else str(uuid.uuid4())
        if self._file_store.exists(identifier):
            raise PromptAlreadyExistsError(f"Prompt {identifier} already exists")
        prompt = _build_prompt(record, identifier)
        stored = self.save_prompt(prompt, mirror=mirror)
        logger.info("Added prompt %s", stored.id)
        return stored

    def update_prompt(
        self,
        prompt_id: str,
        changes: Mapping[str, Any],
        *,
        mirror: bool = False,
    ) -> Prompt:
        """Apply *changes* to an existing prompt and store the result.

        ``id`` and ``createdAt`` in *changes* are ignored. When ``content``
        changes without new ``variables``, variables are detected afresh.
        """
        current = self.get_prompt(prompt_id)
        record = current.to_record()
        record.update({key: value for key, value in changes.items() if key not in _IMMUTABLE_KEYS})
        if "content" in changes and "variables" not in changes:
            record["variables"] = []
        prompt = _build_prompt(record, prompt_id)
        return self.save_prompt(prompt, mirror=mirror)

    def get_prompt(self, prompt_id: str) -> Prompt:
        """Return the stored prompt or raise when it is missing or unreadable."""
        lookup = self._file_store.get(prompt_id)
        if lookup.status is LookupStatus.NOT_FOUND:
            raise PromptNotFoundError(f"Prompt {prompt_id} not found")
        if lookup.status is LookupStatus.PARSE_FAILURE or lookup.prompt is None:
            raise RecordParseError(f"Prompt {prompt_id} could not be read: {lookup.error}")
        return lookup.prompt

    def list_prompts(
        self,
        *,
        tags: Iterable[str] | None = None,
        is_template: bool | None = None,
        category: str | None = None,
        search: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> ScanResult[Prompt]:
        """Return stored prompts ordered by identifier, optionally filtered and paged.

        Every requested tag must be present (case-insensitive). ``search`` is a
        case-insensitive substring match over name, description, content,
        category, and tags. Skipped records are always reported in full.
        """
        if limit is not None and limit <= 0:
            raise ValueError("limit must be a positive integer")
        if offset < 0:
            raise ValueError("offset must not be negative")
        scanned = self._file_store.list()
        selected = _filter_prompts(
            sorted(scanned.items, key=lambda prompt: prompt.id),
            tags=tags,
            is_template=is_template,
            category=category,
            search=search,
        )
        end = None if limit is None else offset + limit
        return ScanResult(items=selected[offset:end], skipped=list(scanned.skipped))

    def search_prompts(self, query: str, *, limit: int | None = None) -> ScanResult[Prompt]:
        """Return prompts whose text fields contain *query*, ignoring case."""
        if not query.strip():
            raise ValueError("search query must not be blank")
        return self.list_prompts(search=query, limit=limit)

    def delete_prompt(self, prompt_id: str, *, mirror: bool = False) -> bool:
        """Delete the prompt file (and mirror row when requested); return whether one existed."""
        repository = self._require_repository() if mirror else None
        removed = self._file_store.delete(prompt_id)
        if repository is not None:
            removed = repository.delete(prompt_id) or removed
        if removed:
            logger.info("Deleted prompt %s", prompt_id)
        return removed

    def render_prompt(self, prompt_id: str, variables: Mapping[str, Any]) -> TemplateRenderResult:
        """Render the stored prompt's content with *variables*."""
        prompt = self.get_prompt(prompt_id)
        return self._renderer.render(prompt.content, variables)
