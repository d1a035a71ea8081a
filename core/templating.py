"""Strict Jinja2 rendering for template prompts.

Template prompts carry ``{{ name }}`` placeholders. Every placeholder must be
supplied; the renderer reports all missing names at once rather than stopping
at the first.

Updates:
  v0.3.0 - 2026-10-17 - Allow extra filters per renderer and simplify syntax error messages.
  v0.2.0 - 2026-10-12 - Report every missing placeholder before rendering.
  v0.1.0 - 2026-09-29 - Add strict Jinja2 renderer with prompt filters.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError, meta

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")
_UNDEFINED_NAME = re.compile(r"'(?P<name>[^']+)' is undefined")

# Globals and block locals provided by Jinja2 itself.
_BUILTIN_NAMES = frozenset(
    {"caller", "cycler", "dict", "joiner", "lipsum", "loop", "namespace", "range", "super"}
)


def shorten(value: Any, limit: int = 500, ellipsis: str = "...") -> str:
    """Clip *value* to *limit* characters, ending clipped text with *ellipsis*."""
    text = "" if value is None else str(value)
    if limit <= 0 or len(text) <= limit:
        return text
    keep = limit - len(ellipsis)
    return text[:limit] if keep <= 0 else text[:keep] + ellipsis


def slugify(value: Any) -> str:
    return _SLUG_SEPARATORS.sub("-", ("" if value is None else str(value)).lower()).strip("-")


def to_json(value: Any, *, indent: int | None = None) -> str:
    return json.dumps(value, ensure_ascii=False, indent=indent)


PROMPT_FILTERS: dict[str, Callable[..., str]] = {
    "truncate": shorten,
    "slugify": slugify,
    "json": to_json,
}


@dataclass(slots=True)
class TemplateRenderResult:
    """Rendered text, or the errors that prevented rendering."""

    rendered_text: str
    errors: list[str] = field(default_factory=list)
    missing_variables: set[str] = field(default_factory=set)

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def failure(cls, error: str, missing: set[str] | None = None) -> TemplateRenderResult:
        return cls(rendered_text="", errors=[error], missing_variables=set(missing or ()))


def _unbalanced_delimiter(line: str) -> str | None:
    for opener, closer in (("{{", "}}"), ("{%", "%}")):
        opened, closed = line.count(opener), line.count(closer)
        if opened > closed:
            return f"missing closing '{closer}'"
        if closed > opened:
            return f"missing opening '{opener}'"
    return None


def describe_syntax_error(source: str, exc: TemplateSyntaxError) -> str:
    """Return *exc* as one line naming the offending source line and a delimiter hint."""
    lines = source.splitlines()
    line = lines[exc.lineno - 1] if 0 < exc.lineno <= len(lines) else ""
    parts = [f"Template syntax error on line {exc.lineno}: {exc.message}"]
    if line.strip():
        parts.append(f"near {line.strip()!r}")
    hint = _unbalanced_delimiter(line)
    if hint:
        parts.append(f"hint: {hint}")
    return " | ".join(parts)


class TemplateRenderer:
    """Render prompt content with Jinja2, requiring every placeholder to be supplied."""

    def __init__(self, filters: Mapping[str, Callable[..., str]] | None = None) -> None:
        self._env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._env.filters.update(PROMPT_FILTERS)
        if filters:
            self._env.filters.update(filters)

    def extract_variables(self, source: str) -> list[str]:
        """Return the sorted placeholder names *source* expects from the caller.

        Raises :class:`jinja2.TemplateSyntaxError` for malformed templates.
        """
        if not source.strip():
            return []
        names = meta.find_undeclared_variables(self._env.parse(source))
        return sorted(names - _BUILTIN_NAMES)

    def render(self, source: str, variables: Mapping[str, Any]) -> TemplateRenderResult:
        """Render *source*; syntax errors and missing variables come back as errors."""
        if not source.strip():
            return TemplateRenderResult(rendered_text=source)
        try:
            template = self._env.from_string(source)
            required = self.extract_variables(source)
        except TemplateSyntaxError as exc:
            return TemplateRenderResult.failure(describe_syntax_error(source, exc))

        missing = {name for name in required if name not in variables}
        if missing:
            return TemplateRenderResult.failure(
                f"Missing template variable(s): {', '.join(sorted(missing))}",
                missing,
            )
        try:
            return TemplateRenderResult(rendered_text=template.render(dict(variables)))
        except UndefinedError as exc:
            # Attribute access on a supplied value can still be undefined.
            match = _UNDEFINED_NAME.search(str(exc))
            return TemplateRenderResult.failure(str(exc), {match.group("name")} if match else None)


__all__ = [
    "PROMPT_FILTERS",
    "TemplateRenderResult",
    "TemplateRenderer",
    "describe_syntax_error",
]
