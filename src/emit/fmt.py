"""Template rendering for tag summaries and cross-reference listings.

A template mixes literal text with field specifiers:

- ``%N`` style single letters (see ``LETTER_FIELDS``)
- ``%{name}`` long names, either builtin or a parser field such as
  ``%{Extern.summary}``
- an optional ``-`` (left align) and width between ``%`` and the field,
  e.g. ``%-16N`` or ``%4n``
- ``%%`` for a literal percent sign
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rules.config import ConfigError
from utils import to_text

if TYPE_CHECKING:
    from collections.abc import Callable

    from emit.fields import FieldRegistry
    from models.tags import TagEntry


class TemplateError(ConfigError):
    """Raised when a template has an invalid field specifier."""


def _compact_line(entry: TagEntry) -> str:
    if entry.source_line is None:
        return _pattern(entry)
    return to_text(entry.source_line).rstrip("\r\n").lstrip()


def _pattern(entry: TagEntry) -> str:
    return to_text(entry.pattern)


LETTER_FIELDS: dict[str, Callable[[TagEntry], str]] = {
    "N": lambda e: e.name,
    "F": lambda e: e.input_file,
    "P": _pattern,
    "C": _compact_line,
    "n": lambda e: str(e.line_number),
    "K": lambda e: e.kind,
    "z": lambda e: e.kind,
    "k": lambda e: e.kind_letter,
    "R": lambda e: "D" if e.is_definition else "R",
    "r": lambda e: e.role or "def",
}

LONG_FIELDS: dict[str, str] = {
    "name": "N",
    "input": "F",
    "pattern": "P",
    "compact": "C",
    "line": "n",
    "kind": "K",
    "roles": "r",
}

_SPECIFIER = re.compile(r"%(-?)(\d*)(?:\{([^}]*)\}|(.))", re.DOTALL)


@dataclass(frozen=True)
class _Field:
    left_align: bool
    width: int
    letter: str | None
    long_name: str | None


class Template:
    """A compiled template: literal strings interleaved with fields."""

    def __init__(self, source: str, segments: list[str | _Field]) -> None:
        self.source = source
        self.segments = segments


class TemplateRenderer:
    def __init__(self, fields: FieldRegistry | None = None) -> None:
        self.fields = fields
        self._cache: dict[str, Template] = {}

    def compile(self, source: str) -> Template:
        """Parse ``source`` into a template.

        Raises:
            TemplateError: On an unknown letter, an unknown long name or a
                dangling ``%``.
        """
        cached = self._cache.get(source)
        if cached is not None:
            return cached

        segments: list[str | _Field] = []
        pos = 0
        for match in _SPECIFIER.finditer(source):
            if match.start() > pos:
                segments.append(source[pos : match.start()])
            pos = match.end()
            align, width, long_name, letter = match.groups()
            if letter == "%" and not align and not width:
                segments.append("%")
                continue
            if letter is not None and letter not in LETTER_FIELDS:
                msg = f"Unknown field letter '%{letter}' in template {source!r}"
                raise TemplateError(msg)
            if long_name is not None and not self._knows(long_name):
                msg = f"Unknown field '{{{long_name}}}' in template {source!r}"
                raise TemplateError(msg)
            segments.append(
                _Field(
                    left_align=bool(align),
                    width=int(width) if width else 0,
                    letter=letter,
                    long_name=long_name,
                )
            )
        tail = source[pos:]
        if "%" in tail:
            msg = f"Dangling '%' in template {source!r}"
            raise TemplateError(msg)
        if tail:
            segments.append(tail)

        template = Template(source, segments)
        self._cache[source] = template
        return template

    def _knows(self, long_name: str) -> bool:
        if long_name in LONG_FIELDS:
            return True
        return self.fields is not None and long_name in self.fields

    def _value(self, field: _Field, entry: TagEntry) -> str:
        if field.letter is not None:
            return LETTER_FIELDS[field.letter](entry)
        assert field.long_name is not None
        letter = LONG_FIELDS.get(field.long_name)
        if letter is not None:
            return LETTER_FIELDS[letter](entry)
        assert self.fields is not None
        return self.fields.render(field.long_name, entry, force=True) or ""

    def render(self, template: str | Template, entry: TagEntry) -> str:
        compiled = self.compile(template) if isinstance(template, str) else template
        parts: list[str] = []
        for segment in compiled.segments:
            if isinstance(segment, str):
                parts.append(segment)
                continue
            value = self._value(segment, entry)
            if segment.left_align:
                value = value.ljust(segment.width)
            else:
                value = value.rjust(segment.width)
            parts.append(value)
        return "".join(parts)


__all__ = [
    "LETTER_FIELDS",
    "LONG_FIELDS",
    "Template",
    "TemplateError",
    "TemplateRenderer",
]
