"""Parser-specific fields rendered lazily for each tag."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from encode.names import encode_name
from rules.config import ConfigError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from emit.fmt import TemplateRenderer
    from kinds.adapter import TagFormatTable
    from models.tags import TagEntry

ENCODED_NAME_FIELD = "encodedName"
SUMMARY_FIELD = "summary"
DEFAULT_SUMMARY_TEMPLATE = "%C"


@dataclass
class FieldDefinition:
    name: str
    description: str
    render: Callable[[TagEntry], str]
    enabled: bool = False
    parser: str | None = None

    @property
    def qualified_name(self) -> str:
        if self.parser:
            return f"{self.parser}.{self.name}"
        return self.name


class FieldRegistry:
    """Field definitions keyed by qualified name, in definition order."""

    def __init__(self) -> None:
        self._fields: dict[str, FieldDefinition] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._fields.values())

    def define(self, definition: FieldDefinition) -> None:
        self._fields[definition.qualified_name] = definition

    def get(self, name: str) -> FieldDefinition:
        try:
            return self._fields[name]
        except KeyError:
            msg = f"Unknown field '{name}'"
            raise ConfigError(msg) from None

    def enable(self, name: str, enabled: bool = True) -> None:
        self.get(name).enabled = enabled

    def is_enabled(self, name: str) -> bool:
        definition = self._fields.get(name)
        return definition is not None and definition.enabled

    def enabled_names(self) -> list[str]:
        return [name for name, d in self._fields.items() if d.enabled]

    def render(
        self, name: str, entry: TagEntry, *, force: bool = False
    ) -> str | None:
        """Render field ``name`` for ``entry``.

        The render callback only runs when the field is attached to the
        entry and either enabled or ``force`` is set (templates asking for
        the field explicitly). A value preset on the entry wins.
        """
        definition = self._fields.get(name)
        if definition is None or name not in entry.parser_fields:
            return None
        if not (definition.enabled or force):
            return None
        preset = entry.parser_fields[name]
        if preset is not None:
            return preset
        return definition.render(entry)


def make_extern_fields(
    formats: TagFormatTable,
    renderer: TemplateRenderer,
    *,
    parser: str = "Extern",
) -> list[FieldDefinition]:
    """Build the ``encodedName`` and ``summary`` fields of the extern parser."""

    def render_encoded_name(entry: TagEntry) -> str:
        rule = formats.get(entry.kind)
        encoded = encode_name(entry.name, rule, formats.other_prefixes(entry.kind))
        return encoded.decode("utf-8")

    def render_summary(entry: TagEntry) -> str:
        rule = formats.get(entry.kind)
        template = DEFAULT_SUMMARY_TEMPLATE
        if rule is not None and rule.summary_template:
            template = rule.summary_template
        return renderer.render(template, entry)

    return [
        FieldDefinition(
            name=ENCODED_NAME_FIELD,
            description="encoded tag name",
            render=render_encoded_name,
            parser=parser,
        ),
        FieldDefinition(
            name=SUMMARY_FIELD,
            description="summary line",
            render=render_summary,
            parser=parser,
        ),
    ]


__all__ = [
    "DEFAULT_SUMMARY_TEMPLATE",
    "ENCODED_NAME_FIELD",
    "SUMMARY_FIELD",
    "FieldDefinition",
    "FieldRegistry",
    "make_extern_fields",
]
