"""Turn resolved tags into tag entries and hand them to the sink."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from models.tags import TagEntry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from host.reader import InputFile
    from host.sink import CorkQueue
    from kinds.registry import KindRegistry
    from models.tags import ResolvedTag

LOGGER = logging.getLogger(__name__)


class TagEmitter:
    def __init__(
        self,
        registry: KindRegistry,
        sink: CorkQueue,
        *,
        field_names: Sequence[str] = (),
    ) -> None:
        self.registry = registry
        self.sink = sink
        self.field_names = tuple(field_names)

    def emit(self, tag: ResolvedTag, reader: InputFile) -> TagEntry | None:
        """Build the entry for ``tag`` at the reader's current line.

        Role tags whose role is disabled for the kind are dropped. Every
        surviving entry carries the parser fields unrendered; they are only
        computed when output asks for them.
        """
        if not tag.is_definition and not self.registry.is_role_enabled(
            tag.kind_index, tag.role_index
        ):
            LOGGER.debug(
                "Dropping %s: role %d of kind %s is disabled",
                tag.name,
                tag.role_index,
                self.registry.kind_name(tag.kind_index),
            )
            return None

        kind = self.registry.kind(tag.kind_index)
        entry = TagEntry(
            name=tag.name,
            input_file=reader.name,
            line_number=reader.line_number,
            kind_index=tag.kind_index,
            kind=kind.name,
            kind_letter=kind.letter,
            role_index=tag.role_index,
            role=self.registry.role_name(tag.kind_index, tag.role_index),
            pattern=tag.pattern,
            source_line=reader.current_line,
            parser_fields=dict.fromkeys(self.field_names),
        )
        self.sink.make_tag(entry)
        return entry


__all__ = ["TagEmitter"]
