"""Map sorted tag records onto the lines of the input file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from encode.patterns import build_search_pattern
from models.kinds import ROLE_DEFINITION_INDEX
from models.tags import ResolvedTag

if TYPE_CHECKING:
    from collections.abc import Sequence

    from emit.emitter import TagEmitter
    from host.reader import InputFile
    from kinds.registry import KindRegistry
    from models.tags import RawTagRecord

LOGGER = logging.getLogger(__name__)


class TagScheduler:
    """Drive the input reader forward and emit one tag per known record."""

    def __init__(
        self,
        registry: KindRegistry,
        emitter: TagEmitter,
        *,
        backward: bool = False,
        max_length: int = 0,
    ) -> None:
        self.registry = registry
        self.emitter = emitter
        self.backward = backward
        self.max_length = max_length

    def advance(self, reader: InputFile, line: int) -> bytes | None:
        """Read forward until ``line`` or end of file; return the current line."""
        while reader.line_number < line:
            if reader.read_line() is None:
                break
        return reader.current_line

    def resolve(
        self, record: RawTagRecord, source_line: bytes | None
    ) -> ResolvedTag | None:
        """Resolve the record's kind by name; None when it is unknown."""
        kind_index = self.registry.kind_index(record.kind)
        if kind_index is None:
            return None
        role_index = ROLE_DEFINITION_INDEX
        if self.registry.count_roles(kind_index) > 0:
            role_index = 0
        pattern = build_search_pattern(
            source_line or b"",
            backward=self.backward,
            max_length=self.max_length,
        )
        return ResolvedTag(
            name=record.name,
            kind_index=kind_index,
            role_index=role_index,
            pattern=pattern,
        )

    def schedule(self, records: Sequence[RawTagRecord], reader: InputFile) -> int:
        """Emit tags for ``records``, which must already be sorted by line.

        Returns:
            Number of tags handed to the sink.
        """
        emitted = 0
        for record in records:
            source_line = self.advance(reader, record.line)
            tag = self.resolve(record, source_line)
            if tag is None:
                LOGGER.debug(
                    "Skipping %s at line %d: unknown kind %r",
                    record.name,
                    record.line,
                    record.kind,
                )
                continue
            if self.emitter.emit(tag, reader) is not None:
                emitted += 1
        return emitted


__all__ = ["TagScheduler"]
