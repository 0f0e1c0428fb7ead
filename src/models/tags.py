"""Tag models: wire records from the external parser and host tag entries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from models.kinds import ROLE_DEFINITION_INDEX


class RawTagRecord(BaseModel):
    """One element of the JSON array returned by the external parser."""

    model_config = ConfigDict(strict=True, extra="ignore", frozen=True)

    name: str
    kind: str = Field(description="Kind name (not letter)")
    line: int = Field(description="1-based line number")


class ResolvedTag(BaseModel):
    """A raw record whose kind has been resolved and pattern built."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind_index: int
    role_index: int = ROLE_DEFINITION_INDEX
    pattern: bytes

    @property
    def is_definition(self) -> bool:
        return self.role_index == ROLE_DEFINITION_INDEX


class TagEntry(BaseModel):
    """A tag record handed to the sink."""

    name: str
    input_file: str
    line_number: int
    kind_index: int
    kind: str
    kind_letter: str
    role_index: int = ROLE_DEFINITION_INDEX
    role: str | None = None
    pattern: bytes = b""
    source_line: bytes | None = None
    parser_fields: dict[str, str | None] = Field(default_factory=dict)

    @property
    def is_definition(self) -> bool:
        return self.role_index == ROLE_DEFINITION_INDEX


__all__ = ["RawTagRecord", "ResolvedTag", "TagEntry"]
