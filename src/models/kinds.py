"""Kind, role and tag-format models for the extern parser.

Kinds are defined once from the ``kinds`` parameter and never change after
configuration. Format rules are the only records updated in place, and only
through ``TagFormatTable.upsert``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

RoleKind = Literal["definition", "reference", "other"]

ROLE_DEFINITION_INDEX = -1


class RoleSpec(BaseModel):
    """A role a non-definition tag of some kind can take."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    enabled: bool = True


REFERENCE_ROLES: tuple[RoleSpec, ...] = (
    RoleSpec(name="reference", description="reference"),
)
OTHER_ROLES: tuple[RoleSpec, ...] = (
    RoleSpec(name="other", description="other symbol"),
)


class KindSpec(BaseModel):
    """A kind registered from one ``kinds`` clause."""

    model_config = ConfigDict(frozen=True)

    letter: str = Field(description="Single-character kind letter")
    name: str
    description: str
    role_kind: RoleKind
    reference_only: bool
    roles: tuple[RoleSpec, ...] = ()
    enabled: bool = True

    @field_validator("letter")
    @classmethod
    def validate_letter(cls, v: str) -> str:
        if len(v) != 1 or v == "\0":
            msg = f"kind letter must be a single character, got {v!r}"
            raise ValueError(msg)
        return v


class TagFormatRule(BaseModel):
    """Display rule for the tags of one kind."""

    kind_name: str
    name_prefix: str | None = None
    summary_template: str | None = None


__all__ = [
    "OTHER_ROLES",
    "REFERENCE_ROLES",
    "ROLE_DEFINITION_INDEX",
    "KindSpec",
    "RoleKind",
    "RoleSpec",
    "TagFormatRule",
]
