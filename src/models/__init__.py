"""Model namespace for extern-tags records."""

from models.kinds import (
    OTHER_ROLES,
    REFERENCE_ROLES,
    ROLE_DEFINITION_INDEX,
    KindSpec,
    RoleKind,
    RoleSpec,
    TagFormatRule,
)
from models.tags import RawTagRecord, ResolvedTag, TagEntry

__all__ = [
    "OTHER_ROLES",
    "REFERENCE_ROLES",
    "ROLE_DEFINITION_INDEX",
    "KindSpec",
    "RawTagRecord",
    "ResolvedTag",
    "RoleKind",
    "RoleSpec",
    "TagEntry",
    "TagFormatRule",
]
