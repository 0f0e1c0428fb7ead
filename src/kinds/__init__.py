"""Kind registry and ``kinds`` parameter handling."""

from kinds.adapter import (
    KindConfigError,
    TagFormatTable,
    define_kinds,
    parse_kind_clauses,
)
from kinds.registry import KindRegistry

__all__ = [
    "KindConfigError",
    "KindRegistry",
    "TagFormatTable",
    "define_kinds",
    "parse_kind_clauses",
]
