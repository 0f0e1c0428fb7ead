"""Translate the ``kinds`` parameter into registered kinds and format rules.

Each clause has the form ``kind[:letter[:role[:prefix[:summary]]]]`` and
clauses are separated by commas. Only the first character of ``letter`` and
``role`` is significant. The role character selects the kind flavour:

- ``d``: definition kind, no roles
- ``r``: reference-only kind with one ``reference`` role
- ``o``: reference-only kind with one ``other`` role
- anything else (or nothing): reference-only kind without roles
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from models.kinds import OTHER_ROLES, REFERENCE_ROLES, KindSpec, TagFormatRule
from rules.config import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from kinds.registry import KindRegistry
    from models.kinds import RoleKind

LOGGER = logging.getLogger(__name__)

_CLAUSE_FIELDS = 5


class KindConfigError(ConfigError):
    """Raised when a kind clause cannot establish a kind identity."""


@dataclass(frozen=True)
class KindClause:
    kind: str
    letter: str | None = None
    role: str | None = None
    prefix: str | None = None
    summary_template: str | None = None


class TagFormatTable:
    """Insertion-ordered mapping of kind name to format rule."""

    def __init__(self) -> None:
        self._rules: dict[str, TagFormatRule] = {}

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[TagFormatRule]:
        return iter(self._rules.values())

    def get(self, kind_name: str) -> TagFormatRule | None:
        return self._rules.get(kind_name)

    def upsert(
        self,
        kind_name: str,
        prefix: str | None = None,
        summary_template: str | None = None,
    ) -> TagFormatRule | None:
        """Create or merge the rule for ``kind_name``.

        Empty values leave the stored fields untouched. Nothing is created
        when neither value is given.
        """
        if not prefix and not summary_template:
            return self._rules.get(kind_name)

        rule = self._rules.get(kind_name)
        if rule is None:
            rule = TagFormatRule(kind_name=kind_name)
            self._rules[kind_name] = rule
        if prefix:
            rule.name_prefix = prefix
        if summary_template:
            rule.summary_template = summary_template
        return rule

    def other_prefixes(self, kind_name: str) -> list[bytes]:
        """Non-empty prefixes of every other kind, in registration order."""
        return [
            rule.name_prefix.encode("utf-8")
            for rule in self._rules.values()
            if rule.kind_name != kind_name and rule.name_prefix
        ]


def _optional(value: str | None) -> str | None:
    return value if value else None


def parse_kind_clauses(arg: str) -> list[KindClause]:
    """Split a ``kinds`` parameter value into clauses."""
    clauses: list[KindClause] = []
    for raw_clause in arg.split(","):
        parts: list[str | None] = list(raw_clause.split(":", _CLAUSE_FIELDS - 1))
        parts.extend([None] * (_CLAUSE_FIELDS - len(parts)))
        kind, letter, role, prefix, summary = parts
        clauses.append(
            KindClause(
                kind=kind or "",
                letter=letter,
                role=role,
                prefix=_optional(prefix),
                summary_template=_optional(summary),
            )
        )
    return clauses


def build_kind_spec(clause: KindClause) -> KindSpec:
    """Build the kind definition for one clause.

    Raises:
        KindConfigError: If the kind name or letter is empty.
    """
    if not clause.kind:
        msg = "kind clause has an empty kind name"
        raise KindConfigError(msg)
    if not clause.letter or clause.letter[0] == "\0":
        msg = f"kind '{clause.kind}' has no kind letter"
        raise KindConfigError(msg)

    role_char = clause.role[0] if clause.role else ""
    role_kind: RoleKind
    if role_char == "d":
        role_kind, roles = "definition", ()
    elif role_char == "r":
        role_kind, roles = "reference", REFERENCE_ROLES
    elif role_char == "o":
        role_kind, roles = "other", OTHER_ROLES
    else:
        # Unknown role characters degrade to a reference-only kind.
        role_kind, roles = "reference", ()

    return KindSpec(
        letter=clause.letter[0],
        name=clause.kind,
        description=clause.kind,
        role_kind=role_kind,
        reference_only=role_char != "d",
        roles=roles,
    )


def define_kinds(
    arg: str,
    registry: KindRegistry,
    formats: TagFormatTable,
) -> list[KindSpec]:
    """Register every clause of ``arg`` and merge its format rule.

    Returns:
        The kind definitions registered, in clause order.
    """
    defined: list[KindSpec] = []
    for clause in parse_kind_clauses(arg):
        spec = build_kind_spec(clause)
        index = registry.define_kind(spec)
        formats.upsert(clause.kind, clause.prefix, clause.summary_template)
        LOGGER.debug(
            "Defined kind %s (%s) at index %d with %d role(s)",
            spec.name,
            spec.letter,
            index,
            len(spec.roles),
        )
        defined.append(spec)
    return defined


__all__ = [
    "KindClause",
    "KindConfigError",
    "TagFormatTable",
    "build_kind_spec",
    "define_kinds",
    "parse_kind_clauses",
]
