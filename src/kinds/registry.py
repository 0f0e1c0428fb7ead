"""Kind and role registry for one parser language."""

from __future__ import annotations

from typing import TYPE_CHECKING

from models.kinds import ROLE_DEFINITION_INDEX

if TYPE_CHECKING:
    from collections.abc import Iterator

    from models.kinds import KindSpec


class KindRegistry:
    """Kinds in registration order, addressable by index or name."""

    def __init__(self, language: str = "Extern") -> None:
        self.language = language
        self._kinds: list[KindSpec] = []
        self._by_name: dict[str, int] = {}
        self._disabled_roles: set[tuple[int, int]] = set()

    def __len__(self) -> int:
        return len(self._kinds)

    def __iter__(self) -> Iterator[KindSpec]:
        return iter(self._kinds)

    def define_kind(self, spec: KindSpec) -> int:
        """Register ``spec`` and return its kind index.

        Redefining a kind name registers a new kind that shadows the earlier
        one for name lookups.
        """
        index = len(self._kinds)
        self._kinds.append(spec)
        self._by_name[spec.name] = index
        return index

    def kind(self, index: int) -> KindSpec:
        return self._kinds[index]

    def kind_index(self, name: str) -> int | None:
        return self._by_name.get(name)

    def kind_for_name(self, name: str) -> KindSpec | None:
        index = self._by_name.get(name)
        if index is None:
            return None
        return self._kinds[index]

    def kind_name(self, index: int) -> str:
        return self._kinds[index].name

    def count_roles(self, index: int) -> int:
        return len(self._kinds[index].roles)

    def role_name(self, index: int, role_index: int) -> str | None:
        if role_index == ROLE_DEFINITION_INDEX:
            return None
        return self._kinds[index].roles[role_index].name

    def is_role_enabled(self, index: int, role_index: int) -> bool:
        roles = self._kinds[index].roles
        if not 0 <= role_index < len(roles):
            return False
        if (index, role_index) in self._disabled_roles:
            return False
        return roles[role_index].enabled

    def disable_role(self, kind_name: str, role_name: str) -> bool:
        """Disable ``role_name`` of ``kind_name``; return False if unknown."""
        index = self._by_name.get(kind_name)
        if index is None:
            return False
        for role_index, role in enumerate(self._kinds[index].roles):
            if role.name == role_name:
                self._disabled_roles.add((index, role_index))
                return True
        return False


__all__ = ["KindRegistry"]
