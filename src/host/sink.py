"""Corked tag queue: entries of one file are batched until uncorked."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.tags import TagEntry


class CorkQueue:
    def __init__(self) -> None:
        self._entries: list[TagEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def make_tag(self, entry: TagEntry) -> int:
        """Queue ``entry`` and return its cork index."""
        self._entries.append(entry)
        return len(self._entries) - 1

    def uncork(self) -> list[TagEntry]:
        """Return the queued entries in submission order and reset."""
        entries, self._entries = self._entries, []
        return entries


__all__ = ["CorkQueue"]
