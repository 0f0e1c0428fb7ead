"""Shared utilities for extern-tags."""

from __future__ import annotations

import os
from pathlib import Path


def is_absolute_path(path: str | Path) -> bool:
    return Path(path).is_absolute()


def relative_filename(file_path: str | Path, directory: str | Path) -> str:
    """Express ``file_path`` relative to ``directory`` with forward slashes.

    Examples:
        >>> relative_filename("/repo/src/a.c", "/repo")
        'src/a.c'
        >>> relative_filename("/repo/src/a.c", "/repo/tests")
        '../src/a.c'
    """
    try:
        rel = os.path.relpath(file_path, directory)
    except ValueError:
        # Different drives on Windows; nothing relative to offer.
        return Path(file_path).as_posix()
    return Path(rel).as_posix()


def to_text(data: bytes) -> str:
    """Decode bytes read from source files for textual output."""
    return data.decode("utf-8", errors="replace")
