"""Line-oriented reader over one input file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from utils import is_absolute_path, relative_filename

if TYPE_CHECKING:
    from types import TracebackType
    from typing import BinaryIO


class InputFile:
    """Read an input file line by line, tracking the current line number.

    Lines are returned as bytes with ``\\r\\n`` normalized to ``\\n``.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.name = str(path)
        self.line_number = 0
        self.current_line: bytes | None = None
        self._handle: BinaryIO | None = None

    def __enter__(self) -> InputFile:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def open(self) -> None:
        if self._handle is None:
            self._handle = self.path.open("rb")

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def read_line(self) -> bytes | None:
        """Advance to the next line; return None at end of file."""
        self.open()
        assert self._handle is not None
        line = self._handle.readline()
        if not line:
            return None
        if line.endswith(b"\r\n"):
            line = line[:-2] + b"\n"
        self.line_number += 1
        self.current_line = line
        return line

    def request_name(self, directory: str | Path | None = None) -> str:
        """Name sent to the external parser for this file.

        ``directory`` is the parser's working directory; None means it shares
        ours, in which case relative names are sent as given.
        """
        if directory is None:
            if is_absolute_path(self.name):
                return relative_filename(self.name, Path.cwd())
            return self.name
        return relative_filename(self.path.absolute(), directory)


__all__ = ["InputFile"]
