"""Framing of single JSON values on a long-lived byte stream."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import BinaryIO

_WHITESPACE = b" \t\r\n"
_OPENERS = b"[{"
_CLOSERS = b"]}"
_QUOTE = 0x22
_BACKSLASH = 0x5C

CHUNK_SIZE = 65536


class IncompleteValueError(EOFError):
    """Raised when the stream ends before a complete JSON value."""


class JsonValueReader:
    """Read one JSON value at a time without waiting for end of stream.

    Bytes past the end of a value stay buffered for the next call, so a
    child that answers every request with one array on a pipe it never
    closes can be read request by request.
    """

    def __init__(self, stream: BinaryIO, *, chunk_size: int = CHUNK_SIZE) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._buffer = bytearray()

    @property
    def pending(self) -> bytes:
        """Bytes read from the stream but not yet returned."""
        return bytes(self._buffer)

    def _fill(self) -> bool:
        read1 = getattr(self._stream, "read1", None)
        chunk = read1(self._chunk_size) if read1 else self._stream.read(1)
        if not chunk:
            return False
        self._buffer += chunk
        return True

    def _skip_whitespace(self) -> None:
        while True:
            start = 0
            while start < len(self._buffer) and self._buffer[start] in _WHITESPACE:
                start += 1
            del self._buffer[:start]
            if self._buffer:
                return
            if not self._fill():
                raise IncompleteValueError("stream closed before a JSON value")

    def _container_end(self, pos: int, state: list[int]) -> int | None:
        """Scan from ``pos``; return the index past the value or None.

        ``state`` holds ``[depth, in_string, escaped]`` across calls.
        """
        depth, in_string, escaped = state
        buffer = self._buffer
        while pos < len(buffer):
            byte = buffer[pos]
            pos += 1
            if in_string:
                if escaped:
                    escaped = 0
                elif byte == _BACKSLASH:
                    escaped = 1
                elif byte == _QUOTE:
                    in_string = 0
            elif byte == _QUOTE:
                in_string = 1
            elif byte in _OPENERS:
                depth += 1
            elif byte in _CLOSERS:
                depth -= 1
                if depth == 0:
                    state[:] = [depth, in_string, escaped]
                    return pos
        state[:] = [depth, in_string, escaped]
        return None

    def _scalar_end(self, pos: int) -> int | None:
        while pos < len(self._buffer):
            if self._buffer[pos] in _WHITESPACE:
                return pos
            pos += 1
        return None

    def read_value(self) -> bytes:
        """Return the raw bytes of the next JSON value on the stream.

        Raises:
            IncompleteValueError: If the stream ends first. A scalar that
                runs up to end of stream is returned as is.
        """
        self._skip_whitespace()
        is_container = self._buffer[0] in _OPENERS
        state = [0, 0, 0]
        scanned = 0
        while True:
            if is_container:
                end = self._container_end(scanned, state)
            else:
                end = self._scalar_end(scanned)
            if end is not None:
                break
            scanned = len(self._buffer)
            if not self._fill():
                if is_container:
                    raise IncompleteValueError(
                        "stream closed inside a JSON value"
                    )
                end = len(self._buffer)
                break
        value = bytes(self._buffer[:end])
        del self._buffer[:end]
        return value


__all__ = ["CHUNK_SIZE", "IncompleteValueError", "JsonValueReader"]
