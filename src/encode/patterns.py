"""Search patterns for relocating a tagged line in vi-like editors."""

from __future__ import annotations

BACKSLASH = 0x5C
CARET = 0x5E
DOLLAR = 0x24
SPACE = 0x20
CRETURN = 0x0D
NEWLINE = 0x0A

FORWARD_DELIMITER = 0x2F
BACKWARD_DELIMITER = 0x3F

# Continuation bytes allowed past the limit to finish a UTF-8 character.
_MAX_EXTRA_BYTES = 3


def _is_line_end(byte: int) -> bool:
    return byte in (CRETURN, NEWLINE)


def build_search_pattern(
    line: bytes,
    *,
    backward: bool = False,
    max_length: int = 0,
) -> bytes:
    """Convert a source line into a delimited literal search pattern.

    The delimiter, backslashes, a leading ``^`` and a final ``$`` are
    escaped. Embedded line ends become spaces and a final line end is
    dropped. With a non-zero ``max_length`` the body is cut once it grows
    past the limit, allowing up to three continuation bytes so a multi-byte
    character is not split. An escape that would land on the limit stops the
    pattern instead of leaving a lone backslash.
    """
    delimiter = BACKWARD_DELIMITER if backward else FORWARD_DELIMITER
    pattern = bytearray([delimiter])
    extra_bytes = 0
    last = len(line) - 1

    for i, byte in enumerate(line):
        if max_length and len(pattern) > max_length:
            if (byte & 0xC0) != 0x80:
                break
            extra_bytes += 1
            if extra_bytes > _MAX_EXTRA_BYTES:
                break

        at_end = i == last or (i + 1 == last and _is_line_end(line[last]))
        if (
            byte in (BACKSLASH, delimiter)
            or (byte == CARET and len(pattern) == 1)
            or (byte == DOLLAR and (at_end or len(pattern) == max_length))
        ):
            if len(pattern) == max_length:
                break
            pattern.append(BACKSLASH)

        if _is_line_end(byte):
            if i == last:
                break
            pattern.append(SPACE)
        else:
            pattern.append(byte)

    pattern.append(delimiter)
    return bytes(pattern)


__all__ = ["build_search_pattern"]
