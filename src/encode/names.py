"""Percent-encoding of tag names."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.kinds import TagFormatRule

_HEX = b"0123456789ABCDEF"
_PERCENT = 0x25
_EXCLAMATION = 0x21


def _needs_escape(byte: int) -> bool:
    return byte < 0x21 or byte > 0x7E or byte == _PERCENT


def percent_encode(data: bytes, *, force: bool = False) -> bytes:
    """Escape bytes outside ``0x21-0x7E`` and ``%`` as ``%XX``.

    With ``force`` every byte is escaped.
    """
    out = bytearray()
    for byte in data:
        if force or _needs_escape(byte):
            out.append(_PERCENT)
            out.append(_HEX[byte >> 4])
            out.append(_HEX[byte & 0x0F])
        else:
            out.append(byte)
    return bytes(out)


def encode_name(
    name: str | bytes,
    rule: TagFormatRule | None = None,
    other_prefixes: Sequence[bytes] = (),
) -> bytes:
    """Encode a tag name into a sortable, unambiguous identifier.

    Args:
        name: Tag name; text is UTF-8 encoded first.
        rule: Format rule of the tag's kind, if any. Its prefix is emitted
            verbatim in front of the encoded name.
        other_prefixes: Prefixes configured for other kinds, in registration
            order. Only consulted when the tag's own kind has no prefix.

    Returns:
        The prefix followed by the percent-encoded name. A leading ``!`` is
        always escaped since it collides with pseudo-tag entries when sorted,
        and an unprefixed name that starts with another kind's prefix gets
        its first byte escaped.
    """
    raw = name.encode("utf-8") if isinstance(name, str) else name
    prefix = rule.name_prefix.encode("utf-8") if rule and rule.name_prefix else b""

    out = bytearray(prefix)
    rest = raw

    if raw[:1] == bytes([_EXCLAMATION]):
        out += percent_encode(raw[:1], force=True)
        rest = raw[1:]
    elif not prefix:
        for other in other_prefixes:
            if other and raw.startswith(other):
                out += percent_encode(raw[:1], force=True)
                rest = raw[1:]
                break

    out += percent_encode(rest)
    return bytes(out)


__all__ = ["encode_name", "percent_encode"]
