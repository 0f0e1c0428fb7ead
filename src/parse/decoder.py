"""Decode the external parser's JSON answer into tag records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from models.tags import RawTagRecord

if TYPE_CHECKING:
    from collections.abc import Iterable


class ProtocolError(Exception):
    """Raised when the external parser's answer cannot be decoded."""


def decode_response(raw: bytes) -> list[RawTagRecord]:
    """Decode one response into records, keeping the array order.

    Every element must be an object with a string ``name``, a string
    ``kind`` and an integer ``line``; anything else is a protocol error.
    """
    try:
        payload = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        msg = f"Cannot parse JSON response: {exc}"
        raise ProtocolError(msg) from exc

    if not isinstance(payload, list):
        msg = f"Expected a JSON array, got {type(payload).__name__}"
        raise ProtocolError(msg)

    records: list[RawTagRecord] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            msg = f"Cannot parse JSON object at index {index}: not an object"
            raise ProtocolError(msg)
        try:
            records.append(RawTagRecord.model_validate(item))
        except ValidationError as exc:
            msg = f"Cannot parse JSON object at index {index}: {exc}"
            raise ProtocolError(msg) from exc
    return records


def sort_records(records: Iterable[RawTagRecord]) -> list[RawTagRecord]:
    """Order records by line; records on the same line keep their order."""
    return sorted(records, key=lambda record: record.line)


__all__ = ["ProtocolError", "decode_response", "sort_records"]
