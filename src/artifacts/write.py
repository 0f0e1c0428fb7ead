from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from utils import to_text

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from emit.fields import FieldRegistry
    from emit.fmt import TemplateRenderer
    from models.tags import TagEntry


def tag_to_dict(entry: TagEntry, fields: FieldRegistry) -> dict[str, Any]:
    """Serializable view of a tag with every enabled parser field rendered."""
    record: dict[str, Any] = {
        "name": entry.name,
        "input": entry.input_file,
        "line": entry.line_number,
        "kind": entry.kind,
        "letter": entry.kind_letter,
        "role": entry.role,
        "pattern": to_text(entry.pattern),
    }
    for name in fields.enabled_names():
        value = fields.render(name, entry)
        if value is not None:
            record[name] = value
    return record


def write_tags_jsonl(
    path: Path,
    entries: Iterable[TagEntry],
    fields: FieldRegistry,
) -> int:
    """Write one JSON object per tag; return the number written."""
    count = 0
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        for entry in entries:
            payload = tag_to_dict(entry, fields)
            f.write(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS))
            f.write(b"\n")
            count += 1
    return count


def format_xref(
    entries: Iterable[TagEntry],
    renderer: TemplateRenderer,
    template: str,
) -> list[str]:
    """Render the cross-reference listing, one line per tag."""
    compiled = renderer.compile(template)
    return [renderer.render(compiled, entry) for entry in entries]
