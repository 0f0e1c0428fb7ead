from __future__ import annotations

import pytest

from emit.fields import FieldDefinition, FieldRegistry
from emit.fmt import TemplateError, TemplateRenderer
from models.tags import TagEntry


def _entry(**overrides: object) -> TagEntry:
    values: dict[str, object] = {
        "name": "main",
        "input_file": "src/main.c",
        "line_number": 12,
        "kind_index": 0,
        "kind": "function",
        "kind_letter": "f",
        "pattern": b"/int main(void)/",
        "source_line": b"\tint main(void)\n",
    }
    values.update(overrides)
    return TagEntry.model_validate(values)


def test_letters() -> None:
    renderer = TemplateRenderer()

    rendered = renderer.render("%N|%F|%n|%K|%k|%z|%R|%r|%P|%C", _entry())

    assert rendered == (
        "main|src/main.c|12|function|f|function|D|def|/int main(void)/|"
        "int main(void)"
    )


def test_reference_marker_and_role() -> None:
    renderer = TemplateRenderer()
    entry = _entry(role_index=0, role="reference")

    assert renderer.render("%R %r", entry) == "R reference"


def test_width_and_alignment() -> None:
    renderer = TemplateRenderer()

    assert renderer.render("[%-6N][%4n]", _entry()) == "[main  ][  12]"


def test_percent_escape_and_literals() -> None:
    renderer = TemplateRenderer()

    assert renderer.render("100%% %N!", _entry()) == "100% main!"


def test_compact_falls_back_to_pattern() -> None:
    renderer = TemplateRenderer()

    assert renderer.render("%C", _entry(source_line=None)) == "/int main(void)/"


def test_long_names() -> None:
    renderer = TemplateRenderer()

    assert renderer.render("%{name}:%{line}:%{kind}", _entry()) == "main:12:function"


def test_parser_fields_in_templates() -> None:
    fields = FieldRegistry()
    fields.define(
        FieldDefinition(
            name="upper",
            description="upper-cased name",
            render=lambda e: e.name.upper(),
            parser="Extern",
        )
    )
    renderer = TemplateRenderer(fields)
    entry = _entry(parser_fields={"Extern.upper": None})

    assert renderer.render("%-6{Extern.upper}|", entry) == "MAIN  |"


@pytest.mark.parametrize("template", ["%Q", "%{nope}", "trailing %", "%{}"])
def test_invalid_templates(template: str) -> None:
    with pytest.raises(TemplateError):
        TemplateRenderer().compile(template)
