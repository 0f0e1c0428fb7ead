from __future__ import annotations

import os
import shlex
import sys
from pathlib import Path

import pytest

from bridge.process import BridgeError, BridgeState
from emit.fmt import TemplateError
from extern.parser import DEFAULT_XREF_FORMAT, PARAMS, ExternParser
from host.reader import InputFile
from parse.decoder import ProtocolError
from rules.config import ConfigError, ExternConfig

pytestmark = pytest.mark.skipif(
    os.name == "nt",
    reason="Commands are split with POSIX shell rules.",
)

_FAKE_PARSER = Path(__file__).parent / "fixtures" / "fake_parser.py"


def _fake_parser_command(*flags: str) -> str:
    return shlex.join([sys.executable, str(_FAKE_PARSER), *flags])


def _config(**overrides: object) -> ExternConfig:
    values: dict[str, object] = {
        "parser": _fake_parser_command(),
        "kinds": ["function:f:d", "call:c:r::%N is called"],
        "pattern_length_limit": 0,
    }
    values.update(overrides)
    return ExternConfig.model_validate(values)


def _write_source(path: Path) -> Path:
    path.write_text(
        "use helper\n"
        "def helper\n"
        "other thing\n"
        "def main\n",
        encoding="utf-8",
    )
    return path


def test_param_table_names() -> None:
    assert [param.name for param in PARAMS] == ["parser", "kinds", "xformat"]


def test_find_tags_orders_and_filters(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "source.txt")

    with ExternParser(_config()) as parser:
        entries = parser.find_tags(source)

    assert [(e.name, e.kind, e.line_number, e.pattern) for e in entries] == [
        ("helper", "call", 1, b"/use helper/"),
        ("helper", "function", 2, b"/def helper/"),
        ("main", "function", 4, b"/def main/"),
    ]
    assert entries[0].role == "reference"
    assert entries[1].is_definition


def test_child_is_reused_across_files(tmp_path: Path) -> None:
    first = _write_source(tmp_path / "first.txt")
    second = tmp_path / "second.txt"
    second.write_text("def only\n", encoding="utf-8")

    with ExternParser(_config()) as parser:
        parser.find_tags(first)
        pid = parser.process.pid
        entries = parser.find_tags(second)

        assert parser.process.pid == pid

    assert [e.name for e in entries] == ["only"]
    assert parser.process.state is BridgeState.TERMINATED


def test_empty_answer_yields_no_tags(tmp_path: Path) -> None:
    source = tmp_path / "empty.txt"
    source.write_text("nothing to see\n", encoding="utf-8")

    with ExternParser(_config()) as parser:
        assert parser.find_tags(source) == []


def test_disabled_role_drops_references(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "source.txt")

    with ExternParser(_config(disabled_roles=["call.reference"])) as parser:
        entries = parser.find_tags(source)

    assert [e.kind for e in entries] == ["function", "function"]


def test_summary_and_encoded_name_fields(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "source.txt")
    config = _config(fields=["Extern.encodedName", "Extern.summary"])

    with ExternParser(config) as parser:
        entries = parser.find_tags(source)
        summaries = [parser.fields.render("Extern.summary", e) for e in entries]
        names = [parser.fields.render("Extern.encodedName", e) for e in entries]

    assert summaries == ["helper is called", "def helper", "def main"]
    assert names == ["helper", "helper", "main"]


def test_xformat_overrides_xref_template() -> None:
    parser = ExternParser(_config())
    assert parser.xref_format == DEFAULT_XREF_FORMAT

    parser.set_param("xformat", "%N %n")

    assert parser.xref_format == "%N %n"


def test_unknown_param_is_rejected() -> None:
    with pytest.raises(ConfigError):
        ExternParser(_config()).set_param("bogus", "x")


def test_unknown_disabled_role_is_rejected() -> None:
    with pytest.raises(ConfigError):
        ExternParser(_config(disabled_roles=["function.reference"]))


def test_missing_parser_command_is_fatal(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "source.txt")

    with ExternParser(_config(parser=None)) as parser:
        with pytest.raises(BridgeError):
            parser.find_tags(source)


def test_garbage_answer_is_fatal(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "source.txt")
    config = _config(parser=_fake_parser_command("--garbage"))

    with ExternParser(config) as parser:
        with pytest.raises(ProtocolError):
            parser.find_tags(source)


def test_finalize_is_idempotent(tmp_path: Path) -> None:
    source = _write_source(tmp_path / "source.txt")
    parser = ExternParser(_config())
    parser.find_tags(source)

    parser.finalize()
    parser.finalize()

    assert parser.process.state is BridgeState.TERMINATED


def test_request_name_is_relative_to_parser_cwd(tmp_path: Path) -> None:
    child_dir = tmp_path / "child"
    child_dir.mkdir()
    source = _write_source(tmp_path / "source.txt").resolve()

    with ExternParser(_config(), cwd=child_dir) as parser:
        entries = parser.find_tags(source)

    assert [e.name for e in entries] == ["helper", "helper", "main"]
    assert all(e.input_file == str(source) for e in entries)


def test_request_name_follows_the_given_directory(tmp_path: Path) -> None:
    source = tmp_path / "source.txt"

    assert InputFile(source).request_name(tmp_path) == "source.txt"
    assert InputFile(source).request_name(tmp_path / "child") == "../source.txt"
    assert InputFile("src/a.txt").request_name() == "src/a.txt"


def test_bad_summary_template_is_rejected_up_front() -> None:
    with pytest.raises(TemplateError, match="%Q"):
        ExternParser(_config(kinds=["function:f:d::%Q"]))


def test_bad_summary_template_in_set_param_defines_nothing() -> None:
    parser = ExternParser(_config())

    with pytest.raises(ConfigError):
        parser.set_param("kinds", "method:m:d::%{nope}")

    assert parser.registry.kind_index("method") is None
    assert parser.formats.get("method") is None
