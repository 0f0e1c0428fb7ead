from __future__ import annotations

import json
import os
import shlex
import sys
from pathlib import Path

import pytest

from cli import main

pytestmark = pytest.mark.skipif(
    os.name == "nt",
    reason="Commands are split with POSIX shell rules.",
)

_FAKE_PARSER = Path(__file__).parent / "fixtures" / "fake_parser.py"


def _fake_parser_command(*flags: str) -> str:
    return shlex.join([sys.executable, str(_FAKE_PARSER), *flags])


def _write_minimal_project(root: Path) -> None:
    (root / "pkg").mkdir(parents=True, exist_ok=True)
    (root / "pkg" / "a.src").write_text("def alpha\nuse beta\n", encoding="utf-8")
    (root / "pkg" / "b.src").write_text("def beta\n", encoding="utf-8")
    (root / "extern-tags.toml").write_text(
        "\n".join(
            [
                f"parser = {json.dumps(_fake_parser_command())}",
                'kinds = ["function:f:d", "call:c:r"]',
                'fields = ["Extern.encodedName"]',
            ]
        ),
        encoding="utf-8",
    )


def _read_jsonl(path: Path) -> list[dict[str, object]]:
    records: list[dict[str, object]] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line:
            records.append(json.loads(line))
    return records


def test_cli_generate_smoke(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_project(repo_root)

    exit_code = main(["generate", "--root", str(repo_root)])

    assert exit_code == 0
    records = _read_jsonl(repo_root / "tags.jsonl")
    assert [(r["name"], r["kind"], r["line"]) for r in records] == [
        ("alpha", "function", 1),
        ("beta", "call", 2),
        ("beta", "function", 1),
    ]
    assert records[0]["pattern"] == "/def alpha/"
    assert records[0]["Extern.encodedName"] == "alpha"
    assert records[1]["role"] == "reference"


def test_cli_generate_out_flag(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_project(repo_root)

    out_path = tmp_path / "custom" / "tags.jsonl"
    exit_code = main(
        [
            "generate",
            str(repo_root / "pkg" / "b.src"),
            "--root",
            str(repo_root),
            "--out",
            str(out_path),
        ]
    )

    assert exit_code == 0
    assert [r["name"] for r in _read_jsonl(out_path)] == ["beta"]


def test_cli_generate_xref_listing(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_project(repo_root)

    exit_code = main(
        [
            "generate",
            str(repo_root / "pkg" / "a.src"),
            "--root",
            str(repo_root),
            "--xref",
            "--xformat",
            "%R %-6N %k %n",
        ]
    )

    assert exit_code == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["D alpha  f 1", "R beta   c 2"]


def test_cli_reports_missing_parser(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = tmp_path / "a.src"
    source.write_text("def alpha\n", encoding="utf-8")

    exit_code = main(
        ["generate", str(source), "--root", str(tmp_path), "--kinds", "function:f:d"]
    )

    assert exit_code == 2
    assert "No parser command" in capsys.readouterr().err


def test_cli_reports_bad_kinds(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(["kinds", "--root", str(tmp_path), "--kinds", ":x:d"])

    assert exit_code == 2
    assert "empty kind name" in capsys.readouterr().err


def test_cli_kinds_listing(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        [
            "kinds",
            "--root",
            str(tmp_path),
            "--kinds",
            "function:f:d,call:c:r:@:%N called",
        ]
    )

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        "f\tfunction\tdefinition\t-\t-\t-",
        "c\tcall\treference\treference\t@\t%N called",
    ]


def test_cli_bad_summary_template_keeps_previous_tags(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_project(repo_root)
    tags_path = repo_root / "tags.jsonl"
    tags_path.write_text("PREVIOUS GOOD TAGS\n", encoding="utf-8")

    exit_code = main(
        ["generate", "--root", str(repo_root), "--kinds", "function:f:d::%Q"]
    )

    assert exit_code == 2
    assert "%Q" in capsys.readouterr().err
    assert tags_path.read_text(encoding="utf-8") == "PREVIOUS GOOD TAGS\n"
