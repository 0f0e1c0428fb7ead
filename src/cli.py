"""Command-line interface for extern-tags."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from artifacts.write import format_xref, write_tags_jsonl
from bridge.process import BridgeError
from extern.parser import ExternParser
from parse.decoder import ProtocolError
from rules.config import CONFIG_FILENAME, ConfigError, ExternConfig, load_config
from scan.files import collect_inputs

if TYPE_CHECKING:
    from models.tags import TagEntry


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help=f"Project root holding {CONFIG_FILENAME} (default: .)",
    )
    parser.add_argument(
        "--kinds",
        action="append",
        default=None,
        help="Kind definitions kind[:letter[:role[:prefix[:summary]]]] "
        "(repeatable, added after the config file's kinds)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug diagnostics to stderr",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="extern-tags")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate tags through the external parser"
    )
    generate_parser.add_argument(
        "paths",
        nargs="*",
        help="Files or directories to tag (default: the project root)",
    )
    _add_common_options(generate_parser)
    generate_parser.add_argument("--parser", default=None, help="Parser command")
    generate_parser.add_argument(
        "--xformat", default=None, help="Cross-reference output template"
    )
    generate_parser.add_argument(
        "--field",
        action="append",
        default=None,
        help="Parser field to render, e.g. Extern.summary (repeatable)",
    )
    generate_parser.add_argument(
        "--backward",
        action="store_true",
        default=None,
        help="Use backward (?...?) search patterns",
    )
    generate_parser.add_argument(
        "--pattern-length-limit",
        type=int,
        default=None,
        help="Cut patterns after this many bytes (0 = no limit)",
    )
    generate_parser.add_argument(
        "--out",
        default=None,
        help="Output file for tags (default: config output)",
    )
    generate_parser.add_argument(
        "--xref",
        action="store_true",
        help="Print a cross-reference listing instead of writing tags",
    )

    kinds_parser = subparsers.add_parser("kinds", help="List configured kinds")
    _add_common_options(kinds_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _resolve_config(root: Path, args: argparse.Namespace) -> ExternConfig:
    config = load_config(root)
    updates: dict[str, Any] = {}
    if args.kinds:
        updates["kinds"] = [*config.kinds, *args.kinds]
    for option in ("parser", "xformat", "backward", "pattern_length_limit"):
        value = getattr(args, option, None)
        if value is not None:
            updates[option] = value
    fields = getattr(args, "field", None)
    if fields:
        updates["fields"] = [*config.fields, *fields]
    if not updates:
        return config
    try:
        return ExternConfig.model_validate({**config.model_dump(), **updates})
    except ValidationError as exc:
        msg = f"Invalid option: {exc}"
        raise ConfigError(msg) from exc


def _resolve_out(root: Path, out: str | None, config: ExternConfig) -> Path:
    if out is None:
        return (root / config.output).resolve()
    return Path(out).expanduser().resolve()


def _skip_names(root: Path, out_path: Path) -> list[str]:
    names = [CONFIG_FILENAME]
    try:
        names.append(out_path.relative_to(root.resolve()).as_posix())
    except ValueError:
        pass
    return names


def _handle_generate(root: Path, args: argparse.Namespace) -> int:
    config = _resolve_config(root, args)
    out_path = _resolve_out(root, args.out, config)
    paths = [Path(p) for p in args.paths] or [root]
    inputs = collect_inputs(
        paths,
        skip_names=_skip_names(root, out_path),
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    )

    entries: list[TagEntry] = []
    with ExternParser(config) as parser:
        for path in inputs:
            entries.extend(parser.find_tags(path))

        if args.xref:
            for line in format_xref(entries, parser.renderer, parser.xref_format):
                sys.stdout.write(f"{line}\n")
            return 0

        write_tags_jsonl(out_path, entries, parser.fields)
    return 0


def _handle_kinds(root: Path, args: argparse.Namespace) -> int:
    config = _resolve_config(root, args)
    parser = ExternParser(config)
    for kind in parser.registry:
        rule = parser.formats.get(kind.name)
        roles = ",".join(role.name for role in kind.roles) or "-"
        prefix = rule.name_prefix if rule and rule.name_prefix else "-"
        summary = rule.summary_template if rule and rule.summary_template else "-"
        sys.stdout.write(
            f"{kind.letter}\t{kind.name}\t{kind.role_kind}\t{roles}\t"
            f"{prefix}\t{summary}\n"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(root, args)

        if args.command == "kinds":
            return _handle_kinds(root, args)
    except (ConfigError, BridgeError, ProtocolError, OSError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
