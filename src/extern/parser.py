"""The extern parser: tags produced by an external program.

The parser is configured through three string parameters (``parser``,
``kinds`` and ``xformat``). For every input file it sends the file name to the
external program, decodes the JSON array it answers with and turns each
element into a tag entry on the corresponding source line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bridge.process import ParserProcess
from emit.emitter import TagEmitter
from emit.fields import FieldRegistry, make_extern_fields
from emit.fmt import TemplateRenderer
from host.reader import InputFile
from host.sink import CorkQueue
from kinds.adapter import TagFormatTable, define_kinds, parse_kind_clauses
from kinds.registry import KindRegistry
from parse.decoder import decode_response, sort_records
from parse.scheduler import TagScheduler
from rules.config import ConfigError, ExternConfig

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from types import TracebackType

    from models.tags import TagEntry

LOGGER = logging.getLogger(__name__)

PARSER_NAME = "Extern"

# For GNU Global, set xformat to
# "%R %-16{Extern.encodedName} %-10z %4n %-16F %{Extern.summary}".
DEFAULT_XREF_FORMAT = "%-16N %-10K %4n %-16F %C"


@dataclass(frozen=True)
class ParamDefinition:
    name: str
    description: str
    handler: Callable[[ExternParser, str], None]


def _set_parser_command(parser: ExternParser, arg: str) -> None:
    parser.command = arg


def _define_kinds(parser: ExternParser, arg: str) -> None:
    for clause in parse_kind_clauses(arg):
        if clause.summary_template:
            parser.renderer.compile(clause.summary_template)
    define_kinds(arg, parser.registry, parser.formats)


def _set_xref_format(parser: ExternParser, arg: str) -> None:
    parser.renderer.compile(arg)
    parser.xformat = arg


PARAMS: tuple[ParamDefinition, ...] = (
    ParamDefinition(
        name="parser",
        description="set the parser command (string)",
        handler=_set_parser_command,
    ),
    ParamDefinition(
        name="kinds",
        description="define and configure parser-specific kinds (string)",
        handler=_define_kinds,
    ),
    ParamDefinition(
        name="xformat",
        description="set the Xref output format (string)",
        handler=_set_xref_format,
    ),
)


class ExternParser:
    """Tag generation through a long-lived external parser process."""

    def __init__(
        self,
        config: ExternConfig | None = None,
        *,
        cwd: Path | None = None,
    ) -> None:
        config = config or ExternConfig()
        self.config = config
        self.cwd = cwd
        self.command: str | None = None
        self.xformat: str | None = None

        self.registry = KindRegistry(PARSER_NAME)
        self.formats = TagFormatTable()
        self.fields = FieldRegistry()
        self.renderer = TemplateRenderer(self.fields)
        for definition in make_extern_fields(
            self.formats, self.renderer, parser=PARSER_NAME
        ):
            self.fields.define(definition)

        self.sink = CorkQueue()
        self.emitter = TagEmitter(
            self.registry,
            self.sink,
            field_names=[definition.qualified_name for definition in self.fields],
        )
        self.scheduler = TagScheduler(
            self.registry,
            self.emitter,
            backward=config.backward,
            max_length=config.pattern_length_limit,
        )
        self._process: ParserProcess | None = None

        self._apply_config(config)

    def _apply_config(self, config: ExternConfig) -> None:
        if config.parser:
            self.set_param("parser", config.parser)
        for kinds in config.kinds:
            self.set_param("kinds", kinds)
        if config.xformat:
            self.set_param("xformat", config.xformat)

        for item in config.disabled_roles:
            kind_name, _, role_name = item.partition(".")
            if not self.registry.disable_role(kind_name, role_name):
                msg = f"Unknown role '{item}'"
                raise ConfigError(msg)

        for name in config.fields:
            self.fields.enable(name)

    def __enter__(self) -> ExternParser:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.finalize()

    @property
    def xref_format(self) -> str:
        return self.xformat or DEFAULT_XREF_FORMAT

    @property
    def process(self) -> ParserProcess:
        """The bridge to the external program, created on first use."""
        if self._process is None:
            self._process = ParserProcess(self.command, cwd=self.cwd)
        return self._process

    def set_param(self, name: str, value: str) -> None:
        """Apply parameter ``name`` (see ``PARAMS``).

        Raises:
            ConfigError: If the parameter is unknown or its value invalid.
        """
        for param in PARAMS:
            if param.name == name:
                param.handler(self, value)
                return
        msg = f"Unknown parameter '{PARSER_NAME}.{name}'"
        raise ConfigError(msg)

    def find_tags(self, path: str | Path) -> list[TagEntry]:
        """Generate the tag entries of one input file, in line order."""
        with InputFile(path) as reader:
            raw = self.process.request(reader.request_name(self.cwd))
            records = sort_records(decode_response(raw))
            count = self.scheduler.schedule(records, reader)
        LOGGER.debug("%s: %d of %d record(s) tagged", path, count, len(records))
        return self.sink.uncork()

    def finalize(self) -> None:
        """Tear down the external parser. Safe to call more than once."""
        if self._process is not None:
            self._process.shutdown()


__all__ = [
    "DEFAULT_XREF_FORMAT",
    "PARAMS",
    "PARSER_NAME",
    "ExternParser",
    "ParamDefinition",
]
