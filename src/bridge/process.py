"""Lifecycle of the external parser process.

The child is started lazily on the first request and kept alive for the
whole run. Each request is one line holding a file name on the child's
standard input; each response is one JSON value on its standard output.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from enum import Enum
from typing import TYPE_CHECKING

from bridge.stream import IncompleteValueError, JsonValueReader

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType
    from typing import BinaryIO

LOGGER = logging.getLogger(__name__)


class BridgeError(Exception):
    """Raised when the external parser cannot be started or talked to."""


class BridgeState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    TERMINATED = "terminated"


def split_command(command: str) -> list[str] | str:
    """Split ``command`` into argv; Windows takes the command line as is."""
    if os.name == "nt":
        return command
    return shlex.split(command)


class ParserProcess:
    """A long-lived child process answering one JSON value per request.

    Not reentrant: one request at a time, from one caller.
    """

    def __init__(self, command: str | None, *, cwd: Path | None = None) -> None:
        self.command = command
        self.cwd = cwd
        self.state = BridgeState.UNINITIALIZED
        self._process: subprocess.Popen[bytes] | None = None
        self._writer: BinaryIO | None = None
        self._reader: JsonValueReader | None = None

    def __enter__(self) -> ParserProcess:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process is not None else None

    def ensure_running(self) -> None:
        """Start the child if it has not been started yet.

        Raises:
            BridgeError: If no command is configured, the command cannot be
                executed, its pipes cannot be opened, or the bridge has
                already been shut down.
        """
        if self.state is BridgeState.RUNNING:
            return
        if self.state is BridgeState.TERMINATED:
            msg = "Parser process has already been shut down"
            raise BridgeError(msg)
        if not self.command:
            msg = "No parser command"
            raise BridgeError(msg)

        try:
            argv = split_command(self.command)
        except ValueError as exc:
            msg = f"Cannot parse parser command {self.command!r}: {exc}"
            raise BridgeError(msg) from exc
        if not argv:
            msg = "No parser command"
            raise BridgeError(msg)

        try:
            process = subprocess.Popen(
                argv,
                cwd=self.cwd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=None,
                close_fds=True,
            )
        except OSError as exc:
            msg = f"Cannot execute {self.command} ({exc.strerror or exc})"
            raise BridgeError(msg) from exc

        if process.stdin is None or process.stdout is None:
            process.kill()
            process.wait()
            msg = "Cannot open stream"
            raise BridgeError(msg)

        self._process = process
        self._writer = process.stdin
        self._reader = JsonValueReader(process.stdout)
        self.state = BridgeState.RUNNING
        LOGGER.info("Started parser %s (pid %d)", self.command, process.pid)

    def request(self, path: str) -> bytes:
        """Send ``path`` and return the raw bytes of the child's answer.

        Raises:
            BridgeError: If the child cannot be started, its input pipe is
                closed, or its output ends before a complete JSON value.
        """
        self.ensure_running()
        assert self._writer is not None
        assert self._reader is not None

        try:
            self._writer.write(path.encode("utf-8") + b"\n")
            self._writer.flush()
        except (OSError, ValueError) as exc:
            msg = f"Cannot write to parser {self.command}: {exc}"
            raise BridgeError(msg) from exc

        try:
            raw = self._reader.read_value()
        except IncompleteValueError as exc:
            msg = f"Parser {self.command} closed its output: {exc}"
            raise BridgeError(msg) from exc
        except OSError as exc:
            msg = f"Cannot read from parser {self.command}: {exc}"
            raise BridgeError(msg) from exc

        LOGGER.debug("Parser answered %d byte(s) for %s", len(raw), path)
        return raw

    def shutdown(self) -> None:
        """Close both pipes and reap the child. Safe to call repeatedly."""
        if self.state is not BridgeState.RUNNING:
            self.state = BridgeState.TERMINATED
            return

        process = self._process
        writer, self._writer = self._writer, None
        self._reader = None
        self._process = None
        self.state = BridgeState.TERMINATED

        assert process is not None
        try:
            if writer is not None:
                try:
                    writer.close()
                except BrokenPipeError:
                    LOGGER.debug("Parser input was already closed")
        finally:
            try:
                if process.stdout is not None:
                    process.stdout.close()
            finally:
                returncode = self._reap(process)
        LOGGER.info("Parser %s exited with status %d", self.command, returncode)

    @staticmethod
    def _reap(process: subprocess.Popen[bytes]) -> int:
        while True:
            try:
                return process.wait()
            except InterruptedError:
                continue


__all__ = ["BridgeError", "BridgeState", "ParserProcess", "split_command"]
