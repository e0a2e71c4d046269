"""Synchronous invocation of the resim command-line tool.

The tool keeps its ledger on disk, so every call here is a side effect
later calls observe. Calls block until the child exits; there is no
timeout and no retry.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping

from .errors import EncodingError, ExternalToolFailure, ToolNotFound
from .shared.logging import get_logger

logger = get_logger(__name__)


def split_command(command_line: str) -> list[str]:
    """Split a command line on whitespace.

    No quoting is supported; arguments cannot contain whitespace.
    """
    parts = command_line.split()
    if not parts:
        raise ValueError("Empty command line")
    return parts


class ProcessRunner:
    """Run external commands and return their stdout."""

    def __init__(self, cwd: str | os.PathLike[str] | None = None):
        """Initialize process runner.

        Args:
            cwd: Working directory for children (default: current directory)
        """
        self.cwd = cwd

    def run(self, command_line: str, env: Mapping[str, str] | None = None) -> str:
        """Run a command and return its stdout.

        Args:
            command_line: Executable and arguments separated by whitespace
            env: Variables layered over the parent environment, child only

        Returns:
            Captured stdout decoded as UTF-8

        Raises:
            ExternalToolFailure: On non-zero exit
            EncodingError: If stdout is not valid UTF-8
            ToolNotFound: If the executable does not exist
        """
        args = split_command(command_line)
        child_env = None
        if env is not None:
            child_env = {**os.environ, **env}

        logger.info("command_started", command=command_line, env=dict(env) if env else None)
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                env=child_env,
                cwd=self.cwd,
            )
        except FileNotFoundError as e:
            raise ToolNotFound(executable=args[0]) from e

        stderr = (result.stderr or b"").decode("utf-8", errors="replace")
        if result.returncode != 0:
            logger.error("command_failed", command=command_line, returncode=result.returncode)
            raise ExternalToolFailure(
                command=args,
                returncode=result.returncode,
                stdout=(result.stdout or b"").decode("utf-8", errors="replace"),
                stderr=stderr,
            )

        stdout = self._decode(args, result.stdout)
        logger.debug("command_output", command=command_line, stdout=stdout, stderr=stderr)
        return stdout

    def _decode(self, args: list[str], raw: bytes | None) -> str:
        try:
            return (raw or b"").decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(command=args, reason=str(e)) from e
