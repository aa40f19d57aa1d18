"""Execution and preview of ``> Run`` blocks."""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import click

from .exceptions import RunFailedError
from .models import SourceLine

logger = logging.getLogger(__name__)

# Conventional shell status for a command that cannot be found.
COMMAND_NOT_FOUND_STATUS = 127


class CommandExecutor:
    """Run buffered command blocks through the host shell, or preview them.

    Args:
        execute: Run commands when True; otherwise only render them.
        cwd: Working directory for child processes. Defaults to the current one.
        shell: Shell executable; None uses the platform default (``/bin/sh``).
        indent: Prefix for each rendered line in preview mode.
        echo: Callback receiving each rendered preview line.

    Examples:
        executor = CommandExecutor(execute=False)
        executor.flush([SourceLine(4, "make")], start_line=3, end_line=5)
    """

    def __init__(
        self,
        execute: bool = True,
        cwd: Path | None = None,
        shell: str | None = None,
        indent: str = "    ",
        echo: Callable[[str], None] | None = None,
    ):
        self.execute_enabled = execute
        self.cwd = cwd
        self.shell = shell
        self.indent = indent
        self.echo = echo if echo is not None else click.echo

    def flush(self, lines: Sequence[SourceLine], start_line: int, end_line: int) -> int:
        """Execute or preview a run block depending on the mode flag."""
        if self.execute_enabled:
            return self.execute(lines, start_line, end_line)
        return self.preview(lines)

    def preview(self, lines: Sequence[SourceLine]) -> int:
        """Render each buffered line with the preview indentation.

        Returns:
            int: Always 0; nothing is executed.
        """
        for line in lines:
            self.echo(f"{self.indent}{line.text}")
        return 0

    def execute(self, lines: Sequence[SourceLine], start_line: int, end_line: int) -> int:
        """Run the whole block as a single shell command line.

        The child inherits standard input, output, and error.

        Args:
            lines: Buffered command lines.
            start_line: Line number of the opening fence.
            end_line: Line number of the closing fence.

        Returns:
            int: The child's exit status, which is always 0 on return.

        Raises:
            RunFailedError: If the command exits with a nonzero status or the
                shell cannot be started.
        """
        body = "\n".join(line.text for line in lines)
        logger.info("Running lines %d-%d", start_line, end_line)

        # Keep our own buffered output ahead of the child's.
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            completed = subprocess.run(
                body, shell=True, cwd=self.cwd, executable=self.shell, check=False
            )
        except OSError as error:
            logger.error("Could not start shell: %s", error)
            raise RunFailedError(COMMAND_NOT_FOUND_STATUS, start_line, end_line, lines) from error

        status = completed.returncode
        if status != 0:
            # Killed by a signal; report it the way shells do.
            if status < 0:
                status = 128 - status
            raise RunFailedError(status, start_line, end_line, lines)

        logger.debug("Lines %d-%d finished", start_line, end_line)
        return status
