from __future__ import annotations

import pytest
from click.testing import CliRunner

from mdtangle.models import SourceLine


class RecordingExecutor:
    """Stands in for `CommandExecutor`, recording every flushed run block."""

    def __init__(self, status: int = 0):
        self.calls: list[tuple[list[str], int, int]] = []
        self.status = status

    def flush(self, lines: tuple[SourceLine, ...], start_line: int, end_line: int) -> int:
        self.calls.append(([line.text for line in lines], start_line, end_line))
        return self.status


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def recording_executor() -> RecordingExecutor:
    return RecordingExecutor()
