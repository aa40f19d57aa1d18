"""Package-specific exception types."""

from __future__ import annotations


class TangleError(Exception):
    """Base class for every error raised while tangling a document."""


class MalformedSourceError(TangleError, ValueError):
    """Raised when a document line cannot be interpreted.

    Args:
        line_number: One-based line number in the original document.
        reason: Short description of what is wrong with the line.
    """

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Line {self.line_number}: {self.reason}")


class MissingHeaderParameterError(MalformedSourceError):
    """Raised when a `File` header carries no backtick-delimited name."""

    def __init__(self, line_number: int):
        super().__init__(line_number, "file header has no `name` between backticks")


class UnterminatedRangeError(MalformedSourceError):
    """Raised when scissor markers do not pair up."""


class UnterminatedFenceError(MalformedSourceError):
    """Raised when the document ends inside a fenced block.

    Args:
        line_number: One-based line number of the opening fence.
    """

    def __init__(self, line_number: int):
        super().__init__(line_number, "fenced block is never closed")


class RunFailedError(TangleError):
    """Raised when a run block exits with a nonzero status.

    Args:
        status: Exit status of the child process.
        start_line: Line number of the opening fence.
        end_line: Line number of the closing fence.
        lines: Buffered command lines, with their original line numbers.
    """

    def __init__(self, status: int, start_line: int, end_line: int, lines):
        self.status = status
        self.start_line = start_line
        self.end_line = end_line
        self.lines = tuple(lines)
        super().__init__(
            f"Run block at lines {self.start_line}-{self.end_line} "
            f"failed with exit status {self.status}"
        )

    def report(self) -> list[str]:
        """Render the failure header followed by each numbered command line.

        Examples:
            for line in error.report():
                click.echo(line, err=True)
        """
        width = len(str(max((line.number for line in self.lines), default=self.end_line)))
        rendered = [f"{self}:"]
        rendered.extend(f"{line.number:>{width}}: {line.text}" for line in self.lines)
        return rendered


class SinkError(TangleError, OSError):
    """Raised when an output file cannot be opened, written, or closed."""
