"""
mdtangle: literate tangling for Markdown documents.

A document mixes prose with quoted, annotated code blocks. `> File` blocks
are written to disk and `> Run` blocks are executed by the shell, in
document order.

CLI Usage:
    mdtangle BOOTSTRAP.md
    mdtangle --preview BOOTSTRAP.md

Library Usage:
    from pathlib import Path
    from mdtangle import TangleConfig, tangle_text

    text = Path("BOOTSTRAP.md").read_text()
    report = tangle_text(text, TangleConfig(execute=False))
"""

from .config import TangleConfig
from .exceptions import (
    MalformedSourceError,
    MissingHeaderParameterError,
    RunFailedError,
    SinkError,
    TangleError,
    UnterminatedFenceError,
    UnterminatedRangeError,
)
from .executor import CommandExecutor
from .models import ParserState, SourceLine, TangleReport
from .scissors import extract_ranges, program_lines
from .sink import FileSink
from .tangler import Tangler, step, tangle_file, tangle_text

__version__ = "0.0.1"

__all__ = [
    # Core functionality
    "tangle_text",
    "tangle_file",
    "step",
    "Tangler",
    "extract_ranges",
    "program_lines",
    # Collaborators
    "FileSink",
    "CommandExecutor",
    # Data models
    "ParserState",
    "SourceLine",
    "TangleReport",
    "TangleConfig",
    # Exceptions
    "TangleError",
    "MalformedSourceError",
    "MissingHeaderParameterError",
    "UnterminatedRangeError",
    "UnterminatedFenceError",
    "RunFailedError",
    "SinkError",
    # Version
    "__version__",
]
