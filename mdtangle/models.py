"""Data models for mdtangle."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto


@dataclass(frozen=True)
class SourceLine:
    """One line of input.

    Attributes:
        number: One-based position of the line in the original document.
        text: Line content without its line terminator.
    """

    number: int
    text: str


class LineKind(Enum):
    """Classifications produced for a single input line.

    Attributes:
        FILE_OPEN: ``> File `name``` header starting a fresh output file.
        FILE_CONTINUE: ``> File `name` continued`` header appending to a file.
        RUN_DECLARE: ``> Run`` header.
        FENCE_TOGGLE: Quoted fence of exactly three backticks.
        QUOTED_CONTENT: Quoted line carrying content text.
        UNQUOTED: Line outside any blockquote; ends the current block.
        MALFORMED_QUOTE: Quoted line that makes no sense in the current state.
    """

    FILE_OPEN = auto()
    FILE_CONTINUE = auto()
    RUN_DECLARE = auto()
    FENCE_TOGGLE = auto()
    QUOTED_CONTENT = auto()
    UNQUOTED = auto()
    MALFORMED_QUOTE = auto()


@dataclass(frozen=True)
class Classification:
    """Result of classifying one line.

    Attributes:
        kind: Matched line kind.
        name: Output file name for `FILE_OPEN` and `FILE_CONTINUE`.
        text: Stripped content for `QUOTED_CONTENT`.
    """

    kind: LineKind
    name: str | None = None
    text: str | None = None


class RunState(Enum):
    """Progress of a run declaration.

    Attributes:
        NONE: No ``> Run`` header is pending.
        DECLARED: A header was seen; no content buffered for the current fence.
        COLLECTING: Content lines are being buffered.
    """

    NONE = auto()
    DECLARED = auto()
    COLLECTING = auto()


@dataclass(frozen=True)
class ParserState:
    """Explicit state threaded through the tangle step function.

    Attributes:
        target_file: Output file named by the pending `File` header, if any.
        append_mode: Whether the pending header carried the ``continued`` suffix.
        run_state: Progress of the pending ``> Run`` declaration.
        fence_open_at: Line number of the opening fence while inside a fence.
        run_buffer: Lines collected for the run block being read.
    """

    target_file: str | None = None
    append_mode: bool = False
    run_state: RunState = RunState.NONE
    fence_open_at: int | None = None
    run_buffer: tuple[SourceLine, ...] = field(default_factory=tuple)

    @property
    def in_fence(self) -> bool:
        return self.fence_open_at is not None

    @property
    def has_context(self) -> bool:
        """True when a file or run declaration is pending."""
        return self.target_file is not None or self.run_state is not RunState.NONE

    def reset(self) -> ParserState:
        """Return the zero state, leaving the fence fields untouched."""
        return replace(
            self,
            target_file=None,
            append_mode=False,
            run_state=RunState.NONE,
            run_buffer=(),
        )


@dataclass(frozen=True)
class WriteLine:
    """Request to append one line to an output file."""

    target: str
    text: str
    append: bool


@dataclass(frozen=True)
class CloseFile:
    """Request to release the handle of an output file."""

    target: str


@dataclass(frozen=True)
class RunCommand:
    """Request to flush a buffered run block.

    Attributes:
        lines: Buffered command lines with original line numbers.
        start_line: Line number of the opening fence.
        end_line: Line number of the closing fence.
    """

    lines: tuple[SourceLine, ...]
    start_line: int
    end_line: int


Effect = WriteLine | CloseFile | RunCommand


@dataclass
class TangleReport:
    """Summary of one tangle pass.

    Attributes:
        files: Output file names written, in first-write order.
        commands: Number of run blocks flushed (executed or previewed).
        lines: Number of program lines processed.
    """

    files: list[str] = field(default_factory=list)
    commands: int = 0
    lines: int = 0
