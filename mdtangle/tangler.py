"""Tangle state machine and its driver."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path

from .classifier import classify_line
from .config import TangleConfig, validate_config
from .exceptions import MalformedSourceError, RunFailedError, UnterminatedFenceError
from .executor import CommandExecutor
from .filesystem import read_document
from .models import (
    CloseFile,
    Effect,
    LineKind,
    ParserState,
    RunCommand,
    RunState,
    SourceLine,
    TangleReport,
    WriteLine,
)
from .scissors import program_lines
from .sink import FileSink

logger = logging.getLogger(__name__)


def _malformed_reason(state: ParserState, line: SourceLine) -> str:
    if state.in_fence:
        return f"unquoted line inside the fenced block opened at line {state.fence_open_at}"
    if state.target_file is not None:
        return f"expected a fence after the header for `{state.target_file}`, got {line.text!r}"
    if state.run_state is not RunState.NONE:
        return f"expected a fence after `> Run`, got {line.text!r}"
    return f"quoted line outside any File or Run block: {line.text!r}"


def _close_fence(state: ParserState, line: SourceLine) -> tuple[ParserState, list[Effect]]:
    effects: list[Effect] = []
    if state.run_buffer:
        effects.append(RunCommand(state.run_buffer, state.fence_open_at, line.number))
    if state.target_file is not None:
        effects.append(CloseFile(state.target_file))

    # The declaration outlives the fence so another fence can follow it.
    run_state = RunState.DECLARED if state.run_state is RunState.COLLECTING else state.run_state
    return replace(state, fence_open_at=None, run_buffer=(), run_state=run_state), effects


def _quoted_content(
    state: ParserState, line: SourceLine, text: str
) -> tuple[ParserState, list[Effect]]:
    if state.target_file is not None:
        return state, [WriteLine(state.target_file, text, state.append_mode)]

    if state.run_state is not RunState.NONE:
        buffered = (*state.run_buffer, SourceLine(line.number, text))
        return replace(state, run_state=RunState.COLLECTING, run_buffer=buffered), []

    # Fence without a header: shown in the document, never tangled.
    return state, []


def step(
    state: ParserState, line: SourceLine, strict_quotes: bool = True
) -> tuple[ParserState, list[Effect]]:
    """Apply one line to the parser state.

    Pure: returns the next state and the side effects to perform, in order.

    Args:
        state: State before the line.
        line: Line to process.
        strict_quotes: Reject stray quoted lines outside any context.

    Returns:
        tuple[ParserState, list[Effect]]: State after the line and the effects
            it requests.

    Raises:
        MalformedSourceError: If the line cannot be interpreted in `state`.

    Examples:
        state, effects = step(ParserState(), SourceLine(1, "> File `a.txt`"))
    """
    classification = classify_line(line, state, strict_quotes)
    kind = classification.kind

    if kind is LineKind.MALFORMED_QUOTE:
        raise MalformedSourceError(line.number, _malformed_reason(state, line))

    if kind is LineKind.UNQUOTED:
        return state.reset(), []

    if kind is LineKind.FILE_OPEN or kind is LineKind.FILE_CONTINUE:
        append = kind is LineKind.FILE_CONTINUE
        return replace(state.reset(), target_file=classification.name, append_mode=append), []

    if kind is LineKind.RUN_DECLARE:
        return replace(state.reset(), run_state=RunState.DECLARED), []

    if kind is LineKind.FENCE_TOGGLE:
        if state.in_fence:
            return _close_fence(state, line)
        return replace(state, fence_open_at=line.number), []

    return _quoted_content(state, line, classification.text)


def finish(state: ParserState) -> None:
    """Validate the state left at the end of the document.

    Raises:
        UnterminatedFenceError: If a fenced block is still open.
    """
    if state.in_fence:
        raise UnterminatedFenceError(state.fence_open_at)


class Tangler:
    """Drive the state machine over a program and dispatch its effects.

    Args:
        sink: Receives file writes and closes.
        executor: Receives run blocks as they close.
        strict_quotes: Reject stray quoted lines outside any context.

    Examples:
        tangler = Tangler(FileSink(), CommandExecutor(execute=False))
        report = tangler.tangle(program_lines(text))
    """

    def __init__(self, sink: FileSink, executor: CommandExecutor, strict_quotes: bool = True):
        self.sink = sink
        self.executor = executor
        self.strict_quotes = strict_quotes

    def dispatch(self, effect: Effect, report: TangleReport) -> None:
        if isinstance(effect, WriteLine):
            self.sink.write(effect.target, effect.text, append=effect.append)
        elif isinstance(effect, CloseFile):
            self.sink.close(effect.target)
        elif isinstance(effect, RunCommand):
            status = self.executor.flush(effect.lines, effect.start_line, effect.end_line)
            report.commands += 1
            if status != 0:
                raise RunFailedError(status, effect.start_line, effect.end_line, effect.lines)
        else:
            raise TypeError(f"Unknown effect: {effect!r}")

    def tangle(self, lines: Iterable[SourceLine]) -> TangleReport:
        """Process every line in one forward pass.

        Handles still open when the pass stops, normally or on error, are
        closed; files and commands already produced are left as they are.

        Raises:
            MalformedSourceError: If a line cannot be interpreted.
            RunFailedError: If a run block exits with a nonzero status.
            SinkError: If an output file cannot be written.
        """
        report = TangleReport()
        state = ParserState()
        try:
            for line in lines:
                state, effects = step(state, line, self.strict_quotes)
                for effect in effects:
                    self.dispatch(effect, report)
                report.lines += 1
            finish(state)
        finally:
            self.sink.close_all()

        report.files = list(self.sink.written)
        logger.debug(
            "Processed %d lines: %d files, %d run blocks",
            report.lines,
            len(report.files),
            report.commands,
        )
        return report


def tangle_text(
    text: str,
    config: TangleConfig | None = None,
    base_dir: Path | None = None,
    scissors: bool = True,
    echo: Callable[[str], None] | None = None,
) -> TangleReport:
    """Tangle a document held in memory.

    Scissor ranges are extracted first when present; otherwise the whole
    text is the program. With `config.execute` off, nothing is written and no
    command runs: run blocks are rendered through `echo`.

    Args:
        text: Full document text.
        config: Tangle configuration; defaults to a new `TangleConfig`.
        base_dir: Directory for output files and run blocks; defaults to the
            current working directory.
        scissors: Allow scissor extraction.
        echo: Callback for preview output.

    Returns:
        TangleReport: Summary of the pass.

    Raises:
        ConfigError: If the configuration fails validation.
        MalformedSourceError: If the document is malformed.
        RunFailedError: If a run block fails.
        SinkError: If an output file cannot be written.

    Examples:
        tangle_text(Path("README.md").read_text(), TangleConfig(execute=False))
    """
    config = config or TangleConfig()
    validate_config(config)

    sink = FileSink(base_dir, dry_run=not config.execute)
    executor = CommandExecutor(
        execute=config.execute,
        cwd=base_dir,
        shell=config.shell,
        indent=config.preview_indent,
        echo=echo,
    )
    lines = program_lines(text, config.scissor_dashes, scissors=scissors)
    return Tangler(sink, executor, strict_quotes=config.strict_quotes).tangle(lines)


def tangle_file(
    filepath: Path,
    config: TangleConfig | None = None,
    base_dir: Path | None = None,
    scissors: bool = True,
    echo: Callable[[str], None] | None = None,
) -> TangleReport:
    """Read a document from disk and tangle it.

    Raises:
        IOError: If the document cannot be read, decoded, or exceeds the
            configured size limit.
        MalformedSourceError: If the document is malformed.
        RunFailedError: If a run block fails.
        SinkError: If an output file cannot be written.
    """
    config = config or TangleConfig()
    text = read_document(filepath, config.max_file_size)
    logger.info("Tangling %s", filepath)
    return tangle_text(text, config, base_dir=base_dir, scissors=scissors, echo=echo)
