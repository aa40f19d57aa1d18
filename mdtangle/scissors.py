"""Scissor-marker range extraction.

A literate document can mark the part of itself that is the real program
with paired marker lines::

    ----------8<----------
    ...program text...
    ---------->8----------

Only the lines strictly between each start/end pair are kept. Documents
without markers are used whole.
"""

from __future__ import annotations

from .constants import DEFAULT_SCISSOR_DASHES, SCISSOR_END_GLYPH, SCISSOR_START_GLYPH
from .exceptions import UnterminatedRangeError
from .models import SourceLine


def split_lines(text: str) -> list[str]:
    """Split text on line terminators only.

    Form feeds, vertical tabs, and other characters `str.splitlines` treats as
    boundaries stay inside the line.

    Examples:
        split_lines("a\\fb\\r\\nc\\n")  # ["a\\fb", "c"]
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def scissor_markers(dashes: int = DEFAULT_SCISSOR_DASHES) -> tuple[str, str]:
    """Build the start and end marker lines for a dash count.

    Examples:
        scissor_markers(2)  # ("--8<--", "-->8--")
    """
    if dashes <= 0:
        raise ValueError("`dashes` must be a positive integer")
    run = "-" * dashes
    return f"{run}{SCISSOR_START_GLYPH}{run}", f"{run}{SCISSOR_END_GLYPH}{run}"


def find_ranges(lines: list[str], start_marker: str, end_marker: str) -> list[tuple[int, int]]:
    """Locate paired scissor markers.

    Markers must alternate strictly: start, end, start, end. A range may also be
    closed by repeating the start marker. Lines are compared after stripping
    trailing whitespace.

    Args:
        lines: Document lines without line terminators.
        start_marker: Line that opens a range.
        end_marker: Line that closes a range.

    Returns:
        list[tuple[int, int]]: Zero-based indices of each start and end marker.

    Raises:
        UnterminatedRangeError: If an end marker has no open range or the last
            range never ends.

    Examples:
        find_ranges(["a", "--8<--", "b", "-->8--"], "--8<--", "-->8--")  # [(1, 3)]
    """
    ranges: list[tuple[int, int]] = []
    open_at: int | None = None

    for index, line in enumerate(lines):
        stripped = line.rstrip()
        if open_at is not None and stripped in (start_marker, end_marker):
            ranges.append((open_at, index))
            open_at = None
        elif stripped == start_marker:
            open_at = index
        elif stripped == end_marker:
            raise UnterminatedRangeError(index + 1, "closing scissor marker without a start")

    if open_at is not None:
        raise UnterminatedRangeError(open_at + 1, "scissor range is never closed")

    return ranges


def extract_source_lines(
    text: str, dashes: int = DEFAULT_SCISSOR_DASHES
) -> list[SourceLine] | None:
    """Collect the lines inside all scissor ranges, keeping original numbering.

    Returns:
        list[SourceLine] | None: Lines strictly between markers, in document
            order, or None when the document has no markers.
    """
    lines = split_lines(text)
    ranges = find_ranges(lines, *scissor_markers(dashes))
    if not ranges:
        return None

    return [
        SourceLine(number=index + 1, text=lines[index])
        for start, end in ranges
        for index in range(start + 1, end)
    ]


def extract_ranges(text: str, dashes: int = DEFAULT_SCISSOR_DASHES) -> str | None:
    """Concatenate the text of all scissor ranges.

    Returns:
        str | None: Extracted program text with one newline per line, or None
            when no markers are present.

    Examples:
        extract_ranges("--8<--\\necho hi\\n-->8--\\n", dashes=2)  # "echo hi\\n"
    """
    extracted = extract_source_lines(text, dashes)
    if extracted is None:
        return None
    return "".join(f"{line.text}\n" for line in extracted)


def program_lines(
    text: str, dashes: int = DEFAULT_SCISSOR_DASHES, scissors: bool = True
) -> list[SourceLine]:
    """Return the effective program of a document.

    Args:
        text: Full document text.
        dashes: Dash count of the scissor markers.
        scissors: When False, skip extraction and use every line.

    Returns:
        list[SourceLine]: Scissor-extracted lines, or the whole document when no
            markers are present or extraction is disabled.
    """
    if scissors:
        extracted = extract_source_lines(text, dashes)
        if extracted is not None:
            return extracted
    return [SourceLine(number=index + 1, text=line) for index, line in enumerate(split_lines(text))]
