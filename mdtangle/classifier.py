"""Classification of document lines against the annotation grammar."""

from __future__ import annotations

from .constants import (
    BLOCKQUOTE_MARKER,
    FENCE_PATTERN,
    FILE_HEADER_PATTERN,
    FILE_NAME_PATTERN,
    RUN_HEADER,
)
from .exceptions import MissingHeaderParameterError
from .models import Classification, LineKind, ParserState, SourceLine

_UNQUOTED = Classification(LineKind.UNQUOTED)
_FENCE = Classification(LineKind.FENCE_TOGGLE)
_MALFORMED = Classification(LineKind.MALFORMED_QUOTE)
_RUN = Classification(LineKind.RUN_DECLARE)


def strip_quote(text: str) -> str:
    """Remove the blockquote marker and at most one following space.

    Examples:
        strip_quote("> echo hi")  # "echo hi"
        strip_quote(">")  # ""
        strip_quote(">  indented")  # " indented"
    """
    content = text[len(BLOCKQUOTE_MARKER) :]
    if content.startswith(" "):
        content = content[1:]
    return content


def is_fence(text: str) -> bool:
    """Check for a quoted fence of exactly three backticks.

    Examples:
        is_fence("> ```bash")  # True
        is_fence("> ````")  # False
    """
    return FENCE_PATTERN.match(text) is not None


def _classify_header(line: SourceLine) -> Classification | None:
    header_match = FILE_HEADER_PATTERN.match(line.text)
    if not header_match:
        return None

    name_match = FILE_NAME_PATTERN.search(header_match.group("rest") or "")
    if not name_match:
        raise MissingHeaderParameterError(line.number)

    kind = LineKind.FILE_CONTINUE if header_match.group("continued") else LineKind.FILE_OPEN
    return Classification(kind, name=name_match.group("name"))


def classify_line(
    line: SourceLine, state: ParserState, strict_quotes: bool = True
) -> Classification:
    """Decide which annotation pattern a line matches.

    Inside an open fence every quoted line is content except a closing fence,
    and an unquoted line is malformed.
    Outside a fence, headers and opening fences are recognized; any other
    quoted line is malformed when a file or run declaration is pending. A
    stray quoted line with no pending declaration is malformed under
    `strict_quotes` and otherwise treated like an unquoted line.

    Args:
        line: Line to classify.
        state: Current parser state.
        strict_quotes: Reject stray quoted lines outside any context.

    Returns:
        Classification: Exactly one classification for the line.

    Raises:
        MissingHeaderParameterError: If a `File` header carries no name.

    Examples:
        classify_line(SourceLine(1, "> Run"), ParserState())
    """
    text = line.text
    if not text.startswith(BLOCKQUOTE_MARKER):
        # A fenced block cannot be interrupted by an unquoted line.
        return _MALFORMED if state.in_fence else _UNQUOTED

    if is_fence(text):
        return _FENCE

    if state.in_fence:
        return Classification(LineKind.QUOTED_CONTENT, text=strip_quote(text))

    header = _classify_header(line)
    if header is not None:
        return header

    if text == RUN_HEADER:
        return _RUN

    if state.has_context or strict_quotes:
        return _MALFORMED

    return _UNQUOTED
