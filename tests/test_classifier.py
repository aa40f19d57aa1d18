from __future__ import annotations

import pytest

from mdtangle.classifier import classify_line, is_fence, strip_quote
from mdtangle.exceptions import MissingHeaderParameterError
from mdtangle.models import Classification, LineKind, ParserState, RunState, SourceLine

OUTSIDE = ParserState()
IN_FENCE = ParserState(target_file="out.txt", fence_open_at=1)
FILE_PENDING = ParserState(target_file="out.txt")
RUN_PENDING = ParserState(run_state=RunState.DECLARED)


def _classify(text: str, state: ParserState = OUTSIDE, strict_quotes: bool = True):
    return classify_line(SourceLine(7, text), state, strict_quotes)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("> echo hi", "echo hi"),
        (">echo hi", "echo hi"),
        (">  two spaces", " two spaces"),
        (">", ""),
        ("> ", ""),
    ],
)
def test_strip_quote_removes_marker_and_one_space(text: str, expected: str):
    assert strip_quote(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("> ```", True),
        ("> ```bash", True),
        ("> ``` python extra", True),
        ("> ``", False),
        ("> ````", False),
        ("> `````bash", False),
        (">```", False),
        ("```", False),
    ],
)
def test_is_fence_requires_exactly_three_backticks(text: str, expected: bool):
    assert is_fence(text) is expected


def test_file_header_opens_fresh_target():
    assert _classify("> File `src/main.py`") == Classification(
        LineKind.FILE_OPEN, name="src/main.py"
    )


def test_file_header_with_continued_suffix():
    assert _classify("> File `src/main.py` continued") == Classification(
        LineKind.FILE_CONTINUE, name="src/main.py"
    )


def test_file_header_uses_first_backtick_span():
    classification = _classify("> File `first` and `second`")

    assert classification.name == "first"


def test_continued_inside_backticks_is_part_of_the_name():
    classification = _classify("> File `notes continued`")

    assert classification == Classification(LineKind.FILE_OPEN, name="notes continued")


@pytest.mark.parametrize("text", ["> File", "> File name.txt", "> File `` continued"])
def test_file_header_without_name_is_rejected(text: str):
    with pytest.raises(MissingHeaderParameterError) as excinfo:
        _classify(text)

    assert excinfo.value.line_number == 7


def test_words_starting_with_file_are_not_headers():
    assert _classify("> Files", strict_quotes=False).kind is LineKind.UNQUOTED


def test_run_header_must_match_exactly():
    assert _classify("> Run").kind is LineKind.RUN_DECLARE
    assert _classify("> Run this", strict_quotes=False).kind is LineKind.UNQUOTED


@pytest.mark.parametrize("state", [OUTSIDE, FILE_PENDING, RUN_PENDING, IN_FENCE])
def test_fence_toggles_in_any_state(state: ParserState):
    assert _classify("> ```sh", state).kind is LineKind.FENCE_TOGGLE


def test_lines_inside_fence_are_content():
    assert _classify("> File `x`", IN_FENCE) == Classification(
        LineKind.QUOTED_CONTENT, text="File `x`"
    )
    assert _classify("> Run", IN_FENCE).text == "Run"
    assert _classify(">", IN_FENCE).text == ""
    assert _classify("> ````", IN_FENCE).text == "````"


def test_unquoted_line_outside_fence_resets():
    assert _classify("", FILE_PENDING).kind is LineKind.UNQUOTED
    assert _classify("Some prose", RUN_PENDING).kind is LineKind.UNQUOTED


def test_unquoted_line_inside_fence_is_malformed():
    assert _classify("", IN_FENCE).kind is LineKind.MALFORMED_QUOTE


@pytest.mark.parametrize("state", [FILE_PENDING, RUN_PENDING])
def test_quoted_line_after_header_is_malformed(state: ParserState):
    assert _classify("> stray", state, strict_quotes=False).kind is LineKind.MALFORMED_QUOTE


def test_stray_quote_outside_context_depends_on_strictness():
    assert _classify("> A remark").kind is LineKind.MALFORMED_QUOTE
    assert _classify("> A remark", strict_quotes=False).kind is LineKind.UNQUOTED
