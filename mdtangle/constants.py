"""Constants used across the mdtangle package."""

from __future__ import annotations

import re

from .config import TangleConfig

DEFAULT_CONFIG = TangleConfig()

# Annotation grammar
BLOCKQUOTE_MARKER = ">"
FILE_HEADER_PATTERN = re.compile(r"^> File(?: (?P<rest>.*?))?(?P<continued> continued)?$")
FILE_NAME_PATTERN = re.compile(r"`(?P<name>[^`]+)`")
RUN_HEADER = "> Run"
# Exactly three backticks; a fourth backtick makes the line ordinary content.
FENCE_PATTERN = re.compile(r"^> ```(?!`)(?P<info>.*)$")

# Scissor markers
SCISSOR_START_GLYPH = "8<"
SCISSOR_END_GLYPH = ">8"
DEFAULT_SCISSOR_DASHES = DEFAULT_CONFIG.scissor_dashes

DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
