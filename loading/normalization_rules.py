"""Pre-compiled regex patterns for whitespace normalization."""

from __future__ import annotations

import re

LINE_ENDING_PATTERN = re.compile(r"\r\n?")
MULTI_NEWLINE_PATTERN = re.compile(r"\n{3,}")

# Only ASCII space and tab count as horizontal whitespace. Ideographic space
# (U+3000) and NBSP inside the text are never touched.
LEADING_WHITESPACE_PATTERN = re.compile(r"^[ \t]+", re.MULTILINE)
TRAILING_WHITESPACE_PATTERN = re.compile(r"[ \t]+$", re.MULTILINE)
MULTI_SPACE_PATTERN = re.compile(r"[ \t]+")
