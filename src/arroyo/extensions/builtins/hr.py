"""Horizontal rule: a full line of three or more ``-``, ``_`` or ``*``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.lexer.lines import is_thematic_break, next_line
from arroyo.tokens import Hr

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer


def tokenize_hr(src: str, lexer: Lexer) -> Hr | None:
    line, end = next_line(src)
    if not is_thematic_break(line):
        return None
    # The line terminator belongs to the rule
    return Hr(raw=src[:end])


HR = Extension("hr", Level.BLOCK, tokenize_hr, start_chars=frozenset(" -_*"))
