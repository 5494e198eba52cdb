"""Math spans and blocks.

Inline: ``$...$`` (and ``$$...$$`` used inline, rendered as display math).
Block: ``$$`` on its own line, content, ``$$`` on its own line; or a line that
is entirely ``$$...$$``.

Single-dollar spans have to coexist with prices. A span is math only if
- its content does not start or end with whitespace,
- the closing ``$`` is not followed by a digit, and
- its content is not purely numeric. Digits, decimal points, thousands
  separators and range words (``-``, ``to``, ``or``, ``and``) alone read as
  amounts, so ``$5 to $10`` is never math.

This keeps ``$129`` / ``$169.99`` literal and never merges two amounts into
one span, while ``$E = mc^2$`` or ``$\\alpha$`` stay math.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.lexer.lines import next_line
from arroyo.tokens import Math, MathBlock

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

_AMOUNT = r"\d[\d,]*(?:\.\d+)?"
_NUMERIC_ONLY = re.compile(rf"{_AMOUNT}(?:\s*(?:-|to|or|and)\s*\$?{_AMOUNT}|\s+\$?{_AMOUNT})*")


def is_currency(text: str) -> bool:
    """True when span content reads as a price or price range."""
    return _NUMERIC_ONLY.fullmatch(text.strip()) is not None


def _find_closing_dollar(src: str, start: int) -> int | None:
    i = start
    while i < len(src):
        c = src[i]
        if c == "\n":
            return None
        if c == "\\" and src[i + 1 : i + 2] == "$":
            i += 2
            continue
        if c == "$":
            return i
        i += 1
    return None


def tokenize_inline_math(src: str, lexer: Lexer) -> Math | None:
    if src[0] != "$":
        return None

    if src.startswith("$$"):
        close = src.find("$$", 2)
        if close <= 2:
            return None
        text = src[2:close]
        if "\n" in text or "$" in text.replace("\\$", ""):
            return None
        return Math(raw=src[: close + 2], text=text.strip(), display=True)

    close = _find_closing_dollar(src, 1)
    if close is None or close == 1:
        return None
    text = src[1:close]
    if text[0].isspace() or text[-1].isspace():
        return None
    if src[close + 1 : close + 2].isdigit() or is_currency(text):
        return None
    return Math(raw=src[: close + 1], text=text)


def tokenize_math_block(src: str, lexer: Lexer) -> MathBlock | None:
    if not src.startswith("$$"):
        return None

    first, body_start = next_line(src)
    if first.strip() == "$$":
        pos = body_start
        while pos < len(src):
            line, nxt = next_line(src, pos)
            if line.strip() == "$$":
                return MathBlock(raw=src[:nxt], text=src[body_start:pos].rstrip("\n"))
            pos = nxt
        return None

    close = first.find("$$", 2)
    if close <= 2 or first[close + 2 :].strip():
        return None
    return MathBlock(raw=src[:body_start], text=first[2:close].strip())


MATH_BLOCK = Extension(
    "math_block",
    Level.BLOCK,
    tokenize_math_block,
    start_chars=frozenset("$"),
    interrupts_paragraph=True,
)
MATH_INLINE = Extension("math", Level.INLINE, tokenize_inline_math, start_chars=frozenset("$"))
