"""Subscript ``H~2~O`` and superscript ``x^2^``.

Content may not start or end with whitespace, may not contain the marker or
a newline, and is tokenized as inline content. ``~~`` is left to
strikethrough.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.tokens import Sub, Sup

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer


def _span(src: str, marker: str) -> tuple[str, str] | None:
    if len(src) < 3 or src[0] != marker or src[1] == marker or src[1].isspace():
        return None
    close = 1
    while close < len(src):
        c = src[close]
        if c == marker:
            break
        if c == "\n":
            return None
        close += 1
    else:
        return None
    text = src[1:close]
    if text[-1].isspace():
        return None
    return src[: close + 1], text


def tokenize_sub(src: str, lexer: Lexer) -> Sub | None:
    span = _span(src, "~")
    if span is None:
        return None
    raw, text = span
    return Sub(raw=raw, text=text, children=tuple(lexer.inline_tokens(text)))


def tokenize_sup(src: str, lexer: Lexer) -> Sup | None:
    span = _span(src, "^")
    if span is None:
        return None
    raw, text = span
    return Sup(raw=raw, text=text, children=tuple(lexer.inline_tokens(text)))


SUB = Extension("sub", Level.INLINE, tokenize_sub, start_chars=frozenset("~"))
SUP = Extension("sup", Level.INLINE, tokenize_sup, start_chars=frozenset("^"))
