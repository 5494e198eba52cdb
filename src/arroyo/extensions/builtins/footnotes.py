"""Footnote definitions and references.

    Streaming is fast[^perf].

    [^perf]: Measured on a laptop.
        Continuation lines are indented four spaces.

Tokens carry labels only. Linking references to definitions happens after
tokenization with arroyo.walk.collect_footnotes, so tokenizing never depends
on state left behind by an earlier pass.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.lexer.lines import indent_width, is_blank, next_line, strip_indent
from arroyo.tokens import FootnoteDefinition, FootnoteRef

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

_DEFINITION = re.compile(r"\[\^([^\]\n]+)\]:[ \t]*")
_REFERENCE = re.compile(r"\[\^([^\]\n]+)\]")


def tokenize_footnote_definition(src: str, lexer: Lexer) -> FootnoteDefinition | None:
    match = _DEFINITION.match(src)
    if match is None:
        return None

    first, end = next_line(src, match.end())
    lines = [first]
    pending: list[str] = []
    pos = end
    while pos < len(src):
        line, nxt = next_line(src, pos)
        if is_blank(line):
            pending.append("")
        elif indent_width(line) >= 4:
            lines.extend(pending)
            pending.clear()
            lines.append(strip_indent(line, 4))
            end = nxt
        else:
            break
        pos = nxt

    text = "\n".join(lines).strip()
    return FootnoteDefinition(
        raw=src[:end],
        label=match.group(1),
        text=text,
        children=tuple(lexer.block_tokens(text)),
    )


def starts_footnote_definition(src: str, lexer: Lexer) -> bool:
    return _DEFINITION.match(src) is not None


def tokenize_footnote_ref(src: str, lexer: Lexer) -> FootnoteRef | None:
    match = _REFERENCE.match(src)
    if match is None:
        return None
    return FootnoteRef(raw=match.group(0), label=match.group(1))


FOOTNOTE_DEFINITION = Extension(
    "footnote",
    Level.BLOCK,
    tokenize_footnote_definition,
    start_chars=frozenset("["),
    interrupts_paragraph=True,
    interrupt_test=starts_footnote_definition,
)
FOOTNOTE_REF = Extension("footnote_ref", Level.INLINE, tokenize_footnote_ref, start_chars=frozenset("["))
