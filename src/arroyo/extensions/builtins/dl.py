"""Description lists: contiguous lines of ``:term:detail``.

    :Speed: 120 km/h
    :Range: **450 km**

The run of matching lines becomes one token; each line is split into a
term and a detail, both tokenized as inline content.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.lexer.lines import next_line
from arroyo.tokens import Description, DescriptionList

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

_LINE = re.compile(r"[ \t]*:([^:\n]+):[ \t]?(.*)")


def tokenize_description_list(src: str, lexer: Lexer) -> DescriptionList | None:
    items: list[Description] = []
    pos = 0
    while pos < len(src):
        line, nxt = next_line(src, pos)
        match = _LINE.fullmatch(line)
        if match is None or not match.group(1).strip():
            break
        term = match.group(1).strip()
        detail = match.group(2).strip()
        items.append(
            Description(
                raw=src[pos:nxt],
                term=term,
                detail=detail,
                term_children=tuple(lexer.inline_tokens(term)),
                detail_children=tuple(lexer.inline_tokens(detail)),
            )
        )
        pos = nxt

    if not items:
        return None
    return DescriptionList(raw=src[:pos], items=tuple(items))


DESCRIPTION_LIST = Extension(
    "dl",
    Level.BLOCK,
    tokenize_description_list,
    start_chars=frozenset(" \t:"),
)
