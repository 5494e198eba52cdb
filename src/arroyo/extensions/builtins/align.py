"""Alignment blocks.

    [center]
    Any block content, re-tokenized.
    [/center]

``[right]`` works the same way. The closing tag is the first one found
(non-greedy); an opener without a closer is not matched and falls through to
the paragraph rule as literal text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from arroyo.extensions.protocol import Extension, Level
from arroyo.tokens import Align

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

type Alignment = Literal["center", "right"]

_ALIGNMENTS: tuple[Alignment, ...] = ("center", "right")


def _find_block(src: str) -> tuple[Alignment, int, int] | None:
    """Alignment, body start and closer offset of the block at ``src``."""
    for align in _ALIGNMENTS:
        opener = f"[{align}]\n"
        if not src.startswith(opener):
            continue
        # The opener's newline may double as the closer's for an empty block
        close = src.find(f"\n[/{align}]", len(opener) - 1)
        if close == -1:
            return None
        return align, len(opener), close
    return None


def starts_align(src: str, lexer: Lexer) -> bool:
    return _find_block(src) is not None


def tokenize_align(src: str, lexer: Lexer) -> Align | None:
    block = _find_block(src)
    if block is None:
        return None
    align, body, close = block
    text = src[body:close] if close >= body else ""
    return Align(
        raw=src[: close + len(align) + 4],
        align=align,
        text=text,
        children=tuple(lexer.block_tokens(text)),
    )


ALIGN = Extension(
    "align",
    Level.BLOCK,
    tokenize_align,
    start_chars=frozenset("["),
    interrupts_paragraph=True,
    interrupt_test=starts_align,
)
