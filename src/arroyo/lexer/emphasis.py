"""Emphasis and strong emphasis.

A forward-only version of the CommonMark delimiter algorithm: starting at an
opening ``*``/``_`` run, scan ahead counting delimiter runs until one closes
everything that has been opened since. The opener's own preceding character
is never inspected (rules may not look behind), so the text rule takes care
of intraword underscores by not stopping at them.

A scan that finds no closer is remembered in the sequence's ScanMemo, so
unclosed openers later in the paragraph give up as soon as they reach a
run that scan already visited.

See: https://spec.commonmark.org/0.31.2/#emphasis-and-strong-emphasis
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arroyo.lexer.flanking import Flanking, classify_run, run_length
from arroyo.tokens import Em, Strong

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer


def skip_code_span(src: str, pos: int) -> int:
    """Offset past the code span starting at ``pos``, or past the backtick
    run when it has no matching closer."""
    length = run_length(src, pos, "`")
    search = pos + length
    while True:
        found = src.find("`" * length, search)
        if found == -1:
            return pos + length
        end = found + run_length(src, found, "`")
        if end - found == length:
            return end
        search = end


def _weights(length: int, flank: Flanking) -> tuple[int, int, int]:
    """Balance change of a run for openers of length 0, 1 and 2 (mod 3)."""
    if flank.can_open and not flank.can_close:
        return (length, length, length)
    if not flank.can_close:
        return (0, 0, 0)
    if flank.can_open:
        # Rule of 3: a both-flanking run can't close when the lengths sum to a multiple of 3
        return (-length, -length if (1 + length) % 3 else 0, -length if (2 + length) % 3 else 0)
    return (-length, -length, -length)


def emphasis(src: str, lexer: Lexer) -> Em | Strong | None:
    char = src[0]
    if char not in "*_":
        return None

    open_len = run_length(src, 0, char)
    after = src[open_len : open_len + 1]
    if not classify_run("", after, char).can_open:
        return None

    memo, offset = lexer.scan_memo(src, ("emphasis", char)) or (None, 0)
    visits: list[tuple[int, tuple[int, ...]]] = []
    cls = open_len % 3
    delim_total = open_len
    mid_total = 0
    i = open_len
    n = len(src)
    while i < n:
        c = src[i]
        if c == "\\":
            i += 2
            continue
        if c == "`":
            i = skip_code_span(src, i)
            continue
        if c != char:
            i += 1
            continue

        if memo is not None:
            floor = memo.floor(offset + i)
            if floor is not None and delim_total + floor[cls] > 0:
                memo.record(visits, floor)
                return None

        length = run_length(src, i, char)
        flank = classify_run(src[i - 1], src[i + length : i + length + 1], char)
        weights = _weights(length, flank)
        visits.append((offset + i, weights))
        if weights[cls] >= 0:
            if weights[cls] == 0 and flank.can_close:
                mid_total += length
            delim_total += weights[cls]
            i += length
            continue

        delim_total -= length
        if delim_total > 0:
            i += length
            continue

        close_len = min(length, length + delim_total + mid_total)
        raw = src[: i + close_len]
        if min(open_len, close_len) % 2:
            text = raw[1:-1]
            return Em(raw=raw, text=text, children=tuple(lexer.inline_tokens(text)))
        text = raw[2:-2]
        return Strong(raw=raw, text=text, children=tuple(lexer.inline_tokens(text)))

    if memo is not None:
        memo.record(visits)
    return None
