"""Inline citations: ``[1]``, ``[1] [2]``, ``[smith2020; doe2021]``.

A run of bracket groups separated by spaces becomes one token holding every
key in first-occurrence order. Groups are split on commas, semicolons and
whitespace.

Brackets that belong to other constructs are left alone:
- ``[text](url)``: the group directly before ``(`` is a link.
- ``[text][ref]`` and ``[ref]: url``: reference link syntax.
- ``[ ]`` / ``[x]``: task list markers.
- ``[^1]`` / ``[!NOTE]``: footnotes and alerts.
- ``[center]`` / ``[/right]``: unmatched alignment tags stay literal.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.tokens import Citation

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

_KEY_SEPARATORS = re.compile(r"[\s,;]+")
_GROUP = re.compile(r"\[([^\[\]\n]*)\]")
_TASK_MARKERS = frozenset({"", "x", "X"})
_RESERVED = frozenset({"center", "right", "/center", "/right"})


def _is_citation_group(inner: str) -> bool:
    stripped = inner.strip()
    if stripped in _TASK_MARKERS or stripped in _RESERVED:
        return False
    return not inner.startswith(("^", "!")) and "\n" not in inner


def tokenize_citations(src: str, lexer: Lexer) -> Citation | None:
    if src[0] != "[":
        return None

    groups: list[tuple[int, str]] = []
    pos = 0
    end = 0
    while (match := _GROUP.match(src, pos)) is not None:
        inner = match.group(1)
        if not _is_citation_group(inner):
            break
        end = match.end()
        groups.append((end, inner))
        pos = end
        while pos < len(src) and src[pos] in " \t":
            pos += 1
        if pos == end:
            # Groups must be separated by whitespace
            break

    if not groups:
        return None
    following = src[end : end + 1]
    if following in ("[", ":") and len(groups) == 1:
        return None
    if following == "(":
        # The last group is link text
        groups.pop()
        if not groups:
            return None
        end = groups[-1][0]

    keys: list[str] = []
    for _, inner in groups:
        for key in _KEY_SEPARATORS.split(inner):
            if key and key not in keys:
                keys.append(key)
    if not keys:
        return None

    raw = src[:end]
    return Citation(raw=raw, keys=tuple(keys), text=raw)


CITATIONS = Extension("citations", Level.INLINE, tokenize_citations, start_chars=frozenset("["))
