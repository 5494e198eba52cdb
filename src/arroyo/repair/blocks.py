"""Line classification for the repairer.

Splits a line into its container prefix (blockquote markers, list marker or
indentation) and content, and recognizes the block-level lines that open or
close a repairable container.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from arroyo.extensions.builtins.mdx import parse_open_tag
from arroyo.lexer.lines import ListMarker, is_thematic_break, list_marker

_QUOTE_PREFIX = re.compile(r"(?:[ \t]{0,3}>[ \t]?)*")
_HEADING_MARKER = re.compile(r"#{1,6}(?:[ \t]+|$)")
_MDX_LINE = re.compile(r"</?[A-Z]")
_MDX_CLOSE = re.compile(r"</([A-Z][A-Za-z0-9]*)[ \t]*>")
_DL_TERM = re.compile(r"[ \t]*:[^:\n]*[^:\s][^:\n]*")

ALIGN_CLOSERS = {"[center]": "[/center]", "[right]": "[/right]"}


@dataclass(frozen=True, slots=True)
class LineParts:
    """A line split into its container prefix and content.

    Attributes:
        quote: Leading blockquote markers.
        rest: The line after ``quote``.
        content: Block content after indentation or a list marker.
        prefix: What a line continuing this container starts with.
        marker: The list marker, if the line starts a list item.

    """

    quote: str
    rest: str
    content: str
    prefix: str
    marker: ListMarker | None


def split_line(line: str) -> LineParts:
    quote = line[: _QUOTE_PREFIX.match(line).end()]  # type: ignore[union-attr]
    rest = line[len(quote) :]
    marker = None if is_thematic_break(rest) else list_marker(rest)
    if marker is not None:
        content = marker.content
        prefix = quote + " " * marker.content_offset
    else:
        content = rest.lstrip(" \t")
        prefix = line[: len(line) - len(content)]
    return LineParts(quote=quote, rest=rest, content=content, prefix=prefix, marker=marker)


def strip_quote(line: str) -> str:
    return line[_QUOTE_PREFIX.match(line).end() :]  # type: ignore[union-attr]


def heading_text_offset(content: str) -> int | None:
    """Offset of the heading text in an ATX heading line's content."""
    match = _HEADING_MARKER.match(content)
    return None if match is None else match.end()


def is_dl_term(line: str) -> bool:
    """A ``:term`` line still waiting for its closing colon."""
    return _DL_TERM.fullmatch(line) is not None


def mdx_tags(content: str) -> tuple[list[tuple[str, bool]], int] | None:
    """Component tags on a line that starts with one.

    Returns ``(name, opening)`` pairs in order, skipping self-closing tags,
    and the offset just past the last tag; or None when the line does not
    start with a complete component tag.
    """
    if _MDX_LINE.match(content) is None:
        return None
    tags: list[tuple[str, bool]] = []
    pos = tail = 0
    while (pos := content.find("<", pos)) != -1:
        closing = _MDX_CLOSE.match(content, pos)
        if closing is not None:
            tags.append((closing.group(1), False))
            pos = tail = closing.end()
            continue
        tag = parse_open_tag(content, pos)
        if tag is None:
            if pos == 0:
                return None
            pos += 1
            continue
        name, _, end, self_closing = tag
        if not self_closing:
            tags.append((name, True))
        pos = tail = end
    return tags, tail
