"""Line-level classifiers for block structure.

Pure functions over a single line (without its terminator). The block
grammar, the list and table rules, and the incomplete-markdown repairer all
classify lines the same way through these helpers.

Thread Safety:
All functions are pure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from arroyo.lexer.charsets import BULLET_MARKERS, DIGITS, FENCE_CHARS, THEMATIC_BREAK_CHARS

_ATX_HEADING = re.compile(r" {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
_HTML_BLOCK_START = re.compile(r" {0,3}<(?:!--|[?!]|/?[a-z][a-z0-9-]*(?:[\s/>]|$))")
_SETEXT_UNDERLINE = re.compile(r" {0,3}(=+|-+)[ \t]*$")
_TABLE_DELIMITER = re.compile(r" {0,3}\|?[ \t]*:?-+:?[ \t]*(?:\|[ \t]*:?-+:?[ \t]*)*\|?[ \t]*$")


def next_line(src: str, pos: int = 0) -> tuple[str, int]:
    """Return the line starting at ``pos`` and the offset just past it.

    The returned line excludes its ``\\n``; the offset includes it.
    """
    end = src.find("\n", pos)
    if end == -1:
        return src[pos:], len(src)
    return src[pos:end], end + 1


def indent_width(line: str) -> int:
    """Leading indentation in columns (tabs advance to the next multiple of 4)."""
    width = 0
    for char in line:
        if char == " ":
            width += 1
        elif char == "\t":
            width += 4 - (width % 4)
        else:
            break
    return width


def strip_indent(line: str, columns: int) -> str:
    """Remove up to ``columns`` columns of leading whitespace."""
    width = 0
    i = 0
    while i < len(line) and width < columns:
        if line[i] == " ":
            width += 1
        elif line[i] == "\t":
            width += 4 - (width % 4)
        else:
            break
        i += 1
    return line[i:]


def is_blank(line: str) -> bool:
    return not line.strip()


def is_thematic_break(line: str) -> bool:
    """Three or more of the same ``-``, ``_`` or ``*``, optionally spaced."""
    if indent_width(line) > 3:
        return False
    content = line.strip()
    if not content or content[0] not in THEMATIC_BREAK_CHARS:
        return False
    char = content[0]
    count = 0
    for c in content:
        if c == char:
            count += 1
        elif c not in " \t":
            return False
    return count >= 3


@dataclass(frozen=True, slots=True)
class Fence:
    """An opening code fence line."""

    indent: int
    char: str
    length: int
    info: str

    def closes(self, line: str) -> bool:
        """True when ``line`` is a closing fence for this opener."""
        if indent_width(line) > 3:
            return False
        content = line.strip()
        if len(content) < self.length or content[0] != self.char:
            return False
        return content == self.char * len(content)

    @property
    def marker(self) -> str:
        return self.char * self.length


def fence_opener(line: str) -> Fence | None:
    """Classify a line as a fence opener (```` ``` ```` or ``~~~``)."""
    indent = indent_width(line)
    if indent > 3:
        return None
    content = line.lstrip(" ")
    if not content or content[0] not in FENCE_CHARS:
        return None
    char = content[0]
    length = len(content) - len(content.lstrip(char))
    if length < 3:
        return None
    info = content[length:].strip()
    if char == "`" and "`" in info:
        return None
    return Fence(indent=indent, char=char, length=length, info=info)


def atx_heading(line: str) -> tuple[int, str] | None:
    """Return ``(depth, content)`` for an ATX heading line."""
    match = _ATX_HEADING.match(line)
    if match is None:
        return None
    return len(match.group(1)), (match.group(2) or "").strip()


def setext_depth(line: str) -> int | None:
    """Heading depth for a setext underline (``===`` -> 1, ``---`` -> 2)."""
    match = _SETEXT_UNDERLINE.match(line)
    if match is None:
        return None
    return 1 if match.group(1)[0] == "=" else 2


def is_blockquote_start(line: str) -> bool:
    return indent_width(line) <= 3 and line.lstrip(" ").startswith(">")


def is_html_block_start(line: str) -> bool:
    """Lowercase HTML tags, comments and declarations start raw HTML blocks.

    Capitalized tags are left to the MDX rule.
    """
    return _HTML_BLOCK_START.match(line) is not None


def is_table_delimiter_row(line: str) -> bool:
    """``|---|:--:|`` style row; needs a pipe unless it is a lone column."""
    if _TABLE_DELIMITER.match(line) is None:
        return False
    return "|" in line or ":" in line


@dataclass(frozen=True, slots=True)
class ListMarker:
    """A list item marker at the start of a line.

    Attributes:
        indent: Columns before the marker.
        ordinal: Marker text without its delimiter (``"3"``, ``"b"``,
            ``"iv"``), or the bullet character.
        delimiter: ``.`` or ``)`` for ordered markers, empty for bullets.
        content_offset: Column where item content starts.
        content: Rest of the line after the marker and its spacing.

    """

    indent: int
    ordinal: str
    delimiter: str
    content_offset: int
    content: str

    @property
    def ordered(self) -> bool:
        return bool(self.delimiter)

    def same_family(self, other: ListMarker) -> bool:
        """Bullets continue a list only with the same character, ordered
        markers only with the same delimiter."""
        if self.ordered != other.ordered:
            return False
        if self.ordered:
            return self.delimiter == other.delimiter
        return self.ordinal == other.ordinal


_ROMAN = re.compile(r"M{0,3}(?:CM|CD|D?C{0,3})(?:XC|XL|L?X{0,3})(?:IX|IV|V?I{0,3})")


def is_roman(text: str) -> bool:
    """Non-empty, single-case, well-formed roman numeral."""
    if not text or not (text.isupper() or text.islower()):
        return False
    return _ROMAN.fullmatch(text.upper()) is not None


def list_marker(line: str) -> ListMarker | None:
    """Classify the start of ``line`` as a list marker."""
    indent = indent_width(line)
    if indent > 3:
        return None
    body = line.lstrip(" ")
    if not body:
        return None

    if body[0] in BULLET_MARKERS:
        ordinal, delimiter, end = body[0], "", 1
    else:
        end = 0
        if body[0] in DIGITS:
            while end < len(body) and body[end] in DIGITS:
                end += 1
            if end > 9:
                return None
        else:
            while end < len(body) and body[end].isascii() and body[end].isalpha():
                end += 1
            if end == 0 or (end > 1 and not is_roman(body[:end])):
                return None
        if end >= len(body) or body[end] not in ".)":
            return None
        ordinal, delimiter, end = body[:end], body[end], end + 1

    rest = body[end:]
    if rest and rest[0] not in " \t":
        return None
    spacing = indent_width(rest)
    if not rest.strip():
        spacing, content = 1, ""
    elif spacing > 4:
        # Content indented like code: the marker takes a single space
        spacing, content = 1, rest[1:]
    else:
        content = rest.lstrip(" \t")
    return ListMarker(
        indent=indent,
        ordinal=ordinal,
        delimiter=delimiter,
        content_offset=indent + end + spacing,
        content=content,
    )


def can_interrupt_paragraph(line: str) -> bool:
    """Baseline constructs that end a paragraph without a blank line."""
    if fence_opener(line) is not None:
        return True
    if atx_heading(line) is not None:
        return True
    if is_blockquote_start(line) or is_thematic_break(line) or is_html_block_start(line):
        return True
    marker = list_marker(line)
    if marker is None or not marker.content:
        return False
    return not marker.ordered or marker.ordinal == "1"
