"""Bullet and ordered lists.

Ordered markers may be decimal (``1.``), alphabetic (``a)``, ``B.``) or roman
(``iv.``, ``XII)``). The first item fixes the list type; a single ``i``/``I``
starts a roman list, any other single letter an alphabetic one, and later
items are read in the list's type (so ``v.`` continues a roman list). Item
content is tokenized as blocks.

Attributes recorded on the tokens:
- ``ListItem.value``: the marker's ordinal
- ``ListItem.task`` / ``checked``: ``[ ]`` and ``[x]`` prefixes
- ``List.skipped``: ordinals are not consecutive
- ``loose``: blank lines between items or inside an item
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.lexer.lines import (
    ListMarker,
    indent_width,
    is_blank,
    is_roman,
    is_thematic_break,
    list_marker,
    next_line,
    strip_indent,
)
from arroyo.tokens import List, ListItem, ListType

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

_ROMAN_VALUES = {"i": 1, "v": 5, "x": 10, "l": 50, "c": 100, "d": 500, "m": 1000}
_TASK_PREFIXES = {"[ ]": False, "[x]": True, "[X]": True}


def roman_to_int(numeral: str) -> int:
    total = 0
    previous = 0
    for char in reversed(numeral.lower()):
        value = _ROMAN_VALUES[char]
        if value < previous:
            total -= value
        else:
            total += value
            previous = value
    return total


def list_type(marker: ListMarker) -> ListType:
    """Type of the list a marker starts."""
    ordinal = marker.ordinal
    if not marker.ordered:
        return "bullet"
    if ordinal.isdigit():
        return "decimal"
    if len(ordinal) > 1 or ordinal in ("i", "I"):
        return "lower-roman" if ordinal.islower() else "upper-roman"
    return "lower-alpha" if ordinal.islower() else "upper-alpha"


def ordinal_value(ordinal: str, kind: ListType) -> int | None:
    """Value of a marker read as ``kind``; None when it can't be one."""
    match kind:
        case "bullet":
            return None
        case "decimal":
            return int(ordinal) if ordinal.isdigit() else None
        case "lower-alpha" | "upper-alpha":
            if len(ordinal) != 1 or ordinal.islower() != (kind == "lower-alpha"):
                return None
            return ord(ordinal.lower()) - ord("a") + 1
        case _:
            if not is_roman(ordinal) or ordinal.islower() != (kind == "lower-roman"):
                return None
            return roman_to_int(ordinal)


@dataclass(slots=True)
class _ItemScan:
    end: int
    lines: list[str]
    loose: bool


def _scan_item(src: str, pos: int, marker: ListMarker, lexer: Lexer) -> _ItemScan:
    _, end = next_line(src, pos)
    lines = [marker.content]
    pending: list[str] = []
    loose = False
    pos = end
    while pos < len(src):
        line, nxt = next_line(src, pos)
        if is_blank(line):
            pending.append("")
            pos = nxt
            continue
        if indent_width(line) >= marker.content_offset:
            if pending:
                loose = True
                lines.extend(pending)
                pending.clear()
            lines.append(strip_indent(line, marker.content_offset))
        elif pending or list_marker(line) is not None or lexer.interrupts_paragraph(src[pos:]):
            break
        else:
            # Lazy paragraph continuation
            lines.append(line.strip())
        end = pos = nxt
    return _ItemScan(end=end, lines=lines, loose=loose)


def _make_item(raw: str, lines: list[str], value: int | None, loose: bool, lexer: Lexer) -> ListItem:
    text = "\n".join(lines)
    task = False
    checked = None
    prefix = text[:3]
    if prefix in _TASK_PREFIXES and text[3:4] in (" ", ""):
        task = True
        checked = _TASK_PREFIXES[prefix]
        text = text[4:]
    return ListItem(
        raw=raw,
        text=text,
        children=tuple(lexer.block_tokens(text)),
        value=value,
        task=task,
        checked=checked,
        loose=loose,
    )


def tokenize_list(src: str, lexer: Lexer) -> List | None:
    first_line, _ = next_line(src)
    first = list_marker(first_line)
    if first is None or is_thematic_break(first_line):
        return None
    kind = list_type(first)

    scans: list[tuple[int, _ItemScan, int | None]] = []
    loose = False
    gap_before = False
    pos = 0
    while pos < len(src):
        line, _ = next_line(src, pos)
        marker = list_marker(line)
        if marker is None or not marker.same_family(first) or is_thematic_break(line):
            break
        value = ordinal_value(marker.ordinal, kind)
        if first.ordered and value is None:
            break

        scan = _scan_item(src, pos, marker, lexer)
        scans.append((pos, scan, value))
        loose = loose or scan.loose or gap_before

        # Blank lines between items make the list loose
        gap = scan.end
        while gap < len(src):
            line, nxt = next_line(src, gap)
            if not is_blank(line):
                break
            gap = nxt
        following = list_marker(next_line(src, gap)[0]) if gap < len(src) else None
        if following is not None and following.same_family(first):
            gap_before = gap > scan.end
            pos = gap
        else:
            break

    if not scans:
        return None
    end = scans[-1][1].end

    items: list[ListItem] = []
    for index, (start, scan, value) in enumerate(scans):
        item_end = scans[index + 1][0] if index + 1 < len(scans) else scan.end
        items.append(_make_item(src[start:item_end], scan.lines, value, loose or scan.loose, lexer))

    values = [item.value for item in items]
    skipped = first.ordered and any(
        current is None or previous is None or current != previous + 1
        for previous, current in zip(values, values[1:])
    )
    return List(
        raw=src[:end],
        items=tuple(items),
        ordered=first.ordered,
        list_type=kind,
        start=values[0] if first.ordered else None,
        loose=loose,
        skipped=skipped,
    )


LIST = Extension("list", Level.BLOCK, tokenize_list)
