"""GFM tables with spans.

    | Name  | Q1 || Total |
    |:------|---:|---:|:-----:|
    | North | 10 | 12 | 22    |
    | South ^| 8 | 9  | 17    |

Beyond GFM:
- Repeated pipes after a cell (``||``) span that many columns, capped at
  ``LexConfig.table_max_colspan``.
- A cell ending in ``^`` merges into the cell above it: its text is appended
  there, the cell above gains a row of span, and the cell itself is hidden.
- Several header lines may precede the delimiter row.
- With ``LexConfig.table_detect_footer`` the last body row becomes the footer
  when the body has more than one row.

Rows are normalized to the delimiter row's column count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.lexer.lines import is_blank, is_table_delimiter_row, next_line
from arroyo.tokens import AlignValue, Inline, Table, TableCell, TableRow

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer


@dataclass(slots=True)
class _Cell:
    """Mutable cell used while spans are resolved."""

    text: str
    colspan: int = 1
    rowspan: int = 1
    hidden: bool = False
    target: _Cell | None = field(default=None, repr=False)


def parse_alignment(cell: str) -> AlignValue:
    cell = cell.strip()
    left = cell.startswith(":")
    right = cell.endswith(":")
    if left and right and len(cell) > 1:
        return "center"
    if right:
        return "right"
    if left:
        return "left"
    return None


def split_cells(row: str, max_colspan: int) -> list[_Cell]:
    """Split a row on unescaped pipes; a run of pipes sets the colspan."""
    cells: list[_Cell] = []
    start = 0
    i = 0
    n = len(row)
    while i < n:
        c = row[i]
        if c == "\\":
            i += 2
            continue
        if c == "|":
            run = i
            while run < n and row[run] == "|":
                run += 1
            cells.append(_Cell(row[start:i], colspan=min(run - i, max_colspan)))
            start = i = run
            continue
        i += 1
    if start < n:
        cells.append(_Cell(row[start:]))

    if cells and not cells[0].text.strip():
        cells.pop(0)
    if cells and not cells[-1].text.strip():
        cells.pop()
    for cell in cells:
        cell.text = cell.text.strip().replace("\\|", "|")
    return cells


def normalize_row(cells: list[_Cell], columns: int) -> list[_Cell]:
    """Pad or cut a row so its colspans add up to ``columns``."""
    width = sum(cell.colspan for cell in cells)
    while width < columns:
        cells.append(_Cell(""))
        width += 1
    if width == columns:
        return cells

    trimmed: list[_Cell] = []
    position = 0
    for cell in cells:
        if position >= columns:
            break
        cell.colspan = min(cell.colspan, columns - position)
        trimmed.append(cell)
        position += cell.colspan
    return trimmed


def merge_row_spans(row: list[_Cell], previous: list[_Cell]) -> None:
    """Fold ``^`` cells into the cell occupying the same column above."""
    position = 0
    for cell in row:
        column = position
        position += cell.colspan
        if not cell.text.endswith("^"):
            continue

        target = None
        offset = 0
        for above in previous:
            if offset <= column < offset + above.colspan:
                target = above.target or above
                break
            offset += above.colspan

        if target is None:
            cell.text = cell.text[:-1].rstrip()
            continue
        addition = cell.text[:-1].strip()
        if addition:
            target.text = f"{target.text} {addition}" if target.text else addition
        target.rowspan += 1
        cell.target = target
        cell.hidden = True


def _freeze(rows: list[list[_Cell]], align: tuple[AlignValue, ...], header: bool, lexer: Lexer) -> tuple[TableRow, ...]:
    frozen = []
    for row in rows:
        cells = []
        position = 0
        for cell in row:
            children: tuple[Inline, ...] = () if cell.hidden else tuple(lexer.inline_tokens(cell.text))
            cells.append(
                TableCell(
                    text=cell.text,
                    children=children,
                    header=header,
                    align=align[position] if position < len(align) else None,
                    colspan=cell.colspan,
                    rowspan=cell.rowspan,
                    hidden=cell.hidden,
                )
            )
            position += cell.colspan
        frozen.append(TableRow(cells=tuple(cells)))
    return tuple(frozen)


def tokenize_table(src: str, lexer: Lexer) -> Table | None:
    first, pos = next_line(src)
    if "|" not in first or first[:1] in ("", " ", "\t"):
        return None

    header_lines = [first]
    delimiter = None
    while pos < len(src):
        line, nxt = next_line(src, pos)
        pos = nxt
        if is_table_delimiter_row(line):
            delimiter = line
            break
        if is_blank(line) or "|" not in line:
            return None
        header_lines.append(line)
    if delimiter is None:
        return None

    body_lines: list[str] = []
    while pos < len(src):
        line, nxt = next_line(src, pos)
        if is_blank(line) or lexer.interrupts_paragraph(src[pos:]):
            break
        body_lines.append(line)
        pos = nxt

    row = delimiter.strip()
    row = row[1:] if row.startswith("|") else row
    row = row[:-1] if row.endswith("|") else row
    align = tuple(parse_alignment(cell) for cell in row.split("|"))
    columns = len(align)
    config = lexer.config

    head: list[list[_Cell]] = []
    for line in header_lines:
        row = normalize_row(split_cells(line, config.table_max_colspan), columns)
        if head:
            merge_row_spans(row, head[-1])
        head.append(row)

    body: list[list[_Cell]] = []
    for line in body_lines:
        row = normalize_row(split_cells(line, config.table_max_colspan), columns)
        merge_row_spans(row, body[-1] if body else head[-1])
        body.append(row)

    foot: list[list[_Cell]] = []
    if config.table_detect_footer and len(body) > 1:
        foot.append(body.pop())

    return Table(
        raw=src[:pos],
        align=align,
        head=_freeze(head, align, True, lexer),
        body=_freeze(body, align, False, lexer),
        foot=_freeze(foot, align, False, lexer),
    )


TABLE = Extension("table", Level.BLOCK, tokenize_table)
