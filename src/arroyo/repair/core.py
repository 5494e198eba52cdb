"""Incomplete markdown repair.

A streamed buffer is usually cut mid-construct: ``**bol``, ``[link](htt``,
an open code fence. repair_incomplete_markdown() appends the closing
markers that make such a buffer parse the way it will once complete:

    >>> repair_incomplete_markdown("Some **bold and `code")
    'Some **bold and `code`**'

Only a suffix is ever appended, so the input is a prefix of the output and
already-rendered text never shifts. Well-formed input is returned unchanged.

The scan is a single left-to-right pass over lines. Block contexts (code
fences, ``$$`` blocks, alignment blocks, component tags) are tracked per
line; inline openers are tracked by an InlineScanner and abandoned wherever
a new block starts, because the tokenizer would never pair across that
boundary either.

Suffix order: inline closers (most recent first), the trailing colon of an
unfinished ``:term`` line, then block closers (innermost first), each block
closer on its own line.

Thread Safety:
Pure function; safe to call from any thread.

"""

from __future__ import annotations

from arroyo.lexer.lines import (
    fence_opener,
    indent_width,
    is_blank,
    is_table_delimiter_row,
    is_thematic_break,
    setext_depth,
)
from arroyo.repair.blocks import (
    ALIGN_CLOSERS,
    heading_text_offset,
    is_dl_term,
    mdx_tags,
    split_line,
    strip_quote,
)
from arroyo.repair.inline import InlineScanner
from arroyo.repair.state import OpenBlock
from arroyo.utils.logger import get_logger

logger = get_logger(__name__)

_ALIGN_ENDS = frozenset(ALIGN_CLOSERS.values())


def _close_block(blocks: list[OpenBlock], closer: str) -> None:
    for index in range(len(blocks) - 1, -1, -1):
        if blocks[index].closer == closer:
            del blocks[index:]
            return


def _scan_cells(scanner: InlineScanner, text: str, start: int, end: int) -> None:
    """Scan a table row cell by cell; no opener survives a cell boundary."""
    cell = start
    i = start
    while i < end:
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == "|":
            scanner.reset()
            scanner.scan(cell, i)
            cell = i + 1
        i += 1
    scanner.reset()
    scanner.scan(cell, end)


def repair_incomplete_markdown(text: str) -> str:
    """Return ``text`` with closers appended for unterminated constructs.

    Never raises; the result always starts with ``text``.

    Example:
        >>> repair_incomplete_markdown("```py\\nprint(1)")
        '```py\\nprint(1)\\n```'

    """
    if not text:
        return text

    blocks: list[OpenBlock] = []
    scanner = InlineScanner(text)
    lines = text.split("\n")
    last = len(lines) - 1
    in_paragraph = False
    after_heading = False
    start = 0

    for index, line in enumerate(lines):
        line_start = start
        line_end = start + len(line)
        start = line_end + 1
        final = index == last
        top = blocks[-1] if blocks else None

        if top is not None and top.literal:
            inner = strip_quote(line).lstrip(" \t")
            if top.fence is not None and top.fence.closes(inner):
                blocks.pop()
            elif top.math and inner.rstrip() == "$$":
                blocks.pop()
            continue

        parts = split_line(line)
        if is_blank(parts.rest):
            scanner.reset()
            in_paragraph = after_heading = False
            continue
        if after_heading:
            scanner.reset()
            after_heading = False
        if not in_paragraph and parts.marker is None and indent_width(parts.rest) >= 4:
            # Indented code
            continue

        content = parts.content
        content_start = line_end - len(content)
        stripped = content.rstrip()
        if parts.marker is not None:
            scanner.reset()

        fence = fence_opener(content)
        if fence is not None or stripped == "$$":
            scanner.reset()
            in_paragraph = False
            if fence is not None:
                blocks.append(OpenBlock(closer=parts.prefix + fence.marker, fence=fence))
            else:
                blocks.append(OpenBlock(closer=parts.prefix + "$$", math=True))
            continue

        if stripped in ALIGN_CLOSERS and not final:
            scanner.reset()
            in_paragraph = False
            blocks.append(OpenBlock(closer=ALIGN_CLOSERS[stripped]))
            continue
        if stripped in _ALIGN_ENDS:
            scanner.reset()
            in_paragraph = False
            _close_block(blocks, stripped)
            continue

        found = mdx_tags(content)
        if found is not None:
            tags, tail = found
            scanner.reset()
            for name, opening in tags:
                if opening:
                    blocks.append(OpenBlock(closer=f"</{name}>"))
                else:
                    _close_block(blocks, f"</{name}>")
            # Text after the last tag starts a paragraph
            in_paragraph = not is_blank(content[tail:])
            scanner.scan(content_start + tail, line_end)
            if not final:
                scanner.end_line()
            continue

        if is_thematic_break(parts.rest) or setext_depth(parts.rest) is not None:
            scanner.reset()
            in_paragraph = False
            continue
        if is_table_delimiter_row(parts.rest):
            scanner.reset()
            in_paragraph = True
            continue

        in_paragraph = True
        heading = heading_text_offset(content)
        if heading is not None:
            scanner.reset()
            after_heading = True
            scanner.scan(content_start + heading, line_end)
        elif content.startswith("|"):
            _scan_cells(scanner, text, content_start, line_end)
        else:
            if content.startswith(":"):
                # Each description line is a block of its own
                scanner.reset()
            scanner.scan(content_start, line_end)

        if not final:
            scanner.end_line()

    suffix = scanner.closers()
    top = blocks[-1] if blocks else None
    if (top is None or not top.literal) and is_dl_term(lines[-1]):
        suffix += ":"
    for block in reversed(blocks):
        if not (text + suffix).endswith("\n"):
            suffix += "\n"
        suffix += block.closer

    if suffix:
        logger.debug("Repaired incomplete markdown with %r", suffix)
    return text + suffix
