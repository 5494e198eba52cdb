"""Baseline block grammar.

A pragmatic CommonMark subset: blank lines, indented and fenced code, ATX and
setext headings, blockquotes, raw HTML blocks and paragraphs. Lists, tables
and thematic breaks are registered as default extensions rather than built
in, so hosts can reorder or replace them.

Each rule has the same signature as an extension tokenizer and is run after
every registered block extension.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arroyo.lexer.lines import (
    atx_heading,
    fence_opener,
    indent_width,
    is_blank,
    is_blockquote_start,
    is_html_block_start,
    next_line,
    setext_depth,
    strip_indent,
)
from arroyo.tokens import Blockquote, Code, Heading, Html, Paragraph, Space

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer, Rule

_RAW_TEXT_TAGS = ("<script", "<pre", "<style", "<textarea")


def space(src: str, lexer: Lexer) -> Space | None:
    pos = 0
    while pos < len(src):
        line, nxt = next_line(src, pos)
        if not is_blank(line):
            break
        pos = nxt
    return Space(raw=src[:pos]) if pos else None


def indented_code(src: str, lexer: Lexer) -> Code | None:
    line, pos = next_line(src)
    if is_blank(line) or indent_width(line) < 4:
        return None

    lines = [strip_indent(line, 4)]
    end = pos
    pending: list[str] = []
    while pos < len(src):
        line, nxt = next_line(src, pos)
        if is_blank(line):
            pending.append(strip_indent(line, 4))
        elif indent_width(line) >= 4:
            lines.extend(pending)
            pending.clear()
            lines.append(strip_indent(line, 4))
            end = nxt
        else:
            break
        pos = nxt
    return Code(raw=src[:end], text="\n".join(lines), lang=None, fenced=False)


def fenced_code(src: str, lexer: Lexer) -> Code | None:
    """Fenced code block. An unterminated fence runs to the end of input."""
    line, pos = next_line(src)
    fence = fence_opener(line)
    if fence is None:
        return None

    body: list[str] = []
    closed = False
    while pos < len(src):
        line, nxt = next_line(src, pos)
        pos = nxt
        if fence.closes(line):
            closed = True
            break
        body.append(strip_indent(line, fence.indent))

    lang = fence.info.split()[0] if fence.info else None
    return Code(raw=src[:pos], text="\n".join(body), lang=lang, fenced=True, closed=closed)


def heading(src: str, lexer: Lexer) -> Heading | None:
    line, pos = next_line(src)
    match = atx_heading(line)
    if match is None:
        return None
    depth, text = match
    return Heading(raw=src[:pos], depth=depth, text=text, children=tuple(lexer.inline_tokens(text)))


def collect_quote(src: str, lexer: Lexer) -> tuple[int, str] | None:
    """Return the length of the blockquote at the start of ``src`` and its
    text with the ``>`` markers removed."""
    line, _ = next_line(src)
    if not is_blockquote_start(line):
        return None

    pos = 0
    inner: list[str] = []
    while pos < len(src):
        line, nxt = next_line(src, pos)
        if is_blockquote_start(line):
            body = line.lstrip(" ")[1:]
            if body[:1] in (" ", "\t"):
                body = body[1:]
            inner.append(body)
        elif is_blank(line) or is_blank(inner[-1]) or lexer.interrupts_paragraph(src[pos:]):
            break
        else:
            # Lazy continuation of the quoted paragraph
            inner.append(line)
        pos = nxt

    return pos, "\n".join(inner)


def blockquote(src: str, lexer: Lexer) -> Blockquote | None:
    quote = collect_quote(src, lexer)
    if quote is None:
        return None
    end, text = quote
    return Blockquote(raw=src[:end], text=text, children=tuple(lexer.block_tokens(text)))


def html_block(src: str, lexer: Lexer) -> Html | None:
    line, pos = next_line(src)
    if not is_html_block_start(line):
        return None

    stripped = line.lstrip(" ")
    if stripped.startswith("<!--"):
        end = src.find("-->")
        pos = len(src) if end == -1 else next_line(src, end)[1]
    elif stripped.lower().startswith(_RAW_TEXT_TAGS):
        tag = stripped[1:].split(">", 1)[0].split()[0].lower()
        end = src.lower().find(f"</{tag}>")
        pos = len(src) if end == -1 else next_line(src, end)[1]
    else:
        while pos < len(src):
            line, nxt = next_line(src, pos)
            if is_blank(line):
                break
            pos = nxt

    raw = src[:pos]
    return Html(raw=raw, text=raw.rstrip("\n"))


def paragraph(src: str, lexer: Lexer) -> Paragraph | Heading:
    """Paragraph, or a setext heading when an underline follows.

    Always matches: the first line is consumed unconditionally.
    """
    line, pos = next_line(src)
    lines = [line]
    while pos < len(src):
        line, nxt = next_line(src, pos)
        if is_blank(line):
            break
        depth = setext_depth(line)
        if depth is not None:
            text = "\n".join(part.strip() for part in lines)
            return Heading(raw=src[:nxt], depth=depth, text=text, children=tuple(lexer.inline_tokens(text)))
        if lexer.interrupts_paragraph(src[pos:]):
            break
        lines.append(line)
        pos = nxt

    text = "\n".join(part.lstrip() for part in lines).rstrip()
    return Paragraph(raw=src[:pos], text=text, children=tuple(lexer.inline_tokens(text)))


BASELINE_BLOCK_RULES: tuple[tuple[str, Rule], ...] = (
    ("space", space),
    ("indented_code", indented_code),
    ("fenced_code", fenced_code),
    ("heading", heading),
    ("blockquote", blockquote),
    ("html_block", html_block),
    ("paragraph", paragraph),
)
