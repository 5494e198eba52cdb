"""Baseline inline grammar.

Escapes, code spans, hard breaks, autolinks, raw inline HTML, links and
images, emphasis, ``~~strikethrough~~``, bare URLs and plain text, tried in
that order after every registered inline extension.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from arroyo.lexer.charsets import ASCII_PUNCTUATION, URL_TERMINATORS, is_word_char
from arroyo.lexer.emphasis import emphasis, skip_code_span
from arroyo.lexer.flanking import run_length
from arroyo.tokens import Br, Codespan, Del, Escape, Image, InlineHtml, Link, Text

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer, Rule
    from arroyo.lexer.scanmemo import ScanMemo

_AUTOLINK = re.compile(r"<([A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*)>")
_EMAIL_AUTOLINK = re.compile(
    r"<([A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*)>"
)
_HTML_TAG = re.compile(
    r"<(?:"
    r"[A-Za-z][A-Za-z0-9-]*(?:\s+[A-Za-z_:][\w.:-]*(?:\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s\"'=<>`]+))?)*\s*/?>"
    r"|/[A-Za-z][A-Za-z0-9-]*\s*>"
    r"|!--(?:[^-]|-(?!->))*-->"
    r")"
)
_URL_PREFIXES = ("http://", "https://", "www.")
_URL_TRAILING = frozenset("?!.,:*_~'\";")


def escape(src: str, lexer: Lexer) -> Escape | Br | None:
    if src[0] != "\\" or len(src) < 2:
        return None
    if src[1] == "\n":
        return Br(raw=src[:2])
    if src[1] in ASCII_PUNCTUATION:
        return Escape(raw=src[:2], text=src[1])
    return None


def codespan(src: str, lexer: Lexer) -> Codespan | None:
    if src[0] != "`":
        return None
    end = skip_code_span(src, 0)
    length = run_length(src, 0, "`")
    if end == length:
        return None
    text = src[length : end - length].replace("\n", " ")
    if len(text) > 2 and text[0] == " " and text[-1] == " " and text.strip():
        text = text[1:-1]
    return Codespan(raw=src[:end], text=text)


def hard_break(src: str, lexer: Lexer) -> Br | None:
    if not src.startswith("  "):
        return None
    end = run_length(src, 0, " ")
    if src[end : end + 1] != "\n":
        return None
    return Br(raw=src[: end + 1])


def autolink(src: str, lexer: Lexer) -> Link | None:
    if src[0] != "<":
        return None
    match = _AUTOLINK.match(src)
    if match is not None:
        href = match.group(1)
    else:
        match = _EMAIL_AUTOLINK.match(src)
        if match is None:
            return None
        href = f"mailto:{match.group(1)}"
    label = match.group(1)
    return Link(raw=match.group(0), href=href, title=None, text=label, children=(Text(raw=label, text=label),))


def inline_html(src: str, lexer: Lexer) -> InlineHtml | None:
    if src[0] != "<":
        return None
    match = _HTML_TAG.match(src)
    if match is None:
        return None
    return InlineHtml(raw=match.group(0), text=match.group(0))


def find_bracket_close(src: str, start: int, memo: ScanMemo | None = None, offset: int = 0) -> int | None:
    """Index of the ``]`` balancing the bracket opened just before ``start``.

    With a ``memo`` (and the ``offset`` of ``src`` in the memo's sequence),
    an unbalanced scan is remembered and later scans stop early.
    """
    visits: list[tuple[int, tuple[int, ...]]] = []
    depth = 1
    i = start
    while i < len(src):
        c = src[i]
        if c == "\\":
            i += 2
            continue
        if c == "`":
            i = skip_code_span(src, i)
            continue
        if c in "[]":
            if memo is not None:
                floor = memo.floor(offset + i)
                if floor is not None and depth + floor[0] > 0:
                    memo.record(visits, floor)
                    return None
                visits.append((offset + i, (1,) if c == "[" else (-1,)))
            if c == "[":
                depth += 1
            else:
                depth -= 1
                if depth == 0:
                    return i
        i += 1
    if memo is not None:
        memo.record(visits)
    return None


def _link_destination(src: str, pos: int) -> tuple[str, str | None, int] | None:
    """Parse ``(dest "title")`` starting just after ``(``; return href, title, end."""
    n = len(src)
    while pos < n and src[pos] in " \t":
        pos += 1

    if pos < n and src[pos] == "<":
        close = src.find(">", pos)
        if close == -1 or "\n" in src[pos:close]:
            return None
        href, pos = src[pos + 1 : close], close + 1
    else:
        start = pos
        depth = 0
        while pos < n:
            c = src[pos]
            if c == "\\" and pos + 1 < n:
                pos += 2
                continue
            if c in " \t\n":
                break
            if c == "(":
                depth += 1
            elif c == ")":
                if depth == 0:
                    break
                depth -= 1
            pos += 1
        href = src[start:pos]

    while pos < n and src[pos] in " \t\n":
        pos += 1
    title = None
    if pos < n and src[pos] in "\"'":
        quote = src[pos]
        close = src.find(quote, pos + 1)
        if close == -1:
            return None
        title, pos = src[pos + 1 : close], close + 1
        while pos < n and src[pos] in " \t":
            pos += 1
    if pos >= n or src[pos] != ")":
        return None
    return href, title, pos + 1


def link(src: str, lexer: Lexer) -> Link | Image | None:
    is_image = src.startswith("![")
    if not is_image and src[0] != "[":
        return None
    start = 2 if is_image else 1
    memo, offset = lexer.scan_memo(src, "brackets") or (None, 0)
    close = find_bracket_close(src, start, memo, offset)
    if close is None or src[close + 1 : close + 2] != "(":
        return None
    dest = _link_destination(src, close + 2)
    if dest is None:
        return None

    href, title, end = dest
    label = src[start:close]
    if is_image:
        return Image(raw=src[:end], href=href, title=title, text=label)
    return Link(raw=src[:end], href=href, title=title, text=label, children=tuple(lexer.inline_tokens(label)))


def strikethrough(src: str, lexer: Lexer) -> Del | None:
    if not src.startswith("~~") or run_length(src, 0, "~") != 2:
        return None
    if src[2:3] in ("", " ", "\t", "\n"):
        return None

    memo, offset = lexer.scan_memo(src, "strikethrough") or (None, 0)
    visits: list[tuple[int, tuple[int, ...]]] = []
    i = 2
    while i < len(src):
        c = src[i]
        if c == "\\":
            i += 2
            continue
        if c == "`":
            i = skip_code_span(src, i)
            continue
        if c == "~":
            if memo is not None:
                floor = memo.floor(offset + i)
                if floor is not None and floor[0] >= 0:
                    memo.record(visits, floor)
                    return None
            length = run_length(src, i, "~")
            if length == 2 and src[i - 1] not in " \t\n":
                text = src[2:i]
                return Del(raw=src[: i + 2], text=text, children=tuple(lexer.inline_tokens(text)))
            visits.append((offset + i, (0,)))
            i += length
            continue
        i += 1
    if memo is not None:
        memo.record(visits)
    return None


def bare_url(src: str, lexer: Lexer) -> Link | None:
    if not src.startswith(_URL_PREFIXES):
        return None
    end = 0
    while end < len(src) and src[end] not in URL_TERMINATORS:
        end += 1
    url = src[:end]
    while url and (url[-1] in _URL_TRAILING or (url[-1] == ")" and url.count(")") > url.count("("))):
        url = url[:-1]
    if url in _URL_PREFIXES or url.endswith("://"):
        return None
    href = f"http://{url}" if url.startswith("www.") else url
    return Link(raw=url, href=href, title=None, text=url, children=(Text(raw=url, text=url),))


def text(src: str, lexer: Lexer) -> Text:
    """Plain text up to the next character where another rule could start.

    Always consumes at least one character. A delimiter run that no rule
    claimed is consumed whole so its tail is not retried as an opener.
    """
    stops = lexer.inline_stops
    n = len(src)
    first = src[0]
    i = run_length(src, 0, first) if first in "*_~`" else 1
    while i < n:
        c = src[i]
        if c in stops:
            if c == "_" and is_word_char(src[i - 1]):
                # Intraword underscores never delimit
                i += run_length(src, i, "_")
                continue
            break
        if c == " " and src.startswith("  ", i):
            end = i + run_length(src, i, " ")
            if src[end : end + 1] == "\n":
                break
        if c in "hw" and not is_word_char(src[i - 1]) and src.startswith(_URL_PREFIXES, i):
            break
        i += 1
    return Text(raw=src[:i], text=src[:i])


BASELINE_INLINE_RULES: tuple[tuple[str, Rule], ...] = (
    ("escape", escape),
    ("codespan", codespan),
    ("hard_break", hard_break),
    ("autolink", autolink),
    ("inline_html", inline_html),
    ("link", link),
    ("emphasis", emphasis),
    ("strikethrough", strikethrough),
    ("bare_url", bare_url),
    ("text", text),
)
