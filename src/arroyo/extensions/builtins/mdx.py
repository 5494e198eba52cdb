"""MDX-style component tags.

Component names start with an uppercase letter, which is what separates them
from HTML. Two forms:

    <Chart type="bar" height={300} animate={true}/>

    <Card title="Hi">
    Any **markdown**, including <Card>nested cards</Card>.
    </Card>

The paired form finds its closing tag with a depth count over the same tag
name, so nested components of the same name close correctly. Attribute
values are strings, numbers, booleans, or (for any other ``{...}``) the
expression text as a string.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.tokens import Mdx, MdxValue

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

_TAG_NAME = re.compile(r"<([A-Z][A-Za-z0-9]*)")
_ATTRIBUTE = re.compile(r'\s+(\w+)=(?:"([^"]*)"|\{([^}]*)\})')
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_TAG_BOUNDARY = frozenset(" \t\n/>")


def parse_attribute_value(quoted: str | None, expression: str | None) -> MdxValue:
    """Convert a ``"string"`` or ``{expression}`` attribute value."""
    if quoted is not None:
        return quoted
    text = (expression or "").strip()
    if _NUMBER.fullmatch(text):
        return float(text) if "." in text else int(text)
    if text == "true":
        return True
    if text == "false":
        return False
    return text


def parse_open_tag(src: str, pos: int = 0) -> tuple[str, tuple[tuple[str, MdxValue], ...], int, bool] | None:
    """Parse ``<Name attr=...>`` or ``<Name .../>`` at ``pos``.

    Returns:
        (name, attributes, end offset, self_closing), or None
    """
    match = _TAG_NAME.match(src, pos)
    if match is None:
        return None
    name = match.group(1)
    end = match.end()
    attributes: list[tuple[str, MdxValue]] = []
    while (attr := _ATTRIBUTE.match(src, end)) is not None:
        attributes.append((attr.group(1), parse_attribute_value(attr.group(2), attr.group(3))))
        end = attr.end()
    while end < len(src) and src[end] in " \t\n":
        end += 1
    if src.startswith("/>", end):
        return name, tuple(attributes), end + 2, True
    if src.startswith(">", end):
        return name, tuple(attributes), end + 1, False
    return None


def find_closing_tag(src: str, name: str, start: int) -> int | None:
    """Offset of the ``</name>`` that balances an opener ending at ``start``."""
    opener = f"<{name}"
    closer = f"</{name}>"
    depth = 1
    pos = start
    while True:
        close = src.find(closer, pos)
        if close == -1:
            return None
        nested = src.find(opener, pos, close)
        while nested != -1:
            boundary = src[nested + len(opener) : nested + len(opener) + 1]
            if boundary in _TAG_BOUNDARY:
                tag = parse_open_tag(src, nested)
                if tag is not None and not tag[3]:
                    depth += 1
            nested = src.find(opener, nested + 1, close)
        depth -= 1
        if depth == 0:
            return close
        pos = close + len(closer)


def starts_mdx(src: str, lexer: Lexer) -> bool:
    """True when ``src`` starts with a complete component, without parsing its body."""
    tag = parse_open_tag(src)
    if tag is None:
        return False
    return tag[3] or find_closing_tag(src, tag[0], tag[2]) is not None


def tokenize_mdx(src: str, lexer: Lexer) -> Mdx | None:
    tag = parse_open_tag(src)
    if tag is None:
        return None
    name, attributes, open_end, self_closing = tag
    if self_closing:
        return Mdx(raw=src[:open_end], tag_name=name, attributes=attributes, self_closing=True)

    close = find_closing_tag(src, name, open_end)
    if close is None:
        return None
    text = src[open_end:close]
    inner = text.strip()
    return Mdx(
        raw=src[: close + len(name) + 3],
        tag_name=name,
        attributes=attributes,
        self_closing=False,
        text=text,
        children=tuple(lexer.block_tokens(inner)) if inner else (),
    )


MDX = Extension(
    "mdx",
    Level.BLOCK,
    tokenize_mdx,
    start_chars=frozenset("<"),
    interrupts_paragraph=True,
    interrupt_test=starts_mdx,
)
