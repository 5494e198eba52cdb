"""Typed tokens produced by the arroyo tokenizer pipeline.

Every token is a frozen, slotted dataclass carrying:
- ``kind``: a string discriminant (class constant) the renderer dispatches on
- ``raw``: the exact substring the rule consumed

Concatenating the ``raw`` of sibling tokens reproduces the source slice they
were parsed from. Kind-specific payload (children, keys, attributes) lives on
each variant.

Token Hierarchy:
Token (base)
├── Block
│   ├── Space, Paragraph, Heading, Code, Blockquote, Html, Hr
│   ├── List, ListItem, Table
│   └── Align, DescriptionList, Mdx, MathBlock, Alert, FootnoteDefinition
└── Inline
    ├── Text, Escape, Strong, Em, Del, Codespan, Br, Link, Image, InlineHtml
    └── Citation, Math, FootnoteRef, Sub, Sup

Thread Safety:
All tokens are immutable and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Literal

type AlignValue = Literal["left", "center", "right"] | None
type MdxValue = str | int | float | bool


@dataclass(frozen=True, slots=True)
class TokenBase:
    """Base class for all tokens."""

    kind: ClassVar[str] = "token"

    raw: str


# =============================================================================
# Inline Tokens
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(TokenBase):
    """Literal text between matches."""

    kind: ClassVar[str] = "text"

    text: str


@dataclass(frozen=True, slots=True)
class Escape(TokenBase):
    """Backslash escape such as ``\\*``; ``text`` is the escaped character."""

    kind: ClassVar[str] = "escape"

    text: str


@dataclass(frozen=True, slots=True)
class Strong(TokenBase):
    kind: ClassVar[str] = "strong"

    text: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Em(TokenBase):
    kind: ClassVar[str] = "em"

    text: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Del(TokenBase):
    """``~~strikethrough~~`` span."""

    kind: ClassVar[str] = "del"

    text: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Codespan(TokenBase):
    kind: ClassVar[str] = "codespan"

    text: str


@dataclass(frozen=True, slots=True)
class Br(TokenBase):
    """Hard line break (two trailing spaces, backslash, or a literal ``<br>``)."""

    kind: ClassVar[str] = "br"


@dataclass(frozen=True, slots=True)
class Link(TokenBase):
    kind: ClassVar[str] = "link"

    href: str
    title: str | None
    text: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Image(TokenBase):
    kind: ClassVar[str] = "image"

    href: str
    title: str | None
    text: str


@dataclass(frozen=True, slots=True)
class InlineHtml(TokenBase):
    kind: ClassVar[str] = "html_inline"

    text: str


@dataclass(frozen=True, slots=True)
class Citation(TokenBase):
    """Run of bracketed citation groups, e.g. ``[1] [smith2020, doe2021]``.

    ``keys`` keeps first-occurrence order with duplicates removed.

    """

    kind: ClassVar[str] = "citation"

    keys: tuple[str, ...]
    text: str


@dataclass(frozen=True, slots=True)
class Math(TokenBase):
    """Inline math. ``display`` is True for ``$$...$$`` used inline."""

    kind: ClassVar[str] = "math"

    text: str
    display: bool = False


@dataclass(frozen=True, slots=True)
class FootnoteRef(TokenBase):
    kind: ClassVar[str] = "footnote_ref"

    label: str


@dataclass(frozen=True, slots=True)
class Sub(TokenBase):
    kind: ClassVar[str] = "sub"

    text: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Sup(TokenBase):
    kind: ClassVar[str] = "sup"

    text: str
    children: tuple[Inline, ...]


# =============================================================================
# Block Tokens
# =============================================================================


@dataclass(frozen=True, slots=True)
class Space(TokenBase):
    """One or more blank lines between blocks."""

    kind: ClassVar[str] = "space"


@dataclass(frozen=True, slots=True)
class Paragraph(TokenBase):
    kind: ClassVar[str] = "paragraph"

    text: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Heading(TokenBase):
    kind: ClassVar[str] = "heading"

    depth: int
    text: str
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Code(TokenBase):
    """Fenced or indented code block.

    ``closed`` is False for a fence that runs to the end of input, which is
    the normal state of a code block while it is still being streamed.

    """

    kind: ClassVar[str] = "code"

    text: str
    lang: str | None = None
    fenced: bool = True
    closed: bool = True


@dataclass(frozen=True, slots=True)
class Blockquote(TokenBase):
    kind: ClassVar[str] = "blockquote"

    text: str
    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class Html(TokenBase):
    """Raw HTML block."""

    kind: ClassVar[str] = "html"

    text: str


@dataclass(frozen=True, slots=True)
class Hr(TokenBase):
    kind: ClassVar[str] = "hr"


@dataclass(frozen=True, slots=True)
class ListItem(TokenBase):
    """List item.

    Attributes:
        value: Ordinal of the marker (``3.`` -> 3, ``c)`` -> 3, ``iv.`` -> 4);
            None for bullet items.
        task: True for ``[ ]`` / ``[x]`` task items.
        checked: Checkbox state for task items, otherwise None.
        loose: Item content is separated by blank lines.

    """

    kind: ClassVar[str] = "list_item"

    text: str
    children: tuple[Block, ...]
    value: int | None = None
    task: bool = False
    checked: bool | None = None
    loose: bool = False


type ListType = Literal["bullet", "decimal", "lower-alpha", "upper-alpha", "lower-roman", "upper-roman"]


@dataclass(frozen=True, slots=True)
class List(TokenBase):
    """Bullet or ordered list.

    ``skipped`` is True when ordered item values do not form a consecutive
    sequence (``1.``, ``2.``, ``5.``), so renderers can emit explicit values.

    """

    kind: ClassVar[str] = "list"

    items: tuple[ListItem, ...]
    ordered: bool = False
    list_type: ListType = "bullet"
    start: int | None = None
    loose: bool = False
    skipped: bool = False


@dataclass(frozen=True, slots=True)
class TableCell:
    """Table cell payload. Cells merged into the cell above are ``hidden``."""

    text: str
    children: tuple[Inline, ...]
    header: bool = False
    align: AlignValue = None
    colspan: int = 1
    rowspan: int = 1
    hidden: bool = False


@dataclass(frozen=True, slots=True)
class TableRow:
    cells: tuple[TableCell, ...]


@dataclass(frozen=True, slots=True)
class Table(TokenBase):
    kind: ClassVar[str] = "table"

    align: tuple[AlignValue, ...]
    head: tuple[TableRow, ...]
    body: tuple[TableRow, ...] = ()
    foot: tuple[TableRow, ...] = ()


@dataclass(frozen=True, slots=True)
class Align(TokenBase):
    """``[center]`` / ``[right]`` block wrapping re-tokenized block content."""

    kind: ClassVar[str] = "align"

    align: Literal["center", "right"]
    text: str
    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class Description(TokenBase):
    """One ``:term:detail`` line of a description list."""

    kind: ClassVar[str] = "description"

    term: str
    detail: str
    term_children: tuple[Inline, ...]
    detail_children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class DescriptionList(TokenBase):
    kind: ClassVar[str] = "description_list"

    items: tuple[Description, ...]


@dataclass(frozen=True, slots=True)
class Mdx(TokenBase):
    """MDX-style component tag such as ``<Card title="x">...</Card>``.

    Attributes are kept as ordered ``(name, value)`` pairs; use ``attrs`` for
    a dict view. ``text`` is the untrimmed inner content of a paired tag.

    """

    kind: ClassVar[str] = "mdx"

    tag_name: str
    attributes: tuple[tuple[str, MdxValue], ...] = ()
    self_closing: bool = False
    text: str = ""
    children: tuple[Block, ...] = ()

    @property
    def attrs(self) -> dict[str, MdxValue]:
        return dict(self.attributes)


@dataclass(frozen=True, slots=True)
class MathBlock(TokenBase):
    kind: ClassVar[str] = "math_block"

    text: str


type AlertVariant = Literal["note", "tip", "important", "warning", "caution"]


@dataclass(frozen=True, slots=True)
class Alert(TokenBase):
    """GitHub-style alert blockquote (``> [!NOTE]``)."""

    kind: ClassVar[str] = "alert"

    variant: AlertVariant
    text: str
    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class FootnoteDefinition(TokenBase):
    kind: ClassVar[str] = "footnote"

    label: str
    text: str
    children: tuple[Block, ...]


# =============================================================================
# Host Tokens
# =============================================================================


@dataclass(frozen=True, slots=True)
class Custom(TokenBase):
    """Token for host extensions that do not need a dedicated class.

    ``name`` doubles as the kind, so renderers that don't know it fall back to
    rendering ``raw`` verbatim.

    """

    name: str
    data: dict[str, Any] | None = None
    children: tuple[Token, ...] = ()

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.name


type Inline = (
    Text
    | Escape
    | Strong
    | Em
    | Del
    | Codespan
    | Br
    | Link
    | Image
    | InlineHtml
    | Citation
    | Math
    | FootnoteRef
    | Sub
    | Sup
    | Custom
)

type Block = (
    Space
    | Paragraph
    | Heading
    | Code
    | Blockquote
    | Html
    | Hr
    | List
    | ListItem
    | Table
    | Align
    | DescriptionList
    | Mdx
    | MathBlock
    | Alert
    | FootnoteDefinition
    | Text
    | Custom
)

type Token = Block | Inline | Description
