"""HTML renderer using StringBuilder pattern.

Renders arroyo token trees to HTML in a single walk.

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for each
render() call. Multiple threads can safely share a single HtmlRenderer instance
and call render() concurrently without synchronization.

Streaming placeholders:
Links, images and footnote references completed by the repairer point at
``arroyo:incomplete-*`` targets. They render as ``pending`` spans instead of
anchors, so a half-streamed link is never clickable.

Unknown kinds:
Custom tokens and any kind this renderer does not know render as their
escaped ``raw`` text.
"""

import html
import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from urllib.parse import quote as url_quote

from arroyo.repair.inline import INCOMPLETE_IMAGE, INCOMPLETE_LINK
from arroyo.stringbuilder import StringBuilder
from arroyo.tokens import (
    Alert,
    Align,
    Blockquote,
    Br,
    Citation,
    Code,
    Codespan,
    Del,
    DescriptionList,
    Em,
    Escape,
    FootnoteDefinition,
    FootnoteRef,
    Heading,
    Hr,
    Html,
    Image,
    Inline,
    InlineHtml,
    Link,
    List,
    ListItem,
    Math,
    MathBlock,
    Mdx,
    Paragraph,
    Space,
    Strong,
    Sub,
    Sup,
    Table,
    TableRow,
    Text,
    Token,
)
from arroyo.utils.logger import get_logger
from arroyo.walk import FootnoteIndex, collect_footnotes

logger = get_logger(__name__)

_OL_TYPES = {"lower-alpha": "a", "upper-alpha": "A", "lower-roman": "i", "upper-roman": "I"}
_ALERT_TITLES = {"note": "Note", "tip": "Tip", "important": "Important", "warning": "Warning", "caution": "Caution"}


def html_escape(s: str) -> str:
    """Escape HTML special characters.

    Escapes <, >, &, " but NOT single quotes.
    """
    return html.escape(s, quote=False).replace('"', "&quot;")


def _encode_url(url: str) -> str:
    """Decode HTML entities, then percent-encode spaces, backslashes and
    non-ASCII characters. The result still needs html_escape for quotes."""
    decoded = html.unescape(url)
    return url_quote(decoded, safe="/:?#[]@!$&'()*+,;=-_.~%")


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Created fresh for each render() call, so concurrent renders never share
    state.
    """

    footnotes: FootnoteIndex = field(default_factory=FootnoteIndex)
    ref_counts: dict[str, int] = field(default_factory=dict)


class HtmlRenderer:
    """Render tokens to HTML using StringBuilder pattern.

    Usage:
        >>> from arroyo.lexer import Lexer
        >>> HtmlRenderer().render(Lexer().block_tokens("# Hello **World**"))
        '<h1>Hello <strong>World</strong></h1>\\n'

    Thread Safety:
        Multiple threads can safely share a single HtmlRenderer instance.

    """

    __slots__ = ("_text_transformer",)

    def __init__(self, *, text_transformer: Callable[[str], str] | None = None) -> None:
        """Initialize renderer.

        Args:
            text_transformer: Optional callback applied to plain text before escaping
        """
        self._text_transformer = text_transformer

    def render(self, tokens: Sequence[Token]) -> str:
        """Render top-level tokens to an HTML string.

        Footnote definitions among ``tokens`` are rendered in a closing
        section, in the order they were first referenced.
        """
        ctx = RenderContext(footnotes=collect_footnotes(tokens))
        sb = StringBuilder()
        for token in tokens:
            self._render_block(token, sb, ctx)
        if ctx.footnotes.referenced():
            self._render_footnotes_section(sb, ctx)
        return sb.build()

    # =========================================================================
    # Block rendering
    # =========================================================================

    def _render_blocks(self, blocks: Sequence[Token], sb: StringBuilder, ctx: RenderContext) -> None:
        for block in blocks:
            self._render_block(block, sb, ctx)

    def _render_block(self, block: Token, sb: StringBuilder, ctx: RenderContext) -> None:
        match block:
            case Space() | FootnoteDefinition():
                pass
            case Paragraph():
                sb.append("<p>")
                self._render_inlines(block.children, sb, ctx)
                sb.append("</p>\n")
            case Heading():
                sb.append(f"<h{block.depth}>")
                self._render_inlines(block.children, sb, ctx)
                sb.append(f"</h{block.depth}>\n")
            case Code():
                self._render_code(block, sb)
            case Blockquote():
                sb.append("<blockquote>\n")
                self._render_blocks(block.children, sb, ctx)
                sb.append("</blockquote>\n")
            case Html():
                sb.append(block.text).append("\n")
            case Hr():
                sb.append("<hr />\n")
            case List():
                self._render_list(block, sb, ctx)
            case ListItem():
                # Should be rendered by its list, but handle standalone
                self._render_list_item(block, sb, ctx, tight=not block.loose, value=None)
            case Table():
                self._render_table(block, sb, ctx)
            case Align():
                sb.append(f'<div style="text-align: {block.align}">\n')
                self._render_blocks(block.children, sb, ctx)
                sb.append("</div>\n")
            case DescriptionList():
                sb.append("<dl>\n")
                for item in block.items:
                    sb.append("<dt>")
                    self._render_inlines(item.term_children, sb, ctx)
                    sb.append("</dt>\n<dd>")
                    self._render_inlines(item.detail_children, sb, ctx)
                    sb.append("</dd>\n")
                sb.append("</dl>\n")
            case Mdx():
                self._render_mdx(block, sb, ctx)
            case MathBlock():
                sb.append('<div class="math math-display">\n')
                sb.append(html_escape(block.text))
                sb.append("\n</div>\n")
            case Alert():
                sb.append(f'<div class="alert alert-{block.variant}">\n')
                sb.append(f'<p class="alert-title">{_ALERT_TITLES[block.variant]}</p>\n')
                self._render_blocks(block.children, sb, ctx)
                sb.append("</div>\n")
            case Text():
                # Degraded input: keep it visible
                sb.append("<p>").append(html_escape(block.raw)).append("</p>\n")
            case _:
                self._render_unknown(block, sb)

    def _render_code(self, code: Code, sb: StringBuilder) -> None:
        lang_class = f' class="language-{html_escape(code.lang)}"' if code.lang else ""
        pending = "" if code.closed else ' data-streaming="true"'
        sb.append(f"<pre{pending}><code{lang_class}>")
        sb.append(html_escape(code.text + "\n" if code.text else ""))
        sb.append("</code></pre>\n")

    def _render_list(self, lst: List, sb: StringBuilder, ctx: RenderContext) -> None:
        if lst.ordered:
            type_attr = f' type="{_OL_TYPES[lst.list_type]}"' if lst.list_type in _OL_TYPES else ""
            start_attr = f' start="{lst.start}"' if lst.start not in (None, 1) else ""
            sb.append(f"<ol{type_attr}{start_attr}>\n")
        else:
            sb.append("<ul>\n")

        for item in lst.items:
            self._render_list_item(item, sb, ctx, tight=not lst.loose, value=item.value if lst.skipped else None)

        sb.append("</ol>\n" if lst.ordered else "</ul>\n")

    def _render_list_item(
        self, item: ListItem, sb: StringBuilder, ctx: RenderContext, tight: bool, value: int | None
    ) -> None:
        """Render list item.

        Tight lists render a leading paragraph as bare text; loose lists wrap
        every paragraph in <p> tags.
        """
        sb.append("<li>" if value is None else f'<li value="{value}">')
        if item.task:
            checked = " checked" if item.checked else ""
            sb.append(f'<input type="checkbox" disabled{checked} /> ')

        children = [child for child in item.children if not isinstance(child, Space)]
        if not children:
            pass
        elif tight and isinstance(children[0], Paragraph):
            self._render_inlines(children[0].children, sb, ctx)
            if len(children) > 1:
                sb.append("\n")
                self._render_blocks(children[1:], sb, ctx)
        else:
            sb.append("\n")
            self._render_blocks(children, sb, ctx)

        sb.append("</li>\n")

    def _render_table(self, table: Table, sb: StringBuilder, ctx: RenderContext) -> None:
        sb.append("<table>\n")
        for tag, rows in (("thead", table.head), ("tbody", table.body), ("tfoot", table.foot)):
            if not rows:
                continue
            sb.append(f"<{tag}>\n")
            for row in rows:
                self._render_table_row(row, sb, ctx)
            sb.append(f"</{tag}>\n")
        sb.append("</table>\n")

    def _render_table_row(self, row: TableRow, sb: StringBuilder, ctx: RenderContext) -> None:
        sb.append("<tr>\n")
        for cell in row.cells:
            if cell.hidden:
                continue
            tag = "th" if cell.header else "td"
            attrs = ""
            if cell.colspan > 1:
                attrs += f' colspan="{cell.colspan}"'
            if cell.rowspan > 1:
                attrs += f' rowspan="{cell.rowspan}"'
            if cell.align:
                attrs += f' style="text-align: {cell.align}"'
            sb.append(f"<{tag}{attrs}>")
            self._render_inlines(cell.children, sb, ctx)
            sb.append(f"</{tag}>\n")
        sb.append("</tr>\n")

    def _render_mdx(self, mdx: Mdx, sb: StringBuilder, ctx: RenderContext) -> None:
        """Render a component as a placeholder element the host hydrates."""
        props = html_escape(json.dumps(mdx.attrs, sort_keys=True))
        sb.append(f'<div data-component="{html_escape(mdx.tag_name)}" data-props="{props}">')
        if mdx.children:
            sb.append("\n")
            self._render_blocks(mdx.children, sb, ctx)
        sb.append("</div>\n")

    def _render_unknown(self, token: Token, sb: StringBuilder) -> None:
        logger.debug("No HTML rendering for token kind %r", token.kind)
        sb.append(html_escape(token.raw))

    # =========================================================================
    # Inline rendering
    # =========================================================================

    def _render_inlines(self, inlines: Sequence[Inline], sb: StringBuilder, ctx: RenderContext) -> None:
        for inline in inlines:
            self._render_inline(inline, sb, ctx)

    def _render_inline(self, inline: Inline, sb: StringBuilder, ctx: RenderContext) -> None:
        match inline:
            case Text():
                text = inline.text
                if self._text_transformer:
                    text = self._text_transformer(text)
                sb.append(html_escape(text))
            case Escape():
                sb.append(html_escape(inline.text))
            case Strong():
                self._wrap("strong", inline.children, sb, ctx)
            case Em():
                self._wrap("em", inline.children, sb, ctx)
            case Del():
                self._wrap("del", inline.children, sb, ctx)
            case Sub():
                self._wrap("sub", inline.children, sb, ctx)
            case Sup():
                self._wrap("sup", inline.children, sb, ctx)
            case Codespan():
                sb.append("<code>").append(html_escape(inline.text)).append("</code>")
            case Br():
                sb.append("<br />\n")
            case Link():
                if inline.href == INCOMPLETE_LINK:
                    sb.append('<span class="link pending">')
                    self._render_inlines(inline.children, sb, ctx)
                    sb.append("</span>")
                    return
                href = html_escape(_encode_url(inline.href))
                title = f' title="{html_escape(inline.title)}"' if inline.title else ""
                sb.append(f'<a href="{href}"{title}>')
                self._render_inlines(inline.children, sb, ctx)
                sb.append("</a>")
            case Image():
                alt = html_escape(inline.text)
                if inline.href == INCOMPLETE_IMAGE:
                    sb.append(f'<span class="image pending">{alt}</span>')
                    return
                src = html_escape(_encode_url(inline.href))
                title = f' title="{html_escape(inline.title)}"' if inline.title else ""
                sb.append(f'<img src="{src}" alt="{alt}"{title} />')
            case InlineHtml():
                sb.append(inline.text)
            case Citation():
                sb.append('<span class="citation">')
                sb.append(", ".join(f"<cite>{html_escape(key)}</cite>" for key in inline.keys))
                sb.append("</span>")
            case Math():
                display = " math-display" if inline.display else ""
                sb.append(f'<span class="math{display}">').append(html_escape(inline.text)).append("</span>")
            case FootnoteRef():
                self._render_footnote_ref(inline, sb, ctx)
            case _:
                self._render_unknown(inline, sb)

    def _wrap(self, tag: str, children: Sequence[Inline], sb: StringBuilder, ctx: RenderContext) -> None:
        sb.append(f"<{tag}>")
        self._render_inlines(children, sb, ctx)
        sb.append(f"</{tag}>")

    # =========================================================================
    # Footnotes
    # =========================================================================

    def _render_footnote_ref(self, ref: FootnoteRef, sb: StringBuilder, ctx: RenderContext) -> None:
        label = ref.label
        number = ctx.footnotes.number(label)
        if number is None:
            # Undefined yet, or a placeholder such as INCOMPLETE_FOOTNOTE
            sb.append('<sup class="footnote-ref pending">').append(html_escape(ref.raw)).append("</sup>")
            return
        count = ctx.ref_counts.get(label, 0) + 1
        ctx.ref_counts[label] = count
        esc = html_escape(label)
        sb.append(f'<sup class="footnote-ref"><a href="#fn-{esc}" id="fnref-{esc}-{count}">{number}</a></sup>')

    def _render_footnotes_section(self, sb: StringBuilder, ctx: RenderContext) -> None:
        sb.append('<section class="footnotes">\n<ol>\n')
        for definition in ctx.footnotes.referenced():
            esc = html_escape(definition.label)
            sb.append(f'<li id="fn-{esc}">\n')
            self._render_blocks(definition.children, sb, ctx)
            sb.append(f'<a href="#fnref-{esc}-1">↩</a>\n')
            sb.append("</li>\n")
        sb.append("</ol>\n</section>\n")
