"""Tests for the HTML renderer and the one-shot render() helper."""

import pytest

from arroyo import HtmlRenderer, Lexer, lex, render
from arroyo.tokens import Custom, Paragraph, Text


def to_html(source: str) -> str:
    return HtmlRenderer().render(Lexer().block_tokens(source))


# =============================================================================
# Baseline markdown
# =============================================================================


class TestBaseline:
    """Core CommonMark constructs."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("# Hello **World**", "<h1>Hello <strong>World</strong></h1>\n"),
            ("a\n\nb", "<p>a</p>\n<p>b</p>\n"),
            ("> hi", "<blockquote>\n<p>hi</p>\n</blockquote>\n"),
            ("---", "<hr />\n"),
            ("<div>x</div>", "<div>x</div>\n"),
            ("a < b & c", "<p>a &lt; b &amp; c</p>\n"),
            ("`a<b`", "<p><code>a&lt;b</code></p>\n"),
            ("\\*not em\\*", "<p>*not em*</p>\n"),
            ("~~gone~~", "<p><del>gone</del></p>\n"),
            ("a<br>b", "<p>a<br />\nb</p>\n"),
        ],
    )
    def test_blocks_and_inlines(self, source: str, expected: str) -> None:
        """Each construct renders to its HTML element."""
        assert to_html(source) == expected

    def test_fenced_code(self) -> None:
        """The info string becomes a language class."""
        assert to_html("```py\nprint(1)\n```") == '<pre><code class="language-py">print(1)\n</code></pre>\n'

    def test_unclosed_fence_marked_streaming(self) -> None:
        """A fence still open at end of input is flagged."""
        html = render("```py\nx", repair=False)
        assert html == '<pre data-streaming="true"><code class="language-py">x\n</code></pre>\n'

    def test_link_with_title(self) -> None:
        """Links keep their title."""
        html = to_html('[x](https://example.com "T")')
        assert html == '<p><a href="https://example.com" title="T">x</a></p>\n'

    def test_url_encoding(self) -> None:
        """Non-ASCII characters in hrefs are percent-encoded."""
        assert 'href="https://e.com/a?q=%C3%BC"' in to_html("[x](https://e.com/a?q=ü)")

    def test_image(self) -> None:
        """Images render as img tags."""
        assert to_html("![alt](/i.png)") == '<p><img src="/i.png" alt="alt" /></p>\n'


# =============================================================================
# Extensions
# =============================================================================


class TestExtensions:
    """Built-in extension tokens."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("[center]\nHi\n[/center]", '<div style="text-align: center">\n<p>Hi</p>\n</div>\n'),
            (":a: b", "<dl>\n<dt>a</dt>\n<dd>b</dd>\n</dl>\n"),
            ("$$\nx < y\n$$", '<div class="math math-display">\nx &lt; y\n</div>\n'),
            ("$x$", '<p><span class="math">x</span></p>\n'),
            ("H~2~O", "<p>H<sub>2</sub>O</p>\n"),
            ("x^2^", "<p>x<sup>2</sup></p>\n"),
            ("[1] [2]", '<p><span class="citation"><cite>1</cite>, <cite>2</cite></span></p>\n'),
            (
                "> [!WARNING]\n> Careful",
                '<div class="alert alert-warning">\n<p class="alert-title">Warning</p>\n<p>Careful</p>\n</div>\n',
            ),
        ],
    )
    def test_extension_tokens(self, source: str, expected: str) -> None:
        """Each extension has an HTML form."""
        assert to_html(source) == expected

    def test_mdx_placeholder(self) -> None:
        """Components become placeholder elements carrying JSON props."""
        html = to_html('<Chart type="bar" height={300}/>')
        assert html == (
            '<div data-component="Chart" '
            'data-props="{&quot;height&quot;: 300, &quot;type&quot;: &quot;bar&quot;}"></div>\n'
        )

    def test_mdx_children(self) -> None:
        """Paired components render their children inside."""
        assert to_html("<Note>\nHi\n</Note>") == '<div data-component="Note" data-props="{}">\n<p>Hi</p>\n</div>\n'


class TestLists:
    """List attributes."""

    def test_start(self) -> None:
        """A start other than 1 is emitted."""
        assert to_html("3. a\n4. b") == '<ol start="3">\n<li>a</li>\n<li>b</li>\n</ol>\n'

    def test_type(self) -> None:
        """Alphabetic and roman lists set the type attribute."""
        assert to_html("a. x\nb. y") == '<ol type="a">\n<li>x</li>\n<li>y</li>\n</ol>\n'
        assert to_html("I. x\nII. y").startswith('<ol type="I">')

    def test_skipped_numbers_set_values(self) -> None:
        """Items of a list with gaps carry explicit values."""
        assert to_html("1. a\n3. b") == '<ol>\n<li value="1">a</li>\n<li value="3">b</li>\n</ol>\n'

    def test_task(self) -> None:
        """Task items render a disabled checkbox."""
        assert to_html("- [x] done") == '<ul>\n<li><input type="checkbox" disabled checked /> done</li>\n</ul>\n'

    def test_loose(self) -> None:
        """Loose items wrap paragraphs."""
        assert to_html("- a\n\n- b") == "<ul>\n<li>\n<p>a</p>\n</li>\n<li>\n<p>b</p>\n</li>\n</ul>\n"


class TestTables:
    """Table markup."""

    def test_alignment(self) -> None:
        """Alignment becomes an inline style on every cell."""
        html = to_html("| a | b |\n|:--|--:|\n| 1 | 2 |")
        assert html == (
            "<table>\n<thead>\n<tr>\n"
            '<th style="text-align: left">a</th>\n<th style="text-align: right">b</th>\n'
            "</tr>\n</thead>\n<tbody>\n<tr>\n"
            '<td style="text-align: left">1</td>\n<td style="text-align: right">2</td>\n'
            "</tr>\n</tbody>\n</table>\n"
        )

    def test_spans(self) -> None:
        """Spans become attributes and hidden cells are skipped."""
        html = to_html("| h || x |\n|---|---|---|\n| a | b | c |\n| ^ | d | e |")
        assert '<th colspan="2">h</th>' in html
        assert '<td rowspan="2">a</td>' in html
        assert html.count("<td") == 5


# =============================================================================
# Streaming placeholders and footnotes
# =============================================================================


class TestPending:
    """Placeholders left by the repairer."""

    def test_pending_link(self) -> None:
        """A half-streamed link is not clickable."""
        assert render("Visit [GitHub") == '<p>Visit <span class="link pending">GitHub</span></p>\n'

    def test_pending_image(self) -> None:
        """A half-streamed image shows its alt text."""
        assert render("![alt") == '<p><span class="image pending">alt</span></p>\n'

    def test_pending_footnote(self) -> None:
        """A reference with an unfinished label stays pending."""
        assert render("Text[^") == '<p>Text<sup class="footnote-ref pending">[^arroyo:incomplete-footnote]</sup></p>\n'

    def test_render_repairs(self) -> None:
        """render() closes open constructs first."""
        assert render("Hello *world") == "<p>Hello <em>world</em></p>\n"


class TestFootnotes:
    """Footnote references and the closing section."""

    def test_numbered_in_reference_order(self) -> None:
        """Numbers follow first reference, not definition order."""
        html = to_html("A[^b] and B[^a].\n\n[^a]: Alpha.\n[^b]: Beta.")
        assert html.startswith(
            '<p>A<sup class="footnote-ref"><a href="#fn-b" id="fnref-b-1">1</a></sup>'
            ' and B<sup class="footnote-ref"><a href="#fn-a" id="fnref-a-1">2</a></sup>.</p>\n'
        )
        assert '<section class="footnotes">' in html
        assert html.index('<li id="fn-b">') < html.index('<li id="fn-a">')
        assert '<p>Beta.</p>\n<a href="#fnref-b-1">↩</a>' in html

    def test_repeated_reference_ids(self) -> None:
        """Repeated references get distinct ids."""
        html = to_html("x[^1] y[^1]\n\n[^1]: Note")
        assert 'id="fnref-1-1"' in html
        assert 'id="fnref-1-2"' in html

    def test_undefined_reference(self) -> None:
        """References without definitions render pending and add no section."""
        html = to_html("x[^nope]")
        assert html == '<p>x<sup class="footnote-ref pending">[^nope]</sup></p>\n'

    def test_unreferenced_definition(self) -> None:
        """Definitions nobody references are not rendered."""
        assert to_html("text\n\n[^a]: Alpha.") == "<p>text</p>\n"


# =============================================================================
# Host hooks
# =============================================================================


class TestHostHooks:
    """Custom tokens and text transformation."""

    def test_custom_block_renders_raw(self) -> None:
        """Unknown kinds fall back to escaped raw text."""
        assert HtmlRenderer().render([Custom(raw="<@ana>", name="mention")]) == "&lt;@ana&gt;"

    def test_custom_inline_renders_raw(self) -> None:
        """The fallback applies inside paragraphs too."""
        paragraph = Paragraph(raw="@a&b", text="@a&b", children=(Custom(raw="@a&b", name="mention"),))
        assert HtmlRenderer().render([paragraph]) == "<p>@a&amp;b</p>\n"

    def test_degraded_text_block(self) -> None:
        """A text token at block level stays visible."""
        assert HtmlRenderer().render([Text(raw="<x>", text="<x>")]) == "<p>&lt;x&gt;</p>\n"

    def test_text_transformer(self) -> None:
        """The transformer sees plain text only."""
        renderer = HtmlRenderer(text_transformer=str.upper)
        assert renderer.render(lex("hi *there* `code`")) == "<p>HI <em>THERE</em> <code>code</code></p>\n"
