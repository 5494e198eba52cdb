"""Tests for the built-in block extensions: hr, align, dl, mdx, alert, math
blocks and footnote definitions. Lists and tables have their own modules.
"""

import pytest

from arroyo import Lexer, lex
from arroyo.extensions.builtins.mdx import parse_attribute_value
from arroyo.tokens import (
    Alert,
    Align,
    Description,
    DescriptionList,
    FootnoteDefinition,
    Heading,
    Hr,
    MathBlock,
    Mdx,
    Paragraph,
    Strong,
    Text,
)

# =============================================================================
# Horizontal rules
# =============================================================================


class TestHr:
    """Thematic breaks."""

    @pytest.mark.parametrize("line", ["---", "***", "___", "- - -", " * * * *", "-----"])
    def test_rules(self, line: str) -> None:
        """Three or more of one marker, optionally spaced."""
        (token,) = lex(line)
        assert isinstance(token, Hr)

    def test_consumes_line_terminator(self) -> None:
        """The newline after the rule belongs to it."""
        tokens = Lexer().block_tokens("---\ntext")
        assert tokens[0] == Hr(raw="---\n")
        assert isinstance(tokens[1], Paragraph)

    @pytest.mark.parametrize("line", ["--", "-*-", "--- a"])
    def test_not_rules(self, line: str) -> None:
        """Mixed markers or trailing text are not rules."""
        assert not any(isinstance(token, Hr) for token in lex(line))


# =============================================================================
# Alignment
# =============================================================================


class TestAlign:
    """[center] and [right] blocks."""

    def test_center(self) -> None:
        """Content between the tags is tokenized as blocks."""
        (token,) = lex("[center]\n# Title\n\n**bold**\n[/center]")
        assert isinstance(token, Align)
        assert token.align == "center"
        assert [child.kind for child in token.children] == ["heading", "space", "paragraph"]

    def test_right(self) -> None:
        """[right] works the same way."""
        (token,) = lex("[right]\ntext\n[/right]")
        assert isinstance(token, Align)
        assert token.align == "right"
        assert token.text == "text"

    def test_first_closer_wins(self) -> None:
        """The closing tag search is non-greedy."""
        tokens = lex("[center]\na\n[/center]\n\n[center]\nb\n[/center]")
        assert [token.text for token in tokens] == ["a", "b"]

    def test_unclosed_is_text(self) -> None:
        """Without a closer the opener is literal text."""
        (token,) = lex("[center]\nstill streaming")
        assert isinstance(token, Paragraph)
        assert token.text == "[center]\nstill streaming"

    def test_empty_block(self) -> None:
        """An opener directly followed by its closer is an empty block."""
        (token,) = lex("[center]\n[/center]")
        assert isinstance(token, Align)
        assert token.children == ()

    def test_interrupts_paragraph(self) -> None:
        """No blank line is needed before an alignment block."""
        kinds = [token.kind for token in lex("intro\n[right]\nx\n[/right]")]
        assert kinds == ["paragraph", "align"]


# =============================================================================
# Description lists
# =============================================================================


class TestDescriptionList:
    """:term:detail runs."""

    def test_run_is_one_token(self) -> None:
        """Contiguous lines form one list."""
        (token,) = lex(":Speed: 120 km/h\n:Range: **450 km**")
        assert isinstance(token, DescriptionList)
        assert [(item.term, item.detail) for item in token.items] == [
            ("Speed", "120 km/h"),
            ("Range", "**450 km**"),
        ]

    def test_inline_children(self) -> None:
        """Term and detail are tokenized as inline content."""
        (token,) = lex(":*Term*: **detail**")
        (item,) = token.items
        assert isinstance(item, Description)
        assert item.term_children[0].kind == "em"
        assert isinstance(item.detail_children[0], Strong)

    def test_run_ends_at_non_matching_line(self) -> None:
        """A line without the pattern ends the list."""
        kinds = [token.kind for token in lex(":a: b\nplain text")]
        assert kinds == ["description_list", "paragraph"]

    def test_item_raws_cover_list(self) -> None:
        """Each item carries its own line."""
        (token,) = lex(":a: 1\n:b: 2\n")
        assert "".join(item.raw for item in token.items) == token.raw

    def test_requires_term(self) -> None:
        """::detail is not a description."""
        assert not any(isinstance(token, DescriptionList) for token in lex(":: detail"))


# =============================================================================
# MDX components
# =============================================================================


class TestMdx:
    """Capitalized component tags."""

    def test_self_closing_attributes(self) -> None:
        """Strings, numbers and booleans are typed."""
        (token,) = lex('<Chart type="bar" height={300} ratio={1.5} animate={true} hidden={false} data={rows}/>')
        assert isinstance(token, Mdx)
        assert token.self_closing
        assert token.attrs == {
            "type": "bar",
            "height": 300,
            "ratio": 1.5,
            "animate": True,
            "hidden": False,
            "data": "rows",
        }

    def test_paired_children(self) -> None:
        """Inner content is tokenized as blocks."""
        (token,) = lex('<Card title="Hi">\n# Heading\n\nBody **text**\n</Card>')
        assert isinstance(token, Mdx)
        assert token.tag_name == "Card"
        assert token.attributes == (("title", "Hi"),)
        assert isinstance(token.children[0], Heading)
        assert isinstance(token.children[-1], Paragraph)

    def test_same_name_nesting(self) -> None:
        """The closing search counts nested tags of the same name."""
        source = '<Foo a="1"><Foo></Foo></Foo>'
        (token,) = lex(source)
        assert isinstance(token, Mdx)
        assert token.raw == source
        (inner,) = token.children
        assert isinstance(inner, Mdx)
        assert inner.raw == "<Foo></Foo>"
        assert inner.children == ()

    def test_unclosed_is_not_component(self) -> None:
        """A component still waiting for its closer is not matched."""
        assert not any(isinstance(token, Mdx) for token in lex("<Card>\nstreaming"))

    def test_lowercase_is_html(self) -> None:
        """Lowercase tags stay HTML."""
        (token,) = lex("<div>x</div>")
        assert token.kind == "html"

    def test_text_kept_untrimmed(self) -> None:
        """text is the raw inner content."""
        (token,) = lex("<Note>\n hi \n</Note>")
        assert token.text == "\n hi \n"

    @pytest.mark.parametrize(
        ("quoted", "expression", "expected"),
        [
            ("42", None, "42"),
            (None, "42", 42),
            (None, "-3.25", -3.25),
            (None, " true ", True),
            (None, "a + b", "a + b"),
        ],
    )
    def test_attribute_values(self, quoted: str | None, expression: str | None, expected: object) -> None:
        """Quoted values stay strings; expressions are converted."""
        assert parse_attribute_value(quoted, expression) == expected


# =============================================================================
# Alerts
# =============================================================================


class TestAlert:
    """GitHub-style alert blockquotes."""

    @pytest.mark.parametrize("label", ["NOTE", "TIP", "IMPORTANT", "WARNING", "CAUTION", "note", "Warning"])
    def test_variants(self, label: str) -> None:
        """All five labels are recognized case-insensitively."""
        (token,) = lex(f"> [!{label}]\n> Body text")
        assert isinstance(token, Alert)
        assert token.variant == label.lower()
        assert token.text == "Body text"

    def test_emphasized_label(self) -> None:
        """The label may be wrapped in emphasis markers."""
        (token,) = lex("> **[!TIP]**\n> Use it")
        assert isinstance(token, Alert)
        assert token.variant == "tip"

    def test_children_are_blocks(self) -> None:
        """The body is re-tokenized."""
        (token,) = lex("> [!NOTE]\n> # Title\n> - item")
        assert [child.kind for child in token.children] == ["heading", "list"]

    def test_plain_blockquote(self) -> None:
        """Unknown labels leave a plain blockquote."""
        (token,) = lex("> [!INFO]\n> text")
        assert token.kind == "blockquote"


# =============================================================================
# Math blocks
# =============================================================================


class TestMathBlock:
    """$$ blocks."""

    def test_multiline(self) -> None:
        """$$ lines enclose the content."""
        (token,) = lex("$$\na^2 + b^2\n= c^2\n$$")
        assert isinstance(token, MathBlock)
        assert token.text == "a^2 + b^2\n= c^2"

    def test_single_line(self) -> None:
        """A line that is entirely $$...$$ is a block."""
        (token,) = lex("$$ E = mc^2 $$")
        assert isinstance(token, MathBlock)
        assert token.text == "E = mc^2"

    def test_unclosed_is_not_block(self) -> None:
        """A block still streaming stays text until repaired."""
        assert not any(isinstance(token, MathBlock) for token in lex("$$\nx"))

    def test_interrupts_paragraph(self) -> None:
        """A $$ block may follow a paragraph line directly."""
        kinds = [token.kind for token in lex("where\n$$\nx\n$$")]
        assert kinds == ["paragraph", "math_block"]


# =============================================================================
# Footnote definitions
# =============================================================================


class TestFootnoteDefinition:
    """[^label]: text definitions."""

    def test_definition(self) -> None:
        """Definitions carry their label and block children."""
        tokens = Lexer().block_tokens("[^note]: A **short** note.")
        (definition,) = tokens
        assert isinstance(definition, FootnoteDefinition)
        assert definition.label == "note"
        assert definition.text == "A **short** note."
        assert isinstance(definition.children[0], Paragraph)

    def test_indented_continuation(self) -> None:
        """Four-space indented lines continue the definition."""
        (definition,) = Lexer().block_tokens("[^1]: First line.\n\n    Second paragraph.")
        assert definition.text == "First line.\n\nSecond paragraph."
        assert [child.kind for child in definition.children] == ["paragraph", "space", "paragraph"]

    def test_lex_leaves_definitions_out(self) -> None:
        """lex() returns content blocks only."""
        tokens = lex("Text[^1]\n\n[^1]: Note")
        assert [token.kind for token in tokens] == ["paragraph"]

    def test_unindented_line_ends_definition(self) -> None:
        """Text at column zero is a new block."""
        tokens = Lexer().block_tokens("[^1]: Note\nNext")
        assert isinstance(tokens[0], FootnoteDefinition)
        assert tokens[1] == Paragraph(raw="Next", text="Next", children=(Text(raw="Next", text="Next"),))
