"""Tests for MarkdownStream, the incremental buffer."""

from collections.abc import Sequence

from arroyo import MarkdownStream, parse_blocks
from arroyo.tokens import FootnoteDefinition, Paragraph, Strong, Text, Token


class CountingRenderer:
    """Minimal TokenRenderer that reports how many tokens it saw."""

    def render(self, tokens: Sequence[Token]) -> str:
        return str(len(tokens))


class TestAppend:
    """Chunk accumulation and repair."""

    def test_append_returns_repaired_tokens(self) -> None:
        """An open emphasis is closed before tokenizing."""
        stream = MarkdownStream()
        (paragraph,) = stream.append("Some **bo")
        assert isinstance(paragraph, Paragraph)
        assert isinstance(paragraph.children[-1], Strong)
        assert stream.text == "Some **bo"
        assert stream.repaired_text == "Some **bo**"

    def test_chunks_accumulate(self) -> None:
        """Later chunks continue the same buffer."""
        stream = MarkdownStream()
        stream.append("Some **bo")
        (paragraph,) = stream.append("ld** text")
        assert stream.text == "Some **bold** text"
        assert [type(child) for child in paragraph.children] == [Text, Strong, Text]

    def test_empty_chunk(self) -> None:
        """An empty chunk changes nothing."""
        stream = MarkdownStream()
        first = stream.append("# Title")
        assert stream.append("") == first

    def test_matches_one_shot(self) -> None:
        """Streaming in pieces ends where tokenizing the whole text does."""
        text = "# T\n\nSome *text* and `code`\n\n- a\n- b\n"
        stream = MarkdownStream()
        for char in text:
            stream.append(char)
        whole = MarkdownStream()
        assert stream.append("") == whole.append(text)

    def test_newlines_normalized(self) -> None:
        """CRLF input is read as LF."""
        stream = MarkdownStream()
        stream.append("a\r\nb")
        assert stream.repaired_text == "a\nb"


class TestOutputs:
    """Blocks, HTML and reset."""

    def test_blocks_cover_repaired_text(self) -> None:
        """Block raws concatenate to the repaired buffer."""
        stream = MarkdownStream()
        stream.append("# T\n\npara *open")
        blocks = stream.blocks()
        assert blocks == ["# T\n", "\n", "para *open*"]
        assert "".join(blocks) == stream.repaired_text
        assert blocks == parse_blocks(stream.repaired_text)

    def test_html_closes_fence(self) -> None:
        """An open fence renders as a finished code block."""
        stream = MarkdownStream()
        stream.append("```py\nprint(1)")
        assert stream.html() == '<pre><code class="language-py">print(1)\n</code></pre>\n'

    def test_footnotes(self) -> None:
        """Definitions are left out of tokens() but rendered by html()."""
        stream = MarkdownStream()
        tokens = stream.append("x[^1]\n\n[^1]: note")
        assert not any(isinstance(token, FootnoteDefinition) for token in tokens)
        assert '<section class="footnotes">' in stream.html()

    def test_custom_renderer(self) -> None:
        """Any object with render() can be plugged in."""
        stream = MarkdownStream(renderer=CountingRenderer())
        stream.append("a\n\nb")
        assert stream.html() == "3"

    def test_clear(self) -> None:
        """clear() empties the buffer."""
        stream = MarkdownStream()
        stream.append("text")
        stream.clear()
        assert stream.text == ""
        assert stream.tokens() == []
        assert stream.blocks() == []
