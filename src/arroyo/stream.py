"""Streaming buffer for progressively generated markdown.

The buffer accumulates chunks (typically tokens from a generating model) and,
whenever it is read, repairs the whole buffer and tokenizes it from scratch:

    stream = MarkdownStream()
    for chunk in response:
        tokens = stream.append(chunk)
        render(tokens)

Re-tokenizing everything keeps the result identical to tokenizing the final
text in one go. Hosts that want to avoid re-rendering unchanged blocks can
memoize on blocks(), the raw text of each top-level block; every block but
the last is stable once a later block has started.

Thread Safety:
A MarkdownStream is mutable and belongs to one producer. The registry and
renderer it holds are safe to share.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from arroyo.lexer.core import Lexer, normalize_newlines
from arroyo.renderers.html import HtmlRenderer
from arroyo.repair import repair_incomplete_markdown
from arroyo.tokens import FootnoteDefinition, Space

if TYPE_CHECKING:
    from arroyo.extensions.registry import ExtensionRegistry
    from arroyo.renderers.protocol import TokenRenderer
    from arroyo.tokens import Block


class MarkdownStream:
    """Accumulates streamed markdown and tokenizes its repaired form.

    Usage:
        >>> stream = MarkdownStream()
        >>> _ = stream.append("Some **bo")
        >>> stream.repaired_text
        'Some **bo**'
        >>> [t.kind for t in stream.append("ld** text")]
        ['paragraph']

    """

    __slots__ = ("_registry", "_renderer", "_chunks", "_repaired", "_blocks")

    def __init__(self, registry: ExtensionRegistry | None = None, renderer: TokenRenderer | None = None) -> None:
        self._registry = registry
        self._renderer: TokenRenderer = renderer if renderer is not None else HtmlRenderer()
        self._chunks: list[str] = []
        self._repaired: str | None = None
        self._blocks: list[Block] | None = None

    def append(self, chunk: str) -> list[Block]:
        """Add a chunk and return the tokens of the repaired buffer."""
        if chunk:
            self._chunks.append(chunk)
            self._repaired = None
            self._blocks = None
        return self.tokens()

    @property
    def text(self) -> str:
        """Everything received so far, unmodified."""
        return "".join(self._chunks)

    @property
    def repaired_text(self) -> str:
        """The buffer with closers appended for unterminated constructs."""
        if self._repaired is None:
            self._repaired = repair_incomplete_markdown(normalize_newlines(self.text))
        return self._repaired

    def _block_tokens(self) -> list[Block]:
        if self._blocks is None:
            self._blocks = Lexer(self._registry).block_tokens(self.repaired_text)
        return self._blocks

    def tokens(self) -> list[Block]:
        """Top-level tokens, without blank lines and footnote definitions."""
        return [t for t in self._block_tokens() if not isinstance(t, (Space, FootnoteDefinition))]

    def blocks(self) -> list[str]:
        """Raw text of every top-level block of the repaired buffer."""
        return [t.raw for t in self._block_tokens()]

    def html(self) -> str:
        """Render the repaired buffer, footnotes included."""
        return self._renderer.render(self._block_tokens())

    def clear(self) -> None:
        self._chunks.clear()
        self._repaired = None
        self._blocks = None
