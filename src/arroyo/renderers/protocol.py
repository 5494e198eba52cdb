"""TokenRenderer protocol: stable interface for token renderers.

Any renderer that implements ``render(tokens) -> str`` conforms to this
protocol. The built-in ``HtmlRenderer`` is the reference implementation;
hosts plug in their own (a terminal renderer, a component tree) through
``MarkdownStream(renderer=...)``.

Example:
    from arroyo.renderers.protocol import TokenRenderer

    def render_buffer(renderer: TokenRenderer, tokens: list[Block]) -> str:
        return renderer.render(tokens)

"""

from collections.abc import Sequence
from typing import Protocol

from arroyo.tokens import Token


class TokenRenderer(Protocol):
    """Protocol for token renderers.

    Implementations must accept a sequence of top-level block tokens and
    return a rendered string. Kinds a renderer does not know should be
    rendered from their ``raw`` text rather than dropped.

    """

    def render(self, tokens: Sequence[Token]) -> str:
        """Render block tokens to a string.

        Args:
            tokens: Top-level tokens, as returned by Lexer.block_tokens().

        Returns:
            Rendered string output.

        """
        ...
