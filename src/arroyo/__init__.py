"""
arroyo: streaming markdown tokenizer and repairer.

Renders markdown that is still arriving (for example the output of a
generating language model) by closing whatever the buffer leaves open and
tokenizing the result with an extensible rule pipeline. Zero runtime
dependencies.

Quick Start:
    >>> from arroyo import lex, repair_incomplete_markdown
    >>> repair_incomplete_markdown("Some **bold")
    'Some **bold**'
    >>> [t.kind for t in lex("[center]\\nHi\\n[/center]")]
    ['align']

    >>> # Or stream chunks
    >>> from arroyo import MarkdownStream
    >>> stream = MarkdownStream()
    >>> _ = stream.append("```py\\nprint(1)")
    >>> stream.html()
    '<pre><code class="language-py">print(1)\\n</code></pre>\\n'

Custom Rules:
    >>> from arroyo import Extension, Level, create_registry_with_defaults
    >>>
    >>> builder = create_registry_with_defaults()
    >>> builder.register(Extension("mention", Level.INLINE, tokenize_mention, start_chars=frozenset("@")))
    >>> tokens = lex("hi @ana", registry=builder.build())

"""

from collections.abc import Sequence

from arroyo.config import (
    LexConfig,
    get_lex_config,
    lex_config_context,
    reset_lex_config,
    set_lex_config,
)
from arroyo.errors import ArroyoError, ExtensionError, RegistryError
from arroyo.extensions import (
    Extension,
    ExtensionRegistry,
    ExtensionRegistryBuilder,
    Level,
    Tokenizer,
    create_default_registry,
    create_registry_with_defaults,
    default_extensions,
)
from arroyo.lexer import Lexer, lex, lex_inline, normalize_newlines, parse_blocks
from arroyo.renderers import HtmlRenderer, TokenRenderer
from arroyo.repair import repair_incomplete_markdown
from arroyo.serialization import from_dict, from_json, to_dict, to_json
from arroyo.stream import MarkdownStream
from arroyo.tokens import (
    Alert,
    Align,
    Block,
    Blockquote,
    Br,
    Citation,
    Code,
    Codespan,
    Custom,
    Del,
    Description,
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
    TableCell,
    TableRow,
    Text,
    Token,
)
from arroyo.walk import FootnoteIndex, child_tokens, collect_footnotes, walk

__version__ = "0.1.0"


def render(
    text: str,
    *,
    registry: ExtensionRegistry | None = None,
    renderer: TokenRenderer | None = None,
    repair: bool = True,
) -> str:
    """Repair, tokenize and render markdown in one call.

    Args:
        text: Markdown source, possibly truncated mid-construct
        registry: Extension registry (uses the defaults if None)
        renderer: Renderer to use (HtmlRenderer if None)
        repair: Close unterminated constructs before tokenizing

    Returns:
        Rendered output

    Example:
        >>> render("Hello *world")
        '<p>Hello <em>world</em></p>\\n'
    """
    source = normalize_newlines(text)
    if repair:
        source = repair_incomplete_markdown(source)
    tokens: Sequence[Token] = Lexer(registry).block_tokens(source)
    return (renderer or HtmlRenderer()).render(tokens)


__all__ = [  # noqa: RUF022 (grouped by category)
    "__version__",
    # Entry points
    "lex",
    "lex_inline",
    "parse_blocks",
    "render",
    "repair_incomplete_markdown",
    "MarkdownStream",
    "Lexer",
    # Extensions
    "Extension",
    "Level",
    "Tokenizer",
    "ExtensionRegistry",
    "ExtensionRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    "default_extensions",
    # Configuration
    "LexConfig",
    "get_lex_config",
    "set_lex_config",
    "reset_lex_config",
    "lex_config_context",
    # Errors
    "ArroyoError",
    "ExtensionError",
    "RegistryError",
    # Rendering and serialization
    "HtmlRenderer",
    "TokenRenderer",
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Traversal
    "walk",
    "child_tokens",
    "collect_footnotes",
    "FootnoteIndex",
    # Tokens
    "Token",
    "Block",
    "Inline",
    "Text",
    "Escape",
    "Strong",
    "Em",
    "Del",
    "Codespan",
    "Br",
    "Link",
    "Image",
    "InlineHtml",
    "Citation",
    "Math",
    "FootnoteRef",
    "Sub",
    "Sup",
    "Space",
    "Paragraph",
    "Heading",
    "Code",
    "Blockquote",
    "Html",
    "Hr",
    "List",
    "ListItem",
    "Table",
    "TableRow",
    "TableCell",
    "Align",
    "Description",
    "DescriptionList",
    "Mdx",
    "MathBlock",
    "Alert",
    "FootnoteDefinition",
    "Custom",
]
