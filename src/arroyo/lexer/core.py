"""Tokenizer pipeline.

The Lexer walks the remaining input left to right. At every position it
tries the registered extension rules for the current level in registration
order, then the baseline grammar; the first rule returning a token wins and
the cursor advances by ``len(token.raw)``.

Every result is checked against the rule contract: ``raw`` must be non-empty
and a prefix of the remaining input. A rule that breaks the contract (or
raises) is logged and the remaining input degrades to one Text token, so a
faulty extension can never hang the pipeline or take rendering down. In
strict mode the violation raises ExtensionError instead.

Rules receive the Lexer itself as the capability for nested tokenization:

    def tokenizer(src: str, lexer: Lexer) -> Token | None:
        ...
        children = lexer.block_tokens(inner)

Rules that scan ahead for a closer can share what they learned with later
attempts in the same sequence through scan_memo(), which keeps the total
cost of a sequence linear in its length.

Thread Safety:
A Lexer holds per-call state (nesting depth, the current sequence), so
create one per call; lex() does this for you. The registry and config it
reads are immutable.

"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from typing import TYPE_CHECKING

from arroyo.config import LexConfig, get_lex_config
from arroyo.errors import ExtensionError
from arroyo.extensions.registry import ExtensionRegistry, create_default_registry
from arroyo.lexer.charsets import INLINE_SPECIAL
from arroyo.lexer.lines import can_interrupt_paragraph, next_line
from arroyo.lexer.scanmemo import ScanMemo
from arroyo.tokens import FootnoteDefinition, Space, Text
from arroyo.utils.logger import get_logger

if TYPE_CHECKING:
    from arroyo.extensions.protocol import Extension
    from arroyo.tokens import Block, Inline, Token

logger = get_logger(__name__)

type Rule = Callable[[str, Lexer], Token | None]


class _Frame:
    """One running sequence: the input handed to the current step and memos."""

    __slots__ = ("rest", "offset", "memos")

    def __init__(self) -> None:
        self.rest = ""
        self.offset = 0
        self.memos: dict[Hashable, ScanMemo] = {}


def _merge_text(run: list[Text]) -> Text:
    if len(run) == 1:
        return run[0]
    return Text(raw="".join(t.raw for t in run), text="".join(t.text for t in run))


class Lexer:
    """Recursive-descent driver over extension rules and the baseline grammar.

    Usage:
        >>> lexer = Lexer()
        >>> [t.kind for t in lexer.block_tokens("# Title\\n\\n[center]\\nHi\\n[/center]")]
        ['heading', 'space', 'align']

    """

    __slots__ = ("_registry", "_config", "_depth", "_frame", "_inline_stops", "_block_rules", "_inline_rules")

    def __init__(self, registry: ExtensionRegistry | None = None, config: LexConfig | None = None) -> None:
        from arroyo.lexer.block import BASELINE_BLOCK_RULES
        from arroyo.lexer.inline import BASELINE_INLINE_RULES

        self._registry = registry if registry is not None else create_default_registry()
        self._config = config if config is not None else get_lex_config()
        self._depth = 0
        self._frame: _Frame | None = None
        self._inline_stops = INLINE_SPECIAL | self._registry.inline_start_chars
        self._block_rules = BASELINE_BLOCK_RULES
        self._inline_rules = BASELINE_INLINE_RULES

    @property
    def registry(self) -> ExtensionRegistry:
        return self._registry

    @property
    def config(self) -> LexConfig:
        return self._config

    @property
    def inline_stops(self) -> frozenset[str]:
        """Characters where a plain text run must end."""
        return self._inline_stops

    # -- Sequences ------------------------------------------------------------

    def block_tokens(self, src: str) -> list[Block]:
        """Tokenize ``src`` into a sequence of block tokens."""
        return self._sequence(src, self.block_token)  # type: ignore[return-value]

    def inline_tokens(self, src: str) -> list[Inline]:
        """Tokenize ``src`` into inline tokens, merging adjacent text."""
        tokens: list[Inline] = []
        run: list[Text] = []
        for token in self._sequence(src, self.inline_token):
            if type(token) is Text:
                run.append(token)
                continue
            if run:
                tokens.append(_merge_text(run))
                run = []
            tokens.append(token)  # type: ignore[arg-type]
        if run:
            tokens.append(_merge_text(run))
        return tokens

    def _sequence(self, src: str, step: Callable[[str], Token]) -> list[Token]:
        if not src:
            return []
        if self._depth >= self._config.max_nesting_depth:
            return [self._violation("max_nesting_depth", src, "nesting too deep")]

        outer = self._frame
        frame = self._frame = _Frame()
        self._depth += 1
        try:
            tokens: list[Token] = []
            pos = 0
            while pos < len(src):
                frame.rest = src[pos:]
                frame.offset = pos
                token = step(frame.rest)
                tokens.append(token)
                pos += len(token.raw)
            return tokens
        finally:
            self._depth -= 1
            self._frame = outer

    def scan_memo(self, src: str, key: Hashable) -> tuple[ScanMemo, int] | None:
        """Memo shared by every attempt of the running sequence.

        Only available when ``src`` is the remaining input the pipeline
        handed to the current step (not a string the rule built itself).

        Returns:
            The memo for ``key`` and the offset of ``src`` in the sequence,
            or None
        """
        frame = self._frame
        if frame is None or src is not frame.rest:
            return None
        memo = frame.memos.get(key)
        if memo is None:
            memo = frame.memos[key] = ScanMemo()
        return memo, frame.offset

    # -- Single steps ---------------------------------------------------------

    def block_token(self, src: str) -> Block:
        """Tokenize the block at the start of ``src``."""
        for ext in self._registry.block:
            if not ext.could_start(src):
                continue
            token = self._attempt(ext.name, ext.tokenizer, src)
            if token is not None:
                return token  # type: ignore[return-value]
        return self._baseline(self._block_rules, src)  # type: ignore[return-value]

    def inline_token(self, src: str) -> Inline:
        """Tokenize the inline span at the start of ``src``."""
        for ext in self._registry.inline:
            if not ext.could_start(src):
                continue
            token = self._attempt(ext.name, ext.tokenizer, src)
            if token is not None:
                return token  # type: ignore[return-value]
        return self._baseline(self._inline_rules, src)  # type: ignore[return-value]

    def _baseline(self, rules: Sequence[tuple[str, Rule]], src: str) -> Token:
        for name, rule in rules:
            token = self._attempt(name, rule, src)
            if token is not None:
                return token
        # The text/paragraph rules always match non-empty input
        return self._violation("baseline", src, "no rule matched")

    def interrupts_paragraph(self, src: str) -> bool:
        """True when the line at the start of ``src`` ends a paragraph."""
        line, _ = next_line(src)
        if can_interrupt_paragraph(line):
            return True
        for ext in self._registry.block:
            if not ext.interrupts_paragraph or not ext.could_start(src):
                continue
            if ext.interrupt_test is not None:
                if self._test(ext, src):
                    return True
                continue
            token = self._attempt(ext.name, ext.tokenizer, src)
            if token is not None and not isinstance(token, Text):
                return True
        return False

    def _test(self, ext: Extension, src: str) -> bool:
        try:
            return bool(ext.interrupt_test(src, self))  # type: ignore[misc]
        except ExtensionError:
            raise
        except Exception as exc:
            logger.debug("Interrupt test of rule %r raised", ext.name, exc_info=True)
            self._violation(ext.name, src, f"raised {type(exc).__name__}: {exc}")
            return False

    # -- Contract enforcement -------------------------------------------------

    def _attempt(self, name: str, rule: Rule, src: str) -> Token | None:
        try:
            token = rule(src, self)
        except ExtensionError:
            raise
        except Exception as exc:
            logger.debug("Rule %r raised", name, exc_info=True)
            return self._violation(name, src, f"raised {type(exc).__name__}: {exc}")

        if token is None:
            return None
        raw = token.raw
        if not raw:
            return self._violation(name, src, "matched an empty string")
        if not src.startswith(raw):
            return self._violation(name, src, "raw text is not a prefix of the remaining input")
        return token

    def _violation(self, name: str, src: str, message: str) -> Text:
        logger.warning("Rule %r broke the tokenizer contract: %s", name, message)
        if self._config.strict:
            raise ExtensionError(name, message, offset=len(src))
        return Text(raw=src, text=src)


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def lex(text: str, registry: ExtensionRegistry | None = None) -> list[Block]:
    """Tokenize a document into block tokens.

    Blank-line ``Space`` tokens and footnote definitions are left out of the
    result; use collect_footnotes() on ``Lexer().block_tokens(...)`` to get
    the definitions.

    Example:
        >>> [t.kind for t in lex("Hello **world**")]
        ['paragraph']

    """
    tokens = Lexer(registry).block_tokens(normalize_newlines(text))
    return [t for t in tokens if not isinstance(t, (Space, FootnoteDefinition))]


def lex_inline(text: str, registry: ExtensionRegistry | None = None) -> list[Inline]:
    """Tokenize a single span of inline content."""
    return Lexer(registry).inline_tokens(normalize_newlines(text))


def parse_blocks(text: str, registry: ExtensionRegistry | None = None) -> list[str]:
    """Split a document into the raw text of its top-level blocks.

    ``"".join(parse_blocks(text))`` reproduces the (newline-normalized) text,
    which lets hosts memoize rendering per block while a buffer grows.
    """
    return [token.raw for token in Lexer(registry).block_tokens(normalize_newlines(text))]
