"""Extension contract for the tokenizer pipeline.

An extension is a named grammar rule bound to a level. Its tokenizer receives
the remaining source text and the running Lexer (the capability used to
tokenize nested content) and returns a token whose ``raw`` is a non-empty
prefix of the source, or None when it does not match.

Thread Safety:
Tokenizers must be stateless. Every piece of per-call state lives in the
arguments or on the call stack, so one registry can serve concurrent lexers.

Example:
    >>> def shout(src: str, lexer: Lexer) -> Custom | None:
    ...     if not src.startswith("!!"):
    ...         return None
    ...     end = src.find("!!", 2)
    ...     if end <= 2:
    ...         return None
    ...     return Custom(raw=src[: end + 2], name="shout", data={"text": src[2:end]})
    ...
    >>> Extension("shout", Level.INLINE, shout, start_chars=frozenset("!"))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer
    from arroyo.tokens import Token


class Level(StrEnum):
    """Pass a rule belongs to."""

    BLOCK = "block"
    INLINE = "inline"


type Tokenizer = Callable[[str, Lexer], Token | None]
type InterruptTest = Callable[[str, Lexer], bool]


@dataclass(frozen=True, slots=True)
class Extension:
    """A registered grammar rule.

    Attributes:
        name: Unique rule name, used in logs and error messages.
        level: Block or inline pass.
        tokenizer: The anchored matching function.
        start_chars: Characters a match can begin with. Inline text runs stop
            at these so the rule gets a chance to match; the pipeline also
            skips the rule when the input starts with anything else. None
            means "try everywhere".
        interrupts_paragraph: Block rules only. When True, a line where this
            rule matches ends the paragraph above it.
        interrupt_test: Optional cheap check used instead of the tokenizer
            when deciding whether a line ends a paragraph. It must agree with
            the tokenizer on whether the line matches, but never builds
            tokens, so rules with nested content are not tokenized twice.

    """

    name: str
    level: Level
    tokenizer: Tokenizer
    start_chars: frozenset[str] | None = None
    interrupts_paragraph: bool = False
    interrupt_test: InterruptTest | None = None

    def could_start(self, src: str) -> bool:
        return self.start_chars is None or (bool(src) and src[0] in self.start_chars)
