"""Character sets and classifiers shared by the lexer and the repairer.

All sets are frozensets for O(1) membership tests and are built once at
import time.

Usage:
    from arroyo.lexer.charsets import ASCII_PUNCTUATION

    if char in ASCII_PUNCTUATION:
        ...
"""

import unicodedata

ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


def is_punctuation(char: str) -> bool:
    """Unicode punctuation or symbol, as used by emphasis flanking."""
    if not char:
        return False
    if char in ASCII_PUNCTUATION:
        return True
    cat = unicodedata.category(char)
    return cat.startswith("P") or cat.startswith("S")


WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")


def is_whitespace(char: str) -> bool:
    """Unicode whitespace. The empty string (a boundary) counts as whitespace."""
    if not char:
        return True
    if char in WHITESPACE:
        return True
    return unicodedata.category(char) == "Zs"


def is_word_char(char: str) -> bool:
    """Letters and digits in any script."""
    return bool(char) and char.isalnum()


# Baseline inline characters where a plain text run must stop
INLINE_SPECIAL: frozenset[str] = frozenset("\\`*_[!<~")

FENCE_CHARS: frozenset[str] = frozenset("`~")

BULLET_MARKERS: frozenset[str] = frozenset("-*+")

THEMATIC_BREAK_CHARS: frozenset[str] = frozenset("-*_")

DIGITS: frozenset[str] = frozenset("0123456789")

# Characters that end a bare URL (trailing punctuation is trimmed separately)
URL_TERMINATORS: frozenset[str] = frozenset(" \t\n<")
