"""Delimiter-run flanking classification.

Implements the CommonMark left/right-flanking tests used to decide whether a
run of ``*``, ``_``, ``~`` or ``^`` can open or close a span. Shared by the
emphasis rule and the incomplete-markdown repairer so both agree on what a
delimiter is.

See: https://spec.commonmark.org/0.31.2/#left-flanking-delimiter-run
"""

from dataclasses import dataclass

from arroyo.lexer.charsets import is_punctuation, is_whitespace


@dataclass(frozen=True, slots=True)
class Flanking:
    can_open: bool
    can_close: bool


def is_left_flanking(before: str, after: str) -> bool:
    """Not followed by whitespace, and either not followed by punctuation or
    preceded by whitespace or punctuation."""
    if is_whitespace(after):
        return False
    if not is_punctuation(after):
        return True
    return is_whitespace(before) or is_punctuation(before)


def is_right_flanking(before: str, after: str) -> bool:
    """Not preceded by whitespace, and either not preceded by punctuation or
    followed by whitespace or punctuation."""
    if is_whitespace(before):
        return False
    if not is_punctuation(before):
        return True
    return is_whitespace(after) or is_punctuation(after)


def classify_run(before: str, after: str, char: str) -> Flanking:
    """Classify a delimiter run from its neighbouring characters.

    ``before`` / ``after`` are single characters, or "" at a boundary (which
    counts as whitespace). Underscore runs may not open or close intraword.
    """
    left = is_left_flanking(before, after)
    right = is_right_flanking(before, after)
    if char == "_":
        return Flanking(
            can_open=left and (not right or is_punctuation(before)),
            can_close=right and (not left or is_punctuation(after)),
        )
    return Flanking(can_open=left, can_close=right)


def run_length(src: str, pos: int, char: str) -> int:
    """Length of the run of ``char`` starting at ``pos``."""
    end = pos
    while end < len(src) and src[end] == char:
        end += 1
    return end - pos
