"""Open-construct records kept by the repair scanner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from arroyo.lexer.lines import Fence


class Kind(StrEnum):
    """Inline constructs the repairer tracks."""

    EMPHASIS = "emphasis"
    STRIKE = "strike"
    SUB = "sub"
    SUP = "sup"
    CODE = "code"
    MATH = "math"
    DISPLAY_MATH = "display_math"
    BRACKET = "bracket"
    DESTINATION = "destination"
    FOOTNOTE = "footnote"


# Content is not scanned for other constructs until the closer
LITERAL_KINDS = frozenset({Kind.CODE, Kind.MATH, Kind.DISPLAY_MATH, Kind.DESTINATION, Kind.FOOTNOTE})

# Abandoned at the end of their line
SINGLE_LINE_KINDS = frozenset({Kind.SUB, Kind.SUP, Kind.MATH, Kind.DISPLAY_MATH, Kind.FOOTNOTE})


@dataclass(slots=True)
class Entry:
    """An unmatched opener.

    Attributes:
        kind: What the opener starts.
        marker: Delimiter character (``*``, ``_``, ``~``, ``^``, `````).
        length: Unmatched run length; shrinks as closers consume it.
        start: Offset just past the opener in the full text.
        image: Bracket or destination belongs to ``![...]``.
        filled: Destination has seen a non-space character.
        spaced: Destination has seen whitespace after its target.
        quote: Open title quote inside a destination.
        depth: Unbalanced ``(`` inside a destination.

    """

    kind: Kind
    marker: str = ""
    length: int = 1
    start: int = 0
    image: bool = False
    filled: bool = False
    spaced: bool = False
    quote: str | None = None
    depth: int = 0


@dataclass(frozen=True, slots=True)
class OpenBlock:
    """A container or literal block that needs a closing line.

    ``fence`` is set for code fences and ``math`` for ``$$`` blocks; both
    swallow their content until closed.
    """

    closer: str
    fence: Fence | None = None
    math: bool = False

    @property
    def literal(self) -> bool:
        return self.fence is not None or self.math
