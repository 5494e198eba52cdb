"""Token tree traversal and footnote collection.

Example: collect every link target:

    hrefs = [t.href for t in walk(tokens) if isinstance(t, Link)]

Example: number footnotes in reading order:

    index = collect_footnotes(Lexer().block_tokens(text))
    for number, label in enumerate(index.order, start=1):
        ...

Thread Safety:
All functions are pure. FootnoteIndex is immutable.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from arroyo.tokens import Description, DescriptionList, FootnoteDefinition, FootnoteRef, List, Table

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arroyo.tokens import Token


def child_tokens(token: Token) -> tuple[Token, ...]:
    """Direct children of ``token`` in document order."""
    match token:
        case List(items=items):
            return items
        case DescriptionList(items=items):
            return items
        case Description(term_children=term, detail_children=detail):
            return term + detail
        case Table(head=head, body=body, foot=foot):
            return tuple(child for row in head + body + foot for cell in row.cells for child in cell.children)
    return getattr(token, "children", ())


def walk(tokens: Iterable[Token]) -> Iterator[Token]:
    """Yield every token in the tree, depth first, parents before children."""
    stack = list(reversed(list(tokens)))
    while stack:
        token = stack.pop()
        yield token
        stack.extend(reversed(child_tokens(token)))


@dataclass(frozen=True, slots=True)
class FootnoteIndex:
    """Footnote definitions by label and references in first-use order.

    Attributes:
        definitions: Label to definition; the first definition of a label wins.
        order: Referenced labels, each once, in the order first referenced.
        numbers: Display number of every referenced, defined label.

    """

    definitions: Mapping[str, FootnoteDefinition] = field(default_factory=lambda: MappingProxyType({}))
    order: tuple[str, ...] = ()
    numbers: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        defined = (label for label in self.order if label in self.definitions)
        numbers = {label: number for number, label in enumerate(defined, start=1)}
        object.__setattr__(self, "numbers", MappingProxyType(numbers))

    def number(self, label: str) -> int | None:
        """1-based display number of a referenced, defined label."""
        return self.numbers.get(label)

    def referenced(self) -> list[FootnoteDefinition]:
        """Definitions that are referenced, in reference order."""
        return [self.definitions[label] for label in self.order if label in self.definitions]


def collect_footnotes(tokens: Iterable[Token]) -> FootnoteIndex:
    definitions: dict[str, FootnoteDefinition] = {}
    order: list[str] = []
    seen: set[str] = set()
    for token in walk(tokens):
        if isinstance(token, FootnoteDefinition):
            definitions.setdefault(token.label, token)
        elif isinstance(token, FootnoteRef) and token.label not in seen:
            seen.add(token.label)
            order.append(token.label)
    return FootnoteIndex(definitions=MappingProxyType(definitions), order=tuple(order))
