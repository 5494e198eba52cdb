"""Tests for tree traversal and footnote collection."""

from arroyo import FootnoteIndex, Lexer, child_tokens, collect_footnotes, lex, walk
from arroyo.tokens import DescriptionList, Em, Table, Text


class TestWalk:
    """Depth-first traversal."""

    def test_document_order(self) -> None:
        """Parents come before children, siblings in order."""
        kinds = [token.kind for token in walk(lex("# A *b*\n\n- c"))]
        assert kinds == ["heading", "text", "em", "text", "list", "list_item", "paragraph", "text"]

    def test_empty(self) -> None:
        """Walking nothing yields nothing."""
        assert list(walk([])) == []

    def test_table_children(self) -> None:
        """Table children are the inline tokens of every cell."""
        (table,) = lex("| *a* | b |\n|---|---|\n| c | d |")
        assert isinstance(table, Table)
        children = child_tokens(table)
        assert isinstance(children[0], Em)
        assert [child.text for child in children[1:]] == ["b", "c", "d"]

    def test_description_list_children(self) -> None:
        """Description lists expose their items, items their term and detail."""
        (dl,) = lex(":*a*: b")
        assert isinstance(dl, DescriptionList)
        (item,) = child_tokens(dl)
        assert item is dl.items[0]
        assert [child.kind for child in child_tokens(item)] == ["em", "text"]

    def test_leaf(self) -> None:
        """Leaves have no children."""
        assert child_tokens(Text(raw="x", text="x")) == ()


class TestFootnoteIndex:
    """Reference order and definition lookup."""

    def test_collect(self) -> None:
        """References are numbered in first-use order among defined labels."""
        tokens = Lexer().block_tokens("x[^b][^a][^zz][^b]\n\n[^a]: A\n[^a]: A2\n[^b]: B")
        index = collect_footnotes(tokens)
        assert index.order == ("b", "a", "zz")
        assert index.number("b") == 1
        assert index.number("a") == 2
        assert index.number("zz") is None
        assert [definition.label for definition in index.referenced()] == ["b", "a"]

    def test_numbers_precomputed(self) -> None:
        """Display numbers are assigned once, when the index is built."""
        tokens = Lexer().block_tokens("x[^b][^a][^zz][^b]\n\n[^a]: A\n[^b]: B")
        index = collect_footnotes(tokens)
        assert dict(index.numbers) == {"b": 1, "a": 2}

    def test_many_references(self) -> None:
        """Every defined label gets its number from the same map."""
        labels = [f"n{i}" for i in range(300)]
        refs = "".join(f"[^{label}]" for label in labels)
        defs = "\n".join(f"[^{label}]: note {label}" for label in labels)
        index = collect_footnotes(Lexer().block_tokens(f"{refs}\n\n{defs}"))
        assert [index.number(label) for label in labels] == list(range(1, 301))

    def test_first_definition_wins(self) -> None:
        """A repeated label keeps its first definition."""
        index = collect_footnotes(Lexer().block_tokens("[^a]: first\n[^a]: second"))
        assert index.definitions["a"].text == "first"

    def test_defined_but_unreferenced(self) -> None:
        """A definition alone gets no number."""
        index = collect_footnotes(Lexer().block_tokens("[^a]: alone"))
        assert index.number("a") is None
        assert index.referenced() == []

    def test_empty_index(self) -> None:
        """The default index knows nothing."""
        index = FootnoteIndex()
        assert index.number("x") is None
        assert index.referenced() == []
