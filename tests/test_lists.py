"""Tests for the list extension: bullet, decimal, alphabetic and roman lists,
task items, looseness and skipped numbering."""

import pytest

from arroyo import lex
from arroyo.extensions.builtins.lists import ordinal_value, roman_to_int
from arroyo.tokens import List, Paragraph


def only_list(source: str) -> List:
    (token,) = lex(source)
    assert isinstance(token, List)
    return token


class TestListTypes:
    """Marker families and the list type they start."""

    def test_bullet(self) -> None:
        """Bullets carry no ordinal."""
        lst = only_list("- a\n- b\n- c")
        assert not lst.ordered
        assert lst.list_type == "bullet"
        assert lst.start is None
        assert [item.value for item in lst.items] == [None, None, None]
        assert [item.text for item in lst.items] == ["a", "b", "c"]

    def test_decimal(self) -> None:
        """Decimal items record their numbers."""
        lst = only_list("1. one\n2. two\n3. three")
        assert lst.ordered
        assert lst.list_type == "decimal"
        assert lst.start == 1
        assert [item.value for item in lst.items] == [1, 2, 3]
        assert not lst.skipped

    def test_start(self) -> None:
        """The first number is the start."""
        assert only_list("3. a\n4. b").start == 3

    @pytest.mark.parametrize(
        ("source", "list_type", "values"),
        [
            ("a. x\nb. y", "lower-alpha", [1, 2]),
            ("A) x\nB) y\nC) z", "upper-alpha", [1, 2, 3]),
            ("i. x\nii. y\niii. z", "lower-roman", [1, 2, 3]),
            ("IV. x\nV. y", "upper-roman", [4, 5]),
            ("iv. x\nv. y", "lower-roman", [4, 5]),
        ],
    )
    def test_alpha_and_roman(self, source: str, list_type: str, values: list[int]) -> None:
        """Later items are read in the first item's type."""
        lst = only_list(source)
        assert lst.list_type == list_type
        assert [item.value for item in lst.items] == values

    def test_skipped_numbering(self) -> None:
        """A gap in the numbers is flagged."""
        lst = only_list("1. a\n2. b\n5. c")
        assert lst.skipped
        assert [item.value for item in lst.items] == [1, 2, 5]

    def test_bullet_change_ends_list(self) -> None:
        """A different bullet character starts a new list."""
        assert [token.kind for token in lex("- a\n* b")] == ["list", "list"]

    def test_delimiter_change_ends_list(self) -> None:
        """1) and 1. are different lists."""
        assert [token.kind for token in lex("1) a\n2. b")] == ["list", "list"]


class TestListItems:
    """Item content, tasks and looseness."""

    def test_task_items(self) -> None:
        """[ ] and [x] prefixes become checkboxes."""
        lst = only_list("- [ ] todo\n- [x] done\n- plain")
        assert [item.task for item in lst.items] == [True, True, False]
        assert [item.checked for item in lst.items] == [False, True, None]
        assert lst.items[0].text == "todo"

    def test_tight(self) -> None:
        """No blank lines means a tight list."""
        lst = only_list("- a\n- b")
        assert not lst.loose
        assert not any(item.loose for item in lst.items)

    def test_loose_between_items(self) -> None:
        """A blank line between items makes the list loose."""
        lst = only_list("- a\n\n- b")
        assert lst.loose
        assert all(item.loose for item in lst.items)

    def test_loose_inside_item(self) -> None:
        """A blank line inside an item makes it loose."""
        lst = only_list("- a\n\n  more\n- b")
        assert lst.loose
        assert lst.items[0].text == "a\n\nmore"

    def test_nested_list(self) -> None:
        """Indented markers nest inside the item."""
        lst = only_list("- a\n  - b\n  - c\n- d")
        assert len(lst.items) == 2
        assert [child.kind for child in lst.items[0].children] == ["paragraph", "list"]

    def test_lazy_continuation(self) -> None:
        """Unindented text continues the item's paragraph."""
        lst = only_list("- first\nsecond")
        (paragraph,) = lst.items[0].children
        assert isinstance(paragraph, Paragraph)
        assert paragraph.text == "first\nsecond"

    def test_item_raws_cover_list(self) -> None:
        """Item raws concatenate to the list raw."""
        lst = only_list("1. a\n\n2. b\n   more\n3. c")
        assert "".join(item.raw for item in lst.items) == lst.raw

    def test_interrupts_paragraph(self) -> None:
        """A bullet may follow a paragraph line directly."""
        assert [token.kind for token in lex("text\n- item")] == ["paragraph", "list"]

    def test_late_number_does_not_interrupt(self) -> None:
        """Only an ordered list starting at 1 interrupts a paragraph."""
        assert [token.kind for token in lex("text\n2. item")] == ["paragraph"]


class TestOrdinals:
    """Marker value helpers."""

    @pytest.mark.parametrize(("numeral", "value"), [("i", 1), ("iv", 4), ("ix", 9), ("XIV", 14), ("mcmxc", 1990)])
    def test_roman_to_int(self, numeral: str, value: int) -> None:
        """Subtractive notation is handled."""
        assert roman_to_int(numeral) == value

    def test_ordinal_value_mismatch(self) -> None:
        """A marker that can't be read in the list's type has no value."""
        assert ordinal_value("b", "decimal") is None
        assert ordinal_value("B", "lower-alpha") is None
        assert ordinal_value("iv", "upper-roman") is None
        assert ordinal_value("c", "lower-alpha") == 3
