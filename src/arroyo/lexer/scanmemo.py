"""Memo for forward delimiter scans that run off the end of their input.

Emphasis, strikethrough and link brackets look ahead for a closer. Such a
scan visits delimiter positions in a fixed order, adds a signed weight at
each one, and closes as soon as its running balance drops to zero or below.
Two scans that reach the same position visit the same positions from there
on, so a scan that never closed can leave behind, for every position it
visited, the lowest balance change still reachable from it. A later scan
that reaches one of those positions knows at once whether it can close.

Weights come in parallel classes (a tuple per position) for scans whose
weighting depends on the opener, like the emphasis rule of 3.

Memos live for one Lexer sequence; see Lexer.scan_memo().
"""

from __future__ import annotations

from collections.abc import Sequence


class ScanMemo:
    """Balance floors left behind by scans that found no closer.

    Usage:
        memo = ScanMemo()
        memo.record([(4, (1,)), (9, (-1,))])
        memo.floor(4)  # (0,): a scan reaching 4 with balance 1 never closes

    Complexity:
        - floor(): O(1)
        - record(): O(visits)
    """

    __slots__ = ("_floors",)

    def __init__(self) -> None:
        self._floors: dict[int, tuple[int, ...]] = {}

    def floor(self, pos: int) -> tuple[int, ...] | None:
        """Lowest balance change reachable from ``pos``, per weight class."""
        return self._floors.get(pos)

    def record(self, visits: Sequence[tuple[int, tuple[int, ...]]], tail: tuple[int, ...] | None = None) -> None:
        """Remember a failed scan.

        Args:
            visits: ``(position, weights)`` in the order the scan visited them.
            tail: Floors at the position the scan stopped at, when it stopped
                early on a recorded position instead of reaching the end.
        """
        floors = tail
        for pos, weights in reversed(visits):
            if floors is not None:
                weights = tuple(w + min(0, f) for w, f in zip(weights, floors, strict=True))
            floors = weights
            self._floors[pos] = floors
