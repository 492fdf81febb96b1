from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Tuple

from .notation import Move
from .results import PerftResult


@dataclass(frozen=True, slots=True)
class DiffRow:
    """One move's counts on both sides; ``None`` means the side never emitted it."""

    move: Move
    left: int | None
    right: int | None

    @property
    def matches(self) -> bool:
        return self.left == self.right


@dataclass(frozen=True)
class DiffReport:
    rows: Tuple[DiffRow, ...]
    left_total: int | None
    right_total: int | None

    @property
    def totals_match(self) -> bool:
        return self.left_total is not None and self.left_total == self.right_total

    @property
    def discrepancies(self) -> list[DiffRow]:
        return [row for row in self.rows if not row.matches]

    @property
    def is_clean(self) -> bool:
        return self.totals_match and not self.discrepancies


def compare(left: PerftResult | None, right: PerftResult | None) -> DiffReport:
    """Align two perft results move by move.

    Rows follow ``left``'s order, then moves only ``right`` emitted in
    ``right``'s order. A repeated token pairs occurrence by occurrence, so an
    unmatched repeat shows up as its own row with one side absent. A side of
    ``None`` (its provider failed) contributes no rows and no total.
    """
    left_entries = left.entries if left is not None else ()
    right_entries = right.entries if right is not None else ()

    pending: Dict[Move, Deque[int]] = defaultdict(deque)
    for index, entry in enumerate(right_entries):
        pending[entry.move].append(index)

    paired: set[int] = set()
    rows: List[DiffRow] = []
    for entry in left_entries:
        queue = pending.get(entry.move)
        if queue:
            index = queue.popleft()
            paired.add(index)
            rows.append(DiffRow(entry.move, entry.count, right_entries[index].count))
        else:
            rows.append(DiffRow(entry.move, entry.count, None))

    for index, entry in enumerate(right_entries):
        if index not in paired:
            rows.append(DiffRow(entry.move, None, entry.count))

    return DiffReport(
        rows=tuple(rows),
        left_total=left.total if left is not None else None,
        right_total=right.total if right is not None else None,
    )


__all__ = ["DiffReport", "DiffRow", "compare"]
