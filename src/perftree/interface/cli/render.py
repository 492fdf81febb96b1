from __future__ import annotations

from typing import Iterator

import click

from perftree.domain.perft.diff import DiffReport
from perftree.domain.perft.notation import format_move

ABSENT_MARKER = "-"
FAILED_MARKER = "error"
COLUMN_GAP = "  "


def _cell(value: int | None, marker: str = ABSENT_MARKER) -> str:
    return marker if value is None else str(value)


def _highlight(text: str, color: bool) -> str:
    return click.style(text, fg="red", bold=True) if color else text


def render_report(report: DiffReport, *, color: bool = False) -> Iterator[str]:
    """Yield the report as aligned lines: move, left count, right count.

    Mismatched rows and totals are highlighted when ``color`` is set; a move
    missing on one side shows ``-`` so it never reads as a zero count.
    """
    cells = [
        (format_move(row.move), _cell(row.left), _cell(row.right), row.matches)
        for row in report.rows
    ]
    move_width = max((len(move) for move, _, _, _ in cells), default=0)
    count_width = max(
        (max(len(left), len(right)) for _, left, right, _ in cells),
        default=0,
    )

    for move, left, right, matches in cells:
        line = COLUMN_GAP.join(
            (move.ljust(move_width), left.rjust(count_width), right.rjust(count_width))
        ).rstrip()
        yield line if matches else _highlight(line, color)

    yield ""
    total = COLUMN_GAP.join(
        (
            "total",
            _cell(report.left_total, FAILED_MARKER),
            _cell(report.right_total, FAILED_MARKER),
        )
    )
    yield total if report.totals_match else _highlight(total, color)


__all__ = ["ABSENT_MARKER", "FAILED_MARKER", "render_report"]
