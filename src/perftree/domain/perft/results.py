from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Sequence, Tuple

from .errors import InvalidMoveError, MalformedLineError, MalformedOutputError
from .notation import Move, format_move, parse_move

MOVE_LINE_RE = re.compile(r"(?P<move>\S+) (?P<count>\d+)", re.ASCII)
TOTAL_LINE_RE = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True, slots=True)
class PerftEntry:
    move: Move
    count: int


@dataclass(frozen=True)
class PerftResult:
    """Per-move node counts in emission order plus the provider's own total.

    The total is kept exactly as reported; it is not checked against the sum
    of the entries.
    """

    entries: Tuple[PerftEntry, ...] = field(default_factory=tuple)
    total: int = 0

    def __iter__(self) -> Iterator[PerftEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def moves(self) -> list[Move]:
        return [entry.move for entry in self.entries]

    @classmethod
    def from_counts(cls, counts: Sequence[tuple[str, int]], total: int) -> "PerftResult":
        entries = tuple(PerftEntry(move=parse_move(token), count=count) for token, count in counts)
        return cls(entries=entries, total=total)

    def to_text(self) -> str:
        """Render in the line protocol that :func:`parse_perft_output` reads."""
        lines = [f"{format_move(entry.move)} {entry.count}" for entry in self.entries]
        lines.append("")
        lines.append(str(self.total))
        return "\n".join(lines) + "\n"


def _parse_count(line_number: int, line: str, digits: str) -> int:
    try:
        return int(digits)
    except ValueError as exc:
        # int() refuses very long digit strings.
        raise MalformedLineError(line_number, line, f"count too large: {exc}") from exc


def _parse_move_line(line_number: int, line: str) -> PerftEntry:
    match = MOVE_LINE_RE.fullmatch(line)
    if match is None:
        raise MalformedLineError(line_number, line, "expected '<move> <count>'")
    try:
        move = parse_move(match.group("move"))
    except InvalidMoveError as exc:
        raise MalformedLineError(line_number, line, str(exc)) from exc
    return PerftEntry(move=move, count=_parse_count(line_number, line, match.group("count")))


def parse_perft_output(text: str) -> PerftResult:
    """Parse ``<move> <count>`` lines, one blank line, then the total.

    A leading newline is the separator of an empty move list, so depth 0
    output (``"\\n1"``) parses to zero entries with a total of 1. Other
    leading blank lines are skipped; line numbers in errors still count them.
    """
    lines = [line.strip() for line in text.rstrip().splitlines()]
    if not lines:
        raise MalformedOutputError("empty output")

    # The last line is non-blank after rstrip().
    index = 0
    while not lines[index]:
        index += 1
    if index and TOTAL_LINE_RE.fullmatch(lines[index]):
        index -= 1

    entries: list[PerftEntry] = []
    while index < len(lines) and lines[index]:
        if TOTAL_LINE_RE.fullmatch(lines[index]):
            # A bare number before any blank line is a total without separator.
            raise MalformedOutputError("missing separator")
        entries.append(_parse_move_line(index + 1, lines[index]))
        index += 1

    if index == len(lines):
        raise MalformedOutputError("missing separator")
    # The text was right-stripped, so a line always follows the separator.
    index += 1
    total_line = lines[index]
    if TOTAL_LINE_RE.fullmatch(total_line) is None:
        raise MalformedLineError(index + 1, total_line, "expected total node count")

    if any(lines[index + 1:]):
        raise MalformedOutputError("trailing data")

    total = _parse_count(index + 1, total_line, total_line)
    return PerftResult(entries=tuple(entries), total=total)


__all__ = ["PerftEntry", "PerftResult", "parse_perft_output"]
