from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from .diff import DiffReport, compare
from .errors import InvalidDepthError, PerftreeError
from .position import PositionState
from .providers import PerftProvider
from .results import PerftResult, parse_perft_output

DEFAULT_DEPTH = 1


def parse_depth(raw: str) -> int:
    try:
        depth = int(raw)
    except ValueError as exc:
        raise InvalidDepthError(f"cannot parse depth {raw!r}") from exc
    if depth < 0:
        raise InvalidDepthError(f"depth must be non-negative, got {depth}")
    return depth


@dataclass
class Session:
    """Everything a command can change, owned by a single controller."""

    position: PositionState = field(default_factory=PositionState)
    depth: int = DEFAULT_DEPTH
    chess960: bool = False

    def set_depth(self, depth: int) -> None:
        if depth < 0:
            raise InvalidDepthError(f"depth must be non-negative, got {depth}")
        self.depth = depth

    @property
    def remaining_depth(self) -> int:
        """Depth left below the current position.

        ``depth`` counts from the base position, so every move on the stack
        uses up one ply.
        """
        remaining = self.depth - len(self.position.moves)
        if remaining < 0:
            raise InvalidDepthError(
                f"depth {self.depth} is shallower than the {len(self.position.moves)} moves played"
            )
        return remaining


@dataclass(frozen=True)
class SideOutcome:
    provider: str
    result: PerftResult | None = None
    error: PerftreeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DiffOutcome:
    depth: int
    left: SideOutcome
    right: SideOutcome
    report: DiffReport


class DiffRunner:
    """Run both providers at the session's position and diff what they report."""

    def __init__(
        self,
        left: PerftProvider,
        right: PerftProvider,
        *,
        parallel: bool = True,
    ) -> None:
        self._left = left
        self._right = right
        self._parallel = parallel

    def run(self, session: Session) -> DiffOutcome:
        depth = session.remaining_depth
        if self._parallel:
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="perft") as pool:
                left_future = pool.submit(self._evaluate, self._left, session, depth)
                right_future = pool.submit(self._evaluate, self._right, session, depth)
                left, right = left_future.result(), right_future.result()
        else:
            left = self._evaluate(self._left, session, depth)
            right = self._evaluate(self._right, session, depth)

        report = compare(left.result, right.result)
        return DiffOutcome(depth=depth, left=left, right=right, report=report)

    def close(self) -> None:
        self._left.close()
        self._right.close()

    @staticmethod
    def _evaluate(provider: PerftProvider, session: Session, depth: int) -> SideOutcome:
        try:
            text = provider.perft(
                depth,
                session.position.base,
                session.position.moves,
                chess960=session.chess960,
            )
            result = parse_perft_output(text)
        except PerftreeError as exc:
            return SideOutcome(provider=provider.name, error=exc)
        return SideOutcome(provider=provider.name, result=result)


__all__ = [
    "DEFAULT_DEPTH",
    "DiffOutcome",
    "DiffRunner",
    "Session",
    "SideOutcome",
    "parse_depth",
]
