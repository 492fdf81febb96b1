from __future__ import annotations

from typing import Protocol, Sequence

from .notation import Move


class PerftProvider(Protocol):
    """Contract for anything that can count perft nodes at a position.

    Implementations return text in the line protocol read by
    :func:`perftree.domain.perft.results.parse_perft_output` and raise
    :class:`perftree.domain.perft.errors.ProviderFailure` when the backing
    process cannot produce it.
    """

    @property
    def name(self) -> str:
        """Short label used in reports and error messages."""

    def perft(
        self,
        depth: int,
        base: str,
        moves: Sequence[Move],
        *,
        chess960: bool = False,
    ) -> str:
        """Run perft to ``depth`` from ``base`` with ``moves`` applied."""

    def close(self) -> None:
        """Release any process held by the provider."""


__all__ = ["PerftProvider"]
