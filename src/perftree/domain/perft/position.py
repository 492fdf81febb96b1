from __future__ import annotations

from typing import Iterable, List

import chess

from .errors import EmptyMoveListError, InvalidPositionError
from .notation import Move, format_move, parse_move

STARTING_FEN = chess.STARTING_FEN

# Halfmove clock and fullmove number may be omitted, as UCI engines accept.
MIN_FEN_FIELDS = 4
MAX_FEN_FIELDS = 6


def validate_fen(fen: str) -> str:
    """Return ``fen`` with normalized whitespace if it is structurally sound."""
    fields = fen.split()
    if not fields:
        raise InvalidPositionError("position is empty")
    if not MIN_FEN_FIELDS <= len(fields) <= MAX_FEN_FIELDS:
        raise InvalidPositionError(
            f"expected {MIN_FEN_FIELDS} to {MAX_FEN_FIELDS} FEN fields, got {len(fields)}"
        )

    normalized = " ".join(fields)
    try:
        chess.Board(normalized)
    except ValueError as exc:
        raise InvalidPositionError(f"malformed FEN {normalized!r}: {exc}") from exc
    return normalized


class PositionState:
    """Base position plus the stack of moves played from it."""

    def __init__(self, base: str = STARTING_FEN) -> None:
        self._base = validate_fen(base)
        self._moves: List[Move] = []

    @property
    def base(self) -> str:
        return self._base

    @property
    def moves(self) -> tuple[Move, ...]:
        return tuple(self._moves)

    @property
    def tokens(self) -> list[str]:
        return [format_move(move) for move in self._moves]

    def set_base(self, fen: str) -> None:
        self._base = validate_fen(fen)
        self._moves.clear()

    def set_moves(self, tokens: Iterable[str]) -> None:
        # Parse everything first so a bad token leaves the list untouched.
        parsed = [parse_move(token) for token in tokens]
        self._moves = parsed

    def push(self, token: str) -> Move:
        move = parse_move(token)
        self._moves.append(move)
        return move

    def pop(self) -> Move:
        if not self._moves:
            raise EmptyMoveListError("already at the root position")
        return self._moves.pop()

    def reset(self) -> None:
        self._moves.clear()

    def current_board(self, *, chess960: bool = False) -> chess.Board:
        """Apply the move list to the base.

        Moves only need to be pseudo-legal here; anything stricter is the
        providers' call to make.
        """
        board = chess.Board(self._base, chess960=chess960)
        for ply, move in enumerate(self._moves, start=1):
            candidate = chess.Move(move.from_square, move.to_square, promotion=move.promotion)
            if not board.is_pseudo_legal(candidate):
                raise InvalidPositionError(
                    f"move {ply} ({format_move(move)}) cannot be played from {board.fen()}"
                )
            board.push(candidate)
        return board


__all__ = ["MAX_FEN_FIELDS", "MIN_FEN_FIELDS", "PositionState", "STARTING_FEN", "validate_fen"]
