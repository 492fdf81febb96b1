from __future__ import annotations

from dataclasses import dataclass

import chess

from .errors import InvalidMoveError

PROMOTION_PIECES: tuple[chess.PieceType, ...] = (
    chess.QUEEN,
    chess.ROOK,
    chess.BISHOP,
    chess.KNIGHT,
)
PROMOTION_SYMBOLS: frozenset[str] = frozenset(chess.piece_symbol(piece) for piece in PROMOTION_PIECES)


@dataclass(frozen=True, slots=True)
class Move:
    """A move token in coordinate notation, e.g. ``e2e4`` or ``a7a8q``.

    Only the shape is checked; whether the move is legal anywhere is left to
    the perft providers.
    """

    from_square: chess.Square
    to_square: chess.Square
    promotion: chess.PieceType | None = None

    def __str__(self) -> str:
        return format_move(self)


def _parse_square(token: str, text: str) -> chess.Square:
    try:
        return chess.parse_square(text)
    except ValueError as exc:
        raise InvalidMoveError(token, f"{text!r} is not a square") from exc


def parse_move(token: str) -> Move:
    """Parse a move token, accepting any letter case."""
    text = token.strip().lower()
    if len(text) not in (4, 5):
        raise InvalidMoveError(token, "expected two squares and an optional promotion piece")

    from_square = _parse_square(token, text[0:2])
    to_square = _parse_square(token, text[2:4])

    promotion: chess.PieceType | None = None
    if len(text) == 5:
        symbol = text[4]
        if symbol not in PROMOTION_SYMBOLS:
            raise InvalidMoveError(token, f"{symbol!r} is not a promotion piece")
        promotion = chess.PIECE_SYMBOLS.index(symbol)

    return Move(from_square=from_square, to_square=to_square, promotion=promotion)


def format_move(move: Move) -> str:
    token = chess.square_name(move.from_square) + chess.square_name(move.to_square)
    if move.promotion is not None:
        token += chess.piece_symbol(move.promotion)
    return token


def canonicalize(token: str) -> str:
    return format_move(parse_move(token))


__all__ = ["Move", "PROMOTION_SYMBOLS", "canonicalize", "format_move", "parse_move"]
