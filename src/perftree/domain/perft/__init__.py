from .diff import DiffReport, DiffRow, compare
from .errors import (
    EmptyMoveListError,
    InvalidDepthError,
    InvalidMoveError,
    InvalidPositionError,
    MalformedLineError,
    MalformedOutputError,
    PerftreeError,
    ProviderFailure,
    UnknownCommandError,
)
from .notation import Move, canonicalize, format_move, parse_move
from .position import STARTING_FEN, PositionState, validate_fen
from .providers import PerftProvider
from .results import PerftEntry, PerftResult, parse_perft_output
from .session import (
    DEFAULT_DEPTH,
    DiffOutcome,
    DiffRunner,
    Session,
    SideOutcome,
    parse_depth,
)

__all__ = [
    "DEFAULT_DEPTH",
    "DiffOutcome",
    "DiffReport",
    "DiffRow",
    "DiffRunner",
    "EmptyMoveListError",
    "InvalidDepthError",
    "InvalidMoveError",
    "InvalidPositionError",
    "MalformedLineError",
    "MalformedOutputError",
    "Move",
    "PerftEntry",
    "PerftProvider",
    "PerftResult",
    "PerftreeError",
    "PositionState",
    "ProviderFailure",
    "STARTING_FEN",
    "Session",
    "SideOutcome",
    "UnknownCommandError",
    "canonicalize",
    "compare",
    "format_move",
    "parse_depth",
    "parse_move",
    "parse_perft_output",
    "validate_fen",
]
