"""External perft providers: the script under test and the reference engine."""

from .script import ScriptProvider, build_arguments
from .stockfish import StockfishProvider, position_command

__all__ = [
    "ScriptProvider",
    "StockfishProvider",
    "build_arguments",
    "position_command",
]
