"""Interactive command-line surface."""

from .controller import SessionController

__all__ = ["SessionController"]
