from __future__ import annotations

import sys
import textwrap
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Sequence

import pytest

from perftree.domain.perft import DiffRunner, Move, Session
from perftree.interface.cli.controller import SessionController

OPENING_MOVES = (
    "a2a3", "a2a4", "b2b3", "b2b4", "c2c3", "c2c4", "d2d3", "d2d4",
    "e2e3", "e2e4", "f2f3", "f2f4", "g2g3", "g2g4", "h2h3", "h2h4",
    "b1a3", "b1c3", "g1f3", "g1h3",
)


class StaticProvider:
    """Provider returning canned text (or raising) and recording each call."""

    def __init__(self, name: str, text: str = "\n1\n", error: Exception | None = None) -> None:
        self.name = name
        self.text = text
        self.error = error
        self.calls: list[tuple[int, str, tuple[Move, ...], bool]] = []
        self.closed = False

    def perft(self, depth: int, base: str, moves: Sequence[Move], *, chess960: bool = False) -> str:
        self.calls.append((depth, base, tuple(moves), chess960))
        if self.error is not None:
            raise self.error
        return self.text

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def static_provider() -> type[StaticProvider]:
    return StaticProvider


@pytest.fixture
def opening_output() -> str:
    lines = [f"{move} 1" for move in OPENING_MOVES]
    return "\n".join(lines) + "\n\n20\n"


@pytest.fixture
def console() -> SimpleNamespace:
    return SimpleNamespace(out=[], err=[])


@pytest.fixture
def make_controller(console: SimpleNamespace) -> Callable[..., SessionController]:
    def _make(left: StaticProvider, right: StaticProvider, *, parallel: bool = False) -> SessionController:
        runner = DiffRunner(left, right, parallel=parallel)
        return SessionController(runner, echo=console.out.append, echo_err=console.err.append)

    return _make


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an executable Python script that runs under the test interpreter."""

    def _make(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body), encoding="utf-8")
        path.chmod(0o755)
        return path

    return _make


FAKE_ENGINE = """\
import sys

log_path = sys.argv[1] if len(sys.argv) > 1 else None
print("Fake engine 1.0 by the perftree tests", flush=True)
chess960 = "false"
for raw in sys.stdin:
    line = raw.strip()
    if log_path:
        with open(log_path, "a", encoding="utf-8") as handle:
            handle.write(line + "\\n")
    if line.startswith("setoption name UCI_Chess960 value "):
        chess960 = line.rsplit(" ", 1)[1]
    elif line.startswith("go perft "):
        depth = int(line.split()[2])
        print(f"info string chess960 {chess960}")
        print(f"e2e4: {depth}")
        print(f"d2d4: {depth}")
        print("")
        print(f"Nodes searched: {2 * depth}")
        print("", flush=True)
    elif line == "quit":
        break
"""


@pytest.fixture
def fake_engine(make_script: Callable[[str, str], Path]) -> Path:
    return make_script("fake_engine.py", FAKE_ENGINE)
