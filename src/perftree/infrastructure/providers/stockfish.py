from __future__ import annotations

import re
import subprocess
from typing import Sequence

from perftree.domain.perft.errors import ProviderFailure
from perftree.domain.perft.notation import Move, format_move
from perftree.interface.telemetry.logging import get_logger

logger = get_logger("perftree.providers.stockfish")

DIVIDE_LINE_RE = re.compile(r"(?P<move>\S+): (?P<count>\d+)", re.ASCII)
TOTAL_LINE_RE = re.compile(r"Nodes searched: (?P<total>\d+)", re.ASCII)


def position_command(base: str, moves: Sequence[Move]) -> str:
    command = f"position fen {base}"
    if moves:
        command += " moves " + " ".join(format_move(move) for move in moves)
    return command


class StockfishProvider:
    """Adapter speaking UCI to a long-lived Stockfish process.

    Stockfish's ``go perft`` divide output (``e2e4: 1`` lines, then
    ``Nodes searched: N``) is rewritten into the same line protocol the user
    script produces, so one parser handles both sides.
    """

    def __init__(self, command: Sequence[str] = ("stockfish",), *, name: str = "stockfish") -> None:
        self._command = list(command)
        self._name = name
        self._process: subprocess.Popen[str] | None = None

    @property
    def name(self) -> str:
        return self._name

    def perft(
        self,
        depth: int,
        base: str,
        moves: Sequence[Move],
        *,
        chess960: bool = False,
    ) -> str:
        if depth == 0:
            # Stockfish counts root moves even at depth 0; perft(0) is one node.
            return "\n1\n"

        process = self._ensure_started()
        try:
            self._send(process, f"setoption name UCI_Chess960 value {'true' if chess960 else 'false'}")
            self._send(process, position_command(base, moves))
            self._send(process, f"go perft {depth}")
            return self._read_divide(process)
        except ProviderFailure:
            self._discard()
            raise
        except OSError as exc:
            self._discard()
            raise ProviderFailure(self._name, f"lost connection to engine: {exc}") from exc
        except ValueError as exc:
            self._discard()
            raise ProviderFailure(self._name, f"unreadable engine output: {exc}") from exc

    def close(self) -> None:
        self._discard()

    def _ensure_started(self) -> subprocess.Popen[str]:
        if self._process is not None and self._process.poll() is None:
            return self._process

        try:
            process = subprocess.Popen(
                self._command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            raise ProviderFailure(self._name, f"cannot start {self._command[0]!r}: {exc}") from exc

        self._process = process
        try:
            banner = self._readline(process)
        except ProviderFailure:
            self._discard()
            raise
        logger.info("reference_engine_started", provider=self._name, banner=banner.strip())
        return process

    def _send(self, process: subprocess.Popen[str], command: str) -> None:
        assert process.stdin is not None
        logger.debug("engine_command", provider=self._name, command=command)
        process.stdin.write(command + "\n")
        process.stdin.flush()

    def _readline(self, process: subprocess.Popen[str]) -> str:
        assert process.stdout is not None
        line = process.stdout.readline()
        if line == "":
            returncode = process.wait()
            if returncode < 0:
                raise ProviderFailure(
                    self._name,
                    f"engine terminated by signal {-returncode}",
                    signal=-returncode,
                )
            raise ProviderFailure(
                self._name,
                f"engine exited with status {returncode}",
                exit_code=returncode,
            )
        return line

    def _read_divide(self, process: subprocess.Popen[str]) -> str:
        lines: list[str] = []
        while True:
            line = self._readline(process).strip()
            if line.startswith("info"):
                continue
            if not line:
                break
            match = DIVIDE_LINE_RE.fullmatch(line)
            lines.append(f"{match.group('move')} {match.group('count')}" if match else line)

        total_line = self._readline(process).strip()
        match = TOTAL_LINE_RE.fullmatch(total_line)
        total = match.group("total") if match else total_line

        # Stockfish closes the report with one more blank line.
        self._readline(process)

        lines.append("")
        lines.append(total)
        return "\n".join(lines) + "\n"

    def _discard(self) -> None:
        process, self._process = self._process, None
        if process is None:
            return
        if process.poll() is None:
            process.kill()
        process.wait()
        for stream in (process.stdin, process.stdout):
            if stream is not None:
                stream.close()


__all__ = ["StockfishProvider", "position_command"]
