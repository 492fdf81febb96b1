from __future__ import annotations

import subprocess
import sys
from typing import Sequence, TextIO

from perftree.domain.perft.errors import ProviderFailure
from perftree.domain.perft.notation import Move, format_move
from perftree.interface.telemetry.logging import get_logger

logger = get_logger("perftree.providers.script")


def build_arguments(depth: int, base: str, moves: Sequence[Move]) -> list[str]:
    """Positional arguments for the script: depth, FEN and, if any, the moves."""
    arguments = [str(depth), base]
    if moves:
        arguments.append(" ".join(format_move(move) for move in moves))
    return arguments


class ScriptProvider:
    """Run a user-supplied executable once per perft request."""

    def __init__(
        self,
        command: Sequence[str],
        *,
        name: str = "script",
        stderr: TextIO | None = None,
    ) -> None:
        if not command:
            raise ValueError("ScriptProvider requires a command")
        self._command = list(command)
        self._name = name
        self._stderr = stderr

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
        argv = self._command + build_arguments(depth, base, moves)
        logger.debug("provider_invoked", provider=self._name, argv=argv)
        try:
            # Undecodable bytes become U+FFFD and fail later as malformed lines.
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise ProviderFailure(self._name, f"cannot run {self._command[0]!r}: {exc}") from exc

        if proc.returncode != 0:
            if proc.returncode < 0:
                raise ProviderFailure(
                    self._name,
                    f"terminated by signal {-proc.returncode}",
                    signal=-proc.returncode,
                    stderr=proc.stderr,
                )
            raise ProviderFailure(
                self._name,
                f"exited with status {proc.returncode}",
                exit_code=proc.returncode,
                stderr=proc.stderr,
            )

        # Debug output from the script stays visible to whoever runs the session.
        if proc.stderr:
            stream = self._stderr if self._stderr is not None else sys.stderr
            stream.write(proc.stderr)
            stream.flush()
        return proc.stdout

    def close(self) -> None:
        return None


__all__ = ["ScriptProvider", "build_arguments"]
