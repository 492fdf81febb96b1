from __future__ import annotations

from functools import partial
from typing import Callable, Dict, List, TextIO
from uuid import uuid4

import click

from perftree.domain.perft.errors import PerftreeError, ProviderFailure, UnknownCommandError
from perftree.domain.perft.session import DiffOutcome, DiffRunner, Session, SideOutcome, parse_depth
from perftree.interface.cli.render import render_report
from perftree.interface.telemetry.logging import bind_session, get_logger

logger = get_logger("perftree.cli.session")

PROMPT = "> "

HELP_TEXT = """\
fen [FEN]          show or set the base position (clears the moves)
moves [MOVE...]    show or replace the moves played from the base
depth [N]          show or set the perft depth, counted from the base
root               go back to the base position
child|move MOVE    play MOVE from the current position
parent|unmove      take back the last move
diff               run both providers here and compare their counts
board              print the current position
chess960           enable Chess960 castling in the reference engine
nochess960         disable Chess960 castling in the reference engine
exit|quit          leave"""


class CommandUsageError(PerftreeError):
    code = "usage"


Echo = Callable[[str], None]
Handler = Callable[[Session, List[str]], None]


class SessionController:
    """Interpret commands against a :class:`Session`, one line at a time."""

    def __init__(
        self,
        runner: DiffRunner,
        *,
        echo: Echo | None = None,
        echo_err: Echo | None = None,
        color: bool = False,
    ) -> None:
        self._runner = runner
        # click strips ANSI codes off non-terminals unless color is passed.
        self._echo = echo or partial(click.echo, color=color)
        self._echo_err = echo_err or partial(click.echo, err=True)
        self._color = color
        self._log = bind_session(logger, uuid4().hex)
        self._handlers: Dict[str, Handler] = {
            "fen": self._fen,
            "moves": self._moves,
            "depth": self._depth,
            "root": self._root,
            "child": self._child,
            "move": self._child,
            "parent": self._parent,
            "unmove": self._parent,
            "diff": self._diff,
            "board": self._board,
            "chess960": self._chess960,
            "nochess960": self._nochess960,
            "help": self._help,
        }

    def execute(self, session: Session, line: str) -> bool:
        """Run one command line; return ``False`` once the session should end."""
        words = line.split()
        if not words:
            return True

        command, args = words[0], words[1:]
        if command in ("exit", "quit"):
            self._log.info("session_ended")
            return False

        try:
            handler = self._handlers.get(command)
            if handler is None:
                raise UnknownCommandError(command)
            handler(session, args)
        except PerftreeError as exc:
            self._log.warning("command_rejected", command=command, code=exc.code, detail=str(exc))
            self._echo_err(f"error: {exc}")
        return True

    def serve(self, session: Session, stream: TextIO, *, interactive: bool = False) -> None:
        """Read commands from ``stream`` until ``exit``/``quit`` or end of input."""
        self._log.info(
            "session_started",
            base=session.position.base,
            depth=session.depth,
        )
        while True:
            if interactive:
                click.echo(PROMPT, nl=False)
            line = stream.readline()
            if not line:
                if interactive:
                    click.echo()
                self._log.info("input_closed")
                return
            if not self.execute(session, line):
                return

    def _fen(self, session: Session, args: List[str]) -> None:
        if not args:
            self._echo(session.position.base)
            return
        session.position.set_base(" ".join(args))

    def _moves(self, session: Session, args: List[str]) -> None:
        if not args:
            self._echo(" ".join(session.position.tokens))
            return
        session.position.set_moves(args)

    def _depth(self, session: Session, args: List[str]) -> None:
        if not args:
            self._echo(str(session.depth))
            return
        session.set_depth(parse_depth(args[0]))

    def _root(self, session: Session, args: List[str]) -> None:
        session.position.reset()

    def _child(self, session: Session, args: List[str]) -> None:
        if not args:
            raise CommandUsageError("missing argument, expected a child move")
        session.position.push(args[0])

    def _parent(self, session: Session, args: List[str]) -> None:
        session.position.pop()

    def _diff(self, session: Session, args: List[str]) -> None:
        outcome = self._runner.run(session)
        for side in (outcome.left, outcome.right):
            if not side.ok:
                self._report_failure(side)

        for line in render_report(outcome.report, color=self._color):
            self._echo(line)

        self._log_outcome(outcome)

    def _board(self, session: Session, args: List[str]) -> None:
        board = session.position.current_board(chess960=session.chess960)
        self._echo(str(board))
        self._echo(board.fen())

    def _chess960(self, session: Session, args: List[str]) -> None:
        session.chess960 = True

    def _nochess960(self, session: Session, args: List[str]) -> None:
        session.chess960 = False

    def _help(self, session: Session, args: List[str]) -> None:
        self._echo(HELP_TEXT)

    def _report_failure(self, side: SideOutcome) -> None:
        error = side.error
        assert error is not None
        if isinstance(error, ProviderFailure):
            self._echo_err(f"error: {error}")
            if error.stderr:
                self._echo_err(error.stderr.rstrip())
        else:
            self._echo_err(f"error: {side.provider}: {error}")
        self._log.warning(
            "provider_failed",
            provider=side.provider,
            code=error.code,
            detail=str(error),
        )

    def _log_outcome(self, outcome: DiffOutcome) -> None:
        report = outcome.report
        self._log.info(
            "diff_completed",
            depth=outcome.depth,
            rows=len(report.rows),
            discrepancies=len(report.discrepancies),
            left_total=report.left_total,
            right_total=report.right_total,
        )


__all__ = ["CommandUsageError", "HELP_TEXT", "PROMPT", "SessionController"]
