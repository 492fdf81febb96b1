from __future__ import annotations

import shlex
import sys

import click

from perftree.domain.perft.errors import InvalidPositionError
from perftree.domain.perft.position import PositionState
from perftree.domain.perft.session import DiffRunner, Session
from perftree.infrastructure.config import DEFAULT_PREFIX, load_config
from perftree.infrastructure.providers import ScriptProvider, StockfishProvider
from perftree.interface.cli.controller import SessionController
from perftree.interface.telemetry.logging import setup_logging


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("script", type=str)
@click.option("--depth", type=click.IntRange(min=0), default=None, help="Initial perft depth.")
@click.option("--fen", type=str, default=None, help="Initial base position.")
@click.option("--stockfish", "stockfish_path", type=str, default=None, help="Reference engine command.")
@click.option("--log-level", type=str, default=None, help="structlog level, e.g. INFO or DEBUG.")
@click.option("--sequential", is_flag=True, help="Run the two providers one after the other.")
@click.option("--color/--no-color", default=None, help="Highlight mismatches (default: when stdout is a terminal).")
def main(
    script: str,
    depth: int | None,
    fen: str | None,
    stockfish_path: str | None,
    log_level: str | None,
    sequential: bool,
    color: bool | None,
) -> None:
    """Compare SCRIPT's perft counts with Stockfish, one position at a time.

    SCRIPT is run as `SCRIPT <depth> <fen> [<moves>]` and must print one
    `<move> <count>` line per move, a blank line, then the total.
    """
    config = load_config()
    setup_logging(log_level or config.log_level)

    try:
        position = PositionState(fen or config.default_fen)
    except InvalidPositionError as exc:
        source = "--fen" if fen else f"{DEFAULT_PREFIX}DEFAULT_FEN"
        raise click.BadParameter(str(exc), param_hint=source) from exc

    session = Session(
        position=position,
        depth=depth if depth is not None else config.default_depth,
    )
    runner = DiffRunner(
        ScriptProvider([script]),
        StockfishProvider(shlex.split(stockfish_path or config.stockfish_path)),
        parallel=config.parallel and not sequential,
    )
    controller = SessionController(
        runner,
        color=color if color is not None else sys.stdout.isatty(),
    )

    try:
        controller.serve(
            session,
            sys.stdin,
            interactive=sys.stdin.isatty() and sys.stdout.isatty(),
        )
    finally:
        runner.close()


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["main"]
