from __future__ import annotations

import io
import sys

import pytest

from perftree.domain.perft import STARTING_FEN, ProviderFailure, Session, parse_move
from perftree.interface.cli.controller import HELP_TEXT

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


@pytest.fixture
def providers(static_provider):
    return static_provider("script"), static_provider("stockfish")


@pytest.fixture
def controller(make_controller, providers):
    return make_controller(*providers)


def test_fen_prints_and_sets_base(controller, session: Session, console) -> None:
    controller.execute(session, "move e2e4")
    controller.execute(session, "fen")
    assert console.out == [STARTING_FEN]

    controller.execute(session, f"fen {KIWIPETE}")
    assert session.position.base == KIWIPETE
    assert session.position.moves == ()


def test_bad_fen_is_reported_and_ignored(controller, session: Session, console) -> None:
    assert controller.execute(session, "fen not/a/fen w")
    assert session.position.base == STARTING_FEN
    assert console.err and console.err[0].startswith("error: ")


def test_moves_prints_and_replaces(controller, session: Session, console) -> None:
    controller.execute(session, "moves")
    controller.execute(session, "moves e2e4 E7E5 g1f3")
    controller.execute(session, "moves")
    assert console.out == ["", "e2e4 e7e5 g1f3"]


def test_moves_with_bad_token_keeps_previous_list(controller, session: Session, console) -> None:
    controller.execute(session, "moves d2d4")
    controller.execute(session, "moves e2e4 xx e7e5")
    assert session.position.tokens == ["d2d4"]
    assert "'xx'" in console.err[0]


def test_depth_prints_sets_and_rejects(controller, session: Session, console) -> None:
    controller.execute(session, "depth")
    controller.execute(session, "depth 4")
    controller.execute(session, "depth -1")
    controller.execute(session, "depth deep")
    assert console.out == ["1"]
    assert session.depth == 4
    assert len(console.err) == 2


def test_navigation_commands(controller, session: Session, console) -> None:
    controller.execute(session, "child e2e4")
    controller.execute(session, "move e7e5")
    controller.execute(session, "unmove")
    assert session.position.tokens == ["e2e4"]

    controller.execute(session, "parent")
    controller.execute(session, "parent")
    assert session.position.tokens == []
    assert console.err == ["error: already at the root position"]

    controller.execute(session, "moves e2e4 e7e5")
    controller.execute(session, "root")
    assert session.position.tokens == []
    assert session.position.base == STARTING_FEN


def test_child_requires_argument(controller, session: Session, console) -> None:
    controller.execute(session, "child")
    assert console.err == ["error: missing argument, expected a child move"]


def test_unknown_and_blank_commands_continue(controller, session: Session, console) -> None:
    assert controller.execute(session, "   ")
    assert controller.execute(session, "frobnicate now")
    assert console.err == ["error: unknown command 'frobnicate'"]


def test_exit_and_quit_end_the_session(controller, session: Session) -> None:
    assert controller.execute(session, "exit") is False
    assert controller.execute(session, "quit") is False


def test_help_lists_commands(controller, session: Session, console) -> None:
    controller.execute(session, "help")
    assert console.out == [HELP_TEXT]


def test_board_prints_current_position(controller, session: Session, console) -> None:
    controller.execute(session, "moves e2e4")
    controller.execute(session, "board")
    assert console.out[-1] == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"


def test_diff_matching_providers(make_controller, static_provider, session, console, opening_output) -> None:
    left = static_provider("script", opening_output)
    right = static_provider("stockfish", opening_output)
    controller = make_controller(left, right)

    controller.execute(session, "diff")

    assert console.err == []
    assert console.out[-1] == "total  20  20"
    assert len(console.out) == 22
    assert left.calls == [(1, STARTING_FEN, (), False)]
    assert right.calls == left.calls


def test_diff_reports_one_sided_moves(make_controller, static_provider, session, console) -> None:
    controller = make_controller(
        static_provider("script", "e2e4 1\n\n1\n"),
        static_provider("stockfish", "d2d4 1\n\n1\n"),
    )
    controller.execute(session, "diff")
    assert console.out == ["e2e4  1  -", "d2d4  -  1", "", "total  1  1"]


def test_diff_depth_counts_from_base(make_controller, static_provider, session) -> None:
    left = static_provider("script")
    right = static_provider("stockfish")
    controller = make_controller(left, right)

    controller.execute(session, "depth 3")
    controller.execute(session, "moves e2e4 e7e5")
    controller.execute(session, "chess960")
    controller.execute(session, "diff")

    moves = (parse_move("e2e4"), parse_move("e7e5"))
    assert left.calls == [(1, STARTING_FEN, moves, True)]
    assert right.calls == left.calls


def test_diff_deeper_than_depth_is_rejected(make_controller, static_provider, session, console) -> None:
    left = static_provider("script")
    controller = make_controller(left, static_provider("stockfish"))

    controller.execute(session, "moves e2e4 e7e5")
    controller.execute(session, "diff")

    assert left.calls == []
    assert "depth 1" in console.err[0]


def test_diff_failure_on_one_side_still_renders_other(make_controller, static_provider, session, console) -> None:
    failure = ProviderFailure("script", "exited with status 3", exit_code=3, stderr="boom\n")
    left = static_provider("script", error=failure)
    right = static_provider("stockfish", "e2e4 1\n\n1\n")
    controller = make_controller(left, right, parallel=True)

    assert controller.execute(session, "diff")

    assert console.err == ["error: script: exited with status 3", "boom"]
    assert console.out == ["e2e4  -  1", "", "total  error  1"]
    assert len(right.calls) == 1


def test_diff_malformed_output_names_provider(make_controller, static_provider, session, console) -> None:
    controller = make_controller(
        static_provider("script", "e2e4 1\n\n1\n"),
        static_provider("stockfish", "e2e4 1\n1\n"),
    )
    controller.execute(session, "diff")
    assert console.err == ["error: stockfish: malformed output: missing separator"]
    assert console.out[-1] == "total  1  error"


def test_serve_reads_until_quit(controller, session: Session, console) -> None:
    stream = io.StringIO("depth 2\n\nmove e2e4\ndepth\nquit\ndepth 5\n")
    controller.serve(session, stream)
    assert console.out == ["2"]
    assert session.depth == 2
    assert session.position.tokens == ["e2e4"]


def test_serve_stops_at_end_of_input(controller, session: Session, console) -> None:
    controller.serve(session, io.StringIO("moves e2e4\nmoves"))
    assert console.out == ["e2e4"]


@pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"), reason="int() has no digit limit"
)
def test_oversized_count_fails_one_side_only(make_controller, static_provider, session, console) -> None:
    left = static_provider("script", "e2e4 " + "9" * 5000 + "\n\n1\n")
    right = static_provider("stockfish", "e2e4 1\n\n1\n")
    controller = make_controller(left, right)

    controller.serve(session, io.StringIO("diff\ndepth\n"))

    assert console.err[0].startswith("error: script: line 1: count too large")
    assert console.out == ["e2e4  -  1", "", "total  error  1", "1"]
    assert len(right.calls) == 1
