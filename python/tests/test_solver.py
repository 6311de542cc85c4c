"""Solver test suite — parametric fixtures plus targeted scenarios.

Boards are JSON fixtures under ``<project_root>/fixtures/``.  Every test
is hard-killed by ``pytest-timeout`` (configured in ``pyproject.toml``).
Whenever the solver returns a solution, the move list is replayed
through the real game engine to verify correctness.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend.engine.gameplay.game import GamePlay
from backend.engine.gamesolver.solver import SolveStatus, Solver
from backend.models.board import Block, Board, Move, Orientation

FIXTURES_DIR = Path(__file__).resolve().parent.parent.parent / "fixtures"


# -- fixture loaders ----------------------------------------------------------


def _load(name: str) -> list[dict]:
    path = FIXTURES_DIR / name
    if not path.exists():
        return []
    with open(path) as f:
        return json.load(f)


def _ids(board_data: dict) -> str:
    return board_data["id"]


# Loaded once at import time; each entry becomes one parametrised case.
_HANDMADE = _load("boards.json")
# Written by private/scripts/large_test_fixtures.py; absent until generated.
_GENERATED = _load("generated.json")

_BY_ID = {entry["id"]: entry for entry in _HANDMADE}


def _board(board_id: str) -> Board:
    return Board.from_list(_BY_ID[board_id]["blocks"])


# -- helpers ------------------------------------------------------------------


def _assert_solve(data: dict) -> None:
    """Solve the board and verify the optimal length and the replay."""
    board = Board.from_list(data["blocks"])
    expected = data["optimal"]

    result = Solver.solve(board)

    if expected is None:
        assert result.status is SolveStatus.UNSOLVABLE, data["id"]
        assert result.moves == []
        return

    # ---- move-list sanity ---------------------------------------------------
    assert result.solved, f"Solvable board reported {result.status} ({data['id']})"
    assert all(isinstance(m, Move) for m in result.moves)
    assert result.move_count == expected, (
        f"Expected {expected} moves, got {result.move_count} ({data['id']})"
    )
    if expected == 0:
        assert board.is_solved()
        return

    # ---- apply moves via the real game engine and check win -----------------
    game = GamePlay.from_board(board)
    for i, move in enumerate(result.moves):
        ok = game.apply(move)
        assert ok, f"Move {i} ({move}) was rejected ({data['id']})"

    assert game.is_won, f"Board not solved after {result.move_count} moves ({data['id']})"


# -- fixtures -----------------------------------------------------------------


@pytest.mark.parametrize("board_data", _HANDMADE, ids=_ids)
def test_solve_handmade(board_data: dict) -> None:
    _assert_solve(board_data)


@pytest.mark.parametrize("board_data", _GENERATED, ids=_ids)
def test_solve_generated(board_data: dict) -> None:
    _assert_solve(board_data)


# -- scenarios ----------------------------------------------------------------


def test_solution_ends_with_goal_at_right_edge() -> None:
    moves = Solver.find_solution(_board("single_blocker"))

    assert [m.block_id for m in moves] == ["b1", "goal"]
    assert (moves[-1].to_row, moves[-1].to_col) == (2, 4)


def test_each_move_is_a_single_slide_along_the_block_axis() -> None:
    board = _board("two_blockers")
    for move in Solver.find_solution(board):
        block = board.block(move.block_id)
        if block.orientation is Orientation.HORIZONTAL:
            assert move.from_row == move.to_row
        else:
            assert move.from_col == move.to_col
        assert move.distance > 0
        board = board.apply(move)
    assert board.is_solved()


def test_solver_ignores_block_order() -> None:
    board = _board("chain")
    reordered = Board(tuple(reversed(board.blocks)))

    assert Solver.solve(reordered).move_count == Solver.solve(board).move_count


def test_is_solvable() -> None:
    assert Solver.is_solvable(_board("simple_fallback"))
    assert not Solver.is_solvable(_board("boxed_in"))


def test_exhausted_search_reports_reason() -> None:
    result = Solver.solve(_board("boxed_in"))

    assert result.status is SolveStatus.UNSOLVABLE
    assert result.reason == "exhausted"
    assert result.explored == 1


def test_already_solved_board_needs_no_moves() -> None:
    board = _board("already_solved")

    assert Solver.is_solvable(board)
    assert Solver.find_solution(board) == []
    assert Solver.hint(board) is None


def test_hint_is_first_optimal_move() -> None:
    hint = Solver.hint(_board("single_blocker"))

    assert hint is not None
    assert hint.block_id == "b1"
    assert hint.from_row == 1 and hint.from_col == 2


def test_hint_for_unsolvable_board_is_none() -> None:
    assert Solver.hint(_board("boxed_in")) is None


def test_without_path_tracking_moves_are_empty() -> None:
    result = Solver.solve(_board("chain"), track_path=False)

    assert result.solved
    assert result.moves == []


# -- limits -------------------------------------------------------------------


def test_iteration_cap_is_inconclusive() -> None:
    board = _board("single_blocker")
    result = Solver.solve(board, max_iterations=1)

    assert result.status is SolveStatus.INCONCLUSIVE
    assert result.reason == "iteration cap"
    assert not result.solved
    assert not Solver.is_solvable(board, max_iterations=1)


def test_cancellation_is_polled() -> None:
    calls: list[int] = []

    def cancel() -> bool:
        calls.append(1)
        return True

    result = Solver.solve(_board("two_blockers"), should_cancel=cancel, check_every=1)

    assert result.status is SolveStatus.INCONCLUSIVE
    assert result.reason == "cancelled"
    assert calls == [1]


def test_cancel_hook_returning_false_does_not_stop_search() -> None:
    result = Solver.solve(
        _board("two_blockers"), should_cancel=lambda: False, check_every=1
    )

    assert result.solved
    assert result.move_count == 3


# -- malformed boards ---------------------------------------------------------


def test_board_without_goal_is_malformed() -> None:
    board = Board((Block("b1", 0, 0, 2, Orientation.HORIZONTAL),))
    result = Solver.solve(board)

    assert result.status is SolveStatus.UNSOLVABLE
    assert result.reason == "malformed"


def test_overlapping_blocks_are_malformed() -> None:
    board = Board(
        (
            Block.goal_block(),
            Block("b1", 1, 1, 2, Orientation.VERTICAL),
        )
    )
    assert Solver.solve(board).reason == "malformed"


def test_goal_off_exit_row_is_malformed() -> None:
    goal = Block("goal", 0, 0, 2, Orientation.HORIZONTAL, is_goal=True)

    assert Solver.solve(Board((goal,))).reason == "malformed"


def test_zero_check_interval_polls_every_state() -> None:
    result = Solver.solve(
        _board("two_blockers"), should_cancel=lambda: True, check_every=0
    )

    assert result.status is SolveStatus.INCONCLUSIVE
    assert result.reason == "cancelled"
    assert result.explored == 1
