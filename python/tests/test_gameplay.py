"""Game session: move validation, win condition and scoring."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from backend.config import GeneratorConfig, SolverConfig
from backend.engine.gamegenerator import LevelGenerator
from backend.engine.gameplay.game import GamePlay
from backend.engine.gamescore import best_score, cumulative_best_score, level_score
from backend.models.board import Block, Board, Move, Orientation
from backend.models.levels import LevelRecord, LevelStore

BOARD = Board((Block.goal_block(), Block("b1", 1, 2, 2, Orientation.VERTICAL)))


@pytest.fixture
def game() -> GamePlay:
    return GamePlay.from_board(BOARD, level_number=1)


# -- movement -----------------------------------------------------------------


def test_blocked_goal_cannot_move(game: GamePlay) -> None:
    assert not game.move_block("goal", 2, 4)
    assert game.state.moves == 0


def test_win_after_clearing_exit_row(game: GamePlay) -> None:
    assert game.move_block("b1", 0, 2)
    assert not game.is_won
    assert game.move_block("goal", 2, 4)

    assert game.is_won
    assert game.state.moves == 2
    assert [m.block_id for m in game.state.history] == ["b1", "goal"]
    assert not game.move_block("goal", 2, 3)


@pytest.mark.parametrize(
    "row, col",
    [
        (1, 3),  # sideways for a vertical block
        (5, 2),  # off the grid
        (1, 2),  # no-op
        (0, 3),  # diagonal
    ],
)
def test_illegal_destinations_are_rejected(game: GamePlay, row: int, col: int) -> None:
    assert not game.move_block("b1", row, col)
    assert game.state.board == BOARD


def test_cannot_jump_over_blocks() -> None:
    board = Board(
        (
            Block.goal_block(),
            Block("b1", 0, 0, 2, Orientation.VERTICAL),
            Block("b2", 3, 0, 2, Orientation.VERTICAL),
        )
    )
    game = GamePlay.from_board(board)

    # b2 can't pass the goal block on its way up
    assert not game.move_block("b2", 0, 0)
    assert game.move_block("b2", 4, 0)


def test_unknown_block_is_rejected(game: GamePlay) -> None:
    assert not game.move_block("ghost", 0, 0)
    assert not game.apply(Move("ghost", 0, 0, 1, 0))


def test_apply_checks_start_position(game: GamePlay) -> None:
    assert not game.apply(Move("b1", 0, 2, 3, 2))
    assert game.apply(Move("b1", 1, 2, 3, 2))


def test_solved_board_is_not_won_without_moves() -> None:
    game = GamePlay.from_board(Board((Block.goal_block(col=4),)))

    assert game.state.is_solved
    assert not game.is_won


def test_new_session_generates_a_board() -> None:
    generator = LevelGenerator(
        GeneratorConfig(max_attempts=3, relaxed_attempts=1),
        SolverConfig(max_iterations=5_000),
        rng=random.Random(1),
    )
    game = GamePlay(level_number=2, generator=generator)

    assert game.level_number == 2
    assert game.state.board.has_playable_goal()
    assert game.state.moves == 0


# -- clock --------------------------------------------------------------------


def test_clock_starts_with_first_move(game: GamePlay) -> None:
    assert not game.state.running
    assert game.state.elapsed_time == 0

    game.move_block("b1", 0, 2)
    assert game.state.running


def test_clock_stops_when_solved(game: GamePlay) -> None:
    game.move_block("b1", 0, 2)
    game.move_block("goal", 2, 4)
    frozen = game.state.elapsed_time

    assert not game.state.running
    game.state.resume()
    assert not game.state.running
    assert game.state.elapsed_time == frozen


def test_pause_freezes_elapsed_time(game: GamePlay) -> None:
    game.move_block("b1", 0, 2)
    game.state.pause()
    frozen = game.state.elapsed_time

    assert game.state.elapsed_time == frozen
    game.state.resume()
    assert game.state.running
    assert game.state.elapsed_time >= frozen


def test_reset_restores_start(game: GamePlay) -> None:
    game.move_block("b1", 0, 2)
    game.state.reset()

    assert game.state.board == BOARD
    assert game.state.moves == 0
    assert game.state.history == []
    assert not game.state.running


# -- scoring ------------------------------------------------------------------


def test_level_score() -> None:
    assert level_score(1, 3) == 970
    assert level_score(2, 5, 12.9) == 2000 - 12 * 5 - 50
    assert level_score(3, 4, 10, time_penalty=1) == 3000 - 10 - 40


def test_level_score_floors_at_zero() -> None:
    assert level_score(1, 200) == 0
    assert level_score(1, 0, 1_000) == 0


def test_best_score_ignores_time() -> None:
    assert best_score(10, 25) == 10_000 - 250


def test_session_score(game: GamePlay) -> None:
    game.move_block("b1", 0, 2)
    game.move_block("goal", 2, 4)
    game.state.pause()

    assert game.score() == level_score(1, 2, game.state.elapsed_time)


def test_cumulative_best_score(tmp_path: Path) -> None:
    store = LevelStore(tmp_path / "levels.json")
    store.put(LevelRecord(1, BOARD, best_moves=2, best_score=980))
    store.put(LevelRecord(3, BOARD, best_moves=2, best_score=2980))
    store.put(LevelRecord(4, BOARD, best_moves=2, best_score=3980))

    summary = cumulative_best_score(store, 3)

    assert summary.total == 3960
    assert summary.counted == 2
    assert summary.missing == [2]
    assert (summary.lowest, summary.highest) == (980, 2980)
    assert summary.average == 1980
