"""Board model: legality, keys and serialisation."""

from __future__ import annotations

import pytest

from backend.models.board import GOAL_ID, Block, Board, Move, Orientation

H = Orientation.HORIZONTAL
V = Orientation.VERTICAL


@pytest.fixture
def board() -> Board:
    # goal on cols 0-1 of the exit row, one vertical blocker across it
    return Board((Block.goal_block(), Block("b1", 1, 2, 2, V)))


# -- blocks -------------------------------------------------------------------


def test_block_cells() -> None:
    assert Block("h", 0, 1, 3, H).cells() == [(0, 1), (0, 2), (0, 3)]
    assert Block("v", 3, 5, 2, V).cells() == [(3, 5), (4, 5)]


@pytest.mark.parametrize("length", [1, 4, 0])
def test_block_rejects_bad_length(length: int) -> None:
    with pytest.raises(ValueError):
        Block("b", 0, 0, length, H)


def test_block_orientation_is_coerced() -> None:
    assert Block("b", 0, 0, 2, "vertical").orientation is V


def test_goal_block_defaults() -> None:
    goal = Block.goal_block()
    assert (goal.id, goal.row, goal.col, goal.length) == (GOAL_ID, 2, 0, 2)
    assert goal.is_goal and goal.horizontal


# -- legality -----------------------------------------------------------------


def test_possible_moves_scans_back_then_forward(board: Board) -> None:
    assert board.possible_moves(1) == [(0, 2), (2, 2), (3, 2), (4, 2)]


def test_blocked_goal_has_no_moves(board: Board) -> None:
    assert board.possible_moves(0) == []


def test_horizontal_moves_stop_at_edge() -> None:
    board = Board((Block("b", 0, 2, 2, H),))
    assert board.possible_moves(0) == [(0, 1), (0, 0), (0, 3), (0, 4)]


def test_can_occupy_does_not_mutate(board: Board) -> None:
    before = board.state_key()

    assert board.can_occupy("b1", 0, 2)
    assert not board.can_occupy("b1", 1, 1)   # would overlap the goal
    assert not board.can_occupy("b1", 5, 2)   # off the grid
    assert board.state_key() == before
    assert board.block("b1").row == 1


def test_occupied_mask_is_read_only(board: Board) -> None:
    mask = board.occupied_mask

    with pytest.raises(TypeError):
        mask[2 * 6 + 2] = 0
    assert board.possible_moves(0) == []
    assert sum(board.occupied_mask) == 4


def test_can_occupy_ignores_own_cells(board: Board) -> None:
    assert board.can_occupy("b1", 2, 2)


def test_unknown_block_raises(board: Board) -> None:
    with pytest.raises(KeyError):
        board.index_of("nope")


def test_is_valid() -> None:
    assert Board((Block.goal_block(), Block("b", 0, 0, 3, H))).is_valid()
    assert not Board((Block.goal_block(), Block("b", 1, 0, 2, V))).is_valid()
    assert not Board((Block("b", 5, 5, 2, H),)).is_valid()
    assert not Board((Block("b", 0, 0, 2, H), Block("b", 4, 0, 2, H))).is_valid()


def test_has_playable_goal() -> None:
    assert Board((Block.goal_block(),)).has_playable_goal()
    assert not Board((Block("x", 2, 0, 2, H),)).has_playable_goal()
    assert not Board((Block("goal", 0, 0, 2, V, is_goal=True),)).has_playable_goal()
    two_goals = Board((Block.goal_block(), Block("g2", 2, 3, 2, H, is_goal=True)))
    assert not two_goals.has_playable_goal()


def test_is_solved() -> None:
    assert Board((Block.goal_block(col=4),)).is_solved()
    assert Board((Block.goal_block(col=3, length=3),)).is_solved()
    assert not Board((Block.goal_block(col=3),)).is_solved()


# -- transitions --------------------------------------------------------------


def test_apply_returns_new_board(board: Board) -> None:
    moved = board.apply(Move("b1", 1, 2, 0, 2))

    assert moved.block("b1").row == 0
    assert board.block("b1").row == 1


def test_without(board: Board) -> None:
    assert len(board.without("b1")) == 1
    assert board.without("b1").goal == board.goal


def test_occupancy(board: Board) -> None:
    grid = board.occupancy()

    assert grid[2][:3] == ["goal", "goal", "b1"]
    assert grid[1][2] == "b1"
    assert grid[0][0] is None


# -- keys ---------------------------------------------------------------------


def test_state_key_ignores_block_order(board: Board) -> None:
    reordered = Board(tuple(reversed(board.blocks)))
    assert reordered.state_key() == board.state_key()


def test_state_key_changes_after_move(board: Board) -> None:
    assert board.moved("b1", 0, 2).state_key() != board.state_key()


def test_layout_key_ignores_ids() -> None:
    a = Board((Block.goal_block(), Block("b1", 0, 3, 2, V)))
    b = Board((Block.goal_block(), Block("other", 0, 3, 2, V)))
    c = Board((Block.goal_block(), Block("b1", 0, 4, 2, V)))

    assert a.layout_key() == b.layout_key()
    assert a.layout_key() != c.layout_key()


# -- serialisation ------------------------------------------------------------


def test_list_round_trip(board: Board) -> None:
    data = board.to_list()

    assert data[0] == {
        "id": "goal",
        "row": 2,
        "col": 0,
        "length": 2,
        "orientation": "horizontal",
        "goal": True,
    }
    assert Board.from_list(data) == board


def test_goal_flag_defaults_to_false() -> None:
    block = Block.from_dict(
        {"id": "b", "row": 0, "col": 0, "length": 2, "orientation": "vertical"}
    )
    assert not block.is_goal


@pytest.mark.parametrize(
    "data",
    [
        {"row": 0, "col": 0, "length": 2, "orientation": "vertical"},
        {"id": "b", "row": 0, "col": 0, "length": 2, "orientation": "diagonal"},
        {"id": "b", "row": "x", "col": 0, "length": 2, "orientation": "vertical"},
        {"id": "b", "row": 0, "col": 0, "length": 5, "orientation": "vertical"},
    ],
)
def test_malformed_block_data(data: dict) -> None:
    with pytest.raises(ValueError):
        Block.from_dict(data)


def test_from_list_rejects_non_list() -> None:
    with pytest.raises(ValueError):
        Board.from_list({"id": "goal"})


def test_move_dict() -> None:
    move = Move("b1", 1, 2, 4, 2)

    assert move.to_dict() == {"block_id": "b1", "from": [1, 2], "to": [4, 2]}
    assert Move.from_dict(move.to_dict()) == move
    assert move.distance == 3
    with pytest.raises(ValueError):
        Move.from_dict({"block_id": "b1", "from": [1]})
