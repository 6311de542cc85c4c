"""Core gameplay logic — validates slides and checks the win condition."""

from __future__ import annotations

from backend.engine.gamegenerator import LevelGenerator
from backend.engine.gamescore import level_score
from backend.engine.gamestate import GameState
from backend.models.board import Board, Move


class GamePlay:
    """Orchestrates a single level."""

    def __init__(self, level_number: int = 1, generator: LevelGenerator | None = None) -> None:
        self.level_number = level_number
        board = (generator or LevelGenerator()).generate_level(level_number)
        self.state = GameState(board)

    @classmethod
    def from_board(cls, board: Board, level_number: int = 1) -> "GamePlay":
        """Create a session from an existing board (e.g. loaded from file)."""
        obj = object.__new__(cls)
        obj.level_number = level_number
        obj.state = GameState(board)
        return obj

    # -- movement -------------------------------------------------------------

    def move_block(self, block_id: str, row: int, col: int) -> bool:
        """Slide *block_id* so its top-left cell lands on (row, col).

        Only destinations reachable in one slide along the block's own
        axis are accepted; every cell passed over must be empty.
        Returns True if the move was applied; a won level takes no more
        moves.
        """
        if self.is_won:
            return False
        board = self.state.board
        try:
            index = board.index_of(block_id)
        except KeyError:
            return False

        if (row, col) not in board.possible_moves(index):
            return False

        block = board.blocks[index]
        move = Move(block_id, block.row, block.col, row, col)
        self.state.record(move, board.moved(block_id, row, col))
        return True

    def apply(self, move: Move) -> bool:
        """Replay *move*; rejected if the block is not where the move starts."""
        try:
            block = self.state.board.block(move.block_id)
        except KeyError:
            return False
        if (block.row, block.col) != (move.from_row, move.from_col):
            return False
        return self.move_block(move.block_id, move.to_row, move.to_col)

    # -- queries --------------------------------------------------------------

    @property
    def is_won(self) -> bool:
        """The goal block has exited, after at least one move."""
        return self.state.moves > 0 and self.state.is_solved

    def score(self) -> int:
        return level_score(
            self.level_number, self.state.moves, self.state.elapsed_time
        )
