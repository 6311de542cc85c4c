"""Tracks the mutable state of a level in progress."""

from __future__ import annotations

import time

from backend.models.board import Board, Move


class GameState:
    """Current board, move history and a play clock.

    The clock starts with the first recorded move and freezes once the
    board is solved.
    """

    def __init__(self, board: Board) -> None:
        self.initial_board = board
        self.reset()

    def reset(self) -> None:
        """Back to the starting layout with no moves and a stopped clock."""
        self.board = self.initial_board
        self.moves: int = 0
        self.history: list[Move] = []
        self._started_at: float | None = None
        self._elapsed_banked: float = 0.0
        self._paused: bool = False

    # -- time tracking --------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._started_at is not None and not self._paused

    @property
    def elapsed_time(self) -> float:
        if self.running:
            return self._elapsed_banked + (time.time() - self._started_at)
        return self._elapsed_banked

    def pause(self) -> None:
        if self.running:
            self._elapsed_banked += time.time() - self._started_at
        self._paused = True

    def resume(self) -> None:
        if self._paused and not self.is_solved:
            self._paused = False
            if self._started_at is not None:
                self._started_at = time.time()

    # -- moves ----------------------------------------------------------------

    def record(self, move: Move, board: Board) -> None:
        if self._started_at is None and not self._paused:
            self._started_at = time.time()
        self.board = board
        self.history.append(move)
        self.moves += 1
        if board.is_solved():
            self.pause()

    @property
    def is_solved(self) -> bool:
        return self.board.is_solved()
