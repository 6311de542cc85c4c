"""Breadth-first solver for the sliding block puzzle."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable

from backend.models.board import GRID_SIZE, Board, Move, Orientation, slide_targets

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 50_000
CHECK_EVERY = 256


class SolveStatus(StrEnum):
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    INCONCLUSIVE = "inconclusive"


@dataclass
class SolveResult:
    """Outcome of one search.

    ``UNSOLVABLE`` is a proven negative (malformed board or exhausted
    frontier).  ``INCONCLUSIVE`` means the search stopped early; the board
    may or may not have a solution.
    """

    status: SolveStatus
    moves: list[Move] = field(default_factory=list)
    explored: int = 0
    reason: str = ""

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    @property
    def move_count(self) -> int:
        return len(self.moves)


class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def solve(
        board: Board,
        *,
        track_path: bool = True,
        max_iterations: int = MAX_ITERATIONS,
        should_cancel: Callable[[], bool] | None = None,
        check_every: int = CHECK_EVERY,
    ) -> SolveResult:
        """Search for the shortest sequence of slides that frees the goal block.

        Each queue entry carries its own path, so the winning path comes
        straight off the queue.  The goal test runs on dequeue, which is
        what makes the first hit a shortest path.
        """
        if not board.has_playable_goal() or not board.is_valid():
            return SolveResult(SolveStatus.UNSOLVABLE, reason="malformed")
        check_every = max(1, check_every)

        blocks = board.blocks
        lengths = tuple(b.length for b in blocks)
        orientations = tuple(b.orientation for b in blocks)
        goal_index = next(i for i, b in enumerate(blocks) if b.is_goal)
        goal_length = lengths[goal_index]
        cells = GRID_SIZE * GRID_SIZE

        # Block order is fixed for the whole search, so a plain tuple of
        # positions identifies a state.
        start = tuple((b.row, b.col) for b in blocks)
        queue: deque[tuple[tuple[tuple[int, int], ...], tuple[Move, ...] | None]] = deque(
            [(start, () if track_path else None)]
        )
        visited = {start}
        explored = 0

        while queue:
            explored += 1
            if explored > max_iterations:
                logger.warning(f"Solver gave up after {max_iterations} states")
                return SolveResult(
                    SolveStatus.INCONCLUSIVE, explored=explored, reason="iteration cap"
                )
            if (
                should_cancel is not None
                and explored % check_every == 0
                and should_cancel()
            ):
                logger.debug(f"Solver cancelled after {explored} states")
                return SolveResult(
                    SolveStatus.INCONCLUSIVE, explored=explored, reason="cancelled"
                )

            positions, path = queue.popleft()

            if positions[goal_index][1] + goal_length == GRID_SIZE:
                return SolveResult(
                    SolveStatus.SOLVED,
                    moves=list(path) if path is not None else [],
                    explored=explored,
                )

            occupied = bytearray(cells)
            for (row, col), length, orientation in zip(positions, lengths, orientations):
                if orientation is Orientation.HORIZONTAL:
                    base = row * GRID_SIZE + col
                    occupied[base : base + length] = b"\x01" * length
                else:
                    for r in range(row, row + length):
                        occupied[r * GRID_SIZE + col] = 1

            for i, (row, col) in enumerate(positions):
                for target in slide_targets(
                    occupied, row, col, lengths[i], orientations[i]
                ):
                    nxt = positions[:i] + (target,) + positions[i + 1 :]
                    if nxt in visited:
                        continue
                    visited.add(nxt)
                    if path is None:
                        queue.append((nxt, None))
                    else:
                        move = Move(blocks[i].id, row, col, target[0], target[1])
                        queue.append((nxt, path + (move,)))

        return SolveResult(SolveStatus.UNSOLVABLE, explored=explored, reason="exhausted")

    @staticmethod
    def is_solvable(board: Board, **kwargs) -> bool:
        """Return True if *board* provably reaches the goal state.

        A search that hits its cap counts as unsolvable.
        """
        return Solver.solve(board, track_path=False, **kwargs).solved

    @staticmethod
    def find_solution(board: Board, **kwargs) -> list[Move]:
        """Return the shortest move list, or ``[]`` if none was found."""
        return Solver.solve(board, **kwargs).moves

    @staticmethod
    def hint(board: Board, **kwargs) -> Move | None:
        """Return the first move of an optimal solution, or ``None``."""
        if board.is_solved():
            return None
        moves = Solver.find_solution(board, **kwargs)
        return moves[0] if moves else None
