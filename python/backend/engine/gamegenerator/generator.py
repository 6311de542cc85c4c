"""Generates solvable sliding block levels of increasing difficulty."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable

from backend.config import GeneratorConfig, SolverConfig
from backend.engine.gamegenerator.difficulty import DifficultyTarget, target_for_level
from backend.engine.gamesolver import SolveResult, Solver
from backend.models.board import (
    EXIT_ROW,
    GRID_SIZE,
    Block,
    Board,
    Move,
    Orientation,
)
from backend.models.levels import LevelStore

logger = logging.getLogger(__name__)

_H = Orientation.HORIZONTAL
_V = Orientation.VERTICAL


def _layout(*placements: tuple[int, int, int, Orientation]) -> Board:
    blocks = [Block.goal_block()]
    for i, (row, col, length, orientation) in enumerate(placements, 1):
        blocks.append(Block(f"block{i}", row, col, length, orientation))
    return Board(tuple(blocks))


# Hand-authored boards used when generation produces nothing solvable.
SIMPLE_FALLBACK = _layout((0, 3, 2, _V), (2, 3, 2, _V), (4, 2, 2, _H), (5, 4, 2, _H))
MEDIUM_FALLBACK = _layout(
    (0, 2, 2, _V), (1, 4, 2, _V), (2, 3, 2, _V), (4, 1, 2, _H), (5, 3, 2, _H)
)
MINIMAL_FALLBACK = _layout((2, 3, 2, _V))


class GenerationSource(StrEnum):
    PREGENERATED = "pregenerated"
    TARGET = "target"
    RELAXED = "relaxed"
    BEST = "best"
    FALLBACK = "fallback"


@dataclass
class GenerationResult:
    level: int
    board: Board
    best_moves: int
    source: GenerationSource
    attempts: int = 0


@dataclass
class _Best:
    board: Board
    moves: int
    closeness: float


class LevelGenerator:
    """Proposes random boards and keeps the one that best fits a level.

    Create one per caller (or per worker); the only state is the random
    source and the optional store of pre-generated levels.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        solver_config: SolverConfig | None = None,
        *,
        rng: random.Random | None = None,
        store: LevelStore | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.solver_config = solver_config or SolverConfig()
        self.rng = rng or random.Random()
        self.store = store

    # -- public API -----------------------------------------------------------

    def target(self, level_number: int) -> DifficultyTarget:
        return target_for_level(
            level_number, self.config.saturation_level, self.config.curve_exponent
        )

    def generate_level(
        self, level_number: int = 1, should_cancel: Callable[[], bool] | None = None
    ) -> Board:
        """Return a solvable board for *level_number*.  Never raises."""
        return self.generate(level_number, should_cancel).board

    def generate(
        self, level_number: int = 1, should_cancel: Callable[[], bool] | None = None
    ) -> GenerationResult:
        pregenerated = self._pregenerated(level_number)
        if pregenerated is not None:
            return pregenerated

        cfg = self.config
        target = self.target(level_number)
        logger.debug(
            f"Generating level {level_number}: difficulty={target.difficulty:.2f}, "
            f"moves={target.min_moves}-{target.max_moves}, "
            f"blocks={target.min_blocks}-{target.max_blocks}"
        )

        best: _Best | None = None
        attempts = 0

        for _ in range(cfg.max_attempts):
            if should_cancel is not None and should_cancel():
                break
            attempts += 1
            candidate = self._candidate(target, target.difficulty, should_cancel)
            if candidate is None:
                continue
            board, solution = candidate
            moves = len(solution)
            best = self._keep_best(best, board, moves, target)

            if not target.accepts(moves):
                continue
            if target.difficulty > cfg.spread_threshold and not self.requires_most_blocks(
                board, solution
            ):
                continue

            logger.info(
                f"Level {level_number} generated ({moves} moves, attempt {attempts})"
            )
            return GenerationResult(
                level_number, board, moves, GenerationSource.TARGET, attempts
            )

        relaxed = target.relaxed()
        logger.warning(
            f"Level {level_number}: no candidate in {target.min_moves}-"
            f"{target.max_moves} moves, retrying with relaxed constraints"
        )
        for _ in range(cfg.relaxed_attempts):
            if should_cancel is not None and should_cancel():
                break
            attempts += 1
            candidate = self._candidate(target, relaxed.difficulty, should_cancel)
            if candidate is None:
                continue
            board, solution = candidate
            moves = len(solution)
            best = self._keep_best(best, board, moves, target)
            if moves >= relaxed.min_moves:
                logger.info(
                    f"Level {level_number} generated with relaxed constraints: {moves} moves"
                )
                return GenerationResult(
                    level_number, board, moves, GenerationSource.RELAXED, attempts
                )

        if best is not None and best.moves > 0:
            logger.warning(
                f"Level {level_number}: returning best found ({best.moves} moves)"
            )
            return GenerationResult(
                level_number, best.board, best.moves, GenerationSource.BEST, attempts
            )

        logger.warning(f"Level {level_number}: nothing solvable generated, using fallback")
        board = self.fallback(target.difficulty)
        moves = self._solve(board).move_count
        return GenerationResult(
            level_number, board, moves, GenerationSource.FALLBACK, attempts
        )

    # -- placement ------------------------------------------------------------

    def random_layout(
        self, min_blocks: int, max_blocks: int, difficulty: float = 0.0
    ) -> Board:
        """Place the goal block, then up to a random number of extra blocks.

        Higher *difficulty* favours blocks on the exit row and vertical
        blocks across the goal's path.
        """
        rng = self.rng
        board = Board((Block.goal_block(),))
        wanted = rng.randint(min_blocks, max_blocks)
        placed = 0
        next_id = 1

        for _ in range(self.config.placement_attempts):
            if placed >= wanted:
                break
            strategic = placed < wanted * 0.7 and rng.random() < 0.3 + difficulty * 0.5
            row, col, length, orientation = self._propose(difficulty, strategic)
            block = Block(f"block{next_id}", row, col, length, orientation)
            if board.can_place(block):
                board = Board(board.blocks + (block,))
                placed += 1
                next_id += 1

        return board

    def _propose(
        self, difficulty: float, strategic: bool
    ) -> tuple[int, int, int, Orientation]:
        rng = self.rng
        if strategic:
            if rng.random() > 0.5:
                # On the exit row, ahead of the goal block.
                if rng.random() > 0.3:
                    length = 3 if rng.random() > 0.5 else 2
                    return EXIT_ROW, rng.randint(2, GRID_SIZE - length), length, _H
                length = 3 if rng.random() > 0.4 else 2
                return EXIT_ROW, rng.randint(2, GRID_SIZE - 1), length, _V
            length = 3 if rng.random() < 0.3 + difficulty * 0.4 else 2
            row = rng.randint(0, GRID_SIZE - length)
            if difficulty > 0.5 and rng.random() < 0.6:
                col = rng.randint(2, 4)
            else:
                col = rng.randint(1, GRID_SIZE - 2)
            return row, col, length, _V

        orientation = _H if rng.random() > 0.5 else _V
        length = 3 if rng.random() < 0.5 + difficulty * 0.3 else 2
        if orientation is _H:
            return rng.randint(0, GRID_SIZE - 1), rng.randint(0, GRID_SIZE - length), length, _H
        return rng.randint(0, GRID_SIZE - length), rng.randint(0, GRID_SIZE - 1), length, _V

    # -- repair ---------------------------------------------------------------

    def ensure_solvable(
        self, board: Board, should_cancel: Callable[[], bool] | None = None
    ) -> Board | None:
        """Remove blocks until *board* is solvable, or return ``None``.

        The goal block is reset to column 0 and overlapping blocks are
        dropped first.  Removal prefers blocks on the exit row, then
        vertical blocks across it, then anything.
        """
        goal = board.goal
        if goal is None:
            return None
        if goal.col != 0:
            board = board.moved(goal.id, goal.row, 0)
        board = self._drop_conflicts(board)

        if self._solvable(board, should_cancel):
            return board

        for _ in range(len(board) * 2):
            victim = self._pick_removal(board)
            if victim is None:
                break
            board = board.without(victim.id)
            if self._solvable(board, should_cancel):
                logger.debug(f"Level repaired with {len(board)} blocks")
                return board

        logger.debug("Could not repair level")
        return None

    @staticmethod
    def _drop_conflicts(board: Board) -> Board:
        """Keep blocks in order (goal first) while they fit."""
        ordered = sorted(board.blocks, key=lambda b: not b.is_goal)
        kept = Board()
        for block in ordered:
            if kept.can_place(block):
                kept = Board(kept.blocks + (block,))
            else:
                logger.debug(f"Dropping conflicting block {block.id}")
        return kept

    def _pick_removal(self, board: Board) -> Block | None:
        goal = board.goal
        others = [b for b in board.blocks if not b.is_goal]
        if goal is None or not others:
            return None

        on_row = [b for b in others if b.row == EXIT_ROW and b.col > goal.col]
        if on_row:
            return self.rng.choice(on_row)
        straddling = [
            b
            for b in others
            if not b.horizontal
            and b.row <= EXIT_ROW < b.row + b.length
            and b.col > goal.col
        ]
        if straddling:
            return self.rng.choice(straddling)
        return self.rng.choice(others)

    # -- scoring --------------------------------------------------------------

    def requires_most_blocks(self, board: Board, solution: list[Move]) -> bool:
        """Whether the solution moves enough of the non-goal blocks."""
        goal = board.goal
        others = len(board) - 1
        if goal is None or others <= 0 or not solution:
            return False
        movers = {m.block_id for m in solution if m.block_id != goal.id}
        return len(movers) / others >= self.config.spread_ratio

    @staticmethod
    def _keep_best(
        best: _Best | None, board: Board, moves: int, target: DifficultyTarget
    ) -> _Best:
        closeness = target.closeness(moves)
        if (
            best is None
            or closeness > best.closeness
            or (closeness == best.closeness and moves > best.moves)
        ):
            return _Best(board, moves, closeness)
        return best

    # -- fallbacks ------------------------------------------------------------

    def fallback(self, difficulty: float) -> Board:
        """Return a hand-authored board, re-checked with the solver."""
        board = MEDIUM_FALLBACK if difficulty >= 0.3 else SIMPLE_FALLBACK
        for candidate in (board, SIMPLE_FALLBACK, MINIMAL_FALLBACK):
            if self._solvable(candidate):
                return candidate
            logger.error(f"Fallback board is not solvable: {candidate.layout_key()}")
        return MINIMAL_FALLBACK

    # -- helpers --------------------------------------------------------------

    def _pregenerated(self, level_number: int) -> GenerationResult | None:
        if self.store is None:
            return None
        record = self.store.get(level_number)
        if record is None:
            logger.debug(f"Pre-generated level {level_number} not found")
            return None
        board = record.board
        if not board.has_playable_goal() or not board.is_valid():
            logger.warning(f"Pre-generated level {level_number} is malformed, generating")
            return None
        best_moves = record.best_moves
        if best_moves is None:
            best_moves = self._solve(board).move_count
        logger.debug(f"Loaded pre-generated level {level_number}")
        return GenerationResult(
            level_number, board, best_moves, GenerationSource.PREGENERATED
        )

    def _candidate(
        self,
        target: DifficultyTarget,
        difficulty: float,
        should_cancel: Callable[[], bool] | None,
    ) -> tuple[Board, list[Move]] | None:
        layout = self.random_layout(target.min_blocks, target.max_blocks, difficulty)
        board = self.ensure_solvable(layout, should_cancel)
        if board is None or len(board) < target.min_blocks:
            return None
        result = self._solve(board, should_cancel)
        if not result.solved:
            return None
        return board, result.moves

    def _solve(
        self, board: Board, should_cancel: Callable[[], bool] | None = None
    ) -> SolveResult:
        return Solver.solve(
            board,
            max_iterations=self.solver_config.max_iterations,
            check_every=self.solver_config.check_every,
            should_cancel=should_cancel,
        )

    def _solvable(
        self, board: Board, should_cancel: Callable[[], bool] | None = None
    ) -> bool:
        return Solver.is_solvable(
            board,
            max_iterations=self.solver_config.max_iterations,
            check_every=self.solver_config.check_every,
            should_cancel=should_cancel,
        )
