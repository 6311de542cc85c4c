"""Difficulty curve and per-level generation targets."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum


class DifficultyLabel(Enum):
    """Difficulty labels for reports."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    BRUTAL = "Brutal"


@dataclass(frozen=True)
class DifficultyTarget:
    """What a generated level should look like.

    ``min_blocks``/``max_blocks`` bound how many extra blocks are placed;
    a repaired board is kept only if its total, goal included, is still
    at least ``min_blocks``.
    """

    level: int
    difficulty: float
    min_moves: int
    max_moves: int
    min_blocks: int
    max_blocks: int

    @property
    def move_midpoint(self) -> float:
        return (self.min_moves + self.max_moves) / 2

    def accepts(self, moves: int) -> bool:
        return self.min_moves <= moves <= self.max_moves

    def closeness(self, moves: int) -> float:
        """Higher is better; 0 means the move count sits on the midpoint."""
        return -abs(moves - self.move_midpoint)

    def relaxed(self, drop: float = 0.2, factor: float = 0.5) -> DifficultyTarget:
        """Easier placement and a lower move floor, same block counts."""
        return replace(
            self,
            difficulty=max(0.0, self.difficulty - drop),
            min_moves=math.floor(self.min_moves * factor),
        )


def difficulty_for_level(
    level: int, saturation_level: int = 100, exponent: float = 1.0
) -> float:
    """Map a level number onto ``[0, 1]``.

    0 at level 1, 1 from *saturation_level* on.  ``exponent < 1`` ramps up
    faster early.
    """
    if level <= 1:
        return 0.0
    if level >= saturation_level:
        return 1.0
    normalized = (level - 1) / (saturation_level - 1)
    return normalized**exponent


def target_for_level(
    level: int, saturation_level: int = 100, exponent: float = 1.0
) -> DifficultyTarget:
    d = difficulty_for_level(level, saturation_level, exponent)
    return DifficultyTarget(
        level=level,
        difficulty=d,
        # Level 1: 2-4 moves, saturated: 30-50 moves
        min_moves=math.floor(2 + d * 28),
        max_moves=math.floor(4 + d * 46),
        # Level 1: 3-5 blocks, saturated: 10-14 blocks
        min_blocks=math.floor(3 + d * 7),
        max_blocks=math.floor(5 + d * 9),
    )


def difficulty_label(difficulty: float) -> DifficultyLabel:
    if difficulty < 0.25:
        return DifficultyLabel.EASY
    elif difficulty < 0.5:
        return DifficultyLabel.MEDIUM
    elif difficulty < 0.75:
        return DifficultyLabel.HARD
    else:
        return DifficultyLabel.BRUTAL
