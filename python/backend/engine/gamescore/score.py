"""Level scoring."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from backend.models.levels import LevelStore

logger = logging.getLogger(__name__)

BASE_SCORE_PER_LEVEL = 1000
MOVE_PENALTY = 10
TIME_PENALTY_PER_SECOND = 5


def level_score(
    level_number: int,
    moves: int,
    elapsed_seconds: float = 0.0,
    time_penalty: int = TIME_PENALTY_PER_SECOND,
) -> int:
    """``max(0, 1000 × level − time_penalty × seconds − 10 × moves)``.

    Only whole elapsed seconds are charged.
    """
    base = BASE_SCORE_PER_LEVEL * level_number
    penalty = int(elapsed_seconds) * time_penalty + moves * MOVE_PENALTY
    return max(0, base - penalty)


def best_score(level_number: int, best_moves: int) -> int:
    """Score of an optimal, instant solve."""
    return level_score(level_number, best_moves, 0.0)


@dataclass
class CumulativeScore:
    total: int = 0
    counted: int = 0
    missing: list[int] = field(default_factory=list)
    lowest: int | None = None
    highest: int | None = None

    @property
    def average(self) -> float:
        return self.total / self.counted if self.counted else 0.0


def cumulative_best_score(store: LevelStore, up_to: int) -> CumulativeScore:
    """Sum the stored best scores of levels ``1..up_to``."""
    summary = CumulativeScore()
    for level in range(1, up_to + 1):
        record = store.get(level)
        if record is None or record.best_score is None:
            logger.warning(f"No best score found for level {level}")
            summary.missing.append(level)
            continue
        score = record.best_score
        summary.total += score
        summary.counted += 1
        summary.lowest = score if summary.lowest is None else min(summary.lowest, score)
        summary.highest = score if summary.highest is None else max(summary.highest, score)
    return summary
