from backend.engine.gamescore.score import (
    CumulativeScore,
    best_score,
    cumulative_best_score,
    level_score,
)

__all__ = ["CumulativeScore", "best_score", "cumulative_best_score", "level_score"]
