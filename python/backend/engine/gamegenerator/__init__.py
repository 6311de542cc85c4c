from backend.engine.gamegenerator.batch import (
    BestScoreSummary,
    ValidationReport,
    calculate_best_scores,
    generate_levels,
    validate_levels,
)
from backend.engine.gamegenerator.difficulty import (
    DifficultyLabel,
    DifficultyTarget,
    difficulty_for_level,
    difficulty_label,
    target_for_level,
)
from backend.engine.gamegenerator.generator import (
    GenerationResult,
    GenerationSource,
    LevelGenerator,
)

__all__ = [
    "BestScoreSummary",
    "DifficultyLabel",
    "DifficultyTarget",
    "GenerationResult",
    "GenerationSource",
    "LevelGenerator",
    "ValidationReport",
    "calculate_best_scores",
    "difficulty_for_level",
    "difficulty_label",
    "generate_levels",
    "target_for_level",
    "validate_levels",
]
