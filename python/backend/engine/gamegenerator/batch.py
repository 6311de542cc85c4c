"""Offline pipeline: generate, validate and score a run of levels."""

from __future__ import annotations

import logging
import random
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Iterable

from backend.config import Settings, SolverConfig
from backend.engine.gamegenerator.generator import GenerationResult, LevelGenerator
from backend.engine.gamescore import best_score
from backend.engine.gamesolver import Solver
from backend.models.levels import LevelRecord, LevelStore

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

# Offsets the per-level seed when a duplicate layout has to be redrawn.
_RETRY_STRIDE = 1_000_003


def _rng(seed: int | None, level: int, retry: int = 0) -> random.Random:
    if seed is None:
        return random.Random()
    return random.Random(seed + level + retry * _RETRY_STRIDE)


def _generate_one(
    level: int, settings: Settings, seed: int | None, retry: int = 0
) -> GenerationResult:
    generator = LevelGenerator(
        settings.generator, settings.solver, rng=_rng(seed, level, retry)
    )
    return generator.generate(level)


def _to_record(result: GenerationResult) -> LevelRecord:
    return LevelRecord(
        level=result.level,
        board=result.board,
        best_moves=result.best_moves,
        best_score=best_score(result.level, result.best_moves),
    )


def generate_levels(
    count: int,
    *,
    start: int = 1,
    settings: Settings | None = None,
    seed: int | None = None,
    workers: int = 1,
    on_progress: ProgressCallback | None = None,
) -> dict[int, LevelRecord]:
    """Generate levels ``start .. start+count-1``.

    Every level draws from its own seeded random source, so results do
    not depend on *workers*.  Layouts already used by an earlier level
    are redrawn a few times.
    """
    settings = settings or Settings()
    levels = list(range(start, start + count))
    results: dict[int, GenerationResult] = {}
    done = 0

    if workers > 1 and len(levels) > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(_generate_one, level, settings, seed): level
                for level in levels
            }
            for future in as_completed(futures):
                result = future.result()
                results[result.level] = result
                done += 1
                if on_progress is not None:
                    on_progress(done, len(levels))
    else:
        for level in levels:
            results[level] = _generate_one(level, settings, seed)
            done += 1
            if on_progress is not None:
                on_progress(done, len(levels))

    seen: set[str] = set()
    records: dict[int, LevelRecord] = {}
    for level in levels:
        result = results[level]
        retry = 0
        while (
            result.board.layout_key() in seen
            and retry < settings.generator.duplicate_retries
        ):
            retry += 1
            logger.info(f"Level {level} duplicates an earlier layout, redrawing ({retry})")
            result = _generate_one(level, settings, seed, retry)
        if result.board.layout_key() in seen:
            logger.warning(f"Level {level} keeps a duplicate layout")
        seen.add(result.board.layout_key())
        records[level] = _to_record(result)

    return records


# -- validation ---------------------------------------------------------------


@dataclass
class ValidationReport:
    valid: list[int] = field(default_factory=list)
    invalid: dict[int, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.invalid


def validate_levels(
    records: Iterable[LevelRecord],
    solver_config: SolverConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> ValidationReport:
    """Re-check every level: structure first, then solvability."""
    solver_config = solver_config or SolverConfig()
    records = list(records)
    report = ValidationReport()

    for done, record in enumerate(records, 1):
        board = record.board
        if not board.has_playable_goal():
            report.invalid[record.level] = "goal block missing or misplaced"
        elif not board.is_valid():
            report.invalid[record.level] = "blocks out of bounds or overlapping"
        elif not Solver.is_solvable(
            board,
            max_iterations=solver_config.max_iterations,
            check_every=solver_config.check_every,
        ):
            report.invalid[record.level] = "not solvable"
        else:
            report.valid.append(record.level)

        if record.level in report.invalid:
            logger.error(f"Level {record.level}: {report.invalid[record.level]}")
        if on_progress is not None:
            on_progress(done, len(records))

    logger.info(
        f"Validation complete: {len(report.valid)} valid, {len(report.invalid)} invalid"
    )
    return report


# -- best scores --------------------------------------------------------------


@dataclass
class BestScoreSummary:
    processed: int = 0
    updated: int = 0
    errors: list[int] = field(default_factory=list)


def calculate_best_scores(
    store: LevelStore,
    solver_config: SolverConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> BestScoreSummary:
    """Solve every stored level and record its optimal moves and score.

    A record changes only when the solver finds fewer moves than stored.
    The store is not saved.
    """
    solver_config = solver_config or SolverConfig()
    summary = BestScoreSummary()
    records = store.records()

    for done, record in enumerate(records, 1):
        level = record.level
        result = Solver.solve(
            record.board,
            max_iterations=solver_config.max_iterations,
            check_every=solver_config.check_every,
        )
        if not result.solved:
            logger.warning(f"Level {level}: no solution found ({result.reason}), skipping")
            summary.errors.append(level)
        else:
            moves = result.move_count
            score = best_score(level, moves)
            if record.best_moves is None or moves < record.best_moves:
                record.best_moves = moves
                record.best_score = score
                summary.updated += 1
            elif moves == record.best_moves and score > (record.best_score or 0):
                record.best_score = score
                summary.updated += 1
            summary.processed += 1

        if on_progress is not None:
            on_progress(done, len(records))

    return summary
