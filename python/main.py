#!/usr/bin/env python3
"""Sliding block puzzle — level tooling.

Usage::

    python main.py generate -n 200 -o data/levels.json --seed 7
    python main.py solve data/levels.json       # recompute best moves/scores
    python main.py validate data/levels.json
    python main.py show 12 --solve -f vanilla
    python main.py score data/levels.json --up-to 500
"""

import importlib
import logging
import random
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import Settings, load_settings  # noqa: E402

logger = logging.getLogger("main")


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    vanilla = "vanilla"
    rich = "rich"


_RUNNERS = {
    Frontend.vanilla: "frontend.cli.vanilla.app",
    Frontend.rich: "frontend.cli.rich.app",
}


def _frontend(frontend: Frontend):
    return importlib.import_module(_RUNNERS[frontend])


# -- helpers ------------------------------------------------------------------


class _State:
    settings: Settings = Settings()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(show_path=False, markup=False)],
        force=True,
    )


def _levels_path(path: Optional[Path]) -> Path:
    if path is not None:
        return path
    configured = Path(_State.settings.levels_path)
    return configured if configured.is_absolute() else PROJECT_ROOT / configured


def _open_store(path: Path, must_exist: bool = True):
    from backend.models.levels import LevelStore

    if must_exist and not path.exists():
        typer.echo(f"Level file not found: {path}", err=True)
        raise typer.Exit(code=2)
    return LevelStore(path)


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False, help="Sliding block puzzle level tooling.")

FrontendOption = typer.Option(
    Frontend.rich, "-f", "--frontend", help="Output style."
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging."),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="JSON settings file."
    ),
) -> None:
    """Sliding block puzzle level tooling."""
    _configure_logging(verbose)
    _State.settings = load_settings(config)


@app.command()
def generate(
    count: Optional[int] = typer.Option(
        None, "-n", "--count", min=1, help="Number of levels (default from settings)."
    ),
    start: int = typer.Option(1, "--start", min=1, help="First level number."),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Level file."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Base random seed."),
    workers: int = typer.Option(1, "-w", "--workers", min=1, help="Worker processes."),
    frontend: Frontend = FrontendOption,
) -> None:
    """Generate, validate and score levels, then write them to the level file."""
    from backend.engine.gamegenerator import (
        LevelGenerator,
        generate_levels,
        validate_levels,
    )

    settings = _State.settings
    count = count or settings.total_levels
    ui = _frontend(frontend)
    path = _levels_path(output)

    with ui.progress("Generating") as on_progress:
        records = generate_levels(
            count,
            start=start,
            settings=settings,
            seed=seed,
            workers=workers,
            on_progress=on_progress,
        )
    with ui.progress("Validating") as on_progress:
        report = validate_levels(records.values(), settings.solver, on_progress)
    ui.print_validation(report)
    if not report.ok:
        raise typer.Exit(code=1)

    store = _open_store(path, must_exist=False)
    for record in records.values():
        store.put(record)
    store.save()
    logger.info(f"Saved {len(records)} levels to {path}")
    ui.print_generation(records, LevelGenerator(settings.generator).target)
    typer.echo(f"Levels saved to {path}")


@app.command()
def solve(
    levels: Optional[Path] = typer.Argument(None, help="Level file."),
    frontend: Frontend = FrontendOption,
) -> None:
    """Recompute optimal move counts and best scores for every level."""
    from backend.engine.gamegenerator import calculate_best_scores

    ui = _frontend(frontend)
    path = _levels_path(levels)
    store = _open_store(path)
    with ui.progress("Solving") as on_progress:
        summary = calculate_best_scores(store, _State.settings.solver, on_progress)
    store.save()
    ui.print_best_scores(summary)


@app.command()
def validate(
    levels: Optional[Path] = typer.Argument(None, help="Level file."),
    frontend: Frontend = FrontendOption,
) -> None:
    """Check that every stored level is well formed and solvable."""
    from backend.engine.gamegenerator import validate_levels

    ui = _frontend(frontend)
    store = _open_store(_levels_path(levels))
    if not len(store):
        typer.echo("No levels to validate.", err=True)
        raise typer.Exit(code=1)
    with ui.progress("Validating") as on_progress:
        report = validate_levels(store.records(), _State.settings.solver, on_progress)
    ui.print_validation(report)
    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def show(
    level: int = typer.Argument(..., min=1, help="Level number."),
    levels: Optional[Path] = typer.Option(None, "-l", "--levels", help="Level file."),
    with_solution: bool = typer.Option(
        False, "-s", "--solve", help="Print the optimal solution."
    ),
    animate: bool = typer.Option(False, "--animate", help="Play the solution back."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for runtime generation."),
    frontend: Frontend = FrontendOption,
) -> None:
    """Show one level, loaded from the level file or generated on the spot."""
    from backend.engine.gamegenerator import LevelGenerator
    from backend.engine.gamesolver import Solver

    settings = _State.settings
    path = _levels_path(levels)
    store = _open_store(path, must_exist=False)
    generator = LevelGenerator(
        settings.generator,
        settings.solver,
        rng=random.Random(seed) if seed is not None else None,
        store=store,
    )
    result = generator.generate(level)
    logger.debug(f"Level {level} source: {result.source}")

    solution = None
    if with_solution or animate:
        solution = Solver.find_solution(
            result.board, max_iterations=settings.solver.max_iterations
        )
    _frontend(frontend).show_level(
        result.board,
        level,
        result.best_moves,
        solution,
        animate=animate,
        difficulty=generator.target(level).difficulty,
    )


@app.command()
def score(
    levels: Optional[Path] = typer.Argument(None, help="Level file."),
    up_to: int = typer.Option(500, "--up-to", min=1, help="Last level to count."),
    frontend: Frontend = FrontendOption,
) -> None:
    """Sum the best scores of levels 1..N."""
    from backend.engine.gamescore import cumulative_best_score

    store = _open_store(_levels_path(levels))
    summary = cumulative_best_score(store, up_to)
    _frontend(frontend).print_cumulative(summary, up_to)


if __name__ == "__main__":
    app()
