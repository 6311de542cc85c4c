#!/usr/bin/env python3
"""Generate pre-built test fixtures for the solver benchmark.

Run once from the ``python/`` directory::

    python ../private/scripts/large_test_fixtures.py

Produces ``<project_root>/fixtures/generated.json``: generated levels
sampled along the difficulty curve, each stored with its optimal move
count.  The hand-written boards in ``fixtures/boards.json`` cover the
edge cases; these cover realistic layouts up to the saturated curve.
"""

from __future__ import annotations

import json
import random
import sys
from pathlib import Path

# Resolve paths: this script lives in <project_root>/private/scripts/
SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent.parent
PYTHON_ROOT = PROJECT_ROOT / "python"

if str(PYTHON_ROOT) not in sys.path:
    sys.path.insert(0, str(PYTHON_ROOT))

from backend.engine.gamegenerator import LevelGenerator  # noqa: E402
from backend.engine.gamesolver import Solver  # noqa: E402
from backend.models.board import Board  # noqa: E402

FIXTURES_DIR = PROJECT_ROOT / "fixtures"
SEED = 42

# Levels sampled per band of the difficulty curve.
SAMPLES: dict[str, range] = {
    "easy": range(1, 25),
    "medium": range(25, 50),
    "hard": range(50, 75),
    "brutal": range(75, 125, 2),
}


def _board_to_dict(board: Board, board_id: str, optimal: int) -> dict:
    return {"id": board_id, "optimal": optimal, "blocks": board.to_list()}


def _generate_band(label: str, levels: range, seen: set[str]) -> list[dict]:
    entries: list[dict] = []
    for level in levels:
        generator = LevelGenerator(rng=random.Random(SEED + level))
        board = generator.generate_level(level)
        key = board.layout_key()
        if key in seen:
            continue  # duplicate layout, skip
        seen.add(key)

        result = Solver.solve(board)
        assert result.solved, f"Generated level {level} is not solvable"
        entries.append(_board_to_dict(board, f"{label}_{level:04d}", result.move_count))
    return entries


def main() -> None:
    FIXTURES_DIR.mkdir(parents=True, exist_ok=True)

    seen: set[str] = set()
    entries: list[dict] = []
    for label, levels in SAMPLES.items():
        print(f"Generating {label} levels {levels.start}-{levels.stop - 1} …")
        band = _generate_band(label, levels, seen)
        entries.extend(band)
        print(f"  + {len(band)} boards")

    path = FIXTURES_DIR / "generated.json"
    with open(path, "w") as f:
        json.dump(entries, f, separators=(",", ":"))
    print(f"  → {path.name}  ({len(entries)} boards, {len(seen)} unique layouts) ✓")
    print("Done!")


if __name__ == "__main__":
    main()
