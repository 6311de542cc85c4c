"""Vanilla terminal frontend — no third-party dependencies.

Plain ``print`` with ANSI colours.  Mirrors the functions of the Rich
frontend so the CLI can switch between them.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from backend.engine.gamegenerator import (
    BestScoreSummary,
    DifficultyTarget,
    ValidationReport,
    difficulty_label,
    target_for_level,
)
from backend.engine.gamescore import CumulativeScore
from backend.models.board import EXIT_ROW, GRID_SIZE, Board, Move
from backend.models.levels import LevelRecord


# -- ANSI helpers -------------------------------------------------------------

_G = "\033[32;1m"    # bold green
_Y = "\033[33;1m"    # bold yellow
_C = "\033[36;1m"    # bold cyan
_RED = "\033[31;1m"  # bold red
_DIM = "\033[2m"     # dim
_R = "\033[0m"       # reset


def _clear() -> None:
    sys.stdout.write("\033[2J\033[H")
    sys.stdout.flush()


# -- board rendering ----------------------------------------------------------


def render_board(board: Board, colour: bool = True) -> str:
    """Return a text grid: ``X`` is the goal block, ``·`` an empty cell."""
    labels: dict[str, str] = {}
    letter = ord("A")
    for block in board.blocks:
        if block.is_goal:
            labels[block.id] = "X"
        else:
            labels[block.id] = chr(letter)
            letter += 1

    sep = "+" + "---" * GRID_SIZE + "+"
    lines = [sep]
    for r, row in enumerate(board.occupancy()):
        cells: list[str] = []
        for block_id in row:
            if block_id is None:
                cells.append(f"{_DIM} · {_R}" if colour else " · ")
            elif labels[block_id] == "X" and colour:
                cells.append(f"{_RED} X {_R}")
            else:
                cells.append(f" {labels[block_id]} ")
        edge = " " if r == EXIT_ROW else "|"
        lines.append("|" + "".join(cells) + edge + (" <- exit" if r == EXIT_ROW else ""))
    lines.append(sep)
    return "\n".join(lines)


def show_level(
    board: Board,
    level_number: int,
    best_moves: int | None = None,
    solution: list[Move] | None = None,
    animate: bool = False,
    difficulty: float | None = None,
) -> None:
    """Print a level, and optionally its optimal solution.

    *difficulty* defaults to the standard curve for *level_number*.
    """
    if difficulty is None:
        difficulty = target_for_level(level_number).difficulty
    print(f"\n  {_C}Level {level_number}{_R}  "
          f"({difficulty_label(difficulty).value}, {len(board)} blocks)\n")
    print(render_board(board))
    if best_moves is not None:
        print(f"\n  Best: {_Y}{best_moves}{_R} moves")

    if solution is None:
        return
    if not solution:
        print(f"\n  {_G}No moves needed.{_R}")
        return

    if animate:
        for i, move in enumerate(solution, 1):
            board = board.apply(move)
            _clear()
            print(render_board(board))
            print(f"\n  Move {i}/{len(solution)}: {move.block_id} -> "
                  f"({move.to_row},{move.to_col})")
            time.sleep(0.3)
        print(f"\n  {_G}Solved in {len(solution)} moves!{_R}")
        return

    print()
    for i, move in enumerate(solution, 1):
        print(f"  {i:>3}. {move.block_id:<8} ({move.from_row},{move.from_col}) "
              f"-> ({move.to_row},{move.to_col})")


# -- batch reports ------------------------------------------------------------


@contextmanager
def progress(description: str) -> Iterator[Callable[[int, int], None]]:
    def update(done: int, total: int) -> None:
        sys.stdout.write(f"\r  {description}: {done}/{total}")
        sys.stdout.flush()
        if done == total:
            sys.stdout.write("\n")

    yield update


def print_generation(
    records: dict[int, LevelRecord],
    target: Callable[[int], DifficultyTarget] = target_for_level,
) -> None:
    print(f"\n  {'Level':>5}  {'Difficulty':<10} {'Blocks':>6} {'Best':>5} {'Score':>9}")
    for level in sorted(records):
        record = records[level]
        label = difficulty_label(target(level).difficulty).value
        score = record.best_score if record.best_score is not None else "-"
        print(f"  {level:>5}  {label:<10} {len(record.board):>6} "
              f"{record.best_moves!s:>5} {score!s:>9}")


def print_validation(report: ValidationReport) -> None:
    if report.ok:
        print(f"  {_G}All {len(report.valid)} levels valid{_R}")
        return
    for level, problem in sorted(report.invalid.items()):
        print(f"  {_RED}Level {level}: {problem}{_R}")
    print(f"  {len(report.valid)} valid, {len(report.invalid)} invalid")


def print_best_scores(summary: BestScoreSummary) -> None:
    print(f"  Levels processed: {summary.processed}")
    print(f"  Levels updated:   {summary.updated}")
    print(f"  Errors:           {len(summary.errors)}")


def print_cumulative(summary: CumulativeScore, up_to: int) -> None:
    print(f"  Levels counted: {summary.counted}/{up_to}")
    print(f"  Cumulative best score: {_G}{summary.total:,}{_R}")
    print(f"  Average per level: {round(summary.average):,}")
    if summary.lowest is not None and summary.highest is not None:
        print(f"  {_DIM}Lowest level score: {summary.lowest:,}{_R}")
        print(f"  {_DIM}Highest level score: {summary.highest:,}{_R}")
