"""Rich terminal frontend — tables, colours, and panels.

Renders boards, optimal solutions and batch reports for the CLI
commands.  The vanilla frontend exposes the same functions with plain
ANSI output.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from typing import Callable, Iterator

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table
from rich.text import Text

from backend.engine.gamegenerator import (
    BestScoreSummary,
    DifficultyTarget,
    ValidationReport,
    difficulty_label,
    target_for_level,
)
from backend.engine.gamescore import CumulativeScore
from backend.models.board import GRID_SIZE, EXIT_ROW, Board, Move
from backend.models.levels import LevelRecord

console = Console()

_STYLES = ["cyan", "yellow", "magenta", "green", "blue", "bright_white"]


# -- helpers ------------------------------------------------------------------


def _labels(board: Board) -> dict[str, tuple[str, str]]:
    """Map block ids to a one-letter label and a style."""
    labels: dict[str, tuple[str, str]] = {}
    letter = ord("A")
    for i, block in enumerate(board.blocks):
        if block.is_goal:
            labels[block.id] = ("X", "bold red")
        else:
            labels[block.id] = (chr(letter), f"bold {_STYLES[i % len(_STYLES)]}")
            letter += 1
    return labels


def _format_move(move: Move) -> str:
    return (
        f"{move.block_id}: ({move.from_row},{move.from_col}) "
        f"→ ({move.to_row},{move.to_col})"
    )


# -- board rendering ----------------------------------------------------------


def _render_board(board: Board) -> Table:
    """Return a Rich Table representing the grid; the exit sits on the right."""
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(GRID_SIZE):
        table.add_column(width=1, justify="center")
    table.add_column(width=1, justify="center")

    labels = _labels(board)
    for r, row in enumerate(board.occupancy()):
        cells: list[str] = []
        for block_id in row:
            if block_id is None:
                cells.append("[dim]·[/dim]")
            else:
                label, style = labels[block_id]
                cells.append(f"[{style}]{label}[/{style}]")
        cells.append("[bold red]▶[/bold red]" if r == EXIT_ROW else "")
        table.add_row(*cells)

    return table


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

    stats = Text()
    stats.append("  Blocks: ", style="dim")
    stats.append(str(len(board)), style="bold yellow")
    stats.append("    Difficulty: ", style="dim")
    stats.append(difficulty_label(difficulty).value, style="bold yellow")
    if best_moves is not None:
        stats.append("    Best: ", style="dim")
        stats.append(f"{best_moves} moves", style="bold yellow")

    panel = Panel(
        Align.center(_render_board(board)),
        title=f"[bold cyan]Level {level_number}[/bold cyan]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))

    if solution is None:
        return
    if not solution:
        console.print(Align.center(Text("\n  No moves needed.\n", style="green")))
        return

    if animate:
        _animate(board, level_number, solution)
        return

    moves = Table(box=rich.box.ROUNDED, border_style="dim", title="Optimal solution")
    moves.add_column("#", justify="right", style="dim", width=3)
    moves.add_column("Block", style="cyan")
    moves.add_column("From", justify="center", style="yellow")
    moves.add_column("To", justify="center", style="yellow")
    for i, move in enumerate(solution, 1):
        moves.add_row(
            str(i),
            move.block_id,
            f"{move.from_row},{move.from_col}",
            f"{move.to_row},{move.to_col}",
        )
    console.print(Align.center(moves))


def _animate(board: Board, level_number: int, solution: list[Move]) -> None:
    for i, move in enumerate(solution):
        board = board.apply(move)
        console.clear()

        progress = Text()
        progress.append(f"  Solving… move {i + 1}/{len(solution)} ", style="bold cyan")
        progress.append(f"({_format_move(move)})", style="dim")

        panel = Panel(
            Align.center(_render_board(board)),
            title=f"[bold cyan]Level {level_number}[/bold cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
        console.print()
        console.print(Align.center(panel))
        console.print(Align.center(progress))
        sys.stdout.flush()
        time.sleep(0.3)

    console.print(
        Align.center(Text(f"\n  Solved in {len(solution)} moves!\n", style="bold green"))
    )


# -- batch reports ------------------------------------------------------------


@contextmanager
def progress(description: str) -> Iterator[Callable[[int, int], None]]:
    """Yield an ``on_progress(done, total)`` callback bound to a progress bar."""
    with Progress(
        TextColumn("[bold cyan]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as bar:
        task = bar.add_task(description, total=None)

        def update(done: int, total: int) -> None:
            bar.update(task, completed=done, total=total)

        yield update


def print_generation(
    records: dict[int, LevelRecord],
    target: Callable[[int], DifficultyTarget] = target_for_level,
) -> None:
    table = Table(
        title="Generated levels",
        title_style="bold cyan",
        box=rich.box.ROUNDED,
        border_style="dim",
    )
    table.add_column("Level", justify="right", style="dim")
    table.add_column("Difficulty")
    table.add_column("Blocks", justify="right", style="yellow")
    table.add_column("Best moves", justify="right", style="yellow")
    table.add_column("Best score", justify="right", style="green")

    for level in sorted(records):
        record = records[level]
        level_target = target(level)
        table.add_row(
            str(level),
            difficulty_label(level_target.difficulty).value,
            str(len(record.board)),
            str(record.best_moves),
            f"{record.best_score:,}" if record.best_score is not None else "-",
        )
    console.print(table)


def print_validation(report: ValidationReport) -> None:
    if report.ok:
        console.print(
            f"[bold green]✓ All {len(report.valid)} levels valid[/bold green]"
        )
        return
    table = Table(box=rich.box.ROUNDED, border_style="red", title="Invalid levels")
    table.add_column("Level", justify="right")
    table.add_column("Problem", style="red")
    for level, problem in sorted(report.invalid.items()):
        table.add_row(str(level), problem)
    console.print(table)
    console.print(
        f"[bold]{len(report.valid)} valid, [red]{len(report.invalid)} invalid[/red][/bold]"
    )


def print_best_scores(summary: BestScoreSummary) -> None:
    body = Group(
        Text(f"Levels processed: {summary.processed}"),
        Text(f"Levels updated:   {summary.updated}"),
        Text(
            f"Errors:           {len(summary.errors)}",
            style="red" if summary.errors else "dim",
        ),
    )
    console.print(Panel(body, title="[bold]Best scores[/bold]", border_style="bright_blue"))


def print_cumulative(summary: CumulativeScore, up_to: int) -> None:
    lines = [
        Text(f"Levels counted: {summary.counted}/{up_to}"),
        Text(f"Cumulative best score: {summary.total:,}", style="bold green"),
        Text(f"Average per level: {round(summary.average):,}"),
    ]
    if summary.lowest is not None and summary.highest is not None:
        lines.append(Text(f"Lowest level score: {summary.lowest:,}", style="dim"))
        lines.append(Text(f"Highest level score: {summary.highest:,}", style="dim"))
    console.print(
        Panel(Group(*lines), title=f"[bold]Level {up_to}[/bold]", border_style="bright_blue")
    )
