"""Board model for the sliding block puzzle.

A board is a fixed 6×6 grid holding straight blocks of length 2 or 3.
Each block slides along its own axis only.  Exactly one block, the goal
block, lies horizontally on the exit row and wins by sliding out through
the right edge.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from functools import cached_property
from typing import Any, Iterable

GRID_SIZE = 6
EXIT_ROW = 2
GOAL_ID = "goal"
BLOCK_LENGTHS = (2, 3)


class Orientation(StrEnum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def _extent(
    row: int, col: int, length: int, orientation: Orientation
) -> tuple[int, int, int, int]:
    """Return ``(top, left, bottom, right)`` (inclusive) of a block span."""
    if orientation is Orientation.HORIZONTAL:
        return row, col, row, col + length - 1
    return row, col, row + length - 1, col


def slide_targets(
    occupied: bytes | bytearray,
    row: int,
    col: int,
    length: int,
    orientation: Orientation,
) -> list[tuple[int, int]]:
    """Scan both directions from a block until blocked or at the edge.

    *occupied* is a flat row-major mask of the grid.  Every returned
    ``(row, col)`` is reachable by one slide; a filled cell ends the scan
    in that direction.  Cells covered by the block itself are never
    inspected, so the mask may include them.
    """
    targets: list[tuple[int, int]] = []
    if orientation is Orientation.HORIZONTAL:
        base = row * GRID_SIZE
        c = col - 1
        while c >= 0 and not occupied[base + c]:
            targets.append((row, c))
            c -= 1
        c = col + length
        while c < GRID_SIZE and not occupied[base + c]:
            targets.append((row, c - length + 1))
            c += 1
    else:
        r = row - 1
        while r >= 0 and not occupied[r * GRID_SIZE + col]:
            targets.append((r, col))
            r -= 1
        r = row + length
        while r < GRID_SIZE and not occupied[r * GRID_SIZE + col]:
            targets.append((r - length + 1, col))
            r += 1
    return targets


# -- blocks -------------------------------------------------------------------


@dataclass(frozen=True)
class Block:
    """A placed block.  ``(row, col)`` is its top-left cell."""

    id: str
    row: int
    col: int
    length: int
    orientation: Orientation
    is_goal: bool = False

    def __post_init__(self) -> None:
        if self.length not in BLOCK_LENGTHS:
            raise ValueError(
                f"Block {self.id!r} has length {self.length}; "
                f"expected one of {BLOCK_LENGTHS}."
            )
        if not isinstance(self.orientation, Orientation):
            object.__setattr__(self, "orientation", Orientation(self.orientation))

    @property
    def horizontal(self) -> bool:
        return self.orientation is Orientation.HORIZONTAL

    @property
    def extent(self) -> tuple[int, int, int, int]:
        return _extent(self.row, self.col, self.length, self.orientation)

    def cells(self) -> list[tuple[int, int]]:
        if self.horizontal:
            return [(self.row, self.col + i) for i in range(self.length)]
        return [(self.row + i, self.col) for i in range(self.length)]

    def in_bounds(self) -> bool:
        top, left, bottom, right = self.extent
        return top >= 0 and left >= 0 and bottom < GRID_SIZE and right < GRID_SIZE

    def overlaps(self, other: Block) -> bool:
        """Rectangles intersect iff both row and column ranges overlap."""
        t1, l1, b1, r1 = self.extent
        t2, l2, b2, r2 = other.extent
        return t1 <= b2 and b1 >= t2 and l1 <= r2 and r1 >= l2

    def at(self, row: int, col: int) -> Block:
        return replace(self, row=row, col=col)

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "row": self.row,
            "col": self.col,
            "length": self.length,
            "orientation": self.orientation.value,
            "goal": self.is_goal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        try:
            return cls(
                id=str(data["id"]),
                row=int(data["row"]),
                col=int(data["col"]),
                length=int(data["length"]),
                orientation=Orientation(data["orientation"]),
                is_goal=bool(data.get("goal", False)),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed block data: {data!r}") from exc

    @classmethod
    def goal_block(cls, col: int = 0, length: int = 2) -> Block:
        return cls(
            id=GOAL_ID,
            row=EXIT_ROW,
            col=col,
            length=length,
            orientation=Orientation.HORIZONTAL,
            is_goal=True,
        )


# -- moves --------------------------------------------------------------------


@dataclass(frozen=True)
class Move:
    """One block slid along its axis from one position to another."""

    block_id: str
    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @property
    def distance(self) -> int:
        return abs(self.to_row - self.from_row) + abs(self.to_col - self.from_col)

    def to_dict(self) -> dict[str, Any]:
        return {
            "block_id": self.block_id,
            "from": [self.from_row, self.from_col],
            "to": [self.to_row, self.to_col],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Move:
        try:
            (fr, fc), (tr, tc) = data["from"], data["to"]
            return cls(str(data["block_id"]), int(fr), int(fc), int(tr), int(tc))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Malformed move data: {data!r}") from exc


# -- board --------------------------------------------------------------------


@dataclass(frozen=True)
class Board:
    """An immutable arrangement of blocks.

    Block order carries no meaning; only ids and positions do.  Moving a
    block returns a new board.
    """

    blocks: tuple[Block, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.blocks, tuple):
            object.__setattr__(self, "blocks", tuple(self.blocks))

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_blocks(cls, blocks: Iterable[Block]) -> Board:
        return cls(tuple(blocks))

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> Board:
        """Create a board from a list of block dicts.

        Example::

            Board.from_list([
                {"id": "goal", "row": 2, "col": 0, "length": 2,
                 "orientation": "horizontal", "goal": True},
            ])
        """
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of blocks, got {type(data).__name__}.")
        return cls(tuple(Block.from_dict(item) for item in data))

    def to_list(self) -> list[dict[str, Any]]:
        return [b.to_dict() for b in self.blocks]

    # -- queries --------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def goal(self) -> Block | None:
        for block in self.blocks:
            if block.is_goal:
                return block
        return None

    def index_of(self, block_id: str) -> int:
        for i, block in enumerate(self.blocks):
            if block.id == block_id:
                return i
        raise KeyError(block_id)

    def block(self, block_id: str) -> Block:
        return self.blocks[self.index_of(block_id)]

    def is_solved(self) -> bool:
        """True once the goal block touches the right edge of the grid."""
        goal = self.goal
        return goal is not None and goal.col + goal.length == GRID_SIZE

    def is_valid(self) -> bool:
        """Every block inside the grid, no two blocks overlapping."""
        seen: set[tuple[int, int]] = set()
        for block in self.blocks:
            if not block.in_bounds():
                return False
            cells = block.cells()
            if seen.intersection(cells):
                return False
            seen.update(cells)
        return len({b.id for b in self.blocks}) == len(self.blocks)

    def has_playable_goal(self) -> bool:
        """Exactly one goal block, horizontal, on the exit row."""
        goals = [b for b in self.blocks if b.is_goal]
        return (
            len(goals) == 1
            and goals[0].horizontal
            and goals[0].row == EXIT_ROW
        )

    # -- legality -------------------------------------------------------------

    def can_place(self, block: Block, ignore: str | None = None) -> bool:
        """True if *block* fits the grid without touching any other block."""
        if not block.in_bounds():
            return False
        for other in self.blocks:
            if other.id == ignore:
                continue
            if block.overlaps(other):
                return False
        return True

    def can_occupy(self, block_id: str, row: int, col: int) -> bool:
        """Whether block *block_id* would fit with its top-left at (row, col)."""
        block = self.block(block_id)
        return self.can_place(block.at(row, col), ignore=block_id)

    def possible_moves(self, index: int) -> list[tuple[int, int]]:
        """All top-left positions block *index* reaches in one slide.

        Scans backwards (left / up) first, then forwards (right / down).
        """
        block = self.blocks[index]
        return slide_targets(
            self.occupied_mask, block.row, block.col, block.length, block.orientation
        )

    @cached_property
    def occupied_mask(self) -> bytes:
        mask = bytearray(GRID_SIZE * GRID_SIZE)
        for block in self.blocks:
            for r, c in block.cells():
                if 0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE:
                    mask[r * GRID_SIZE + c] = 1
        return bytes(mask)

    def occupancy(self) -> list[list[str | None]]:
        """6×6 grid of block ids (``None`` for empty cells)."""
        grid: list[list[str | None]] = [[None] * GRID_SIZE for _ in range(GRID_SIZE)]
        for block in self.blocks:
            for r, c in block.cells():
                if 0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE:
                    grid[r][c] = block.id
        return grid

    # -- transitions ----------------------------------------------------------

    def moved(self, block_id: str, row: int, col: int) -> Board:
        """Return a copy with one block relocated.  No legality check."""
        index = self.index_of(block_id)
        blocks = list(self.blocks)
        blocks[index] = blocks[index].at(row, col)
        return Board(tuple(blocks))

    def apply(self, move: Move) -> Board:
        return self.moved(move.block_id, move.to_row, move.to_col)

    def without(self, block_id: str) -> Board:
        return Board(tuple(b for b in self.blocks if b.id != block_id))

    # -- keys -----------------------------------------------------------------

    def state_key(self) -> tuple[tuple[str, int, int], ...]:
        """Search-state key: block positions matched by id."""
        return tuple(sorted((b.id, b.row, b.col) for b in self.blocks))

    def layout_key(self) -> str:
        """Position-only signature, blind to ids.  Detects duplicate levels."""
        parts = sorted(
            (b.row, b.col, b.length, 0 if b.horizontal else 1, int(b.is_goal))
            for b in self.blocks
        )
        return "|".join(",".join(str(v) for v in p) for p in parts)
