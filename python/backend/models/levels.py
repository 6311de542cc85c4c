"""Pre-generated level persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from backend.models.board import Board

logger = logging.getLogger(__name__)

METADATA_KEY = "metadata"


@dataclass
class LevelRecord:
    level: int
    board: Board
    best_moves: int | None = None
    best_score: int | None = None


class LevelStore:
    """Loads, saves, and queries level records from a JSON file.

    Layout::

        {
          "1": [{"id": "goal", "row": 2, ...}, ...],
          "metadata": {"1": {"best_moves": 3, "best_score": 970}}
        }
    """

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath
        self._records: dict[int, LevelRecord] = {}
        self._load()

    # -- persistence ----------------------------------------------------------

    def _load(self) -> None:
        if not self.filepath.exists():
            logger.debug(f"Level file {self.filepath} not found, starting empty")
            return
        try:
            data = json.loads(self.filepath.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to read level file {self.filepath}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"Level file {self.filepath} is not a JSON object, ignoring")
            return

        metadata = data.get(METADATA_KEY) or {}
        if not isinstance(metadata, dict):
            logger.warning(f"Ignoring malformed metadata in {self.filepath}")
            metadata = {}
        for key, blocks in data.items():
            if key == METADATA_KEY:
                continue
            try:
                level = int(key)
                board = Board.from_list(blocks)
            except ValueError as e:
                logger.warning(f"Skipping level {key!r}: {e}")
                continue
            best_moves, best_score = self._read_metadata(key, metadata.get(key))
            self._records[level] = LevelRecord(
                level=level,
                board=board,
                best_moves=best_moves,
                best_score=best_score,
            )
        logger.debug(f"Loaded {len(self._records)} levels from {self.filepath}")

    def _read_metadata(self, key: str, meta: object) -> tuple[int | None, int | None]:
        """Return ``(best_moves, best_score)``; malformed metadata is dropped."""
        if meta is None:
            return None, None
        if not isinstance(meta, dict):
            logger.warning(f"Ignoring malformed metadata for level {key!r}: {meta!r}")
            return None, None
        values = (meta.get("best_moves"), meta.get("best_score"))
        for value in values:
            # bool is an int subclass but never a valid count
            if value is not None and (not isinstance(value, int) or isinstance(value, bool)):
                logger.warning(f"Ignoring malformed metadata for level {key!r}: {meta!r}")
                return None, None
        return values

    def save(self) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        data: dict[str, object] = {}
        metadata: dict[str, dict[str, int]] = {}
        for level in self.levels():
            record = self._records[level]
            key = str(level)
            data[key] = record.board.to_list()
            if record.best_moves is not None:
                metadata[key] = {
                    "best_moves": record.best_moves,
                    "best_score": record.best_score if record.best_score is not None else 0,
                }
        data[METADATA_KEY] = metadata
        self.filepath.write_text(json.dumps(data, indent=2) + "\n")

    # -- queries --------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, level: int) -> bool:
        return level in self._records

    def put(self, record: LevelRecord) -> None:
        self._records[record.level] = record

    def get(self, level: int) -> LevelRecord | None:
        return self._records.get(level)

    def get_board(self, level: int) -> Board | None:
        record = self._records.get(level)
        return record.board if record else None

    def levels(self) -> list[int]:
        return sorted(self._records)

    def records(self) -> list[LevelRecord]:
        return [self._records[level] for level in self.levels()]
