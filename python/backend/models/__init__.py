from backend.models.board import Block, Board, Move, Orientation
from backend.models.levels import LevelRecord, LevelStore

__all__ = ["Block", "Board", "LevelRecord", "LevelStore", "Move", "Orientation"]
