"""Piece, side and game-option enums for tiger and goat games."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Dict


class Piece(IntEnum):
    """Occupant of a single board position."""

    EMPTY = 0
    TIGER = 1
    GOAT = 2

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOL[self]


class Side(str, Enum):
    """Player side."""

    TIGER = "tiger"
    GOAT = "goat"

    def opponent(self) -> "Side":
        return Side.GOAT if self is Side.TIGER else Side.TIGER

    @property
    def piece(self) -> Piece:
        return Piece.TIGER if self is Side.TIGER else Piece.GOAT


class Phase(str, Enum):
    """Goats are placed first, then moved."""

    PLACEMENT = "placement"
    MOVEMENT = "movement"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TopologyKind(str, Enum):
    """Board shapes: the 5x5 Bagh-Chal grid and the Aadu Puli graph."""

    GRID = "grid"
    GRAPH = "graph"


PIECE_SYMBOL: Dict[Piece, str] = {
    Piece.EMPTY: ".",
    Piece.TIGER: "T",
    Piece.GOAT: "G",
}
