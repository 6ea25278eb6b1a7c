"""Tiger and goat board state, legal move generation, and state encoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set

import numpy as np

from engine.pieces import Phase, Piece, Side, TopologyKind
from engine.topology import Topology, build_topology

PLACE = "place"
MOVE = "move"


class IllegalMoveError(ValueError):
    """Raised when a move or placement breaks the rules."""


class NoLegalMovesError(RuntimeError):
    """Raised when a decision is requested for a side with nothing to play."""


@dataclass(frozen=True)
class Move:
    """A goat placement (``to_pos`` only) or a piece move."""

    kind: str
    to_pos: int
    from_pos: Optional[int] = None


class MoveOutcome(str, Enum):
    PLACEMENT = "placement"
    STEP = "step"
    CAPTURE = "capture"


class PlacementRejection(str, Enum):
    OCCUPIED = "occupied"
    PLACEMENT_COMPLETE = "placement-complete"


@dataclass(frozen=True)
class PlacementResult:
    accepted: bool
    reason: Optional[PlacementRejection] = None


@dataclass(frozen=True)
class MoveResult:
    """Result metadata for an applied move."""

    outcome: MoveOutcome
    captured: Optional[int]
    winner: Optional[Side]
    skipped: bool


class Board:
    """Positions, counters and turn for one game on a fixed topology."""

    def __init__(self, topology: Topology) -> None:
        self.topology = topology
        self.cells = np.zeros(topology.size, dtype=np.int8)
        for index in topology.tiger_starts:
            self.cells[index] = Piece.TIGER
        self.placed = 0
        self.captured = 0
        self.turn = Side.GOAT
        # Threat-blocking squares the hard goat already gambled on.
        self.unsafe_placements: Set[int] = set()

    @classmethod
    def new_game(cls, kind: TopologyKind | str = TopologyKind.GRID) -> "Board":
        """Fresh board: tigers on their start points, goats to place."""
        return cls(build_topology(kind))

    @property
    def phase(self) -> Phase:
        if self.placed >= self.topology.max_placements:
            return Phase.MOVEMENT
        return Phase.PLACEMENT

    def clone(self) -> "Board":
        """Independent copy sharing the immutable topology."""
        cloned = Board.__new__(Board)
        cloned.topology = self.topology
        cloned.cells = self.cells.copy()
        cloned.placed = self.placed
        cloned.captured = self.captured
        cloned.turn = self.turn
        cloned.unsafe_placements = set(self.unsafe_placements)
        return cloned

    def occupant(self, index: int) -> Piece:
        return Piece(int(self.cells[index]))

    def is_empty(self, index: int) -> bool:
        return self.cells[index] == Piece.EMPTY

    def positions_of(self, piece: Piece) -> List[int]:
        return [int(idx) for idx in np.flatnonzero(self.cells == piece)]

    def empty_positions(self) -> List[int]:
        return self.positions_of(Piece.EMPTY)

    def count(self, piece: Piece) -> int:
        return int(np.count_nonzero(self.cells == piece))

    def valid_moves(self, index: int) -> List[int]:
        """Destinations for the piece on ``index`` in adjacency order."""
        piece = self.occupant(index)
        if piece is Piece.EMPTY:
            return []
        destinations: List[int] = []
        for neighbor in self.topology.adjacent_of(index):
            target = self.cells[neighbor]
            if target == Piece.EMPTY:
                destinations.append(neighbor)
            elif piece is Piece.TIGER and target == Piece.GOAT:
                landing = self.topology.landing_for(index, neighbor)
                if landing is not None and self.cells[landing] == Piece.EMPTY:
                    destinations.append(landing)
        return destinations

    def legal_moves(self, side: Optional[Side] = None) -> List[Move]:
        """All moves for ``side`` (default: side to move)."""
        side = side or self.turn
        if side is Side.GOAT and self.phase is Phase.PLACEMENT:
            return [Move(kind=PLACE, to_pos=idx) for idx in self.empty_positions()]
        moves: List[Move] = []
        for origin in self.positions_of(side.piece):
            for target in self.valid_moves(origin):
                moves.append(Move(kind=MOVE, to_pos=target, from_pos=origin))
        return moves

    def is_capture(self, move: Move) -> bool:
        if move.kind != MOVE or move.from_pos is None:
            return False
        return self.topology.is_capture(move.from_pos, move.to_pos)

    def place_goat(self, index: int) -> PlacementResult:
        """Put a goat on ``index``; rejections leave the board untouched."""
        if not 0 <= index < self.topology.size:
            raise IllegalMoveError(f"Position index out of range: {index}")
        if self.placed >= self.topology.max_placements:
            return PlacementResult(accepted=False, reason=PlacementRejection.PLACEMENT_COMPLETE)
        if self.cells[index] != Piece.EMPTY:
            return PlacementResult(accepted=False, reason=PlacementRejection.OCCUPIED)
        self.cells[index] = Piece.GOAT
        self.placed += 1
        return PlacementResult(accepted=True)

    def execute_move(self, from_pos: int, to_pos: int) -> MoveOutcome:
        """Move the piece on ``from_pos``; ignores whose turn it is."""
        victim = self._move_piece(from_pos, to_pos)
        return MoveOutcome.STEP if victim is None else MoveOutcome.CAPTURE

    def _move_piece(self, from_pos: int, to_pos: int) -> Optional[int]:
        if not 0 <= from_pos < self.topology.size or to_pos not in self.valid_moves(from_pos):
            raise IllegalMoveError(f"Illegal move: {from_pos} -> {to_pos}")
        victim = None
        if self.topology.is_capture(from_pos, to_pos):
            victim = self.topology.victim_for(from_pos, to_pos)
            self.cells[victim] = Piece.EMPTY
            self.captured += 1
        self.cells[to_pos] = self.cells[from_pos]
        self.cells[from_pos] = Piece.EMPTY
        return victim

    def apply_move(self, move: Move) -> MoveResult:
        """Apply a move for the side to move and pass the turn."""
        if self.check_terminal() is not None:
            raise IllegalMoveError(f"Game is over, cannot play {move}")

        mover = self.turn
        victim: Optional[int] = None
        if move.kind == PLACE:
            if mover is not Side.GOAT or self.phase is not Phase.PLACEMENT:
                raise IllegalMoveError(f"Illegal move: {move}")
            placement = self.place_goat(move.to_pos)
            if not placement.accepted:
                raise IllegalMoveError(f"Illegal move: {move} ({placement.reason.value})")
            outcome = MoveOutcome.PLACEMENT
        elif move.kind == MOVE and move.from_pos is not None:
            if not 0 <= move.from_pos < self.topology.size or self.occupant(move.from_pos) is not mover.piece:
                raise IllegalMoveError(f"Illegal move: {move}")
            if mover is Side.GOAT and self.phase is Phase.PLACEMENT:
                raise IllegalMoveError(f"Goats cannot move before all are placed: {move}")
            victim = self._move_piece(move.from_pos, move.to_pos)
            outcome = MoveOutcome.STEP if victim is None else MoveOutcome.CAPTURE
        else:
            raise IllegalMoveError(f"Unsupported move format: {move}")

        self.turn = mover.opponent()
        skipped = False
        if self.turn is Side.GOAT and self.goats_blocked():
            self.turn = Side.TIGER
            skipped = True
        return MoveResult(outcome=outcome, captured=victim, winner=self.check_terminal(), skipped=skipped)

    def goats_blocked(self) -> bool:
        """True when goats must move but none of them can."""
        if self.phase is not Phase.MOVEMENT:
            return False
        return all(not self.valid_moves(idx) for idx in self.positions_of(Piece.GOAT))

    def tiger_wins(self) -> bool:
        return self.captured >= self.topology.required_captures

    def goat_wins(self) -> bool:
        if self.tiger_wins():
            return False
        return all(not self.valid_moves(idx) for idx in self.positions_of(Piece.TIGER))

    def check_terminal(self) -> Optional[Side]:
        """Winning side, or ``None`` while the game continues."""
        if self.tiger_wins():
            return Side.TIGER
        if self.goat_wins():
            return Side.GOAT
        return None

    def encode_state(self) -> np.ndarray:
        """Cells followed by placed, captured and side to move."""
        counters = np.array(
            [self.placed, self.captured, 0 if self.turn is Side.GOAT else 1],
            dtype=np.int8,
        )
        return np.concatenate([self.cells, counters])

    def render_ascii(self) -> str:
        """Return a simple human-readable board representation."""
        topology = self.topology
        lines: List[str] = []
        if topology.kind is TopologyKind.GRID:
            rows = topology.display_rows()
            lines.append("    " + " ".join(f"{col:>2d}" for col in range(len(rows[0]))))
            for row_idx, row in enumerate(rows):
                lines.append(f"{row_idx:>2d}  " + " ".join(f"{self.occupant(idx).symbol:>2s}" for idx in row))
        else:
            for row in topology.display_rows():
                lines.append("  ".join(f"{topology.label(idx):>2s}:{self.occupant(idx).symbol}" for idx in row))
        lines.append(
            f"phase={self.phase.value} turn={self.turn.value} "
            f"placed={self.placed}/{topology.max_placements} "
            f"captured={self.captured}/{topology.required_captures}"
        )
        return "\n".join(lines)
