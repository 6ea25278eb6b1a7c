"""Tactical queries shared by the evaluators and the AI tiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Set

from engine.board import Board, Move
from engine.pieces import Piece


@dataclass(frozen=True)
class JumpThreat:
    """A capture the tigers could make right now."""

    tiger: int
    victim: int
    landing: int


def jump_threats(board: Board) -> List[JumpThreat]:
    """Return every capture currently open to any tiger."""
    topology = board.topology
    threats: List[JumpThreat] = []
    for tiger in board.positions_of(Piece.TIGER):
        for neighbor in topology.adjacent_of(tiger):
            if board.cells[neighbor] != Piece.GOAT:
                continue
            landing = topology.landing_for(tiger, neighbor)
            if landing is not None and board.is_empty(landing):
                threats.append(JumpThreat(tiger=tiger, victim=neighbor, landing=landing))
    return threats


def threatened_goats(board: Board) -> Set[int]:
    return {threat.victim for threat in jump_threats(board)}


def tiger_mobility(board: Board) -> int:
    """Total number of destinations open to all tigers."""
    return sum(len(board.valid_moves(idx)) for idx in board.positions_of(Piece.TIGER))


def blocked_tigers(board: Board) -> int:
    return sum(1 for idx in board.positions_of(Piece.TIGER) if not board.valid_moves(idx))


def all_tigers_blocked(board: Board) -> bool:
    return blocked_tigers(board) == board.count(Piece.TIGER)


def adjacent_count(board: Board, index: int, piece: Piece) -> int:
    """Number of neighbours of ``index`` holding ``piece``."""
    return sum(1 for nb in board.topology.adjacent_of(index) if board.cells[nb] == piece)


def goat_links(board: Board) -> int:
    """Number of adjacent goat pairs, each pair counted once."""
    links = 0
    for goat in board.positions_of(Piece.GOAT):
        for nb in board.topology.adjacent_of(goat):
            if nb > goat and board.cells[nb] == Piece.GOAT:
                links += 1
    return links


def boundary_goats(board: Board) -> int:
    return sum(1 for idx in board.positions_of(Piece.GOAT) if board.topology.is_boundary(idx))


def simulate(board: Board, move: Move) -> Board:
    """Play ``move`` for the side to move on a clone and return the clone."""
    trial = board.clone()
    trial.apply_move(move)
    return trial


def results_in_capture(board: Board, move: Move) -> bool:
    """Whether a goat move or placement hands the tigers a new capture.

    The move is unsafe when the goat it lands is immediately jumpable or when
    it opens more jumps than were already on the board.
    """
    before = len(jump_threats(board))
    after = jump_threats(simulate(board, move))
    if any(threat.victim == move.to_pos for threat in after):
        return True
    return len(after) > before


def safe_moves(board: Board, moves: Sequence[Move]) -> List[Move]:
    return [move for move in moves if not results_in_capture(board, move)]


def capture_risk(board: Board, move: Move) -> int:
    """100 per tiger jump over the goat that ``move`` puts down."""
    after = simulate(board, move)
    return 100 * sum(1 for threat in jump_threats(after) if threat.victim == move.to_pos)


def traps_all_tigers(board: Board, move: Move) -> bool:
    return all_tigers_blocked(simulate(board, move))
