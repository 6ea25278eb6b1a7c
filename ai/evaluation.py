"""Position evaluation for tiger and goat boards.

``evaluate`` scores a whole position from one side's point of view. Scores
are zero-sum: the tiger's score is always the negation of the goat's, so the
search can use a single evaluator for both the maximising and the minimising
side. Term weights live in per-topology :class:`EvalWeights` profiles.

``capture_score`` and ``placement_score`` are narrower evaluators used by the
hard tier to rank captures and goat placements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from engine.board import PLACE, Board, Move
from engine.pieces import Piece, Side, TopologyKind
from engine.rules import (
    adjacent_count,
    blocked_tigers,
    boundary_goats,
    goat_links,
    jump_threats,
    simulate,
    threatened_goats,
    tiger_mobility,
)

EARLY_PLACEMENT_RATIO = 0.6


@dataclass(frozen=True)
class EvalWeights:
    """Term weights, expressed from the goat's perspective."""

    blocked_tiger: float
    tiger_mobility: float
    unsafe_goat: float
    goat_link: float
    edge_goat_early: float
    edge_goat_late: float
    captured_goat: float


GRID_WEIGHTS = EvalWeights(
    blocked_tiger=400.0,
    tiger_mobility=12.0,
    unsafe_goat=150.0,
    goat_link=10.0,
    edge_goat_early=40.0,
    edge_goat_late=10.0,
    captured_goat=250.0,
)

GRAPH_WEIGHTS = EvalWeights(
    blocked_tiger=350.0,
    tiger_mobility=15.0,
    unsafe_goat=150.0,
    goat_link=12.0,
    edge_goat_early=30.0,
    edge_goat_late=8.0,
    captured_goat=200.0,
)

WEIGHT_PROFILES: Dict[TopologyKind, EvalWeights] = {
    TopologyKind.GRID: GRID_WEIGHTS,
    TopologyKind.GRAPH: GRAPH_WEIGHTS,
}

# Hard-tier capture ranking.
CAPTURE_BASE = 100.0
CAPTURE_MOBILITY = 10.0
CAPTURE_ADJACENT_GOAT = 5.0
CAPTURE_BOUNDARY = 20.0

# Hard-tier placement ranking.
PLACEMENT_WALL_EARLY = 600.0
PLACEMENT_WALL_LATE = 200.0
PLACEMENT_BLOCK = 300.0
PLACEMENT_BLOCK_PER_THREAT = 10
PLACEMENT_CLUSTER = 150.0
PLACEMENT_MOBILITY_DROP = 200.0
PLACEMENT_REPLY_FACTOR = 0.5


def weights_for(kind: TopologyKind) -> EvalWeights:
    return WEIGHT_PROFILES[kind]


def is_early_placement(board: Board) -> bool:
    """True while no more than 60% of the goats have been placed."""
    return board.placed <= EARLY_PLACEMENT_RATIO * board.topology.max_placements


def evaluate(board: Board, perspective: Side, weights: Optional[EvalWeights] = None) -> float:
    """Heuristic score of ``board``; higher is better for ``perspective``."""
    w = weights or weights_for(board.topology.kind)
    edge_weight = w.edge_goat_early if is_early_placement(board) else w.edge_goat_late
    goat_score = (
        w.blocked_tiger * blocked_tigers(board)
        - w.tiger_mobility * tiger_mobility(board)
        - w.unsafe_goat * len(threatened_goats(board))
        + w.goat_link * goat_links(board)
        + edge_weight * boundary_goats(board)
        - w.captured_goat * board.captured
    )
    return goat_score if perspective is Side.GOAT else -goat_score


def capture_score(board: Board, move: Move) -> float:
    """Rank a tiger capture by where the tiger ends up."""
    after = simulate(board, move)
    landing = move.to_pos
    score = CAPTURE_BASE
    score += CAPTURE_MOBILITY * len(after.valid_moves(landing))
    score += CAPTURE_ADJACENT_GOAT * adjacent_count(after, landing, Piece.GOAT)
    if board.topology.is_boundary(landing):
        score += CAPTURE_BOUNDARY
    return score


def block_score(board: Board, index: int) -> int:
    """10 per open jump that would land on ``index``."""
    return PLACEMENT_BLOCK_PER_THREAT * sum(1 for threat in jump_threats(board) if threat.landing == index)


def best_tiger_reply(board: Board) -> float:
    """Best evaluation the tigers can reach with one move, 0 if they cannot move."""
    best: Optional[float] = None
    for reply in board.legal_moves(Side.TIGER):
        trial = board.clone()
        trial.execute_move(reply.from_pos, reply.to_pos)
        score = evaluate(trial, Side.TIGER)
        if best is None or score > best:
            best = score
    return best if best is not None else 0.0


def placement_score(board: Board, index: int) -> float:
    """General placement evaluator for the hard goat."""
    move = Move(kind=PLACE, to_pos=index)
    after = simulate(board, move)
    score = 0.0
    if board.topology.is_boundary(index):
        score += PLACEMENT_WALL_EARLY if is_early_placement(board) else PLACEMENT_WALL_LATE
    score += PLACEMENT_BLOCK * block_score(board, index)
    score += PLACEMENT_CLUSTER * adjacent_count(board, index, Piece.GOAT)
    if tiger_mobility(after) < tiger_mobility(board):
        score += PLACEMENT_MOBILITY_DROP
    score -= PLACEMENT_REPLY_FACTOR * best_tiger_reply(after)
    return score
