"""Hard goat: layered tactical placement and movement."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ai.base_ai import GoatAI, Strategy
from ai.evaluation import evaluate, placement_score
from engine.board import Board, Move
from engine.pieces import Side, TopologyKind
from engine.rules import (
    blocked_tigers,
    capture_risk,
    jump_threats,
    results_in_capture,
    safe_moves,
    simulate,
    tiger_mobility,
    traps_all_tigers,
)

LOGGER = logging.getLogger(__name__)

# Perimeter clockwise from the top edge, skipping the tiger corners, then the
# diagonal crossings and the centre.
# fmt: off
GRID_OPENING_BOOK: Tuple[Tuple[int, int], ...] = (
    (0, 1), (0, 2), (0, 3), (1, 4), (2, 4), (3, 4),
    (4, 3), (4, 2), (4, 1), (3, 0), (2, 0), (1, 0),
    (1, 1), (1, 3), (3, 3), (3, 1), (2, 2),
)
# fmt: on

BLOCK_WALL_BONUS = 50.0
BLOCK_MOBILITY = 10.0
BLOCK_THREAT = 100.0


class HardGoatAI(GoatAI):
    """Goat that blocks jumps, walls in tigers and avoids hanging pieces."""

    def placement_strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        chain: List[Tuple[str, Strategy]] = [
            ("trap", self._trap),
            ("safe-block", self._safe_block),
            ("unsafe-block", self._unsafe_block),
        ]
        if board.topology.kind is TopologyKind.GRID:
            chain.append(("opening-book", self._opening_book))
        chain.extend(
            [
                ("trap-recheck", self._trap),
                ("placement-score", self._best_placement),
                ("lowest-risk", self._lowest_risk),
            ]
        )
        return chain

    def movement_strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        return [
            ("trap", self._trap),
            ("block-more", self._block_more),
            ("evaluate", self._best_evaluated),
        ]

    def _trap(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._pick([move for move in moves if traps_all_tigers(board, move)])

    def _block_candidates(self, board: Board, moves: List[Move]) -> List[Move]:
        landings = {threat.landing for threat in jump_threats(board)}
        return [move for move in moves if move.to_pos in landings]

    def _safe_block(self, board: Board, moves: List[Move]) -> Optional[Move]:
        candidates = safe_moves(board, self._block_candidates(board, moves))
        if not candidates:
            return None
        mobility = tiger_mobility(board)
        threats = len(jump_threats(board))

        def score(move: Move) -> float:
            after = simulate(board, move)
            value = BLOCK_MOBILITY * (mobility - tiger_mobility(after))
            value += BLOCK_THREAT * (threats - len(jump_threats(after)))
            if board.topology.is_boundary(move.to_pos):
                value += BLOCK_WALL_BONUS
            return value

        return self._best(candidates, score)

    def _unsafe_block(self, board: Board, moves: List[Move]) -> Optional[Move]:
        candidates = [
            move for move in self._block_candidates(board, moves) if move.to_pos not in board.unsafe_placements
        ]
        if not candidates:
            return None
        threats = len(jump_threats(board))
        chosen = self._best(candidates, lambda move: threats - len(jump_threats(simulate(board, move))))
        board.unsafe_placements.add(chosen.to_pos)
        LOGGER.debug("Hard goat gambling on unsafe block at %s", board.topology.label(chosen.to_pos))
        return chosen

    def _opening_book(self, board: Board, moves: List[Move]) -> Optional[Move]:
        by_target = {move.to_pos: move for move in moves}
        for coord in GRID_OPENING_BOOK:
            move = by_target.get(board.topology.index_of(coord))
            if move is not None and not results_in_capture(board, move):
                return move
        return None

    def _best_placement(self, board: Board, moves: List[Move]) -> Optional[Move]:
        candidates = [move for move in safe_moves(board, moves) if move.to_pos not in board.unsafe_placements]
        return self._best(candidates, lambda move: placement_score(board, move.to_pos))

    def _lowest_risk(self, board: Board, moves: List[Move]) -> Optional[Move]:
        candidates = safe_moves(board, moves) or moves
        return self._best(candidates, lambda move: -capture_risk(board, move))

    def _block_more(self, board: Board, moves: List[Move]) -> Optional[Move]:
        current = blocked_tigers(board)
        improving = [move for move in moves if blocked_tigers(simulate(board, move)) > current]
        return self._best(improving, lambda move: evaluate(simulate(board, move), Side.GOAT))

    def _best_evaluated(self, board: Board, moves: List[Move]) -> Optional[Move]:
        candidates = safe_moves(board, moves) or moves
        return self._best(candidates, lambda move: evaluate(simulate(board, move), Side.GOAT))
