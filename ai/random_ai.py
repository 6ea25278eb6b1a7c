"""Easy tier: random play with a couple of obvious preferences."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ai.base_ai import GoatAI, Strategy, TigerAI
from engine.board import Board, Move
from engine.rules import safe_moves


class EasyTigerAI(TigerAI):
    """Takes any capture on offer, otherwise moves at random."""

    def strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        return [
            ("random-capture", self._random_capture),
            ("random", self._random_move),
        ]

    def _random_capture(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._pick(self._captures(board, moves))


class EasyGoatAI(GoatAI):
    """Random goat with a coin-flip bias towards the board edge."""

    def __init__(self, seed: Optional[int] = None, edge_bias: float = 0.6) -> None:
        super().__init__(seed=seed)
        if not 0.0 <= edge_bias <= 1.0:
            raise ValueError(f"edge_bias must be within [0, 1], got {edge_bias}")
        self.edge_bias = edge_bias

    def placement_strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        return [("biased-placement", self._biased_placement)]

    def movement_strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        return [
            ("random-safe", self._random_safe),
            ("random", self._random_move),
        ]

    def _biased_placement(self, board: Board, moves: List[Move]) -> Optional[Move]:
        edges = [move for move in moves if board.topology.is_boundary(move.to_pos)]
        if edges and self._rng.random() < self.edge_bias:
            return self._pick(edges)
        return self._pick(moves)

    def _random_safe(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._pick(safe_moves(board, moves))
