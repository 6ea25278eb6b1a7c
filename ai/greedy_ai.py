"""Medium tier: one-move lookahead with fixed preferences."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from ai.base_ai import GoatAI, Strategy, TigerAI
from ai.evaluation import is_early_placement
from engine.board import Board, Move
from engine.pieces import Piece
from engine.rules import adjacent_count, jump_threats, safe_moves

LOGGER = logging.getLogger(__name__)


class MediumTigerAI(TigerAI):
    """Captures first, then closes in on goats that still have room."""

    def strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        return [
            ("random-capture", self._random_capture),
            ("threatening", self._threatening),
            ("random", self._random_move),
        ]

    def _random_capture(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._pick(self._captures(board, moves))

    def _threatening(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._pick([move for move in moves if self._is_threatening(board, move)])

    @staticmethod
    def _is_threatening(board: Board, move: Move) -> bool:
        """The tiger lands next to a goat that still has an empty neighbour."""
        trial = board.clone()
        trial.execute_move(move.from_pos, move.to_pos)
        topology = trial.topology
        for neighbor in topology.adjacent_of(move.to_pos):
            if trial.cells[neighbor] != Piece.GOAT:
                continue
            if any(trial.is_empty(nb) for nb in topology.adjacent_of(neighbor)):
                return True
        return False


class MediumGoatAI(GoatAI):
    """Blocks open jumps, crowds tigers, and keeps goats together."""

    def placement_strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        return [
            ("block-landing", self._block_landing),
            ("near-tiger", self._near_tiger),
            ("early-edge", self._early_edge),
            ("random", self._random_move),
        ]

    def movement_strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        return [
            ("safe", self._safe_move),
            ("random", self._random_move),
        ]

    def _block_landing(self, board: Board, moves: List[Move]) -> Optional[Move]:
        landings = {threat.landing for threat in jump_threats(board)}
        return self._pick([move for move in moves if move.to_pos in landings])

    def _near_tiger(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._pick([move for move in moves if adjacent_count(board, move.to_pos, Piece.TIGER) > 0])

    def _early_edge(self, board: Board, moves: List[Move]) -> Optional[Move]:
        if not is_early_placement(board):
            return None
        return self._pick([move for move in moves if board.topology.is_boundary(move.to_pos)])

    def _safe_move(self, board: Board, moves: List[Move]) -> Optional[Move]:
        """Among safe moves prefer company, then the edge, then anything."""
        safe = safe_moves(board, moves)
        if not safe:
            return None

        def company(move: Move) -> int:
            trial = board.clone()
            trial.execute_move(move.from_pos, move.to_pos)
            return adjacent_count(trial, move.to_pos, Piece.GOAT)

        scored = [(company(move), move) for move in safe]
        most = max(score for score, _ in scored)
        if most > 0:
            LOGGER.debug("Medium goat clustering with %d neighbours", most)
            return self._pick([move for score, move in scored if score == most])
        edge = [move for move in safe if board.topology.is_boundary(move.to_pos)]
        if edge:
            return self._pick(edge)
        return self._pick(safe)
