"""Base AI interface and the priority-chain runner shared by every tier."""

from __future__ import annotations

import logging
import math
import random
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple

from engine.board import Board, Move, NoLegalMovesError
from engine.pieces import Phase, Side

LOGGER = logging.getLogger(__name__)

Strategy = Callable[[Board, List[Move]], Optional[Move]]


class BaseAI(ABC):
    """Abstract AI strategy contract.

    A concrete AI lists its strategies in priority order; ``choose_move``
    returns the first move any of them produces. Strategies return ``None``
    to pass, never raise.
    """

    side: Side

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_move(self, board: Board) -> Move:
        """Choose a legal move for ``self.side`` on the given board state."""
        legal_moves = board.legal_moves(self.side)
        if not legal_moves:
            raise NoLegalMovesError("No legal moves available.")
        for name, strategy in self.strategies(board):
            move = strategy(board, legal_moves)
            if move is not None:
                LOGGER.debug("%s picked %s via %s", type(self).__name__, move, name)
                return move
        chosen = self._rng.choice(legal_moves)
        LOGGER.debug("%s fell back to random move %s", type(self).__name__, chosen)
        return chosen

    @abstractmethod
    def strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        """Named strategies in the order they are tried."""
        raise NotImplementedError

    def _pick(self, moves: Sequence[Move]) -> Optional[Move]:
        return self._rng.choice(list(moves)) if moves else None

    def _best(self, moves: Sequence[Move], score: Callable[[Move], float]) -> Optional[Move]:
        """Highest-scoring move, ties broken at random."""
        best_score = -math.inf
        best_moves: List[Move] = []
        for move in moves:
            value = score(move)
            if value > best_score:
                best_score = value
                best_moves = [move]
            elif value == best_score:
                best_moves.append(move)
        return self._rng.choice(best_moves) if best_moves else None

    def _random_move(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._pick(moves)


class TigerAI(BaseAI):
    side = Side.TIGER

    def _captures(self, board: Board, moves: Sequence[Move]) -> List[Move]:
        return [move for move in moves if board.is_capture(move)]


class GoatAI(BaseAI):
    """Goats use one chain while placing and another while moving."""

    side = Side.GOAT

    def strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        if board.phase is Phase.PLACEMENT:
            return self.placement_strategies(board)
        return self.movement_strategies(board)

    @abstractmethod
    def placement_strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        raise NotImplementedError

    @abstractmethod
    def movement_strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        raise NotImplementedError
