"""Alpha-beta search and the hard tiger built on top of it."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from ai.base_ai import Strategy, TigerAI
from ai.evaluation import capture_score, evaluate
from engine.board import Board, Move
from engine.pieces import Side
from engine.rules import simulate

LOGGER = logging.getLogger(__name__)

WIN_SCORE = 10_000.0


class AlphaBetaSearch:
    """Depth-limited minimax with alpha-beta pruning.

    Leaves are scored by :func:`ai.evaluation.evaluate` from the root mover's
    perspective. The evaluator is zero-sum, so the minimising side reuses it
    unchanged. A side with no legal moves is treated as a leaf.
    """

    def __init__(self, depth: int = 2, use_transposition: bool = True, debug_top_k: int = 3) -> None:
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}")
        self.depth = depth
        self.use_transposition = use_transposition
        self.debug_top_k = max(1, debug_top_k)
        self._ttable: Dict[Tuple[bytes, int, str], float] = {}

    def score_moves(self, board: Board, moves: Sequence[Move]) -> List[Tuple[Move, float]]:
        """Search every root move and return ``(move, value)`` pairs."""
        self._ttable.clear()
        perspective = board.turn
        scored: List[Tuple[Move, float]] = []
        for move in moves:
            child = board.clone()
            child.apply_move(move)
            value = self._alphabeta(child, self.depth - 1, -math.inf, math.inf, perspective)
            scored.append((move, value))
        self._log_diagnostics(scored)
        return scored

    def _log_diagnostics(self, scored: List[Tuple[Move, float]]) -> None:
        """Emit top-k candidate breakdown when DEBUG is enabled."""
        if not LOGGER.isEnabledFor(logging.DEBUG):
            return
        ranked = sorted(scored, key=lambda item: item[1], reverse=True)
        for idx, (move, value) in enumerate(ranked[: self.debug_top_k], start=1):
            LOGGER.debug("Candidate #%d move=%s eval=%.3f", idx, move, value)

    def _alphabeta(
        self,
        board: Board,
        depth: int,
        alpha: float,
        beta: float,
        perspective: Side,
    ) -> float:
        key = None
        if self.use_transposition:
            key = self._transposition_key(board, depth, perspective)
            if key in self._ttable:
                return self._ttable[key]

        winner = board.check_terminal()
        if winner is not None:
            return WIN_SCORE if winner is perspective else -WIN_SCORE

        legal_moves = board.legal_moves()
        if depth <= 0 or not legal_moves:
            score = evaluate(board, perspective)
            if key is not None:
                self._ttable[key] = score
            return score

        maximizing = board.turn is perspective
        best = -math.inf if maximizing else math.inf
        for move in legal_moves:
            child = board.clone()
            child.apply_move(move)
            score = self._alphabeta(child, depth - 1, alpha, beta, perspective)
            if maximizing:
                best = max(best, score)
                alpha = max(alpha, score)
            else:
                best = min(best, score)
                beta = min(beta, score)
            if beta <= alpha:
                break
        # Cut-off values are bounds, not exact scores.
        if key is not None and alpha < beta:
            self._ttable[key] = best
        return best

    def _transposition_key(self, board: Board, depth: int, perspective: Side) -> Tuple[bytes, int, str]:
        """Hashable key for cached minimax values."""
        state_bytes = board.encode_state().tobytes()
        return (state_bytes, depth, perspective.value)


class HardTigerAI(TigerAI):
    """Best capture, then search, then centralise, then plain evaluation."""

    def __init__(
        self,
        depth: int = 2,
        seed: Optional[int] = None,
        use_transposition: bool = True,
        debug_top_k: int = 3,
    ) -> None:
        super().__init__(seed=seed)
        self.search = AlphaBetaSearch(depth=depth, use_transposition=use_transposition, debug_top_k=debug_top_k)

    def strategies(self, board: Board) -> Sequence[Tuple[str, Strategy]]:
        return [
            ("best-capture", self._best_capture),
            ("minimax", self._minimax),
            ("centralise", self._centralise),
            ("heuristic", self._heuristic),
        ]

    def _best_capture(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._best(self._captures(board, moves), lambda move: capture_score(board, move))

    def _minimax(self, board: Board, moves: List[Move]) -> Optional[Move]:
        scored = self.search.score_moves(board, moves)
        if not scored:
            return None
        best_value = max(value for _, value in scored)
        return self._pick([move for move, value in scored if value == best_value])

    def _centralise(self, board: Board, moves: List[Move]) -> Optional[Move]:
        topology = board.topology
        for move in moves:
            if topology.center_distance(move.to_pos) < topology.center_distance(move.from_pos):
                return move
        return None

    def _heuristic(self, board: Board, moves: List[Move]) -> Optional[Move]:
        return self._best(moves, lambda move: evaluate(simulate(board, move), Side.TIGER))
