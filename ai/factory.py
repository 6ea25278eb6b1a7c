"""AI construction by side and difficulty, plus the one-call ``decide`` entry point.

Usage::

    from ai.factory import build_ai, decide

    ai = build_ai(Side.TIGER, Difficulty.HARD, seed=7)
    move = ai.choose_move(board)

    move = decide(board, Side.GOAT, "medium")
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple, Type

from ai.base_ai import BaseAI
from ai.greedy_ai import MediumGoatAI, MediumTigerAI
from ai.minimax_ai import HardTigerAI
from ai.random_ai import EasyGoatAI, EasyTigerAI
from ai.tactical_ai import HardGoatAI
from engine.board import Board, IllegalMoveError, Move
from engine.pieces import Difficulty, Side

LOGGER = logging.getLogger(__name__)

AI_REGISTRY: Dict[Tuple[Side, Difficulty], Type[BaseAI]] = {
    (Side.TIGER, Difficulty.EASY): EasyTigerAI,
    (Side.TIGER, Difficulty.MEDIUM): MediumTigerAI,
    (Side.TIGER, Difficulty.HARD): HardTigerAI,
    (Side.GOAT, Difficulty.EASY): EasyGoatAI,
    (Side.GOAT, Difficulty.MEDIUM): MediumGoatAI,
    (Side.GOAT, Difficulty.HARD): HardGoatAI,
}


def build_ai(side: Side | str, difficulty: Difficulty | str, seed: Optional[int] = None, **kwargs: object) -> BaseAI:
    """Instantiate the AI for ``side`` at ``difficulty``.

    Extra keyword arguments go to the AI constructor, e.g. ``depth`` for the
    hard tiger or ``edge_bias`` for the easy goat. Unknown side or difficulty
    strings raise ``ValueError``.
    """
    key = (Side(side), Difficulty(difficulty))
    ai_cls = AI_REGISTRY[key]
    LOGGER.debug("Building %s for %s/%s", ai_cls.__name__, key[0].value, key[1].value)
    return ai_cls(seed=seed, **kwargs)


def decide(
    board: Board,
    side: Side | str,
    difficulty: Difficulty | str,
    seed: Optional[int] = None,
) -> Move:
    """Pick one move for ``side``, which must be the side to move in an unfinished game."""
    side = Side(side)
    winner = board.check_terminal()
    if winner is not None:
        raise IllegalMoveError(f"Game is over, {winner.value} has won.")
    if board.turn is not side:
        raise IllegalMoveError(f"It is {board.turn.value}'s turn, not {side.value}'s.")
    return build_ai(side, difficulty, seed=seed).choose_move(board)
