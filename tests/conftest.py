from typing import Iterable, Optional

import pytest

from engine.board import Board
from engine.pieces import Piece, Side


def build_board(
    kind: str = "grid",
    tigers: Iterable = (),
    goats: Iterable = (),
    placed: Optional[int] = None,
    captured: int = 0,
    turn: Side = Side.GOAT,
) -> Board:
    """Board with exactly the given pieces; keys are (x, y) on the grid, node ids on the graph."""
    board = Board.new_game(kind)
    topology = board.topology
    board.cells[:] = Piece.EMPTY
    for key in tigers:
        board.cells[topology.index_of(key)] = Piece.TIGER
    goats = list(goats)
    for key in goats:
        board.cells[topology.index_of(key)] = Piece.GOAT
    board.placed = len(goats) + captured if placed is None else placed
    board.captured = captured
    board.turn = turn
    return board


@pytest.fixture
def make_board():
    return build_board
