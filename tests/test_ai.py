import pytest

from ai.factory import build_ai, decide
from ai.greedy_ai import MediumGoatAI, MediumTigerAI
from ai.minimax_ai import WIN_SCORE, AlphaBetaSearch, HardTigerAI
from ai.random_ai import EasyGoatAI, EasyTigerAI
from ai.tactical_ai import HardGoatAI
from cli.main import parse_position, parse_user_move, run_match
from engine.board import MOVE, PLACE, Board, IllegalMoveError, Move, NoLegalMovesError
from engine.pieces import Difficulty, Piece, Side


def one_capture_board(make_board):
    """Tigers with exactly one capture and four plain steps."""
    return make_board(
        tigers=[(0, 0), (4, 4)],
        goats=[(0, 1), (3, 3), (2, 2)],
        turn=Side.TIGER,
    )


def safe_and_unsafe_goat_board(make_board):
    """A lone goat on (0, 2) that must not step next to the corner tiger."""
    return make_board(tigers=[(0, 0)], goats=[(0, 2)], placed=20, turn=Side.GOAT)


def test_one_capture_board_shape(make_board):
    board = one_capture_board(make_board)
    moves = board.legal_moves()
    assert len(moves) == 5
    assert sum(1 for move in moves if board.is_capture(move)) == 1


@pytest.mark.parametrize("ai_cls", [EasyTigerAI, MediumTigerAI, HardTigerAI])
def test_tigers_always_take_the_only_capture(make_board, ai_cls):
    board = one_capture_board(make_board)
    capture = next(move for move in board.legal_moves() if board.is_capture(move))
    ai = ai_cls(seed=3)
    rounds = 1000 if ai_cls is EasyTigerAI else 50
    for _ in range(rounds):
        assert ai.choose_move(board) == capture


def test_medium_tiger_closes_in(make_board):
    board = make_board(tigers=[(0, 0)], goats=[(2, 2)], turn=Side.TIGER)
    topology = board.topology
    ai = MediumTigerAI(seed=11)
    for _ in range(50):
        move = ai.choose_move(board)
        assert move.to_pos == topology.index_of((1, 1))


@pytest.mark.parametrize("ai_cls", [EasyGoatAI, MediumGoatAI, HardGoatAI])
def test_goats_avoid_hanging_moves(make_board, ai_cls):
    board = safe_and_unsafe_goat_board(make_board)
    topology = board.topology
    unsafe = {topology.index_of((0, 1)), topology.index_of((1, 1))}
    ai = ai_cls(seed=5)
    for _ in range(100):
        move = ai.choose_move(board)
        assert move.kind == MOVE
        assert move.to_pos not in unsafe


def test_goats_take_hanging_move_when_nothing_else(make_board):
    # Every goat move opens a jump; the goat still has to move.
    board = make_board(tigers=[(0, 0)], goats=[(0, 1), (0, 2)], placed=20)
    for ai_cls in (EasyGoatAI, MediumGoatAI, HardGoatAI):
        move = ai_cls(seed=1).choose_move(board)
        assert move in board.legal_moves()


def test_easy_goat_edge_bias(make_board):
    board = Board.new_game("grid")
    topology = board.topology
    ai = EasyGoatAI(seed=2, edge_bias=1.0)
    for _ in range(100):
        assert topology.is_boundary(ai.choose_move(board).to_pos)
    with pytest.raises(ValueError):
        EasyGoatAI(edge_bias=1.5)


def test_medium_goat_blocks_landing(make_board):
    board = make_board(tigers=[(0, 0)], goats=[(0, 1)])
    landing = board.topology.index_of((0, 2))
    for ai_cls in (MediumGoatAI, HardGoatAI):
        ai = ai_cls(seed=4)
        for _ in range(20):
            assert ai.choose_move(board) == Move(kind=PLACE, to_pos=landing)


def test_medium_goat_crowds_tigers():
    board = Board.new_game("grid")
    ai = MediumGoatAI(seed=9)
    for _ in range(50):
        move = ai.choose_move(board)
        assert any(board.occupant(nb) is Piece.TIGER for nb in board.topology.adjacent_of(move.to_pos))


def _almost_trapped(make_board, **kwargs):
    return make_board(tigers=[(0, 0)], goats=[(0, 1), (0, 2), (1, 0), (2, 0), (2, 2)], **kwargs)


def test_hard_goat_places_the_trap(make_board):
    board = _almost_trapped(make_board)
    move = HardGoatAI(seed=0).choose_move(board)
    assert move == Move(kind=PLACE, to_pos=board.topology.index_of((1, 1)))


def test_hard_goat_moves_into_the_trap(make_board):
    board = make_board(
        tigers=[(0, 0)],
        goats=[(0, 1), (0, 2), (1, 0), (2, 0), (2, 2), (1, 2)],
        placed=20,
    )
    topology = board.topology
    move = HardGoatAI(seed=0).choose_move(board)
    assert move == Move(kind=MOVE, from_pos=topology.index_of((1, 2)), to_pos=topology.index_of((1, 1)))


def test_hard_goat_remembers_unsafe_blocks(make_board):
    # The only blocking square (2, 2) can itself be jumped from (2, 3).
    board = make_board(tigers=[(0, 0), (2, 3)], goats=[(1, 1)])
    topology = board.topology
    landing = topology.index_of((2, 2))
    ai = HardGoatAI(seed=0)
    assert ai._safe_block(board, board.legal_moves()) is None
    assert ai._unsafe_block(board, board.legal_moves()) == Move(kind=PLACE, to_pos=landing)
    assert landing in board.unsafe_placements
    assert ai._unsafe_block(board, board.legal_moves()) is None


def test_hard_goat_opening_book(make_board):
    board = Board.new_game("grid")
    ai = HardGoatAI(seed=0)
    move = ai._opening_book(board, board.legal_moves())
    # (0, 1) sits next to a tiger with an open landing, (0, 2) is the first safe book square.
    assert move == Move(kind=PLACE, to_pos=board.topology.index_of((0, 2)))
    assert [name for name, _ in ai.strategies(Board.new_game("graph"))] == [
        "trap",
        "safe-block",
        "unsafe-block",
        "trap-recheck",
        "placement-score",
        "lowest-risk",
    ]


def test_hard_goat_best_placement_skips_gambled_squares():
    board = Board.new_game("grid")
    ai = HardGoatAI(seed=0)
    first = ai._best_placement(board, board.legal_moves())
    board.unsafe_placements.add(first.to_pos)
    second = ai._best_placement(board, board.legal_moves())
    assert second.to_pos != first.to_pos
    board.unsafe_placements.update(board.empty_positions())
    assert ai._best_placement(board, board.legal_moves()) is None


def test_hard_goat_lowest_risk(make_board):
    board = make_board(tigers=[(0, 0)], goats=[(2, 2)])
    topology = board.topology
    hanging = [Move(kind=PLACE, to_pos=topology.index_of(coord)) for coord in [(0, 1), (1, 0)]]
    covered = Move(kind=PLACE, to_pos=topology.index_of((1, 1)))
    ai = HardGoatAI(seed=0)
    assert ai._lowest_risk(board, hanging + [covered]) == covered
    # Nothing is safe, so every candidate stays in play.
    assert ai._lowest_risk(board, hanging) in hanging


def test_hard_goat_blocks_one_more_tiger(make_board):
    board = make_board(
        tigers=[(0, 0), (4, 4)],
        goats=[(0, 1), (0, 2), (1, 0), (2, 0), (2, 2), (1, 2)],
        placed=20,
    )
    topology = board.topology
    ai = HardGoatAI(seed=0)
    expected = Move(kind=MOVE, from_pos=topology.index_of((1, 2)), to_pos=topology.index_of((1, 1)))
    assert ai._trap(board, board.legal_moves()) is None
    assert ai.choose_move(board) == expected


def test_hard_goat_block_more_needs_an_increase(make_board):
    board = safe_and_unsafe_goat_board(make_board)
    assert HardGoatAI(seed=0)._block_more(board, board.legal_moves()) is None


def test_medium_goat_moves_next_to_other_goats(make_board):
    board = make_board(tigers=[(4, 4)], goats=[(0, 0), (0, 2)], placed=20)
    target = board.topology.index_of((0, 1))
    ai = MediumGoatAI(seed=6)
    for _ in range(30):
        assert ai.choose_move(board).to_pos == target


def test_medium_goat_moves_to_edge_without_company(make_board):
    board = make_board(tigers=[(4, 4)], goats=[(1, 1)], placed=20)
    topology = board.topology
    edge = {topology.index_of((0, 1)), topology.index_of((1, 0))}
    ai = MediumGoatAI(seed=6)
    for _ in range(30):
        assert ai.choose_move(board).to_pos in edge


def test_medium_goat_edge_preference_is_early_only(make_board):
    ai = MediumGoatAI(seed=8)
    early = Board.new_game("grid")
    for _ in range(30):
        move = ai._early_edge(early, early.legal_moves())
        assert early.topology.is_boundary(move.to_pos)
    late = make_board(tigers=[(0, 0)], goats=[(2, 2)], placed=13)
    assert ai._early_edge(late, late.legal_moves()) is None


def test_easy_goat_default_edge_bias():
    board = Board.new_game("grid")
    ai = EasyGoatAI(seed=12)
    draws = 1000
    edge = sum(1 for _ in range(draws) if board.topology.is_boundary(ai.choose_move(board).to_pos))
    # 0.6 + 0.4 * 12 / 21 of placements should land on one of the 12 free edge squares.
    assert 0.75 < edge / draws < 0.9


def test_hard_tiger_breaks_search_ties_at_random(make_board):
    board = make_board(tigers=[(2, 2)], placed=20, turn=Side.TIGER)
    moves = board.legal_moves()
    scored = AlphaBetaSearch(depth=2).score_moves(board, moves)
    best_value = max(value for _, value in scored)
    tied = {move for move, value in scored if value == best_value}
    assert len(tied) > 1
    picks = {HardTigerAI(seed=seed)._minimax(board, moves) for seed in range(40)}
    assert picks <= tied
    assert len(picks) > 1


def test_hard_tiger_fallback_tiers(make_board):
    board = make_board(tigers=[(0, 0)], goats=[(4, 4)], turn=Side.TIGER)
    topology = board.topology
    ai = HardTigerAI(seed=0)
    moves = board.legal_moves()
    assert ai._minimax(board, moves[:1]) == moves[0]
    assert ai._centralise(board, moves) == Move(
        kind=MOVE, from_pos=topology.index_of((0, 0)), to_pos=topology.index_of((1, 0))
    )
    assert ai._heuristic(board, moves) in moves


def test_search_sees_winning_capture(make_board):
    board = make_board(tigers=[(0, 0)], goats=[(0, 1), (3, 3)], captured=4, turn=Side.TIGER)
    search = AlphaBetaSearch(depth=2)
    scores = dict(search.score_moves(board, board.legal_moves()))
    capture = Move(kind=MOVE, from_pos=board.topology.index_of((0, 0)), to_pos=board.topology.index_of((0, 2)))
    assert scores[capture] == WIN_SCORE
    assert max(scores.values()) == WIN_SCORE


def test_transposition_cache_does_not_change_scores():
    board = Board.new_game("grid")
    board.apply_move(Move(kind=PLACE, to_pos=board.topology.index_of((1, 1))))
    moves = board.legal_moves()
    cached = AlphaBetaSearch(depth=2, use_transposition=True).score_moves(board, moves)
    plain = AlphaBetaSearch(depth=2, use_transposition=False).score_moves(board, moves)
    assert cached == plain


def test_search_depth_must_be_positive():
    with pytest.raises(ValueError):
        AlphaBetaSearch(depth=0)


@pytest.mark.parametrize("kind", ["grid", "graph"])
def test_hard_tiger_only_returns_legal_moves(kind):
    board = Board.new_game(kind)
    board.apply_move(board.legal_moves()[0])
    legal = board.legal_moves()
    ai = HardTigerAI(seed=None)
    for _ in range(10):
        assert ai.choose_move(board) in legal


def test_build_ai_registry():
    assert isinstance(build_ai("tiger", "easy"), EasyTigerAI)
    assert isinstance(build_ai(Side.TIGER, Difficulty.HARD, depth=1), HardTigerAI)
    assert isinstance(build_ai("goat", "medium"), MediumGoatAI)
    assert isinstance(build_ai("goat", "hard"), HardGoatAI)
    with pytest.raises(ValueError):
        build_ai("goat", "impossible")
    with pytest.raises(ValueError):
        build_ai("wolf", "easy")


def test_decide_returns_placement_for_goats():
    board = Board.new_game("graph")
    move = decide(board, Side.GOAT, "easy", seed=1)
    assert move.kind == PLACE
    assert move.from_pos is None
    assert move in board.legal_moves()


def test_decide_rejects_wrong_side():
    with pytest.raises(IllegalMoveError):
        decide(Board.new_game("grid"), Side.TIGER, Difficulty.MEDIUM)


def test_decide_without_candidates(make_board):
    # Every goat is boxed in by tigers that can still move, so the game goes on.
    board = make_board(tigers=[(0, 0), (0, 2), (1, 1)], goats=[(0, 1)], placed=20)
    assert board.check_terminal() is None
    with pytest.raises(NoLegalMovesError):
        decide(board, Side.GOAT, "hard")


@pytest.mark.parametrize("difficulty", ["easy", "medium", "hard"])
def test_decide_refuses_finished_games(make_board, difficulty):
    tigers_won = make_board(tigers=[(0, 0)], goats=[(2, 2)], captured=5)
    assert tigers_won.check_terminal() is Side.TIGER
    with pytest.raises(IllegalMoveError):
        decide(tigers_won, Side.GOAT, difficulty)

    goats_won = _almost_trapped(make_board, turn=Side.TIGER)
    goats_won.cells[goats_won.topology.index_of((1, 1))] = Piece.GOAT
    assert goats_won.check_terminal() is Side.GOAT
    with pytest.raises(IllegalMoveError):
        decide(goats_won, Side.TIGER, difficulty)


def test_cli_parsing():
    grid = Board.new_game("grid").topology
    assert parse_position("1,2", grid) == grid.index_of((1, 2))
    assert parse_user_move("place 2,2", grid) == Move(kind=PLACE, to_pos=grid.index_of((2, 2)))
    assert parse_user_move("move 0,0 1,1", grid) == Move(
        kind=MOVE, from_pos=grid.index_of((0, 0)), to_pos=grid.index_of((1, 1))
    )
    assert parse_user_move("jump", grid) is None
    with pytest.raises(ValueError):
        parse_position("9,9", grid)

    graph = Board.new_game("graph").topology
    assert parse_user_move("place 12", graph) == Move(kind=PLACE, to_pos=graph.index_of(12))


@pytest.mark.parametrize("kind", ["grid", "graph"])
@pytest.mark.parametrize("difficulty", ["easy", "medium"])
def test_ai_games_stay_legal(kind, difficulty):
    for seed in range(3):
        board = Board.new_game(kind)
        players = {
            Side.TIGER: build_ai(Side.TIGER, difficulty, seed=seed),
            Side.GOAT: build_ai(Side.GOAT, difficulty, seed=seed + 97),
        }
        winner = run_match(board, players, max_plies=120, verbose=False)
        assert winner in (None, Side.TIGER, Side.GOAT)
        assert board.captured <= board.topology.required_captures
        assert board.count(Piece.GOAT) == board.placed - board.captured


@pytest.mark.parametrize("kind", ["grid", "graph"])
def test_hard_ai_game_stays_legal(kind):
    board = Board.new_game(kind)
    players = {
        Side.TIGER: build_ai(Side.TIGER, "hard", seed=1),
        Side.GOAT: build_ai(Side.GOAT, "hard", seed=2),
    }
    run_match(board, players, max_plies=24, verbose=False)
    assert board.check_terminal() in (None, Side.TIGER, Side.GOAT)
    assert not (board.tiger_wins() and board.goat_wins())
