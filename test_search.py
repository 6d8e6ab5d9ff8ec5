import pytest

from config import AISettings
from draughts.board import Board
from draughts.engine import CheckersAI, get_engine
from draughts.eval import HeuristicEvaluator, piece_is_vulnerable, position_score, position_table
from draughts.moves import collect_moves, get_valid_moves
from draughts.search import (
    GreedyStrategy,
    MinimaxStrategy,
    RandomStrategy,
    get_search_strategy,
    leads_to_immediate_capture,
    max_capture_chain,
    simulate_turn,
)
from draughts.types import BLACK, RED

DIFFICULTIES = ["easy", "medium", "hard"]

# Helpers

def make_board(*pieces):
    """Build a board from (color, row, col[, king]) tuples."""
    board = Board.empty()
    for entry in pieces:
        board.place_piece(*entry)
    return board


def chain_position():
    """Red man at (7,1) can take two pieces in a row; red man at (3,7) only one."""
    return make_board(
        (RED, 7, 1), (BLACK, 6, 2), (BLACK, 4, 2), (RED, 6, 4),
        (RED, 3, 7), (BLACK, 2, 6),
    )


def snapshot(board):
    return [(p.piece_id, p.color, p.row, p.col, p.king) for p in board.iter_pieces()]


def test_position_table_values():
    table = position_table()
    assert table.shape == (8, 8)
    assert position_score(3, 3) == pytest.approx(9.0)
    assert position_score(0, 0) == pytest.approx(0.0 + 4.0 + 3.0)
    assert position_score(7, 7) == position_score(0, 0)
    assert position_score(4, 4) > position_score(5, 5)


def test_vulnerability():
    board = make_board((RED, 4, 4), (BLACK, 3, 3))
    red = board.get_piece(4, 4)
    black = board.get_piece(3, 3)
    assert piece_is_vulnerable(board, red)
    assert piece_is_vulnerable(board, black)

    board = make_board((RED, 4, 4), (BLACK, 3, 3), (RED, 5, 5), (BLACK, 2, 2))
    assert not piece_is_vulnerable(board, board.get_piece(4, 4))
    assert not piece_is_vulnerable(board, board.get_piece(3, 3))


def test_evaluation_is_symmetric_on_initial_board():
    evaluator = HeuristicEvaluator(AISettings())
    board = Board()
    assert evaluator.evaluate_position(board, RED) == pytest.approx(0.0)
    assert evaluator.evaluate_position(board, BLACK) == pytest.approx(0.0)


def test_evaluation_material_and_kings():
    evaluator = HeuristicEvaluator(AISettings())
    man = make_board((RED, 7, 1), (BLACK, 0, 6))
    king = make_board((RED, 7, 1, True), (BLACK, 0, 6))
    assert evaluator.evaluate_position(king, RED) - evaluator.evaluate_position(man, RED) == pytest.approx(60.0)
    extra = make_board((RED, 7, 1), (RED, 7, 5), (BLACK, 0, 6))
    assert evaluator.evaluate_position(extra, RED) > evaluator.evaluate_position(man, RED)
    assert evaluator.evaluate_position(extra, BLACK) < 0


def test_max_capture_chain():
    board = chain_position()
    p = board.get_piece(7, 1)
    q = board.get_piece(3, 7)
    p_move = next(m for m in get_valid_moves(board, p) if m.is_capture)
    q_move = next(m for m in get_valid_moves(board, q) if m.is_capture)
    assert max_capture_chain(board, p, p_move) == 2
    assert max_capture_chain(board, q, q_move) == 1
    quiet = next(m for m in get_valid_moves(board, board.get_piece(6, 4)) if not m.is_capture)
    assert max_capture_chain(board, board.get_piece(6, 4), quiet) == 0


def test_capture_chain_stops_at_promotion():
    # Crowning on (0,2) ends the turn even though the new king could jump again.
    board = make_board((RED, 2, 4), (BLACK, 1, 3), (BLACK, 1, 1))
    piece = board.get_piece(2, 4)
    move = next(m for m in get_valid_moves(board, piece) if m.capture == (1, 3))
    assert move.is_promotion
    assert max_capture_chain(board, piece, move) == 1


def test_simulate_turn_plays_whole_chain_on_a_clone():
    board = chain_position()
    before = snapshot(board)
    p = board.get_piece(7, 1)
    move = next(m for m in get_valid_moves(board, p) if m.is_capture)
    after = simulate_turn(board, p, move)
    assert snapshot(board) == before
    assert after.count_pieces(BLACK) == 1
    assert after.get_piece(3, 1) is not None
    assert after.get_piece(3, 1).piece_id == p.piece_id


def test_leads_to_immediate_capture():
    board = make_board((RED, 5, 3), (BLACK, 3, 5))
    piece = board.get_piece(5, 3)
    moves = {m.destination: m for m in get_valid_moves(board, piece)}
    assert leads_to_immediate_capture(board, piece, moves[(4, 4)])
    assert not leads_to_immediate_capture(board, piece, moves[(4, 2)])
    assert piece.position == (5, 3)


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_no_pieces_means_no_move(difficulty):
    board = make_board((BLACK, 0, 0))
    assert CheckersAI(difficulty, seed=1).get_best_move(board, RED) is None


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_blocked_side_means_no_move(difficulty):
    board = make_board((RED, 0, 0), (BLACK, 2, 2))
    assert not board.has_valid_moves(RED)
    assert CheckersAI(difficulty, seed=1).get_best_move(board, RED) is None


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
@pytest.mark.parametrize("seed", range(5))
def test_forced_capture_for_every_difficulty(difficulty, seed):
    board = make_board((RED, 5, 1), (RED, 7, 3), (RED, 5, 5), (BLACK, 4, 6), (BLACK, 0, 0))
    choice = CheckersAI(difficulty, seed=seed).get_best_move(board, RED)
    assert choice is not None
    assert choice.move.is_capture
    assert choice.piece.position == (5, 5)


@pytest.mark.parametrize("difficulty", ["medium", "hard"])
@pytest.mark.parametrize("seed", range(5))
def test_longer_chain_is_preferred(difficulty, seed):
    board = chain_position()
    choice = CheckersAI(difficulty, seed=seed).get_best_move(board, RED)
    assert choice.piece.position == (7, 1)
    assert choice.move.capture == (6, 2)


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_search_leaves_board_untouched(difficulty):
    board = Board()
    before = snapshot(board)
    ids = {p.piece_id: p for p in board.iter_pieces()}
    choice = CheckersAI(difficulty, seed=3).get_best_move(board, RED)
    assert snapshot(board) == before
    assert all(board.piece_by_id(i) is p for i, p in ids.items())
    # The chosen piece is the live one, not a clone
    assert board.get_piece(*choice.piece.position) is choice.piece
    legal = {(pair.piece.position, pair.move) for pair in collect_moves(board, RED)}
    assert (choice.piece.position, choice.move) in legal


def test_random_strategy_varies_with_seed():
    board = Board()
    picks = {CheckersAI("easy", seed=s).get_best_move(board, RED).descriptor for s in range(50)}
    assert len(picks) > 1


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_same_seed_same_choice(difficulty):
    board = Board()
    a = CheckersAI(difficulty, seed=11).get_best_move(board, BLACK)
    b = CheckersAI(difficulty, seed=11).get_best_move(board, BLACK)
    assert a.descriptor == b.descriptor


def test_greedy_avoids_hanging_piece():
    settings = AISettings(top_k=1)
    board = make_board((RED, 5, 3), (BLACK, 3, 5))
    for seed in range(5):
        choice = CheckersAI("medium", seed=seed, settings=settings).get_best_move(board, RED)
        assert choice.move.destination == (4, 2)


def test_minimax_blocked_side_scores_extremes():
    settings = AISettings()
    strategy = MinimaxStrategy(settings=settings)
    # Black's only man sits on its last row and cannot move
    board = make_board((RED, 5, 1), (BLACK, 7, 7))
    assert strategy.minimax(board, 2, False, RED) == settings.terminal_score
    assert strategy.minimax(board, 2, True, BLACK) == -settings.terminal_score


@pytest.mark.parametrize("seed", range(3))
def test_hard_does_not_hang_last_piece(seed):
    # (4,4) lets black jump the only red man
    board = make_board((RED, 5, 3), (BLACK, 3, 5))
    choice = CheckersAI("hard", seed=seed).get_best_move(board, RED)
    assert choice.move.destination == (4, 2)


def test_chain_move_only_uses_chain_piece():
    board = make_board((RED, 5, 3), (BLACK, 4, 2), (RED, 5, 7), (BLACK, 4, 6))
    piece = board.get_piece(5, 3)
    for difficulty in DIFFICULTIES:
        choice = CheckersAI(difficulty, seed=0).get_chain_move(board, piece)
        assert choice.piece is piece
        assert choice.move.is_capture
    lonely = make_board((RED, 5, 3), (BLACK, 0, 0))
    assert CheckersAI("hard").get_chain_move(lonely, lonely.get_piece(5, 3)) is None


def test_strategy_factory():
    assert isinstance(get_search_strategy("easy"), RandomStrategy)
    assert isinstance(get_search_strategy("medium"), GreedyStrategy)
    assert isinstance(get_search_strategy("hard"), MinimaxStrategy)
    with pytest.raises(ValueError):
        get_search_strategy("nightmare")
    with pytest.raises(ValueError):
        CheckersAI("nightmare")


def test_get_engine_uses_difficulty():
    ai = get_engine("hard", seed=0)
    assert isinstance(ai.strategy, MinimaxStrategy)
    assert ai.difficulty == "hard"


def test_hard_picks_randomly_within_tolerance():
    # (4,2) ends two points ahead of (4,0), well inside the default tolerance
    board = make_board((RED, 5, 1), (BLACK, 0, 0))
    picks = {CheckersAI("hard", seed=s).get_best_move(board, RED).move.destination for s in range(30)}
    assert picks == {(4, 0), (4, 2)}

    strict = AISettings(score_tolerance=0)
    for seed in range(5):
        choice = CheckersAI("hard", seed=seed, settings=strict).get_best_move(board, RED)
        assert choice.move.destination == (4, 2)
