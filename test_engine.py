import numpy as np
import pytest

from checkers_mcts.engine import (
    NO_PROGRESS_LIMIT,
    apply_move,
    count_pieces,
    format_move,
    initial_position,
    legal_moves,
    next_side,
    parse_move,
    terminal_result,
)
from checkers_mcts.errors import OutOfBounds, RuleViolation
from checkers_mcts.types import Cell, Color, Move, Outcome, OutcomeKind, Position

W = Cell(Color.WHITE)
WK = Cell(Color.WHITE, is_king=True)
B = Cell(Color.BLACK)


def make(*placements):
    return Position.from_pieces({sq: cell for sq, cell in placements})


def test_initial_position_layout():
    pos = initial_position()
    assert count_pieces(pos) == (12, 12, 0, 0)
    for sq in pos.squares():
        assert (sq[0] + sq[1]) % 2 == 0
    assert all(sq[1] <= 2 for sq in pos.squares(Color.WHITE))
    assert all(sq[1] >= 5 for sq in pos.squares(Color.BLACK))


def test_position_is_immutable_and_hashable():
    pos = initial_position()
    with pytest.raises(ValueError):
        pos.grid[0, 0] = 1
    assert pos == initial_position()
    assert hash(pos) == hash(initial_position())
    assert pos != apply_move(pos, legal_moves(pos, Color.WHITE)[0])


def test_position_rejects_bad_shapes():
    with pytest.raises(ValueError):
        Position(np.zeros((7, 8), dtype=np.int8))
    with pytest.raises(ValueError):
        Position.from_pieces({(8, 8): W})


def test_white_promotes_on_rank_seven():
    pos = make(((1, 6), W), ((5, 5), B))
    after = apply_move(pos, Move((1, 6), (2, 7)))
    assert after.cell_at((2, 7)) == WK


def test_black_promotes_on_rank_zero():
    pos = make(((1, 1), B), ((5, 5), W))
    after = apply_move(pos, Move((1, 1), (0, 0)))
    assert after.cell_at((0, 0)) == Cell(Color.BLACK, is_king=True)


def test_promotion_by_capture():
    pos = make(((2, 5), W), ((3, 6), B))
    after = apply_move(pos, Move((2, 5), (4, 7)))
    assert after.cell_at((4, 7)) == WK
    assert after.cell_at((3, 6)) is None


def test_king_is_never_demoted():
    pos = make(((1, 1), WK), ((5, 5), B))
    after = apply_move(pos, Move((1, 1), (0, 0)))
    assert after.cell_at((0, 0)) == WK


def test_apply_move_leaves_input_untouched():
    pos = make(((2, 2), W), ((3, 3), B))
    before = pos.grid.copy()
    apply_move(pos, Move((2, 2), (4, 4)))
    assert np.array_equal(pos.grid, before)


def test_apply_move_from_empty_square_fails():
    pos = make(((2, 2), W))
    with pytest.raises(RuleViolation):
        apply_move(pos, Move((4, 4), (5, 5)))
    with pytest.raises(OutOfBounds):
        apply_move(pos, Move((2, 2), (9, 9)))


def test_next_side_keeps_turn_for_chain_capture():
    pos = make(((2, 2), W), ((3, 3), B), ((5, 5), B))
    move = Move((2, 2), (4, 4))
    after = apply_move(pos, move)
    assert next_side(after, move, Color.WHITE) is Color.WHITE

    single = make(((2, 2), W), ((3, 3), B), ((7, 7), B))
    after = apply_move(single, move)
    assert next_side(after, move, Color.WHITE) is Color.BLACK


def test_next_side_flips_after_simple_move_even_if_capture_appears():
    # The moved man can jump next ply, but a simple step never extends the turn
    pos = make(((2, 2), W), ((4, 4), B))
    move = Move((2, 2), (3, 3))
    after = apply_move(pos, move)
    assert next_side(after, move, Color.WHITE) is Color.BLACK


def test_win_when_opponent_has_no_pieces():
    pos = make(((4, 4), W))
    assert terminal_result(pos, Color.BLACK, 0) == Outcome.win(Color.WHITE)
    pos = make(((4, 4), B))
    assert terminal_result(pos, Color.WHITE, 0) == Outcome.win(Color.BLACK)


def test_draw_when_side_to_move_is_blocked():
    pos = make(((0, 6), W), ((1, 7), B))
    assert terminal_result(pos, Color.WHITE, 0).kind is OutcomeKind.DRAW
    assert terminal_result(pos, Color.BLACK, 0).kind is OutcomeKind.ONGOING


def test_draw_after_no_progress_limit():
    pos = initial_position()
    assert terminal_result(pos, Color.WHITE, NO_PROGRESS_LIMIT) == Outcome.ongoing()
    assert terminal_result(pos, Color.WHITE, NO_PROGRESS_LIMIT + 1) == Outcome.draw()
    assert terminal_result(pos, Color.WHITE, 11, no_progress_limit=10).is_draw


def test_simple_move_is_not_reversible():
    pos = initial_position()
    move = Move((2, 2), (3, 3))
    after = apply_move(pos, move)
    assert move.reversed() not in legal_moves(after, Color.WHITE)
    assert move.reversed() not in legal_moves(after, Color.BLACK)


def test_parse_and_format_moves():
    assert parse_move("2,2-3,3") == Move((2, 2), (3, 3))
    assert parse_move(" 2, 2 : 4, 4 ") == Move((2, 2), (4, 4))
    assert parse_move("2,2x4,4") == Move((2, 2), (4, 4))
    assert parse_move("2,2") is None
    assert parse_move("a,b-c,d") is None
    assert format_move(Move((2, 2), (4, 4))) == "2,2:4,4"
    assert format_move(Move((2, 2), (3, 3))) == "2,2-3,3"
    assert parse_move(format_move(Move((5, 5), (6, 4)))) == Move((5, 5), (6, 4))
