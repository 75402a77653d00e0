"""
Board-level rules: setup, applying moves, terminal detection and move notation.

Move generation lives in ``checkers_mcts.moves`` and is re-exported here so
callers can import the whole rules API from one place:

    from checkers_mcts.engine import initial_position, legal_moves, apply_move
"""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .errors import OutOfBounds, RuleViolation
from .moves import (
    captures_for,
    has_further_capture,
    legal_moves,
    movable_squares,
    moves_for_turn,
    simple_moves_for,
)
from .types import (
    BLACK_KING,
    BLACK_MAN,
    BOARD_SIZE,
    EMPTY,
    WHITE_KING,
    WHITE_MAN,
    Color,
    Move,
    Outcome,
    Position,
    Square,
    in_bounds,
)

__all__ = [
    "NO_PROGRESS_LIMIT",
    "initial_position",
    "count_pieces",
    "apply_move",
    "next_side",
    "terminal_result",
    "parse_move",
    "format_move",
    "legal_moves",
    "captures_for",
    "simple_moves_for",
    "has_further_capture",
    "moves_for_turn",
    "movable_squares",
]

# Plies without a capture after which the game is drawn
NO_PROGRESS_LIMIT: int = 40


# ============================
# Board setup and utilities
# ============================
def initial_position() -> Position:
    """Initial position: White men on ranks 0..2, Black men on ranks 5..7, dark squares only."""
    grid = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for x in range(BOARD_SIZE):
        for y in range(BOARD_SIZE):
            if (x + y) % 2:
                continue
            if y <= 2:
                grid[x, y] = WHITE_MAN
            elif y >= 5:
                grid[x, y] = BLACK_MAN
    return Position(grid)


def count_pieces(position: Position) -> Tuple[int, int, int, int]:
    """Count pieces of each type on the board.

    Returns:
        Tuple of (white_men, black_men, white_kings, black_kings)
    """
    g = position.grid
    return (
        int(np.count_nonzero(g == WHITE_MAN)),
        int(np.count_nonzero(g == BLACK_MAN)),
        int(np.count_nonzero(g == WHITE_KING)),
        int(np.count_nonzero(g == BLACK_KING)),
    )


# ============================
# Applying moves
# ============================
def apply_move(position: Position, move: Move) -> Position:
    """Return the position after ``move``: piece relocated, jumped piece removed, promotion applied.

    No legality check is made beyond the start square holding a piece; use
    ``MoveValidator`` or ``validate_and_apply`` for untrusted input.
    """
    for sq in (move.start, move.end):
        if not in_bounds(sq):
            raise OutOfBounds(sq)
    grid = position.grid.copy()
    piece = int(grid[move.start])
    if piece == EMPTY:
        raise RuleViolation(RuleViolation.EMPTY_SQUARE, context={"square": move.start})

    grid[move.start] = EMPTY
    mid = move.captured_square
    if mid is not None:
        grid[mid] = EMPTY

    # Promotion on the landing rank
    color = Color.WHITE if piece > 0 else Color.BLACK
    if move.end[1] == color.promotion_rank:
        piece = WHITE_KING if color is Color.WHITE else BLACK_KING
    grid[move.end] = piece
    return Position(grid)


def next_side(position: Position, move: Move, side: Color) -> Color:
    """Side to move after ``side`` played ``move``; ``position`` is the board after the move.

    A piece that has just captured and can capture again keeps the turn.
    """
    if move.is_capture and has_further_capture(position, side, move.end):
        return side
    return side.opponent


def terminal_result(position: Position, side_to_move: Color, plies_since_capture: int,
                    no_progress_limit: int = NO_PROGRESS_LIMIT) -> Outcome:
    """Win for a color whose opponent has no pieces left, draw on stalemate or no progress."""
    white = position.count(Color.WHITE)
    black = position.count(Color.BLACK)
    if white == 0 and black == 0:
        # Cannot arise from play; treat as a draw rather than crowning either side
        return Outcome.draw()
    if black == 0:
        return Outcome.win(Color.WHITE)
    if white == 0:
        return Outcome.win(Color.BLACK)
    if plies_since_capture > no_progress_limit:
        return Outcome.draw()
    if not legal_moves(position, side_to_move):
        return Outcome.draw()
    return Outcome.ongoing()


# ============================
# Move notation
# ============================
def format_move(move: Move) -> str:
    """Convert a move to ``x,y-x,y`` notation (``:`` separates the squares of a capture)."""
    return str(move)


def _parse_square(text: str) -> Optional[Square]:
    parts = [p for p in text.replace(" ", "").split(",") if p]
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def parse_move(s: str) -> Optional[Move]:
    """Parse ``x,y-x,y`` or ``x,y:x,y`` into a Move; None if the text is malformed.

    Squares are not range-checked here so that validation can report
    OutOfBounds for them.
    """
    s = s.strip().lower().replace("x", ":").replace(":", "-")
    halves = [h for h in s.split("-") if h.strip()]
    if len(halves) != 2:
        return None
    start = _parse_square(halves[0])
    end = _parse_square(halves[1])
    if start is None or end is None:
        return None
    return Move(start, end)
