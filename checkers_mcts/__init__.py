"""Checkers against a time-bounded Monte Carlo Tree Search.

Usage examples:
    from checkers_mcts import initial_position, legal_moves, Color
    from checkers_mcts import request_move, GameSession
"""
from __future__ import annotations

# Types
from .types import Cell, Color, Move, Outcome, OutcomeKind, PieceInfo, Position, Square

# Errors
from .errors import CheckersError, NoLegalMoves, OutOfBounds, RuleViolation

# Rules engine
from .engine import (
    NO_PROGRESS_LIMIT,
    initial_position,
    count_pieces,
    apply_move,
    next_side,
    terminal_result,
    parse_move,
    format_move,
    legal_moves,
    captures_for,
    simple_moves_for,
    has_further_capture,
    moves_for_turn,
    movable_squares,
)
from .moves import MoveGenerator, MoveValidator

# Search engine
from .node import Node
from .search import MonteCarloSearch, SearchStats, SearchStrategy, get_search_strategy, request_move

# Turn controller
from .controller import GameSession, validate_and_apply

__version__ = "1.0.0"
