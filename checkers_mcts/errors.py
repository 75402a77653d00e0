"""
Exception hierarchy for the checkers engine.

Usage:
    from checkers_mcts.errors import RuleViolation

    try:
        position = validate_and_apply(position, side, move)
    except RuleViolation as e:
        logger.warning("Rejected move %s: %s", move, e.reason)
"""
from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "CheckersError",
    "RuleViolation",
    "OutOfBounds",
    "NoLegalMoves",
]


class CheckersError(Exception):
    """Base exception for all checkers engine errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra details for logs
    """

    code: str = "CHECKERS_ERROR"

    def __init__(self, message: str = "", context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message or self.__class__.__doc__ or self.code
        self.context: Dict[str, Any] = dict(context or {})
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({details})"
        return self.message


class RuleViolation(CheckersError, ValueError):
    """Illegal move attempted."""

    code = "RULE_VIOLATION"

    # Reasons a move can be rejected
    EMPTY_SQUARE = "empty_square"
    WRONG_COLOR = "wrong_color"
    WRONG_TURN = "wrong_turn"
    OCCUPIED = "occupied"
    NOT_DIAGONAL = "not_diagonal"
    WRONG_DIRECTION = "wrong_direction"
    NO_CAPTURE_TARGET = "no_capture_target"
    CAPTURE_REQUIRED = "capture_required"
    CHAIN_CAPTURE_REQUIRED = "chain_capture_required"
    GAME_OVER = "game_over"
    OUT_OF_BOUNDS = "out_of_bounds"

    def __init__(self, reason: str, message: str = "",
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.reason = reason
        super().__init__(message or reason.replace("_", " "), context)


class OutOfBounds(RuleViolation):
    """Coordinate outside 0-7."""

    code = "OUT_OF_BOUNDS"

    def __init__(self, square: Any, message: str = "") -> None:
        self.square = square
        super().__init__(RuleViolation.OUT_OF_BOUNDS,
                         message or f"square {square} is off the board",
                         {"square": square})


class NoLegalMoves(CheckersError, RuntimeError):
    """Search requested for a side that has no legal move.

    Callers are expected to check ``terminal_result`` before asking for a move.
    """

    code = "NO_LEGAL_MOVES"
