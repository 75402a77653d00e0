from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .errors import OutOfBounds, RuleViolation
from .types import (
    DIAGONALS,
    EMPTY,
    Color,
    Move,
    Position,
    Square,
    in_bounds,
)

# -----------------------------
# Direction helpers
# -----------------------------


def _check_square(square: Square) -> None:
    if (not isinstance(square, tuple) or len(square) != 2
            or not all(isinstance(v, int) for v in square) or not in_bounds(square)):
        raise OutOfBounds(square)


def _directions(side: Color, is_king: bool) -> Sequence[Tuple[int, int]]:
    if is_king:
        return DIAGONALS
    return [d for d in DIAGONALS if d[1] == side.forward]


def _own_piece(position: Position, side: Color, square: Square) -> Optional[bool]:
    """King flag of the piece of ``side`` on ``square``, None if there is none."""
    v = position.piece_at(square)
    if v == EMPTY or (v > 0) != (side is Color.WHITE):
        return None
    return abs(v) == 2


class MoveGenerator:
    """Generates legal moves for a given position and side.

    Captures are single jumps; a piece that can keep jumping after a capture
    does so on the next ply (see ``has_further_capture``). The mandatory
    capture rule always applies.
    """

    def simple_moves_for(self, position: Position, side: Color, square: Square) -> List[Move]:
        _check_square(square)
        is_king = _own_piece(position, side, square)
        if is_king is None:
            return []
        x, y = square
        moves: List[Move] = []
        for dx, dy in _directions(side, is_king):
            dest = (x + dx, y + dy)
            if in_bounds(dest) and position.piece_at(dest) == EMPTY:
                moves.append(Move(square, dest))
        return moves

    def captures_for(self, position: Position, side: Color, square: Square) -> List[Move]:
        _check_square(square)
        is_king = _own_piece(position, side, square)
        if is_king is None:
            return []
        x, y = square
        moves: List[Move] = []
        for dx, dy in _directions(side, is_king):
            mid = (x + dx, y + dy)
            dest = (x + 2 * dx, y + 2 * dy)
            if not in_bounds(dest):
                continue
            if position.piece_at(mid) * int(side) < 0 and position.piece_at(dest) == EMPTY:
                moves.append(Move(square, dest))
        return moves

    def has_further_capture(self, position: Position, side: Color, square: Square) -> bool:
        return bool(self.captures_for(position, side, square))

    def legal_moves(self, position: Position, side: Color) -> List[Move]:
        captures: List[Move] = []
        quiets: List[Move] = []
        for sq in position.squares(side):
            caps = self.captures_for(position, side, sq)
            if caps:
                captures.extend(caps)
            elif not captures:
                quiets.extend(self.simple_moves_for(position, side, sq))
        return captures if captures else quiets

    def moves_for_turn(self, position: Position, side: Color,
                       chain_square: Optional[Square] = None) -> List[Move]:
        """Legal moves for ``side``, restricted to the jumping piece mid-chain."""
        if chain_square is not None:
            return self.captures_for(position, side, chain_square)
        return self.legal_moves(position, side)

    def movable_squares(self, position: Position, side: Color) -> List[Square]:
        """Squares whose piece may be picked up this ply."""
        seen: List[Square] = []
        for m in self.legal_moves(position, side):
            if m.start not in seen:
                seen.append(m.start)
        return seen


class MoveValidator:
    """Validates moves against the rules and reports why a move is illegal."""

    def __init__(self, generator: Optional[MoveGenerator] = None) -> None:
        self.generator = generator or MoveGenerator()

    def validate(self, position: Position, side: Color, move: Move,
                 chain_square: Optional[Square] = None) -> None:
        """Raise RuleViolation (or OutOfBounds) unless ``move`` is legal for ``side``."""
        _check_square(move.start)
        _check_square(move.end)

        is_king = _own_piece(position, side, move.start)
        if is_king is None:
            if position.piece_at(move.start) == EMPTY:
                raise RuleViolation(RuleViolation.EMPTY_SQUARE, context={"square": move.start})
            raise RuleViolation(RuleViolation.WRONG_COLOR, context={"square": move.start})
        if position.piece_at(move.end) != EMPTY:
            raise RuleViolation(RuleViolation.OCCUPIED, context={"square": move.end})
        if not (move.is_simple or move.is_capture):
            raise RuleViolation(RuleViolation.NOT_DIAGONAL, context={"move": str(move)})
        if not is_king and (move.dy > 0) != (side.forward > 0):
            raise RuleViolation(RuleViolation.WRONG_DIRECTION, context={"move": str(move)})

        if chain_square is not None and (move.start != chain_square or not move.is_capture):
            raise RuleViolation(RuleViolation.CHAIN_CAPTURE_REQUIRED,
                                context={"square": chain_square})
        if move.is_capture:
            mid = move.captured_square
            if position.piece_at(mid) * int(side) >= 0:  # type: ignore[arg-type]
                raise RuleViolation(RuleViolation.NO_CAPTURE_TARGET, context={"square": mid})
        elif any(m.is_capture for m in self.generator.legal_moves(position, side)):
            raise RuleViolation(RuleViolation.CAPTURE_REQUIRED, context={"move": str(move)})

    def is_legal(self, position: Position, side: Color, move: Move,
                 chain_square: Optional[Square] = None) -> bool:
        try:
            self.validate(position, side, move, chain_square)
        except RuleViolation:
            return False
        return True


# Convenience functional API

_GENERATOR = MoveGenerator()


def legal_moves(position: Position, side: Color) -> List[Move]:
    return _GENERATOR.legal_moves(position, side)


def captures_for(position: Position, side: Color, cell: Square) -> List[Move]:
    return _GENERATOR.captures_for(position, side, cell)


def simple_moves_for(position: Position, side: Color, cell: Square) -> List[Move]:
    return _GENERATOR.simple_moves_for(position, side, cell)


def has_further_capture(position: Position, side: Color, cell: Square) -> bool:
    return _GENERATOR.has_further_capture(position, side, cell)


def moves_for_turn(position: Position, side: Color,
                   chain_square: Optional[Square] = None) -> List[Move]:
    return _GENERATOR.moves_for_turn(position, side, chain_square)


def movable_squares(position: Position, side: Color) -> List[Square]:
    return _GENERATOR.movable_squares(position, side)


__all__ = [
    "MoveGenerator",
    "MoveValidator",
    "legal_moves",
    "captures_for",
    "simple_moves_for",
    "has_further_capture",
    "moves_for_turn",
    "movable_squares",
]
