"""
Turn management for a game between a human and the search engine.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .config import RulesSettings, get_rules_settings
from .engine import apply_move, initial_position, moves_for_turn, next_side, terminal_result
from .errors import RuleViolation
from .moves import MoveValidator
from .search import SearchStrategy, get_search_strategy
from .types import Color, Move, Outcome, Position, Square

logger = logging.getLogger(__name__)

_VALIDATOR = MoveValidator()


def validate_and_apply(position: Position, side: Color, move: Move,
                       chain_square: Optional[Square] = None) -> Position:
    """Apply ``move`` for ``side`` if it is legal, else raise RuleViolation / OutOfBounds."""
    _VALIDATOR.validate(position, side, move, chain_square)
    return apply_move(position, move)


@dataclass(frozen=True)
class _Snapshot:
    position: Position
    side_to_move: Color
    plies_since_capture: int
    chain_square: Optional[Square]
    last_move: Optional[Move]


class GameSession:
    """Owns one game: board, turn, no-progress counter, chain lock and history."""

    def __init__(self, human_color: Color = Color.WHITE,
                 strategy: Optional[SearchStrategy] = None,
                 position: Optional[Position] = None,
                 side_to_move: Color = Color.WHITE,
                 rules: Optional[RulesSettings] = None,
                 budget_seconds: Optional[float] = None) -> None:
        self.human_color = human_color
        self.strategy: SearchStrategy = strategy or get_search_strategy()
        self.rules: RulesSettings = rules or get_rules_settings()
        self.budget_seconds = budget_seconds
        self.position: Position = position if position is not None else initial_position()
        self.side_to_move: Color = side_to_move
        self.plies_since_capture: int = 0
        # Piece that captured and must capture again before the turn ends
        self.chain_square: Optional[Square] = None
        self.last_move: Optional[Move] = None
        self.history: List[_Snapshot] = []

    @property
    def engine_color(self) -> Color:
        return self.human_color.opponent

    @property
    def outcome(self) -> Outcome:
        return terminal_result(self.position, self.side_to_move, self.plies_since_capture,
                               self.rules.no_progress_limit)

    @property
    def is_over(self) -> bool:
        return self.outcome.is_over

    def is_human_turn(self) -> bool:
        return self.side_to_move is self.human_color

    def legal_moves(self) -> List[Move]:
        return moves_for_turn(self.position, self.side_to_move, self.chain_square)

    def movable_squares(self) -> List[Square]:
        """Squares the side to move may pick a piece up from."""
        seen: List[Square] = []
        for m in self.legal_moves():
            if m.start not in seen:
                seen.append(m.start)
        return seen

    def play_human_move(self, move: Move) -> Position:
        if not self.is_human_turn():
            raise RuleViolation(RuleViolation.WRONG_TURN,
                                context={"side_to_move": str(self.side_to_move)})
        try:
            return self._play(move)
        except RuleViolation as e:
            logger.warning("Rejected move %s: %s", move, e)
            raise

    def play_engine_move(self) -> Move:
        """Ask the strategy for a move for the side to move and play it."""
        if self.is_over:
            raise RuleViolation(RuleViolation.GAME_OVER)
        move = self.strategy.search(self.position, self.side_to_move, self.plies_since_capture,
                                    self.budget_seconds, self.chain_square)
        self._play(move)
        return move

    def undo(self) -> bool:
        """Take back the last ply; False if there is nothing to undo."""
        if not self.history:
            return False
        snap = self.history.pop()
        self.position = snap.position
        self.side_to_move = snap.side_to_move
        self.plies_since_capture = snap.plies_since_capture
        self.chain_square = snap.chain_square
        self.last_move = snap.last_move
        return True

    def result_text(self) -> str:
        """End-of-game text from the human's point of view, empty while ongoing."""
        outcome = self.outcome
        if not outcome.is_over:
            return ""
        if outcome.is_draw:
            return "DRAW"
        return "WIN" if outcome.is_win_for(self.human_color) else "LOSS"

    def _play(self, move: Move) -> Position:
        if self.is_over:
            raise RuleViolation(RuleViolation.GAME_OVER)
        side = self.side_to_move
        new_position = validate_and_apply(self.position, side, move, self.chain_square)
        self.history.append(_Snapshot(self.position, side, self.plies_since_capture,
                                      self.chain_square, self.last_move))

        self.position = new_position
        self.plies_since_capture = 0 if move.is_capture else self.plies_since_capture + 1
        self.side_to_move = next_side(new_position, move, side)
        self.chain_square = move.end if self.side_to_move is side else None
        self.last_move = move
        logger.debug("%s played %s%s", side, move,
                     " (must continue capturing)" if self.chain_square else "")
        return new_position
