"""
Time-bounded Monte Carlo Tree Search over the checkers rules engine.

One search builds a fresh tree from the position on the board, then repeats
select -> expand -> simulate -> backpropagate until the wall-clock budget
(or the optional iteration cap) runs out, and answers with the most visited
root move. The tree is dropped when the search returns.
"""
from __future__ import annotations

import logging
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .config import RulesSettings, SearchSettings, get_rules_settings, get_search_settings
from .engine import apply_move, moves_for_turn, next_side, terminal_result
from .errors import NoLegalMoves
from .node import Node
from .types import Color, Move, Outcome, PieceInfo, Position, Square

logger = logging.getLogger(__name__)


@dataclass
class SearchStats:
    """Summary of one search, kept on the engine for callers and logs."""

    iterations: int = 0
    elapsed: float = 0.0
    # (move, visits, wins) per root child, in generation order
    root_children: List[Tuple[Move, int, int]] = field(default_factory=list)
    chosen: Optional[Move] = None


class SearchStrategy(ABC):
    """Abstract interface for move-choosing strategies."""

    @abstractmethod
    def search(self, position: Position, side: Color, plies_since_capture: int = 0,
               budget_seconds: Optional[float] = None,
               chain_square: Optional[Square] = None) -> Move:  # pragma: no cover
        raise NotImplementedError


class MonteCarloSearch(SearchStrategy):
    """Single-level MCTS with random rollouts.

    Selection only scores the root's direct children. Rollout nodes below the
    selected child are discarded on every backpropagation, so statistics only
    accumulate on the root's children.
    """

    def __init__(self, settings: Optional[SearchSettings] = None,
                 rules: Optional[RulesSettings] = None,
                 seed: Optional[int] = None,
                 clock: Callable[[], float] = time.monotonic) -> None:
        self.settings: SearchSettings = settings or get_search_settings()
        self.rules: RulesSettings = rules or get_rules_settings()
        self._rng = random.Random(seed if seed is not None else self.settings.seed)
        self._clock = clock
        self.last_stats: Optional[SearchStats] = None

    # -------------------------
    # Tree phases
    # -------------------------
    def build_tree(self, position: Position, side: Color, plies_since_capture: int = 0,
                   chain_square: Optional[Square] = None) -> Node:
        moves = moves_for_turn(position, side, chain_square)
        if not moves:
            raise NoLegalMoves(f"{side} has no legal move", {"side": str(side)})
        root = Node(position, side, plies_since_capture)
        for move in moves:
            self._make_child(root, move, visits=1, attach=True)
        return root

    def select(self, root: Node) -> Node:
        """Best root child by UCB1; the first one wins ties."""
        total = sum(child.visits for child in root.children)
        best: Optional[Node] = None
        best_score = -float("inf")
        for child in root.children:
            score = child.ucb_score(total, self.settings.exploration_weight)
            if score > best_score:
                best_score = score
                best = child
        if best is None:
            raise NoLegalMoves("Cannot select from a root without children")
        return best

    def expand(self, node: Node) -> Node:
        """Attach one child reached by a uniformly random legal move."""
        move = self._random_move(node)
        return self._make_child(node, move, visits=1, attach=True)

    def simulate(self, node: Node) -> List[Node]:
        """Random playout from ``node``; returns the path of nodes, terminal last."""
        path: List[Node] = [node]
        outcome = self.outcome(node)
        while not outcome.is_over:
            current = path[-1]
            path.append(self._make_child(current, self._random_move(current), visits=1, attach=False))
            outcome = self.outcome(path[-1])
        logger.debug("Rollout finished after %d plies: %s", len(path) - 1, outcome)
        return path

    def backpropagate(self, path: List[Node], searching_side: Color) -> Outcome:
        """Credit the rollout result to the selected root child and prune below it."""
        outcome = self.outcome(path[-1])
        while len(path) > 1:
            path.pop()
        first = path.pop()
        ancestor = first.parent
        if ancestor is None:
            raise RuntimeError("Rollout path is detached from the search tree")
        self._record(ancestor, outcome, searching_side)
        ancestor.clear_children()
        return outcome

    def finalize(self, root: Node) -> Move:
        """Most visited root child; the first one wins ties."""
        best: Optional[Node] = None
        for child in root.children:
            if best is None or child.visits > best.visits:
                best = child
        if best is None or best.move_from_parent is None:
            raise NoLegalMoves("Search tree has no root moves")
        return best.move_from_parent

    def outcome(self, node: Node) -> Outcome:
        return terminal_result(node.state, node.side_to_move, node.plies_since_capture,
                               self.rules.no_progress_limit)

    def run_iteration(self, root: Node) -> Outcome:
        selected = self.select(root)
        outcome = self.outcome(selected)
        if outcome.is_over:
            # Nothing to expand below a finished game; score the child directly.
            self._record(selected, outcome, root.side_to_move)
            return outcome
        expanded = self.expand(selected)
        path = self.simulate(expanded)
        return self.backpropagate(path, root.side_to_move)

    # -------------------------
    # Entry point
    # -------------------------
    def search(self, position: Position, side: Color, plies_since_capture: int = 0,
               budget_seconds: Optional[float] = None,
               chain_square: Optional[Square] = None) -> Move:
        budget = self.settings.budget_seconds if budget_seconds is None else float(budget_seconds)
        start = self._clock()
        root = self.build_tree(position, side, plies_since_capture, chain_square)
        stats = SearchStats()

        if len(root.children) == 1:
            logger.debug("Single legal move for %s, skipping search", side)
        else:
            logger.info("Starting search for %s: %d root moves, budget %.2fs",
                        side, len(root.children), budget)
            deadline = start + budget
            cap = self.settings.max_iterations
            while self._clock() < deadline and (cap is None or stats.iterations < cap):
                self.run_iteration(root)
                stats.iterations += 1

        move = self.finalize(root)
        stats.elapsed = self._clock() - start
        stats.root_children = [(c.move_from_parent, c.visits, c.wins)  # type: ignore[misc]
                               for c in root.children]
        stats.chosen = move
        self.last_stats = stats
        logger.info("Search for %s chose %s after %d iterations in %.2fs",
                    side, move, stats.iterations, stats.elapsed)
        for m, visits, wins in stats.root_children:
            logger.debug("  %s: visits=%d wins=%d", m, visits, wins)
        return move

    # -------------------------
    # Helpers
    # -------------------------
    def _random_move(self, node: Node) -> Move:
        moves = moves_for_turn(node.state, node.side_to_move, node.chain_square)
        return self._rng.choice(moves)

    def _make_child(self, parent: Node, move: Move, visits: int, attach: bool) -> Node:
        side = parent.side_to_move
        state = apply_move(parent.state, move)
        cell = state.cell_at(move.end)
        child = Node(
            state,
            next_side(state, move, side),
            0 if move.is_capture else parent.plies_since_capture + 1,
            parent=parent,
            move_from_parent=move,
            last_moved_piece=PieceInfo(move.end, cell.color, cell.is_king) if cell else None,
            visits=visits,
        )
        if attach:
            parent.add_child(child)
        return child

    @staticmethod
    def _record(node: Node, outcome: Outcome, searching_side: Color) -> None:
        node.visits += 1
        if outcome.is_win_for(searching_side):
            node.wins += 1


def get_search_strategy(seed: Optional[int] = None) -> SearchStrategy:
    """Factory for the default search strategy, configured from the global config."""
    return MonteCarloSearch(seed=seed)


def request_move(position: Position, side: Color, plies_since_capture: int = 0,
                 budget_seconds: Optional[float] = None, seed: Optional[int] = None,
                 chain_square: Optional[Square] = None,
                 settings: Optional[SearchSettings] = None,
                 rules: Optional[RulesSettings] = None) -> Move:
    """Blocking entry point: search ``position`` for ``side`` for up to ``budget_seconds``."""
    engine = MonteCarloSearch(settings=settings, rules=rules, seed=seed)
    return engine.search(position, side, plies_since_capture, budget_seconds, chain_square)


__all__ = [
    "SearchStats",
    "SearchStrategy",
    "MonteCarloSearch",
    "get_search_strategy",
    "request_move",
]
