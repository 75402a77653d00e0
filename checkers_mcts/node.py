from __future__ import annotations

import math
import weakref
from typing import List, Optional

from .types import Color, Move, PieceInfo, Position, Square


class Node:
    """A node in the Monte Carlo search tree.

    - state: the position this node represents.
    - side_to_move / plies_since_capture: turn bookkeeping for ``state``, so
      no global turn flag is needed while searching.
    - children: owned by this node; dropping the list drops the subtrees.
    - parent: weak back-reference, used for backpropagation only.
    - last_moved_piece: the piece that made ``move_from_parent``, after it moved.
    """

    def __init__(
        self,
        state: Position,
        side_to_move: Color,
        plies_since_capture: int = 0,
        parent: Optional[Node] = None,
        move_from_parent: Optional[Move] = None,
        last_moved_piece: Optional[PieceInfo] = None,
        visits: int = 0,
        wins: int = 0,
    ) -> None:
        self.state = state
        self.side_to_move = side_to_move
        self.plies_since_capture = plies_since_capture
        self.move_from_parent = move_from_parent
        self.last_moved_piece = last_moved_piece
        self.visits = visits
        self.wins = wins
        self.children: List[Node] = []
        self._parent = weakref.ref(parent) if parent is not None else None

    @property
    def parent(self) -> Optional[Node]:
        return self._parent() if self._parent is not None else None

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def chain_square(self) -> Optional[Square]:
        """Square of a piece that must keep jumping, if the last capture left one."""
        piece = self.last_moved_piece
        if (piece is None or self.move_from_parent is None
                or not self.move_from_parent.is_capture):
            return None
        return piece.square if piece.color is self.side_to_move else None

    @property
    def win_rate(self) -> float:
        if self.visits == 0:
            return 0.0
        return self.wins / self.visits

    def add_child(self, child: Node) -> Node:
        self.children.append(child)
        return child

    def clear_children(self) -> None:
        self.children = []

    def ucb_score(self, total_visits: int, exploration_weight: float = 1.0) -> float:
        """UCB1: win rate plus an exploration bonus for rarely visited nodes."""
        if self.visits == 0:
            return math.inf
        if total_visits <= 1:
            return self.win_rate
        return self.win_rate + exploration_weight * math.sqrt(math.log(total_visits) / self.visits)

    def __repr__(self) -> str:
        move = str(self.move_from_parent) if self.move_from_parent else "Root"
        return (f"Node(move={move}, side={self.side_to_move}, visits={self.visits}, "
                f"wins={self.wins}, children={len(self.children)})")
