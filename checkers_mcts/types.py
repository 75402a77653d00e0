"""
Type definitions for the checkers rules and search engines.

This module provides:
- Color and piece-code constants shared by every layer
- Immutable dataclasses for cells, moves, positions and outcomes
- Small helpers for square arithmetic
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple

import numpy as np

# Basic type aliases
Square = Tuple[int, int]  # (x, y): x is the file, y the rank

BOARD_SIZE: int = 8

# Signed piece codes: positive for White, negative for Black
EMPTY: int = 0
WHITE_MAN: int = 1
WHITE_KING: int = 2
BLACK_MAN: int = -1
BLACK_KING: int = -2

DIAGONALS: Tuple[Tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def in_bounds(square: Square) -> bool:
    x, y = square
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


class Color(IntEnum):
    """Piece color. White starts on ranks 0-2 and moves toward rank 7."""

    WHITE = 1
    BLACK = -1

    @property
    def opponent(self) -> "Color":
        return Color(-self.value)

    @property
    def forward(self) -> int:
        """Rank direction followed by men of this color."""
        return int(self.value)

    @property
    def promotion_rank(self) -> int:
        return BOARD_SIZE - 1 if self is Color.WHITE else 0

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Cell:
    """A piece standing on a square."""

    color: Color
    is_king: bool = False

    @property
    def code(self) -> int:
        return int(self.color) * (2 if self.is_king else 1)

    @classmethod
    def from_code(cls, code: int) -> Optional["Cell"]:
        if code == EMPTY:
            return None
        return cls(Color.WHITE if code > 0 else Color.BLACK, abs(int(code)) == 2)

    def symbol(self) -> str:
        ch = "w" if self.color is Color.WHITE else "b"
        return ch.upper() if self.is_king else ch


@dataclass(frozen=True)
class Move:
    """A single step or single jump from ``start`` to ``end``."""

    start: Square
    end: Square

    @property
    def dx(self) -> int:
        return self.end[0] - self.start[0]

    @property
    def dy(self) -> int:
        return self.end[1] - self.start[1]

    @property
    def is_capture(self) -> bool:
        return abs(self.dx) == 2 and abs(self.dy) == 2

    @property
    def is_simple(self) -> bool:
        return abs(self.dx) == 1 and abs(self.dy) == 1

    @property
    def captured_square(self) -> Optional[Square]:
        """Midpoint of a capture, None for any other move."""
        if not self.is_capture:
            return None
        return ((self.start[0] + self.end[0]) // 2, (self.start[1] + self.end[1]) // 2)

    def reversed(self) -> "Move":
        return Move(self.end, self.start)

    def __str__(self) -> str:
        sep = ":" if self.is_capture else "-"
        return f"{self.start[0]},{self.start[1]}{sep}{self.end[0]},{self.end[1]}"


class PieceInfo(NamedTuple):
    """Where a piece stands and what it is, as recorded on search nodes."""

    square: Square
    color: Color
    is_king: bool


@dataclass(frozen=True, eq=False)
class Position:
    """
    Immutable 8x8 board, indexed ``grid[x, y]``.

    The grid holds signed piece codes (see WHITE_MAN etc.). A private copy is
    taken on construction and marked read-only, so a Position can be shared
    freely between tree nodes.
    """

    grid: np.ndarray

    def __post_init__(self) -> None:
        grid = np.array(self.grid, dtype=np.int8)
        if grid.shape != (BOARD_SIZE, BOARD_SIZE):
            raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}, got shape {grid.shape}")
        if np.any(np.abs(grid) > 2):
            raise ValueError("Board contains an unknown piece code")
        grid.setflags(write=False)
        object.__setattr__(self, "grid", grid)

    @classmethod
    def empty(cls) -> "Position":
        return cls(np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8))

    @classmethod
    def from_pieces(cls, pieces: Mapping[Square, Cell]) -> "Position":
        grid = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        for square, cell in pieces.items():
            if not in_bounds(square):
                raise ValueError(f"Square {square} is off the board")
            grid[square] = cell.code
        return cls(grid)

    def piece_at(self, square: Square) -> int:
        return int(self.grid[square])

    def cell_at(self, square: Square) -> Optional[Cell]:
        return Cell.from_code(self.piece_at(square))

    def squares(self, color: Optional[Color] = None) -> Iterator[Square]:
        """Occupied squares in scan order (x, then y), optionally filtered by color."""
        for x in range(BOARD_SIZE):
            for y in range(BOARD_SIZE):
                v = int(self.grid[x, y])
                if v == EMPTY:
                    continue
                if color is None or (v > 0) == (color is Color.WHITE):
                    yield (x, y)

    def count(self, color: Color) -> int:
        if color is Color.WHITE:
            return int(np.count_nonzero(self.grid > 0))
        return int(np.count_nonzero(self.grid < 0))

    def pieces(self) -> Dict[Square, Cell]:
        return {sq: Cell.from_code(self.piece_at(sq)) for sq in self.squares()}  # type: ignore[misc]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    def __hash__(self) -> int:
        return hash(self.grid.tobytes())

    def __str__(self) -> str:
        rows: List[str] = []
        for y in range(BOARD_SIZE - 1, -1, -1):
            cells = []
            for x in range(BOARD_SIZE):
                cell = self.cell_at((x, y))
                cells.append(cell.symbol() if cell else ".")
            rows.append(f"{y} " + " ".join(cells))
        rows.append("  " + " ".join(str(x) for x in range(BOARD_SIZE)))
        return "\n".join(rows)


class OutcomeKind(Enum):
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    """Result of a position: still ongoing, won by ``winner``, or drawn."""

    kind: OutcomeKind
    winner: Optional[Color] = None

    @classmethod
    def ongoing(cls) -> "Outcome":
        return cls(OutcomeKind.ONGOING)

    @classmethod
    def draw(cls) -> "Outcome":
        return cls(OutcomeKind.DRAW)

    @classmethod
    def win(cls, color: Color) -> "Outcome":
        return cls(OutcomeKind.WIN, color)

    @property
    def is_over(self) -> bool:
        return self.kind is not OutcomeKind.ONGOING

    @property
    def is_draw(self) -> bool:
        return self.kind is OutcomeKind.DRAW

    def is_win_for(self, color: Color) -> bool:
        return self.kind is OutcomeKind.WIN and self.winner is color

    def __str__(self) -> str:
        if self.kind is OutcomeKind.WIN:
            return f"{self.winner} wins"
        return self.kind.value
