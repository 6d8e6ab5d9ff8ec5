"""
Type definitions and protocols for the draughts engine.

This module provides:
- Color constants and helpers
- The Piece and Move value types shared by every other module
- Protocol definitions for the board interface used by move generation
- Type aliases for better code readability
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Protocol, Tuple

# Basic type aliases
Color = str  # "red" or "black"
Position = Tuple[int, int]  # (row, col) coordinates
PieceId = int

RED: Color = "red"
BLACK: Color = "black"
VALID_COLORS = (RED, BLACK)

BOARD_SIZE = 8
START_ROWS = 3


def opponent(color: Color) -> Color:
    """Return the other side's color."""
    if color == RED:
        return BLACK
    if color == BLACK:
        return RED
    raise ValueError(f"Unknown color: {color!r}")


def is_valid_color(color: object) -> bool:
    """Check if a value is a valid color identifier."""
    return color in VALID_COLORS


def promotion_row(color: Color, size: int = BOARD_SIZE) -> int:
    """Row on which a man of the given color is crowned."""
    return 0 if color == RED else size - 1


def forward_step(color: Color) -> int:
    """Row delta of a man's forward move: red climbs toward row 0."""
    return -1 if color == RED else 1


class Piece:
    """A checker on the board.

    Color and id are fixed at creation. Coordinates are owned by the board
    that holds the piece and only change through ``Board.move_piece``.
    """

    __slots__ = ("_color", "_piece_id", "row", "col", "king")

    def __init__(self, color: Color, row: int, col: int,
                 king: bool = False, piece_id: PieceId = -1) -> None:
        if not is_valid_color(color):
            raise ValueError(f"Unknown color: {color!r}")
        self._color: Color = color
        self._piece_id: PieceId = piece_id
        self.row: int = row
        self.col: int = col
        self.king: bool = bool(king)

    @property
    def color(self) -> Color:
        return self._color

    @property
    def piece_id(self) -> PieceId:
        return self._piece_id

    @property
    def position(self) -> Position:
        return (self.row, self.col)

    def make_king(self) -> None:
        self.king = True

    def __repr__(self) -> str:
        kind = "K" if self.king else "m"
        return f"Piece({self._color}{kind}#{self._piece_id} @ {self.row},{self.col})"


@dataclass(frozen=True)
class Move:
    """A single destination for one piece, optionally capturing one enemy."""

    row: int
    col: int
    capture: Optional[Position] = None
    is_promotion: bool = False

    @property
    def destination(self) -> Position:
        return (self.row, self.col)

    @property
    def is_capture(self) -> bool:
        return self.capture is not None


class MoveDescriptor(NamedTuple):
    """Board-agnostic move shape exchanged with the outside world."""

    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @classmethod
    def of(cls, piece: Piece, move: Move) -> "MoveDescriptor":
        return cls(piece.row, piece.col, move.row, move.col)

    def __str__(self) -> str:
        return f"{self.from_row},{self.from_col}-{self.to_row},{self.to_col}"


@dataclass
class ScoredMove:
    """A (piece, move) pair, with the score a strategy assigned to it."""

    piece: Piece
    move: Move
    score: float = 0.0

    @property
    def descriptor(self) -> MoveDescriptor:
        return MoveDescriptor.of(self.piece, self.move)


class BoardProtocol(Protocol):
    """Minimal board view needed by move generation and search."""

    size: int

    def in_bounds(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies on the board."""
        ...

    def get_piece(self, row: int, col: int) -> Optional[Piece]:
        """Return the piece at a cell, or None."""
        ...

    def contains(self, piece: Optional[Piece]) -> bool:
        """Whether this exact piece object sits on the board."""
        ...

    def move_piece(self, piece: Optional[Piece], new_row: int, new_col: int) -> None:
        """Relocate a piece."""
        ...

    def remove_piece(self, row: int, col: int) -> None:
        """Clear a cell."""
        ...

    def get_pieces_of_color(self, color: Color) -> List[Piece]:
        """All pieces of a color, row-major."""
        ...


class MoveGeneratorProtocol(Protocol):
    """Protocol for per-piece move generation functions."""

    def __call__(self, board: BoardProtocol, piece: Optional[Piece]) -> List[Move]:
        """Generate the moves of a single piece."""
        ...
