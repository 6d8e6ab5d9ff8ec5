from __future__ import annotations

from typing import Dict, Iterator, List, Optional

import numpy as np

from .types import (
    BLACK,
    BOARD_SIZE,
    RED,
    START_ROWS,
    Color,
    MoveGeneratorProtocol,
    Piece,
    PieceId,
)

Grid = List[List[Optional[Piece]]]

_SYMBOLS = {(RED, False): "r", (RED, True): "R", (BLACK, False): "b", (BLACK, True): "B"}
_CODES = {(RED, False): 1, (RED, True): 2, (BLACK, False): -1, (BLACK, True): -2}


def is_dark(row: int, col: int) -> bool:
    """Playable squares: (row + col) even."""
    return (row + col) % 2 == 0


class Board:
    """8x8 grid owning every piece placed on it.

    Black starts on rows 0..2 and moves down the board, red starts on
    rows 5..7 and moves up.
    """

    def __init__(self, size: int = BOARD_SIZE, populate: bool = True) -> None:
        self.size: int = size
        self.grid: Grid = []
        self._pieces: Dict[PieceId, Piece] = {}
        self._next_id: PieceId = 0
        if populate:
            self.setup()
        else:
            self._clear()

    @classmethod
    def empty(cls, size: int = BOARD_SIZE) -> "Board":
        """A board with no pieces, for custom positions."""
        return cls(size=size, populate=False)

    def _clear(self) -> None:
        self.grid = [[None] * self.size for _ in range(self.size)]
        self._pieces = {}
        self._next_id = 0

    def setup(self) -> None:
        """Reset to the initial position."""
        self._clear()
        for r in range(START_ROWS):
            for c in range(self.size):
                if is_dark(r, c):
                    self.place_piece(BLACK, r, c)
        for r in range(self.size - START_ROWS, self.size):
            for c in range(self.size):
                if is_dark(r, c):
                    self.place_piece(RED, r, c)

    def place_piece(self, color: Color, row: int, col: int, king: bool = False) -> Piece:
        """Create a piece on an empty in-bounds cell."""
        if not self.in_bounds(row, col):
            raise ValueError(f"Square ({row}, {col}) is off the board")
        if self.grid[row][col] is not None:
            raise ValueError(f"Square ({row}, {col}) is occupied")
        piece = Piece(color, row, col, king=king, piece_id=self._next_id)
        self._next_id += 1
        self.grid[row][col] = piece
        self._pieces[piece.piece_id] = piece
        return piece

    # ----------------------------
    # Lookup and mutation
    # ----------------------------
    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def get_piece(self, row: int, col: int) -> Optional[Piece]:
        if not self.in_bounds(row, col):
            return None
        return self.grid[row][col]

    def piece_by_id(self, piece_id: PieceId) -> Optional[Piece]:
        return self._pieces.get(piece_id)

    def contains(self, piece: Optional[Piece]) -> bool:
        """True if this exact piece object sits on this board."""
        if piece is None or not self.in_bounds(piece.row, piece.col):
            return False
        return self.grid[piece.row][piece.col] is piece

    def move_piece(self, piece: Optional[Piece], new_row: int, new_col: int) -> None:
        if piece is None or not self.in_bounds(new_row, new_col):
            return
        if self.grid[piece.row][piece.col] is piece:
            self.grid[piece.row][piece.col] = None
        piece.row = new_row
        piece.col = new_col
        self.grid[new_row][new_col] = piece

    def remove_piece(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            return
        piece = self.grid[row][col]
        if piece is None:
            return
        self.grid[row][col] = None
        self._pieces.pop(piece.piece_id, None)

    # ----------------------------
    # Bulk queries
    # ----------------------------
    def iter_pieces(self) -> Iterator[Piece]:
        """Row-major scan of occupied cells."""
        for row in self.grid:
            for p in row:
                if p is not None:
                    yield p

    def get_pieces_of_color(self, color: Color) -> List[Piece]:
        return [p for p in self.iter_pieces() if p.color == color]

    def count_pieces(self, color: Color) -> int:
        return sum(1 for p in self.iter_pieces() if p.color == color)

    def has_valid_moves(self, color: Color,
                        move_generator: Optional[MoveGeneratorProtocol] = None) -> bool:
        """True iff at least one piece of `color` has a legal move."""
        if move_generator is None:
            # Local import to avoid circular import during module initialization
            from .moves import get_valid_moves
            move_generator = get_valid_moves
        return any(move_generator(self, p) for p in self.get_pieces_of_color(color))

    # ----------------------------
    # Copies and encodings
    # ----------------------------
    def clone(self) -> "Board":
        """Deep copy with disjoint piece storage and the same piece ids."""
        other = Board(size=self.size, populate=False)
        for p in self.iter_pieces():
            copy = Piece(p.color, p.row, p.col, king=p.king, piece_id=p.piece_id)
            other.grid[p.row][p.col] = copy
            other._pieces[copy.piece_id] = copy
        other._next_id = self._next_id
        return other

    def restore(self, snapshot: "Board") -> None:
        """Overwrite this board in place with a copy of `snapshot`."""
        copy = snapshot.clone()
        self.size = copy.size
        self.grid = copy.grid
        self._pieces = copy._pieces
        self._next_id = copy._next_id

    def to_array(self) -> np.ndarray:
        """Signed int8 encoding: red +1/+2, black -1/-2 (man/king)."""
        arr = np.zeros((self.size, self.size), dtype=np.int8)
        for p in self.iter_pieces():
            arr[p.row, p.col] = _CODES[(p.color, p.king)]
        return arr

    def __str__(self) -> str:
        lines = []
        for r, row in enumerate(self.grid):
            cells = [_SYMBOLS[(p.color, p.king)] if p is not None else "." for p in row]
            lines.append(f"{r} " + " ".join(cells))
        lines.append("  " + " ".join(str(c) for c in range(self.size)))
        return "\n".join(lines)
