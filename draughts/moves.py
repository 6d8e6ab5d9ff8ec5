from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .types import (
    BoardProtocol,
    Color,
    Move,
    MoveDescriptor,
    Piece,
    ScoredMove,
    forward_step,
    promotion_row,
)

DIRECTIONS: List[Tuple[int, int]] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]


def _is_promotion(board: BoardProtocol, piece: Piece, row: int) -> bool:
    return not piece.king and row == promotion_row(piece.color, board.size)


def _man_moves(board: BoardProtocol, piece: Piece) -> List[Move]:
    moves: List[Move] = []
    dr = forward_step(piece.color)
    for dc in (-1, 1):
        r, c = piece.row + dr, piece.col + dc
        if board.in_bounds(r, c) and board.get_piece(r, c) is None:
            moves.append(Move(r, c, None, _is_promotion(board, piece, r)))

    # Men capture backwards as well as forwards.
    for dr, dc in DIRECTIONS:
        r1, c1 = piece.row + dr, piece.col + dc
        r2, c2 = piece.row + 2 * dr, piece.col + 2 * dc
        if not board.in_bounds(r2, c2):
            continue
        jumped = board.get_piece(r1, c1)
        if jumped is not None and jumped.color != piece.color and board.get_piece(r2, c2) is None:
            moves.append(Move(r2, c2, (r1, c1), _is_promotion(board, piece, r2)))
    return moves


def _king_moves(board: BoardProtocol, piece: Piece) -> List[Move]:
    moves: List[Move] = []
    for dr, dc in DIRECTIONS:
        r, c = piece.row + dr, piece.col + dc
        enemy: Optional[Tuple[int, int]] = None
        while board.in_bounds(r, c):
            occupant = board.get_piece(r, c)
            if occupant is None:
                moves.append(Move(r, c, enemy))
            elif occupant.color == piece.color:
                break
            elif enemy is not None:
                # Two pieces may not be jumped in one leap.
                break
            else:
                enemy = (r, c)
            r += dr
            c += dc
    return moves


def get_valid_moves(board: BoardProtocol, piece: Optional[Piece]) -> List[Move]:
    """All geometrically legal moves of one piece, ignoring forced capture.

    Returns an empty list for ``None`` or for a piece that is not on `board`.
    """
    if not board.contains(piece):
        return []
    if piece.king:
        return _king_moves(board, piece)
    return _man_moves(board, piece)


def collect_moves(board: BoardProtocol, color: Color) -> List[ScoredMove]:
    """Every (piece, move) pair available to `color`, unfiltered."""
    pairs: List[ScoredMove] = []
    for piece in board.get_pieces_of_color(color):
        for move in get_valid_moves(board, piece):
            pairs.append(ScoredMove(piece, move))
    return pairs


def filter_forced(pairs: Sequence[ScoredMove]) -> List[ScoredMove]:
    """Restrict to capturing moves whenever at least one exists."""
    captures = [p for p in pairs if p.move.is_capture]
    return captures if captures else list(pairs)


def apply_move(board: BoardProtocol, piece: Optional[Piece], move: Optional[Move],
               promote: bool = True) -> bool:
    """Play `move` with `piece` on `board`. Returns True if the piece was crowned."""
    if piece is None or move is None:
        return False
    if move.capture is not None:
        board.remove_piece(*move.capture)
    board.move_piece(piece, move.row, move.col)
    if promote and _is_promotion(board, piece, move.row):
        piece.make_king()
        return True
    return False


class MoveGenerator:
    """Generates legal moves for a given board and side.

    Per-piece generation is pure geometry; the side-wide view applies the
    forced-capture rule when `captures_mandatory` is set.
    """

    def __init__(self, captures_mandatory: bool = True) -> None:
        self.captures_mandatory = bool(captures_mandatory)

    def moves_for(self, board: BoardProtocol, piece: Optional[Piece]) -> List[Move]:
        return get_valid_moves(board, piece)

    def capture_moves_for(self, board: BoardProtocol, piece: Optional[Piece]) -> List[Move]:
        return [m for m in get_valid_moves(board, piece) if m.is_capture]

    def legal_moves(self, board: BoardProtocol, color: Color) -> List[ScoredMove]:
        pairs = collect_moves(board, color)
        if self.captures_mandatory:
            return filter_forced(pairs)
        return pairs

    def has_capture(self, board: BoardProtocol, color: Color) -> bool:
        return any(pair.move.is_capture for pair in collect_moves(board, color))


class MoveValidator:
    """Validates move descriptors against generated legal moves."""

    @staticmethod
    def is_capture(move: Optional[Move]) -> bool:
        return move is not None and move.is_capture

    @staticmethod
    def validate(board: BoardProtocol, color: Color, descriptor: MoveDescriptor,
                 captures_mandatory: bool = True) -> Optional[ScoredMove]:
        """Return the legal (piece, move) matching `descriptor`, or None."""
        gen = MoveGenerator(captures_mandatory=captures_mandatory)
        for pair in gen.legal_moves(board, color):
            if MoveDescriptor.of(pair.piece, pair.move) == descriptor:
                return pair
        return None


# Convenience functional API

def legal_moves(board: BoardProtocol, color: Color, captures_mandatory: bool = True) -> List[ScoredMove]:
    return MoveGenerator(captures_mandatory=captures_mandatory).legal_moves(board, color)
