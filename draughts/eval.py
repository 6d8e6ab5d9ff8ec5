"""
Evaluation interfaces and the heuristic position scorer used by the search.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional, Set

import numpy as np

from config import AISettings, get_ai_settings

from .moves import collect_moves
from .types import BOARD_SIZE, BoardProtocol, Color, Piece, Position, opponent

CENTER_SCORE_MAX = 10.0
BACK_ROW_BONUS = 4.0


@lru_cache(maxsize=None)
def position_table(size: int = BOARD_SIZE) -> np.ndarray:
    """Per-square positional value: closeness to the center plus a back-row bonus."""
    center = (size - 1) / 2
    rows, cols = np.indices((size, size))
    dist = np.abs(rows - center) + np.abs(cols - center)
    table = np.maximum(0.0, CENTER_SCORE_MAX - dist)
    table[0, :] += BACK_ROW_BONUS
    table[size - 1, :] += BACK_ROW_BONUS
    table.setflags(write=False)
    return table


def position_score(row: int, col: int, size: int = BOARD_SIZE) -> float:
    return float(position_table(size)[row, col])


def threatened_squares(board: BoardProtocol, attacker: Color) -> Set[Position]:
    """Squares whose occupant `attacker` could capture with its next move."""
    return {pair.move.capture for pair in collect_moves(board, attacker) if pair.move.capture is not None}


def piece_is_vulnerable(board: BoardProtocol, piece: Piece) -> bool:
    """Whether the opponent could capture `piece` with its next move."""
    return piece.position in threatened_squares(board, opponent(piece.color))


class Evaluator(ABC):
    """Abstract evaluator interface for position scoring."""

    @abstractmethod
    def evaluate_position(self, board: BoardProtocol, color: Color) -> float:  # pragma: no cover
        """Evaluate a position from the point of view of `color`."""
        raise NotImplementedError


class HeuristicEvaluator(Evaluator):
    """Material + centrality + safety.

    Own pieces add their value and opponent pieces subtract it. An own
    piece that can be taken next ply costs `vulnerable_penalty`; an
    opponent piece en prise is worth `vulnerable_bonus`.
    """

    def __init__(self, settings: Optional[AISettings] = None) -> None:
        self.settings = settings or get_ai_settings()

    def piece_value(self, board: BoardProtocol, piece: Piece) -> float:
        base = self.settings.king_value if piece.king else self.settings.man_value
        return base + position_score(piece.row, piece.col, board.size)

    def evaluate_position(self, board: BoardProtocol, color: Color) -> float:
        s = self.settings
        enemy = opponent(color)
        own_threats = threatened_squares(board, enemy)
        enemy_threats = threatened_squares(board, color)
        score = 0.0
        for piece in board.get_pieces_of_color(color):
            score += self.piece_value(board, piece)
            if piece.position in own_threats:
                score -= s.vulnerable_penalty
        for piece in board.get_pieces_of_color(enemy):
            score -= self.piece_value(board, piece)
            if piece.position in enemy_threats:
                score += s.vulnerable_bonus
        return score


def get_evaluator(settings: Optional[AISettings] = None) -> Evaluator:
    return HeuristicEvaluator(settings)


__all__ = [
    "Evaluator",
    "HeuristicEvaluator",
    "get_evaluator",
    "piece_is_vulnerable",
    "threatened_squares",
    "position_score",
    "position_table",
]
