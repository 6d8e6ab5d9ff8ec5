"""
AI entry point: collects the candidate moves for a side, applies the
forced-capture rule and hands the choice to the difficulty strategy.
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from config import AISettings, get_ai_settings

from .board import Board
from .moves import collect_moves, filter_forced, get_valid_moves
from .search import SearchStrategy, get_search_strategy
from .types import Color, Piece, ScoredMove

logger = logging.getLogger(__name__)


class CheckersAI:
    """Computer opponent with a difficulty fixed at construction."""

    def __init__(self, difficulty: Optional[str] = None, seed: Optional[int] = None,
                 settings: Optional[AISettings] = None) -> None:
        self.settings = settings or get_ai_settings()
        self.difficulty = difficulty or self.settings.difficulty
        self.rng = random.Random(seed)
        self.strategy: SearchStrategy = get_search_strategy(self.difficulty, self.settings, self.rng)

    def get_best_move(self, board: Board, ai_color: Color) -> Optional[ScoredMove]:
        """Chosen (piece, move) for `ai_color`, or None when it cannot move."""
        all_moves = collect_moves(board, ai_color)
        if not all_moves:
            logger.debug("%s has no legal moves", ai_color)
            return None
        candidates = filter_forced(all_moves)
        choice = self.strategy.choose(board, ai_color, candidates)
        logger.debug("%s (%s) plays %s", ai_color, self.difficulty, choice.descriptor)
        return choice

    def get_chain_move(self, board: Board, piece: Piece) -> Optional[ScoredMove]:
        """Next link of a capture chain: only `piece`'s captures are candidates."""
        candidates = [ScoredMove(piece, m) for m in get_valid_moves(board, piece) if m.is_capture]
        if not candidates:
            return None
        return self.strategy.choose(board, piece.color, candidates)

    def __repr__(self) -> str:
        return f"CheckersAI(difficulty={self.difficulty!r})"


def get_engine(difficulty: Optional[str] = None, seed: Optional[int] = None) -> CheckersAI:
    """Get a new AI instance."""
    return CheckersAI(difficulty=difficulty, seed=seed)
