"""
Search interfaces and the three difficulty strategies.

Every strategy receives the candidate (piece, move) pairs for the side to
move, already restricted to captures when one exists, and returns one of
them. Look-ahead always runs on ``Board.clone()`` copies; the board passed
in is never mutated.
"""
from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple, Type

from config import AISettings, get_ai_settings

from .board import Board
from .eval import Evaluator, get_evaluator, piece_is_vulnerable, position_score
from .moves import apply_move, collect_moves, filter_forced, get_valid_moves
from .types import Color, Move, Piece, ScoredMove, opponent

logger = logging.getLogger(__name__)


# ----------------------------
# Simulation helpers
# ----------------------------
def simulate(board: Board, piece: Piece, move: Move) -> Tuple[Board, Optional[Piece], bool]:
    """Clone `board` and play `move` on the clone.

    Returns ``(clone, clone_piece, promoted)``; the clone's piece is found
    by id, so it resolves even though it is a different object.
    """
    clone = board.clone()
    clone_piece = clone.piece_by_id(piece.piece_id)
    promoted = apply_move(clone, clone_piece, move)
    return clone, clone_piece, promoted


def _chain_from(board: Board, piece: Piece) -> int:
    best = 0
    for move in get_valid_moves(board, piece):
        if not move.is_capture:
            continue
        clone, clone_piece, promoted = simulate(board, piece, move)
        length = 1 if promoted else 1 + _chain_from(clone, clone_piece)
        best = max(best, length)
    return best


def max_capture_chain(board: Board, piece: Piece, move: Move) -> int:
    """Longest run of captures starting with `move`, counting `move` itself.

    A crowning capture ends the chain. Returns 0 for a quiet move.
    """
    if not move.is_capture:
        return 0
    clone, clone_piece, promoted = simulate(board, piece, move)
    if promoted:
        return 1
    return 1 + _chain_from(clone, clone_piece)


def finish_chain(board: Board, piece: Piece) -> int:
    """Play out the rest of a capture chain in place, always taking a longest line.

    Returns the number of extra captures made.
    """
    extra = 0
    while True:
        captures = [m for m in get_valid_moves(board, piece) if m.is_capture]
        if not captures:
            return extra
        best = max(captures, key=lambda m: max_capture_chain(board, piece, m))
        extra += 1
        if apply_move(board, piece, best):
            return extra


def simulate_turn(board: Board, piece: Piece, move: Move) -> Board:
    """Clone `board` and play the whole turn that starts with `move`."""
    clone, clone_piece, promoted = simulate(board, piece, move)
    if move.is_capture and not promoted:
        finish_chain(clone, clone_piece)
    return clone


def leads_to_immediate_capture(board: Board, piece: Piece, move: Move) -> bool:
    """Whether the opponent can take the moved piece right after `move`."""
    clone, clone_piece, _ = simulate(board, piece, move)
    return piece_is_vulnerable(clone, clone_piece)


# ----------------------------
# Strategies
# ----------------------------
class SearchStrategy(ABC):
    """Chooses one move among the candidates for a side."""

    name: str = ""

    def __init__(self, settings: Optional[AISettings] = None,
                 rng: Optional[random.Random] = None) -> None:
        self.settings = settings or get_ai_settings()
        self.rng = rng or random.Random()

    @abstractmethod
    def choose(self, board: Board, color: Color,
               candidates: Sequence[ScoredMove]) -> ScoredMove:  # pragma: no cover
        raise NotImplementedError

    def pick(self, moves: Sequence[ScoredMove]) -> ScoredMove:
        return self.rng.choice(list(moves))


class RandomStrategy(SearchStrategy):
    """Uniform choice, no look-ahead."""

    name = "easy"

    def choose(self, board: Board, color: Color,
               candidates: Sequence[ScoredMove]) -> ScoredMove:
        return self.pick(candidates)


class GreedyStrategy(SearchStrategy):
    """Longest capture chain, else best square with a safety check."""

    name = "medium"

    def choose(self, board: Board, color: Color,
               candidates: Sequence[ScoredMove]) -> ScoredMove:
        captures = [c for c in candidates if c.move.is_capture]
        if captures:
            scored = [ScoredMove(c.piece, c.move, max_capture_chain(board, c.piece, c.move))
                      for c in captures]
            best = max(s.score for s in scored)
            top = [s for s in scored if s.score == best]
            logger.debug("%s greedy: %d captures, longest chain %d", color, len(captures), best)
            return self.pick(top)

        scored = []
        for c in candidates:
            score = position_score(c.move.row, c.move.col, board.size)
            if leads_to_immediate_capture(board, c.piece, c.move):
                score -= self.settings.danger_penalty
            scored.append(ScoredMove(c.piece, c.move, score))
        scored.sort(key=lambda s: s.score, reverse=True)
        return self.pick(scored[:self.settings.top_k])


class MinimaxStrategy(SearchStrategy):
    """Fixed-depth minimax over clones with a heuristic leaf evaluation."""

    name = "hard"

    def __init__(self, settings: Optional[AISettings] = None,
                 rng: Optional[random.Random] = None,
                 evaluator: Optional[Evaluator] = None) -> None:
        super().__init__(settings, rng)
        self.evaluator = evaluator or get_evaluator(self.settings)
        self.nodes = 0

    def minimax(self, board: Board, depth: int, maximizing: bool, ai_color: Color) -> float:
        """Score `board` for `ai_color`; `maximizing` says whose turn it is."""
        self.nodes += 1
        if depth == 0:
            return self.evaluator.evaluate_position(board, ai_color)

        side = ai_color if maximizing else opponent(ai_color)
        moves = filter_forced(collect_moves(board, side))
        if not moves:
            # The side to move is blocked, which loses.
            return -self.settings.terminal_score if maximizing else self.settings.terminal_score

        values = []
        for m in moves:
            clone = simulate_turn(board, m.piece, m.move)
            values.append(self.minimax(clone, depth - 1, not maximizing, ai_color))
        return max(values) if maximizing else min(values)

    def score_candidate(self, board: Board, color: Color, candidate: ScoredMove) -> float:
        clone = simulate_turn(board, candidate.piece, candidate.move)
        return self.minimax(clone, self.settings.minimax_depth, False, color)

    def choose(self, board: Board, color: Color,
               candidates: Sequence[ScoredMove]) -> ScoredMove:
        self.nodes = 0
        scored = [ScoredMove(c.piece, c.move, self.score_candidate(board, color, c))
                  for c in candidates]
        top_score = max(s.score for s in scored)
        top = [s for s in scored if s.score >= top_score - self.settings.score_tolerance]
        logger.debug("%s minimax: best %.1f, %d within tolerance, %d nodes",
                     color, top_score, len(top), self.nodes)
        return self.pick(top)


_STRATEGIES: Dict[str, Type[SearchStrategy]] = {
    RandomStrategy.name: RandomStrategy,
    GreedyStrategy.name: GreedyStrategy,
    MinimaxStrategy.name: MinimaxStrategy,
}


def get_search_strategy(difficulty: str, settings: Optional[AISettings] = None,
                        rng: Optional[random.Random] = None) -> SearchStrategy:
    """Factory mapping a difficulty name to its strategy."""
    try:
        cls = _STRATEGIES[difficulty]
    except KeyError:
        raise ValueError(f"Unknown difficulty {difficulty!r}; expected one of {sorted(_STRATEGIES)}") from None
    return cls(settings=settings, rng=rng)


def available_difficulties() -> List[str]:
    return list(_STRATEGIES)


__all__ = [
    "SearchStrategy",
    "RandomStrategy",
    "GreedyStrategy",
    "MinimaxStrategy",
    "get_search_strategy",
    "available_difficulties",
    "max_capture_chain",
    "leads_to_immediate_capture",
    "simulate",
    "simulate_turn",
    "finish_chain",
]
