"""Flying-king draughts: board model, move generation and AI opponents.

Usage examples:
    from draughts import Board, get_valid_moves
    from draughts import CheckersAI
    from draughts import Game
"""
from __future__ import annotations

# Data model
from .types import (
    RED,
    BLACK,
    Color,
    Move,
    MoveDescriptor,
    Piece,
    Position,
    ScoredMove,
    opponent,
)
from .board import Board

# Move generation
from .moves import (
    MoveGenerator,
    MoveValidator,
    apply_move,
    collect_moves,
    filter_forced,
    get_valid_moves,
    legal_moves,
)

# Evaluation and search
from .eval import Evaluator, HeuristicEvaluator, get_evaluator
from .search import (
    SearchStrategy,
    RandomStrategy,
    GreedyStrategy,
    MinimaxStrategy,
    get_search_strategy,
    max_capture_chain,
)
from .engine import CheckersAI, get_engine

# Turn management
from .game import Game
