"""
Turn management on top of the engine: forced capture, capture chains,
promotion, draw counting and game-end detection.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Tuple

from config import GameRulesSettings, get_game_rules

from .board import Board
from .engine import CheckersAI
from .moves import MoveGenerator, apply_move
from .types import BLACK, RED, Color, Move, MoveDescriptor, Piece, PieceId, opponent

logger = logging.getLogger(__name__)

# (board, current_player, move_number, moves_without_capture, chain piece id)
Snapshot = Tuple[Board, Color, int, int, Optional[PieceId]]


class Game:
    """Manages the live board, whose turn it is, and the game result."""

    def __init__(self, rules: Optional[GameRulesSettings] = None,
                 ai: Optional[CheckersAI] = None, ai_color: Optional[Color] = None,
                 board: Optional[Board] = None,
                 on_move: Optional[Callable[[MoveDescriptor], None]] = None) -> None:
        self.rules = rules or get_game_rules()
        self.generator = MoveGenerator(captures_mandatory=self.rules.captures_mandatory)
        self.ai = ai
        self.ai_color = ai_color
        self.on_move = on_move
        self.board = board if board is not None else Board()
        self.history: List[Snapshot] = []
        self._reset_state()

    def _reset_state(self) -> None:
        self.current_player: Color = self.rules.first_player
        self.move_number = 1
        self.moves_without_capture = 0
        self.chain_piece: Optional[Piece] = None
        self.last_move: Optional[MoveDescriptor] = None
        self.game_over = False
        self.winner: Optional[Color] = None
        self.result: Optional[str] = None

    def reset(self) -> None:
        """Reset the game to the initial position."""
        self.board.setup()
        self.history.clear()
        self._reset_state()

    # ----------------------------
    # Move selection
    # ----------------------------
    def selectable_moves(self, piece: Optional[Piece]) -> List[Move]:
        """Moves the side to move may play with `piece` right now."""
        if self.game_over or piece is None or piece.color != self.current_player:
            return []
        if self.chain_piece is not None:
            if piece is not self.chain_piece:
                return []
            return self.generator.capture_moves_for(self.board, piece)
        if self.rules.captures_mandatory and self.generator.has_capture(self.board, piece.color):
            return self.generator.capture_moves_for(self.board, piece)
        return self.generator.moves_for(self.board, piece)

    def movable_pieces(self) -> List[Piece]:
        return [p for p in self.board.get_pieces_of_color(self.current_player)
                if self.selectable_moves(p)]

    # ----------------------------
    # Playing moves
    # ----------------------------
    def make_move(self, from_row: int, from_col: int, to_row: int, to_col: int,
                  notify: bool = True) -> bool:
        """Play one step of the current turn. Returns False if it is not legal."""
        piece = self.board.get_piece(from_row, from_col)
        move = next((m for m in self.selectable_moves(piece) if m.destination == (to_row, to_col)), None)
        if piece is None or move is None:
            return False

        descriptor = MoveDescriptor(from_row, from_col, to_row, to_col)
        self._push_history()
        promoted = apply_move(self.board, piece, move)
        self.last_move = descriptor
        if notify and self.on_move is not None:
            self.on_move(descriptor)

        if move.is_capture:
            self.moves_without_capture = 0
            # A crowning capture ends the turn.
            if not promoted and self.generator.capture_moves_for(self.board, piece):
                self.chain_piece = piece
                return True
        else:
            self.moves_without_capture += 1

        self.chain_piece = None
        self._switch_turn()
        self.check_game_end()
        return True

    def apply_descriptor(self, descriptor: MoveDescriptor) -> bool:
        """Entry point for moves received from a remote peer."""
        return self.make_move(*descriptor, notify=False)

    def play_ai_turn(self, delay: float = 0.0) -> List[MoveDescriptor]:
        """Let the AI play the whole turn, chain links included."""
        if self.ai is None:
            raise RuntimeError("No AI attached to this game")
        color = self.current_player
        played: List[MoveDescriptor] = []
        while not self.game_over and self.current_player == color:
            if delay > 0:
                time.sleep(delay)
            if self.chain_piece is not None:
                choice = self.ai.get_chain_move(self.board, self.chain_piece)
            else:
                choice = self.ai.get_best_move(self.board, color)
            if choice is None:
                self.end_game(opponent(color))
                break
            descriptor = choice.descriptor
            if not self.make_move(*descriptor):
                raise RuntimeError(f"AI produced an illegal move {descriptor}")
            played.append(descriptor)
        return played

    def is_ai_turn(self) -> bool:
        return self.ai is not None and self.current_player == self.ai_color

    def _switch_turn(self) -> None:
        self.current_player = opponent(self.current_player)
        if self.current_player == self.rules.first_player:
            self.move_number += 1

    # ----------------------------
    # Game end
    # ----------------------------
    def check_game_end(self) -> bool:
        """Detect elimination, blockage and the quiet-move draw."""
        for color in (self.current_player, opponent(self.current_player)):
            if self.board.count_pieces(color) == 0:
                self.end_game(opponent(color))
                return True

        if not self.board.has_valid_moves(self.current_player):
            self.end_game(opponent(self.current_player))
            return True

        if self.moves_without_capture >= self.rules.max_moves_without_capture:
            self.end_game(None)
            return True
        return False

    def end_game(self, winner: Optional[Color]) -> None:
        self.game_over = True
        self.winner = winner
        self.result = "win" if winner is not None else "draw"
        if winner is None:
            logger.info("Draw after %d moves without capture", self.moves_without_capture)
        else:
            logger.info("%s wins on move %d", winner, self.move_number)

    # ----------------------------
    # History
    # ----------------------------
    def _push_history(self) -> None:
        chain_id = self.chain_piece.piece_id if self.chain_piece is not None else None
        self.history.append((self.board.clone(), self.current_player, self.move_number,
                             self.moves_without_capture, chain_id))

    def undo(self) -> bool:
        """Undo the last step and return success."""
        if not self.history:
            return False
        board, self.current_player, self.move_number, self.moves_without_capture, chain_id = self.history.pop()
        self.board.restore(board)
        self.chain_piece = self.board.piece_by_id(chain_id) if chain_id is not None else None
        self.last_move = None
        self.game_over = False
        self.winner = None
        self.result = None
        return True

    def piece_counts(self) -> Tuple[int, int]:
        """(red, black) piece counts."""
        return self.board.count_pieces(RED), self.board.count_pieces(BLACK)
