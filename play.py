from __future__ import annotations

import argparse
import logging

from config import DIFFICULTIES, get_config, load_config_from_file, setup_logging
from draughts import BLACK, RED, CheckersAI, Game

logger = logging.getLogger("play")


def parse_args() -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Run an AI-vs-AI draughts game")
    ap.add_argument("--red", choices=DIFFICULTIES, default="hard", help="Red difficulty")
    ap.add_argument("--black", choices=DIFFICULTIES, default="medium", help="Black difficulty")
    ap.add_argument("--seed", type=int, default=None, help="Random seed for both players")
    ap.add_argument("--max-turns", type=int, default=200, help="Stop after this many turns")
    ap.add_argument("--delay", type=float, default=0.0, help="Pause before each AI move (seconds)")
    ap.add_argument("--config", default=None, help="JSON configuration file")
    ap.add_argument("--show-board", action="store_true", help="Print the board after every turn")
    return ap.parse_args()


def main() -> None:
    args = parse_args()
    config = load_config_from_file(args.config) if args.config else get_config()
    setup_logging(config.logging)

    players = {
        RED: CheckersAI(args.red, seed=args.seed, settings=config.ai),
        BLACK: CheckersAI(args.black, seed=None if args.seed is None else args.seed + 1, settings=config.ai),
    }
    game = Game(rules=config.rules)

    turns = 0
    while not game.game_over and turns < args.max_turns:
        color = game.current_player
        number = game.move_number
        game.ai = players[color]
        game.ai_color = color
        played = game.play_ai_turn(delay=args.delay)
        turns += 1
        if played:
            print(f"{number:3d}. {color:5s} " + " ".join(str(d) for d in played))
        if args.show_board:
            print(game.board)
            print()

    red, black = game.piece_counts()
    if game.result == "win":
        print(f"Result: {game.winner} wins ({red} red / {black} black left)")
    elif game.result == "draw":
        print(f"Result: draw ({red} red / {black} black left)")
    else:
        print(f"Stopped after {turns} turns ({red} red / {black} black left)")


if __name__ == "__main__":
    main()
