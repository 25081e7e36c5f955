"""Terminal front end: play against the engine on a square board."""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from conquest.config import CONFIG, DIFFICULTY_DEPTHS, GameSettings
from conquest.core.board import AI
from conquest.core.errors import IllegalMove
from conquest.core.utils import configure_logging
from conquest.main import Game

RESULTS = {"human": "You win!", "ai": "AI wins", "draw": "Draw"}


def print_help() -> None:
    print("Enter 'row col' to place a tile, h=help, q=quit.")
    print("Placing a tile captures every adjacent opposing tile (diagonals too when enabled).")


def build_settings(args: argparse.Namespace) -> GameSettings:
    settings = GameSettings.load(args.settings) if args.settings else replace(CONFIG.game)
    if args.size is not None:
        settings.board_size = args.size
    if args.difficulty is not None:
        settings.difficulty = args.difficulty
    if args.diagonals:
        settings.include_diagonals = True
    if args.ai_first:
        settings.first_player = AI
    return settings.validate()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Neon Conquest terminal game")
    parser.add_argument("--size", type=int, help="board side length")
    parser.add_argument("--difficulty", choices=sorted(DIFFICULTY_DEPTHS), help="engine strength")
    parser.add_argument("--diagonals", action="store_true", help="capture diagonal neighbours too")
    parser.add_argument("--ai-first", action="store_true", help="let the engine open the game")
    parser.add_argument("--settings", help="JSON settings file to start from")
    parser.add_argument("--save", action="store_true", help="write the settings back to --settings on exit")
    args = parser.parse_args(argv)

    configure_logging(CONFIG.log_level)
    try:
        settings = build_settings(args)
    except ValueError as e:
        print(f"Invalid settings: {e}")
        return 2

    game = Game(settings)
    if game.last_move:
        print(f"AI plays {game.last_move[0]} {game.last_move[1]}")

    while not game.is_over():
        print(game.render())
        score = game.score()
        print(f"You {score.human} - AI {score.ai}")
        try:
            raw = input("Your move (row col): ").strip().lower()
        except EOFError:
            print()
            break
        if raw in {"q", "quit"}:
            break
        if raw in {"h", "help"}:
            print_help()
            continue
        parts = raw.split()
        try:
            row, col = (int(p) for p in parts)
        except ValueError:
            print("Please enter a row and a column, e.g. '1 2'.")
            continue
        try:
            game.play_human(row, col)
        except IllegalMove as e:
            print(f"Illegal move: {e}")
            continue
        move = game.play_ai()
        if move is not None:
            print(f"AI plays {move[0]} {move[1]}")

    if game.is_over():
        print(game.render())
        score = game.score()
        print(f"Game over. {RESULTS[game.winner]} ({score.human}-{score.ai})")

    if args.save and args.settings:
        settings.save(args.settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
