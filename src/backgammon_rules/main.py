"""Command-line entrypoint for backgammon-rules.

Two humans share one terminal: the program rolls the dice, draws the board
from the current player's side and reads moves in standard notation.
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, List, Optional

import numpy as np
from loguru import logger

from backgammon_rules import __version__
from backgammon_rules.config import LOG_LEVELS, GameConfig
from backgammon_rules.core.board import board_to_string, initial_board
from backgammon_rules.core.dice import dice_to_string, roll_dice, roll_opening
from backgammon_rules.core.errors import BackgammonError
from backgammon_rules.core.game import Game, GamePhase
from backgammon_rules.core.notation import format_steps
from backgammon_rules.core.types import Player

QUIT_WORDS = ("quit", "exit")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="backgammon-rules",
        description="Two-player backgammon in the terminal",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"backgammon-rules {__version__}",
    )
    sub = parser.add_subparsers(dest="command")

    play = sub.add_parser("play", help="Play a game on this terminal")
    play.add_argument("--seed", type=int, default=None, help="Seed for the dice")
    play.add_argument(
        "--first",
        choices=[p.value for p in Player],
        default=None,
        help="Who moves first (default: opening throw)",
    )
    play.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", type=str.upper)
    play.add_argument("--no-pips", action="store_true", help="Hide pip counts")

    sub.add_parser("show", help="Print the starting position")
    return parser


def configure_logging(level: str) -> None:
    """Send loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def render(game: Game, config: GameConfig) -> str:
    """Board plus a status line for the player to act."""
    text = board_to_string(game.board, perspective=game.current_player, show_pips=config.show_pips)
    if game.phase is GamePhase.AWAITING_MOVES:
        dice = " ".join(str(value) for value in game.remaining_dice())
        text += f"\n{game.current_player} to play [{dice}]"
    return text


def play_game(
    config: GameConfig,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    """Run an interactive game until someone wins or a player quits.

    Returns:
        Exit code: 0 when the game ends or a player quits, 1 on end of input
    """
    rng = np.random.default_rng(config.seed)

    if config.starting_player is not None:
        game = Game(config.starting_player)
    else:
        white_die, black_die = roll_opening(rng)
        write(f"Opening throw: white {white_die}, black {black_die}")
        game = Game.from_opening_roll(white_die, black_die)

    while not game.is_over:
        player = game.current_player
        if game.phase is GamePhase.AWAITING_ROLL:
            dice = roll_dice(rng)
            if not game.roll(*dice):
                write(f"{player} rolls {dice_to_string(dice)} and cannot move.")
            continue

        write(render(game, config))
        try:
            line = read_line(f"{player}> ")
        except EOFError:
            return 1

        if line.strip().lower() in QUIT_WORDS:
            return 0

        try:
            result = game.play(line)
        except BackgammonError as error:
            write(f"Error: {error}")
            continue
        write(f"{player} plays {format_steps(result.steps) or '(no move)'}")

    outcome = game.outcome
    kind = {1: "single game", 2: "gammon", 3: "backgammon"}[outcome.points]
    write(f"{outcome.winner} wins a {kind}!")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint used by the `backgammon-rules` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "play":
        config = GameConfig.from_args(args)
        configure_logging(config.log_level)
        return play_game(config)

    if args.command == "show":
        print(board_to_string(initial_board()))
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
