"""Runtime configuration for the command-line game."""

import argparse
from dataclasses import dataclass
from typing import Optional

from backgammon_rules.core.types import Player

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class GameConfig:
    """Settings for an interactive game.

    Attributes:
        seed: Seed for the dice generator (None = fresh entropy)
        starting_player: Fixed first player; None decides by opening throw
        log_level: loguru level for diagnostics written to stderr
        show_pips: Print pip counts under the board
    """
    seed: Optional[int] = None
    starting_player: Optional[Player] = None
    log_level: str = "WARNING"
    show_pips: bool = True

    def __post_init__(self):
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "GameConfig":
        """Build a config from parsed command-line arguments."""
        first = getattr(args, "first", None)
        return cls(
            seed=getattr(args, "seed", None),
            starting_player=Player(first) if first else None,
            log_level=getattr(args, "log_level", "WARNING"),
            show_pips=not getattr(args, "no_pips", False),
        )
