"""
backgammon-rules - a two-player backgammon rules engine.
"""

__version__ = "0.1.0"

# Core exports
from backgammon_rules.core.types import (
    Board,
    MoveRequest,
    MoveStep,
    MoveKind,
    Dice,
    Player,
    GameOutcome,
    BAR,
    OFF,
)
from backgammon_rules.core.dice import DiceRoll
from backgammon_rules.core.game import Game, GamePhase
from backgammon_rules.core.notation import parse
from backgammon_rules.core.rules import Accepted, Rejected, check_turn, validate_turn

__all__ = [
    "Board",
    "MoveRequest",
    "MoveStep",
    "MoveKind",
    "Dice",
    "Player",
    "GameOutcome",
    "BAR",
    "OFF",
    "DiceRoll",
    "Game",
    "GamePhase",
    "parse",
    "Accepted",
    "Rejected",
    "check_turn",
    "validate_turn",
]
