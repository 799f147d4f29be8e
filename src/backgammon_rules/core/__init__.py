"""Core game logic and data structures."""

from backgammon_rules.core.types import (
    Board,
    MoveRequest,
    MoveStep,
    MoveKind,
    Dice,
    Player,
    Point,
    GameOutcome,
    BoardSnapshot,
    BAR,
    OFF,
)
from backgammon_rules.core.errors import (
    BackgammonError,
    NotationError,
    MalformedNotation,
    InvalidPoint,
    InvalidKeyword,
    InvalidDiceValue,
    IllegalMoveError,
    MustEnterFromBar,
    NoCheckerAtOrigin,
    WrongDirection,
    IllegalDistance,
    BlockedDestination,
    IllegalBearOff,
    IncompleteTurn,
    MustUseLargerDie,
    GameStateError,
    OutOfTurn,
    WrongPhase,
    GameAlreadyOver,
)

__all__ = [
    "Board",
    "MoveRequest",
    "MoveStep",
    "MoveKind",
    "Dice",
    "Player",
    "Point",
    "GameOutcome",
    "BoardSnapshot",
    "BAR",
    "OFF",
    "BackgammonError",
    "NotationError",
    "MalformedNotation",
    "InvalidPoint",
    "InvalidKeyword",
    "InvalidDiceValue",
    "IllegalMoveError",
    "MustEnterFromBar",
    "NoCheckerAtOrigin",
    "WrongDirection",
    "IllegalDistance",
    "BlockedDestination",
    "IllegalBearOff",
    "IncompleteTurn",
    "MustUseLargerDie",
    "GameStateError",
    "OutOfTurn",
    "WrongPhase",
    "GameAlreadyOver",
]
