"""Exceptions raised by the rules engine.

Every error here is recoverable by the caller: it describes bad input (a
notation string, a dice value, a move, or an action taken at the wrong time)
and leaves all game state untouched.
"""

from typing import Optional

from backgammon_rules.core.types import MoveRequest


class BackgammonError(Exception):
    """Base class for all rules-engine errors."""


# ==============================================================================
# NOTATION
# ==============================================================================

class NotationError(BackgammonError):
    """A move string could not be turned into move requests."""

    def __init__(self, token: str, message: str):
        self.token = token
        super().__init__(message)


class MalformedNotation(NotationError):
    def __init__(self, token: str, reason: str = "not a move"):
        super().__init__(token, f"notation '{token}' is not valid: {reason}")


class InvalidPoint(NotationError):
    def __init__(self, token: str):
        super().__init__(token, f"point '{token}' is outside 1-24")


class InvalidKeyword(NotationError):
    def __init__(self, token: str, reason: str = "expected a point, 'bar' or 'off'"):
        super().__init__(token, f"'{token}' is not valid here: {reason}")


# ==============================================================================
# DICE
# ==============================================================================

class InvalidDiceValue(BackgammonError, ValueError):
    """A die value is outside 1-6, or is not available to consume."""

    def __init__(self, value: int, message: Optional[str] = None):
        self.value = value
        super().__init__(message or f"die value {value} is not available")


# ==============================================================================
# MOVE LEGALITY
# ==============================================================================

class IllegalMoveError(BackgammonError):
    """A proposed move or turn breaks the rules.

    Attributes:
        request: The offending request, when the error concerns one
    """

    default_message = "illegal move"

    def __init__(self, request: Optional[MoveRequest] = None, message: Optional[str] = None):
        self.request = request
        text = message or self.default_message
        if request is not None:
            text = f"{request}: {text}"
        super().__init__(text)


class MustEnterFromBar(IllegalMoveError):
    default_message = "checkers on the bar must be entered first"


class NoCheckerAtOrigin(IllegalMoveError):
    default_message = "no checker of yours to move there"


class WrongDirection(IllegalMoveError):
    default_message = "checkers can only move toward home"


class IllegalDistance(IllegalMoveError):
    default_message = "distance does not match the available dice"


class BlockedDestination(IllegalMoveError):
    default_message = "point is held by two or more opposing checkers"


class IllegalBearOff(IllegalMoveError):
    default_message = "cannot bear off this checker"


class IncompleteTurn(IllegalMoveError):
    default_message = "a turn must use as many dice as possible"


class MustUseLargerDie(IncompleteTurn):
    default_message = "when only one die can be played, the larger must be used"


# ==============================================================================
# GAME STATE
# ==============================================================================

class GameStateError(BackgammonError):
    """An action was attempted at the wrong time."""


class OutOfTurn(GameStateError):
    def __init__(self, player, current):
        self.player = player
        self.current = current
        super().__init__(f"it is {current}'s turn, not {player}'s")


class WrongPhase(GameStateError):
    def __init__(self, action: str, phase):
        self.action = action
        self.phase = phase
        super().__init__(f"cannot {action} while {phase}")


class GameAlreadyOver(GameStateError):
    def __init__(self, winner):
        self.winner = winner
        super().__init__(f"the game is over; {winner} won")
