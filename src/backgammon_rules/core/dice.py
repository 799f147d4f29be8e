"""Dice utilities for backgammon.

This module handles the dice of a turn: expanding a roll into usable values,
tracking which values are still unconsumed, and rolling from an external
random generator. The engine itself never rolls; it is handed values.
"""

from typing import List, Tuple
import numpy as np
from backgammon_rules.core.errors import InvalidDiceValue
from backgammon_rules.core.types import Dice


def is_doubles(dice: Dice) -> bool:
    """Check if dice roll is doubles.

    Args:
        dice: Dice roll tuple

    Returns:
        True if both dice show the same value
    """
    return dice[0] == dice[1]


def dice_values(dice: Dice) -> List[int]:
    """Get the dice values to use for moves.

    For doubles, you get 4 moves. For non-doubles, you get 2 moves.

    Args:
        dice: Dice roll tuple

    Returns:
        List of dice values (length 2 or 4)

    Examples:
        >>> dice_values((3, 5))
        [3, 5]
        >>> dice_values((4, 4))
        [4, 4, 4, 4]
    """
    if is_doubles(dice):
        return [dice[0]] * 4
    else:
        return [dice[0], dice[1]]


def roll_dice(rng_key: np.random.Generator) -> Dice:
    """Roll two dice.

    Args:
        rng_key: NumPy random generator

    Returns:
        Tuple of (die1, die2) where each is 1-6
    """
    die1 = int(rng_key.integers(1, 7))
    die2 = int(rng_key.integers(1, 7))
    return (die1, die2)


def roll_opening(rng_key: np.random.Generator) -> Dice:
    """Roll the opening throw: one die each for (White, Black).

    Ties are re-rolled, so the result never shows doubles. The player with the
    higher die moves first using both values.
    """
    while True:
        dice = roll_dice(rng_key)
        if not is_doubles(dice):
            return dice


def canonicalize_dice(dice: Dice) -> Dice:
    """Canonicalize dice to standard form (smaller value first).

    Examples:
        >>> canonicalize_dice((5, 3))
        (3, 5)
    """
    return tuple(sorted(dice))  # type: ignore


def dice_to_string(dice: Dice) -> str:
    """Convert dice to readable string.

    Examples:
        >>> dice_to_string((3, 5))
        '3-5'
        >>> dice_to_string((4, 4))
        'Double 4s'
    """
    if is_doubles(dice):
        return f"Double {dice[0]}s"
    else:
        return f"{dice[0]}-{dice[1]}"


def _check_face(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or not 1 <= value <= 6:
        raise InvalidDiceValue(value, f"die value {value!r} is outside 1-6")
    return int(value)


class DiceRoll:
    """The dice of one turn and which of their values are still unused.

    This is purely an availability ledger: it knows nothing about which
    values can legally be played.

    Attributes:
        dice: The two faces as rolled
    """

    def __init__(self, die1: int, die2: int):
        self.dice: Dice = (_check_face(die1), _check_face(die2))
        self._remaining: List[int] = dice_values(self.dice)

    @classmethod
    def from_values(cls, dice: Dice, remaining: List[int]) -> "DiceRoll":
        """Rebuild a partly consumed roll.

        Raises:
            InvalidDiceValue: if `remaining` holds a value the roll does not
        """
        roll = cls(*dice)
        unused = list(roll._remaining)
        for value in remaining:
            _check_face(value)
            if value not in unused:
                raise InvalidDiceValue(value, f"die value {value} is not part of the roll {roll}")
            unused.remove(value)
        roll._remaining = sorted(remaining, reverse=True)
        return roll

    @property
    def is_doubles(self) -> bool:
        return is_doubles(self.dice)

    @property
    def values(self) -> List[int]:
        """All usable values of the roll, consumed or not."""
        return dice_values(self.dice)

    def remaining_values(self) -> List[int]:
        """Unconsumed values, largest first."""
        return sorted(self._remaining, reverse=True)

    def any_remaining(self) -> bool:
        return bool(self._remaining)

    def has(self, value: int) -> bool:
        return value in self._remaining

    def consume(self, value: int) -> None:
        """Mark one die value as used.

        Raises:
            InvalidDiceValue: if the value is not currently available
        """
        if value not in self._remaining:
            raise InvalidDiceValue(value)
        self._remaining.remove(value)

    def copy(self) -> "DiceRoll":
        return DiceRoll.from_values(self.dice, self._remaining)

    def key(self) -> Tuple[int, ...]:
        """Hashable form of the remaining values."""
        return tuple(self.remaining_values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiceRoll):
            return NotImplemented
        return self.dice == other.dice and self.key() == other.key()

    def __repr__(self) -> str:
        return f"DiceRoll({self.dice[0]}, {self.dice[1]}, remaining={self.remaining_values()})"

    def __str__(self) -> str:
        return dice_to_string(self.dice)
