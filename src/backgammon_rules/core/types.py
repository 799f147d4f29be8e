"""Core type definitions for the backgammon rules engine.

This module defines the data structures shared by the board model, the
notation parser, the legality engine and the game state machine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Union
import numpy as np
from numpy.typing import NDArray


# ==============================================================================
# BOARD REPRESENTATION
# ==============================================================================

# Type aliases
Point = int  # 0-25 in board arrays: 0=bar, 1-24=points, 25=off
CheckerCount = int  # 0-15

NUM_POINTS = 24
CHECKERS_PER_PLAYER = 15

# Array slots shared by both colors
BAR_SLOT = 0
OFF_SLOT = 25


class Player(Enum):
    """Player colors."""
    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> "Player":
        """Return the opponent player."""
        return Player.BLACK if self == Player.WHITE else Player.WHITE

    def __str__(self) -> str:
        return self.value


# Dice type
Dice = Tuple[int, int]  # (die1, die2) where 1 <= die1, die2 <= 6


@dataclass
class Board:
    """Board state representation.

    Each color has a 26-slot array:
    - Slot 0: that color's bar (where its hit checkers go)
    - Slots 1-24: regular points, in absolute numbering
    - Slot 25: that color's off area (borne-off checkers)

    For White:
    - Home board: points 1-6
    - Moves from high to low (24 → 1 → off)

    For Black:
    - Home board: points 19-24
    - Moves from low to high (1 → 24 → off)

    The board does not know whose turn it is; that belongs to the game.

    Attributes:
        white_checkers: Array of checker counts for white (length 26)
        black_checkers: Array of checker counts for black (length 26)
    """
    white_checkers: NDArray[np.int32] = field(default_factory=lambda: np.zeros(26, dtype=np.int32))
    black_checkers: NDArray[np.int32] = field(default_factory=lambda: np.zeros(26, dtype=np.int32))

    def __post_init__(self):
        """Validate board state."""
        assert len(self.white_checkers) == 26, "white_checkers must have length 26"
        assert len(self.black_checkers) == 26, "black_checkers must have length 26"
        assert all(0 <= c <= 15 for c in self.white_checkers), "Invalid white checker count"
        assert all(0 <= c <= 15 for c in self.black_checkers), "Invalid black checker count"

    def copy(self) -> "Board":
        """Create a deep copy of the board."""
        return Board(
            white_checkers=self.white_checkers.copy(),
            black_checkers=self.black_checkers.copy(),
        )

    def checkers(self, player: Player) -> NDArray[np.int32]:
        """Return the (mutable) checker array for a player."""
        return self.white_checkers if player == Player.WHITE else self.black_checkers

    def get_checkers(self, player: Player, point: Point) -> CheckerCount:
        """Get number of checkers at a point for a player."""
        return int(self.checkers(player)[point])

    def set_checkers(self, player: Player, point: Point, count: CheckerCount) -> None:
        """Set number of checkers at a point for a player (mutates board)."""
        assert 0 <= count <= 15, f"Invalid checker count: {count}"
        self.checkers(player)[point] = count

    def key(self) -> bytes:
        """Hashable snapshot of the position, used for memoisation."""
        return self.white_checkers.tobytes() + self.black_checkers.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(
            np.array_equal(self.white_checkers, other.white_checkers)
            and np.array_equal(self.black_checkers, other.black_checkers)
        )


# ==============================================================================
# MOVES
# ==============================================================================

# Notation keywords. In a MoveRequest, integer locations are player-relative
# points (24 = farthest from home, 1 = deepest home point).
BAR = "bar"
OFF = "off"

Location = Union[int, str]


class MoveKind(Enum):
    """What sort of elementary move a request is."""
    ENTER = "enter"        # bar → point
    NORMAL = "normal"      # point → point
    BEAR_OFF = "bear_off"  # point → off


def location_pips(location: Location) -> int:
    """Distance of a location from the player's bear-off edge.

    The bar sits one pip beyond the 24-point and "off" sits at zero, so the
    distance of any move is simply origin pips minus destination pips.
    """
    if location == BAR:
        return NUM_POINTS + 1
    if location == OFF:
        return 0
    return int(location)


@dataclass(frozen=True)
class MoveRequest:
    """A single elementary step as written in notation.

    Attributes:
        origin: Player-relative point 1-24, or BAR
        destination: Player-relative point 1-24, or OFF
    """
    origin: Location
    destination: Location

    @property
    def kind(self) -> MoveKind:
        if self.origin == BAR:
            return MoveKind.ENTER
        if self.destination == OFF:
            return MoveKind.BEAR_OFF
        return MoveKind.NORMAL

    @property
    def distance(self) -> int:
        """Pips between origin and destination (negative if moving backwards)."""
        return location_pips(self.origin) - location_pips(self.destination)

    def __str__(self) -> str:
        return f"{self.origin}/{self.destination}"


@dataclass(frozen=True)
class MoveStep:
    """A resolved single-die checker movement.

    Attributes:
        origin: Player-relative starting point (1-24) or BAR
        destination: Player-relative ending point (1-24) or OFF
        die_used: Which die value was used (1-6)
        hits_opponent: Whether this step hits an opponent blot
    """
    origin: Location
    destination: Location
    die_used: int
    hits_opponent: bool = False

    def __post_init__(self):
        """Validate move step."""
        assert self.origin == BAR or 1 <= self.origin <= NUM_POINTS, f"Invalid origin: {self.origin}"
        assert self.destination == OFF or 1 <= self.destination <= NUM_POINTS, (
            f"Invalid destination: {self.destination}"
        )
        assert 1 <= self.die_used <= 6, f"Invalid die: {self.die_used}"

    @property
    def kind(self) -> MoveKind:
        return MoveRequest(self.origin, self.destination).kind

    def __str__(self) -> str:
        return f"{self.origin}/{self.destination}{'*' if self.hits_opponent else ''}"


# A complete played turn (0-4 steps)
Move = Tuple[MoveStep, ...]


# ==============================================================================
# GAME RESULTS
# ==============================================================================

@dataclass
class GameOutcome:
    """Game outcome with points won.

    Attributes:
        winner: Which player won
        points: Points won (1=single, 2=gammon, 3=backgammon)
    """
    winner: Player
    points: int  # 1, 2, or 3

    def __post_init__(self):
        """Validate outcome."""
        assert self.points in [1, 2, 3], f"Points must be 1, 2, or 3, got {self.points}"

    def is_gammon(self) -> bool:
        """Check if outcome is a gammon (includes backgammon)."""
        return self.points >= 2

    def is_backgammon(self) -> bool:
        """Check if outcome is a backgammon."""
        return self.points == 3


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view of a game for renderers.

    Attributes:
        points: 24 (count, color) pairs indexed by absolute point - 1;
            color is None for an empty point
        bar: Checkers on each player's bar
        off: Checkers borne off by each player
        current_player: Player to act
        remaining_dice: Unconsumed dice values this turn
        phase: Name of the current game phase
        outcome: Final result once the game is over
    """
    points: Tuple[Tuple[int, Optional[Player]], ...]
    bar: Tuple[Tuple[Player, int], ...]
    off: Tuple[Tuple[Player, int], ...]
    current_player: Player
    remaining_dice: Tuple[int, ...]
    phase: str
    outcome: Optional[GameOutcome] = None

    def bar_count(self, player: Player) -> int:
        return dict(self.bar)[player]

    def off_count(self, player: Player) -> int:
        return dict(self.off)[player]


# Legal single-die steps for a given board + dice
LegalSteps = List[MoveStep]
