"""Board representation and point queries.

This module implements the point/bar model of the rules engine:
- Board initialization
- Coordinate conversion between absolute and player-relative points
- Point queries (who holds a point, can a player land there)
- Game state queries (bear-off eligibility, winner)

Board Layout:
    White moves from 24→1→off (home board: 1-6)
    Black moves from 1→24→off (home board: 19-24)

    Point numbering:
    13 14 15 16 17 18    19 20 21 22 23 24
    +------------------+------------------+
    |                  |                  |  Black home
    |                  |                  |
    |                  |                  |
    |                  |                  |
    |                  |                  |
    |                  |                  |  White home
    +------------------+------------------+
    12 11 10  9  8  7     6  5  4  3  2  1

Notation is player-relative: each player counts from their own 24-point down
to their own 1-point. White's relative numbering equals the absolute one;
Black's relative point p is absolute point 25 - p.
"""

from typing import Optional, Tuple
from backgammon_rules.core.types import (
    Board,
    Player,
    Point,
    GameOutcome,
    NUM_POINTS,
    CHECKERS_PER_PLAYER,
    BAR_SLOT,
    OFF_SLOT,
)


# ==============================================================================
# BOARD CONSTRUCTION
# ==============================================================================

def initial_board() -> Board:
    """Create the standard backgammon starting position.

    Standard setup:
    - White: 2 on 24, 5 on 13, 3 on 8, 5 on 6
    - Black: 2 on 1, 5 on 12, 3 on 17, 5 on 19

    Returns:
        Board in starting position
    """
    board = Board()

    # White checkers (moves 24→1)
    board.white_checkers[24] = 2   # Two on the 24-point
    board.white_checkers[13] = 5   # Five on the 13-point (mid-point)
    board.white_checkers[8] = 3    # Three on the 8-point
    board.white_checkers[6] = 5    # Five on the 6-point

    # Black checkers (moves 1→24)
    board.black_checkers[1] = 2    # Two on the 1-point
    board.black_checkers[12] = 5   # Five on the 12-point (mid-point)
    board.black_checkers[17] = 3   # Three on the 17-point
    board.black_checkers[19] = 5   # Five on the 19-point

    return board


def empty_board() -> Board:
    """Create an empty board with no checkers.

    Handy for setting up positions in tests; not a legal game position.
    """
    return Board()


def copy_board(board: Board) -> Board:
    """Clone a board.

    Args:
        board: Board to copy

    Returns:
        Deep copy of the board
    """
    return board.copy()


# ==============================================================================
# COORDINATES
# ==============================================================================

def to_absolute(player: Player, point: int) -> Point:
    """Convert a player-relative point (1-24) to absolute numbering."""
    assert 1 <= point <= NUM_POINTS, f"Invalid point: {point}"
    return point if player == Player.WHITE else NUM_POINTS + 1 - point


def to_relative(player: Player, point: Point) -> int:
    """Convert an absolute point (1-24) to the player's own numbering."""
    # The mapping is its own inverse
    return to_absolute(player, point)


# ==============================================================================
# POINT QUERIES
# ==============================================================================

def checkers_at(board: Board, point: Point, player: Player) -> int:
    """Number of a player's checkers on an absolute point."""
    assert 1 <= point <= NUM_POINTS, f"Invalid point: {point}"
    return board.get_checkers(player, point)


def top_color(board: Board, point: Point) -> Optional[Player]:
    """Which player occupies an absolute point, if anyone."""
    if checkers_at(board, point, Player.WHITE) > 0:
        return Player.WHITE
    if checkers_at(board, point, Player.BLACK) > 0:
        return Player.BLACK
    return None


def is_open(board: Board, point: Point, player: Player) -> bool:
    """Check if a player can land on an absolute point.

    You can land on a point if:
    - It's empty
    - You own it
    - Opponent has exactly 1 checker (blot - you can hit it)
    """
    return checkers_at(board, point, player.opponent()) <= 1


def is_blot(board: Board, point: Point, player: Player) -> bool:
    """Check if a player has exactly one checker on an absolute point."""
    return checkers_at(board, point, player) == 1


# ==============================================================================
# BOARD QUERIES
# ==============================================================================

def pip_count(board: Board, player: Player) -> int:
    """Calculate pip count for a player.

    Pip count = sum of (distance from bearing off × num_checkers).
    Checkers on the bar count 25 pips; borne-off checkers count nothing.

    Args:
        board: Current board
        player: Which player

    Returns:
        Total pip count
    """
    checkers = board.checkers(player)
    total = 25 * int(checkers[BAR_SLOT])
    for point in range(1, NUM_POINTS + 1):
        count = int(checkers[point])
        if count:
            total += to_relative(player, point) * count
    return total


def checkers_on_bar(board: Board, player: Player) -> int:
    """Get number of checkers on the bar for a player."""
    return board.get_checkers(player, BAR_SLOT)


def checkers_borne_off(board: Board, player: Player) -> int:
    """Get number of checkers borne off for a player."""
    return board.get_checkers(player, OFF_SLOT)


def total_checkers(board: Board, player: Player) -> int:
    """Checkers a player has across points, bar and off."""
    return int(board.checkers(player).sum())


def home_board_range(player: Player) -> range:
    """Absolute points in a player's home board."""
    if player == Player.WHITE:
        return range(1, 7)  # 1-6
    else:
        return range(19, 25)  # 19-24


def can_bear_off(board: Board, player: Player) -> bool:
    """Check if a player can bear off checkers.

    A player can bear off when every checker not yet borne off is in their
    home board: none on the bar and none on points outside the home quadrant.

    Args:
        board: Current board
        player: Which player

    Returns:
        True if player can bear off
    """
    checkers = board.checkers(player)

    if checkers[BAR_SLOT] > 0:
        return False

    home = home_board_range(player)
    for point in range(1, NUM_POINTS + 1):
        if point not in home and checkers[point] > 0:
            return False

    return True


def highest_occupied_point(board: Board, player: Player) -> int:
    """Highest player-relative point holding one of the player's checkers.

    Returns 25 if the player has a checker on the bar and 0 if the player has
    no checkers left on the board.
    """
    if checkers_on_bar(board, player) > 0:
        return NUM_POINTS + 1
    for relative in range(NUM_POINTS, 0, -1):
        if board.get_checkers(player, to_absolute(player, relative)) > 0:
            return relative
    return 0


def is_game_over(board: Board) -> bool:
    """Check if the game is over.

    Game is over when one player has borne off all 15 checkers.
    """
    return (
        checkers_borne_off(board, Player.WHITE) == CHECKERS_PER_PLAYER
        or checkers_borne_off(board, Player.BLACK) == CHECKERS_PER_PLAYER
    )


def winner(board: Board) -> Optional[GameOutcome]:
    """Determine the winner and outcome type.

    A gammon is scored when the loser has borne off nothing; a backgammon
    when, in addition, the loser still has a checker on the bar or in the
    winner's home board.

    Args:
        board: Current board

    Returns:
        GameOutcome if game is over, None otherwise
    """
    for player in (Player.WHITE, Player.BLACK):
        if checkers_borne_off(board, player) != CHECKERS_PER_PLAYER:
            continue

        loser = player.opponent()
        if checkers_borne_off(board, loser) > 0:
            return GameOutcome(winner=player, points=1)

        loser_checkers = board.checkers(loser)
        stranded = int(loser_checkers[BAR_SLOT]) + sum(
            int(loser_checkers[point]) for point in home_board_range(player)
        )
        return GameOutcome(winner=player, points=3 if stranded > 0 else 2)

    return None


def is_valid_board(board: Board) -> Tuple[bool, str]:
    """Validate a board state.

    Args:
        board: Board to validate

    Returns:
        (is_valid, error_message) tuple
    """
    for player in (Player.WHITE, Player.BLACK):
        checkers = board.checkers(player)
        if (checkers < 0).any():
            return False, f"{player} has a negative checker count"

        total = total_checkers(board, player)
        if total != CHECKERS_PER_PLAYER:
            return False, f"{player} has {total} checkers, should have {CHECKERS_PER_PLAYER}"

    for point in range(1, NUM_POINTS + 1):
        if board.white_checkers[point] > 0 and board.black_checkers[point] > 0:
            return False, f"Point {point} holds checkers of both colors"

    return True, ""


# ==============================================================================
# BOARD DISPLAY
# ==============================================================================

def board_to_string(board: Board, perspective: Player = Player.WHITE, show_pips: bool = True) -> str:
    """Convert board to string representation.

    Points are labelled in the perspective player's own numbering, so the
    numbers shown are the ones that player types.

    Args:
        board: Board to display
        perspective: Whose numbering to label points with
        show_pips: Include a pip count row

    Returns:
        ASCII representation
    """
    lines = []
    lines.append("=" * 34)
    lines.append(f"Points numbered for {perspective}")
    lines.append("")
    lines.append("Point | White | Black")
    lines.append("------+-------+------")

    for relative in range(NUM_POINTS, 0, -1):
        point = to_absolute(perspective, relative)
        w = board.white_checkers[point]
        b = board.black_checkers[point]
        w_cell = f"{w:2d}" if w else " ."
        b_cell = f"{b:2d}" if b else " ."
        lines.append(f"{relative:2d}    |  {w_cell}   |  {b_cell}")

    lines.append("------+-------+------")
    lines.append(f"BAR   |  {board.white_checkers[BAR_SLOT]:2d}   |  {board.black_checkers[BAR_SLOT]:2d}")
    lines.append(f"OFF   |  {board.white_checkers[OFF_SLOT]:2d}   |  {board.black_checkers[OFF_SLOT]:2d}")
    if show_pips:
        lines.append(f"PIPS  | {pip_count(board, Player.WHITE):3d}   | {pip_count(board, Player.BLACK):3d}")
    lines.append("=" * 34)
    return "\n".join(lines)
