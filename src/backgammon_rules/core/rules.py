"""Move legality engine.

Given a board, the player to move, the unused dice and a list of requested
moves, decide whether the requests form a legal turn and compute the result.
Nothing here mutates the board it is given; every trial runs on a copy.

Rules applied to each request, in order:
1. Bar priority: with checkers on the bar, only entering moves are allowed
2. The origin must hold one of the mover's checkers
3. Checkers only move toward home
4. Bearing off needs every checker in the home board
5. A die must cover the distance exactly; a larger die bears off only from
   the highest occupied point. A request may also be covered by several dice,
   played as single-die hops over open points
6. The landing point must not hold two or more opposing checkers; a single
   opposing checker is hit and sent to the bar

Turn rules:
- The turn must use as many dice as any legal sequence could (searched over
  all orderings of single-die steps, memoised on position + dice)
- If only one die of a non-double can be played, the larger must be played
  when it is playable
"""

from dataclasses import dataclass, field
from itertools import permutations
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from loguru import logger

from backgammon_rules.core.board import (
    can_bear_off,
    checkers_on_bar,
    copy_board,
    highest_occupied_point,
    is_blot,
    is_open,
    to_absolute,
    total_checkers,
)
from backgammon_rules.core.dice import DiceRoll
from backgammon_rules.core.errors import (
    BlockedDestination,
    IllegalBearOff,
    IllegalDistance,
    IllegalMoveError,
    IncompleteTurn,
    MustEnterFromBar,
    MustUseLargerDie,
    NoCheckerAtOrigin,
    WrongDirection,
)
from backgammon_rules.core.types import (
    BAR,
    BAR_SLOT,
    OFF,
    OFF_SLOT,
    NUM_POINTS,
    Board,
    LegalSteps,
    Location,
    Move,
    MoveKind,
    MoveRequest,
    MoveStep,
    Player,
    location_pips,
)

DiceLike = Union[DiceRoll, Iterable[int]]

# (board after the requests, dice left, steps played)
_Outcome = Tuple[Board, Tuple[int, ...], Move]


# ==============================================================================
# RESULTS
# ==============================================================================

@dataclass
class Accepted:
    """A legal turn.

    Attributes:
        board: Position after the turn (a new board)
        dice_used: Die values consumed, in play order
        steps: Resolved single-die steps, in play order
        remaining: Die values left unused (only when none could be played)
    """
    board: Board
    dice_used: List[int]
    steps: Move
    remaining: List[int] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return True


@dataclass
class Rejected:
    """An illegal turn and the rule it broke."""
    error: IllegalMoveError

    @property
    def accepted(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return str(self.error)


TurnResult = Union[Accepted, Rejected]


# ==============================================================================
# STEP PRIMITIVES
# ==============================================================================

def _remaining(dice: DiceLike) -> Tuple[int, ...]:
    values = dice.remaining_values() if isinstance(dice, DiceRoll) else list(dice)
    return tuple(sorted(values, reverse=True))


def _without(values: Sequence[int], die: int) -> Tuple[int, ...]:
    rest = list(values)
    rest.remove(die)
    return tuple(rest)


def _slot(player: Player, location: Location) -> int:
    if location == BAR:
        return BAR_SLOT
    if location == OFF:
        return OFF_SLOT
    return to_absolute(player, location)


def _own_count(board: Board, player: Player, location: Location) -> int:
    return board.get_checkers(player, _slot(player, location))


def _opposing_count(board: Board, player: Player, point: int) -> int:
    return board.get_checkers(player.opponent(), to_absolute(player, point))


def _apply_in_place(board: Board, player: Player, step: MoveStep) -> None:
    own = board.checkers(player)
    origin = _slot(player, step.origin)
    destination = _slot(player, step.destination)

    if step.destination != OFF:
        opposing = board.checkers(player.opponent())
        if opposing[destination] == 1:
            opposing[destination] = 0
            opposing[BAR_SLOT] += 1
        assert opposing[destination] == 0, f"landed on a held point: {step}"

    own[origin] -= 1
    assert own[origin] >= 0, f"moved a checker that is not there: {step}"
    own[destination] += 1


def apply_step(board: Board, player: Player, step: MoveStep) -> Board:
    """Play one resolved step on a copy of the board.

    Args:
        board: Position before the step (left untouched)
        player: Player making the step
        step: A step produced by the engine

    Returns:
        New board with the step applied (and any hit blot on the bar)
    """
    result = copy_board(board)
    _apply_in_place(result, player, step)
    return result


def _step_for_die(board: Board, player: Player, origin: Location, die: int) -> Optional[MoveStep]:
    """The step a checker on `origin` makes with `die`, if that is legal."""
    origin_pips = location_pips(origin)
    target = origin_pips - die

    if target >= 1:
        landing = to_absolute(player, target)
        if not is_open(board, landing, player):
            return None
        return MoveStep(origin, target, die, hits_opponent=is_blot(board, landing, player.opponent()))

    if not can_bear_off(board, player):
        return None
    # Overshooting is only allowed from the highest occupied point
    if target < 0 and highest_occupied_point(board, player) > origin_pips:
        return None
    return MoveStep(origin, OFF, die)


def _origins(board: Board, player: Player) -> List[Location]:
    if checkers_on_bar(board, player) > 0:
        return [BAR]
    return [
        point for point in range(NUM_POINTS, 0, -1)
        if board.get_checkers(player, to_absolute(player, point)) > 0
    ]


# ==============================================================================
# SEARCH
# ==============================================================================

def legal_steps(board: Board, player: Player, dice: DiceLike) -> LegalSteps:
    """Every single-die step the player could make right now.

    Args:
        board: Current position
        player: Player to move
        dice: Unused dice (a DiceRoll or plain values)

    Returns:
        Steps ordered by die (largest first), then by origin (farthest first)
    """
    steps = []
    origins = _origins(board, player)
    for die in sorted(set(_remaining(dice)), reverse=True):
        for origin in origins:
            step = _step_for_die(board, player, origin, die)
            if step is not None:
                steps.append(step)
    return steps


def has_legal_move(board: Board, player: Player, dice: DiceLike) -> bool:
    """Check whether at least one die can be played."""
    return bool(legal_steps(board, player, dice))


def max_dice_playable(board: Board, player: Player, dice: DiceLike) -> int:
    """Most dice any legal sequence of steps could use this turn."""
    cache: Dict[Tuple[bytes, Tuple[int, ...]], int] = {}

    def best(position: Board, remaining: Tuple[int, ...]) -> int:
        if not remaining:
            return 0
        key = (position.key(), remaining)
        if key in cache:
            return cache[key]

        result = 0
        for step in legal_steps(position, player, remaining):
            following = apply_step(position, player, step)
            result = max(result, 1 + best(following, _without(remaining, step.die_used)))
            if result == len(remaining):
                break

        cache[key] = result
        return result

    remaining = _remaining(dice)
    result = best(board, remaining)
    logger.debug("{} can play {} of {} (searched {} positions)", player, result, list(remaining), len(cache))
    return result


def _required_die(board: Board, player: Player, remaining: Tuple[int, ...], most: int) -> Optional[int]:
    """The die a one-die turn must use, if the larger-die rule applies."""
    if most != 1 or len(remaining) != 2 or remaining[0] == remaining[1]:
        return None
    larger = max(remaining)
    if any(step.die_used == larger for step in legal_steps(board, player, remaining)):
        return larger
    return None


# ==============================================================================
# REQUEST RESOLUTION
# ==============================================================================

def _direct_plans(board: Board, player: Player, remaining: Tuple[int, ...], request: MoveRequest) -> List[Move]:
    plans = []
    distance = request.distance
    # Exact die first, then larger dice for an overshooting bear-off
    for die in sorted(set(remaining)):
        if die < distance or (die > distance and request.kind is not MoveKind.BEAR_OFF):
            continue
        step = _step_for_die(board, player, request.origin, die)
        if step is not None and step.destination == request.destination:
            plans.append((step,))
    return plans


def _dice_sums(remaining: Tuple[int, ...], distance: int, overshoot: bool = False) -> List[Tuple[int, ...]]:
    """Orders of two or more dice that cover `distance`.

    With `overshoot`, the last die may carry past the distance (bearing off).
    """
    orders = set()
    for size in range(2, len(remaining) + 1):
        for order in permutations(remaining, size):
            total = sum(order)
            if total == distance or (overshoot and total > distance and total - order[-1] < distance):
                orders.add(order)
    return sorted(orders, reverse=True)


def _compound_plans(board: Board, player: Player, remaining: Tuple[int, ...], request: MoveRequest) -> List[Move]:
    plans = []
    overshoot = request.kind is MoveKind.BEAR_OFF
    for order in _dice_sums(remaining, request.distance, overshoot):
        position = board.copy()
        location = request.origin
        steps = []
        for die in order:
            # Another checker still on the bar must enter before this one moves on
            if location != BAR and checkers_on_bar(position, player) > 0:
                break
            step = _step_for_die(position, player, location, die)
            if step is None or (step.destination == OFF and len(steps) < len(order) - 1):
                break
            _apply_in_place(position, player, step)
            steps.append(step)
            location = step.destination
        else:
            if location == request.destination:
                plans.append(tuple(steps))

    # Prefer plans that do not hit on the way through
    return sorted(plans, key=lambda plan: sum(step.hits_opponent for step in plan[:-1]))


def _check_origin(board: Board, player: Player, request: MoveRequest) -> None:
    if request.origin == OFF:
        raise NoCheckerAtOrigin(request, "borne-off checkers never re-enter")
    if request.destination == BAR:
        raise WrongDirection(request, "checkers cannot be moved onto the bar")

    kind = request.kind
    on_bar = checkers_on_bar(board, player)
    if kind is MoveKind.ENTER:
        if on_bar == 0:
            raise NoCheckerAtOrigin(request, "you have no checker on the bar")
    elif on_bar > 0:
        raise MustEnterFromBar(request)
    elif _own_count(board, player, request.origin) == 0:
        if _opposing_count(board, player, request.origin) > 0:
            raise NoCheckerAtOrigin(request, "that point holds your opponent's checkers")
        raise NoCheckerAtOrigin(request)

    if request.distance <= 0:
        raise WrongDirection(request)


def _resolve(board: Board, player: Player, remaining: Tuple[int, ...], request: MoveRequest) -> List[Move]:
    """All ways the dice can play one request, or the reason there are none."""
    _check_origin(board, player, request)

    kind = request.kind
    distance = request.distance
    plans = []
    if kind is not MoveKind.BEAR_OFF or can_bear_off(board, player):
        plans = _direct_plans(board, player, remaining, request)
    if not plans:
        plans = _compound_plans(board, player, remaining, request)
    if plans:
        return plans

    if kind is MoveKind.BEAR_OFF:
        if not can_bear_off(board, player):
            raise IllegalBearOff(request, "all fifteen checkers must be in the home board to bear off")
        exact = distance in remaining or _dice_sums(remaining, distance)
        if not exact and (any(die > distance for die in remaining) or _dice_sums(remaining, distance, True)):
            raise IllegalBearOff(request, "a larger die can only bear off from your highest point")

    reachable = distance in remaining or bool(_dice_sums(remaining, distance))
    if not reachable:
        if not remaining:
            raise IllegalDistance(request, "no dice left to play")
        raise IllegalDistance(request, f"{distance} pips cannot be played with {list(remaining)}")

    if kind is MoveKind.ENTER and checkers_on_bar(board, player) > 1 and distance not in remaining:
        raise MustEnterFromBar(request, "every checker on the bar must enter before one moves on")

    if kind is not MoveKind.BEAR_OFF and _opposing_count(board, player, request.destination) >= 2:
        raise BlockedDestination(request)
    raise BlockedDestination(request, "every way to play this distance lands on a blocked point")


def _outcomes(
    board: Board,
    player: Player,
    remaining: Tuple[int, ...],
    requests: Sequence[MoveRequest],
) -> Iterator[_Outcome]:
    """Every way of playing the requests in order.

    Raises the first error met if no way exists.
    """
    if not requests:
        yield board, remaining, ()
        return

    plans = _resolve(board, player, remaining, requests[0])
    first_error: Optional[IllegalMoveError] = None
    produced = False
    for plan in plans:
        position = board.copy()
        rest = remaining
        for step in plan:
            _apply_in_place(position, player, step)
            rest = _without(rest, step.die_used)
        try:
            for final, left, steps in _outcomes(position, player, rest, requests[1:]):
                produced = True
                yield final, left, plan + steps
        except IllegalMoveError as error:
            if first_error is None:
                first_error = error

    if not produced and first_error is not None:
        raise first_error


# ==============================================================================
# TURN VALIDATION
# ==============================================================================

def check_turn(board: Board, player: Player, dice: DiceLike, requests: Sequence[MoveRequest]) -> Accepted:
    """Validate a full turn, raising on the first broken rule.

    Args:
        board: Position before the turn (not modified)
        player: Player making the turn
        dice: Unused dice for the turn
        requests: Requested moves in the order written

    Returns:
        Accepted with the resulting board

    Raises:
        IllegalMoveError: one of its subclasses naming the rule broken
    """
    remaining = _remaining(dice)
    most = max_dice_playable(board, player, remaining)
    required = _required_die(board, player, remaining, most)

    shortfall: Optional[IllegalMoveError] = None
    for final, left, steps in _outcomes(board, player, remaining, list(requests)):
        used = [step.die_used for step in steps]
        if len(used) < most:
            shortfall = shortfall or IncompleteTurn(
                message=f"{len(used)} of {len(remaining)} dice used, but {most} could be played",
            )
            continue
        if required is not None and required not in used:
            shortfall = MustUseLargerDie()
            continue

        for side in (Player.WHITE, Player.BLACK):
            assert total_checkers(final, side) == total_checkers(board, side), "checker count changed"
        if final is board:
            final = board.copy()
        return Accepted(board=final, dice_used=used, steps=steps, remaining=list(left))

    assert shortfall is not None
    raise shortfall


def validate_turn(board: Board, player: Player, dice: DiceLike, requests: Sequence[MoveRequest]) -> TurnResult:
    """Validate a full turn without raising.

    Returns:
        Accepted(resulting board, dice used, steps) or Rejected(error)
    """
    try:
        result = check_turn(board, player, dice, requests)
    except IllegalMoveError as error:
        logger.debug("Rejected {} for {}: {}", [str(r) for r in requests], player, error)
        return Rejected(error)
    logger.debug("Accepted {} for {}", [str(s) for s in result.steps], player)
    return result
