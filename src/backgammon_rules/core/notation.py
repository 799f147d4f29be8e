"""Move notation parsing and formatting.

Grammar (points are in the mover's own numbering):

    <turn> ::= <move> (<whitespace> <move>)*
    <move> ::= <stop> ("/" <stop>)+
    <stop> ::= <integer 1-24> ["*"] | "bar" | "off"

A move with more than two stops is one checker's journey: "8/3/1" is the
request 8→3 followed by 3→1. Separate moves are independent checkers. A
trailing "*" marks a hit and is accepted but ignored; hits are worked out by
the engine.
"""

import re
from typing import Iterable, List

from backgammon_rules.core.errors import InvalidKeyword, InvalidPoint, MalformedNotation
from backgammon_rules.core.types import BAR, OFF, NUM_POINTS, Location, MoveRequest, MoveStep

_POINT_RE = re.compile(r"^(\d+)\*?$")
_WORD_RE = re.compile(r"^[a-z]+$")


def parse(text: str) -> List[MoveRequest]:
    """Parse a turn's worth of notation into elementary move requests.

    Args:
        text: Notation such as "24/18 13/11" or "bar/20/off"

    Returns:
        Requests in the order written. Empty input gives an empty list,
        which submits a pass.

    Raises:
        MalformedNotation: a token that is not a move at all
        InvalidPoint: a point outside 1-24
        InvalidKeyword: an unknown word, or bar/off out of place
    """
    requests: List[MoveRequest] = []
    for group in text.split():
        requests.extend(_parse_group(group))
    return requests


def _parse_group(group: str) -> List[MoveRequest]:
    tokens = group.split("/")
    if len(tokens) < 2:
        raise MalformedNotation(group, "a move needs at least two stops separated by '/'")

    last = len(tokens) - 1
    stops = [_parse_stop(token, group, index, last) for index, token in enumerate(tokens)]
    return [MoveRequest(origin, destination) for origin, destination in zip(stops, stops[1:])]


def _parse_stop(token: str, group: str, index: int, last: int) -> Location:
    if not token:
        raise MalformedNotation(group, "empty stop")

    lowered = token.lower()
    match = _POINT_RE.match(lowered)
    if match:
        point = int(match.group(1))
        if not 1 <= point <= NUM_POINTS:
            raise InvalidPoint(token)
        return point

    if lowered == BAR:
        if index != 0:
            raise InvalidKeyword(token, "'bar' can only start a move")
        return BAR

    if lowered == OFF:
        if index != last:
            raise InvalidKeyword(token, "'off' can only end a move")
        return OFF

    if _WORD_RE.match(lowered):
        raise InvalidKeyword(token)

    raise MalformedNotation(group, f"cannot read '{token}'")


def format_requests(requests: Iterable[MoveRequest]) -> str:
    """Render requests back to notation, one "from/to" pair per request."""
    return " ".join(str(request) for request in requests)


def format_steps(steps: Iterable[MoveStep]) -> str:
    """Render resolved steps, marking hits with "*"."""
    return " ".join(str(step) for step in steps)
