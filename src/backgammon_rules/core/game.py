"""Turn and game state machine.

A Game owns one board and moves through these phases:

    AWAITING_ROLL(player) → AWAITING_MOVES(player, dice) → AWAITING_ROLL(opponent) ...
                                                         → GAME_OVER(winner)

A roll that leaves no legal move forfeits the turn on the spot. A turn is
applied only once the rules engine has accepted all of it; the game ends as
soon as a player has borne off all fifteen checkers.
"""

from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from loguru import logger

from backgammon_rules.core import rules
from backgammon_rules.core.board import (
    checkers_at,
    checkers_borne_off,
    checkers_on_bar,
    initial_board,
    is_valid_board,
    top_color,
    winner,
)
from backgammon_rules.core.dice import DiceRoll
from backgammon_rules.core.errors import GameAlreadyOver, InvalidDiceValue, OutOfTurn, WrongPhase
from backgammon_rules.core.notation import format_steps, parse
from backgammon_rules.core.types import (
    NUM_POINTS,
    Board,
    BoardSnapshot,
    Dice,
    GameOutcome,
    LegalSteps,
    Move,
    MoveRequest,
    Player,
)

Moves = Union[str, Iterable[MoveRequest]]


class GamePhase(Enum):
    """Where a game is in its turn cycle."""
    AWAITING_ROLL = "awaiting roll"
    AWAITING_MOVES = "awaiting moves"
    GAME_OVER = "game over"

    def __str__(self) -> str:
        return self.value


class Game:
    """One game of backgammon between two players.

    Attributes:
        current_player: Player to act
        phase: Current phase of the turn cycle
        dice: Dice of the current turn (None while awaiting a roll)
        outcome: Result once the game is over
        history: (player, dice, steps played) for every finished turn
    """

    def __init__(self, starting_player: Player = Player.WHITE, board: Optional[Board] = None):
        board = initial_board() if board is None else board.copy()
        valid, message = is_valid_board(board)
        if not valid:
            raise ValueError(f"Cannot start a game from an invalid board: {message}")

        self._board = board
        self.current_player = starting_player
        self.phase = GamePhase.AWAITING_ROLL
        self.dice: Optional[DiceRoll] = None
        self.outcome: Optional[GameOutcome] = winner(board)
        self.history: List[Tuple[Player, Dice, Move]] = []

        if self.outcome is not None:
            self.phase = GamePhase.GAME_OVER

    @classmethod
    def from_opening_roll(cls, white_die: int, black_die: int, board: Optional[Board] = None) -> "Game":
        """Start a game from the opening throw.

        Each player throws one die; the higher die moves first and plays
        both values as their first roll. Ties must be re-thrown.

        Raises:
            InvalidDiceValue: for a face outside 1-6 or a tie
        """
        opening = DiceRoll(white_die, black_die)
        if opening.is_doubles:
            raise InvalidDiceValue(white_die, "the opening throw cannot be a tie; throw again")

        starter = Player.WHITE if white_die > black_die else Player.BLACK
        game = cls(starter, board)
        logger.info("{} wins the opening throw {}", starter, opening)
        game._start_turn(opening)
        return game

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        """Copy of the current position."""
        return self._board.copy()

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    @property
    def winner(self) -> Optional[Player]:
        return self.outcome.winner if self.outcome is not None else None

    def remaining_dice(self) -> List[int]:
        return self.dice.remaining_values() if self.dice is not None else []

    def legal_steps(self) -> LegalSteps:
        """Single-die steps available to the current player right now."""
        if self.phase is not GamePhase.AWAITING_MOVES:
            return []
        return rules.legal_steps(self._board, self.current_player, self.dice)

    def snapshot(self) -> BoardSnapshot:
        """Everything a renderer needs, with no rules knowledge required."""
        points = []
        for point in range(1, NUM_POINTS + 1):
            color = top_color(self._board, point)
            count = checkers_at(self._board, point, color) if color is not None else 0
            points.append((count, color))

        sides = (Player.WHITE, Player.BLACK)
        return BoardSnapshot(
            points=tuple(points),
            bar=tuple((side, checkers_on_bar(self._board, side)) for side in sides),
            off=tuple((side, checkers_borne_off(self._board, side)) for side in sides),
            current_player=self.current_player,
            remaining_dice=tuple(self.remaining_dice()),
            phase=str(self.phase),
            outcome=self.outcome,
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def roll(self, die1: int, die2: int, player: Optional[Player] = None) -> bool:
        """Hand the current player their dice.

        Returns:
            True if the player now has moves to make, False if the roll was
            unplayable and the turn passed straight to the opponent
        """
        self._require(GamePhase.AWAITING_ROLL, "roll", player)
        return self._start_turn(DiceRoll(die1, die2))

    def validate(self, moves: Moves) -> rules.TurnResult:
        """Check a turn without playing it."""
        self._require(GamePhase.AWAITING_MOVES, "move")
        return rules.validate_turn(self._board, self.current_player, self.dice, self._requests(moves))

    def legal(self, moves: Moves) -> bool:
        return self.validate(moves).accepted

    def play(self, moves: Moves, player: Optional[Player] = None) -> rules.Accepted:
        """Play the current player's whole turn.

        Args:
            moves: Notation text or parsed requests
            player: If given, must be the player whose turn it is

        Returns:
            The accepted turn

        Raises:
            NotationError, IllegalMoveError, GameStateError: the turn was not
                played and nothing changed
        """
        self._require(GamePhase.AWAITING_MOVES, "move", player)
        requests = self._requests(moves)
        result = rules.check_turn(self._board, self.current_player, self.dice, requests)

        self._board = result.board
        for value in result.dice_used:
            self.dice.consume(value)
        valid, message = is_valid_board(self._board)
        assert valid, message

        mover = self.current_player
        self.history.append((mover, self.dice.dice, result.steps))
        logger.debug("{} played {} with {}", mover, format_steps(result.steps) or "nothing", self.dice)

        self.outcome = winner(self._board)
        if self.outcome is not None:
            self.phase = GamePhase.GAME_OVER
            self.dice = None
            logger.info("{} wins ({} point(s))", self.outcome.winner, self.outcome.points)
        else:
            self._end_turn()
        return result

    def reset(self, starting_player: Player = Player.WHITE) -> None:
        """Start over from the standard position with a new board."""
        self.__init__(starting_player)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, phase: GamePhase, action: str, player: Optional[Player] = None) -> None:
        if self.phase is GamePhase.GAME_OVER:
            raise GameAlreadyOver(self.outcome.winner)
        if player is not None and player != self.current_player:
            raise OutOfTurn(player, self.current_player)
        if self.phase is not phase:
            raise WrongPhase(action, self.phase)

    @staticmethod
    def _requests(moves: Moves) -> List[MoveRequest]:
        return parse(moves) if isinstance(moves, str) else list(moves)

    def _start_turn(self, dice: DiceRoll) -> bool:
        self.dice = dice
        self.phase = GamePhase.AWAITING_MOVES
        if rules.has_legal_move(self._board, self.current_player, dice):
            return True

        logger.info("{} cannot play {}; turn passes", self.current_player, dice)
        self.history.append((self.current_player, dice.dice, ()))
        self._end_turn()
        return False

    def _end_turn(self) -> None:
        self.current_player = self.current_player.opponent()
        self.dice = None
        self.phase = GamePhase.AWAITING_ROLL
