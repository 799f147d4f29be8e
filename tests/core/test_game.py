"""Tests for the game state machine."""

import pytest
from backgammon_rules.core.board import empty_board, initial_board
from backgammon_rules.core.errors import (
    BlockedDestination,
    GameAlreadyOver,
    InvalidDiceValue,
    MalformedNotation,
    OutOfTurn,
    WrongPhase,
)
from backgammon_rules.core.game import Game, GamePhase
from backgammon_rules.core.types import MoveRequest, Player


@pytest.fixture
def forfeit_board(make_board):
    """White is on the bar facing a closed home board."""
    return make_board(
        white={0: 1, 6: 14},
        black={19: 2, 20: 2, 21: 2, 22: 2, 23: 2, 24: 2, 1: 3},
    )


@pytest.fixture
def last_checker_board(make_board):
    """White has one checker left on the 1-point; black has not started home."""
    return make_board(white={25: 14, 1: 1}, black={12: 15})


class TestTurnCycle:
    """Phases and turn order."""

    def test_new_game(self):
        game = Game()
        assert game.current_player == Player.WHITE
        assert game.phase is GamePhase.AWAITING_ROLL
        assert game.dice is None
        assert game.board == initial_board()
        assert not game.is_over
        assert game.winner is None

    def test_roll_then_play(self):
        game = Game()
        assert game.roll(3, 1)
        assert game.phase is GamePhase.AWAITING_MOVES
        assert game.remaining_dice() == [3, 1]

        game.play("8/5 6/5")

        assert game.current_player == Player.BLACK
        assert game.phase is GamePhase.AWAITING_ROLL
        assert game.board.white_checkers[5] == 2
        assert len(game.history) == 1
        player, dice, steps = game.history[0]
        assert player == Player.WHITE
        assert dice == (3, 1)
        assert len(steps) == 2

    def test_play_parsed_requests(self):
        game = Game()
        game.roll(6, 5)
        game.play([MoveRequest(24, 18), MoveRequest(18, 13)])
        assert game.board.white_checkers[13] == 6

    def test_black_follows_white(self):
        game = Game()
        game.roll(3, 1)
        game.play("8/5 6/5")
        game.roll(3, 1, player=Player.BLACK)
        game.play("8/5 6/5", player=Player.BLACK)

        assert game.board.black_checkers[20] == 2
        assert game.current_player == Player.WHITE

    def test_board_property_is_a_copy(self):
        game = Game()
        board = game.board
        board.white_checkers[6] = 0
        assert game.board.white_checkers[6] == 5

    def test_legal_steps_only_after_roll(self):
        game = Game()
        assert game.legal_steps() == []
        game.roll(6, 6)
        assert game.legal_steps()

    def test_reset(self):
        game = Game()
        game.roll(3, 1)
        game.play("8/5 6/5")
        game.reset(Player.BLACK)

        assert game.current_player == Player.BLACK
        assert game.board == initial_board()
        assert game.history == []


class TestOpeningRoll:
    """Deciding who starts."""

    def test_higher_die_starts_with_both(self):
        game = Game.from_opening_roll(3, 5)

        assert game.current_player == Player.BLACK
        assert game.phase is GamePhase.AWAITING_MOVES
        assert game.remaining_dice() == [5, 3]

        game.play("13/8 24/21")
        assert game.board.black_checkers[17] == 4
        assert game.board.black_checkers[4] == 1
        assert game.current_player == Player.WHITE

    def test_white_starts(self):
        assert Game.from_opening_roll(6, 1).current_player == Player.WHITE

    def test_tie_is_rejected(self):
        with pytest.raises(InvalidDiceValue):
            Game.from_opening_roll(4, 4)


class TestGuards:
    """Actions at the wrong time leave the game untouched."""

    def test_play_before_roll(self):
        with pytest.raises(WrongPhase):
            Game().play("8/5 6/5")

    def test_roll_twice(self):
        game = Game()
        game.roll(3, 1)
        with pytest.raises(WrongPhase):
            game.roll(2, 2)
        assert game.remaining_dice() == [3, 1]

    def test_out_of_turn(self):
        game = Game()
        with pytest.raises(OutOfTurn):
            game.roll(3, 1, player=Player.BLACK)
        assert game.phase is GamePhase.AWAITING_ROLL

        game.roll(3, 1)
        with pytest.raises(OutOfTurn):
            game.play("8/5 6/5", player=Player.BLACK)

    def test_invalid_die(self):
        game = Game()
        with pytest.raises(InvalidDiceValue):
            game.roll(7, 1)
        assert game.phase is GamePhase.AWAITING_ROLL
        assert game.dice is None

    def test_rejected_turn_changes_nothing(self):
        game = Game()
        game.roll(1, 2)
        with pytest.raises(BlockedDestination):
            game.play("13/12 13/11")

        assert game.board == initial_board()
        assert game.phase is GamePhase.AWAITING_MOVES
        assert game.current_player == Player.WHITE
        assert game.remaining_dice() == [2, 1]
        assert game.history == []

    def test_bad_notation_changes_nothing(self):
        game = Game()
        game.roll(3, 1)
        with pytest.raises(MalformedNotation):
            game.play("13")
        assert game.remaining_dice() == [3, 1]

    def test_validate_is_a_dry_run(self):
        game = Game()
        game.roll(3, 1)

        assert game.validate("8/5 6/5").accepted
        assert not game.validate("13/9 13/12").accepted
        assert game.legal("24/21/20")
        assert not game.legal("13/8")
        assert game.board == initial_board()
        assert game.remaining_dice() == [3, 1]

    def test_invalid_board(self):
        with pytest.raises(ValueError):
            Game(board=empty_board())


class TestForfeit:
    """Rolls with no legal move."""

    def test_unplayable_roll_passes_turn(self, forfeit_board):
        game = Game(Player.WHITE, forfeit_board)

        assert not game.roll(3, 5)
        assert game.current_player == Player.BLACK
        assert game.phase is GamePhase.AWAITING_ROLL
        assert game.history == [(Player.WHITE, (3, 5), ())]
        assert game.board == forfeit_board


class TestGameOver:
    """Bearing off the last checker."""

    def test_last_checker_wins(self, last_checker_board):
        game = Game(Player.WHITE, last_checker_board)
        game.roll(2, 1)
        result = game.play("1/off")

        # Either die bears off, so the larger is required
        assert result.dice_used == [2]
        assert game.is_over
        assert game.phase is GamePhase.GAME_OVER
        assert game.winner == Player.WHITE
        assert game.outcome.points == 2
        assert game.dice is None

    def test_actions_after_game_over(self, last_checker_board):
        game = Game(Player.WHITE, last_checker_board)
        game.roll(2, 1)
        game.play("1/off")

        with pytest.raises(GameAlreadyOver):
            game.roll(3, 4)
        with pytest.raises(GameAlreadyOver):
            game.play("6/5")

    def test_finished_board_starts_over(self, make_board):
        game = Game(board=make_board(white={25: 15}, black={19: 15}))
        assert game.is_over
        assert game.outcome.points == 2


class TestSnapshot:
    """Rendering data."""

    def test_initial_snapshot(self):
        snapshot = Game().snapshot()

        assert len(snapshot.points) == 24
        assert snapshot.points[23] == (2, Player.WHITE)
        assert snapshot.points[0] == (2, Player.BLACK)
        assert snapshot.points[1] == (0, None)
        assert snapshot.bar_count(Player.WHITE) == 0
        assert snapshot.off_count(Player.BLACK) == 0
        assert snapshot.current_player == Player.WHITE
        assert snapshot.remaining_dice == ()
        assert snapshot.phase == "awaiting roll"
        assert snapshot.outcome is None

    def test_snapshot_after_roll(self):
        game = Game()
        game.roll(4, 4)
        snapshot = game.snapshot()
        assert snapshot.remaining_dice == (4, 4, 4, 4)
        assert snapshot.phase == "awaiting moves"
