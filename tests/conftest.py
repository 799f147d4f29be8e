"""Pytest configuration and shared fixtures."""

import pytest

from backgammon_rules.core.board import empty_board, initial_board
from backgammon_rules.core.types import Player


@pytest.fixture
def sample_board():
    """Create a sample board state for testing."""
    return initial_board()


@pytest.fixture
def make_board():
    """Build a board from {absolute point: count} maps.

    Slot 0 is the color's bar and slot 25 its off area, as in the board
    arrays. Counts not given are zero.
    """
    def _make(white=None, black=None):
        board = empty_board()
        for point, count in (white or {}).items():
            board.set_checkers(Player.WHITE, point, count)
        for point, count in (black or {}).items():
            board.set_checkers(Player.BLACK, point, count)
        return board

    return _make
