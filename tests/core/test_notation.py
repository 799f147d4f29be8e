"""Tests for notation parsing."""

import pytest
from backgammon_rules.core.errors import InvalidKeyword, InvalidPoint, MalformedNotation, NotationError
from backgammon_rules.core.notation import format_requests, format_steps, parse
from backgammon_rules.core.types import BAR, OFF, MoveKind, MoveRequest, MoveStep


class TestParse:
    """Tests for parse()."""

    def test_single_move(self):
        assert parse("1/2") == [MoveRequest(1, 2)]

    def test_chained_move(self):
        """A chain is one checker's journey, split into hops."""
        assert parse("8/3/1") == [MoveRequest(8, 3), MoveRequest(3, 1)]

    def test_independent_moves(self):
        assert parse("1/2 5/9") == [MoveRequest(1, 2), MoveRequest(5, 9)]

    def test_extra_whitespace(self):
        assert parse("  24/18 \t 13/11\n") == [MoveRequest(24, 18), MoveRequest(13, 11)]

    def test_bar_and_off(self):
        requests = parse("bar/20 6/off")
        assert requests == [MoveRequest(BAR, 20), MoveRequest(6, OFF)]
        assert requests[0].kind is MoveKind.ENTER
        assert requests[1].kind is MoveKind.BEAR_OFF

    def test_keywords_ignore_case(self):
        assert parse("BAR/22/Off") == [MoveRequest(BAR, 22), MoveRequest(22, OFF)]

    def test_hit_marker_is_ignored(self):
        assert parse("13/7*/5") == [MoveRequest(13, 7), MoveRequest(7, 5)]

    def test_empty_input_is_a_pass(self):
        assert parse("") == []
        assert parse("   ") == []


class TestParseErrors:
    """Tests for rejected notation."""

    @pytest.mark.parametrize("text", ["1", "13", "1//2", "/5", "5/", "1x/2", "13-7", "6/5?"])
    def test_malformed(self, text):
        with pytest.raises(MalformedNotation):
            parse(text)

    @pytest.mark.parametrize("text", ["0/5", "25/20", "13/99"])
    def test_invalid_point(self, text):
        with pytest.raises(InvalidPoint) as excinfo:
            parse(text)
        assert excinfo.value.token in text

    @pytest.mark.parametrize("text", ["foo/3", "13/home", "3/bar", "off/3", "6/off/3", "13/bar/7"])
    def test_invalid_keyword(self, text):
        with pytest.raises(InvalidKeyword):
            parse(text)

    def test_all_notation_errors_share_a_base(self):
        for text in ["1", "0/5", "foo/3"]:
            with pytest.raises(NotationError):
                parse(text)

    def test_error_in_later_group(self):
        with pytest.raises(InvalidPoint):
            parse("13/7 8/30")


class TestFormat:
    """Tests for rendering notation."""

    def test_format_requests(self):
        assert format_requests(parse("bar/20 8/3/1")) == "bar/20 8/3 3/1"

    def test_format_steps(self):
        steps = [MoveStep(13, 10, 3, hits_opponent=True), MoveStep(6, OFF, 6)]
        assert format_steps(steps) == "13/10* 6/off"
        assert format_steps([]) == ""
