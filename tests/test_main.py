"""Tests for the command-line entrypoint and its configuration."""

import pytest
from backgammon_rules.config import GameConfig
from backgammon_rules.main import build_parser, main, play_game
from backgammon_rules.core.types import Player


def scripted(lines):
    """A read_line stand-in that answers prompts from a list, then hits EOF."""
    prompts = []
    answers = iter(lines)

    def read_line(prompt):
        prompts.append(prompt)
        try:
            return next(answers)
        except StopIteration:
            raise EOFError

    return read_line, prompts


class TestParser:
    """Tests for argument parsing."""

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])
        assert "backgammon-rules" in capsys.readouterr().out

    def test_play_options(self):
        args = build_parser().parse_args(
            ["play", "--seed", "9", "--first", "black", "--log-level", "debug", "--no-pips"]
        )
        config = GameConfig.from_args(args)

        assert config.seed == 9
        assert config.starting_player == Player.BLACK
        assert config.log_level == "DEBUG"
        assert not config.show_pips

    def test_play_defaults(self):
        config = GameConfig.from_args(build_parser().parse_args(["play"]))
        assert config.seed is None
        assert config.starting_player is None
        assert config.log_level == "WARNING"
        assert config.show_pips

    def test_unknown_log_level(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["play", "--log-level", "loud"])


class TestGameConfig:
    """Tests for GameConfig validation."""

    def test_level_is_normalised(self):
        assert GameConfig(log_level="info").log_level == "INFO"

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            GameConfig(log_level="verbose")


class TestMain:
    """Tests for main()."""

    def test_show(self, capsys):
        assert main(["show"]) == 0
        out = capsys.readouterr().out
        assert "BAR" in out
        assert "167" in out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out


class TestPlayGame:
    """Tests for the interactive loop with scripted input."""

    def test_quit(self):
        read_line, prompts = scripted(["quit"])
        output = []
        config = GameConfig(seed=1, starting_player=Player.WHITE)

        assert play_game(config, read_line=read_line, write=output.append) == 0
        assert prompts == ["white> "]
        assert "white to play" in output[-1]

    def test_end_of_input(self):
        read_line, _ = scripted([])
        config = GameConfig(seed=1, starting_player=Player.WHITE)
        assert play_game(config, read_line=read_line, write=lambda text: None) == 1

    def test_error_keeps_same_player(self):
        read_line, prompts = scripted(["nonsense", "EXIT"])
        output = []
        config = GameConfig(seed=2, starting_player=Player.BLACK)

        assert play_game(config, read_line=read_line, write=output.append) == 0
        assert any(line.startswith("Error:") for line in output)
        assert prompts == ["black> ", "black> "]

    def test_empty_line_is_a_pass_attempt(self):
        """From the opening position a pass is never legal."""
        read_line, prompts = scripted(["", "quit"])
        output = []
        config = GameConfig(seed=3, starting_player=Player.WHITE)

        assert play_game(config, read_line=read_line, write=output.append) == 0
        assert any("could be played" in line for line in output if line.startswith("Error:"))
        assert len(prompts) == 2

    def test_opening_throw_is_announced(self):
        read_line, _ = scripted(["quit"])
        output = []

        play_game(GameConfig(seed=5), read_line=read_line, write=output.append)
        assert output[0].startswith("Opening throw: white")

    def test_hidden_pips(self):
        read_line, _ = scripted(["quit"])
        output = []
        config = GameConfig(seed=1, starting_player=Player.WHITE, show_pips=False)

        play_game(config, read_line=read_line, write=output.append)
        assert "PIPS" not in output[-1]
