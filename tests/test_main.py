"""Tests for the command-line entrypoint."""

import pytest
from backgammon_engine.main import build_parser, main, rules_from_args


class TestRulesFromArgs:
    """Tests for mapping flags onto Rules."""

    def test_defaults(self):
        rules = rules_from_args(build_parser().parse_args([]))
        assert rules.points == 7
        assert rules.crawford
        assert not rules.murphy

    def test_flags(self):
        args = build_parser().parse_args(
            ["--points", "5", "--no-crawford", "--murphy", "2", "--jacoby", "--raccoon"]
        )
        rules = rules_from_args(args)
        assert rules.points == 5
        assert not rules.crawford
        assert rules.murphy
        assert rules.murphy_limit == 2
        assert rules.jacoby
        assert rules.beaver
        assert rules.raccoon

    def test_holland_turns_on_crawford(self):
        rules = rules_from_args(build_parser().parse_args(["--no-crawford", "--holland"]))
        assert rules.crawford
        assert rules.holland


class TestMain:
    """Tests for running the CLI."""

    def test_prints_new_game(self, capsys):
        assert main(["--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Who plays: Nobody" in out
        assert "Player 0 pip count: 167" in out

    def test_opening(self, capsys):
        assert main(["--seed", "1", "--opening"]) == 0
        out = capsys.readouterr().out
        assert "Phase: move" in out

    def test_log_level_case_insensitive(self):
        args = build_parser().parse_args(["--log-level", "debug"])
        assert args.log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(SystemExit) as exc:
            main(["--log-level", "chatty"])
        assert exc.value.code == 2

    def test_invalid_rules(self):
        with pytest.raises(SystemExit) as exc:
            main(["--points", "0"])
        assert exc.value.code == 2
