"""Tests for configuration loading."""

import pytest

from pokertable.config import BotConfig, Config, TableConfig
from pokertable.dealer import TimeoutPolicy


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


class TestDefaults:
    def test_defaults(self):
        config = Config()
        assert config.table.starting_stack == 2000
        assert (config.table.small_blind, config.table.big_blind) == (10, 20)
        assert config.table.orbits_per_level == 2
        assert config.bot.action_delay == 3.0
        assert config.human.timeout_policy is TimeoutPolicy.CHECK_OR_FOLD

    def test_no_file_gives_defaults(self, isolated):
        assert Config.load() == Config()

    def test_invalid_blinds(self):
        with pytest.raises(ValueError):
            TableConfig(small_blind=0)
        with pytest.raises(ValueError):
            TableConfig(starting_stack=-5)

    def test_effective_delay(self):
        assert BotConfig(action_delay=2.0).effective_delay == 2.0
        assert BotConfig(action_delay=2.0, speed_mode=True).effective_delay == 0.0

    def test_tournament_config(self):
        tc = TableConfig(starting_stack=500, small_blind=25, big_blind=50).tournament(max_hands=9)
        assert (tc.starting_stack, tc.small_blind, tc.big_blind, tc.max_hands) == (500, 25, 50, 9)


class TestFile:
    def test_load_explicit_path(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(
            "[table]\n"
            "starting_stack = 1500\n"
            "big_blind = 40\n"
            "small_blind = 20\n"
            "seed = 42\n"
            "[bot]\n"
            "action_delay = 0.5\n"
            "debug = true\n"
            "[human]\n"
            'timeout_policy = "fold"\n'
        )
        config = Config.load(path)
        assert config.table.starting_stack == 1500
        assert config.table.big_blind == 40
        assert config.table.seed == 42
        assert config.bot.action_delay == 0.5
        assert config.bot.debug
        assert config.human.timeout_policy is TimeoutPolicy.FOLD

    def test_search_path_in_cwd(self, isolated):
        (isolated / "pokertable.toml").write_text("[table]\nstarting_stack = 800\n")
        assert Config.load().table.starting_stack == 800

    def test_missing_sections_use_defaults(self, tmp_path):
        path = tmp_path / "empty.toml"
        path.write_text("")
        assert Config.load(path) == Config()

    def test_invalid_timeout_policy(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text('[human]\ntimeout_policy = "wait"\n')
        with pytest.raises(ValueError, match="check_or_fold, fold"):
            Config.load(path)
