"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from pokertable.card import to_cards
from pokertable.cli import app, build_spot, parse_cards
from pokertable.table import Phase

runner = CliRunner()


class TestParseCards:
    def test_spaces_and_commas(self):
        assert [c.code for c in parse_cards("As, Kh 10d")] == ["AS", "KH", "TD"]

    def test_invalid_card(self):
        with pytest.raises(ValueError):
            parse_cards("Zz")


class TestBuildSpot:
    def test_preflop_spot(self):
        table, hero = build_spot(to_cards(["AS", "KS"]), [], players=6, seat=3, to_call=60)
        assert hero.name == "Hero"
        assert table.players[3] is hero
        assert table.players[0].is_dealer
        assert table.players[1].is_small_blind
        assert table.players[2].is_big_blind
        assert table.phase is Phase.PREFLOP
        assert table.current_bet == 60
        assert table.raises_this_round == 1

    def test_flop_spot(self):
        table, _ = build_spot(to_cards(["AS", "KS"]), to_cards(["2C", "7D", "9H"]))
        assert table.phase is Phase.FLOP
        assert table.raises_this_round == 0

    @pytest.mark.parametrize(
        "hero, board, kwargs",
        [
            (["AS"], [], {}),
            (["AS", "KS"], ["2C", "7D"], {}),
            (["AS", "KS"], [], {"players": 1}),
            (["AS", "KS"], [], {"players": 6, "seat": 6}),
            (["AS", "KS"], ["AS", "7D", "9H"], {}),
        ],
    )
    def test_invalid_spots(self, hero, board, kwargs):
        with pytest.raises(ValueError):
            build_spot(to_cards(hero), to_cards(board), **kwargs)


class TestCommands:
    def test_advise(self):
        result = runner.invoke(app, ["advise", "As Ah", "--seed", "1"])
        assert result.exit_code == 0, result.output
        assert "Bot Decision" in result.output
        assert "BTN" in result.output

    def test_advise_with_board(self):
        result = runner.invoke(app, ["advise", "Qs Js", "--board", "Ts 9d 2c", "--to-call", "40", "--seed", "1"])
        assert result.exit_code == 0, result.output
        assert "Flop" in result.output

    def test_advise_bad_board(self):
        result = runner.invoke(app, ["advise", "As Ah", "--board", "Kd Qd"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_simulate(self, tmp_path):
        config = tmp_path / "sim.toml"
        config.write_text("[table]\nstarting_stack = 500\n")
        result = runner.invoke(
            app, ["simulate", "--bots", "3", "--hands", "5", "--seed", "1", "--config", str(config)]
        )
        assert result.exit_code == 0, result.output
        assert "Alice" in result.output
