"""Tests for the headless presenters and the terminal presenter."""

import io
import logging
import random

from rich.console import Console
from rich.prompt import Prompt

from pokertable.action import Action, ActionWindow
from pokertable.card import to_cards
from pokertable.console import RichPresenter, format_card, standings_table
from pokertable.player import Player
from pokertable.presenter import LoggingPresenter, NullPresenter
from pokertable.table import Table


def _window(to_call: int = 10, can_raise: bool = True) -> ActionWindow:
    return ActionWindow(
        to_call=to_call,
        can_check=to_call == 0,
        can_raise=can_raise,
        min_raise=to_call + 20,
        max_raise=990,
        min_bet=to_call,
        step=10,
    )


class TestNullPresenter:
    def test_checks_when_free(self):
        player = Player(name="You", chips=1000)
        assert NullPresenter().prompt_human_action(player, _window(0)) == Action.check()

    def test_folds_facing_a_bet(self):
        player = Player(name="You", chips=1000)
        assert NullPresenter().prompt_human_action(player, _window(10)) == Action.fold()


class TestLoggingPresenter:
    def test_announce_logs(self, caplog):
        with caplog.at_level(logging.INFO, logger="pokertable.presenter"):
            LoggingPresenter().announce("B wins the pot of 30!")
        assert "B wins the pot of 30!" in caplog.messages

    def test_reveal_uses_card_codes(self, caplog):
        player = Player(name="A", chips=100)
        with caplog.at_level(logging.INFO, logger="pokertable.presenter"):
            LoggingPresenter().reveal_hand(player, to_cards(["AS", "KH"]))
        assert caplog.messages == ["A shows AS KH"]


class TestRichPresenter:
    def _presenter(self) -> tuple[RichPresenter, Player, io.StringIO]:
        you = Player(name="You", chips=990, round_bet=10)
        bot = Player(name="Bot", chips=980, round_bet=20, is_bot=True)
        table = Table(players=[you, bot], rng=random.Random(1))
        buf = io.StringIO()
        presenter = RichPresenter(table, out=Console(file=buf, width=100), street_delay=0)
        return presenter, you, buf

    def _answers(self, monkeypatch, *answers):
        replies = iter(answers)
        monkeypatch.setattr(Prompt, "ask", lambda *args, **kwargs: next(replies))

    def test_call(self, monkeypatch):
        presenter, you, _ = self._presenter()
        self._answers(monkeypatch, "c")
        assert presenter.prompt_human_action(you, _window()) == Action.call(10)

    def test_raise_is_a_total(self, monkeypatch):
        presenter, you, _ = self._presenter()
        self._answers(monkeypatch, "r 60")
        assert presenter.prompt_human_action(you, _window()) == Action.raise_(50)

    def test_raise_below_minimum_reprompts(self, monkeypatch):
        presenter, you, buf = self._presenter()
        self._answers(monkeypatch, "r 20", "f")
        assert presenter.prompt_human_action(you, _window()) == Action.fold()
        assert "Minimum raise is to 40" in buf.getvalue()

    def test_raise_capped_at_stack(self, monkeypatch):
        presenter, you, _ = self._presenter()
        self._answers(monkeypatch, "r 5000")
        assert presenter.prompt_human_action(you, _window()) == Action.raise_(990)

    def test_all_in(self, monkeypatch):
        presenter, you, _ = self._presenter()
        self._answers(monkeypatch, "a")
        assert presenter.prompt_human_action(you, _window()) == Action.raise_(990)

    def test_fold_when_check_is_free(self, monkeypatch):
        presenter, you, buf = self._presenter()
        self._answers(monkeypatch, "f", "c")
        assert presenter.prompt_human_action(you, _window(0)) == Action.check()
        assert "check for free" in buf.getvalue()

    def test_invalid_input(self, monkeypatch):
        presenter, you, buf = self._presenter()
        self._answers(monkeypatch, "x", "f")
        assert presenter.prompt_human_action(you, _window()) == Action.fold()
        assert "Invalid action" in buf.getvalue()

    def test_announcements_are_logged(self):
        presenter, _, _ = self._presenter()
        presenter.announce("Bot checked.")
        presenter.render_pot(40)
        assert presenter.pot == 40
        assert presenter.action_log[-1].endswith("Bot checked.[/white]")
        presenter.new_hand()
        assert presenter.action_log == []

    def test_board_slots(self):
        presenter, _, buf = self._presenter()
        for slot, code in enumerate(["AS", "KD", "2C"]):
            presenter.render_community_card(slot, code)
        assert [c.code for c in presenter.board.values()] == ["AS", "KD", "2C"]
        assert "Board" in buf.getvalue()


def test_format_card_colors_red_suits():
    assert "red" in format_card(to_cards(["AH"])[0])
    assert "red" not in format_card(to_cards(["AS"])[0])


def test_standings_table_rows():
    players = [Player(name="A", chips=300), Player(name="B", chips=0)]
    table = standings_table(players)
    assert table.row_count == 2
