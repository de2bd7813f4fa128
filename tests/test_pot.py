"""Tests for side pot construction and settlement."""

import random

import pytest
from pokertable.card import to_cards
from pokertable.errors import SettlementError
from pokertable.evaluator import StandardEvaluator
from pokertable.player import Player, Role
from pokertable.pot import (
    SidePot,
    build_side_pots,
    merge_side_pots,
    payout_order,
    settle,
    split_pot,
)
from pokertable.table import Phase, Table


def _player(name: str, total_bet: int, hole: str = "", folded: bool = False, chips: int = 0) -> Player:
    p = Player(name=name, chips=chips, folded=folded, all_in=chips == 0 and not folded)
    p.total_bet = total_bet
    if hole:
        p.hole_cards = to_cards(hole.split())
    return p


def _table(players: list[Player], board: str = "") -> Table:
    table = Table(players=players, rng=random.Random(0))
    players[0].roles = Role.DEALER
    table.pot = sum(p.total_bet for p in players)
    table.community = to_cards(board.split()) if board else []
    table.phase = Phase.RIVER if board else Phase.PREFLOP
    return table


def _names(players: list[Player]) -> list[str]:
    return sorted(p.name for p in players)


class SpyEvaluator(StandardEvaluator):
    def __init__(self):
        self.calls = 0

    def solve(self, cards):
        self.calls += 1
        return super().solve(cards)


class TestBuildSidePots:
    def test_equal_bets_single_pot(self):
        pots = build_side_pots([_player("A", 100), _player("B", 100)])
        assert len(pots) == 1
        assert pots[0].amount == 200
        assert _names(pots[0].eligible_players) == ["A", "B"]

    def test_short_all_in_creates_side_pot(self):
        players = [_player("A", 100), _player("B", 300), _player("C", 300)]
        pots = build_side_pots(players)
        assert [(p.amount, _names(p.eligible_players)) for p in pots] == [
            (300, ["A", "B", "C"]),
            (400, ["B", "C"]),
        ]

    def test_folded_player_funds_but_cannot_win(self):
        players = [_player("A", 50, folded=True), _player("B", 100), _player("C", 100)]
        pots = build_side_pots(players)
        assert sum(p.amount for p in pots) == 250
        assert all(_names(p.contenders) == ["B", "C"] for p in pots)

    def test_dead_tier_folds_into_pot_below(self):
        players = [
            _player("A", 200, folded=True),
            _player("D", 200, folded=True),
            _player("B", 100),
            _player("C", 100),
        ]
        pots = build_side_pots(players)
        assert len(pots) == 1
        assert pots[0].amount == 600
        assert _names(pots[0].contenders) == ["B", "C"]

    def test_single_contributor_tier_kept_for_refund(self):
        players = [_player("A", 300, folded=True), _player("B", 100), _player("C", 100)]
        pots = build_side_pots(players)
        assert [p.amount for p in pots] == [300, 200]
        assert _names(pots[1].eligible_players) == ["A"]
        assert pots[1].contenders == []

    def test_no_contributions(self):
        assert build_side_pots([_player("A", 0), _player("B", 0)]) == []


class TestMergeSidePots:
    def test_same_contenders_merge(self):
        players = [_player("A", 50, folded=True), _player("B", 100), _player("C", 100)]
        merged = merge_side_pots(build_side_pots(players))
        assert len(merged) == 1
        assert merged[0].amount == 250

    def test_different_contenders_stay_apart(self):
        players = [_player("A", 100), _player("B", 300), _player("C", 300)]
        merged = merge_side_pots(build_side_pots(players))
        assert [p.amount for p in merged] == [300, 400]

    def test_totals_per_contender_set_unchanged(self):
        players = [
            _player("A", 40, folded=True),
            _player("B", 100),
            _player("C", 250, folded=True),
            _player("D", 250),
            _player("E", 400),
        ]
        pots = build_side_pots(players)
        merged = merge_side_pots(pots)

        def totals(ps: list[SidePot]) -> dict[tuple[str, ...], int]:
            out: dict[tuple[str, ...], int] = {}
            for p in ps:
                key = tuple(_names(p.contenders))
                out[key] = out.get(key, 0) + p.amount
            return out

        assert totals(merged) == totals(pots)
        assert sum(p.amount for p in merged) == sum(p.total_bet for p in players)


class TestSplit:
    def test_even_split(self):
        assert split_pot(100, [_player("A", 0), _player("B", 0)]) == {"A": 50, "B": 50}

    def test_odd_chips_go_in_order(self):
        shares = split_pot(101, [_player("A", 0), _player("B", 0), _player("C", 0)])
        assert shares == {"A": 34, "B": 34, "C": 33}

    def test_payout_order_starts_left_of_dealer(self):
        players = [_player(n, 10) for n in "ABC"]
        table = _table(players)
        assert [p.name for p in payout_order(table, players)] == ["B", "C", "A"]


class TestSettle:
    def test_side_pot_showdown(self):
        players = [
            _player("A", 100, "AS AD"),
            _player("B", 300, "KS KD"),
            _player("C", 300, "QS QD", chips=500),
        ]
        table = _table(players, "2C 7D 9H JC 4S")
        result = settle(table, StandardEvaluator())

        assert result.showdown
        assert [a.pot.amount for a in result.awards] == [300, 400]
        assert result.payouts == {"A": 300, "B": 400}
        assert [p.chips for p in players] == [300, 400, 500]
        assert result.hands["A"].name == "Pair"

    def test_split_pot_odd_chip_left_of_dealer(self):
        players = [
            _player("A", 15, "2C 3D"),
            _player("B", 15, "2D 3C"),
            _player("C", 15, "4H 5H", folded=True),
        ]
        table = _table(players, "AS KS QS JS TS")
        result = settle(table, StandardEvaluator())
        award = result.awards[0]
        assert [w.name for w in award.winners] == ["B", "A"]
        assert award.shares == {"B": 23, "A": 22}
        assert award.hand_name == "Royal Flush"

    def test_uncalled_excess_returns_to_bettor(self):
        players = [_player("A", 300, "7C 2D", chips=700), _player("B", 100, "AS AD")]
        table = _table(players, "KH 9C 5D 4S 3H")
        result = settle(table, StandardEvaluator())
        assert result.awards[1].uncalled
        assert result.payouts == {"B": 200, "A": 200}
        assert players[0].chips == 900

    def test_folded_top_contributor_is_refunded(self):
        players = [
            _player("A", 300, folded=True, chips=100),
            _player("B", 100, "AS AD"),
            _player("C", 100, "KS KD"),
        ]
        table = _table(players, "2C 7D 9H JC 4S")
        result = settle(table, StandardEvaluator())
        assert result.awards[-1].refunded
        assert players[0].chips == 300
        assert players[1].chips == 300

    def test_single_survivor_skips_the_evaluator(self):
        players = [
            _player("A", 20, "AS AD", folded=True, chips=980),
            _player("B", 10, "KS KD", folded=True, chips=990),
            _player("C", 20, "QS QD", chips=980),
        ]
        table = _table(players)
        spy = SpyEvaluator()
        result = settle(table, spy)
        assert spy.calls == 0
        assert not result.showdown
        assert players[2].chips == 1030

    def test_chips_conserved(self):
        players = [
            _player("A", 100, "AS KS"),
            _player("B", 250, "QH QD", chips=10),
            _player("C", 250, "9C 8C", folded=True, chips=40),
            _player("D", 400, "JH TH", chips=100),
        ]
        table = _table(players, "AH QS 7C 3D 2S")
        before = table.total_chips
        settle(table, StandardEvaluator())
        assert table.total_chips == before
        assert table.pot == 0

    def test_settling_twice_pays_once(self):
        players = [_player("A", 100, "AS AD"), _player("B", 100, "KS KD")]
        table = _table(players, "2C 7D 9H JC 4S")
        settle(table, StandardEvaluator())
        chips = [p.chips for p in players]
        again = settle(table, StandardEvaluator())
        assert again.awards == []
        assert [p.chips for p in players] == chips
        assert all(p.total_bet == 0 and p.round_bet == 0 for p in players)

    def test_contribution_mismatch_is_fatal(self):
        players = [_player("A", 100, "AS AD"), _player("B", 100, "KS KD")]
        table = _table(players, "2C 7D 9H JC 4S")
        table.pot = 150
        with pytest.raises(SettlementError):
            settle(table, StandardEvaluator())
        assert [p.chips for p in players] == [0, 0]

    def test_duplicate_names_rejected(self):
        players = [_player("A", 100, "AS AD"), _player("A", 100, "KS KD")]
        table = _table(players, "2C 7D 9H JC 4S")
        with pytest.raises(ValueError):
            settle(table, StandardEvaluator())
        assert table.pot == 200
