"""Tests for position module."""

import pytest
from pokertable.player import Player, Role
from pokertable.position import (
    Position,
    first_to_act,
    next_live_player,
    position_factor,
    position_from_utg_distance,
    seat_position,
)


def _seats(n: int) -> list[Player]:
    """Dealer at 0; blinds at 1 and 2 (0 and 1 heads-up)."""
    players = [Player(name=f"P{i}", chips=1000) for i in range(n)]
    players[0].roles |= Role.DEALER
    sb, bb = (0, 1) if n == 2 else (1, 2)
    players[sb].roles |= Role.SMALL_BLIND
    players[bb].roles |= Role.BIG_BLIND
    return players


class TestPositionFromUtgDistance:
    def test_6max_table(self):
        expected = [Position.UTG, Position.HJ, Position.CO, Position.BTN, Position.SB, Position.BB]
        assert [position_from_utg_distance(d, 6) for d in range(6)] == expected

    def test_9max_table(self):
        assert position_from_utg_distance(1, 9) == Position.UTG_1
        assert position_from_utg_distance(3, 9) == Position.MP
        assert position_from_utg_distance(6, 9) == Position.BTN

    def test_invalid_distance(self):
        with pytest.raises(ValueError):
            position_from_utg_distance(-1, 6)
        with pytest.raises(ValueError):
            position_from_utg_distance(6, 6)


class TestSeatPosition:
    def test_dealer_is_button(self):
        assert seat_position(0, 6) == Position.BTN
        assert seat_position(1, 6) == Position.SB
        assert seat_position(2, 6) == Position.BB
        assert seat_position(3, 6) == Position.UTG

    def test_heads_up(self):
        assert seat_position(0, 2) == Position.SB
        assert seat_position(1, 2) == Position.BB

    def test_short_names(self):
        assert [seat_position(i, 4).short for i in range(4)] == ["BTN", "SB", "BB", "CO"]


class TestActionOrder:
    def test_preflop_opens_left_of_big_blind(self):
        players = _seats(6)
        assert first_to_act(players, preflop=True) is players[3]

    def test_postflop_opens_left_of_dealer(self):
        players = _seats(6)
        assert first_to_act(players, preflop=False) is players[1]

    def test_folded_seats_are_skipped(self):
        players = _seats(6)
        players[1].folded = True
        players[2].folded = True
        assert first_to_act(players, preflop=False) is players[3]
        assert next_live_player(players, 0) is players[3]


class TestPositionFactor:
    def test_first_and_last_to_act(self):
        players = _seats(4)
        # Preflop order: P3, P0, P1, P2
        assert position_factor(players, players[3], preflop=True) == 0.0
        assert position_factor(players, players[2], preflop=True) == 1.0
        # Postflop order: P1, P2, P3, P0
        assert position_factor(players, players[0], preflop=False) == 1.0
        assert position_factor(players, players[2], preflop=False) == pytest.approx(1 / 3)

    def test_alone_or_folded(self):
        players = _seats(3)
        players[1].folded = True
        players[2].folded = True
        assert position_factor(players, players[0], preflop=False) == 0.0
        assert position_factor(players, players[1], preflop=False) == 0.0
