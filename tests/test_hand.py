"""Tests for hand evaluation."""

import pytest
from pokertable.card import card, to_cards
from pokertable.hand import Hand, HandRank


def hand(*codes: str) -> Hand:
    return Hand(to_cards(codes))


class TestHandRanking:
    """Hands are identified by category."""

    def test_high_card(self):
        assert hand("As", "Kd", "9h", "5c", "2s").value.rank == HandRank.HIGH_CARD

    def test_one_pair(self):
        value = hand("As", "Ad", "Kh", "5c", "2s").value
        assert value.rank == HandRank.ONE_PAIR
        assert value.primary == (14,)

    def test_two_pair(self):
        value = hand("As", "Ad", "Kh", "Kc", "2s").value
        assert value.rank == HandRank.TWO_PAIR
        assert value.primary == (14, 13)

    def test_three_of_a_kind(self):
        assert hand("As", "Ad", "Ah", "Kc", "2s").value.rank == HandRank.THREE_OF_A_KIND

    def test_straight(self):
        value = hand("9s", "8d", "7h", "6c", "5s").value
        assert value.rank == HandRank.STRAIGHT
        assert value.primary == (9,)

    def test_straight_wheel(self):
        """A-2-3-4-5: the ace plays low."""
        value = hand("As", "2d", "3h", "4c", "5s").value
        assert value.rank == HandRank.STRAIGHT
        assert value.primary == (5,)

    def test_flush(self):
        assert hand("As", "Ks", "9s", "5s", "2s").value.rank == HandRank.FLUSH

    def test_full_house(self):
        value = hand("As", "Ad", "Ah", "Kc", "Ks").value
        assert value.rank == HandRank.FULL_HOUSE
        assert value.primary == (14, 13)

    def test_four_of_a_kind(self):
        assert hand("As", "Ad", "Ah", "Ac", "Ks").value.rank == HandRank.FOUR_OF_A_KIND

    def test_straight_flush(self):
        value = hand("9s", "8s", "7s", "6s", "5s").value
        assert value.rank == HandRank.STRAIGHT_FLUSH
        assert value.name == "Straight Flush"

    def test_royal_flush_name(self):
        value = hand("As", "Ks", "Qs", "Js", "Ts").value
        assert value.rank == HandRank.STRAIGHT_FLUSH
        assert value.name == "Royal Flush"

    def test_category_numbers(self):
        assert int(HandRank.HIGH_CARD) == 1
        assert int(HandRank.STRAIGHT_FLUSH) == 9


class TestBestFive:
    def test_made_part_comes_first(self):
        value = hand("Kh", "2s", "Ad", "As", "9c").value
        assert [c.rank.code for c in value.cards] == ["A", "A", "K", "9", "2"]

    def test_wheel_ace_is_last(self):
        value = hand("As", "2d", "3h", "4c", "5s").value
        assert value.cards[0].code == "5S"
        assert value.cards[-1].code == "AS"

    def test_seven_cards_pick_five(self):
        value = hand("As", "Ks", "Qs", "Js", "9s", "2h", "3d").value
        assert value.rank == HandRank.FLUSH
        assert len(value.cards) == 5
        assert card("2h") not in value.cards


class TestHandComparison:
    def test_rank_beats_rank(self):
        assert hand("As", "Ad", "Kh", "5c", "2s").value > hand("As", "Kd", "Qh", "5c", "2s").value

    def test_same_pair_kicker_decides(self):
        assert hand("Ks", "Kd", "Ah", "5c", "2s").value > hand("Ks", "Kh", "Qd", "5c", "2s").value

    def test_wheel_loses_to_six_high_straight(self):
        assert hand("6s", "2d", "3h", "4c", "5s").value > hand("As", "2d", "3h", "4c", "5s").value

    def test_equal_hands_compare_equal(self):
        a = hand("As", "Kd", "Qh", "Jc", "9s").value
        b = hand("Ad", "Kc", "Qs", "Jh", "9d").value
        assert a == b


class TestValidation:
    def test_too_few_cards(self):
        with pytest.raises(ValueError):
            hand("As", "Kd", "Qh", "Jc")

    def test_duplicates_rejected(self):
        with pytest.raises(ValueError):
            hand("As", "As", "Qh", "Jc", "9s")
