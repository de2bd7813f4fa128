"""Tests for card module."""

import pytest
from pokertable.card import FULL_DECK_CODES, Card, Rank, Suit, card, to_cards


class TestCard:
    def test_card_creation(self):
        c = Card(Rank.ACE, Suit.SPADES)
        assert c.rank == Rank.ACE
        assert c.suit == Suit.SPADES

    def test_card_str(self):
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"

    def test_card_code(self):
        assert Card(Rank.ACE, Suit.SPADES).code == "AS"
        assert Card(Rank.TEN, Suit.DIAMONDS).code == "TD"
        assert Card(Rank.TWO, Suit.CLUBS).code == "2C"

    def test_card_from_str(self):
        assert Card.from_str("As") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_str("kh") == Card(Rank.KING, Suit.HEARTS)
        assert Card.from_str("10d") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_str("2c") == Card(Rank.TWO, Suit.CLUBS)
        assert Card.from_str("TC") == Card(Rank.TEN, Suit.CLUBS)

    def test_code_parses_back(self):
        for code in ("AS", "TD", "9H", "2C"):
            assert card(code).code == code

    def test_invalid_card(self):
        with pytest.raises(ValueError):
            Card.from_str("Xx")
        with pytest.raises(ValueError):
            Card.from_str("1s")
        with pytest.raises(ValueError):
            Card.from_str("A")

    def test_card_hashable(self):
        cards = {card("As"), card("Kh"), card("As")}
        assert len(cards) == 2

    def test_to_cards_accepts_mixed_input(self):
        assert to_cards(["AS", card("kd")]) == [card("As"), card("Kd")]


class TestRank:
    def test_rank_comparison(self):
        assert Rank.ACE > Rank.KING
        assert Rank.TWO < Rank.THREE

    def test_index_is_zero_based(self):
        assert Rank.TWO.index == 0
        assert Rank.ACE.index == 12

    def test_codes(self):
        assert "".join(r.code for r in Rank) == "23456789TJQKA"
        assert "".join(s.code for s in Suit) == "CDHS"


class TestFullDeck:
    def test_52_unique_codes(self):
        assert len(FULL_DECK_CODES) == 52
        assert len(set(FULL_DECK_CODES)) == 52
