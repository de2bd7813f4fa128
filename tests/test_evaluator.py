"""Tests for the hand evaluator contract."""

import pytest
from pokertable.card import card
from pokertable.evaluator import HandResult, StandardEvaluator, describe
from pokertable.hand import HandRank


@pytest.fixture
def evaluator():
    return StandardEvaluator()


class TestSolve:
    def test_accepts_codes_and_cards(self, evaluator):
        a = evaluator.solve(["AS", "AD", "KH", "9C", "4S"])
        b = evaluator.solve([card("As"), card("Ad"), card("Kh"), card("9c"), card("4s")])
        assert a == b
        assert a.category_rank == HandRank.ONE_PAIR
        assert a.name == "Pair"

    def test_seven_cards(self, evaluator):
        result = evaluator.solve(["2S", "3S", "AS", "KS", "7S", "6H", "5D"])
        assert result.name == "Flush"
        assert len(result.cards) == 5

    def test_card_count_bounds(self, evaluator):
        with pytest.raises(ValueError):
            evaluator.solve(["AS", "KS", "QS", "JS"])
        with pytest.raises(ValueError):
            evaluator.solve(["AS", "KS", "QS", "JS", "TS", "9S", "8S", "7S"])

    def test_royal_flush_is_category_nine(self, evaluator):
        result = evaluator.solve(["AS", "KS", "QS", "JS", "TS"])
        assert result.category_rank == 9
        assert result.name == "Royal Flush"

    def test_uses_any(self, evaluator):
        board = ["AH", "AD", "AC", "KS", "KD"]
        result = evaluator.solve(["2C", "3D"] + board)
        assert not result.uses_any([card("2c"), card("3d")])
        assert result.uses_any([card("Ah")])


class TestWinners:
    def test_single_winner(self, evaluator):
        board = ["2H", "5C", "9S", "JD", "3H"]
        aces = evaluator.solve(["AS", "AD"] + board)
        kings = evaluator.solve(["KS", "KD"] + board)
        assert evaluator.winners([aces, kings]) == [aces]

    def test_board_plays_ties(self, evaluator):
        board = ["KH", "QH", "JH", "TH", "4S"]
        a = evaluator.solve(["AS", "2D"] + board)
        b = evaluator.solve(["AC", "3D"] + board)
        assert evaluator.winners([a, b]) == [a, b]

    def test_kicker_decides(self, evaluator):
        board = ["AD", "5H", "7C", "9S", "2H"]
        king_kicker = evaluator.solve(["AS", "KD"] + board)
        queen_kicker = evaluator.solve(["AC", "QD"] + board)
        assert evaluator.winners([queen_kicker, king_kicker]) == [king_kicker]

    def test_empty(self, evaluator):
        assert evaluator.winners([]) == []


class TestCustomEvaluator:
    def test_any_object_with_solve_and_winners_fits(self):
        class Constant:
            def solve(self, cards):
                return HandResult(1, (0,), "High Card", ())

            def winners(self, results):
                return list(results)

        results = [Constant().solve([]), Constant().solve([])]
        assert len(Constant().winners(results)) == 2


def test_describe(evaluator):
    text = describe(evaluator.solve(["AS", "AD", "KH", "9C", "4S"]))
    assert text.startswith("Pair (")
    assert "AS" in text and "KH" in text
