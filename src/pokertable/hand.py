"""Poker hand ranking for Texas Hold'em."""

from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import combinations
from typing import Self

from .card import Card, Rank


class HandRank(IntEnum):
    """Hand categories from lowest to highest (HIGH_CARD is 1)."""

    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9

    def __str__(self) -> str:
        return _RANK_NAMES[self]


_RANK_NAMES = {
    HandRank.HIGH_CARD: "High Card",
    HandRank.ONE_PAIR: "Pair",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.STRAIGHT: "Straight",
    HandRank.FLUSH: "Flush",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
}


@dataclass(frozen=True, slots=True, order=True)
class HandValue:
    """Comparable hand value for determining winners.

    Comparison works by:
    1. HandRank (pair beats high card, etc.)
    2. Primary values (the cards that make the hand)
    3. Kickers (remaining high cards)

    ``cards`` holds the best five cards ordered by significance (made part
    first, then kickers high to low) and takes no part in comparisons.
    """

    rank: HandRank
    primary: tuple[int, ...]
    kickers: tuple[int, ...]
    cards: tuple[Card, ...] = field(default=(), compare=False)

    @property
    def name(self) -> str:
        if self.rank == HandRank.STRAIGHT_FLUSH and self.primary == (Rank.ACE.value,):
            return "Royal Flush"
        return str(self.rank)

    def __str__(self) -> str:
        return self.name


@dataclass
class Hand:
    """Five to seven cards with evaluation capabilities."""

    cards: list[Card]

    def __post_init__(self) -> None:
        if len(self.cards) < 5:
            raise ValueError("Hand must have at least 5 cards")
        if len(set(self.cards)) != len(self.cards):
            raise ValueError("Hand contains duplicate cards")

    @classmethod
    def from_cards(cls, *cards: Card) -> Self:
        """Create a hand from cards."""
        return cls(cards=list(cards))

    def evaluate(self) -> HandValue:
        """Evaluate the best 5-card hand from the available cards."""
        return max(_evaluate_five(list(five)) for five in combinations(self.cards, 5))

    @property
    def value(self) -> HandValue:
        """Shorthand for evaluate()."""
        return self.evaluate()


# Group shape (largest group first) to category, for hands that are
# neither straights nor flushes.
_SHAPES = {
    (4, 1): HandRank.FOUR_OF_A_KIND,
    (3, 2): HandRank.FULL_HOUSE,
    (3, 1, 1): HandRank.THREE_OF_A_KIND,
    (2, 2, 1): HandRank.TWO_PAIR,
    (2, 1, 1, 1): HandRank.ONE_PAIR,
    (1, 1, 1, 1, 1): HandRank.HIGH_CARD,
}


def _evaluate_five(cards: list[Card]) -> HandValue:
    """Rank exactly 5 cards."""
    counts = Counter(c.rank for c in cards)
    groups = sorted(((n, r.value) for r, n in counts.items()), reverse=True)
    shape = tuple(n for n, _ in groups)
    values = [v for _, v in groups]
    flush = len({c.suit for c in cards}) == 1

    high = _straight_high(values)
    if high:
        category = HandRank.STRAIGHT_FLUSH if flush else HandRank.STRAIGHT
        return HandValue(category, (high,), (), _straight_order(cards, high))

    ordered = tuple(sorted(cards, key=lambda c: (counts[c.rank], c.rank), reverse=True))
    if flush:
        return HandValue(HandRank.FLUSH, tuple(values), (), ordered)

    made = max(1, sum(1 for n in shape if n > 1))
    return HandValue(_SHAPES[shape], tuple(values[:made]), tuple(values[made:]), ordered)


def _straight_high(values: list[int]) -> int:
    """Top card of a straight over distinct descending values, 0 if none."""
    if len(values) != 5:
        return 0
    if values[0] - values[4] == 4:
        return values[0]
    # Wheel (A-2-3-4-5): the ace plays low
    if values == [14, 5, 4, 3, 2]:
        return 5
    return 0


def _straight_order(cards: list[Card], high: int) -> tuple[Card, ...]:
    """Order straight cards top-down, with a wheel ace at the bottom."""
    if high == 5:
        return tuple(sorted(cards, key=lambda c: 1 if c.rank == Rank.ACE else c.rank.value, reverse=True))
    return tuple(sorted(cards, key=lambda c: c.rank, reverse=True))
