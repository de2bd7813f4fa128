"""Hand Evaluator contract used by settlement and the bot.

The engine only needs two things from an evaluator: ``solve`` a 5-7 card
hand into a comparable result, and pick the ``winners`` among several
results. ``StandardEvaluator`` is the default implementation; any object
with the same two methods can be swapped in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from .card import Card, to_cards
from .hand import Hand, HandValue


@dataclass(frozen=True)
class HandResult:
    """A solved hand.

    Attributes:
        category_rank: Hand category, 1 (high card) .. 9 (straight flush).
        tiebreak: Rank values that order hands within a category.
        name: Human-readable category name ("Full House", ...).
        cards: Best five cards, most significant first.
    """

    category_rank: int
    tiebreak: tuple[int, ...]
    name: str
    cards: tuple[Card, ...]

    @property
    def key(self) -> tuple[int, tuple[int, ...]]:
        """Sort key: higher is better."""
        return (self.category_rank, self.tiebreak)

    def uses_any(self, cards: Sequence[Card]) -> bool:
        """True if any of ``cards`` is part of the best five."""
        return any(c in self.cards for c in cards)

    @classmethod
    def from_value(cls, value: HandValue) -> HandResult:
        return cls(
            category_rank=int(value.rank),
            tiebreak=value.primary + value.kickers,
            name=value.name,
            cards=value.cards,
        )


class HandEvaluator(Protocol):
    """What the engine needs from a hand evaluator."""

    def solve(self, cards: Sequence[Card | str]) -> HandResult: ...

    def winners(self, results: Sequence[HandResult]) -> list[HandResult]: ...


class StandardEvaluator:
    """Default evaluator built on :class:`pokertable.hand.Hand`."""

    def solve(self, cards: Sequence[Card | str]) -> HandResult:
        parsed = to_cards(cards)
        if not 5 <= len(parsed) <= 7:
            raise ValueError(f"Need 5 to 7 cards to solve a hand, got {len(parsed)}")
        return HandResult.from_value(Hand(cards=parsed).evaluate())

    def winners(self, results: Sequence[HandResult]) -> list[HandResult]:
        if not results:
            return []
        best = max(r.key for r in results)
        return [r for r in results if r.key == best]


def describe(result: HandResult) -> str:
    """Short description such as ``"Pair (AS AD KH 9C 4S)"``."""
    return f"{result.name} ({' '.join(c.code for c in result.cards)})"
