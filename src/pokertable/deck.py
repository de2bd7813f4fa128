"""Deck of cards with a discard pile it is replenished from."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from .card import Card, Rank, Suit

LOGGER = logging.getLogger(__name__)


@dataclass
class Deck:
    """A standard 52-card deck plus a graveyard of used cards.

    Cards leave the deck by ``deal``/``burn`` and come back through
    ``discard``. When the deck runs dry mid-deal the graveyard is shuffled
    back in, so a deal never fails while cards exist somewhere.
    """

    rng: random.Random = field(default_factory=random.Random, repr=False)
    cards: list[Card] = field(default_factory=list)
    graveyard: list[Card] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cards and not self.graveyard:
            self.reset()

    def reset(self) -> None:
        """Reset to a full, unshuffled 52-card deck with an empty graveyard."""
        self.cards = [Card(rank, suit) for rank in Rank for suit in Suit]
        self.graveyard = []

    def shuffle(self) -> None:
        """Shuffle the cards remaining in the deck."""
        self.rng.shuffle(self.cards)

    def recycle(self) -> None:
        """Return the graveyard to the deck and shuffle everything."""
        self.cards.extend(self.graveyard)
        self.graveyard = []
        self.shuffle()

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the top of the deck."""
        if n > len(self.cards):
            LOGGER.debug("Deck has %d cards, recycling %d from graveyard", len(self.cards), len(self.graveyard))
            self.recycle()
        if n > len(self.cards):
            raise ValueError(f"Cannot deal {n} cards, only {len(self.cards)} remaining")
        dealt = self.cards[:n]
        del self.cards[:n]
        return dealt

    def deal_one(self) -> Card:
        """Deal a single card."""
        return self.deal(1)[0]

    def burn(self) -> Card:
        """Deal one card face down straight into the graveyard."""
        burned = self.deal_one()
        self.graveyard.append(burned)
        return burned

    def discard(self, cards: list[Card]) -> None:
        """Put used cards into the graveyard."""
        self.graveyard.extend(cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __contains__(self, card: Card) -> bool:
        return card in self.cards
