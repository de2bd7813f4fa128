"""Card representations and two-character card codes."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Self, Sequence


class Suit(IntEnum):
    """Card suits. Values don't affect poker hand ranking."""

    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3

    @property
    def code(self) -> str:
        """Single-letter suit code used in card codes ("C", "D", "H", "S")."""
        return "CDHS"[self.value]

    @property
    def symbol(self) -> str:
        """Unicode symbol for the suit."""
        return ["♣", "♦", "♥", "♠"][self.value]

    def __str__(self) -> str:
        return self.symbol


class Rank(IntEnum):
    """Card ranks. Higher value = higher rank."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def code(self) -> str:
        """Single-character rank code ("2".."9", "T", "J", "Q", "K", "A")."""
        return RANK_CODES[self.value - 2]

    @property
    def index(self) -> int:
        """Zero-based rank index: TWO is 0, ACE is 12."""
        return self.value - 2

    @property
    def symbol(self) -> str:
        """Short display symbol for the rank ("10" rather than "T")."""
        if self.value == 10:
            return "10"
        return self.code

    def __str__(self) -> str:
        return self.symbol


RANK_CODES = "23456789TJQKA"
SUIT_CODES = "CDHS"


@dataclass(frozen=True, slots=True)
class Card:
    """A playing card with rank and suit."""

    rank: Rank
    suit: Suit

    @property
    def code(self) -> str:
        """Two-character card code, e.g. ``"AS"`` or ``"TD"``."""
        return f"{self.rank.code}{self.suit.code}"

    def __str__(self) -> str:
        return f"{self.rank.symbol}{self.suit.symbol}"

    def __repr__(self) -> str:
        return f"Card({self.code})"

    @classmethod
    def from_str(cls, s: str) -> Self:
        """Parse a card code like 'AS', 'Kh', 'TD', '10d' or '2c'.

        Rank: 2-9, T (or 10), J, Q, K, A
        Suit: C(lubs), D(iamonds), H(earts), S(pades), case-insensitive.
        """
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        suit_char = s[-1]
        if suit_char not in SUIT_CODES:
            raise ValueError(f"Invalid suit: {suit_char}")

        rank_str = s[:-1]
        if rank_str == "10":
            rank_str = "T"
        if len(rank_str) != 1 or rank_str not in RANK_CODES:
            raise ValueError(f"Invalid rank: {rank_str}")

        return cls(rank=Rank(RANK_CODES.index(rank_str) + 2), suit=Suit(SUIT_CODES.index(suit_char)))


def card(s: str) -> Card:
    """Shorthand for Card.from_str()."""
    return Card.from_str(s)


def to_cards(cards: Sequence[Card | str]) -> list[Card]:
    """Accept a mix of Card objects and card codes and return Cards."""
    return [c if isinstance(c, Card) else Card.from_str(c) for c in cards]


FULL_DECK_CODES: tuple[str, ...] = tuple(f"{r}{s}" for r in RANK_CODES for s in SUIT_CODES)
