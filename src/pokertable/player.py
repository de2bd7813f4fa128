"""Seat records: player state, role flags, opponent stats and line memory.

Players are plain data. Every chip movement goes through the functions in
:mod:`pokertable.table` so the table invariants are enforced in one place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Flag, auto

from .card import Card


class Role(Flag):
    """Button and blind markers. At most one player holds each role."""

    NONE = 0
    DEALER = auto()
    SMALL_BLIND = auto()
    BIG_BLIND = auto()


@dataclass
class PlayerStats:
    """Running tendencies used for opponent modeling.

    ``vpip`` and ``pfr`` count hands, not actions: each is recorded at most
    once per hand.
    """

    hands: int = 0
    vpip: int = 0
    pfr: int = 0
    folds: int = 0
    calls: int = 0
    aggressive_acts: int = 0
    _vpip_marked: bool = field(default=False, repr=False)
    _pfr_marked: bool = field(default=False, repr=False)

    def start_hand(self) -> None:
        self.hands += 1
        self._vpip_marked = False
        self._pfr_marked = False

    def record_fold(self) -> None:
        self.folds += 1

    def record_call(self, preflop: bool) -> None:
        self.calls += 1
        if preflop:
            self._mark_vpip()

    def record_raise(self, preflop: bool) -> None:
        self.aggressive_acts += 1
        if preflop:
            self._mark_vpip()
            if not self._pfr_marked:
                self._pfr_marked = True
                self.pfr += 1

    def _mark_vpip(self) -> None:
        if not self._vpip_marked:
            self._vpip_marked = True
            self.vpip += 1

    @property
    def fold_rate(self) -> float:
        return self.folds / self.hands if self.hands > 0 else 0.0

    @property
    def vpip_rate(self) -> float:
        """Smoothed voluntary-pot-in rate (one phantom hand each way)."""
        return (self.vpip + 1) / (self.hands + 2)

    @property
    def aggression_factor(self) -> float:
        """Smoothed raises-per-call ratio."""
        return (self.aggressive_acts + 1) / (self.calls + 1)


@dataclass
class BotLine:
    """Betting-line memory for the preflop aggressor.

    ``None`` intents mean "not decided yet on this street".
    """

    preflop_aggressor: bool = False
    cbet_intent: bool | None = None
    cbet_made: bool = False
    barrel_intent: bool | None = None
    barrel_made: bool = False


@dataclass
class Player:
    """A seat at the table."""

    name: str
    chips: int
    is_bot: bool = False

    hole_cards: list[Card] = field(default_factory=list)
    round_bet: int = 0
    total_bet: int = 0
    folded: bool = False
    all_in: bool = False
    roles: Role = Role.NONE
    stats: PlayerStats = field(default_factory=PlayerStats)
    bot_line: BotLine = field(default_factory=BotLine)

    @property
    def is_actionable(self) -> bool:
        """Can still act this round (not folded, not all-in)."""
        return not self.folded and not self.all_in

    @property
    def in_hand(self) -> bool:
        """Still competing for the pot (not folded)."""
        return not self.folded

    @property
    def is_dealer(self) -> bool:
        return Role.DEALER in self.roles

    @property
    def is_small_blind(self) -> bool:
        return Role.SMALL_BLIND in self.roles

    @property
    def is_big_blind(self) -> bool:
        return Role.BIG_BLIND in self.roles

    def __hash__(self) -> int:
        return id(self)

    def __eq__(self, other: object) -> bool:
        return self is other
