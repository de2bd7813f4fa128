"""Table aggregate and the free functions that mutate it.

All chip movement and dealer/blind bookkeeping lives here so the table
invariants (chips never negative, ``chips == 0`` means all-in, exactly one
dealer) are enforced in one place. Seating is rotated every hand so the
dealer sits at index 0.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from .card import Card
from .deck import Deck
from .errors import CommunitySlotError
from .player import BotLine, Player, Role

LOGGER = logging.getLogger(__name__)

BOARD_SIZE = 5


class Phase(Enum):
    """Streets of a hand, in order."""

    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"

    @property
    def index(self) -> int:
        return _PHASE_ORDER.index(self)

    @property
    def next(self) -> Phase:
        if self is Phase.SHOWDOWN:
            return self
        return _PHASE_ORDER[self.index + 1]

    @property
    def board_cards(self) -> int:
        """Community cards dealt when entering this street."""
        return {Phase.FLOP: 3, Phase.TURN: 1, Phase.RIVER: 1}.get(self, 0)


_PHASE_ORDER = [Phase.PREFLOP, Phase.FLOP, Phase.TURN, Phase.RIVER, Phase.SHOWDOWN]


@dataclass
class Table:
    """Shared state of one table: seats, pot, betting level and board."""

    players: list[Player]
    small_blind: int = 10
    big_blind: int = 20
    rng: random.Random = field(default_factory=random.Random, repr=False)
    orbits_per_level: int = 2

    pot: int = 0
    current_bet: int = 0
    last_raise_size: int = 0
    raises_this_round: int = 0
    phase: Phase = Phase.PREFLOP
    community: list[Card] = field(default_factory=list)
    deck: Deck | None = field(default=None, repr=False)
    hand_number: int = 0
    dealer_moves: int = 0

    def __post_init__(self) -> None:
        if self.small_blind <= 0 or self.big_blind <= 0:
            raise ValueError("Blinds must be positive")
        if self.deck is None:
            self.deck = Deck(rng=self.rng)
        if self.last_raise_size == 0:
            self.last_raise_size = self.big_blind

    @property
    def dealer(self) -> Player | None:
        for p in self.players:
            if p.is_dealer:
                return p
        return None

    @property
    def dealer_index(self) -> int:
        for i, p in enumerate(self.players):
            if p.is_dealer:
                return i
        return -1

    @property
    def big_blind_index(self) -> int:
        for i, p in enumerate(self.players):
            if p.is_big_blind:
                return i
        return -1

    @property
    def live_players(self) -> list[Player]:
        """Players who have not folded this hand."""
        return [p for p in self.players if not p.folded]

    @property
    def actionable_players(self) -> list[Player]:
        return [p for p in self.players if p.is_actionable]

    @property
    def total_chips(self) -> int:
        """Chips on the table: every stack plus the pot."""
        return sum(p.chips for p in self.players) + self.pot

    def seat_of(self, player: Player) -> int:
        for i, p in enumerate(self.players):
            if p is player:
                return i
        raise ValueError(f"{player.name} is not seated at this table")

    def need_to_call(self, seat_index: int) -> int:
        return max(0, self.current_bet - self.players[seat_index].round_bet)


def apply_bet(table: Table, seat_index: int, amount: int) -> int:
    """Move ``amount`` chips from a seat into the pot.

    The amount is clamped to the seat's stack; a seat that runs out of chips
    is marked all-in. Returns the chips actually moved.
    """
    if amount < 0:
        raise ValueError(f"Bet amount cannot be negative, got {amount}")
    player = table.players[seat_index]
    paid = min(amount, player.chips)
    player.chips -= paid
    player.round_bet += paid
    player.total_bet += paid
    table.pot += paid
    if player.chips == 0:
        player.all_in = True
    return paid


def remove_busted(table: Table) -> list[Player]:
    """Drop players with no chips left. Returns them in seating order."""
    busted = [p for p in table.players if p.chips <= 0]
    if busted:
        table.players = [p for p in table.players if p.chips > 0]
        for p in busted:
            table.deck.discard(p.hole_cards)
            p.hole_cards = []
            p.chips = 0
            p.roles = Role.NONE
            LOGGER.info("%s is out of chips", p.name)
    return busted


def rotate_dealer(table: Table) -> list[Player]:
    """Move the button to the next live seat and rotate seating around it.

    The first call picks a random dealer from ``table.rng``. Players with no
    chips are removed here (and returned) so the button skips them. Afterwards
    the dealer sits at index 0.
    """
    old = table.dealer_index
    if old < 0:
        live = [p for p in table.players if p.chips > 0]
        if not live:
            return remove_busted(table)
        new_dealer = live[table.rng.randrange(len(live))]
    else:
        n = len(table.players)
        new_dealer = table.players[old]
        for step in range(1, n + 1):
            candidate = table.players[(old + step) % n]
            if candidate.chips > 0:
                new_dealer = candidate
                break
        if new_dealer is not table.players[old]:
            table.dealer_moves += 1

    busted = remove_busted(table)
    for p in table.players:
        p.roles &= ~Role.DEALER
    new_dealer.roles |= Role.DEALER

    idx = table.seat_of(new_dealer)
    table.players = table.players[idx:] + table.players[:idx]
    LOGGER.debug("%s is dealer", new_dealer.name)
    return busted


def escalate_blinds(table: Table) -> bool:
    """Double both blinds after every ``orbits_per_level`` full orbits.

    An orbit is one dealer move per live seat. Returns True when the blinds
    went up.
    """
    seats = len(table.players)
    if seats < 2 or table.orbits_per_level <= 0:
        return False
    if table.dealer_moves < seats * table.orbits_per_level:
        return False
    table.dealer_moves = 0
    table.small_blind *= 2
    table.big_blind *= 2
    LOGGER.info("Blinds increased to %d/%d", table.small_blind, table.big_blind)
    return True


def blind_indices(table: Table) -> tuple[int, int]:
    """Seat indices of the small and big blind with the dealer at index 0."""
    if len(table.players) == 2:
        return 0, 1
    return 1, 2


def post_blinds(table: Table) -> tuple[int, int]:
    """Post both blinds clamped to stacks. Returns the chips each paid."""
    for p in table.players:
        p.roles &= ~(Role.SMALL_BLIND | Role.BIG_BLIND)
    sb_idx, bb_idx = blind_indices(table)
    table.players[sb_idx].roles |= Role.SMALL_BLIND
    table.players[bb_idx].roles |= Role.BIG_BLIND
    sb_paid = apply_bet(table, sb_idx, table.small_blind)
    bb_paid = apply_bet(table, bb_idx, table.big_blind)
    table.current_bet = table.big_blind
    table.last_raise_size = table.big_blind
    table.raises_this_round = 0
    return sb_paid, bb_paid


def reset_for_hand(table: Table) -> None:
    """Clear per-hand state and return last hand's cards to the deck."""
    discards: list[Card] = list(table.community)
    for p in table.players:
        discards.extend(p.hole_cards)
        p.hole_cards = []
        p.round_bet = 0
        p.total_bet = 0
        p.folded = False
        p.all_in = False
        p.bot_line = BotLine()
    table.deck.discard(discards)
    table.deck.recycle()
    table.community = []
    table.pot = 0
    table.current_bet = 0
    table.last_raise_size = table.big_blind
    table.raises_this_round = 0
    table.phase = Phase.PREFLOP


def deal_hole_cards(table: Table) -> None:
    for p in table.players:
        p.hole_cards = table.deck.deal(2)


def deal_community(table: Table, count: int) -> list[Card]:
    """Burn one card and deal ``count`` cards to the board."""
    empty = BOARD_SIZE - len(table.community)
    if count > empty:
        LOGGER.error(
            "Cannot deal %d community cards into %d empty slots (phase %s)",
            count, empty, table.phase.value,
        )
        raise CommunitySlotError(
            f"Requested {count} community cards but only {empty} slots are empty"
        )
    table.deck.burn()
    cards = table.deck.deal(count)
    table.community.extend(cards)
    return cards


def start_street(table: Table) -> None:
    """Reset the betting level for a new postflop street."""
    table.current_bet = 0
    table.last_raise_size = table.big_blind
    table.raises_this_round = 0
    for p in table.players:
        p.round_bet = 0


def advance_phase(table: Table) -> list[Card]:
    """Move to the next street, dealing its board cards. Returns them."""
    table.phase = table.phase.next
    dealt: list[Card] = []
    if table.phase.board_cards:
        dealt = deal_community(table, table.phase.board_cards)
        start_street(table)
    return dealt


def begin_hand(table: Table) -> list[Player]:
    """Per-hand bookkeeping before preflop betting.

    Rotates the dealer (removing busted players), escalates blinds, resets
    the table, posts blinds and deals hole cards. Returns eliminated players.
    Does nothing beyond the eliminations when fewer than two players remain.
    """
    busted = rotate_dealer(table)
    if len(table.players) < 2:
        return busted
    escalate_blinds(table)
    reset_for_hand(table)
    table.hand_number += 1
    for p in table.players:
        p.stats.start_hand()
    post_blinds(table)
    deal_hole_cards(table)
    return busted
