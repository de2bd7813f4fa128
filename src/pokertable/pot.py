"""Pot settlement with side pot calculation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .card import Card
from .errors import SettlementError
from .evaluator import HandEvaluator, HandResult
from .player import Player
from .table import Table

LOGGER = logging.getLogger(__name__)


@dataclass
class SidePot:
    """A single pot (main or side) and the players who paid into it."""

    amount: int
    eligible_players: list[Player]

    @property
    def contenders(self) -> list[Player]:
        """Eligible players still in the hand."""
        return [p for p in self.eligible_players if not p.folded]


@dataclass
class PotAward:
    """How one pot was paid out."""

    pot: SidePot
    winners: list[Player]
    shares: dict[str, int]
    hand_name: str | None = None
    uncalled: bool = False
    refunded: bool = False


@dataclass
class SettlementResult:
    """Outcome of settling a hand."""

    awards: list[PotAward] = field(default_factory=list)
    payouts: dict[str, int] = field(default_factory=dict)
    showdown: bool = False
    hands: dict[str, HandResult] = field(default_factory=dict)

    @property
    def total_paid(self) -> int:
        return sum(self.payouts.values())


def build_side_pots(players: list[Player]) -> list[SidePot]:
    """Split the players' contributions into a main pot and side pots.

    Algorithm:
    1. Collect all distinct total_bet values of contributors, ascending
    2. Each level takes min(bet, level) - min(bet, prev_level) from everyone
    3. Eligible = contributors whose total_bet reaches the level
    4. A level nobody live reached is folded into the pot below, unless a
       single player paid it (an uncalled bet, refunded at settlement)
    """
    contributors = [p for p in players if p.total_bet > 0]
    if not contributors:
        return []

    levels = sorted({p.total_bet for p in contributors})
    pots: list[SidePot] = []
    prev_level = 0

    for level in levels:
        amount = sum(
            min(p.total_bet, level) - min(p.total_bet, prev_level)
            for p in contributors
        )
        eligible = [p for p in contributors if p.total_bet >= level]
        prev_level = level
        if amount <= 0:
            continue

        pot = SidePot(amount=amount, eligible_players=eligible)
        if not pot.contenders and len(eligible) > 1 and pots:
            pots[-1].amount += amount
            continue
        pots.append(pot)

    return pots


def merge_side_pots(pots: list[SidePot]) -> list[SidePot]:
    """Merge adjacent pots whose live contenders are the same players.

    Eligible lists are kept from the lower pot, which is a superset of the
    upper one. Totals per contender set are unchanged.
    """
    merged: list[SidePot] = []
    for pot in pots:
        if merged and _same_players(merged[-1].contenders, pot.contenders):
            merged[-1] = SidePot(
                amount=merged[-1].amount + pot.amount,
                eligible_players=merged[-1].eligible_players,
            )
        else:
            merged.append(SidePot(amount=pot.amount, eligible_players=list(pot.eligible_players)))
    return merged


def _same_players(a: list[Player], b: list[Player]) -> bool:
    return len(a) == len(b) and all(any(p is q for q in b) for p in a)


def payout_order(table: Table, players: list[Player]) -> list[Player]:
    """Players in seat order starting left of the dealer."""
    n = len(table.players)
    start = (table.dealer_index + 1) % n if n else 0
    order = [table.players[(start + i) % n] for i in range(n)]
    return [p for p in order if any(p is q for q in players)]


def split_pot(amount: int, winners: list[Player]) -> dict[str, int]:
    """Split evenly; odd chips go one each to winners in the given order."""
    share, remainder = divmod(amount, len(winners))
    shares: dict[str, int] = {}
    for i, w in enumerate(winners):
        shares[w.name] = share + (1 if i < remainder else 0)
    return shares


def settle(table: Table, evaluator: HandEvaluator) -> SettlementResult:
    """Pay out the pot and zero every contribution.

    Running it again on an already settled table is a no-op.
    """
    result = SettlementResult()
    if table.pot == 0:
        return result

    # Awards and payouts are keyed by player name.
    names = [p.name for p in table.players]
    if len(set(names)) != len(names):
        raise ValueError("Player names must be unique")

    contributed = sum(p.total_bet for p in table.players)
    if contributed != table.pot:
        LOGGER.error("Pot is %d but players contributed %d", table.pot, contributed)
        raise SettlementError(f"Pot {table.pot} does not match contributions {contributed}")

    live = table.live_players
    if len(live) == 1:
        winner = live[0]
        pot = SidePot(amount=table.pot, eligible_players=[winner])
        award = PotAward(pot=pot, winners=[winner], shares={winner.name: table.pot})
        result.awards.append(award)
        _pay(result, winner, table.pot)
    else:
        result.showdown = True
        pots = merge_side_pots(build_side_pots(table.players))
        for pot in pots:
            result.awards.append(_award_pot(table, pot, evaluator, result))

    if result.total_paid != table.pot:
        LOGGER.error("Paid out %d from a pot of %d", result.total_paid, table.pot)
        raise SettlementError(f"Paid out {result.total_paid} from a pot of {table.pot}")

    for award in result.awards:
        for w in award.winners:
            w.chips += award.shares[w.name]

    table.pot = 0
    for p in table.players:
        p.round_bet = 0
        p.total_bet = 0
    return result


def _pay(result: SettlementResult, player: Player, amount: int) -> None:
    result.payouts[player.name] = result.payouts.get(player.name, 0) + amount


def _award_pot(
    table: Table, pot: SidePot, evaluator: HandEvaluator, result: SettlementResult
) -> PotAward:
    contenders = pot.contenders

    if not contenders:
        if len(pot.eligible_players) == 1:
            owner = pot.eligible_players[0]
            _pay(result, owner, pot.amount)
            return PotAward(pot=pot, winners=[owner], shares={owner.name: pot.amount}, refunded=True)
        LOGGER.error("Side pot of %d has no live contenders", pot.amount)
        raise SettlementError(f"Side pot of {pot.amount} has no live contenders")

    if len(contenders) == 1:
        sole = contenders[0]
        _pay(result, sole, pot.amount)
        return PotAward(pot=pot, winners=[sole], shares={sole.name: pot.amount}, uncalled=True)

    by_result: list[tuple[Player, HandResult]] = []
    for p in contenders:
        hand = result.hands.get(p.name)
        if hand is None:
            hand = evaluator.solve(_seven(p, table.community))
            result.hands[p.name] = hand
        by_result.append((p, hand))

    best = evaluator.winners([h for _, h in by_result])
    winners = [p for p, h in by_result if h in best]
    winners = payout_order(table, winners)
    shares = split_pot(pot.amount, winners)
    for w in winners:
        _pay(result, w, shares[w.name])
    return PotAward(pot=pot, winners=winners, shares=shares, hand_name=best[0].name)


def _seven(player: Player, community: list[Card]) -> list[Card]:
    return list(player.hole_cards) + list(community)
