"""Hand driver: runs a hand street by street through the betting rounds.

The dealer owns the turn order. ``advance()`` plays every bot seat and
returns as soon as a human seat has to act, handing back a
:class:`PendingAction` whose ``token`` the caller passes to ``submit()``
(or ``expire()`` when the human runs out of time). When the hand is over
``advance()`` returns a :class:`HandSummary` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .action import Action, ActionType, ActionWindow
from .betting import BettingRound
from .bot import BotContext, decide
from .bot_queue import BotActionQueue
from .card import Card
from .evaluator import HandEvaluator, StandardEvaluator
from .player import Player
from .pot import SettlementResult, settle
from .presenter import NullPresenter, Presenter
from .table import Phase, Table, advance_phase, begin_hand, blind_indices

LOGGER = logging.getLogger(__name__)

_STREET_NAMES = {
    Phase.FLOP: "Flop dealt: 3 community cards",
    Phase.TURN: "Turn dealt: 4th community card",
    Phase.RIVER: "River dealt: 5th community card",
}


class TimeoutPolicy(Enum):
    """What an expired human turn turns into."""

    CHECK_OR_FOLD = "check_or_fold"
    FOLD = "fold"

    def action_for(self, window: ActionWindow) -> Action:
        if self is TimeoutPolicy.CHECK_OR_FOLD and window.can_check:
            return Action.check()
        return Action.fold()


@dataclass
class PendingAction:
    """A human seat on turn, waiting for ``Dealer.submit``."""

    seat: int
    player: Player
    window: ActionWindow
    token: int


@dataclass
class HandSummary:
    """What happened in a finished hand."""

    hand_number: int
    settlement: SettlementResult
    community: list[Card] = field(default_factory=list)
    eliminated: list[Player] = field(default_factory=list)


class Dealer:
    """Drives hands at one table."""

    def __init__(
        self,
        table: Table,
        presenter: Presenter | None = None,
        evaluator: HandEvaluator | None = None,
        bot_queue: BotActionQueue | None = None,
        timeout_policy: TimeoutPolicy = TimeoutPolicy.CHECK_OR_FOLD,
    ) -> None:
        names = [p.name for p in table.players]
        if len(set(names)) != len(names):
            raise ValueError("Player names must be unique")
        self.table = table
        self.presenter: Presenter = presenter or NullPresenter()
        self.evaluator: HandEvaluator = evaluator or StandardEvaluator()
        self.bot_queue = bot_queue if bot_queue is not None else BotActionQueue()
        self.timeout_policy = timeout_policy
        self.round: BettingRound | None = None
        self.pending: PendingAction | None = None
        self.in_hand = False
        self._eliminated: list[Player] = []
        self._next_token = 0

    # ── Hand lifecycle ───────────────────────────────────────

    def start_hand(self) -> list[Player]:
        """Rotate the button, post blinds, deal and open preflop betting.

        Returns players eliminated before the hand. If fewer than two
        players remain no hand is started.
        """
        if self.in_hand:
            raise ValueError("A hand is already in progress")
        table = self.table
        old_blinds = (table.small_blind, table.big_blind)

        busted = begin_hand(table)
        for p in busted:
            self.presenter.announce(f"{p.name} is out of chips and leaves the table.")
        self._eliminated = busted
        if len(table.players) < 2:
            return busted

        if (table.small_blind, table.big_blind) != old_blinds:
            self.presenter.announce(
                f"Blinds increased to {table.small_blind}/{table.big_blind}."
            )
        self.presenter.announce(f"{table.players[0].name} is Dealer.")
        sb_idx, bb_idx = blind_indices(table)
        sb, bb = table.players[sb_idx], table.players[bb_idx]
        self.presenter.announce(
            f"{sb.name} posted small blind of {sb.round_bet}. "
            f"{bb.name} posted big blind of {bb.round_bet}."
        )
        self.presenter.render_pot(table.pot)
        LOGGER.debug("Hand %d started with %d players", table.hand_number, len(table.players))

        self.round = BettingRound.start(table)
        self.in_hand = True
        return busted

    def advance(self) -> PendingAction | HandSummary:
        """Play until a human must act or the hand is over."""
        if self.pending is not None:
            return self.pending
        if not self.in_hand or self.round is None:
            raise ValueError("No hand in progress")

        while True:
            seat = self.round.next_actor()
            if seat is None:
                summary = self._finish_street()
                if summary is not None:
                    return summary
                continue

            player = self.table.players[seat]
            self.presenter.highlight_acting_seat(player)
            if player.is_bot:
                self._play_bot(seat)
                continue

            self._next_token += 1
            self.pending = PendingAction(
                seat=seat,
                player=player,
                window=self.round.legal_actions(seat),
                token=self._next_token,
            )
            return self.pending

    def submit(self, token: int, action: Action) -> Action:
        """Resume the hand with a human's action. Returns it as applied."""
        pending = self.pending
        if pending is None or token != pending.token:
            raise ValueError(f"Stale or unknown action token: {token}")
        self.pending = None
        return self._apply(pending.seat, action)

    def expire(self, token: int) -> Action:
        """Apply the timeout policy for a human who did not act in time."""
        pending = self.pending
        if pending is None or token != pending.token:
            raise ValueError(f"Stale or unknown action token: {token}")
        action = self.timeout_policy.action_for(pending.window)
        LOGGER.info("%s timed out, auto-%s", pending.player.name, action.type.value)
        return self.submit(token, action)

    def play_hand(self) -> HandSummary | None:
        """Play a whole hand, prompting humans through the presenter.

        Returns None when there are not enough players to deal.
        """
        if not self.in_hand:
            self.start_hand()
            if not self.in_hand:
                return None
        while True:
            step = self.advance()
            if isinstance(step, HandSummary):
                return step
            action = self.presenter.prompt_human_action(step.player, step.window)
            self.submit(step.token, action)

    # ── Internals ────────────────────────────────────────────

    def _play_bot(self, seat: int) -> None:
        player = self.table.players[seat]
        decision = decide(player, BotContext.from_table(self.table, self.evaluator))

        def act() -> None:
            player.bot_line = decision.line
            self._apply(seat, decision.action)

        self.bot_queue.enqueue(act)

    def _apply(self, seat: int, action: Action) -> Action:
        table = self.table
        player = table.players[seat]
        preflop = table.phase is Phase.PREFLOP
        applied = self.round.apply(seat, action)

        if applied.type is ActionType.FOLD:
            player.stats.record_fold()
            message = f"{player.name} folded."
        elif applied.type is ActionType.CHECK:
            message = f"{player.name} checked."
        elif applied.type is ActionType.CALL:
            player.stats.record_call(preflop)
            if player.all_in:
                message = f"{player.name} is all-in ({applied.amount})."
            else:
                message = f"{player.name} called {applied.amount}."
        else:
            player.stats.record_raise(preflop)
            if preflop:
                for p in table.players:
                    p.bot_line.preflop_aggressor = p is player
            if player.all_in:
                message = f"{player.name} is all-in ({applied.amount})."
            else:
                message = f"{player.name} raised to {player.round_bet}."

        self.presenter.announce(message)
        self.presenter.render_pot(table.pot)
        return applied

    def _finish_street(self) -> HandSummary | None:
        table = self.table
        if len(table.live_players) < 2 or table.phase is Phase.RIVER:
            return self._showdown()

        start = len(table.community)
        advance_phase(table)
        for slot, c in enumerate(table.community[start:], start=start):
            self.presenter.render_community_card(slot, c.code)
        self.presenter.announce(_STREET_NAMES[table.phase])
        self.round = BettingRound.start(table)
        return None

    def _showdown(self) -> HandSummary:
        table = self.table
        live = table.live_players
        if len(live) > 1:
            table.phase = Phase.SHOWDOWN
            for p in live:
                self.presenter.reveal_hand(p, list(p.hole_cards))

        pot = table.pot
        result = settle(table, self.evaluator)
        self._announce_settlement(result, pot)
        self.presenter.render_pot(table.pot)

        self.in_hand = False
        self.round = None
        return HandSummary(
            hand_number=table.hand_number,
            settlement=result,
            community=list(table.community),
            eliminated=self._eliminated,
        )

    def _announce_settlement(self, result: SettlementResult, pot: int) -> None:
        if not result.showdown:
            for award in result.awards:
                self.presenter.announce(f"{award.winners[0].name} wins the pot of {pot}!")
            return

        for i, award in enumerate(result.awards, start=1):
            amount = award.pot.amount
            head = f"Pot {i} ({amount}):"
            if award.refunded:
                owner = award.winners[0].name
                self.presenter.announce(f"{head} {amount} returned to {owner}.")
            elif award.uncalled:
                self.presenter.announce(f"{head} {award.winners[0].name} wins {amount} (uncalled).")
            else:
                names = " & ".join(
                    f"{w.name} ({result.hands[w.name].name})" for w in award.winners
                )
                if len(award.winners) == 1:
                    self.presenter.announce(f"{head} {names} wins {amount}.")
                else:
                    share = amount // len(award.winners)
                    self.presenter.announce(f"{head} {names} split {amount} (each {share}).")
        self.presenter.announce("Showdown complete.")
