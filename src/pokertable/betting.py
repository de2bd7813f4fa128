"""Betting round state machine.

A :class:`BettingRound` drives one street. It is resumable: the caller asks
``next_actor()`` for the seat to act, gets an :class:`ActionWindow` from
``legal_actions()``, and feeds the chosen action to ``apply()``. Nothing
recurses and nothing blocks, so a human seat can take as long as it likes
between ``next_actor()`` and ``apply()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .action import Action, ActionType, ActionWindow
from .table import Phase, Table, apply_bet

LOGGER = logging.getLogger(__name__)

# Slider step once a bet is being faced.
FACING_BET_STEP = 10


def legal_actions(table: Table, seat_index: int, locked: bool = False) -> ActionWindow:
    """Legal action envelope for a seat.

    ``locked`` seats (already acted, then faced a short all-in) may call or
    fold but not raise.
    """
    player = table.players[seat_index]
    need = table.need_to_call(seat_index)
    chips = player.chips
    min_raise = min(chips, need + table.last_raise_size)

    if table.phase is not Phase.PREFLOP and table.current_bet == 0:
        # Opening bet postflop: check or bet in big-blind steps.
        min_bet = 0
        step = table.big_blind if chips >= table.big_blind else chips
    else:
        min_bet = min(need, chips)
        step = FACING_BET_STEP

    return ActionWindow(
        to_call=need,
        can_check=need == 0,
        can_raise=chips > need and not locked,
        min_raise=min_raise,
        max_raise=chips,
        min_bet=min_bet,
        step=step,
    )


def _call_or_check(need: int, chips: int) -> Action:
    if need <= 0:
        return Action.check()
    return Action.call(min(need, chips))


def normalize(table: Table, seat_index: int, action: Action, locked: bool = False) -> Action:
    """Turn any requested action into a legal one.

    Raises above the stack become all-ins; raises below the legal minimum
    (and below the whole stack) fall back to a call, or a check when nothing
    is owed. A check facing a bet is treated as a call and a call with
    nothing owed as a check.
    """
    player = table.players[seat_index]
    need = table.need_to_call(seat_index)
    chips = player.chips

    if action.type is ActionType.FOLD:
        return Action.fold()
    if action.type in (ActionType.CHECK, ActionType.CALL):
        return _call_or_check(need, chips)

    amount = min(int(action.amount), chips)
    if amount <= need:
        return _call_or_check(need, chips)
    if locked:
        LOGGER.debug("%s may not re-raise a short all-in, calling", player.name)
        return _call_or_check(need, chips)
    if amount < need + table.last_raise_size and amount < chips:
        LOGGER.debug(
            "%s raise of %d is below the minimum %d, downgraded",
            player.name, amount, need + table.last_raise_size,
        )
        return _call_or_check(need, chips)
    return Action.raise_(amount)


@dataclass
class BettingRound:
    """One street of betting.

    ``pending`` holds the seats that still owe an action this round. Every
    actionable seat starts in it, so each gets its first pass (the big
    blind's option preflop, an opening bet postflop). A full raise puts
    every other actionable seat back in. A short all-in only adds the seats
    that now owe chips, and those that had already acted become
    ``raise_locked``.
    """

    table: Table
    turn_pointer: int = 0
    actions_taken: int = 0
    pending: set[int] = field(default_factory=set)
    raise_locked: set[int] = field(default_factory=set)
    skipped: bool = False
    closed: bool = False

    @classmethod
    def start(cls, table: Table) -> BettingRound:
        """Open the betting round for the table's current street."""
        n = len(table.players)
        if table.phase is Phase.PREFLOP:
            anchor = table.big_blind_index
        else:
            anchor = table.dealer_index
        start = (anchor + 1) % n if n else 0

        actionable = [i for i, p in enumerate(table.players) if p.is_actionable]
        pending = set(actionable)
        skipped = False
        if len(actionable) < 2:
            # A lone seat still facing a bet gets to call or fold.
            if len(actionable) == 1 and table.need_to_call(actionable[0]) > 0:
                pending = {actionable[0]}
            else:
                pending = set()
                skipped = True
        if len(table.live_players) < 2:
            pending = set()
            skipped = True

        return cls(
            table=table,
            turn_pointer=start,
            pending=pending,
            skipped=skipped,
            closed=not pending,
        )

    def next_actor(self) -> int | None:
        """Seat index of the next player to act, or None once closed."""
        if self.closed:
            return None
        table = self.table
        if len(table.live_players) < 2:
            return self._close()

        actionable = [i for i, p in enumerate(table.players) if p.is_actionable]
        if len(actionable) == 1 and table.need_to_call(actionable[0]) == 0:
            return self._close()

        n = len(table.players)
        for step in range(n):
            idx = (self.turn_pointer + step) % n
            if not table.players[idx].is_actionable:
                self.pending.discard(idx)
                continue
            if idx in self.pending:
                self.turn_pointer = idx
                return idx
        return self._close()

    def _close(self) -> None:
        self.closed = True
        self.pending.clear()
        return None

    def legal_actions(self, seat_index: int) -> ActionWindow:
        return legal_actions(self.table, seat_index, seat_index in self.raise_locked)

    def normalize(self, seat_index: int, action: Action) -> Action:
        return normalize(self.table, seat_index, action, seat_index in self.raise_locked)

    def apply(self, seat_index: int, action: Action) -> Action:
        """Apply an action for the seat on turn.

        Returns the action as applied: normalized, with ``amount`` set to
        the chips that actually moved.
        """
        if self.closed or seat_index != self.turn_pointer or seat_index not in self.pending:
            raise ValueError(f"Seat {seat_index} is not on turn")

        table = self.table
        player = table.players[seat_index]
        applied = self.normalize(seat_index, action)
        self.pending.discard(seat_index)
        self.raise_locked.discard(seat_index)

        if applied.type is ActionType.FOLD:
            player.folded = True
        elif applied.type is ActionType.CALL:
            applied = Action.call(apply_bet(table, seat_index, applied.amount))
        elif applied.type is ActionType.RAISE:
            previous_bet = table.current_bet
            applied = Action.raise_(apply_bet(table, seat_index, applied.amount))
            self._register_raise(seat_index, player.round_bet - previous_bet)

        self.actions_taken += 1
        self.turn_pointer = (seat_index + 1) % len(table.players)
        return applied

    def _register_raise(self, seat_index: int, increment: int) -> None:
        table = self.table
        new_bet = table.players[seat_index].round_bet
        if increment >= table.last_raise_size:
            table.current_bet = new_bet
            table.last_raise_size = increment
            table.raises_this_round += 1
            self.raise_locked.clear()
            self.pending = {
                i for i, p in enumerate(table.players)
                if i != seat_index and p.is_actionable
            }
            return

        # Short all-in: the bet goes up but action is not re-opened.
        table.current_bet = new_bet
        for i, p in enumerate(table.players):
            if i == seat_index or not p.is_actionable or p.round_bet >= new_bet:
                continue
            if i not in self.pending:
                self.raise_locked.add(i)
            self.pending.add(i)
