"""Table positions and the seat-distance factor used by the bot."""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence

from .player import Player


class Position(IntEnum):
    """Seat names ordered by preflop action: UTG first, BB last."""

    UTG = 0
    UTG_1 = 1
    MP = 2
    HJ = 3
    CO = 4
    BTN = 5
    SB = 6
    BB = 7

    @property
    def short(self) -> str:
        """Short abbreviation (e.g. 'UTG+1', 'BTN')."""
        return "UTG+1" if self is Position.UTG_1 else self.name


# Counted back from the last seat to act preflop.
_FROM_END = (Position.BB, Position.SB, Position.BTN, Position.CO, Position.HJ)


def position_from_utg_distance(utg_distance: int, total_players: int) -> Position:
    """Map a seat's distance from UTG to a named Position.

    The last five seats are always BB, SB, BTN, CO and HJ (as far as the
    table reaches); the early seats left over become UTG, UTG+1 and MP.
    """
    if not 0 <= utg_distance < total_players:
        raise ValueError(f"utg_distance must be 0..{total_players - 1}, got {utg_distance}")

    from_end = total_players - 1 - utg_distance
    if from_end < len(_FROM_END):
        return _FROM_END[from_end]
    return (Position.UTG, Position.UTG_1)[utg_distance] if utg_distance < 2 else Position.MP


def seat_position(seat_index: int, total_players: int) -> Position:
    """Named position of a seat when the dealer sits at index 0.

    Heads-up the dealer is the small blind and the other seat the big blind.
    """
    if total_players == 2:
        return Position.SB if seat_index == 0 else Position.BB
    # UTG sits three seats left of the dealer (index 3, wrapping).
    return position_from_utg_distance((seat_index - 3) % total_players, total_players)


def next_live_player(players: Sequence[Player], start_index: int) -> Player:
    """First non-folded player after ``start_index`` (wrapping)."""
    n = len(players)
    for step in range(1, n + 1):
        candidate = players[(start_index + step) % n]
        if not candidate.folded:
            return candidate
    return players[start_index % n]


def first_to_act(players: Sequence[Player], preflop: bool) -> Player:
    """Live player who opens the action: left of the big blind preflop,
    left of the dealer afterwards."""
    if preflop:
        anchor = next((i for i, p in enumerate(players) if p.is_big_blind), -1)
    else:
        anchor = next((i for i, p in enumerate(players) if p.is_dealer), -1)
    return next_live_player(players, anchor)


def position_factor(players: Sequence[Player], player: Player, preflop: bool) -> float:
    """Normalized distance from the first live player to act.

    0.0 for the first to act, 1.0 for the last; 0.0 when the player is alone.
    """
    active = [p for p in players if not p.folded]
    if len(active) <= 1 or player not in active:
        return 0.0
    seat = active.index(player)
    ref = active.index(first_to_act(players, preflop))
    pos = (seat - ref + len(active)) % len(active)
    return pos / (len(active) - 1)
