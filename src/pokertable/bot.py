"""Bot decision engine for unattended seats.

``decide`` is a pure function of the acting player and a :class:`BotContext`.
It never touches the table: the chosen action comes back together with the
updated betting-line memory and a trace of the numbers behind the decision.
All randomness is drawn from ``ctx.rng``.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Sequence

from .action import Action, ActionType
from .card import Card, Rank
from .evaluator import HandEvaluator, HandResult, StandardEvaluator
from .hand import HandRank
from .player import BotLine, Player
from .position import position_factor
from .table import Phase, Table

LOGGER = logging.getLogger(__name__)

MAX_RAISES_PER_ROUND = 3
# Raise threshold bump per raise already made this round
RERAISE_RATIO_STEP = 0.12
# Minimum strength to re-raise (lower with top/over pair)
RERAISE_VALUE_RATIO = 0.34
RERAISE_TOP_PAIR_RATIO = 0.32
# Coin-flip windows around decision thresholds
STRENGTH_TIE_DELTA = 0.25
ODDS_TIE_DELTA = 0.02
# Fewer opponents than this loosens play
OPPONENT_THRESHOLD = 3
AGG_FACTOR = 0.1
THRESHOLD_FACTOR = 0.3
# Opponent stats carry no weight below this many hands
MIN_HANDS_FOR_WEIGHT = 10
WEIGHT_GROWTH = 10
ALLIN_HAND_PREFLOP = 0.85
ALLIN_HAND_POSTFLOP = 0.38

M_RATIO_DEAD_MAX = 1
M_RATIO_RED_MAX = 5
M_RATIO_ORANGE_MAX = 10
M_RATIO_YELLOW_MAX = 20
DEAD_PUSH_RATIO = 0.35
RED_PUSH_RATIO = 0.7
RED_CALL_RATIO = 0.85
ORANGE_PUSH_RATIO = 0.6
ORANGE_CALL_RATIO = 0.8
YELLOW_RAISE_RATIO = 0.6
YELLOW_CALL_RATIO = 0.7
YELLOW_SHOVE_RATIO = 0.85
PREMIUM_PREFLOP_RATIO = 0.8
PREMIUM_POSTFLOP_RATIO = 0.55
GREEN_MAX_STACK_BET = 0.25
CHIP_LEADER_RAISE_DELTA = 0.05
SHORTSTACK_CALL_DELTA = 0.05
SHORTSTACK_RELATIVE = 0.6
MIN_PREFLOP_BLUFF_RATIO = 0.45

COMMIT_SPR_MIN = 1.5
COMMIT_SPR_MAX = 5.5
COMMIT_INVEST_START = 0.1
COMMIT_INVEST_END = 0.6
COMMIT_CALL_RATIO_REF = 0.25
COMMITMENT_PENALTY_MAX = 0.25
POSTFLOP_CALL_BARRIER = 0.16
ELIMINATION_RISK_START = 0.25
ELIMINATION_RISK_FULL = 0.8
ELIMINATION_PENALTY_MAX = 0.25


class MZone(Enum):
    """Stack-depth regime by M-ratio (stack / cost of one orbit)."""

    DEAD = "dead"
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"

    @classmethod
    def from_ratio(cls, m_ratio: float) -> MZone:
        if m_ratio < M_RATIO_DEAD_MAX:
            return cls.DEAD
        if m_ratio <= M_RATIO_RED_MAX:
            return cls.RED
        if m_ratio <= M_RATIO_ORANGE_MAX:
            return cls.ORANGE
        if m_ratio <= M_RATIO_YELLOW_MAX:
            return cls.YELLOW
        return cls.GREEN


@dataclass
class BotContext:
    """What the bot can see when it is asked to act."""

    current_bet: int
    pot: int
    small_blind: int
    big_blind: int
    raises_this_round: int
    last_raise: int
    phase: Phase
    players: list[Player]
    community: list[Card] = field(default_factory=list)
    evaluator: HandEvaluator = field(default_factory=StandardEvaluator)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def from_table(
        cls,
        table: Table,
        evaluator: HandEvaluator | None = None,
        rng: random.Random | None = None,
    ) -> BotContext:
        return cls(
            current_bet=table.current_bet,
            pot=table.pot,
            small_blind=table.small_blind,
            big_blind=table.big_blind,
            raises_this_round=table.raises_this_round,
            last_raise=table.last_raise_size,
            phase=table.phase,
            players=table.players,
            community=list(table.community),
            evaluator=evaluator or StandardEvaluator(),
            rng=rng or table.rng,
        )


@dataclass
class DecisionTrace:
    """Numbers behind one decision, logged at DEBUG level."""

    player: str
    hole: str
    action: str
    amount: int
    hand_name: str
    strength: float
    m_ratio: float
    zone: str
    pot_odds: float
    call_barrier: float
    stack_ratio: float
    commitment_pressure: float
    commitment_penalty: float
    elimination_risk: float
    elimination_penalty: float
    position: float
    opponents: int
    effective_stack: int
    raise_threshold: float
    aggressiveness: float
    raise_level: int
    board: str
    texture: float
    chip_leader: bool
    short_stack: bool
    premium: bool
    line: str
    stab: bool
    bluff: bool

    def __str__(self) -> str:
        def yn(flag: bool) -> str:
            return "Y" if flag else "N"

        return (
            f"{self.player} {self.hole} -> {self.action} | "
            f"H:{self.hand_name} Amt:{self.amount} | "
            f"S:{self.strength:.2f} M:{self.m_ratio:.2f} Z:{self.zone} | "
            f"PO:{self.pot_odds:.2f} CB:{self.call_barrier:.2f} SR:{self.stack_ratio:.2f} | "
            f"CP:{self.commitment_pressure:.2f} CPen:{self.commitment_penalty:.2f} | "
            f"ER:{self.elimination_risk:.2f} EP:{self.elimination_penalty:.2f} | "
            f"Pos:{self.position:.2f} Opp:{self.opponents} Eff:{self.effective_stack} | "
            f"RT:{self.raise_threshold:.2f} Agg:{self.aggressiveness:.2f} "
            f"RL:{self.raise_level} RAdj:{self.raise_level * RERAISE_RATIO_STEP:.2f} | "
            f"Ctx:{self.board} Tex:{self.texture:.2f} | "
            f"CL:{yn(self.chip_leader)} SS:{yn(self.short_stack)} Prem:{yn(self.premium)} | "
            f"Line:{self.line} | Stab:{yn(self.stab)} Bluff:{yn(self.bluff)}"
        )


@dataclass
class BotDecision:
    """The bot's chosen action, its updated line memory and the trace."""

    action: Action
    line: BotLine
    trace: DecisionTrace
    reasoning: str = ""


# ── Hand strength ───────────────────────────────────────────

_PREFLOP_BASE: dict[Rank, float] = {
    Rank.ACE: 10,
    Rank.KING: 8,
    Rank.QUEEN: 7,
    Rank.JACK: 6,
    Rank.TEN: 5,
    Rank.NINE: 4.5,
    Rank.EIGHT: 4,
    Rank.SEVEN: 3.5,
    Rank.SIX: 3,
    Rank.FIVE: 2.5,
    Rank.FOUR: 2,
    Rank.THREE: 1.5,
    Rank.TWO: 1,
}


def round_to_10(x: float) -> int:
    """Round half up to the nearest multiple of 10."""
    return int(math.floor(x / 10 + 0.5)) * 10


def preflop_hand_score(card_a: Card, card_b: Card) -> float:
    """Simplified Chen score of two hole cards, bounded to [0, 10]."""
    high, low = sorted((card_a, card_b), key=lambda c: c.rank, reverse=True)

    score = _PREFLOP_BASE[high.rank]
    if high.rank == low.rank:
        score *= 2
        if score < 5:
            score = 5

    if high.suit == low.suit:
        score += 2

    gap = high.rank - low.rank - 1
    if gap == 1:
        score -= 1
    elif gap == 2:
        score -= 2
    elif gap == 3:
        score -= 4
    elif gap >= 4:
        score -= 5

    if gap <= 1 and high.rank < Rank.QUEEN:
        score += 1

    return min(10, max(0, score))


def hand_tiebreaker(result: HandResult) -> float:
    """Fraction in [0, 1) ordering hands of one category by card ranks."""
    base = 15
    value = 0.0
    factor = 1 / base
    for c in result.cards:
        value += c.rank.index * factor
        factor /= base
    return value


def solved_score(result: HandResult | None) -> float:
    return result.category_rank + hand_tiebreaker(result) if result else 0.0


@dataclass
class Draws:
    flush_draw: bool = False
    straight_draw: bool = False
    outs: int = 0


def analyze_draws(hole: Sequence[Card], board: Sequence[Card]) -> Draws:
    """Flush and straight draws with their outs. A made hand is not a draw."""
    cards = list(hole) + list(board)
    draws = Draws()

    suit_counts: dict = {}
    for c in cards:
        suit_counts[c.suit] = suit_counts.get(c.suit, 0) + 1
    if not any(n >= 5 for n in suit_counts.values()):
        draws.flush_draw = any(n == 4 for n in suit_counts.values())
    flush_outs = 9 if draws.flush_draw else 0

    ranks = {c.rank.value for c in cards}
    if Rank.ACE.value in ranks:
        ranks.add(1)

    straight_outs = 0
    has_straight = False
    missing_ranks: set[int] = set()
    for start in range(1, 11):
        seq = range(start, start + 5)
        missing = [r for r in seq if r not in ranks]
        if not missing:
            has_straight = True
            break
        if len(missing) == 1:
            draws.straight_draw = True
            missing_ranks.add(missing[0])
            if missing[0] in (seq[0], seq[-1]):
                straight_outs = 8

    if has_straight:
        draws.straight_draw = False
        straight_outs = 0
    elif draws.straight_draw and straight_outs == 0:
        straight_outs = 8 if len(missing_ranks) >= 2 else 4

    draws.outs = flush_outs + straight_outs
    return draws


def board_texture(board: Sequence[Card]) -> float:
    """Board wetness from 0 (dry) to 1 (very wet).

    Averages pairing, suitedness and connectedness of the board ranks.
    """
    if len(board) < 3:
        return 0.0

    rank_counts: dict[Rank, int] = {}
    suit_counts: dict = {}
    for c in board:
        rank_counts[c.rank] = rank_counts.get(c.rank, 0) + 1
        suit_counts[c.suit] = suit_counts.get(c.suit, 0) + 1

    max_rank = max(rank_counts.values())
    pair_risk = (max_rank - 1) / (len(board) - 1) if max_rank > 1 else 0.0

    suit_risk = (max(suit_counts.values()) - 1) / (len(board) - 1)

    values = {c.rank.value for c in board}
    if Rank.ACE.value in values:
        values.add(1)
    unique = sorted(values)
    longest = run = 1
    for prev, cur in zip(unique, unique[1:]):
        run = run + 1 if cur == prev + 1 else 1
        longest = max(longest, run)
    connectedness = max(0.0, (longest - 2) / (len(board) - 2)) if longest >= 3 else 0.0

    return max(0.0, min(1.0, (connectedness + suit_risk + pair_risk) / 3))


@dataclass
class BoardContext:
    top_pair: bool = False
    over_pair: bool = False
    draw_chance: bool = False
    draw_outs: int = 0
    draw_equity: float = 0.0
    texture_risk: float = 0.0


def board_context(
    hole: Sequence[Card], board: Sequence[Card], evaluator: HandEvaluator
) -> BoardContext:
    """Top pair / over pair, draw equity and texture for a postflop board."""
    ctx = BoardContext()
    if len(board) < 3:
        return ctx

    solved = evaluator.solve(list(hole) + list(board))
    if solved.category_rank == HandRank.ONE_PAIR:
        pair_rank = solved.cards[0].rank
        highest = max(c.rank for c in board)
        ctx.top_pair = pair_rank == highest
        ctx.over_pair = hole[0].rank == hole[1].rank and pair_rank > highest

    draws = analyze_draws(hole, board)
    ctx.draw_chance = draws.flush_draw or draws.straight_draw
    ctx.draw_outs = draws.outs
    if draws.outs > 0:
        per_out = {3: 0.04, 4: 0.02}.get(len(board), 0.0)
        ctx.draw_equity = min(1.0, draws.outs * per_out)

    ctx.texture_risk = board_texture(board)
    return ctx


# ── Risk metrics ────────────────────────────────────────────


def _clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, x))


def commitment_metrics(
    need_to_call: int, player: Player, spr: float, remaining_streets: int
) -> tuple[float, float]:
    """(pressure, penalty) discouraging folds once heavily invested."""
    invested = player.total_bet + max(0, need_to_call)
    invested_ratio = invested / max(1, invested + player.chips)
    call_cost_ratio = need_to_call / max(1, player.chips)
    spr_pressure = _clamp((spr - COMMIT_SPR_MIN) / (COMMIT_SPR_MAX - COMMIT_SPR_MIN))
    invest_pressure = _clamp(
        (invested_ratio - COMMIT_INVEST_START) / (COMMIT_INVEST_END - COMMIT_INVEST_START)
    )
    call_pressure = _clamp(call_cost_ratio / COMMIT_CALL_RATIO_REF)
    street_pressure = min(1.0, remaining_streets / 2)
    pressure = (invest_pressure * 0.6 + call_pressure * 0.4) * spr_pressure * street_pressure
    return pressure, pressure * COMMITMENT_PENALTY_MAX


def elimination_risk(stack_ratio: float) -> tuple[float, float]:
    """(risk, penalty) growing with the share of the stack a call costs."""
    risk = _clamp(
        (stack_ratio - ELIMINATION_RISK_START) / (ELIMINATION_RISK_FULL - ELIMINATION_RISK_START)
    )
    return risk, risk * ELIMINATION_PENALTY_MAX


def stats_weight(avg_hands: float) -> float:
    """Influence of opponent stats: none below the minimum sample, then
    rising smoothly towards 1."""
    if avg_hands < MIN_HANDS_FOR_WEIGHT:
        return 0.0
    return 1 - math.exp(-(avg_hands - MIN_HANDS_FOR_WEIGHT) / WEIGHT_GROWTH)


# ── Bet sizing ──────────────────────────────────────────────


@dataclass
class _Sizing:
    preflop: bool
    chips: int
    pot: int
    need_to_call: int
    big_blind: int
    min_raise_amount: int
    strength_ratio: float
    active_opponents: int
    position: float
    spr: float
    texture_risk: float
    bet_agg_factor: float
    green_zone: bool
    premium: bool

    def _cap(self, amount: int) -> int:
        if not self.green_zone or self.premium:
            return amount
        cap_ratio = 0.3 if self.spr < 3 else 0.2 if self.spr > 6 else GREEN_MAX_STACK_BET
        return min(amount, math.floor(self.chips * cap_ratio))

    def _pot_fraction(self, factor: float) -> int:
        sized = round_to_10(
            min(self.chips, (self.pot + self.need_to_call) * factor * self.bet_agg_factor)
        )
        return self._cap(sized)

    def value_bet(self, rng: random.Random) -> int:
        if self.preflop:
            base = 0.55
            if self.strength_ratio >= 0.9:
                base += 0.15
            base += self.active_opponents * 0.04
            base += (1 - self.position) * 0.05
            if self.position < 0.3 and self.strength_ratio >= 0.8:
                base += 0.1  # bigger open from early position
        else:
            base = 0.7 if self.texture_risk > 0.6 else 0.6 if self.texture_risk > 0.3 else 0.45
            if self.strength_ratio > 0.95:
                base += 0.1
            base += self.active_opponents * 0.03
            base += (1 - self.position) * 0.05
        if self.spr < 2:
            base += 0.1
        elif self.spr < 4:
            base += 0.05
        elif self.spr > 6:
            base -= 0.05
        rand = rng.random() * 0.2 - 0.1
        return self._pot_fraction(_clamp(base + rand, 0.35, 1.0))

    def bluff_bet(self, rng: random.Random) -> int:
        base = 0.25 + self.texture_risk * 0.05
        base += self.active_opponents * 0.02
        base += (1 - self.position) * 0.03
        if self.spr < 3:
            base += 0.05
        elif self.spr > 5:
            base -= 0.05
        rand = rng.random() * 0.08 - 0.04
        return self._pot_fraction(_clamp(base + rand, 0.2, 0.45))

    def protection_bet(self, rng: random.Random) -> int:
        base = 0.45 + self.texture_risk * 0.25
        base += self.active_opponents * 0.03
        base += (1 - self.position) * 0.04
        if self.spr < 3:
            base += 0.1
        elif self.spr > 5:
            base -= 0.05
        rand = rng.random() * 0.1 - 0.05
        return self._pot_fraction(_clamp(base + rand, 0.35, 0.8))

    def over_bet(self, rng: random.Random) -> int:
        base = 1.2 - self.texture_risk * 0.1
        base += self.active_opponents * 0.05
        if self.spr < 2:
            base += 0.3
        rand = rng.random() * 0.15 - 0.05
        return self._pot_fraction(_clamp(base + rand, 1.1, 1.5))

    def yellow_raise(self, rng: random.Random) -> int:
        base = self.big_blind * (2.5 + rng.random() * 0.5)
        sized = round_to_10(base * self.bet_agg_factor)
        return min(self.chips, max(self.min_raise_amount, sized))


# ── Short-stack (Harrington) play ───────────────────────────


@dataclass
class _Thresholds:
    dead_push: float
    red_push: float
    orange_push: float
    yellow_raise: float
    yellow_shove: float
    red_call: float
    orange_call: float
    yellow_call: float


def _harrington(
    zone: MZone,
    facing_raise: bool,
    need_to_call: int,
    strength_ratio: float,
    t: _Thresholds,
    can_shove: bool,
    can_raise: bool,
    chips: int,
    yellow_raise_size: Callable[[], int],
) -> tuple[Action, str] | None:
    """Push/call/fold schedule for the non-green zones preflop."""
    needs_to_call = need_to_call > 0
    shove = Action.raise_(chips)
    call = Action.call(min(chips, need_to_call))
    give_up = Action.fold() if needs_to_call else Action.check()

    if zone is MZone.DEAD:
        if facing_raise and needs_to_call:
            if strength_ratio >= t.dead_push:
                return (shove if can_shove else call), "dead zone: shove over raise"
            return Action.fold(), "dead zone: fold to raise"
        if can_shove and strength_ratio >= t.dead_push:
            return shove, "dead zone: push"
        return give_up, "dead zone: too weak to push"

    if zone in (MZone.RED, MZone.ORANGE):
        call_at = t.red_call if zone is MZone.RED else t.orange_call
        push_at = t.red_push if zone is MZone.RED else t.orange_push
        if facing_raise and needs_to_call:
            if strength_ratio >= call_at:
                return call, f"{zone.value} zone: call raise"
            return Action.fold(), f"{zone.value} zone: fold to raise"
        if can_shove and strength_ratio >= push_at:
            return shove, f"{zone.value} zone: push"
        return give_up, f"{zone.value} zone: too weak to push"

    if zone is MZone.YELLOW:
        if facing_raise and needs_to_call:
            if can_shove and strength_ratio >= t.yellow_shove:
                return shove, "yellow zone: shove over raise"
            if strength_ratio >= t.yellow_call:
                return call, "yellow zone: call raise"
            return Action.fold(), "yellow zone: fold to raise"
        if can_shove and strength_ratio >= t.yellow_shove:
            return shove, "yellow zone: shove"
        if can_raise and strength_ratio >= t.yellow_raise:
            return Action.raise_(yellow_raise_size()), "yellow zone: raise"
        return give_up, "yellow zone: too weak to open"

    return None


# ── Betting-line intents ────────────────────────────────────


def _cbet_intent(
    rng: random.Random, abort: bool, texture: float, opponents: int, position: float,
    fold_rate: float, strength_ratio: float, draw_equity: float, weight: float,
) -> bool:
    if abort:
        return False
    chance = 0.55
    if texture < 0.35:
        chance += 0.15
    elif texture > 0.6:
        chance -= 0.2
    chance -= max(0, opponents - 1) * 0.06
    chance += position * 0.08
    chance += min(0.2, fold_rate * 0.25)
    if strength_ratio >= 0.7:
        chance += 0.15
    if draw_equity > 0:
        chance += 0.08
    chance *= 0.6 + 0.4 * weight
    return rng.random() < _clamp(chance, 0.15, 0.85)


def _barrel_intent(
    rng: random.Random, abort: bool, texture: float, opponents: int, position: float,
    fold_rate: float, strength_ratio: float, draw_equity: float, weight: float,
) -> bool:
    if abort:
        return False
    chance = 0.35
    if texture < 0.35:
        chance += 0.1
    elif texture > 0.6:
        chance -= 0.15
    chance -= max(0, opponents - 1) * 0.05
    chance += position * 0.06
    chance += min(0.15, fold_rate * 0.2)
    if strength_ratio >= 0.75:
        chance += 0.1
    if draw_equity > 0:
        chance += 0.06
    chance *= 0.6 + 0.4 * weight
    return rng.random() < _clamp(chance, 0.1, 0.75)


# ── Decision ────────────────────────────────────────────────


def decide(player: Player, ctx: BotContext) -> BotDecision:
    """Choose an action for ``player``. Never mutates the player or table."""
    rng = ctx.rng
    chips = player.chips
    hole = list(player.hole_cards)
    community = list(ctx.community)
    preflop = not community
    phase = ctx.phase

    need_to_call = max(0, ctx.current_bet - player.round_bet)
    needs_to_call = need_to_call > 0
    min_raise_amount = max(ctx.last_raise, need_to_call + ctx.last_raise)

    pot_odds = need_to_call / max(1, ctx.pot + need_to_call)
    stack_ratio = need_to_call / max(1, chips)
    spr = chips / max(1, ctx.pot + need_to_call)
    m_ratio = chips / (ctx.small_blind + ctx.big_blind)
    if phase is Phase.PREFLOP:
        facing_raise = ctx.current_bet > ctx.big_blind
    else:
        facing_raise = ctx.current_bet > 0
    can_raise = ctx.raises_this_round < MAX_RAISES_PER_ROUND and chips > ctx.big_blind
    can_shove = ctx.raises_this_round < MAX_RAISES_PER_ROUND

    opponents = [p for p in ctx.players if not p.folded and p is not player]
    active_opponents = len(opponents)
    max_opp = max((p.chips for p in opponents), default=0)
    effective_stack = min(chips, max_opp) if opponents else chips
    chip_leader = chips > max_opp if opponents else True
    short_stack = (
        bool(opponents) and effective_stack == chips and chips < max_opp * SHORTSTACK_RELATIVE
    )
    line = replace(player.bot_line)
    pos = position_factor(ctx.players, player, phase is Phase.PREFLOP)

    # Hand strength
    solved: HandResult | None = None
    if preflop:
        strength = preflop_hand_score(hole[0], hole[1])
    else:
        solved = ctx.evaluator.solve(hole + community)
        strength = solved_score(solved)

    # Do the hole cards matter? On the river compare against the board alone.
    hole_improves = False
    if solved is not None:
        if len(community) < 5:
            hole_improves = solved.uses_any(hole)
        else:
            hole_improves = solved_score(solved) > solved_score(ctx.evaluator.solve(community))

    board = BoardContext() if preflop else board_context(hole, community, ctx.evaluator)

    strength_ratio = strength / 10
    zone = MZone.from_ratio(m_ratio)
    green = zone is MZone.GREEN
    premium = strength_ratio >= (PREMIUM_PREFLOP_RATIO if preflop else PREMIUM_POSTFLOP_RATIO)
    raise_agg_adj = -CHIP_LEADER_RAISE_DELTA if chip_leader else 0.0
    call_tight_adj = (
        -SHORTSTACK_CALL_DELTA if short_stack and stack_ratio < ELIMINATION_RISK_START else 0.0
    )
    use_harrington = preflop and not green
    remaining_streets = 3 if preflop else {3: 2, 4: 1}.get(len(community), 0)

    commit_pressure, commit_penalty = commitment_metrics(
        need_to_call, player, spr, remaining_streets
    )
    if needs_to_call:
        elim_risk, elim_penalty = elimination_risk(stack_ratio)
    else:
        elim_risk, elim_penalty = 0.0, 0.0

    thresholds = _Thresholds(
        dead_push=max(0.0, DEAD_PUSH_RATIO + raise_agg_adj),
        red_push=max(0.0, RED_PUSH_RATIO + raise_agg_adj),
        orange_push=max(0.0, ORANGE_PUSH_RATIO + raise_agg_adj),
        yellow_raise=max(0.0, YELLOW_RAISE_RATIO + raise_agg_adj),
        yellow_shove=max(0.0, YELLOW_SHOVE_RATIO + raise_agg_adj),
        red_call=min(1.0, min(1.0, RED_CALL_RATIO + call_tight_adj) + elim_penalty),
        orange_call=min(1.0, min(1.0, ORANGE_CALL_RATIO + call_tight_adj) + elim_penalty),
        yellow_call=min(1.0, min(1.0, YELLOW_CALL_RATIO + call_tight_adj) + elim_penalty),
    )

    # Call barrier
    if preflop:
        call_barrier = min(1.0, _clamp(pot_odds + call_tight_adj) + commit_penalty)
    else:
        barrier_adj = 0.0
        if hole_improves:
            if board.over_pair:
                barrier_adj -= 0.03
            elif board.top_pair:
                barrier_adj -= 0.02
        if board.draw_outs >= 8:
            if len(community) == 3:
                barrier_adj -= 0.02
            elif len(community) == 4:
                barrier_adj -= 0.01
        if active_opponents <= 1:
            barrier_adj -= 0.02
        if board.texture_risk > 0.6:
            barrier_adj += 0.02
        if spr < 3:
            barrier_adj -= 0.01
        elif spr > 6:
            barrier_adj += 0.01
        barrier_adj = _clamp(barrier_adj, -0.04, 0.04)

        pot_odds_adj = _clamp((0.25 - pot_odds) * 0.6, -0.12, 0.08) if needs_to_call else 0.0
        commitment_shift = commit_penalty * 0.8 if needs_to_call else 0.0
        call_barrier = (
            _clamp(POSTFLOP_CALL_BARRIER + call_tight_adj)
            + barrier_adj - pot_odds_adj + commitment_shift
        )
        call_barrier = _clamp(call_barrier, 0.10, 0.22)
    elimination_barrier = min(1.0, call_barrier + elim_penalty) if needs_to_call else call_barrier

    # Raise threshold and aggressiveness
    if active_opponents < OPPONENT_THRESHOLD:
        opp_agg_adj = (OPPONENT_THRESHOLD - active_opponents) * AGG_FACTOR
        threshold_adj = (OPPONENT_THRESHOLD - active_opponents) * THRESHOLD_FACTOR
    else:
        opp_agg_adj = threshold_adj = 0.0
    if preflop:
        aggressiveness = 0.8 + 0.4 * pos + opp_agg_adj
        raise_threshold = max(1.0, 8 - 2 * pos - threshold_adj)
    else:
        aggressiveness = 1 + 0.6 * pos
        raise_threshold = max(1.0, 2.6 - 0.8 * pos)
    if chip_leader:
        raise_threshold = max(1.0, raise_threshold - CHIP_LEADER_RAISE_DELTA * 10)
    decision_strength = strength if preflop else strength_ratio * 10

    # Opponent modeling
    bluff_chance = 0.0
    fold_rate = 0.0
    weight = 0.0
    stat_opponents = [p for p in ctx.players if p is not player]
    if stat_opponents:
        n = len(stat_opponents)
        avg_vpip = sum(p.stats.vpip_rate for p in stat_opponents) / n
        avg_agg = sum(p.stats.aggression_factor for p in stat_opponents) / n
        fold_rate = sum(p.stats.fold_rate for p in stat_opponents) / n
        weight = stats_weight(sum(p.stats.hands for p in stat_opponents) / n)

        bluff_chance = min(0.3, fold_rate) * weight
        bluff_chance *= 1 - board.texture_risk * 0.5
        bluff_chance = min(0.3, bluff_chance * _clamp(aggressiveness, 0.8, 1.2))

        if avg_vpip < 0.25:
            raise_threshold -= 0.5 * weight
            aggressiveness += 0.1 * weight
        elif avg_vpip > 0.5:
            raise_threshold += 0.5 * weight
            aggressiveness -= 0.1 * weight

        if avg_agg > 1.5:
            aggressiveness -= 0.1 * weight
        elif avg_agg < 0.7:
            aggressiveness += 0.1 * weight

    raise_threshold = max(1.0, raise_threshold - (aggressiveness - 1) * 0.8)
    if not preflop:
        raise_adj = 0.0
        if hole_improves:
            if board.over_pair:
                raise_adj -= 0.35
            elif board.top_pair:
                raise_adj -= 0.2
        if board.draw_outs >= 8:
            if len(community) == 3:
                raise_adj -= 0.15
            elif len(community) == 4:
                raise_adj -= 0.08
        if active_opponents <= 1:
            raise_adj -= 0.15
        if board.texture_risk > 0.6:
            raise_adj += 0.15
        if spr < 3:
            raise_adj -= 0.1
        elif spr > 6:
            raise_adj += 0.1
        raise_threshold = max(1.4, raise_threshold + _clamp(raise_adj, -0.5, 0.5))
    raise_level = ctx.raises_this_round if facing_raise and ctx.raises_this_round > 0 else 0
    raise_threshold += raise_level * RERAISE_RATIO_STEP * 10
    bet_agg_factor = _clamp(aggressiveness, 0.9, 1.1)
    shove_agg_adj = _clamp((aggressiveness - 1) * 0.12, -0.08, 0.08)

    sizing = _Sizing(
        preflop=preflop,
        chips=chips,
        pot=ctx.pot,
        need_to_call=need_to_call,
        big_blind=ctx.big_blind,
        min_raise_amount=min_raise_amount,
        strength_ratio=strength_ratio,
        active_opponents=active_opponents,
        position=pos,
        spr=spr,
        texture_risk=board.texture_risk,
        bet_agg_factor=bet_agg_factor,
        green_zone=green,
        premium=premium,
    )

    # Betting-line memory for the preflop aggressor
    line_abort = False
    if not preflop and line.preflop_aggressor:
        line_abort = (
            board.texture_risk > 0.7 and strength_ratio < 0.45 and board.draw_equity == 0
        )
        intent_args = (
            board.texture_risk, active_opponents, pos, fold_rate,
            strength_ratio, board.draw_equity, weight,
        )
        if phase is Phase.FLOP and line.cbet_intent is None:
            line.cbet_intent = _cbet_intent(rng, line_abort, *intent_args)
        if phase is Phase.TURN and line.cbet_made and line.barrel_intent is None:
            line.barrel_intent = _barrel_intent(rng, line_abort, *intent_args)

    call_amount = min(chips, need_to_call)
    decision: Action | None = None
    reason = ""

    if use_harrington:
        picked = _harrington(
            zone, facing_raise, need_to_call, strength_ratio, thresholds,
            can_shove, can_raise, chips, lambda: sizing.yellow_raise(rng),
        )
        if picked is not None:
            decision, reason = picked

    # Shallow stacks shove
    if decision is None:
        if spr <= 1.2 and strength_ratio >= _clamp(0.65 - shove_agg_adj):
            decision, reason = Action.raise_(chips), "shallow stack shove"
        elif (
            preflop and chips <= ctx.big_blind * 10
            and strength_ratio >= _clamp(0.75 - shove_agg_adj)
        ):
            decision, reason = Action.raise_(chips), "short stack shove"

    if decision is None:
        tie = abs(decision_strength - raise_threshold) <= STRENGTH_TIE_DELTA
        continue_ok = strength_ratio >= elimination_barrier and stack_ratio <= (
            0.5 if preflop else 0.7
        )
        if need_to_call <= 0:
            if can_raise and decision_strength >= raise_threshold:
                amount = max(min_raise_amount, sizing.value_bet(rng))
                if tie and rng.random() < 0.5:
                    decision, reason = Action.check(), "close to raise threshold: check"
                else:
                    decision, reason = Action.raise_(amount), "value bet"
            else:
                decision, reason = Action.check(), "below raise threshold"
        elif can_raise and decision_strength >= raise_threshold and stack_ratio <= 1 / 3:
            amount = max(min_raise_amount, sizing.protection_bet(rng))
            if tie:
                alt = Action.call(call_amount) if continue_ok else Action.fold()
                if rng.random() < 0.5:
                    decision, reason = Action.raise_(amount), "close to raise threshold: raise"
                else:
                    decision, reason = alt, "close to raise threshold: flat"
            else:
                decision, reason = Action.raise_(amount), "raise for value and protection"
        elif continue_ok:
            if abs(strength_ratio - elimination_barrier) <= ODDS_TIE_DELTA and rng.random() >= 0.5:
                decision, reason = Action.fold(), "marginal odds: fold"
            else:
                decision, reason = Action.call(call_amount), "enough equity to call"
        else:
            decision, reason = Action.fold(), "below call barrier"

    is_bluff = False
    is_stab = False
    if not use_harrington:
        facing_all_in = any(p.all_in for p in stat_opponents)
        if decision.type is ActionType.FOLD and facing_all_in:
            good = ALLIN_HAND_PREFLOP if preflop else ALLIN_HAND_POSTFLOP
            if strength_ratio >= min(1.0, good + elim_penalty):
                decision, reason = Action.call(call_amount), "call all-in with strong hand"

        if (
            bluff_chance > 0 and can_raise and not facing_raise
            and (not preflop or strength_ratio >= MIN_PREFLOP_BLUFF_RATIO)
            and decision.type in (ActionType.CHECK, ActionType.FOLD)
            and not facing_all_in
        ):
            if rng.random() < bluff_chance:
                decision = Action.raise_(max(min_raise_amount, sizing.bluff_bet(rng)))
                reason = "bluff"
                is_bluff = True

        if (
            not preflop and ctx.current_bet == 0 and decision.type is ActionType.CHECK
            and can_raise and not facing_raise and line.preflop_aggressor
            and not line_abort and strength_ratio < 0.9
        ):
            if phase is Phase.FLOP and line.cbet_intent:
                strong_enough = strength_ratio >= 0.6 or board.draw_equity > 0
                bet = sizing.protection_bet(rng) if strong_enough else sizing.bluff_bet(rng)
                decision = Action.raise_(min(chips, max(ctx.last_raise, bet)))
                reason = "continuation bet"
                if strength_ratio < 0.6 and board.draw_equity == 0:
                    is_bluff = True
            elif phase is Phase.TURN and line.barrel_intent:
                strong_enough = strength_ratio >= 0.65 or board.draw_equity > 0
                bet = sizing.protection_bet(rng) if strong_enough else sizing.bluff_bet(rng)
                decision = Action.raise_(min(chips, max(ctx.last_raise, bet)))
                reason = "second barrel"
                if strength_ratio < 0.6 and board.draw_equity == 0:
                    is_bluff = True

        if (
            not preflop and decision.type is ActionType.RAISE and strength_ratio >= 0.95
            and spr <= 2 and rng.random() < 0.3
        ):
            decision = Action.raise_(max(decision.amount, sizing.over_bet(rng)))
            reason = "overbet the nuts"

        if (
            not preflop and not needs_to_call and strength_ratio >= 0.9
            and decision.type is ActionType.RAISE and rng.random() < 0.3
        ):
            decision, reason = Action.check(), "slowplay"

        if (
            not preflop and ctx.current_bet == 0 and decision.type is ActionType.CHECK
            and can_raise and not facing_raise and board.texture_risk < 0.4
            and (fold_rate > 0.25 or board.draw_equity > 0) and rng.random() < 0.2
        ):
            decision = Action.raise_(max(ctx.last_raise, sizing.protection_bet(rng)))
            reason = "stab"
            is_stab = True

    # Re-raises need real value
    reraise_ratio = (
        RERAISE_TOP_PAIR_RATIO if board.top_pair or board.over_pair else RERAISE_VALUE_RATIO
    )
    if decision.type is ActionType.RAISE and raise_level > 0 and strength_ratio < reraise_ratio:
        decision = Action.call(call_amount) if needs_to_call else Action.check()
        reason = "too weak to re-raise"
        is_bluff = is_stab = False

    decision = _clamp_to_legal(decision, need_to_call, ctx.last_raise, chips)

    if line.preflop_aggressor and not preflop and ctx.current_bet == 0:
        if decision.type is ActionType.RAISE:
            if phase is Phase.FLOP:
                line.cbet_made = True
            elif phase is Phase.TURN and line.cbet_made:
                line.barrel_made = True

    trace = DecisionTrace(
        player=player.name,
        hole=" ".join(str(c) for c in hole),
        action=decision.type.value,
        amount=decision.amount,
        hand_name=solved.name if solved is not None else "preflop",
        strength=strength_ratio,
        m_ratio=m_ratio,
        zone=zone.value,
        pot_odds=pot_odds,
        call_barrier=elimination_barrier,
        stack_ratio=stack_ratio,
        commitment_pressure=commit_pressure,
        commitment_penalty=commit_penalty,
        elimination_risk=elim_risk,
        elimination_penalty=elim_penalty,
        position=pos,
        opponents=active_opponents,
        effective_stack=effective_stack,
        raise_threshold=raise_threshold,
        aggressiveness=aggressiveness,
        raise_level=raise_level,
        board="OP" if board.over_pair else "TP" if board.top_pair else "DR" if board.draw_chance else "-",
        texture=board.texture_risk,
        chip_leader=chip_leader,
        short_stack=short_stack,
        premium=premium,
        line=_line_tag(line, line_abort),
        stab=is_stab,
        bluff=is_bluff,
    )
    LOGGER.debug("%s", trace)
    return BotDecision(action=decision, line=line, trace=trace, reasoning=reason)


def _clamp_to_legal(action: Action, need_to_call: int, last_raise: int, chips: int) -> Action:
    """Same normalization a human action gets at the table."""
    if action.type is ActionType.CALL:
        return Action.call(min(chips, need_to_call)) if need_to_call > 0 else Action.check()
    if action.type is not ActionType.RAISE:
        return action
    amount = min(int(action.amount), chips)
    if amount <= need_to_call or (amount < need_to_call + last_raise and amount < chips):
        return Action.call(min(chips, need_to_call)) if need_to_call > 0 else Action.check()
    return Action.raise_(amount)


def _line_tag(line: BotLine, aborted: bool) -> str:
    if not line.preflop_aggressor:
        return "-"

    def flag(value: bool | None) -> str:
        return "-" if value is None else "Y" if value else "N"

    return (
        f"PFA CP:{flag(line.cbet_intent)} BP:{flag(line.barrel_intent)} "
        f"CM:{flag(line.cbet_made)} BM:{flag(line.barrel_made)} LA:{flag(aborted)}"
    )


def choose_bot_action(player: Player, ctx: BotContext) -> Action:
    """Action only, for callers that do not track the betting line."""
    return decide(player, ctx).action
