"""Session loop: plays hands until one player holds every chip."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .bot_queue import BotActionQueue
from .dealer import Dealer, HandSummary, TimeoutPolicy
from .evaluator import HandEvaluator
from .player import Player
from .presenter import Presenter
from .table import Table

LOGGER = logging.getLogger(__name__)

STARTING_STACK = 2000
ORBITS_PER_LEVEL = 2


@dataclass
class TournamentConfig:
    """Configuration for a single-table game."""

    starting_stack: int = STARTING_STACK
    small_blind: int = 10
    big_blind: int = 20
    orbits_per_level: int = ORBITS_PER_LEVEL
    max_hands: int | None = None


@dataclass
class Tournament:
    """Plays hands until one player remains (or ``max_hands`` is reached)."""

    dealer: Dealer
    max_hands: int | None = None

    # Callbacks
    on_hand_start: Callable[[int, Table], None] | None = None
    on_hand_end: Callable[[HandSummary], None] | None = None
    on_elimination: Callable[[Player, int], None] | None = None
    on_tournament_end: Callable[[Player], None] | None = None

    eliminated: list[Player] = field(default_factory=list)
    hands_played: int = 0
    champion: Player | None = None

    @classmethod
    def create(
        cls,
        names: Sequence[str],
        humans: Sequence[str] = (),
        config: TournamentConfig | None = None,
        presenter: Presenter | None = None,
        evaluator: HandEvaluator | None = None,
        bot_queue: BotActionQueue | None = None,
        rng: random.Random | None = None,
        timeout_policy: TimeoutPolicy = TimeoutPolicy.CHECK_OR_FOLD,
    ) -> Tournament:
        """Seat ``names`` with equal stacks; everyone not in ``humans`` is a bot."""
        config = config or TournamentConfig()
        players = [
            Player(name=name, chips=config.starting_stack, is_bot=name not in humans)
            for name in names
        ]
        table = Table(
            players=players,
            small_blind=config.small_blind,
            big_blind=config.big_blind,
            rng=rng or random.Random(),
            orbits_per_level=config.orbits_per_level,
        )
        dealer = Dealer(
            table,
            presenter=presenter,
            evaluator=evaluator,
            bot_queue=bot_queue,
            timeout_policy=timeout_policy,
        )
        return cls(dealer=dealer, max_hands=config.max_hands)

    @property
    def table(self) -> Table:
        return self.dealer.table

    def standings(self) -> list[Player]:
        """Seated players by chip count, then eliminated players, latest bust first."""
        seated = sorted(self.table.players, key=lambda p: p.chips, reverse=True)
        return seated + list(reversed(self.eliminated))

    def play_hand(self) -> HandSummary | None:
        """Start and play one hand. Returns None once the game is over."""
        table = self.table
        if self.champion is not None:
            return None
        if len(table.players) < 2 and not self.eliminated:
            self.dealer.presenter.announce("Not enough players")
            return None

        busted = self.dealer.start_hand()
        for offset, p in enumerate(busted):
            place = len(table.players) + len(busted) - offset
            self.eliminated.append(p)
            LOGGER.info("%s eliminated in place %d", p.name, place)
            if self.on_elimination:
                self.on_elimination(p, place)

        if len(table.players) < 2:
            self._finish()
            return None

        if self.on_hand_start:
            self.on_hand_start(table.hand_number, table)
        summary = self.dealer.play_hand()
        self.hands_played += 1
        if self.on_hand_end and summary is not None:
            self.on_hand_end(summary)
        return summary

    def run(self) -> Player | None:
        """Run to completion. Returns the winner, or None if stopped early."""
        while self.max_hands is None or self.hands_played < self.max_hands:
            if self.play_hand() is None:
                return self.champion
        return None

    def _finish(self) -> None:
        if not self.table.players:
            return
        champion = self.table.players[0]
        self.champion = champion
        self.dealer.presenter.announce(f"{champion.name} has won all the chips and the game!")
        if self.on_tournament_end:
            self.on_tournament_end(champion)
