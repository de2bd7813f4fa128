"""Presentation boundary.

The engine reports what happens through a :class:`Presenter` and never asks
it for game facts. Front ends implement the protocol; ``NullPresenter`` and
``LoggingPresenter`` cover headless use.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .action import Action, ActionWindow
from .card import Card
from .player import Player

LOGGER = logging.getLogger(__name__)


class Presenter(Protocol):
    """Render primitives the engine calls out to."""

    def highlight_acting_seat(self, player: Player) -> None: ...

    def render_pot(self, amount: int) -> None: ...

    def render_community_card(self, slot: int, code: str) -> None: ...

    def prompt_human_action(self, player: Player, window: ActionWindow) -> Action: ...

    def reveal_hand(self, player: Player, cards: list[Card]) -> None: ...

    def announce(self, message: str) -> None: ...


class NullPresenter:
    """Renders nothing. Human prompts check when free and fold otherwise."""

    def highlight_acting_seat(self, player: Player) -> None:
        pass

    def render_pot(self, amount: int) -> None:
        pass

    def render_community_card(self, slot: int, code: str) -> None:
        pass

    def prompt_human_action(self, player: Player, window: ActionWindow) -> Action:
        return Action.check() if window.can_check else Action.fold()

    def reveal_hand(self, player: Player, cards: list[Card]) -> None:
        pass

    def announce(self, message: str) -> None:
        pass


class LoggingPresenter(NullPresenter):
    """Sends announcements and reveals to the log."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or LOGGER

    def render_community_card(self, slot: int, code: str) -> None:
        self.logger.debug("Board slot %d: %s", slot, code)

    def reveal_hand(self, player: Player, cards: list[Card]) -> None:
        self.logger.info("%s shows %s", player.name, " ".join(c.code for c in cards))

    def announce(self, message: str) -> None:
        self.logger.info(message)
