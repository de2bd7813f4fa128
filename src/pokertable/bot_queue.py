"""Ordered, delayed application of bot actions."""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable

LOGGER = logging.getLogger(__name__)

DEFAULT_ACTION_DELAY = 3.0


@dataclass
class BotActionQueue:
    """Single FIFO of bot actions, applied one at a time.

    Each item waits ``delay`` seconds before it runs so bots appear to think.
    Items enqueued while the queue is draining (including from inside a
    running item) run after the current one, never interleaved with it.
    """

    delay: float = DEFAULT_ACTION_DELAY
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    _items: deque[Callable[[], None]] = field(default_factory=deque, repr=False)
    _draining: bool = field(default=False, repr=False)

    @classmethod
    def speed_mode(cls) -> BotActionQueue:
        """A queue with no delay, for simulations."""
        return cls(delay=0.0)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def draining(self) -> bool:
        return self._draining

    def enqueue(self, fn: Callable[[], None]) -> None:
        self._items.append(fn)
        if not self._draining:
            self.drain()

    def drain(self) -> int:
        """Run queued items in order until the queue is empty."""
        if self._draining:
            return 0
        self._draining = True
        processed = 0
        try:
            while self._items:
                if self.delay > 0:
                    self.sleep(self.delay)
                fn = self._items.popleft()
                fn()
                processed += 1
        finally:
            self._draining = False
        LOGGER.debug("Applied %d queued bot action(s)", processed)
        return processed
