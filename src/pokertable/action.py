"""Action types and the legal-action envelope offered to a seat."""

from dataclasses import dataclass
from enum import Enum


class ActionType(Enum):
    """Possible actions a player can take."""

    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    RAISE = "raise"


@dataclass(frozen=True)
class Action:
    """A concrete poker action.

    Attributes:
        type: The action type.
        amount: Chips the seat puts in with this action (a call pays the
            amount owed, a raise pays the call plus the raise increment).
            Always 0 for fold and check.
    """

    type: ActionType
    amount: int = 0

    def __str__(self) -> str:
        if self.type == ActionType.RAISE:
            return f"Raise {self.amount}"
        if self.type == ActionType.CALL:
            return f"Call {self.amount}"
        return self.type.value.capitalize()

    @classmethod
    def fold(cls) -> "Action":
        return cls(ActionType.FOLD)

    @classmethod
    def check(cls) -> "Action":
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls, amount: int = 0) -> "Action":
        return cls(ActionType.CALL, amount)

    @classmethod
    def raise_(cls, amount: int) -> "Action":
        return cls(ActionType.RAISE, amount)


@dataclass(frozen=True)
class ActionWindow:
    """Legal action envelope for the seat to act.

    ``min_bet``/``max_bet``/``step`` describe the bet slider a front end
    shows: ``min_bet`` is 0 when checking is allowed, otherwise the call
    amount (capped at the stack).

    Attributes:
        to_call: Chips owed to match the current bet (uncapped).
        can_check: True when nothing is owed.
        can_raise: False when the seat may only call or fold.
        min_raise: Smallest legal raise payment, capped at the stack.
        max_raise: The whole stack.
        min_bet: Lower slider bound.
        step: Slider step.
    """

    to_call: int
    can_check: bool
    can_raise: bool
    min_raise: int
    max_raise: int
    min_bet: int
    step: int

    @property
    def max_bet(self) -> int:
        return self.max_raise
