"""Exceptions raised by the table engine."""


class PokerTableError(Exception):
    """Base class for engine errors."""


class InvariantViolation(PokerTableError):
    """The engine reached a state correct play can never produce."""


class CommunitySlotError(InvariantViolation):
    """A deal asked for more community cards than there are empty slots."""


class SettlementError(InvariantViolation):
    """Pot settlement found chips it cannot account for."""
