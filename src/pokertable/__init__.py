"""Pokertable - No-Limit Texas Hold'em table engine with rule-based bots."""

__version__ = "0.1.0"

from .action import Action, ActionType, ActionWindow
from .betting import BettingRound, legal_actions, normalize
from .bot import BotContext, BotDecision, choose_bot_action, decide
from .bot_queue import BotActionQueue
from .card import Card, Rank, Suit, card
from .dealer import Dealer, HandSummary, PendingAction, TimeoutPolicy
from .deck import Deck
from .errors import CommunitySlotError, InvariantViolation, PokerTableError, SettlementError
from .evaluator import HandEvaluator, HandResult, StandardEvaluator
from .hand import Hand, HandRank, HandValue
from .player import Player, Role
from .position import Position, position_from_utg_distance
from .pot import SettlementResult, SidePot, settle
from .presenter import LoggingPresenter, NullPresenter, Presenter
from .table import Phase, Table
from .tournament import Tournament, TournamentConfig

__all__ = [
    "Action",
    "ActionType",
    "ActionWindow",
    "BettingRound",
    "BotActionQueue",
    "BotContext",
    "BotDecision",
    "Card",
    "CommunitySlotError",
    "Dealer",
    "Deck",
    "Hand",
    "HandEvaluator",
    "HandRank",
    "HandResult",
    "HandSummary",
    "HandValue",
    "InvariantViolation",
    "LoggingPresenter",
    "NullPresenter",
    "PendingAction",
    "Phase",
    "Player",
    "PokerTableError",
    "Position",
    "Presenter",
    "Rank",
    "Role",
    "SettlementError",
    "SettlementResult",
    "SidePot",
    "StandardEvaluator",
    "Suit",
    "Table",
    "TimeoutPolicy",
    "Tournament",
    "TournamentConfig",
    "card",
    "choose_bot_action",
    "decide",
    "legal_actions",
    "normalize",
    "position_from_utg_distance",
    "settle",
]
