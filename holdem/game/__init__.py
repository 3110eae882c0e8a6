"""Game representation module."""

from .cards import Card, Deck, DeckExhausted, card_label, parse_card, parse_cards
from .evaluator import HandCategory, HandEvaluation, HAND_NAMES, evaluate5, evaluate_best, compare
from .actions import Action, ActionRecord, ActionType
from .state import Game, InvariantViolation, Street, TableConfig, WinnerHand, split_pot
from .equity import EquityCalculator, EquityConfig, EquityResult, calc_outs, describe_outs

__all__ = [
    "Card",
    "Deck",
    "DeckExhausted",
    "card_label",
    "parse_card",
    "parse_cards",
    "HandCategory",
    "HandEvaluation",
    "HAND_NAMES",
    "evaluate5",
    "evaluate_best",
    "compare",
    "Action",
    "ActionRecord",
    "ActionType",
    "Game",
    "InvariantViolation",
    "Street",
    "TableConfig",
    "WinnerHand",
    "split_pot",
    "EquityCalculator",
    "EquityConfig",
    "EquityResult",
    "calc_outs",
    "describe_outs",
]
