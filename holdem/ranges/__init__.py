"""Opponent range tracking module."""

from .hand_types import HandType, HAND_TYPES, BASE_WEIGHTS, hand_type_index, hand_type_of, hand_type_for_label
from .tracker import RangeTracker, PostflopLikelihoods, EquityBreakdown, HandDistribution, GridCell

__all__ = [
    "HandType",
    "HAND_TYPES",
    "BASE_WEIGHTS",
    "hand_type_index",
    "hand_type_of",
    "hand_type_for_label",
    "RangeTracker",
    "PostflopLikelihoods",
    "EquityBreakdown",
    "HandDistribution",
    "GridCell",
]
