"""Computer opponent module."""

from .preflop import chen_score, preflop_raise_prob, preflop_call_prob, position_bonus
from .policy import AIPlayer, PolicyConfig

__all__ = [
    "chen_score",
    "preflop_raise_prob",
    "preflop_call_prob",
    "position_bonus",
    "AIPlayer",
    "PolicyConfig",
]
