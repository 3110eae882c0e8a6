"""Advisory solver module."""

from .advisor import Advisor, Recommendation, SolverAnalysis, recommend

__all__ = [
    "Advisor",
    "Recommendation",
    "SolverAnalysis",
    "recommend",
]
