"""Visualization module."""

from .ranges import RangeDisplay, build_grid_table, display_range

__all__ = [
    "RangeDisplay",
    "build_grid_table",
    "display_range",
]
