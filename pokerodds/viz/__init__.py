"""Visualization module."""

from .ranges import RangeDisplay, display_range

__all__ = [
    "RangeDisplay",
    "display_range",
]
