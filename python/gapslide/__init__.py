"""Sliding-tile puzzle engine with 2×2 pieces, multiple gaps and wrap-around edges."""

__version__ = "0.1.0"
