"""Performance indicators for pairs and groups."""

from .indicators import GroupIndicators, PairIndicators

__all__ = ["GroupIndicators", "PairIndicators"]
