"""Pairing engine: participants to cooking pairs."""

from .pair_generator import PairGenerator, generate_pairs

__all__ = ["PairGenerator", "generate_pairs"]
