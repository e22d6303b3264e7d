"""Goldilocks home-climate advisory engine."""

__version__ = "0.3.0"
