"""Catpoint - home security alarm decision engine."""

__version__ = "1.0.0"
