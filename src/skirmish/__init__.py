"""Skirmish: a deterministic turn-based battle simulation engine."""

__version__ = "0.1.0"
