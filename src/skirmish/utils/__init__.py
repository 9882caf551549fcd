"""Utility functions for the Skirmish battle simulator."""

from skirmish.utils.rng import (
    check_success,
    generate_seed,
    random_float,
    shuffled,
)

__all__ = [
    "check_success",
    "generate_seed",
    "random_float",
    "shuffled",
]
