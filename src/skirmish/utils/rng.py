"""Deterministic Random Number Generator (RNG) helpers for Skirmish.

Every random decision made by the default combat rules is derived from a seed
string assembled from the inputs of the decision itself.  This keeps the
rules pure functions:

- Reproducibility: the same roster and tick always produce the same outcome
- Replay: batch and stepping runs see identical rolls for identical inputs
- Auditability: every result carries the seed it was derived from

Examples:
    >>> seed = generate_seed("skirmish", 3, "critical:1:group_1:2")
    >>> result = check_success(seed, 0.25)
    >>> sorted(result)
    ['probability', 'roll', 'seed', 'success']
"""

import hashlib
import random
from typing import Any


def generate_seed(base_seed: str, tick: int, context: str) -> str:
    """Generate a deterministic seed from the run seed, tick and context.

    Format: "base_seed:tick:context"

    Args:
        base_seed: Seed configured for the rules module
        tick: Tick index the roll belongs to (0 for tick-independent rolls)
        context: What the roll is for (e.g., 'critical:1:group_2:4')

    Returns:
        Seed string in format "base_seed:tick:context"

    Examples:
        >>> generate_seed("skirmish", 4, "attrition")
        'skirmish:4:attrition'

    Raises:
        ValueError: If tick is negative
    """
    if tick < 0:
        raise ValueError(f"tick must be non-negative, got {tick}")

    return f"{base_seed}:{tick}:{context}"


def _seed_to_int(seed: str) -> int:
    """Convert seed string to a stable 64-bit integer for random.Random()."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


def random_float(seed: str, min_val: float = 0.0, max_val: float = 1.0) -> dict[str, Any]:
    """Generate a float in ``[min_val, max_val]`` with deterministic seed.

    Args:
        seed: Deterministic seed string
        min_val: Lower bound (inclusive)
        max_val: Upper bound (inclusive)

    Returns:
        Dictionary containing:
            - value: The random float
            - min: The lower bound
            - max: The upper bound
            - seed: The seed used

    Raises:
        ValueError: If min_val > max_val
    """
    if min_val > max_val:
        raise ValueError(f"min_val ({min_val}) cannot be greater than max_val ({max_val})")

    rng = random.Random(_seed_to_int(seed))
    value = rng.uniform(min_val, max_val)

    return {
        "value": value,
        "min": min_val,
        "max": max_val,
        "seed": seed,
    }


def check_success(seed: str, probability: float) -> dict[str, Any]:
    """Check if a random event succeeds with the given probability.

    Args:
        seed: Deterministic seed string
        probability: Success probability (0.0 to 1.0)

    Returns:
        Dictionary containing:
            - success: Whether the check succeeded
            - roll: The uniform roll in [0, 1)
            - probability: The requested probability
            - seed: The seed used

    Raises:
        ValueError: If probability not in [0.0, 1.0]
    """
    if not 0.0 <= probability <= 1.0:
        raise ValueError(f"probability must be between 0.0 and 1.0, got {probability}")

    rng = random.Random(_seed_to_int(seed))
    roll = rng.random()

    return {
        "success": roll < probability,
        "roll": roll,
        "probability": probability,
        "seed": seed,
    }


def shuffled(seed: str, options: list[Any]) -> list[Any]:
    """Return a deterministically shuffled copy of ``options``.

    The input list is left untouched; the same seed and options always yield
    the same order.

    Examples:
        >>> shuffled("s", [1, 2, 3]) == shuffled("s", [1, 2, 3])
        True
    """
    result = list(options)
    rng = random.Random(_seed_to_int(seed))
    rng.shuffle(result)
    return result
