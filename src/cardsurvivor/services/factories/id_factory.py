"""Utilities for creating unique instance identifiers."""
from __future__ import annotations

from itertools import count

from cardsurvivor.core.rng import RandomSource

# Process-wide sequence; the RNG suffix alone can repeat.
_SEQUENCE = count(1)


def make_instance_id(prefix: str, rng: RandomSource) -> str:
    """Generate an identifier that is unique for the life of the process."""
    suffix = rng.randint(100000, 999999)
    return f"{prefix}_{suffix}_{next(_SEQUENCE)}"
