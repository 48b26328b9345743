from __future__ import annotations

"""Randomness helpers for deck shuffling and seeding."""

import os
import random
from typing import Optional


def seed_from_env() -> Optional[int]:
    """Return the SEED env var as an int, or None when unset or invalid."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return None


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Private RNG for one shuffle; falls back to SEED, then to entropy."""
    return random.Random(seed if seed is not None else seed_from_env())
