from __future__ import annotations

"""Randomness helpers for round selection and seeding."""

import os
import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

_rng = random.Random()


def seed_if_needed() -> Optional[int]:
    """Seed the round RNG if the SEED env var is set. Returns the seed used."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        s = int(seed)
    except ValueError:
        return None
    _rng.seed(s)
    return s


def get_rng() -> random.Random:
    return _rng


def sample(items: Sequence[T], k: int, rng: random.Random | None = None) -> List[T]:
    """Shuffle `items` and return the first `k` (all of them if fewer)."""
    pool = list(items)
    (rng or _rng).shuffle(pool)
    return pool[: max(0, min(k, len(pool)))]
