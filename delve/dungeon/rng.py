"""Seeded randomness for floor generation.

Every stochastic decision of a floor (room rectangles, corridor orientation,
shuffles, key choice, monster sampling, drop rolls) draws from one
``random.Random`` built from the floor seed, so a floor is a pure function of
its seed. ``mint_seed`` is the single place that touches the wall clock.
"""

from __future__ import annotations

import random
import time
from typing import Callable

SEED_DEPTH_STRIDE = 1337

SeedSource = Callable[[int], int]


def make_rng(seed: int) -> random.Random:
    return random.Random(seed)


def mint_seed(depth: int, clock: Callable[[], float] = time.time) -> int:
    """Fresh seed for a floor regeneration: wall-clock milliseconds offset by depth."""
    return int(clock() * 1000) + depth * SEED_DEPTH_STRIDE


def fixed_seeds(base: int) -> SeedSource:
    """Seed source for reproducible sessions (CLI ``--seed`` and tests)."""

    def _source(depth: int) -> int:
        return base + depth * SEED_DEPTH_STRIDE

    return _source


__all__ = ["make_rng", "mint_seed", "fixed_seeds", "SeedSource"]
