"""Deterministic pseudo-random stream used by map generation.

The stream is the linear congruential recurrence

    state = (state * 9301 + 49297) mod 233280
    next() = state / 233280

seeded once per map and advanced on every draw. Any implementation applying the
same recurrence to the same non-negative integer seed, and drawing in the same
order, reproduces identical maps.
"""

from __future__ import annotations

import math

MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280


class SeededRandom:
    """Reproducible float stream in [0, 1)."""

    def __init__(self, seed: int):
        if seed < 0:
            raise ValueError(f"seed must be a non-negative integer (got {seed})")
        self.seed = int(seed)
        self.state = int(seed)

    def next(self) -> float:
        self.state = (self.state * MULTIPLIER + INCREMENT) % MODULUS
        return self.state / MODULUS

    def next_int(self, upper: int) -> int:
        """Integer in [0, upper) taken from a single draw."""
        return math.floor(self.next() * upper)
