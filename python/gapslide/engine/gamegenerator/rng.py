"""Seeded random numbers that replay identically on every platform."""

from __future__ import annotations

import math
from datetime import date

MASK32 = 0xFFFFFFFF
MODULUS = 1 << 32
MULTIPLIER = 1664525
INCREMENT = 1013904223


class SeededRandom:
    """Linear congruential generator (Numerical Recipes constants)."""

    def __init__(self, seed: int) -> None:
        self.seed = seed & MASK32
        self.current = self.seed

    def next(self) -> float:
        """Advance the stream and return a float in [0, 1)."""
        self.current = (self.current * MULTIPLIER + INCREMENT) % MODULUS
        return self.current / MODULUS

    def next_int(self, max_value: int) -> int:
        """Uniform integer in ``[0, max_value)``."""
        return math.floor(self.next() * max_value)


def string_hash(text: str) -> int:
    """Rolling ``h = 31*h + unit`` hash over UTF-16 code units, as uint32."""
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h = (h * 31 + int.from_bytes(data[i:i + 2], "little")) & MASK32
    return h


def mix_seed(
    seed: int,
    steps: int,
    board_slug: str,
    gap_key: str,
    randomize_gaps: bool,
    wrap_horizontal: bool,
    wrap_vertical: bool,
) -> int:
    """Fold every shuffle parameter into the seed.

    Changing any one input gives an unrelated stream even with the same
    base seed. All shifts wrap at 32 bits.
    """
    mixed = (
        seed
        ^ (steps << 16)
        ^ (string_hash(board_slug) << 24)
        ^ (string_hash(gap_key) << 8)
        ^ (int(randomize_gaps) << 12)
        ^ (int(wrap_horizontal) << 13)
        ^ (int(wrap_vertical) << 14)
    )
    return mixed & MASK32


def daily_seed(day: date | None = None) -> int:
    """Seed shared by everyone on a calendar day, e.g. ``20261018``."""
    day = day or date.today()
    return int(day.strftime("%Y%m%d"))
