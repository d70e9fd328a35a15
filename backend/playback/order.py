"""
Play-order generation.

A play order maps play-order position -> catalog index and is always a
permutation of range(n). Randomness is injected so callers can seed it.
"""

from __future__ import annotations

import random
from typing import Sequence


def identity(n: int) -> tuple[int, ...]:
    """Catalog order: (0, 1, ..., n - 1)."""
    return tuple(range(n))


def shuffle(n: int, rng: random.Random | None = None) -> tuple[int, ...]:
    """
    Uniform random permutation of range(n) (Fisher-Yates).

    For i from n-1 down to 1, swap position i with a uniformly chosen
    position in [0, i].
    """
    rng = rng or random.Random()
    order = list(range(n))
    for i in range(n - 1, 0, -1):
        j = rng.randint(0, i)
        order[i], order[j] = order[j], order[i]
    return tuple(order)


def is_permutation(order: Sequence[int], n: int) -> bool:
    return len(order) == n and sorted(order) == list(range(n))
