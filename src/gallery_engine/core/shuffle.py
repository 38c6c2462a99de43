"""Seeded shuffling, so a session sees a random but stable item order."""

import random
from typing import TypeVar

T = TypeVar("T")

_LCG_MULTIPLIER = 214013
_LCG_INCREMENT = 2531011
_LCG_MASK = 0x7FFFFFFF


def new_seed() -> int:
    """Draw a fresh session seed in the positive int32 range."""
    return random.randrange(_LCG_MASK)


def shuffle(items: list[T], seed: int) -> list[T]:
    """Return a Fisher-Yates permutation of ``items`` driven by ``seed``.

    The same (items, seed) pair always yields the same order. The input
    list is left untouched.
    """
    result = list(items)
    state = seed & _LCG_MASK

    m = len(result)
    while m:
        state = (state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _LCG_MASK
        # Divide by 2**31 so the draw stays in [0, 1) and i < m.
        i = int(state / (_LCG_MASK + 1) * m)
        m -= 1
        result[m], result[i] = result[i], result[m]

    return result
