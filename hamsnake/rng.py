"""Explicit, splittable random sources.

There is no global generator: every game and agent receives its own
``RandomSource``, and child sources are derived from a parent seed by a pure
function so any episode of a batch can be replayed on its own.
"""

from __future__ import annotations

import random
from typing import Optional

_MASK64 = (1 << 64) - 1


def splitmix64(x: int) -> int:
    """One round of the splitmix64 mixer."""
    x = (x + 0x9E3779B97F4A7C15) & _MASK64
    z = x
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    return z ^ (z >> 31)


def derive_seed(seed: int, index: int) -> int:
    """Seed of the ``index``-th child of ``seed``. Pure and platform independent."""
    return splitmix64((seed & _MASK64) ^ splitmix64(index & _MASK64))


class RandomSource:
    """Seeded generator that can be cloned and split."""

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = random.SystemRandom().getrandbits(64)
        self.seed = int(seed)
        self._rng = random.Random(self.seed)

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed})"

    def spawn(self, index: int) -> "RandomSource":
        """Independent child source; does not advance this one."""
        return RandomSource(derive_seed(self.seed, index))

    def clone(self) -> "RandomSource":
        """Copy with identical seed and current state."""
        out = RandomSource(self.seed)
        out._rng.setstate(self._rng.getstate())
        return out

    def randrange(self, n: int) -> int:
        return self._rng.randrange(n)
