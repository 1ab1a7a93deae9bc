"""
Seed and random stream utilities for deterministic building generation.
"""

import random
from typing import Optional


def seeded_random(seed: int) -> random.Random:
    """
    Create deterministic random number generator.

    Args:
        seed: Seed value

    Returns:
        Seeded Random instance
    """
    return random.Random(seed)


class RandomStream:
    """
    Single source of randomness threaded through every generation stage.

    All draws go through this object in a fixed order, so one seed reproduces
    a whole batch of buildings.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        if rng is None:
            rng = seeded_random(seed if seed is not None else 0)
        self.seed = seed
        self._rng = rng
        self.draws = 0

    def value(self) -> float:
        """Uniform float in [0, 1)."""
        self.draws += 1
        return self._rng.random()

    def randrange(self, start: int, stop: int) -> int:
        """Uniform integer in [start, stop)."""
        self.draws += 1
        return self._rng.randrange(start, stop)

    def index(self, count: int) -> int:
        """Uniform index into a sequence of `count` items."""
        return self.randrange(0, count)

    def coin(self) -> bool:
        """Fair coin flip, true with probability 0.5."""
        return self.value() < 0.5
