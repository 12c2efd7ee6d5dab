"""Injectable random source for the scene's chance-driven behavior."""

from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def random(self) -> float: ...


def create_random_source(seed: int | None = None) -> random.Random:
    """Return a dedicated generator so scene draws never touch the global state."""
    return random.Random(seed)


def uniform(rng: RandomSource, low: float, high: float) -> float:
    return low + (high - low) * rng.random()


def pick_index(rng: RandomSource, count: int) -> int:
    """Pick an index in ``range(count)`` with a single draw."""
    if count <= 0:
        raise ValueError("cannot pick from an empty sequence")
    return min(count - 1, int(rng.random() * count))
