"""
Random sources for event draws.

The engine never calls the random module directly. Callers inject a
RandomSource so tests can replay a fixed sequence of draws.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable
import random


class RandomSource(ABC):
    """Uniform integer source."""

    @abstractmethod
    def randrange(self, n: int) -> int:
        """Return an integer in [0, n)."""
        pass


class SeededRandomSource(RandomSource):
    """random.Random wrapper; a None seed draws from system entropy."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    def randrange(self, n: int) -> int:
        return self._random.randrange(n)


class FixedRandomSource(RandomSource):
    """
    Replays a fixed sequence of indices, cycling when exhausted.

    Indices are taken modulo n so one sequence works for any catalog size.
    """

    def __init__(self, indices: Iterable[int]):
        self.indices = list(indices)
        if not self.indices:
            raise ValueError("FixedRandomSource needs at least one index")
        self._position = 0

    def randrange(self, n: int) -> int:
        value = self.indices[self._position % len(self.indices)]
        self._position += 1
        return value % n

    @property
    def draws(self) -> int:
        return self._position


def default_random_source() -> RandomSource:
    return SeededRandomSource()
