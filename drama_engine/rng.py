"""Deterministic random utilities.

Every draw in the engine goes through a *random source*: a zero-argument
callable returning a float in ``[0, 1)``. ``DeterministicRNG`` is the seeded
implementation used in play; ``ScriptedRandom`` replays a fixed sequence.
"""

from __future__ import annotations

import math
import random
from typing import Callable, Iterable, Iterator, Sequence, TypeVar

T = TypeVar("T")

RandomSource = Callable[[], float]


class DeterministicRNG:
    """Wraps :mod:`random` with deterministic replay support."""

    def __init__(self, seed: int) -> None:
        self._seed = seed & 0xFFFFFFFF
        # nosec B311 - deterministic pseudo-RNG acceptable for game mechanics
        self._random = random.Random(self._seed)

    def __call__(self) -> float:
        return self._random.random()

    @property
    def seed(self) -> int:
        return self._seed

    def random(self) -> float:
        return self._random.random()

    def randint(self, a: int, b: int) -> int:
        return self._random.randint(a, b)

    def stream(self) -> Iterator[float]:
        while True:
            yield self._random.random()


class ScriptedRandom:
    """Random source that replays a fixed sequence of draws.

    Raises ``IndexError`` once the script is exhausted unless ``cycle`` is set,
    so tests notice when code draws more often than expected.
    """

    def __init__(self, values: Iterable[float], *, cycle: bool = False) -> None:
        self._values = [float(value) for value in values]
        for value in self._values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Scripted draw {value} outside [0, 1)")
        self._cycle = cycle
        self._index = 0

    def __call__(self) -> float:
        if self._index >= len(self._values):
            if not self._cycle or not self._values:
                raise IndexError("Scripted random source exhausted")
            self._index = 0
        value = self._values[self._index]
        self._index += 1
        return value

    @property
    def draws(self) -> int:
        """Number of values consumed so far."""

        return self._index


def random_item(items: Sequence[T], rng: RandomSource) -> T:
    """Pick one element uniformly using a single draw."""

    if not items:
        raise ValueError("Cannot pick from an empty sequence")
    index = min(int(rng() * len(items)), len(items) - 1)
    return items[index]


def random_in_range(low: float, high: float, rng: RandomSource) -> int:
    """Integer between ``low`` and ``high`` (inclusive, rounded) from one draw."""

    return round_half_up(low + rng() * (high - low))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def random_between(low: float, high: float, rng: RandomSource) -> float:
    return low + rng() * (high - low)


__all__ = [
    "DeterministicRNG",
    "RandomSource",
    "ScriptedRandom",
    "random_between",
    "random_in_range",
    "random_item",
    "round_half_up",
]
