"""
Seeded hashing and pseudo-random generation.

Every procedural decision in Room 302 is derived from text: a quote (optionally
joined with a template name) is hashed into a seed, and that seed drives a
SeededRandom instance that is passed explicitly to whatever needs randomness.
No module-level generator exists, so repeated calls never interfere.

Example:
    >>> seed = hash_string("Ship it messy")
    >>> rng = SeededRandom(seed)
    >>> rng.integer(1, 6)
    >>> rng.weighted(["a", "b"], [90, 10])
"""

import random
from bisect import bisect_right
from itertools import accumulate
from typing import Iterator, Sequence, TypeVar, Union

from R302_Libs.constants import HASH_MASK

T = TypeVar("T")
SeedLike = Union[int, str]


def hash_string(text: str) -> int:
    """
    Hash text into a non-negative 31-bit integer.

    Rolling polynomial hash (multiply by 31, add character code, mask).
    Not cryptographic; only stable and well spread.

    Args:
        text: Any string, including the empty string

    Returns:
        Integer in [0, 2**31 - 1]
    """
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & HASH_MASK
    return value


def resolve_seed(seed: SeedLike) -> int:
    """Turn a text or integer seed into a non-negative integer seed."""
    if isinstance(seed, str):
        return hash_string(seed)
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise TypeError(f"seed must be int or str, got {type(seed)}")
    return seed & HASH_MASK


class SeededRandom:
    """
    Deterministic random source parameterized by a seed.

    Wraps a private random.Random so two instances built from the same seed
    always produce identical sequences.
    """

    def __init__(self, seed: SeedLike) -> None:
        self.seed = resolve_seed(seed)
        self._rng = random.Random(self.seed)

    def random(self) -> float:
        """Next float in [0, 1)."""
        return self._rng.random()

    def stream(self) -> Iterator[float]:
        """Endless stream of floats in [0, 1)."""
        while True:
            yield self._rng.random()

    def floating(self, low: float, high: float) -> float:
        """
        Uniform float between low and high.

        Raises:
            ValueError: If low > high
        """
        if low > high:
            raise ValueError(f"low must be <= high, got {low} > {high}")
        return low + (high - low) * self._rng.random()

    def integer(self, low: float, high: float) -> int:
        """
        Uniform integer in [low, high], both ends inclusive.

        Float bounds are truncated toward the inside of the range.

        Raises:
            ValueError: If the range is empty
        """
        lo = int(-(-low // 1))
        hi = int(high // 1)
        if lo > hi:
            raise ValueError(f"empty integer range [{low}, {high}]")
        return self._rng.randint(lo, hi)

    def chance(self, likelihood: float = 50) -> bool:
        """
        Biased coin flip.

        Args:
            likelihood: Percentage 0-100. 0 never succeeds, 100 always does.
        """
        if likelihood <= 0:
            return False
        if likelihood >= 100:
            return True
        return self._rng.random() * 100 < likelihood

    def weighted(self, options: Sequence[T], weights: Sequence[float]) -> T:
        """
        Pick one option with probability proportional to its weight.

        Raises:
            ValueError: If lengths differ or no weight is positive
        """
        if len(options) != len(weights):
            raise ValueError(
                f"options and weights must have same length: "
                f"{len(options)} vs {len(weights)}"
            )
        cumulative = list(accumulate(max(0.0, float(w)) for w in weights))
        if not cumulative or cumulative[-1] <= 0:
            raise ValueError("at least one weight must be positive")
        point = self._rng.random() * cumulative[-1]
        return options[bisect_right(cumulative, point)]

    def pick_one(self, options: Sequence[T]) -> T:
        """Uniformly pick one element of a non-empty sequence."""
        if not options:
            raise ValueError("cannot pick from an empty sequence")
        return options[self._rng.randrange(len(options))]

    def fork(self, salt: str) -> "SeededRandom":
        """Derive an independent generator for a named sub-task."""
        return SeededRandom(hash_string(f"{self.seed}:{salt}"))
