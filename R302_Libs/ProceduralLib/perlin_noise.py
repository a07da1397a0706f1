"""
Seeded 2D Perlin noise and fractal noise masks.

The mask is what gates the pixel color filters: a pixel is only touched where
the mask value rises above a seeded threshold.

Scale is a frequency multiplier, so it reads backwards: SMALLER scale values
produce BIGGER, slower-varying patterns. A scale of 0.0002 on a 1080 px wide
image covers only a fraction of one lattice cell, which gives broad "macro"
washes; 0.05 gives blotches a few dozen pixels wide.

Example:
    >>> perlin = PerlinNoise(seed=42)
    >>> perlin.noise_2d(3.5, 7.25)
    >>> mask = perlin.generate_mask(1080, 1920, scale=0.0003, octaves=2)
    >>> mask.shape
    (1920, 1080)
"""

import math
from typing import List

import numpy as np

from R302_Libs.constants import DEFAULT_NOISE_OCTAVES, DEFAULT_NOISE_SCALE
from R302_Libs.ProceduralLib.seeded_random import SeedLike, SeededRandom


def _fade(t):
    """Perlin fade curve: 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(a, b, t):
    return a + t * (b - a)


def _grad(hash_value: int, x: float, y: float) -> float:
    h = hash_value & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h in (12, 14):
        v = x
    else:
        v = 0.0
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


def _grad_array(hash_values: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    h = hash_values & 15
    u = np.where(h < 8, x, y)
    v = np.where(h < 4, y, np.where((h == 12) | (h == 14), x, 0.0))
    u = np.where((h & 1) == 0, u, -u)
    v = np.where((h & 2) == 0, v, -v)
    return u + v


class PerlinNoise:
    """
    Classic gradient noise built from a seeded permutation table.

    Two instances created with the same seed are interchangeable.
    """

    def __init__(self, seed: SeedLike) -> None:
        self.rng = SeededRandom(seed)
        self.permutation = self._generate_permutation()
        self._table = np.array(self.permutation, dtype=np.int64)

    def _generate_permutation(self) -> List[int]:
        table = list(range(256))
        # Fisher-Yates, driven by the seeded generator
        for i in range(len(table) - 1, 0, -1):
            j = self.rng.integer(0, i)
            table[i], table[j] = table[j], table[i]
        return table + table

    def noise_2d(self, x: float, y: float) -> float:
        """
        Sample the noise field at (x, y).

        Returns:
            Float in roughly [-1, 1]
        """
        p = self.permutation
        fx = math.floor(x)
        fy = math.floor(y)
        xi = int(fx) & 255
        yi = int(fy) & 255
        x -= fx
        y -= fy

        u = _fade(x)
        v = _fade(y)

        a = p[xi] + yi
        aa = p[a]
        ab = p[a + 1]
        b = p[xi + 1] + yi
        ba = p[b]
        bb = p[b + 1]

        return _lerp(
            _lerp(_grad(p[aa], x, y), _grad(p[ba], x - 1, y), u),
            _lerp(_grad(p[ab], x, y - 1), _grad(p[bb], x - 1, y - 1), u),
            v,
        )

    def noise_grid(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """
        Vectorized noise_2d over broadcastable coordinate arrays.

        Produces the same values as calling noise_2d point by point.
        """
        p = self._table
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        fx = np.floor(xs)
        fy = np.floor(ys)
        xi = fx.astype(np.int64) & 255
        yi = fy.astype(np.int64) & 255
        x = xs - fx
        y = ys - fy

        u = _fade(x)
        v = _fade(y)

        a = p[xi] + yi
        aa = p[a]
        ab = p[a + 1]
        b = p[xi + 1] + yi
        ba = p[b]
        bb = p[b + 1]

        return _lerp(
            _lerp(_grad_array(p[aa], x, y), _grad_array(p[ba], x - 1, y), u),
            _lerp(_grad_array(p[ab], x, y - 1), _grad_array(p[bb], x - 1, y - 1), u),
            v,
        )

    def generate_mask(
        self,
        width: int,
        height: int,
        scale: float = DEFAULT_NOISE_SCALE,
        octaves: int = DEFAULT_NOISE_OCTAVES,
    ) -> np.ndarray:
        """
        Build a fractal (fBm) noise mask covering a whole image.

        Each octave halves the amplitude and doubles the frequency. The sum is
        normalized by the total amplitude, then remapped from [-1, 1] to [0, 1].

        Args:
            width: Mask width in pixels (> 0)
            height: Mask height in pixels (> 0)
            scale: Base frequency multiplier. Smaller = larger patterns.
            octaves: Number of layers (>= 1)

        Returns:
            Float array of shape (height, width) with values in [0, 1]

        Raises:
            ValueError: If dimensions or octaves are invalid
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"mask size must be positive, got {width}x{height}")
        if octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")

        xs = np.arange(width, dtype=np.float64)[np.newaxis, :]
        ys = np.arange(height, dtype=np.float64)[:, np.newaxis]

        total = np.zeros((height, width), dtype=np.float64)
        amplitude = 1.0
        frequency = float(scale)
        amplitude_sum = 0.0
        for _ in range(octaves):
            total += self.noise_grid(xs * frequency, ys * frequency) * amplitude
            amplitude_sum += amplitude
            amplitude *= 0.5
            frequency *= 2

        mask = (total / amplitude_sum + 1.0) * 0.5
        return np.clip(mask, 0.0, 1.0)
