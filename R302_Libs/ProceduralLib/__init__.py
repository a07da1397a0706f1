"""
ProceduralLib - Seeded randomness and noise for Room 302.

Modules:
    seeded_random: Text hashing and the SeededRandom generator
    perlin_noise: Seeded Perlin noise and fractal noise masks
"""

from R302_Libs.ProceduralLib.seeded_random import (
    SeededRandom,
    hash_string,
    resolve_seed,
)
from R302_Libs.ProceduralLib.perlin_noise import PerlinNoise

__all__ = [
    "SeededRandom",
    "hash_string",
    "resolve_seed",
    "PerlinNoise",
]
