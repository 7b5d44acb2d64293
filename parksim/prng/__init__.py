"""Seedable, swappable uniform random number generation."""

from parksim.prng.generators import (
    CongruentialGenerator,
    LinearCongruentialGenerator,
    MersenneTwisterGenerator,
    MixedCongruentialGenerator,
    SystemGenerator,
    UniformGenerator,
)
from parksim.prng.provider import McgConfig, PrngMethod, PrngProvider, PrngSnapshot

__all__ = [
    "CongruentialGenerator",
    "LinearCongruentialGenerator",
    "McgConfig",
    "MersenneTwisterGenerator",
    "MixedCongruentialGenerator",
    "PrngMethod",
    "PrngProvider",
    "PrngSnapshot",
    "SystemGenerator",
    "UniformGenerator",
]
