"""Uniform [0, 1) generators backing the PRNG provider.

Each generator owns its mutable state and exposes it through
``get_state``/``set_state`` so the provider can snapshot and restore a
stream exactly. Only the system generator is non-reproducible.
"""

from __future__ import annotations

import math
import random
from typing import Any, Protocol, runtime_checkable

LCG_A = 1664525
LCG_C = 1013904223
LCG_M = 2**32


@runtime_checkable
class UniformGenerator(Protocol):
    """Protocol for a stateful uniform generator."""

    def next(self) -> float:
        """Return the next variate in [0, 1)."""
        ...

    def get_state(self) -> Any:
        ...

    def set_state(self, state: Any) -> None:
        ...


class SystemGenerator:
    """Operating-system entropy. Unseeded and not reproducible."""

    def __init__(self) -> None:
        self._rng = random.SystemRandom()

    def next(self) -> float:
        return self._rng.random()

    def get_state(self) -> None:
        return None

    def set_state(self, state: Any) -> None:  # noqa: ARG002
        pass


class CongruentialGenerator:
    """x' = (a*x + c) mod m, emitting x'/m.

    Args:
        a: Multiplier.
        c: Increment.
        m: Modulus. Non-positive values fall back to 2^32.
        seed: Initial register value, reduced modulo ``m``.
    """

    def __init__(self, a: int, c: int, m: int, seed: int):
        m = int(m)
        if m <= 0:
            m = LCG_M
        self.a = int(a)
        self.c = int(c)
        self.m = m
        self._x = int(math.floor(seed)) % m

    @property
    def register(self) -> int:
        return self._x

    def next(self) -> float:
        self._x = (self.a * self._x + self.c) % self.m
        return self._x / self.m

    def get_state(self) -> int:
        return self._x

    def set_state(self, state: int) -> None:
        self._x = int(state) % self.m


class LinearCongruentialGenerator(CongruentialGenerator):
    """Numerical Recipes LCG (a=1664525, c=1013904223, m=2^32).

    The seed is coerced to a positive integer: ``abs(floor(seed))``, with
    0 replaced by 1.
    """

    def __init__(self, seed: float):
        super().__init__(LCG_A, LCG_C, LCG_M, abs(int(math.floor(seed))) or 1)


class MixedCongruentialGenerator(CongruentialGenerator):
    """Congruential generator with caller-supplied a, c and m."""


class MersenneTwisterGenerator:
    """MT19937, as implemented by the standard library's ``random.Random``."""

    def __init__(self, seed: int):
        self._rng = random.Random(int(seed))

    def next(self) -> float:
        return self._rng.random()

    def get_state(self) -> tuple:
        return self._rng.getstate()

    def set_state(self, state: tuple) -> None:
        self._rng.setstate(state)
