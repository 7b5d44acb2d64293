"""Swappable uniform random source shared by the sampler and the engine.

PrngProvider wraps one UniformGenerator at a time. ``set`` swaps the
algorithm (discarding the previous generator's state) and ``snapshot`` /
``restore`` let a caller such as the chi-square tester borrow the provider
and hand it back without disturbing the live stream.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from parksim.prng.generators import (
    LCG_A,
    LCG_C,
    LCG_M,
    LinearCongruentialGenerator,
    MersenneTwisterGenerator,
    MixedCongruentialGenerator,
    SystemGenerator,
    UniformGenerator,
)

logger = logging.getLogger(__name__)


class PrngMethod(str, Enum):
    """Available uniform generator algorithms."""

    SYSTEM = "system"
    LCG = "lcg"
    MCG = "mcg"
    MERSENNE_TWISTER = "mersenne-twister"

    @classmethod
    def parse(cls, value: PrngMethod | str) -> PrngMethod:
        """Resolve a method from its value, its name, or a legacy label.

        Accepts ``"lcg"``, ``"LCG"``, ``"MixedCongruential"``,
        ``"Math.random"`` and similar spellings.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        aliases = {
            "default": cls.SYSTEM,
            "math.random": cls.SYSTEM,
            "mixedcongruential": cls.MCG,
            "mixed-congruential": cls.MCG,
            "mt": cls.MERSENNE_TWISTER,
            "mt19937": cls.MERSENNE_TWISTER,
            "mersennetwister": cls.MERSENNE_TWISTER,
        }
        if key in aliases:
            return aliases[key]
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown PRNG method: {value!r}")

    @property
    def is_seedable(self) -> bool:
        return self is not PrngMethod.SYSTEM


@dataclass(frozen=True)
class McgConfig:
    """Parameters of the mixed congruential generator."""

    a: int = LCG_A
    c: int = LCG_C
    m: int = LCG_M

    def normalized(self) -> McgConfig:
        """Return a copy with a non-positive modulus replaced by 2^32."""
        if self.m > 0:
            return self
        return McgConfig(a=self.a, c=self.c, m=LCG_M)


@dataclass(frozen=True)
class PrngSnapshot:
    """Everything needed to resume a provider's stream exactly.

    Attributes:
        method: Active algorithm.
        seed: Seed the generator was created with (None for SYSTEM).
        config: MCG parameters when method is MCG, else None.
        state: Algorithm-specific generator state at snapshot time.
    """

    method: PrngMethod
    seed: int | None
    config: McgConfig | None
    state: Any


def _time_seed() -> int:
    return int(time.time() * 1000)


class PrngProvider:
    """Holds the active uniform generator.

    Args:
        method: Initial algorithm.
        seed: Seed for seedable methods. None draws a time-based seed.
        config: MCG parameters; ignored by the other methods.
    """

    def __init__(
        self,
        method: PrngMethod | str = PrngMethod.SYSTEM,
        seed: int | None = None,
        config: McgConfig | None = None,
    ):
        self._method = PrngMethod.SYSTEM
        self._seed: int | None = None
        self._config: McgConfig | None = None
        self._generator: UniformGenerator = SystemGenerator()
        self.set(method, seed, config)

    @property
    def method(self) -> PrngMethod:
        return self._method

    @property
    def seed(self) -> int | None:
        return self._seed

    @property
    def config(self) -> McgConfig | None:
        return self._config

    @property
    def generator(self) -> UniformGenerator:
        return self._generator

    def set(
        self,
        method: PrngMethod | str,
        seed: int | None = None,
        config: McgConfig | None = None,
    ) -> None:
        """Swap in a freshly seeded generator for ``method``."""
        method = PrngMethod.parse(method)

        if method is PrngMethod.SYSTEM:
            self._generator = SystemGenerator()
            self._method, self._seed, self._config = method, None, None
            logger.debug("PRNG set to %s", method.value)
            return

        if seed is None:
            seed = _time_seed()
            logger.warning(
                "No seed given for %s; using time-based seed %d (run is not reproducible)",
                method.value,
                seed,
            )

        if method is PrngMethod.LCG:
            generator: UniformGenerator = LinearCongruentialGenerator(seed)
            config = None
        elif method is PrngMethod.MCG:
            config = (config or McgConfig()).normalized()
            generator = MixedCongruentialGenerator(config.a, config.c, config.m, seed)
        else:
            generator = MersenneTwisterGenerator(seed)
            config = None

        self._generator = generator
        self._method, self._seed, self._config = method, int(seed), config
        logger.debug("PRNG set to %s (seed=%s, config=%s)", method.value, seed, config)

    def next(self) -> float:
        """Return the next uniform variate in [0, 1)."""
        return self._generator.next()

    def snapshot(self) -> PrngSnapshot:
        return PrngSnapshot(
            method=self._method,
            seed=self._seed,
            config=self._config,
            state=self._generator.get_state(),
        )

    def restore(self, snapshot: PrngSnapshot) -> None:
        """Reinstate a snapshot, including MCG parameters and generator state."""
        self.set(snapshot.method, snapshot.seed, snapshot.config)
        if snapshot.state is not None:
            self._generator.set_state(snapshot.state)

    def __repr__(self) -> str:
        return f"PrngProvider(method={self._method.value!r}, seed={self._seed!r}, config={self._config!r})"
