"""Exponential and Normal variates drawn from a PrngProvider.

The sampler never owns randomness itself: every draw goes through the
provider passed in, so swapping or re-seeding the provider changes the
stream seen here.
"""

from __future__ import annotations

import math

from parksim.errors import GeneratorStallError
from parksim.prng.provider import PrngProvider

MAX_ZERO_REDRAWS = 1000


class VariateSampler:
    """Derives non-uniform variates from a uniform provider.

    Args:
        provider: Source of uniform [0, 1) variates.
    """

    def __init__(self, provider: PrngProvider):
        self.provider = provider

    def _nonzero_uniform(self) -> float:
        for _ in range(MAX_ZERO_REDRAWS):
            u = self.provider.next()
            if u != 0.0:
                return u
        raise GeneratorStallError(
            f"Uniform generator returned 0 {MAX_ZERO_REDRAWS} times in a row"
        )

    def exponential(self, mean: float) -> float:
        """Sample an exponential variate with the given mean.

        Uses inverse transform, ``-mean * ln(1 - u)``. A draw of exactly 0
        would yield a zero-length interval and is redrawn.

        Returns:
            The variate, or 0.0 when ``mean`` is not positive.

        Raises:
            GeneratorStallError: If the provider returns 0 on every redraw.
        """
        if mean <= 0:
            return 0.0
        u = self._nonzero_uniform()
        return -mean * math.log(1.0 - u)

    def normal(self, mean: float, std_dev: float) -> float:
        """Sample a Normal variate using the Box-Muller transform.

        Only the cosine branch is used, so each call consumes exactly two
        non-zero uniforms.

        Returns:
            The variate, or ``mean`` unchanged when ``std_dev`` is negative.
        """
        if std_dev < 0:
            return mean
        u = self._nonzero_uniform()
        v = self._nonzero_uniform()
        z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        return mean + z * std_dev
