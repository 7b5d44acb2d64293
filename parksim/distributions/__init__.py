"""Random variates derived from the uniform PRNG stream."""

from parksim.distributions.variates import VariateSampler

__all__ = [
    "VariateSampler",
]
