"""Statistical checks on the random number generators."""

from parksim.analysis.chi_square import ChiSquareResult, ChiSquareTester, bin_index, bin_samples

__all__ = [
    "ChiSquareResult",
    "ChiSquareTester",
    "bin_index",
    "bin_samples",
]
