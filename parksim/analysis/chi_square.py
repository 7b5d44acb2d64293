"""Chi-square goodness-of-fit test of a PRNG against U[0, 1).

ChiSquareTester borrows a PrngProvider, reconfigures it with the method
under test, draws N samples, and hands the provider back exactly as it
found it. The samples are binned into K equal-width intervals and compared
with the uniform expectation N/K per bin.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import pandas as pd
from scipy.stats import chi2

from parksim.prng.provider import McgConfig, PrngMethod, PrngProvider

logger = logging.getLogger(__name__)

MIN_EXPECTED_PER_BIN = 5
DEFAULT_ALPHA = 0.05


@dataclass(frozen=True)
class ChiSquareResult:
    """Outcome of one chi-square uniformity test.

    Attributes:
        n: Number of samples drawn.
        k: Number of bins.
        degrees_of_freedom: K - 1, or 0 when the inputs were rejected.
        method: Generator under test.
        seed: Seed used, None for the system generator.
        config: MCG parameters used, None for other methods.
        statistic: Pearson chi-square statistic (0 when not computable).
        observed: Per-bin sample counts.
        expected: Per-bin expected counts.
        interpretation: Human-readable summary.
        computable: False when the inputs did not allow a valid test.
        alpha: Significance level used for ``critical_value``.
        critical_value: Upper critical value of chi2(df) at ``alpha``.
        p_value: Probability of a statistic at least this large under H0.
    """

    n: int
    k: int
    degrees_of_freedom: int
    method: PrngMethod
    seed: int | None
    config: McgConfig | None
    statistic: float
    observed: tuple[int, ...] = field(default_factory=tuple)
    expected: tuple[float, ...] = field(default_factory=tuple)
    interpretation: str = ""
    computable: bool = True
    alpha: float = DEFAULT_ALPHA
    critical_value: float | None = None
    p_value: float | None = None

    @property
    def passes(self) -> bool | None:
        """True if uniformity is not rejected at ``alpha``; None if not computable."""
        if not self.computable or self.critical_value is None:
            return None
        return self.statistic <= self.critical_value

    def to_frame(self) -> pd.DataFrame:
        """Per-bin observed/expected counts as a DataFrame, one row per bin."""
        lower = [i / self.k for i in range(len(self.observed))] if self.k else []
        return pd.DataFrame(
            {
                "bin": range(len(self.observed)),
                "lower": lower,
                "upper": [x + 1 / self.k for x in lower],
                "observed": list(self.observed),
                "expected": list(self.expected),
            }
        )


def bin_index(u: float, k: int) -> int:
    """Bin for a sample; u == 1.0 is clamped into the last bin."""
    return min(math.floor(u * k), k - 1)


def bin_samples(samples: list[float], k: int) -> list[int]:
    counts = [0] * k
    for u in samples:
        counts[bin_index(u, k)] += 1
    return counts


def _describe_generator(method: PrngMethod, seed: int | None, config: McgConfig | None) -> str:
    parts = [method.value]
    if seed is not None:
        parts.append(f"seed {seed}")
    if config is not None:
        parts.append(f"a={config.a}, c={config.c}, m={config.m}")
    return ", ".join(parts)


class ChiSquareTester:
    """Runs uniformity tests against a shared PrngProvider.

    Must not be used while a simulation is ticking on the same provider:
    the provider is swapped out for the duration of ``run``.

    Args:
        provider: Provider to borrow. Its state is restored after each run.
        alpha: Significance level for the reported critical value.
    """

    def __init__(self, provider: PrngProvider, alpha: float = DEFAULT_ALPHA):
        self.provider = provider
        self.alpha = alpha

    def draw_samples(
        self,
        count: int,
        method: PrngMethod | str,
        seed: int | None = None,
        config: McgConfig | None = None,
    ) -> list[float]:
        """Draw ``count`` uniforms from a temporary generator configuration."""
        original = self.provider.snapshot()
        try:
            self.provider.set(method, seed, config)
            return [self.provider.next() for _ in range(count)]
        finally:
            self.provider.restore(original)

    def run(
        self,
        n: int,
        k: int,
        method: PrngMethod | str,
        seed: int | None = None,
        config: McgConfig | None = None,
    ) -> ChiSquareResult:
        """Test ``method`` for uniformity with N samples over K bins.

        Invalid N/K combinations return a non-computable result instead of
        raising.
        """
        method = PrngMethod.parse(method)
        if not method.is_seedable:
            seed = None
        if method is not PrngMethod.MCG:
            config = None
        elif config is not None:
            config = config.normalized()

        if n <= 0 or k <= 1 or n < k * MIN_EXPECTED_PER_BIN:
            logger.info("Chi-square test skipped: invalid N=%d, K=%d", n, k)
            return ChiSquareResult(
                n=n,
                k=k,
                degrees_of_freedom=0,
                method=method,
                seed=seed,
                config=config,
                statistic=0.0,
                interpretation=(
                    f"N must be greater than 0, K greater than 1 and N >= {MIN_EXPECTED_PER_BIN}*K "
                    f"for a valid test (got N={n}, K={k})."
                ),
                computable=False,
                alpha=self.alpha,
            )

        samples = self.draw_samples(n, method, seed, config)
        if method is PrngMethod.MCG and config is None:
            config = McgConfig()

        expected_per_bin = n / k
        if expected_per_bin == 0:
            return ChiSquareResult(
                n=n,
                k=k,
                degrees_of_freedom=k - 1,
                method=method,
                seed=seed,
                config=config,
                statistic=0.0,
                observed=tuple([0] * k),
                expected=tuple([expected_per_bin] * k),
                interpretation="Expected frequency is 0; the chi-square statistic cannot be computed.",
                computable=False,
                alpha=self.alpha,
            )

        observed = bin_samples(samples, k)
        statistic = sum((o - expected_per_bin) ** 2 / expected_per_bin for o in observed)
        df = k - 1
        critical_value = float(chi2.ppf(1 - self.alpha, df))
        p_value = float(chi2.sf(statistic, df))

        generator = _describe_generator(method, seed, config)
        interpretation = (
            f"Chi-square statistic: {statistic:.3f}, degrees of freedom: {df}. "
            f"A lower statistic relative to the degrees of freedom suggests the generator "
            f"({generator}) fits a uniform distribution well. "
            f"Critical value at alpha={self.alpha}: {critical_value:.3f} (p-value {p_value:.4f}); "
            f"consult a chi-square table for other significance levels."
        )

        logger.info(
            "Chi-square test (%s): N=%d K=%d statistic=%.3f p=%.4f",
            generator,
            n,
            k,
            statistic,
            p_value,
        )

        return ChiSquareResult(
            n=n,
            k=k,
            degrees_of_freedom=df,
            method=method,
            seed=seed,
            config=config,
            statistic=statistic,
            observed=tuple(observed),
            expected=tuple([expected_per_bin] * k),
            interpretation=interpretation,
            computable=True,
            alpha=self.alpha,
            critical_value=critical_value,
            p_value=p_value,
        )
