"""Simulation configuration and the time-of-day arrival schedule.

SimulationParameters is an immutable bundle; changes go through
``replace`` (or ``ParkingSimulation.update_parameter``) which validates
the new bundle as a whole before anything is applied.
"""

from __future__ import annotations

import dataclasses
import math
import re
from dataclasses import dataclass
from typing import Any, Mapping

from parksim.errors import ConfigurationError
from parksim.prng.provider import McgConfig, PrngMethod
from parksim.utils.clock import format_clock

MINUTES_PER_DAY = 24 * 60
MIN_TICK_RATE = 1
MAX_TICK_RATE = 100
MIN_EXPECTED_PER_BIN = 5

PRNG_FIELDS = frozenset({"prng_method", "prng_seed", "mcg_a", "mcg_c", "mcg_m", "mcg_seed"})
WINDOW_FIELDS = frozenset({"simulation_start_time", "simulation_end_time"})
FULL_RESET_FIELDS = WINDOW_FIELDS | PRNG_FIELDS
RECOMPUTE_FIELDS = frozenset({"enable_projected_zone", "enable_reservations"})

# Legacy front-end keys that do not map by case conversion.
_LEGACY_KEYS = {
    "simulation_speed": "tick_rate",
}


def _to_snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


@dataclass(frozen=True)
class TimeBand:
    """Arrival mean in effect over ``[start, end)`` minutes."""

    name: str
    start: float
    end: float
    mean: float

    def contains(self, minute: float) -> bool:
        return self.start <= minute < self.end


class ArrivalSchedule:
    """Step function from clock minute to mean inter-arrival time.

    Bands are half-open and should not overlap; the first band containing
    a minute wins.
    """

    def __init__(self, bands: list[TimeBand], default_mean: float):
        self.bands = sorted(bands, key=lambda b: b.start)
        self.default_mean = default_mean

    def band_at(self, minute: float) -> TimeBand | None:
        for band in self.bands:
            if band.contains(minute):
                return band
        return None

    def mean_at(self, minute: float) -> float:
        band = self.band_at(minute)
        return band.mean if band is not None else self.default_mean


@dataclass(frozen=True)
class SimulationParameters:
    """Configuration for one simulated day.

    Times are minutes from midnight and arrival means are minutes between
    arrivals. The evening peak is modelled only when
    ``evening_peak_arrival_mean`` is set; ``late_afternoon_arrival_mean``
    then applies after it (falling back to the afternoon mean).
    """

    morning_arrival_mean: float = 1.8
    peak_arrival_mean: float = 1.0
    afternoon_arrival_mean: float = 3.5
    evening_peak_arrival_mean: float | None = None
    late_afternoon_arrival_mean: float | None = None

    parking_duration_mean: float = 5 * 60
    parking_duration_std_dev: float = 1 * 60

    enable_reservations: bool = False
    enable_projected_zone: bool = False
    tick_rate: int = 10

    prng_method: PrngMethod = PrngMethod.SYSTEM
    prng_seed: int = 1
    mcg_a: int = 1664525
    mcg_c: int = 1013904223
    mcg_m: int = 2**32
    mcg_seed: int = 1

    chi_square_sample_size: int = 1000
    chi_square_num_bins: int = 10

    simulation_start_time: int = 6 * 60
    simulation_end_time: int = 22 * 60

    morning_peak_start: int = 7 * 60 + 30
    morning_peak_end: int = 9 * 60
    evening_peak_start: int = 17 * 60
    evening_peak_end: int = 18 * 60

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "prng_method", PrngMethod.parse(self.prng_method))
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in dataclasses.fields(cls))

    @classmethod
    def normalize_key(cls, key: str) -> str:
        """Map a snake_case or camelCase key onto a field name.

        Raises:
            ConfigurationError: If the key names no parameter.
        """
        name = _to_snake(key)
        name = _LEGACY_KEYS.get(name, name)
        if name not in cls.field_names():
            raise ConfigurationError(f"Unknown simulation parameter: {key!r}")
        return name

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> SimulationParameters:
        """Build and validate parameters from a dict of overrides."""
        kwargs = {cls.normalize_key(k): v for k, v in mapping.items()}
        params = cls(**kwargs)
        params.validate()
        return params

    def replace(self, **changes: Any) -> SimulationParameters:
        """Return a validated copy with ``changes`` applied."""
        changes = {self.normalize_key(k): v for k, v in changes.items()}
        params = dataclasses.replace(self, **changes)
        params.validate()
        return params

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["prng_method"] = self.prng_method.value
        return data

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Check the bundle as a whole.

        Raises:
            ConfigurationError: On the first invalid value found.
        """
        if not 0 <= self.simulation_start_time < self.simulation_end_time <= MINUTES_PER_DAY:
            raise ConfigurationError(
                "Simulation start time must be before the end time, both within one day "
                f"(got {format_clock(self.simulation_start_time)}-{format_clock(self.simulation_end_time)})"
            )

        means = {
            "morning_arrival_mean": self.morning_arrival_mean,
            "peak_arrival_mean": self.peak_arrival_mean,
            "afternoon_arrival_mean": self.afternoon_arrival_mean,
            "evening_peak_arrival_mean": self.evening_peak_arrival_mean,
            "late_afternoon_arrival_mean": self.late_afternoon_arrival_mean,
            "parking_duration_mean": self.parking_duration_mean,
        }
        for name, value in means.items():
            if value is not None and not value > 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")

        if self.parking_duration_std_dev < 0:
            raise ConfigurationError(
                f"parking_duration_std_dev must be >= 0, got {self.parking_duration_std_dev}"
            )

        if not MIN_TICK_RATE <= self.tick_rate <= MAX_TICK_RATE:
            raise ConfigurationError(
                f"tick_rate must be between {MIN_TICK_RATE} and {MAX_TICK_RATE}, got {self.tick_rate}"
            )

        if not self.morning_peak_start <= self.morning_peak_end:
            raise ConfigurationError("Morning peak must start before it ends")
        if self.models_evening_peak and not (
            self.morning_peak_end <= self.evening_peak_start <= self.evening_peak_end
        ):
            raise ConfigurationError("Evening peak must follow the morning peak and start before it ends")

        n, k = self.chi_square_sample_size, self.chi_square_num_bins
        if n <= 0 or k <= 1 or n < MIN_EXPECTED_PER_BIN * k:
            raise ConfigurationError(
                f"Chi-square test needs N > 0, K > 1 and N >= {MIN_EXPECTED_PER_BIN}*K (got N={n}, K={k})"
            )

        if self.prng_method is PrngMethod.MCG:
            config = self.mcg_config.normalized()
            m = config.m
            if config.c % m == 0 and (self.mcg_seed % m == 0 or config.a % m == 0):
                raise ConfigurationError(
                    f"MCG with a={config.a}, c={config.c}, m={m} and seed {self.mcg_seed} "
                    "only ever produces 0"
                )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def models_evening_peak(self) -> bool:
        return self.evening_peak_arrival_mean is not None

    @property
    def active_seed(self) -> int:
        """Seed for the configured method (``mcg_seed`` for MCG)."""
        return self.mcg_seed if self.prng_method is PrngMethod.MCG else self.prng_seed

    @property
    def mcg_config(self) -> McgConfig | None:
        if self.prng_method is not PrngMethod.MCG:
            return None
        return McgConfig(a=self.mcg_a, c=self.mcg_c, m=self.mcg_m)

    def arrival_schedule(self) -> ArrivalSchedule:
        bands = [
            TimeBand("morning", -math.inf, self.morning_peak_start, self.morning_arrival_mean),
            TimeBand("morning_peak", self.morning_peak_start, self.morning_peak_end, self.peak_arrival_mean),
        ]
        if self.models_evening_peak:
            late = self.late_afternoon_arrival_mean or self.afternoon_arrival_mean
            bands += [
                TimeBand("afternoon", self.morning_peak_end, self.evening_peak_start, self.afternoon_arrival_mean),
                TimeBand("evening_peak", self.evening_peak_start, self.evening_peak_end, self.evening_peak_arrival_mean),
                TimeBand("late_afternoon", self.evening_peak_end, math.inf, late),
            ]
        else:
            bands.append(TimeBand("afternoon", self.morning_peak_end, math.inf, self.afternoon_arrival_mean))
        return ArrivalSchedule(bands, default_mean=self.afternoon_arrival_mean)
