"""Running statistics folded from tick-level events.

``aggregate`` is a pure function: it takes the previous statistics, what
happened during one tick, and the current facility, and returns a new
SimulationStatistics. Occupancy figures are recomputed from the facility
on every call; only the counters, duration history and timeline carry
over from the previous value.

Counter contract: ``total_arrivals`` counts every allocation attempt,
successful or not, and is the denominator of ``rejection_rate``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Iterable

import pandas as pd

from parksim.utils.clock import format_clock

if TYPE_CHECKING:
    from parksim.core.parameters import SimulationParameters
    from parksim.facility.facility import Facility

NOT_APPLICABLE = -1


@dataclass(frozen=True)
class ZoneOccupancy:
    """Occupancy of one zone.

    ``occupied`` is -1 (not applicable, not "empty") for a projected zone
    while the projected zone is disabled.
    """

    zone_id: str
    name: str
    occupied: int
    capacity: int
    rate: float
    active: bool = True


@dataclass(frozen=True)
class TimelineBucket:
    """Arrivals and rejections within one clock hour."""

    hour: int
    arrivals: int = 0
    rejections: int = 0

    @property
    def label(self) -> str:
        return f"{format_clock(self.hour * 60)}-{format_clock((self.hour + 1) * 60)}"


@dataclass(frozen=True)
class ArrivalRecord:
    """Outcome of one arrival attempt at ``minute``."""

    minute: int
    rejected: bool = False


@dataclass(frozen=True)
class SimulationStatistics:
    """Snapshot of the simulation's counters and rates.

    Attributes:
        clock: Simulation clock in minutes from midnight.
        total_arrivals: Allocation attempts, including rejections.
        total_departures: Vehicles that left.
        total_rejections: Attempts that found no free space.
        zones: Occupancy per zone id, in facility order.
        overall_occupancy_rate: Occupied / capacity over active zones, in %.
        rejection_rate: Rejections / arrivals, in %.
        avg_parking_time: Mean stay of departed vehicles, in minutes.
        total_parking_time: Sum of stays of departed vehicles, in minutes.
        parking_durations: Stay of every departed vehicle, in order.
        timeline: Hourly arrival/rejection counts across the day window.
    """

    clock: int
    total_arrivals: int = 0
    total_departures: int = 0
    total_rejections: int = 0
    zones: dict[str, ZoneOccupancy] = field(default_factory=dict)
    overall_occupancy_rate: float = 0.0
    rejection_rate: float = 0.0
    avg_parking_time: float = 0.0
    total_parking_time: float = 0.0
    parking_durations: tuple[int, ...] = ()
    timeline: tuple[TimelineBucket, ...] = ()

    @property
    def total_admitted(self) -> int:
        """Arrivals that were given a space."""
        return self.total_arrivals - self.total_rejections

    def occupancy(self, zone_id: str) -> ZoneOccupancy:
        return self.zones[zone_id]

    def current_occupancy(self, zone_id: str) -> int:
        return self.zones[zone_id].occupied

    def timeline_frame(self) -> pd.DataFrame:
        """Hourly timeline as a DataFrame indexed by hour label."""
        return pd.DataFrame(
            {
                "hour": [b.hour for b in self.timeline],
                "arrivals": [b.arrivals for b in self.timeline],
                "rejections": [b.rejections for b in self.timeline],
            },
            index=pd.Index([b.label for b in self.timeline], name="time"),
        )

    def durations_series(self) -> pd.Series:
        return pd.Series(self.parking_durations, name="parking_duration", dtype="int64")

    def zones_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "zone_id": z.zone_id,
                    "name": z.name,
                    "occupied": z.occupied,
                    "capacity": z.capacity,
                    "rate": z.rate,
                    "active": z.active,
                }
                for z in self.zones.values()
            ],
            columns=["zone_id", "name", "occupied", "capacity", "rate", "active"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "clock": self.clock,
            "total_arrivals": self.total_arrivals,
            "total_departures": self.total_departures,
            "total_rejections": self.total_rejections,
            "overall_occupancy_rate": self.overall_occupancy_rate,
            "rejection_rate": self.rejection_rate,
            "avg_parking_time": self.avg_parking_time,
            "zones": {
                zid: {"occupied": z.occupied, "capacity": z.capacity, "rate": z.rate}
                for zid, z in self.zones.items()
            },
        }

    def __str__(self) -> str:
        lines = [
            f"Parking statistics at {format_clock(self.clock)}",
            f"  Arrivals: {self.total_arrivals} (rejected {self.total_rejections}, {self.rejection_rate:.1f}%)",
            f"  Departures: {self.total_departures}",
            f"  Average stay: {self.avg_parking_time:.1f} min",
            f"  Overall occupancy: {self.overall_occupancy_rate:.1f}%",
        ]
        for z in self.zones.values():
            if z.active:
                lines.append(f"    {z.name}: {z.occupied}/{z.capacity} ({z.rate:.1f}%)")
            else:
                lines.append(f"    {z.name}: disabled")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Timeline helpers
# ---------------------------------------------------------------------------


def build_timeline(start_time: int, end_time: int) -> tuple[TimelineBucket, ...]:
    """Empty buckets for every hour touched by ``(start_time, end_time]``."""
    first = start_time // 60
    last = max(first + 1, math.ceil(end_time / 60))
    return tuple(TimelineBucket(hour=h) for h in range(first, last))


def resize_timeline(
    timeline: tuple[TimelineBucket, ...],
    start_time: int,
    end_time: int,
) -> tuple[TimelineBucket, ...]:
    """Buckets for a new day window, keeping every count already recorded.

    Hours of the new window start empty unless the old timeline already
    had them. Old hours with counts outside the new window are kept.
    """
    buckets = {b.hour: b for b in build_timeline(start_time, end_time)}
    for bucket in timeline:
        if bucket.hour in buckets or bucket.arrivals or bucket.rejections:
            buckets[bucket.hour] = bucket
    return tuple(buckets[h] for h in sorted(buckets))


def _fold_timeline(
    timeline: tuple[TimelineBucket, ...],
    arrivals: Iterable[ArrivalRecord],
) -> tuple[TimelineBucket, ...]:
    buckets = list(timeline)
    position = {b.hour: i for i, b in enumerate(buckets)}
    for record in arrivals:
        idx = position.get(record.minute // 60)
        if idx is None:
            continue
        bucket = buckets[idx]
        if record.rejected:
            buckets[idx] = replace(bucket, rejections=bucket.rejections + 1)
        else:
            buckets[idx] = replace(bucket, arrivals=bucket.arrivals + 1)
    return tuple(buckets)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def _occupancy(facility: Facility, params: SimulationParameters) -> tuple[dict[str, ZoneOccupancy], float]:
    zones: dict[str, ZoneOccupancy] = {}
    total_occupied = 0
    total_capacity = 0
    for zone in facility:
        if zone.is_projected and not params.enable_projected_zone:
            zones[zone.id] = ZoneOccupancy(zone.id, zone.name, NOT_APPLICABLE, zone.capacity, 0.0, active=False)
            continue
        occupied = zone.occupied_count(include_reserved=params.enable_reservations)
        rate = occupied / zone.capacity * 100 if zone.capacity > 0 else 0.0
        zones[zone.id] = ZoneOccupancy(zone.id, zone.name, occupied, zone.capacity, rate)
        total_occupied += occupied
        total_capacity += zone.capacity
    overall = total_occupied / total_capacity * 100 if total_capacity > 0 else 0.0
    return zones, overall


def initial_statistics(facility: Facility, params: SimulationParameters) -> SimulationStatistics:
    """Zeroed statistics for a freshly configured day."""
    zones, overall = _occupancy(facility, params)
    return SimulationStatistics(
        clock=params.simulation_start_time,
        zones=zones,
        overall_occupancy_rate=overall,
        timeline=build_timeline(params.simulation_start_time, params.simulation_end_time),
    )


def aggregate(
    previous: SimulationStatistics,
    departed_durations: Iterable[int],
    arrivals: Iterable[ArrivalRecord],
    facility: Facility,
    params: SimulationParameters,
    clock: int | None = None,
) -> SimulationStatistics:
    """Fold one tick's departures and arrival attempts into new statistics.

    Args:
        previous: Statistics after the previous tick.
        departed_durations: Assigned stay of each vehicle that left this tick.
        arrivals: Arrival attempts made this tick.
        facility: Zone state after this tick's mutations.
        params: Parameters in effect.
        clock: Clock after this tick; defaults to ``previous.clock``.
    """
    departed = list(departed_durations)
    arrivals = list(arrivals)

    zones, overall = _occupancy(facility, params)

    total_arrivals = previous.total_arrivals + len(arrivals)
    total_rejections = previous.total_rejections + sum(1 for a in arrivals if a.rejected)
    total_departures = previous.total_departures + len(departed)
    total_parking_time = previous.total_parking_time + sum(departed)

    return SimulationStatistics(
        clock=previous.clock if clock is None else clock,
        total_arrivals=total_arrivals,
        total_departures=total_departures,
        total_rejections=total_rejections,
        zones=zones,
        overall_occupancy_rate=overall,
        rejection_rate=total_rejections / total_arrivals * 100 if total_arrivals > 0 else 0.0,
        avg_parking_time=total_parking_time / total_departures if total_departures > 0 else 0.0,
        total_parking_time=total_parking_time,
        parking_durations=previous.parking_durations + tuple(departed) if departed else previous.parking_durations,
        timeline=_fold_timeline(previous.timeline, arrivals) if arrivals else previous.timeline,
    )


def recompute(
    previous: SimulationStatistics,
    facility: Facility,
    params: SimulationParameters,
) -> SimulationStatistics:
    """Refresh occupancy figures without touching any counter."""
    return aggregate(previous, (), (), facility, params)
