"""Statistics collected while the simulation runs."""

from parksim.instrumentation.statistics import (
    NOT_APPLICABLE,
    ArrivalRecord,
    SimulationStatistics,
    TimelineBucket,
    ZoneOccupancy,
    aggregate,
    build_timeline,
    initial_statistics,
    recompute,
    resize_timeline,
)

__all__ = [
    "ArrivalRecord",
    "NOT_APPLICABLE",
    "SimulationStatistics",
    "TimelineBucket",
    "ZoneOccupancy",
    "aggregate",
    "build_timeline",
    "initial_statistics",
    "recompute",
    "resize_timeline",
]
