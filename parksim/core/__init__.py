"""Simulation engine, configuration and lifecycle types."""

from parksim.core.parameters import (
    FULL_RESET_FIELDS,
    PRNG_FIELDS,
    RECOMPUTE_FIELDS,
    WINDOW_FIELDS,
    ArrivalSchedule,
    SimulationParameters,
    TimeBand,
)
from parksim.core.events import EventKind, EventLog, SimulationEvent
from parksim.core.state import EngineState, SimulationSnapshot, TickResult
from parksim.core.engine import ParkingSimulation

__all__ = [
    "ArrivalSchedule",
    "EngineState",
    "EventKind",
    "EventLog",
    "FULL_RESET_FIELDS",
    "PRNG_FIELDS",
    "ParkingSimulation",
    "RECOMPUTE_FIELDS",
    "SimulationEvent",
    "SimulationParameters",
    "SimulationSnapshot",
    "TickResult",
    "TimeBand",
    "WINDOW_FIELDS",
]
