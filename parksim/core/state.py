"""Engine lifecycle states and read-only views handed to collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from parksim.core.events import SimulationEvent
    from parksim.core.parameters import SimulationParameters
    from parksim.facility.zone import ParkingZone
    from parksim.instrumentation.statistics import SimulationStatistics


class EngineState(str, Enum):
    """Lifecycle of a simulated day.

    CONFIGURED -> RUNNING <-> PAUSED, and RUNNING -> FINISHED once the
    clock reaches the end of the day. FINISHED is left only by a reset.
    """

    CONFIGURED = "configured"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class TickResult:
    """What one call to ``tick()`` produced.

    Attributes:
        events: Events emitted during the tick, in order.
        statistics: Statistics after the tick.
    """

    events: tuple[SimulationEvent, ...]
    statistics: SimulationStatistics


@dataclass(frozen=True)
class SimulationSnapshot:
    """Immutable view of the engine between ticks.

    Zones are deep copies; mutating them has no effect on the engine.

    Attributes:
        state: Lifecycle state.
        clock: Simulation clock in minutes from midnight.
        zones: Copies of all zones, including a disabled projected zone.
        active_zone_ids: Ids of zones taking part in allocation.
        statistics: Current statistics.
        parameters: Parameters in effect.
        events: Event log, newest first.
        next_arrival_due: Ticks until the next arrival attempt.
    """

    state: EngineState
    clock: int
    zones: tuple[ParkingZone, ...]
    active_zone_ids: tuple[str, ...]
    statistics: SimulationStatistics
    parameters: SimulationParameters
    events: tuple[SimulationEvent, ...]
    next_arrival_due: int

    @property
    def active_zones(self) -> tuple[ParkingZone, ...]:
        return tuple(z for z in self.zones if z.id in self.active_zone_ids)
