"""Events emitted by the engine for event-log collaborators."""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Iterator

import pandas as pd

from parksim.utils.clock import format_clock

MAX_LOG_EVENTS = 100


class EventKind(str, Enum):
    ARRIVAL = "arrival"
    REJECTION = "rejection"
    DEPARTURE = "departure"
    STARTED = "started"
    PAUSED = "paused"
    FINISHED = "finished"
    CLOCK_ADJUSTED = "clock_adjusted"
    RESET = "reset"
    NOTICE = "notice"
    CHI_SQUARE = "chi_square"


@dataclass(frozen=True)
class SimulationEvent:
    """One entry of the event log.

    Attributes:
        seq: Sequence number, increasing since the last reset.
        kind: What happened.
        minute: Simulation clock minute the event belongs to.
        message: Human-readable description.
        vehicle_id: Vehicle involved, if any.
        zone_id: Zone involved, if any.
        space_id: Space involved, if any.
        duration: Stay length in minutes for arrivals and departures.
    """

    seq: int
    kind: EventKind
    minute: int
    message: str
    vehicle_id: str | None = None
    zone_id: str | None = None
    space_id: str | None = None
    duration: int | None = None

    @property
    def timestamp(self) -> str:
        return format_clock(self.minute)

    def __str__(self) -> str:
        return f"[{self.timestamp}] {self.message}"


class EventLog:
    """Most recent events, newest first, bounded to ``max_events``."""

    def __init__(self, max_events: int = MAX_LOG_EVENTS):
        self._events: deque[SimulationEvent] = deque(maxlen=max_events)

    def append(self, event: SimulationEvent) -> None:
        self._events.appendleft(event)

    def clear(self) -> None:
        self._events.clear()

    def __iter__(self) -> Iterator[SimulationEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def latest(self) -> SimulationEvent | None:
        return self._events[0] if self._events else None

    def to_frame(self) -> pd.DataFrame:
        rows = []
        for event in self._events:
            row = asdict(event)
            row["kind"] = event.kind.value
            row["timestamp"] = event.timestamp
            rows.append(row)
        return pd.DataFrame(
            rows,
            columns=[
                "seq", "timestamp", "kind", "minute", "message",
                "vehicle_id", "zone_id", "space_id", "duration",
            ],
        )
