"""Integer-minute simulation clock."""

from __future__ import annotations


def format_clock(minute: int | float) -> str:
    """Render minutes since midnight as ``HH:MM``."""
    minute = int(minute)
    return f"{minute // 60:02d}:{minute % 60:02d}"


class SimulationClock:
    """Minutes since midnight, advanced one tick at a time.

    The clock itself does not enforce the day window; the engine decides
    what happens when ``now`` passes ``end``.
    """

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end
        self._now = start

    @property
    def now(self) -> int:
        return self._now

    def advance(self) -> int:
        self._now += 1
        return self._now

    def snap_to_start(self) -> bool:
        """Move a clock that lags the window start up to it. True if it moved."""
        if self._now < self.start:
            self._now = self.start
            return True
        return False

    def reset(self, start: int | None = None, end: int | None = None) -> None:
        if start is not None:
            self.start = start
        if end is not None:
            self.end = end
        self._now = self.start

    @property
    def at_or_past_end(self) -> bool:
        return self._now >= self.end

    def __str__(self) -> str:
        return format_clock(self._now)
