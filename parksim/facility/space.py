"""A single parking space and its status lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SpaceStatus(str, Enum):
    FREE = "free"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


@dataclass
class ParkingSpace:
    """One space within a zone.

    A FREE space carries no vehicle, departure time or duration; the
    transition methods keep those fields in step with ``status``.

    Attributes:
        id: Identifier, unique within its zone (e.g. "I-3").
        status: Current status.
        vehicle_id: Vehicle parked or holding the reservation.
        departure_time: Absolute clock minute at which the vehicle leaves.
        assigned_duration: Minutes sampled for the stay at arrival.
    """

    id: str
    status: SpaceStatus = SpaceStatus.FREE
    vehicle_id: str | None = None
    departure_time: int | None = None
    assigned_duration: int | None = None

    @property
    def is_free(self) -> bool:
        return self.status is SpaceStatus.FREE

    def occupy(self, vehicle_id: str, now: int, duration: int) -> None:
        self._hold(SpaceStatus.OCCUPIED, vehicle_id, now, duration)

    def reserve(self, vehicle_id: str, now: int, duration: int) -> None:
        """Mark the space as reserved. Bookkeeping only."""
        self._hold(SpaceStatus.RESERVED, vehicle_id, now, duration)

    def _hold(self, status: SpaceStatus, vehicle_id: str, now: int, duration: int) -> None:
        if not self.is_free:
            raise ValueError(f"Space {self.id} is not free ({self.status.value})")
        self.status = status
        self.vehicle_id = vehicle_id
        self.assigned_duration = duration
        self.departure_time = now + duration

    def release(self) -> int | None:
        """Free the space and return the duration the vehicle was assigned."""
        duration = self.assigned_duration
        self.status = SpaceStatus.FREE
        self.vehicle_id = None
        self.departure_time = None
        self.assigned_duration = None
        return duration

    def is_due(self, now: int, include_reserved: bool = False) -> bool:
        """True if the holder should leave at or before ``now``."""
        if self.status is SpaceStatus.OCCUPIED or (
            include_reserved and self.status is SpaceStatus.RESERVED
        ):
            return self.departure_time is not None and self.departure_time <= now
        return False
