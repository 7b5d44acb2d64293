"""A named pool of identical parking spaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from parksim.facility.space import ParkingSpace, SpaceStatus


class ZoneRole(str, Enum):
    """Part a zone plays in the allocation policy."""

    INTERNAL = "internal"
    EXTERNAL = "external"
    PROJECTED = "projected"


@dataclass
class ParkingZone:
    """A fixed-capacity zone.

    Attributes:
        id: Zone identifier.
        name: Display name.
        role: Role in the allocation policy.
        spaces: Spaces in allocation order.
    """

    id: str
    name: str
    role: ZoneRole
    spaces: list[ParkingSpace] = field(default_factory=list)

    @classmethod
    def create(cls, id: str, name: str, role: ZoneRole, capacity: int, prefix: str) -> ParkingZone:
        """Build a zone of ``capacity`` free spaces named ``{prefix}-1`` onwards."""
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        spaces = [ParkingSpace(id=f"{prefix}-{i + 1}") for i in range(capacity)]
        return cls(id=id, name=name, role=role, spaces=spaces)

    @property
    def capacity(self) -> int:
        return len(self.spaces)

    @property
    def is_projected(self) -> bool:
        return self.role is ZoneRole.PROJECTED

    def free_count(self) -> int:
        return sum(1 for s in self.spaces if s.is_free)

    def occupied_count(self, include_reserved: bool = False) -> int:
        count = 0
        for space in self.spaces:
            if space.status is SpaceStatus.OCCUPIED:
                count += 1
            elif include_reserved and space.status is SpaceStatus.RESERVED:
                count += 1
        return count

    def free_ratio(self) -> float:
        """Free spaces as a fraction of capacity (0 for an empty zone)."""
        if self.capacity == 0:
            return 0.0
        return self.free_count() / self.capacity

    def first_free(self) -> ParkingSpace | None:
        for space in self.spaces:
            if space.is_free:
                return space
        return None
