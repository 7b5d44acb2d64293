"""The facility: an ordered, fixed set of zones built from templates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from parksim.facility.zone import ParkingZone, ZoneRole


@dataclass(frozen=True)
class ZoneTemplate:
    """Shape of a zone, used to (re)build it at initialization.

    Args:
        id: Zone identifier.
        name: Display name.
        role: Role in the allocation policy.
        capacity: Number of spaces.
        prefix: Space id prefix ("I" gives "I-1", "I-2", ...).
    """

    id: str
    name: str
    role: ZoneRole
    capacity: int
    prefix: str

    def build(self) -> ParkingZone:
        return ParkingZone.create(self.id, self.name, self.role, self.capacity, self.prefix)


DEFAULT_ZONE_TEMPLATES: tuple[ZoneTemplate, ...] = (
    ZoneTemplate("internal", "Internal Zone", ZoneRole.INTERNAL, 20, "I"),
    ZoneTemplate("external", "External Zone", ZoneRole.EXTERNAL, 30, "E"),
    ZoneTemplate("projected", "Projected Zone (Expansion)", ZoneRole.PROJECTED, 24, "P"),
)


class Facility:
    """Ordered zones whose ids and capacities are fixed for a run.

    At most one zone may hold each role. A role with no zone behaves as a
    zone with no capacity.

    Args:
        templates: Zone shapes, in display order.
    """

    def __init__(self, templates: tuple[ZoneTemplate, ...] | list[ZoneTemplate] = DEFAULT_ZONE_TEMPLATES):
        templates = tuple(templates)
        ids = [t.id for t in templates]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate zone ids: {ids}")
        roles = [t.role for t in templates]
        if len(set(roles)) != len(roles):
            raise ValueError(f"Each role may be used by at most one zone: {[r.value for r in roles]}")

        self.templates = templates
        self.zones: list[ParkingZone] = []
        self.reset()

    def reset(self) -> None:
        """Rebuild every zone with all spaces free."""
        self.zones = [t.build() for t in self.templates]

    def __iter__(self) -> Iterator[ParkingZone]:
        return iter(self.zones)

    def __len__(self) -> int:
        return len(self.zones)

    def get(self, zone_id: str) -> ParkingZone:
        for zone in self.zones:
            if zone.id == zone_id:
                return zone
        raise KeyError(zone_id)

    def by_role(self, role: ZoneRole) -> ParkingZone | None:
        for zone in self.zones:
            if zone.role is role:
                return zone
        return None

    def active_zones(self, enable_projected: bool) -> list[ParkingZone]:
        """Zones taking part in allocation and reporting."""
        return [z for z in self.zones if enable_projected or not z.is_projected]

    def free_count(self, enable_projected: bool) -> int:
        return sum(z.free_count() for z in self.active_zones(enable_projected))
