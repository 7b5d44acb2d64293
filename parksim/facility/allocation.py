"""Zone allocation policy for arriving vehicles.

The policy balances the primary zones (internal and, when enabled,
projected) by free-space percentage, and sends a share of drivers to the
external overflow lot even when a primary zone still has room:

- internal and projected both free, external free: external with P1 (0.20)
- exactly one of them free, external free: external with P2 (0.10)

Each of those choices costs one uniform draw from the provider; no draw is
made when the condition does not hold. Ties in free-space percentage go to
the internal zone. An arrival that finds no eligible free space is a
rejection and returns None.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from parksim.distributions.variates import VariateSampler
from parksim.facility.facility import Facility
from parksim.facility.space import ParkingSpace
from parksim.facility.zone import ParkingZone, ZoneRole

logger = logging.getLogger(__name__)

OVERFLOW_PROBABILITY_BOTH_FREE = 0.20
OVERFLOW_PROBABILITY_ONE_FREE = 0.10
MIN_DURATION = 1


@dataclass(frozen=True)
class Allocation:
    """A vehicle placed in a space.

    Attributes:
        zone: Zone that received the vehicle.
        space: Space now occupied.
        vehicle_id: Identifier assigned to the vehicle.
        duration: Sampled stay in minutes.
        departure_time: Clock minute the vehicle is due to leave.
        overflow: True if the vehicle chose the external lot by the
            stochastic draw while a primary zone still had room.
    """

    zone: ParkingZone
    space: ParkingSpace
    vehicle_id: str
    duration: int
    departure_time: int
    overflow: bool = False


def _has_room(zone: ParkingZone | None) -> bool:
    return zone is not None and zone.free_count() > 0


def _by_free_ratio(preferred: ParkingZone | None, other: ParkingZone | None) -> list[ParkingZone]:
    """Zones with room, highest free percentage first; ``preferred`` wins ties."""
    ordered = [preferred, other]
    if _has_room(preferred) and _has_room(other) and other.free_ratio() > preferred.free_ratio():
        ordered = [other, preferred]
    return [z for z in ordered if _has_room(z)]


class AllocationPolicy:
    """Decides which zone, if any, receives an arriving vehicle.

    Args:
        sampler: Variate sampler; its provider supplies the overflow draws
            and the Normal stay durations.
        both_free_overflow: Probability of choosing external when internal
            and projected both have room.
        one_free_overflow: Probability of choosing external when only one of
            internal and projected has room.
    """

    def __init__(
        self,
        sampler: VariateSampler,
        both_free_overflow: float = OVERFLOW_PROBABILITY_BOTH_FREE,
        one_free_overflow: float = OVERFLOW_PROBABILITY_ONE_FREE,
    ):
        self.sampler = sampler
        self.both_free_overflow = both_free_overflow
        self.one_free_overflow = one_free_overflow

    def choose_zone(self, facility: Facility, enable_projected: bool) -> tuple[ParkingZone | None, bool]:
        """Pick the destination zone.

        Returns:
            ``(zone, overflow)``; zone is None for a rejection.
        """
        internal = facility.by_role(ZoneRole.INTERNAL)
        external = facility.by_role(ZoneRole.EXTERNAL)

        if not enable_projected:
            candidates = _by_free_ratio(internal, external)
            return (candidates[0] if candidates else None), False

        projected = facility.by_role(ZoneRole.PROJECTED)
        internal_free = _has_room(internal)
        projected_free = _has_room(projected)

        if _has_room(external):
            if internal_free and projected_free:
                if self.sampler.provider.next() < self.both_free_overflow:
                    return external, True
            elif internal_free or projected_free:
                if self.sampler.provider.next() < self.one_free_overflow:
                    return external, True

        candidates = _by_free_ratio(internal, projected)
        if candidates:
            return candidates[0], False
        if _has_room(external):
            return external, False
        return None, False

    def sample_duration(self, mean: float, std_dev: float) -> int:
        """Stay length in whole minutes, at least one."""
        return max(MIN_DURATION, round(self.sampler.normal(mean, std_dev)))

    def allocate(
        self,
        facility: Facility,
        now: int,
        vehicle_id: str,
        duration_mean: float,
        duration_std_dev: float,
        enable_projected: bool,
    ) -> Allocation | None:
        """Place one arriving vehicle, or return None if it is rejected."""
        zone, overflow = self.choose_zone(facility, enable_projected)
        if zone is None:
            logger.debug("No free space for %s at minute %d", vehicle_id, now)
            return None

        space = zone.first_free()
        if space is None:
            return None

        duration = self.sample_duration(duration_mean, duration_std_dev)
        space.occupy(vehicle_id, now, duration)
        logger.debug(
            "%s parked in %s space %s for %d min%s",
            vehicle_id,
            zone.id,
            space.id,
            duration,
            " (overflow)" if overflow else "",
        )
        return Allocation(
            zone=zone,
            space=space,
            vehicle_id=vehicle_id,
            duration=duration,
            departure_time=space.departure_time,
            overflow=overflow,
        )
