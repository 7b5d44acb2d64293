"""Parking facility model and zone allocation policy."""

from parksim.facility.allocation import (
    OVERFLOW_PROBABILITY_BOTH_FREE,
    OVERFLOW_PROBABILITY_ONE_FREE,
    Allocation,
    AllocationPolicy,
)
from parksim.facility.facility import DEFAULT_ZONE_TEMPLATES, Facility, ZoneTemplate
from parksim.facility.space import ParkingSpace, SpaceStatus
from parksim.facility.zone import ParkingZone, ZoneRole

__all__ = [
    "Allocation",
    "AllocationPolicy",
    "DEFAULT_ZONE_TEMPLATES",
    "Facility",
    "OVERFLOW_PROBABILITY_BOTH_FREE",
    "OVERFLOW_PROBABILITY_ONE_FREE",
    "ParkingSpace",
    "ParkingZone",
    "SpaceStatus",
    "ZoneRole",
    "ZoneTemplate",
]
