"""Tests for the zone allocation policy."""

import pytest

from parksim.distributions.variates import VariateSampler
from parksim.facility.allocation import AllocationPolicy
from parksim.facility.facility import Facility, ZoneTemplate
from parksim.facility.zone import ZoneRole
from parksim.prng.provider import PrngMethod, PrngProvider


class ScriptedProvider:
    """Uniform source returning a fixed script, counting draws."""

    def __init__(self, values=()):
        self._values = list(values)
        self.draws = 0

    def next(self) -> float:
        self.draws += 1
        return self._values.pop(0)


def make_policy(values=()):
    provider = ScriptedProvider(values)
    return AllocationPolicy(VariateSampler(provider)), provider


def fill(zone, count=None):
    count = zone.capacity if count is None else count
    for space in zone.spaces[:count]:
        space.occupy("X", 0, 1000)


@pytest.fixture
def facility():
    return Facility()


class TestProjectedDisabled:

    def test_more_free_percentage_wins(self, facility):
        fill(facility.get("internal"), 10)  # 50% free vs external 100%
        policy, provider = make_policy()
        zone, overflow = policy.choose_zone(facility, enable_projected=False)
        assert zone.id == "external"
        assert overflow is False
        assert provider.draws == 0

    def test_tie_goes_to_internal(self, facility):
        policy, _ = make_policy()
        zone, _ = policy.choose_zone(facility, enable_projected=False)
        assert zone.id == "internal"

    def test_projected_never_chosen(self, facility):
        fill(facility.get("internal"))
        fill(facility.get("external"))
        policy, _ = make_policy()
        assert policy.choose_zone(facility, enable_projected=False) == (None, False)


class TestProjectedEnabled:

    def test_overflow_with_both_primary_free(self, facility):
        policy, provider = make_policy([0.19])
        zone, overflow = policy.choose_zone(facility, enable_projected=True)
        assert zone.id == "external"
        assert overflow is True
        assert provider.draws == 1

    def test_no_overflow_above_p1(self, facility):
        policy, provider = make_policy([0.20])
        zone, overflow = policy.choose_zone(facility, enable_projected=True)
        assert zone.id == "internal"
        assert overflow is False
        assert provider.draws == 1

    def test_one_primary_free_uses_p2(self, facility):
        fill(facility.get("projected"))
        policy, _ = make_policy([0.15])
        zone, overflow = policy.choose_zone(facility, enable_projected=True)
        assert zone.id == "internal"
        assert overflow is False

        policy, _ = make_policy([0.05])
        zone, overflow = policy.choose_zone(facility, enable_projected=True)
        assert zone.id == "external"
        assert overflow is True

    def test_projected_preferred_when_emptier(self, facility):
        fill(facility.get("internal"), 5)  # 75% free vs projected 100%
        policy, _ = make_policy([0.9])
        zone, _ = policy.choose_zone(facility, enable_projected=True)
        assert zone.id == "projected"

    def test_no_draw_when_external_full(self, facility):
        fill(facility.get("external"))
        policy, provider = make_policy()
        zone, overflow = policy.choose_zone(facility, enable_projected=True)
        assert zone.id == "internal"
        assert overflow is False
        assert provider.draws == 0

    def test_no_draw_when_both_primary_full(self, facility):
        fill(facility.get("internal"))
        fill(facility.get("projected"))
        policy, provider = make_policy()
        zone, overflow = policy.choose_zone(facility, enable_projected=True)
        assert zone.id == "external"
        assert overflow is False
        assert provider.draws == 0

    def test_everything_full_is_rejection(self, facility):
        for zone in facility:
            fill(zone)
        policy, provider = make_policy()
        assert policy.choose_zone(facility, enable_projected=True) == (None, False)
        assert provider.draws == 0


class TestAllocate:

    def test_allocates_first_free_space(self, facility):
        policy = AllocationPolicy(VariateSampler(PrngProvider(PrngMethod.LCG, seed=7)))
        allocation = policy.allocate(facility, 400, "V-1", 300.0, 60.0, enable_projected=False)

        assert allocation is not None
        assert allocation.space.id == "I-1"
        assert allocation.space.vehicle_id == "V-1"
        assert allocation.duration >= 1
        assert allocation.departure_time == 400 + allocation.duration

    def test_duration_never_below_one_minute(self):
        policy = AllocationPolicy(VariateSampler(PrngProvider(PrngMethod.LCG, seed=7)))
        durations = [policy.sample_duration(1.0, 50.0) for _ in range(500)]
        assert min(durations) == 1

    def test_zero_std_dev_is_exact(self):
        policy = AllocationPolicy(VariateSampler(PrngProvider(PrngMethod.LCG, seed=7)))
        assert policy.sample_duration(300.0, 0.0) == 300

    def test_full_single_zone_rejects(self):
        facility = Facility((ZoneTemplate("internal", "Internal Zone", ZoneRole.INTERNAL, 1, "I"),))
        policy = AllocationPolicy(VariateSampler(PrngProvider(PrngMethod.LCG, seed=7)))

        first = policy.allocate(facility, 400, "V-1", 30.0, 0.0, enable_projected=False)
        second = policy.allocate(facility, 401, "V-2", 30.0, 0.0, enable_projected=False)

        assert first is not None
        assert second is None
        assert facility.get("internal").spaces[0].vehicle_id == "V-1"
