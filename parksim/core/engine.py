"""Tick-driven parking simulation engine.

ParkingSimulation owns the facility, the PRNG provider and the running
statistics, and exposes the control surface used by front ends:
configure, start, pause, reset, tick, get_state, update_parameter and
run_chi_square_test.

Each tick advances the clock by one minute and, in order:

1. frees every space whose departure time is at or before the previous
   clock value,
2. counts down to the next arrival; when due, runs one allocation
   attempt against the post-departure zone state and samples the next
   inter-arrival gap from the current time band,
3. folds the tick's departures and arrival attempts into the statistics.

The engine is single-threaded and unlocked: a tick runs to completion
and callers must not inspect or reconfigure it concurrently with one.
"""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import replace
from typing import Callable, Sequence

from parksim.analysis.chi_square import ChiSquareResult, ChiSquareTester
from parksim.core.events import EventKind, EventLog, SimulationEvent
from parksim.core.parameters import (
    FULL_RESET_FIELDS,
    RECOMPUTE_FIELDS,
    WINDOW_FIELDS,
    SimulationParameters,
)
from parksim.core.state import EngineState, SimulationSnapshot, TickResult
from parksim.distributions.variates import VariateSampler
from parksim.errors import SimulationStateError
from parksim.facility.allocation import AllocationPolicy
from parksim.facility.facility import DEFAULT_ZONE_TEMPLATES, Facility, ZoneTemplate
from parksim.instrumentation.statistics import (
    ArrivalRecord,
    SimulationStatistics,
    aggregate,
    initial_statistics,
    recompute,
    resize_timeline,
)
from parksim.prng.provider import McgConfig, PrngMethod, PrngProvider
from parksim.utils.clock import SimulationClock, format_clock
from parksim.utils.ids import VehicleIdSequence

logger = logging.getLogger(__name__)


class ParkingSimulation:
    """One simulated day of a multi-zone parking facility.

    Args:
        params: Initial parameters. Defaults to ``SimulationParameters()``.
        zones: Zone templates the facility is built from.
        provider: PRNG provider to draw from. A new one is created when
            omitted; it is (re)seeded from ``params`` on every full reset.

    Raises:
        ConfigurationError: If ``params`` is invalid.
    """

    def __init__(
        self,
        params: SimulationParameters | None = None,
        zones: Sequence[ZoneTemplate] = DEFAULT_ZONE_TEMPLATES,
        provider: PrngProvider | None = None,
    ):
        params = params or SimulationParameters()
        params.validate()

        self.provider = provider or PrngProvider()
        self.sampler = VariateSampler(self.provider)
        self.policy = AllocationPolicy(self.sampler)
        self.chi_square = ChiSquareTester(self.provider)
        self.facility = Facility(tuple(zones))
        self.event_log = EventLog()

        self._params = params
        self._schedule = params.arrival_schedule()
        self._clock = SimulationClock(params.simulation_start_time, params.simulation_end_time)
        self._vehicle_ids = VehicleIdSequence()
        self._state = EngineState.CONFIGURED
        self._next_arrival_due = 0
        self._event_seq = 0
        self._full_reset()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def params(self) -> SimulationParameters:
        return self._params

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def clock(self) -> int:
        return self._clock.now

    @property
    def statistics(self) -> SimulationStatistics:
        return self._statistics

    @property
    def next_arrival_due(self) -> int:
        return self._next_arrival_due

    @property
    def is_running(self) -> bool:
        return self._state is EngineState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._state is EngineState.FINISHED

    def get_state(self) -> SimulationSnapshot:
        """Return a snapshot safe to hand to readers between ticks."""
        return SimulationSnapshot(
            state=self._state,
            clock=self._clock.now,
            zones=tuple(copy.deepcopy(self.facility.zones)),
            active_zone_ids=tuple(
                z.id for z in self.facility.active_zones(self._params.enable_projected_zone)
            ),
            statistics=self._statistics,
            parameters=self._params,
            events=tuple(self.event_log),
            next_arrival_due=self._next_arrival_due,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, params: SimulationParameters) -> SimulationStatistics:
        """Validate ``params`` and reinitialize the whole simulation with them.

        Raises:
            ConfigurationError: If ``params`` is invalid. Nothing changes.
        """
        params.validate()
        self._apply_params(params)
        self._full_reset()
        logger.info(
            "Configured %s-%s, PRNG %s",
            format_clock(params.simulation_start_time),
            format_clock(params.simulation_end_time),
            params.prng_method.value,
        )
        return self._statistics

    def update_parameter(self, key: str, value) -> SimulationStatistics:
        """Change one parameter and react according to the engine state.

        While CONFIGURED, a change of the day window or of any PRNG field
        resets the whole simulation, and toggling the projected zone or
        reservations refreshes the occupancy figures. In any other state
        the new value is stored and takes effect from the next tick; a run
        in progress is never reset, but a window change resizes the hourly
        timeline so counts already recorded keep their hours.

        Raises:
            ConfigurationError: If the key is unknown or the resulting
                parameters are invalid. Nothing changes.
        """
        name = SimulationParameters.normalize_key(key)
        params = self._params.replace(**{name: value})
        self._apply_params(params)

        if self._state is EngineState.CONFIGURED:
            if name in FULL_RESET_FIELDS:
                logger.info("Parameter %s changed; resetting simulation", name)
                self._full_reset()
            elif name in RECOMPUTE_FIELDS:
                self._statistics = recompute(self._statistics, self.facility, self._params)
        else:
            if name in WINDOW_FIELDS:
                self._statistics = replace(
                    self._statistics,
                    timeline=resize_timeline(
                        self._statistics.timeline,
                        params.simulation_start_time,
                        params.simulation_end_time,
                    ),
                )
            logger.debug("Parameter %s changed while %s", name, self._state.value)

        return self._statistics

    def _apply_params(self, params: SimulationParameters) -> None:
        self._params = params
        self._schedule = params.arrival_schedule()
        self._clock.start = params.simulation_start_time
        self._clock.end = params.simulation_end_time

    def _full_reset(self) -> None:
        params = self._params
        self.facility.reset()
        self._clock.reset(params.simulation_start_time, params.simulation_end_time)
        self.event_log.clear()
        self._event_seq = 0
        self._vehicle_ids.reset()
        self._next_arrival_due = 0
        self.provider.set(params.prng_method, params.active_seed, params.mcg_config)
        self._statistics = initial_statistics(self.facility, params)
        self._state = EngineState.CONFIGURED

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> tuple[SimulationEvent, ...]:
        """Start or resume ticking.

        A clock lagging the day window is moved up to its start. If the
        clock has already reached the end of the day the start is refused
        with a notice and the engine moves to FINISHED.

        Returns:
            Events emitted by the transition.
        """
        if self._state is EngineState.RUNNING:
            return ()

        events: list[SimulationEvent] = []

        if self._state is EngineState.FINISHED:
            events.append(self._emit(EventKind.NOTICE, "The simulation has already finished. Reset to start again."))
            return tuple(events)

        if self._clock.snap_to_start():
            self._statistics = replace(self._statistics, clock=self._clock.now)
            events.append(
                self._emit(EventKind.CLOCK_ADJUSTED, f"Clock moved to the simulation start: {self._clock}.")
            )

        if self._clock.at_or_past_end:
            self._state = EngineState.FINISHED
            events.append(
                self._emit(
                    EventKind.NOTICE,
                    "The simulation has already reached its end time. Reset to start again.",
                )
            )
            logger.info("Start refused: clock %s is at or past the end time", self._clock)
            return tuple(events)

        resumed = self._state is EngineState.PAUSED
        self._state = EngineState.RUNNING
        events.append(self._emit(EventKind.STARTED, "Simulation resumed." if resumed else "Simulation started."))
        logger.info("Simulation %s at %s", "resumed" if resumed else "started", self._clock)

        if self._next_arrival_due <= 0:
            self._next_arrival_due = self._sample_interarrival(self._clock.now)

        return tuple(events)

    def pause(self) -> tuple[SimulationEvent, ...]:
        """Stop ticking, keeping all state. A no-op unless RUNNING."""
        if self._state is not EngineState.RUNNING:
            return ()
        self._state = EngineState.PAUSED
        logger.info("Simulation paused at %s", self._clock)
        return (self._emit(EventKind.PAUSED, "Simulation paused."),)

    def reset(self, restore_defaults: bool = False) -> tuple[SimulationEvent, ...]:
        """Discard the run and return to CONFIGURED.

        Args:
            restore_defaults: Also replace the parameters with defaults.
        """
        if restore_defaults:
            self._apply_params(SimulationParameters())
        self._full_reset()
        logger.info("Simulation reset")
        message = "Simulation reset to default values." if restore_defaults else "Simulation reset."
        return (self._emit(EventKind.RESET, message),)

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def tick(self) -> TickResult:
        """Advance the simulation by one minute.

        Returns:
            The events produced and the statistics afterwards. Once
            FINISHED, every call returns no events.

        Raises:
            SimulationStateError: If the engine is CONFIGURED or PAUSED.
        """
        if self._state is EngineState.FINISHED:
            return TickResult(events=(), statistics=self._statistics)
        if self._state is not EngineState.RUNNING:
            raise SimulationStateError(f"Cannot tick: simulation is {self._state.value}")

        previous = self._clock.now
        if previous + 1 > self._params.simulation_end_time:
            return TickResult(events=(self._finish(),), statistics=self._statistics)

        now = self._clock.advance()
        events: list[SimulationEvent] = []

        departed = self._process_departures(previous, events)
        arrivals = self._process_arrival(now, events)

        self._statistics = aggregate(
            self._statistics,
            departed,
            arrivals,
            self.facility,
            self._params,
            clock=now,
        )

        if self._clock.at_or_past_end:
            events.append(self._finish())

        return TickResult(events=tuple(events), statistics=self._statistics)

    def run(
        self,
        max_ticks: int | None = None,
        on_tick: Callable[[TickResult], None] | None = None,
        realtime: bool = False,
    ) -> SimulationStatistics:
        """Tick until the day finishes, or for at most ``max_ticks`` ticks.

        Starts (or resumes) the engine first. With ``realtime`` the loop
        sleeps ``1 / tick_rate`` seconds between ticks.
        """
        if self._state is not EngineState.RUNNING:
            self.start()

        ticks = 0
        while self._state is EngineState.RUNNING and (max_ticks is None or ticks < max_ticks):
            result = self.tick()
            ticks += 1
            if on_tick is not None:
                on_tick(result)
            if realtime:
                time.sleep(1.0 / self._params.tick_rate)

        return self._statistics

    def _process_departures(self, previous: int, events: list[SimulationEvent]) -> list[int]:
        include_reserved = self._params.enable_reservations
        durations: list[int] = []
        for zone in self.facility:
            for space in zone.spaces:
                if not space.is_due(previous, include_reserved=include_reserved):
                    continue
                vehicle_id = space.vehicle_id
                duration = space.release()
                if duration is None:
                    duration = round(self._params.parking_duration_mean)
                durations.append(duration)
                events.append(
                    self._emit(
                        EventKind.DEPARTURE,
                        f"Vehicle {vehicle_id} left {zone.name} space {space.id} after {duration} min.",
                        vehicle_id=vehicle_id,
                        zone_id=zone.id,
                        space_id=space.id,
                        duration=duration,
                    )
                )
                logger.debug("%s left %s at %s", vehicle_id, space.id, self._clock)
        return durations

    def _process_arrival(self, now: int, events: list[SimulationEvent]) -> list[ArrivalRecord]:
        if self._next_arrival_due > 0:
            self._next_arrival_due -= 1
            return []

        params = self._params
        allocation = self.policy.allocate(
            self.facility,
            now,
            self._vehicle_ids.peek(),
            params.parking_duration_mean,
            params.parking_duration_std_dev,
            params.enable_projected_zone,
        )

        if allocation is not None:
            self._vehicle_ids.next()
            events.append(
                self._emit(
                    EventKind.ARRIVAL,
                    f"Vehicle {allocation.vehicle_id} parked in {allocation.zone.name} "
                    f"space {allocation.space.id}. Duration: {allocation.duration} min.",
                    vehicle_id=allocation.vehicle_id,
                    zone_id=allocation.zone.id,
                    space_id=allocation.space.id,
                    duration=allocation.duration,
                )
            )
            record = ArrivalRecord(minute=now)
        else:
            rejected_no = self._statistics.total_rejections + 1
            events.append(self._emit(EventKind.REJECTION, f"Vehicle rejected (#{rejected_no}): no free space."))
            logger.debug("Arrival rejected at %s: facility full", self._clock)
            record = ArrivalRecord(minute=now, rejected=True)

        self._next_arrival_due = self._sample_interarrival(now)
        return [record]

    def _sample_interarrival(self, minute: int) -> int:
        mean = self._schedule.mean_at(minute)
        return max(1, round(self.sampler.exponential(mean)))

    def _finish(self) -> SimulationEvent:
        self._state = EngineState.FINISHED
        logger.info("Simulation finished at %s", self._clock)
        return self._emit(EventKind.FINISHED, "Simulation finished: closing time reached.")

    def _emit(self, kind: EventKind, message: str, **details) -> SimulationEvent:
        self._event_seq += 1
        event = SimulationEvent(
            seq=self._event_seq,
            kind=kind,
            minute=self._clock.now,
            message=message,
            **details,
        )
        self.event_log.append(event)
        return event

    # ------------------------------------------------------------------
    # PRNG quality
    # ------------------------------------------------------------------

    def run_chi_square_test(
        self,
        n: int | None = None,
        k: int | None = None,
        method: PrngMethod | str | None = None,
        seed: int | None = None,
        config: McgConfig | None = None,
    ) -> ChiSquareResult:
        """Run a uniformity test, defaulting to the configured generator.

        The simulation's own stream is left exactly where it was.

        Raises:
            SimulationStateError: If the engine is RUNNING.
        """
        if self._state is EngineState.RUNNING:
            raise SimulationStateError("Pause the simulation before running the chi-square test")

        params = self._params
        n = params.chi_square_sample_size if n is None else n
        k = params.chi_square_num_bins if k is None else k
        method = params.prng_method if method is None else PrngMethod.parse(method)

        if seed is None and method.is_seedable:
            seed = params.mcg_seed if method is PrngMethod.MCG else params.prng_seed
        if config is None and method is PrngMethod.MCG:
            config = McgConfig(a=params.mcg_a, c=params.mcg_c, m=params.mcg_m)

        result = self.chi_square.run(n, k, method, seed, config)
        self._emit(
            EventKind.CHI_SQUARE,
            f"Chi-square test for {method.value}: N={n}, K={k}, statistic {result.statistic:.3f}.",
        )
        return result

