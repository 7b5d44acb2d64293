"""parksim: discrete-event simulation of a multi-zone parking facility.

Quick start:
    from parksim import ParkingSimulation, SimulationParameters

    sim = ParkingSimulation(SimulationParameters(prng_method="lcg", prng_seed=42))
    stats = sim.run()
    print(stats)

The library is silent by default; see ``parksim.logging_config``.
"""

import logging

from parksim.errors import (
    ConfigurationError,
    GeneratorStallError,
    ParkSimError,
    SimulationStateError,
)
from parksim.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
)
from parksim.prng import McgConfig, PrngMethod, PrngProvider, PrngSnapshot
from parksim.distributions import VariateSampler
from parksim.analysis import ChiSquareResult, ChiSquareTester
from parksim.facility import (
    DEFAULT_ZONE_TEMPLATES,
    AllocationPolicy,
    Facility,
    ParkingSpace,
    ParkingZone,
    SpaceStatus,
    ZoneRole,
    ZoneTemplate,
)
from parksim.core import (
    EngineState,
    EventKind,
    ParkingSimulation,
    SimulationEvent,
    SimulationParameters,
    SimulationSnapshot,
    TickResult,
)
from parksim.instrumentation import SimulationStatistics, TimelineBucket, ZoneOccupancy

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Engine
    "ParkingSimulation",
    "SimulationParameters",
    "EngineState",
    "EventKind",
    "SimulationEvent",
    "SimulationSnapshot",
    "TickResult",
    # Facility
    "AllocationPolicy",
    "DEFAULT_ZONE_TEMPLATES",
    "Facility",
    "ParkingSpace",
    "ParkingZone",
    "SpaceStatus",
    "ZoneRole",
    "ZoneTemplate",
    # Randomness
    "ChiSquareResult",
    "ChiSquareTester",
    "McgConfig",
    "PrngMethod",
    "PrngProvider",
    "PrngSnapshot",
    "VariateSampler",
    # Statistics
    "SimulationStatistics",
    "TimelineBucket",
    "ZoneOccupancy",
    # Errors
    "ConfigurationError",
    "GeneratorStallError",
    "ParkSimError",
    "SimulationStateError",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
]
