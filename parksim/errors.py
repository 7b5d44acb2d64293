"""Exceptions raised by parksim.

A rejected arrival (no free space) is a modelled outcome, not an error,
and never raises.
"""

from __future__ import annotations


class ParkSimError(Exception):
    """Base class for all parksim errors."""


class ConfigurationError(ParkSimError, ValueError):
    """Invalid parameter value or combination.

    Raised before any state is touched, so the simulation keeps its
    previous configuration when this propagates.
    """


class SimulationStateError(ParkSimError, RuntimeError):
    """Operation not allowed in the engine's current state."""


class GeneratorStallError(ParkSimError, RuntimeError):
    """The uniform stream kept returning 0, so no variate can be drawn."""
