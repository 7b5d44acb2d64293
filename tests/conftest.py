"""
Shared pytest fixtures for parksim tests.
"""

import logging
from pathlib import Path

import pytest

from parksim.core.engine import ParkingSimulation
from parksim.core.parameters import SimulationParameters
from parksim.facility.facility import ZoneTemplate
from parksim.facility.zone import ZoneRole


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy inspection.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture(autouse=True)
def reset_parksim_logging():
    """Give every test the library default: only a NullHandler, level NOTSET."""
    logger = logging.getLogger("parksim")

    def _reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    _reset()
    yield
    _reset()


@pytest.fixture
def lcg_params() -> SimulationParameters:
    """Default day, seeded LCG so runs are reproducible."""
    return SimulationParameters(prng_method="lcg", prng_seed=12345)


@pytest.fixture
def lcg_sim(lcg_params) -> ParkingSimulation:
    return ParkingSimulation(lcg_params)


@pytest.fixture
def single_space_zones() -> tuple[ZoneTemplate, ...]:
    """A facility with one internal space and nothing else."""
    return (ZoneTemplate("internal", "Internal Zone", ZoneRole.INTERNAL, 1, "I"),)
