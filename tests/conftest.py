"""Shared test fixtures and configuration."""

import pytest

from neuraldx import console
from neuraldx.config import get_config
from neuraldx.components import SimulationLoop
from neuraldx.contracts import HHParameters


@pytest.fixture(autouse=True)
def plain_console():
    """Keep console output free of colour codes so capsys checks stay simple."""
    console.set_color(False)
    yield
    console.set_color(True)


@pytest.fixture
def biological_params():
    """Classic squid-axon parameter set, no injected current."""
    return HHParameters(
        Cm=1.0, E_Na=50.0, E_K=-77.0, E_L=-54.4,
        g_Na=120.0, g_K=36.0, g_L=0.3, I_ext=0.0,
    )


@pytest.fixture
def sim_config():
    """Fresh deep copy of the default configuration."""
    return get_config()


@pytest.fixture
def loop(sim_config):
    """Simulation loop on the default configuration."""
    return SimulationLoop(sim_config)


@pytest.fixture
def dt():
    """Default integration step [ms]."""
    return 0.05
