"""
Contract objects

Standardized objects through which the host (renderer, CLI, tests)
reads the simulation without knowing how it is integrated.
"""

from .neuron_state import NeuronState
from .parameters import HHParameters, SimulationMode

__all__ = [
    "NeuronState",
    "HHParameters",
    "SimulationMode",
]
