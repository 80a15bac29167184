"""
NeuralDX: interactive Hodgkin–Huxley neuron simulation engine

Main parts:
- contracts: contract objects (NeuronState, HHParameters, SimulationMode)
- components: rate model, Euler integrator, frame-driven SimulationLoop
- config: single-source-of-truth CONFIG with YAML overlay
- run: headless driver (console table, oscilloscope plot)
"""

__version__ = "1.0.0"

from .contracts import NeuronState, HHParameters, SimulationMode
from .components import SimulationLoop, step, initial_state
from .config import CONFIG, ConfigError, get_config, load_config

__all__ = [
    "NeuronState",
    "HHParameters",
    "SimulationMode",
    "SimulationLoop",
    "step",
    "initial_state",
    "CONFIG",
    "ConfigError",
    "get_config",
    "load_config",
]
