"""
Simulation components

rate_model → integrator → simulation_loop, plus the read-only readout
consumed by the visualization layer.
"""

from . import rate_model
from .integrator import step, integrate, initial_state, derivatives, ionic_currents
from .simulation_loop import SimulationLoop, PulseCountdown, HistoryBuffer
from .readout import channel_flow, soma_phase, detect_spikes

__all__ = [
    "rate_model",
    "step",
    "integrate",
    "initial_state",
    "derivatives",
    "ionic_currents",
    "SimulationLoop",
    "PulseCountdown",
    "HistoryBuffer",
    "channel_flow",
    "soma_phase",
    "detect_spikes",
]
