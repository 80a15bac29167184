# =============================================================
# readout.py — Per-frame readout for the visualization layer
# =============================================================
# Purpose:
#   • Turn a polled NeuronState into the quantities the renderer
#     draws: channel currents, ion-flow intensities, soma phase
#   • Spike times from a recorded trace
#
# Contract:
#   - Read-only: no state, never touches the simulation
#   - V [mV], t [ms], I [µA/cm²]
#
#   Na flow = m³h · (g_Na / g_Na_ref) · flow_gain
#   K  flow = n⁴  · (g_K  / g_K_ref)  · flow_gain
# =============================================================

import numpy as np

from ..config import CONFIG
from .integrator import ionic_currents

__all__ = ["ionic_currents", "channel_flow", "soma_phase", "detect_spikes"]


def channel_flow(state, params, cfg=None):
    """
    Ion-flow intensities for the particle effect

    Parameters
    ----------
    state : NeuronState
    params : HHParameters
    cfg : dict, optional
        READOUT section (defaults to CONFIG["READOUT"]).

    Returns
    -------
    dict
        {"Na": float, "K": float}
    """
    r = cfg or CONFIG["READOUT"]
    with np.errstate(all="ignore"):
        na = state.m**3 * state.h * (params.g_Na / r["g_Na_ref"])
        k = state.n**4 * (params.g_K / r["g_K_ref"])
    return {"Na": float(na * r["flow_gain"]), "K": float(k * r["flow_gain"])}


def soma_phase(V, cfg=None):
    """'spiking' above spike_thresh, 'threshold' above threshold_V, else 'resting'."""
    r = cfg or CONFIG["READOUT"]
    if V > r["spike_thresh"]:
        return "spiking"
    if V > r["threshold_V"]:
        return "threshold"
    return "resting"


def detect_spikes(times, V, thresh=0.0):
    """
    Upward threshold crossings of a voltage trace

    Parameters
    ----------
    times : array-like
        Sample times [ms].
    V : array-like
        Membrane potential [mV], same length as ``times``.
    thresh : float, optional
        Crossing level [mV].

    Returns
    -------
    list of float
        Time of the first sample above ``thresh`` for each crossing.
    """
    t = np.asarray(times, dtype=float)
    v = np.asarray(V, dtype=float)
    if v.size < 2:
        return []
    above = v > thresh
    idx = np.flatnonzero(~above[:-1] & above[1:]) + 1
    return [float(t[i]) for i in idx]
