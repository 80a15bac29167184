# =============================================================
# integrator.py — Hodgkin–Huxley forward-Euler integrator
# =============================================================
# Purpose:
#   • Advance one NeuronState by one fixed step dt
#   • Build the resting (steady-state) start point
#
# Contract:
#   - Time unit: [ms]
#   - V, E_Na, E_K, E_L: [mV]
#   - I_ext: [µA/cm²], g: [mS/cm²], Cm: [µF/cm²]
#   - step() is pure: new state returned, input never touched
#
# -------------------------------------------------------------
# [Core equations]
# -------------------------------------------------------------
# (1) Ionic currents
#   I_Na = g_Na·m³h·(V − E_Na)
#   I_K  = g_K·n⁴·(V − E_K)
#   I_L  = g_L·(V − E_L)
#
# (2) Membrane equation
#   dV/dt = (I_ext − (I_Na + I_K + I_L)) / C_m
#
# (3) Gate kinetics, rates taken at the *current* V
#   dm/dt = α_m(V)(1−m) − β_m(V)m
#   dh/dt = α_h(V)(1−h) − β_h(V)h
#   dn/dt = α_n(V)(1−n) − β_n(V)n
#
# (4) Forward Euler
#   x(t+dt) = x(t) + dt·dx/dt,   t ← t + dt
#
# No validation and no clamping by default: Cm = 0 or extreme
# currents yield inf/NaN in the returned state, which then
# propagates to every later step.
# =============================================================

import numpy as np

from ..contracts import NeuronState
from .rate_model import (
    V_SHIFT,
    alpha_m, beta_m,
    alpha_h, beta_h,
    alpha_n, beta_n,
    steady_state,
)


def ionic_currents(state, params):
    """
    Channel currents of a state under a parameter set

    Returns
    -------
    dict
        {"I_Na", "I_K", "I_L", "I_ion"} in [µA/cm²]
    """
    V, m, h, n = (np.float64(x) for x in (state.V, state.m, state.h, state.n))
    with np.errstate(all="ignore"):
        I_Na = params.g_Na * m**3 * h * (V - params.E_Na)
        I_K = params.g_K * n**4 * (V - params.E_K)
        I_L = params.g_L * (V - params.E_L)
        I_ion = I_Na + I_K + I_L
    return {"I_Na": float(I_Na), "I_K": float(I_K), "I_L": float(I_L), "I_ion": float(I_ion)}


def derivatives(state, params):
    """
    Right-hand side of the HH system at ``state``

    Returns
    -------
    tuple
        (dV/dt [mV/ms], dm/dt, dh/dt, dn/dt [1/ms])
    """
    V, m, h, n = (np.float64(x) for x in (state.V, state.m, state.h, state.n))
    with np.errstate(all="ignore"):
        I_ion = ionic_currents(state, params)["I_ion"]
        dV = (np.float64(params.I_ext) - I_ion) / np.float64(params.Cm)

        dm = alpha_m(V) * (1.0 - m) - beta_m(V) * m
        dh = alpha_h(V) * (1.0 - h) - beta_h(V) * h
        dn = alpha_n(V) * (1.0 - n) - beta_n(V) * n
    return dV, dm, dh, dn


def step(state, params, dt, clamp_gates=False):
    """
    One explicit-Euler step of length dt [ms]

    Contract:
    - Input : state (NeuronState), params (HHParameters, I_ext already
              including any stimulus), dt [ms]
    - Output: new NeuronState with t advanced by exactly dt
    - Side-effect: none

    Parameters
    ----------
    state : NeuronState
        Current state.
    params : HHParameters
        Parameter set used for the whole step.
    dt : float
        Time step [ms].
    clamp_gates : bool, optional
        Clip m, h, n to [0,1] after the update. Off by default, so
        explicit-Euler overshoot stays visible.

    Returns
    -------
    NeuronState
    """
    dV, dm, dh, dn = derivatives(state, params)

    with np.errstate(all="ignore"):
        V = state.V + dV * dt
        m = state.m + dm * dt
        h = state.h + dh * dt
        n = state.n + dn * dt

    if clamp_gates:
        # gates are open probabilities
        m, h, n = np.clip([m, h, n], 0.0, 1.0)

    return NeuronState(
        V=float(V),
        m=float(m),
        h=float(h),
        n=float(n),
        t=state.t + dt,
    )


def integrate(state, params, dt, n_steps, clamp_gates=False):
    """Yield the n_steps successive states after ``state``."""
    for _ in range(n_steps):
        state = step(state, params, dt, clamp_gates=clamp_gates)
        yield state


def initial_state(V_rest=V_SHIFT):
    """
    Resting start point: V = V_rest, gates at equilibrium, t = 0

    m∞ = α_m/(α_m+β_m), likewise h∞, n∞.
    """
    with np.errstate(all="ignore"):
        m0 = steady_state(alpha_m, beta_m, V_rest)
        h0 = steady_state(alpha_h, beta_h, V_rest)
        n0 = steady_state(alpha_n, beta_n, V_rest)
    return NeuronState(V=float(V_rest), m=float(m0), h=float(h0), n=float(n0), t=0.0)
