# =============================================================
# rate_model.py — Hodgkin–Huxley gate rate constants
# =============================================================
# Purpose:
#   • Six voltage-dependent rates α(V), β(V) for the m, h, n gates
#   • Pure functions: no state, no side effects, never raise
#
# Contract:
#   - Input : V [mV] (absolute membrane potential)
#   - Output: rate [1/ms]
#   - Rates are written relative to a −65 mV resting potential:
#       v = V − V_SHIFT = V + 65
#
# -------------------------------------------------------------
# [Rate formulas]
# -------------------------------------------------------------
#   α_n = 0.01·(10−v) / (e^{(10−v)/10} − 1)     (= 0.1 at v = 10)
#   β_n = 0.125·e^{−v/80}
#   α_m = 0.1·(25−v) / (e^{(25−v)/10} − 1)      (= 1.0 at v = 25)
#   β_m = 4·e^{−v/18}
#   α_h = 0.07·e^{−v/20}
#   β_h = 1 / (e^{(30−v)/10} + 1)
#
# α_n and α_m are 0/0 at v = 10 and v = 25. Within SINGULAR_EPS
# of those points the L'Hôpital limit is returned instead.
# =============================================================

import numpy as np

V_SHIFT = -65.0       # [mV] resting potential of the rate convention
SINGULAR_EPS = 1e-6   # [mV]


def _shift(V):
    return V - V_SHIFT


def alpha_n(V):
    """K⁺ activation (n gate) α(V) [1/ms]"""
    v = _shift(V)
    if abs(v - 10.0) < SINGULAR_EPS:
        return 0.1
    return 0.01 * (10.0 - v) / (np.exp((10.0 - v) / 10.0) - 1.0)


def beta_n(V):
    """K⁺ activation (n gate) β(V) [1/ms]"""
    v = _shift(V)
    return 0.125 * np.exp(-v / 80.0)


def alpha_m(V):
    """Na⁺ activation (m gate) α(V) [1/ms]"""
    v = _shift(V)
    if abs(v - 25.0) < SINGULAR_EPS:
        return 1.0
    return 0.1 * (25.0 - v) / (np.exp((25.0 - v) / 10.0) - 1.0)


def beta_m(V):
    """Na⁺ activation (m gate) β(V) [1/ms]"""
    v = _shift(V)
    return 4.0 * np.exp(-v / 18.0)


def alpha_h(V):
    """Na⁺ inactivation (h gate) α(V) [1/ms]"""
    v = _shift(V)
    return 0.07 * np.exp(-v / 20.0)


def beta_h(V):
    """Na⁺ inactivation (h gate) β(V) [1/ms]"""
    v = _shift(V)
    return 1.0 / (np.exp((30.0 - v) / 10.0) + 1.0)


def steady_state(alpha, beta, V):
    """
    Gate equilibrium x∞ = α / (α + β) at voltage V

    Parameters
    ----------
    alpha, beta : callable
        Rate functions of one gate (e.g. alpha_m, beta_m).
    V : float
        Membrane potential [mV].
    """
    a, b = alpha(V), beta(V)
    return a / (a + b)


GATES = {
    "m": (alpha_m, beta_m),
    "h": (alpha_h, beta_h),
    "n": (alpha_n, beta_n),
}
