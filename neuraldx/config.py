# =============================================================
# config.py — NeuralDX Global Configuration
# =============================================================
#
# Purpose
# -------------------------------------------------------------
#  • Defines the **Single Source of Truth (SSOT)** parameter set
#    for the interactive Hodgkin–Huxley simulator.
#  • Each section corresponds to one layer of the engine:
#        Presets → Integrator → Pulse → Readout → Headless run
#  • Contains *no execution logic* beyond copy / YAML overlay.
#
# Verification
# -------------------------------------------------------------
#  • Explicit Euler with dt = 0.05 ms reproduces a single action
#    potential for a 20 ms, +20 µA/cm² pulse from rest.
#  • No stability check is made: dt is trusted as given.
# -------------------------------------------------------------

from copy import deepcopy

import yaml

CONFIG = {
    # =========================================================
    # [P] Parameter Presets — Hodgkin–Huxley Membrane
    # =========================================================
    # Hodgkin–Huxley Formalism
    #   C_m dV/dt = I_ext − g_Na m³h(V−E_Na)
    #                     − g_K n⁴(V−E_K)
    #                     − g_L(V−E_L)
    #
    # Meaning
    #   • BIOLOGICAL : classic squid-axon values (rest ≈ −65 mV)
    #   • CYBERNETIC : high-excitability set (strong Na⁺, weak K⁺/leak)
    #
    # Units: V[mV], t[ms], g[mS/cm²], I[µA/cm²], Cm[µF/cm²]
    # ---------------------------------------------------------
    "PRESETS": {
        "BIOLOGICAL": {
            "Cm": 1.0,
            "E_Na": 50.0, "E_K": -77.0, "E_L": -54.4,
            "g_Na": 120.0, "g_K": 36.0, "g_L": 0.3,
            "I_ext": 0.0,
        },
        "CYBERNETIC": {
            "Cm": 1.0,
            "E_Na": 50.0, "E_K": -77.0, "E_L": -54.4,
            "g_Na": 220.0, "g_K": 26.0, "g_L": 0.08,
            "I_ext": 0.0,
        },
    },

    # =========================================================
    # [S] Integrator / Frame Loop
    # =========================================================
    #   x(t+dt) = x(t) + dt · f(x(t))        (forward Euler)
    #
    # • dt_ms          : integration step [ms]
    # • steps_per_frame: sub-steps per rendered frame
    # • history_len    : snapshots kept for the oscilloscope
    # • V_rest         : voltage of the steady-state start [mV]
    # • clamp_gates    : clip m,h,n to [0,1] after each step
    # • mode           : preset selected at start
    # ---------------------------------------------------------
    "SIM": {
        "dt_ms": 0.05,
        "steps_per_frame": 5,
        "history_len": 300,
        "V_rest": -65.0,
        "clamp_gates": False,
        "mode": "BIOLOGICAL",
    },

    # =========================================================
    # [I] Stimulus Pulse
    # =========================================================
    #   I_eff = I_ext + I_bonus   while remaining > 0
    #   remaining ← remaining − dt  (each sub-step)
    # ---------------------------------------------------------
    "PULSE": {
        "duration_ms": 20.0,
        "I_bonus": 20.0,
    },

    # =========================================================
    # [R] Visualization Readout
    # =========================================================
    #   Na flow = m³h · (g_Na / g_Na_ref) · flow_gain
    #   K  flow = n⁴  · (g_K  / g_K_ref)  · flow_gain
    #
    # Phase: V > spike_thresh → spiking,
    #        V > threshold_V  → threshold, else resting
    # ---------------------------------------------------------
    "READOUT": {
        "spike_thresh": 0.0,
        "threshold_V": -55.0,
        "g_Na_ref": 120.0,
        "g_K_ref": 36.0,
        "flow_gain": 12.0,
    },

    # =========================================================
    # [Headless Run]
    # =========================================================
    # • frames      : frames to advance
    # • print_every : table row every N frames
    # • pulse_at_ms : simulated times at which a pulse is injected
    # ---------------------------------------------------------
    "RUN": {
        "frames": 200,
        "print_every": 10,
        "pulse_at_ms": [5.0],
        "color": True,
    },
}


class ConfigError(ValueError):
    """Malformed configuration (unknown section/key, bad loop sizes)."""


# =============================================================
# Helper Functions
# =============================================================

def get_config():
    """Return a deep-copied CONFIG to avoid in-place modification."""
    return deepcopy(CONFIG)


def merge_config(overlay, base=None):
    """
    Deep-merge ``overlay`` over ``base`` (default: get_config()).

    Sections are merged key by key; a preset block is merged field
    by field.
    """
    cfg = deepcopy(base) if base is not None else get_config()
    for section, values in (overlay or {}).items():
        if section not in cfg:
            raise ConfigError(f"unknown config section: {section!r}")
        if not isinstance(values, dict):
            raise ConfigError(f"section {section!r} must be a mapping")
        for key, value in values.items():
            if key not in cfg[section]:
                raise ConfigError(f"unknown key {key!r} in section {section!r}")
            if section == "PRESETS":
                if not isinstance(value, dict):
                    raise ConfigError(f"preset {key!r} must be a mapping")
                unknown = set(value) - set(cfg[section][key])
                if unknown:
                    raise ConfigError(f"unknown field(s) {sorted(unknown)} in preset {key!r}")
                cfg[section][key].update(value)
            else:
                cfg[section][key] = value
    return cfg


def load_config(path):
    """Read a YAML overlay and merge it over the defaults."""
    with open(path, "r", encoding="utf-8") as f:
        overlay = yaml.safe_load(f)
    if overlay is None:
        return get_config()
    if not isinstance(overlay, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return merge_config(overlay)


def save_config(cfg, path):
    """Write a config dict as YAML."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(cfg, f, default_flow_style=False, allow_unicode=True)
