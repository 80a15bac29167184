# =============================================================
# simulation_loop.py — Frame-driven simulation loop
# =============================================================
# Purpose:
#   • Owns the single live NeuronState, the active HHParameters,
#     the stimulus pulse countdown and the history ring
#   • Advanced once per host frame by a fixed number of sub-steps
#
# Contract:
#   - Time unit: [ms]
#   - Single-threaded; one advance_frame() runs to completion
#   - Sub-step i consumes exactly the state produced by i−1
#   - History gets one snapshot per frame, after all sub-steps
#   - get_history() publishes an immutable tuple, never the ring
#
# Per frame:
#   for k in range(steps_per_frame):
#       I_eff = I_ext + (I_bonus if pulse > 0 else 0)
#       pulse ← pulse − dt            (only while pulse > 0)
#       state ← step(state, params{I_ext = I_eff}, dt)
#   history.append(state)
#
# Preset switching and reset are separate operations: select_preset()
# swaps parameters only; the running state continues until reset().
# =============================================================

import math
from collections import deque
from time import perf_counter

import pandas as pd

from ..config import ConfigError, get_config
from ..console import warn_once
from ..contracts import HHParameters, SimulationMode
from .integrator import initial_state, step


class PulseCountdown:
    r"""
    Transient stimulus: a fixed current bonus for a fixed duration

    While ``remaining_ms > 0`` every sub-step receives ``I_bonus`` on
    top of the baseline current and the countdown drops by dt. It never
    re-arms on its own; trigger() overwrites the remaining time.
    """

    def __init__(self, duration_ms=20.0, I_bonus=20.0):
        self.duration_ms = float(duration_ms)  # [ms]
        self.I_bonus = float(I_bonus)          # [µA/cm²]
        self.remaining_ms = 0.0                # [ms]

    @property
    def active(self) -> bool:
        return self.remaining_ms > 0.0

    def trigger(self) -> None:
        """(Re)arm to the full duration; no stacking."""
        self.remaining_ms = self.duration_ms

    def clear(self) -> None:
        self.remaining_ms = 0.0

    def bonus(self) -> float:
        """Current bonus the next sub-step would receive."""
        return self.I_bonus if self.active else 0.0

    def consume(self, dt) -> float:
        """Bonus for this sub-step, then count down by dt."""
        if not self.active:
            return 0.0
        self.remaining_ms -= dt
        return self.I_bonus


class HistoryBuffer:
    """
    Bounded, chronological ring of NeuronState snapshots

    Oldest entries are evicted first once ``capacity`` is reached.
    """

    def __init__(self, capacity=300):
        self.capacity = int(capacity)
        self._states = deque(maxlen=self.capacity)

    def __len__(self):
        return len(self._states)

    def append(self, state) -> None:
        self._states.append(state)

    def clear(self) -> None:
        self._states.clear()

    def snapshot(self) -> tuple:
        """Fully built immutable copy, most recent last."""
        return tuple(self._states)

    def latest(self):
        return self._states[-1] if self._states else None

    def to_dataframe(self) -> pd.DataFrame:
        """
        Snapshots as a table (oscilloscope / gating plot series)

        Returns
        -------
        pd.DataFrame
            Columns t [ms], V [mV], m, h, n.
        """
        return pd.DataFrame(
            [(s.t, s.V, s.m, s.h, s.n) for s in self._states],
            columns=["t", "V", "m", "h", "n"],
        )


class SimulationLoop:
    r"""
    Interactive Hodgkin–Huxley simulation driven by host frames

    Host API:
    - read : get_current_state(), get_parameters(), get_history()
    - write: inject_pulse(), update_parameters(), reset(), select_preset()
    - tick : advance_frame()  (once per rendered frame)

    Parameters
    ----------
    config : dict, optional
        Full configuration (see neuraldx.config.CONFIG). Defaults to
        get_config().
    """

    def __init__(self, config=None):
        cfg = config if config is not None else get_config()
        sim = cfg["SIM"]

        self.dt = float(sim["dt_ms"])                        # [ms]
        self.steps_per_frame = int(sim["steps_per_frame"])
        self.V_rest = float(sim["V_rest"])                   # [mV]
        self.clamp_gates = bool(sim.get("clamp_gates", False))
        if self.steps_per_frame < 1:
            raise ConfigError("SIM.steps_per_frame must be >= 1")
        if int(sim["history_len"]) < 1:
            raise ConfigError("SIM.history_len must be >= 1")

        self._presets = {
            SimulationMode.parse(name): HHParameters.from_dict(values)
            for name, values in cfg["PRESETS"].items()
        }
        self._mode = SimulationMode.parse(sim.get("mode", SimulationMode.BIOLOGICAL))
        if self._mode not in self._presets:
            raise ConfigError(f"no preset block for mode {self._mode.value}")

        self.params = self._presets[self._mode]
        self.pulse = PulseCountdown(**cfg["PULSE"])
        self.history = HistoryBuffer(sim["history_len"])

        self.state = initial_state(self.V_rest)
        self.frame_count = 0
        self._t_start = perf_counter()
        self._warned = {}

    # =========================================================
    # Frame tick
    # =========================================================
    def advance_frame(self):
        """
        Run one frame worth of sub-steps and publish one snapshot

        Returns
        -------
        NeuronState
            The state after the last sub-step.
        """
        state = self.state
        for _ in range(self.steps_per_frame):
            I_eff = self.params.I_ext + self.pulse.consume(self.dt)
            state = step(
                state,
                self.params.replace(I_ext=I_eff),
                self.dt,
                clamp_gates=self.clamp_gates,
            )
        self.state = state
        self.history.append(state)
        self.frame_count += 1

        if not state.is_finite():
            bad = [k for k, v in state.to_dict().items() if not math.isfinite(v)]
            warn_once(
                self._warned, "non_finite",
                f"state became non-finite at t={state.t:.2f} ms ({', '.join(bad)}); "
                f"check Cm/conductances",
            )
        return state

    def run_frames(self, n_frames):
        """Advance n_frames frames; returns the final state."""
        for _ in range(int(n_frames)):
            self.advance_frame()
        return self.state

    # =========================================================
    # Host commands
    # =========================================================
    def inject_pulse(self) -> None:
        self.pulse.trigger()

    def update_parameters(self, partial=None, **fields) -> HHParameters:
        """
        Merge a partial field set into the active parameters

        Takes effect on the next sub-step. Values are not validated;
        an unknown field name raises KeyError.
        """
        changes = dict(partial or {})
        changes.update(fields)
        self.params = self.params.replace(**changes)
        return self.params

    def select_preset(self, name) -> HHParameters:
        """
        Replace the active parameters with a preset

        Does not reset the running state; call reset() for that.
        """
        mode = SimulationMode.parse(name)
        if mode not in self._presets:
            raise ValueError(f"preset {mode.value} is not configured")
        self._mode = mode
        self.params = self._presets[mode]
        return self.params

    def reset(self) -> None:
        """Back to rest: selected preset, steady state, no pulse, empty history."""
        self.state = initial_state(self.V_rest)
        self.params = self._presets[self._mode]
        self.pulse.clear()
        self.history.clear()
        self.frame_count = 0
        self._t_start = perf_counter()
        self._warned.clear()

    # =========================================================
    # Host reads
    # =========================================================
    def get_current_state(self):
        return self.state

    def get_parameters(self) -> HHParameters:
        return self.params

    def get_history(self) -> tuple:
        return self.history.snapshot()

    @property
    def mode(self) -> SimulationMode:
        return self._mode

    @property
    def presets(self):
        return dict(self._presets)

    @property
    def effective_current(self) -> float:
        """Injected current the next sub-step would use [µA/cm²]."""
        return self.params.I_ext + self.pulse.bonus()

    @property
    def pulse_remaining_ms(self) -> float:
        return self.pulse.remaining_ms

    @property
    def uptime_ms(self) -> float:
        """Wall-clock time since start or last reset [ms]."""
        return (perf_counter() - self._t_start) * 1000.0
