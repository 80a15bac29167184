# =============================================================
# run.py — Headless NeuralDX driver
# =============================================================
# Purpose:
#   • Stand-in for the renderer's frame callback: advance the
#     SimulationLoop frame by frame, inject scheduled pulses
#   • Console table (t, V, m, h, n, I_eff, phase), spike timeline
#   • Optional oscilloscope + gating plot image (matplotlib)
#
# Usage:
#   $ neuraldx-run --frames 200 --pulse-at 5 --plot logs/trace.png
#   $ neuraldx-run --preset cybernetic --set I_ext=8 --frames 400
#
# Output:
#   - run_pipeline() returns the per-frame trace as a DataFrame
#   - traces are not written to disk; --plot writes only the figure
# =============================================================

import argparse
import os
import sys
from time import perf_counter

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
from colorama import Fore  # noqa: E402

from . import __version__  # noqa: E402
from . import console  # noqa: E402
from .components.readout import channel_flow, detect_spikes, soma_phase  # noqa: E402
from .components.simulation_loop import SimulationLoop  # noqa: E402
from .config import get_config, load_config, save_config  # noqa: E402

TRACE_COLUMNS = ["frame", "t", "V", "m", "h", "n", "I_eff", "pulse_ms", "phase", "Na_flow", "K_flow"]

_PHASE_COLOR = {
    "spiking": Fore.RED,
    "threshold": Fore.MAGENTA,
    "resting": Fore.CYAN,
}


# =============================================================
# Pipeline
# =============================================================
def run_pipeline(frames=None, pulse_at_ms=None, preset=None, overrides=None,
                 config=None, print_every=None, plot_path=None, quiet=False):
    r"""
    Drive a SimulationLoop for a number of frames

    Parameters
    ----------
    frames : int, optional
        Frames to advance (default CONFIG["RUN"]["frames"]).
    pulse_at_ms : list of float, optional
        Simulated times [ms] at which inject_pulse() is called, checked
        before each frame (default CONFIG["RUN"]["pulse_at_ms"]).
    preset : str, optional
        Preset to select before the run (followed by reset()).
    overrides : dict, optional
        Parameter fields merged with update_parameters().
    config : dict, optional
        Full configuration (default get_config()).
    print_every : int, optional
        Table row every N frames; 0 disables the table.
    plot_path : str, optional
        Where to save the oscilloscope / gating figure.
    quiet : bool
        No console output at all.

    Returns
    -------
    pd.DataFrame
        One row per frame, columns TRACE_COLUMNS.
    """
    cfg = config if config is not None else get_config()
    R = cfg["RUN"]
    frames = int(R["frames"] if frames is None else frames)
    print_every = int(R["print_every"] if print_every is None else print_every)
    schedule = sorted(float(t) for t in (R["pulse_at_ms"] if pulse_at_ms is None else pulse_at_ms))
    console.set_color(R.get("color", True))

    loop = SimulationLoop(cfg)
    if preset is not None:
        loop.select_preset(preset)
        loop.reset()
    if overrides:
        loop.update_parameters(overrides)

    say = (lambda *_: None) if quiet else console.emit
    if not quiet:
        console.rule()
        console.info(
            f"NeuralDX {__version__} | mode={loop.mode.value} | dt={loop.dt} ms | "
            f"{loop.steps_per_frame} steps/frame | {frames} frames"
        )
        console.info("params: " + ", ".join(f"{k}={v:g}" for k, v in loop.get_parameters().to_dict().items()))
        console.rule()
        if print_every > 0:
            say(f"{'t(ms)':>8} | {'V(mV)':>9} | {'m':>6} | {'h':>6} | {'n':>6} | {'I_eff':>6} | phase")
            console.rule(char="-")

    rows = []
    pending = list(schedule)
    t0 = perf_counter()
    for frame in range(frames):
        while pending and loop.state.t >= pending[0] - 1e-9:
            pending.pop(0)
            loop.inject_pulse()
            say(console.paint(f"[{loop.state.t:8.2f} ms] pulse injected", Fore.YELLOW))

        I_eff = loop.effective_current
        s = loop.advance_frame()
        phase = soma_phase(s.V, cfg["READOUT"])
        flow = channel_flow(s, loop.get_parameters(), cfg["READOUT"])
        rows.append((frame, s.t, s.V, s.m, s.h, s.n, I_eff, loop.pulse_remaining_ms,
                     phase, flow["Na"], flow["K"]))

        if print_every > 0 and frame % print_every == 0:
            say(console.paint(
                f"{s.t:8.2f} | {s.V:9.3f} | {s.m:6.3f} | {s.h:6.3f} | {s.n:6.3f} | {I_eff:6.1f} | {phase}",
                _PHASE_COLOR[phase],
            ))
    t1 = perf_counter()

    df = pd.DataFrame(rows, columns=TRACE_COLUMNS)

    if not quiet:
        _print_summary(df, cfg, t1 - t0)
    if plot_path:
        plot_trace(df, plot_path, cfg)
        if not quiet:
            console.info(f"Visualization saved: {plot_path}")
    return df


def _print_summary(df, cfg, elapsed):
    console.rule()
    spikes = detect_spikes(df["t"], df["V"], cfg["READOUT"]["spike_thresh"])
    if spikes:
        console.emit("Spikes Timeline")
        console.rule(char="-")
        for t_spk in spikes:
            console.emit(console.paint(f"[{t_spk:8.2f} ms] Spike", Fore.RED))
        console.rule(char="-")
    if df.empty:
        console.warn("no frames advanced")
        return
    console.emit(f"Spikes                : {len(spikes)}")
    console.emit(f"V peak / trough (mV)  : {df['V'].max():.2f} / {df['V'].min():.2f}")
    console.emit(f"Simulated time (ms)   : {df['t'].iloc[-1]:.2f}")
    console.emit(f"Done. Elapsed {elapsed:.3f} sec")
    console.rule()


# =============================================================
# Oscilloscope + gating plot
# =============================================================
def plot_trace(df, path, cfg=None):
    """
    Two-panel figure: membrane potential and gating variables

    The V panel spans −90…60 mV with a dashed guide at the
    threshold voltage; the gate panel spans [0,1].
    """
    r = (cfg or get_config())["READOUT"]
    folder = os.path.dirname(os.path.abspath(path))
    os.makedirs(folder, exist_ok=True)

    fig, (ax_v, ax_g) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    ax_v.plot(df["t"], df["V"], lw=1.4, color="#00f3ff")
    ax_v.axhline(r["threshold_V"], ls="--", lw=1.0, color="#565869")
    ax_v.set_ylim(-90, 60)
    ax_v.set_ylabel("V (mV)")
    ax_v.set_title("Membrane Potential")
    ax_v.grid(True, alpha=0.3)

    ax_g.plot(df["t"], df["m"], lw=1.2, color="#ff2a2a", label="m (Na act)")
    ax_g.plot(df["t"], df["h"], lw=1.2, color="#00ff9d", label="h (Na inact)")
    ax_g.plot(df["t"], df["n"], lw=1.2, color="#9d00ff", label="n (K act)")
    ax_g.set_ylim(0, 1)
    ax_g.set_xlabel("Time (ms)")
    ax_g.set_ylabel("Gate")
    ax_g.set_title("Gating Variables")
    ax_g.legend(loc="upper right")
    ax_g.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


# =============================================================
# CLI
# =============================================================
def _parse_override(text):
    key, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {text!r}")
    try:
        return key.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{key}: not a number: {value!r}") from None


def build_parser():
    p = argparse.ArgumentParser(prog="neuraldx-run", description="Headless Hodgkin–Huxley simulation run")
    p.add_argument("--config", default=None, help="YAML overlay merged over the defaults")
    p.add_argument("--dump-config", default=None, help="write the effective config as YAML")
    p.add_argument("--frames", type=int, default=None)
    p.add_argument("--pulse-at", type=float, action="append", default=None, metavar="MS",
                   help="inject a pulse at this simulated time (repeatable)")
    p.add_argument("--preset", default=None, help="biological | cybernetic")
    p.add_argument("--set", dest="overrides", type=_parse_override, action="append", default=[],
                   metavar="FIELD=VALUE", help="parameter override, e.g. I_ext=8")
    p.add_argument("--print-every", type=int, default=None)
    p.add_argument("--plot", default=None, metavar="PATH", help="save oscilloscope figure")
    p.add_argument("--no-color", action="store_true")
    p.add_argument("--quiet", action="store_true")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)

    cfg = load_config(args.config) if args.config else get_config()
    if args.no_color:
        cfg["RUN"]["color"] = False
    if args.dump_config:
        save_config(cfg, args.dump_config)

    run_pipeline(
        frames=args.frames,
        pulse_at_ms=args.pulse_at,
        preset=args.preset,
        overrides=dict(args.overrides),
        config=cfg,
        print_every=args.print_every,
        plot_path=args.plot,
        quiet=args.quiet,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
