# =============================================================
# console.py — Console output helpers (colorama)
# =============================================================
# Role:
# - Tagged, colorized console lines for the headless driver
#   and the simulation loop's one-shot warnings
# - Colour can be switched off; calculations are never affected
# =============================================================

import sys

from colorama import Fore, Style

_COLOR = {"enabled": True}


def set_color(enabled: bool) -> None:
    _COLOR["enabled"] = bool(enabled)


def paint(text, color) -> str:
    """Wrap text in a colorama colour (no-op when colour is off)."""
    if not _COLOR["enabled"]:
        return str(text)
    return f"{color}{text}{Style.RESET_ALL}"


def emit(line="") -> None:
    print(line)
    sys.stdout.flush()


def info(msg) -> None:
    emit(paint(f"[info] {msg}", Fore.CYAN))


def warn(msg) -> None:
    emit(paint(f"[warn] {msg}", Fore.YELLOW))


def warn_once(flag_dict, key, msg) -> None:
    """Print a warning only the first time ``key`` is seen."""
    if key not in flag_dict:
        warn(msg)
        flag_dict[key] = True


def rule(width=75, char="=") -> None:
    emit(char * width)
