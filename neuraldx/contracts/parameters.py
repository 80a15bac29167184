"""
HHParameters - biophysical parameter contract object

[Goal]
- Fixed record consumed by every integration step
- Changed only by wholesale replacement (preset switch, partial update)
"""

from dataclasses import dataclass, asdict, fields, replace
from enum import Enum
from typing import Dict, Any, Union
import json


class SimulationMode(str, Enum):
    """Named parameter presets"""
    BIOLOGICAL = "BIOLOGICAL"
    CYBERNETIC = "CYBERNETIC"

    @classmethod
    def parse(cls, name: Union["SimulationMode", str]) -> "SimulationMode":
        """Member or case-insensitive name → member (ValueError if unknown)"""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper())
        except ValueError:
            known = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown simulation mode {name!r} (known: {known})") from None


@dataclass(frozen=True)
class HHParameters:
    """
    Hodgkin-Huxley parameter set

    No structural constraint is enforced: negative conductances or Cm = 0
    are accepted and simply propagate through the arithmetic.

    Attributes:
        Cm: float      # membrane capacitance [µF/cm²]
        E_Na: float    # Na⁺ reversal potential [mV]
        E_K: float     # K⁺ reversal potential [mV]
        E_L: float     # leak reversal potential [mV]
        g_Na: float    # max Na⁺ conductance [mS/cm²]
        g_K: float     # max K⁺ conductance [mS/cm²]
        g_L: float     # leak conductance [mS/cm²]
        I_ext: float   # steady injected current [µA/cm²]
    """
    Cm: float = 1.0
    E_Na: float = 50.0
    E_K: float = -77.0
    E_L: float = -54.4
    g_Na: float = 120.0
    g_K: float = 36.0
    g_L: float = 0.3
    I_ext: float = 0.0

    @classmethod
    def field_names(cls):
        return tuple(f.name for f in fields(cls))

    def replace(self, **changes: float) -> 'HHParameters':
        """
        Copy with some fields replaced

        Raises
        ------
        KeyError
            A name in ``changes`` is not a parameter field.
        """
        unknown = sorted(set(changes) - set(self.field_names()))
        if unknown:
            raise KeyError(f"unknown parameter field(s): {', '.join(unknown)}")
        return replace(self, **{k: float(v) for k, v in changes.items()})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for external consumers"""
        return asdict(self)

    def to_json(self) -> str:
        """JSON serialization"""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HHParameters':
        """Missing fields fall back to the biological defaults"""
        return cls().replace(**data)
