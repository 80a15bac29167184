"""
NeuronState - membrane state contract object

[Goal]
- Read the neuron state without knowing the solver
- One immutable snapshot per integration step (replaced, never patched)
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any
import json
import math


@dataclass(frozen=True)
class NeuronState:
    """
    Hodgkin-Huxley state vector at one simulated instant

    Attributes:
        V: float    # membrane potential [mV]
        m: float    # Na⁺ activation [0,1] (not clamped)
        h: float    # Na⁺ inactivation [0,1] (not clamped)
        n: float    # K⁺ activation [0,1] (not clamped)
        t: float    # simulation time [ms]
    """
    V: float
    m: float
    h: float
    n: float
    t: float = 0.0

    def is_finite(self) -> bool:
        """False once NaN/Inf has entered the state"""
        return all(math.isfinite(x) for x in (self.V, self.m, self.h, self.n, self.t))

    def gates_in_range(self) -> bool:
        """All gating variables inside [0,1]"""
        return all(0.0 <= x <= 1.0 for x in (self.m, self.h, self.n))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for external consumers"""
        return asdict(self)

    def diff(self, other: 'NeuronState') -> Dict[str, float]:
        """Per-field difference (self − other)"""
        return {
            "dV": self.V - other.V,
            "dm": self.m - other.m,
            "dh": self.h - other.h,
            "dn": self.n - other.n,
            "dt": self.t - other.t,
        }

    def to_json(self) -> str:
        """JSON serialization"""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NeuronState':
        """Build from a dictionary (t defaults to 0)"""
        return cls(
            V=float(data["V"]),
            m=float(data["m"]),
            h=float(data["h"]),
            n=float(data["n"]),
            t=float(data.get("t", 0.0)),
        )
