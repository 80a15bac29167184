"""Tests for the NeuronState / HHParameters contract objects."""

import dataclasses
import json
import math

import pytest

from neuraldx.contracts import HHParameters, NeuronState, SimulationMode


class TestNeuronState:

    def test_frozen(self):
        s = NeuronState(V=-65.0, m=0.05, h=0.6, n=0.32)
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.V = 0.0

    def test_dict_round_trip(self):
        s = NeuronState(V=-60.5, m=0.1, h=0.5, n=0.4, t=2.5)
        assert NeuronState.from_dict(s.to_dict()) == s
        assert json.loads(s.to_json())["V"] == -60.5

    def test_from_dict_defaults_time(self):
        assert NeuronState.from_dict({"V": -65, "m": 0.1, "h": 0.6, "n": 0.3}).t == 0.0

    def test_diff(self):
        a = NeuronState(V=-60.0, m=0.2, h=0.5, n=0.4, t=1.0)
        b = NeuronState(V=-65.0, m=0.1, h=0.6, n=0.3, t=0.5)
        d = a.diff(b)
        assert d["dV"] == pytest.approx(5.0)
        assert d["dh"] == pytest.approx(-0.1)
        assert d["dt"] == pytest.approx(0.5)

    def test_finiteness(self):
        assert NeuronState(V=-65.0, m=0.1, h=0.6, n=0.3).is_finite()
        assert not NeuronState(V=math.inf, m=0.1, h=0.6, n=0.3).is_finite()
        assert not NeuronState(V=-65.0, m=math.nan, h=0.6, n=0.3).is_finite()

    def test_gate_range(self):
        assert NeuronState(V=0.0, m=1.0, h=0.0, n=0.5).gates_in_range()
        assert not NeuronState(V=0.0, m=1.01, h=0.0, n=0.5).gates_in_range()


class TestHHParameters:

    def test_biological_defaults(self):
        p = HHParameters()
        assert (p.Cm, p.E_Na, p.E_K, p.E_L) == (1.0, 50.0, -77.0, -54.4)
        assert (p.g_Na, p.g_K, p.g_L, p.I_ext) == (120.0, 36.0, 0.3, 0.0)

    def test_replace_returns_new_object(self):
        p = HHParameters()
        q = p.replace(I_ext=7)
        assert q.I_ext == 7.0
        assert p.I_ext == 0.0

    def test_replace_unknown_field(self):
        with pytest.raises(KeyError, match="g_Ca"):
            HHParameters().replace(g_Ca=1.0)

    def test_from_dict_partial(self):
        p = HHParameters.from_dict({"g_Na": 220.0})
        assert p.g_Na == 220.0
        assert p.g_K == 36.0

    def test_field_names(self):
        assert HHParameters.field_names() == ("Cm", "E_Na", "E_K", "E_L", "g_Na", "g_K", "g_L", "I_ext")

    def test_json(self):
        assert json.loads(HHParameters().to_json())["g_L"] == 0.3


class TestSimulationMode:

    @pytest.mark.parametrize("name", ["BIOLOGICAL", "biological", "Biological", SimulationMode.BIOLOGICAL])
    def test_parse(self, name):
        assert SimulationMode.parse(name) is SimulationMode.BIOLOGICAL

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="unknown simulation mode"):
            SimulationMode.parse("turbo")
