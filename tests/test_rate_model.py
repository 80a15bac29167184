"""Tests for the Hodgkin-Huxley rate functions."""

import math

import numpy as np
import pytest

from neuraldx.components import rate_model as rm


ALL_RATES = [rm.alpha_n, rm.beta_n, rm.alpha_m, rm.beta_m, rm.alpha_h, rm.beta_h]


class TestSingularities:
    """alpha_n and alpha_m are 0/0 at v = 10 and v = 25."""

    def test_alpha_n_limit_at_minus_55(self):
        assert rm.alpha_n(-55.0) == 0.1

    def test_alpha_m_limit_at_minus_40(self):
        assert rm.alpha_m(-40.0) == 1.0

    def test_limit_used_inside_epsilon(self):
        assert rm.alpha_n(-55.0 + 5e-7) == 0.1
        assert rm.alpha_m(-40.0 - 5e-7) == 1.0

    @pytest.mark.parametrize("offset", [1e-3, -1e-3])
    def test_limit_is_continuous(self, offset):
        """Just outside the epsilon the formula agrees with the limit."""
        assert rm.alpha_n(-55.0 + offset) == pytest.approx(0.1, abs=1e-4)
        assert rm.alpha_m(-40.0 + offset) == pytest.approx(1.0, abs=1e-3)


class TestRestingValues:
    """Rates at V = -65 mV (v = 0) have closed forms."""

    def test_closed_forms(self):
        V = -65.0
        assert rm.alpha_n(V) == pytest.approx(0.1 / (math.e - 1.0))
        assert rm.beta_n(V) == pytest.approx(0.125)
        assert rm.alpha_m(V) == pytest.approx(2.5 / (math.exp(2.5) - 1.0))
        assert rm.beta_m(V) == pytest.approx(4.0)
        assert rm.alpha_h(V) == pytest.approx(0.07)
        assert rm.beta_h(V) == pytest.approx(1.0 / (math.exp(3.0) + 1.0))

    def test_steady_state_m(self):
        a, b = rm.alpha_m(-65.0), rm.beta_m(-65.0)
        assert rm.steady_state(rm.alpha_m, rm.beta_m, -65.0) == pytest.approx(a / (a + b))


class TestTotality:
    """Rates never raise and stay positive over the physiological range."""

    @pytest.mark.parametrize("rate", ALL_RATES)
    def test_positive_over_range(self, rate):
        for V in np.linspace(-120.0, 80.0, 401):
            value = rate(float(V))
            assert value > 0.0
            assert math.isfinite(value)

    @pytest.mark.parametrize("rate", ALL_RATES)
    def test_nan_propagates(self, rate):
        with np.errstate(all="ignore"):
            assert math.isnan(rate(float("nan")))

    @pytest.mark.parametrize("rate", ALL_RATES)
    def test_extreme_voltage_does_not_raise(self, rate):
        with np.errstate(all="ignore"):
            rate(1e6)
            rate(-1e6)


def test_gate_table_pairs():
    assert rm.GATES["m"] == (rm.alpha_m, rm.beta_m)
    assert rm.GATES["h"] == (rm.alpha_h, rm.beta_h)
    assert rm.GATES["n"] == (rm.alpha_n, rm.beta_n)
