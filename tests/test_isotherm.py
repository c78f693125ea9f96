# tests/test_isotherm.py
"""
Unit Tests for the Langmuir Isotherm
====================================

Affinity, loading bounds, monotonicity and working capacity at the
reference design point.
"""

import os
import sys

import numpy as np
import pytest
from numpy.testing import assert_allclose

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bioco2_tsa.isotherm import LangmuirIsotherm, working_capacity


@pytest.fixture
def isotherm():
    """Isotherm with the reference adsorbent parameters."""
    return LangmuirIsotherm(q_m=5.5, b0=6.0e-7, DeltaH_ads=38.0)


class TestLangmuirIsotherm:
    """Tests for the temperature-dependent Langmuir isotherm."""

    def test_affinity_formula(self, isotherm):
        """b(T) = b0·exp(ΔH·1000/(R·T))."""
        expected = 6.0e-7 * np.exp(38.0 * 1000 / (8.314 * 323.0))
        assert isotherm.affinity(323.0) == pytest.approx(expected, rel=1e-12)

    def test_affinity_decreases_with_temperature(self, isotherm):
        """Exothermic adsorption: affinity falls as T rises."""
        assert isotherm.affinity(473.0) < isotherm.affinity(323.0)

    def test_pressure_is_converted_to_kpa(self, isotherm):
        """Loading uses b·P with P in kPa."""
        b = isotherm.affinity(350.0)
        bP = b * 20.0
        assert isotherm(350.0, 20000.0) == pytest.approx(5.5 * bP / (1 + bP), rel=1e-12)

    def test_zero_pressure_gives_zero_loading(self, isotherm):
        assert isotherm(323.0, 0.0) == 0.0

    def test_loading_bounded_by_saturation(self, isotherm):
        """0 ≤ q < q_m over a wide grid of temperatures and pressures."""
        T = np.linspace(280, 600, 33)[:, None]
        P = np.logspace(0, 6, 40)[None, :]
        q = isotherm(T, P)
        assert q.shape == (33, 40)
        assert np.all(q >= 0)
        assert np.all(q <= 5.5)

    def test_loading_bounded_at_cryogenic_temperatures(self, isotherm):
        """Affinity overflows below ~10 K; loading saturates at q_m, never nan."""
        T = np.array([1.0, 2.0, 5.0, 10.0])[:, None]
        P = np.array([0.0, 1.0, 1000.0, 101325.0])[None, :]
        q = isotherm(T, P)
        assert not np.any(np.isnan(q))
        assert np.all(q >= 0)
        assert np.all(q <= 5.5)
        assert_allclose(q[:, 0], 0.0)
        assert isotherm(5.0, 1000.0) == pytest.approx(5.5)

    def test_loading_increases_with_pressure(self, isotherm):
        P = np.linspace(0, 100000, 101)
        assert np.all(np.diff(isotherm(323.0, P)) > 0)

    def test_loading_decreases_with_temperature(self, isotherm):
        T = np.linspace(300, 600, 61)
        assert np.all(np.diff(isotherm(T, 12159.0)) < 0)

    def test_zero_b0_gives_zero_loading(self):
        """b0 = 0 means no adsorption at any condition."""
        iso = LangmuirIsotherm(q_m=5.5, b0=0.0, DeltaH_ads=38.0)
        assert iso(323.0, 12159.0) == 0.0

    def test_scalar_returns_numpy_float(self, isotherm):
        assert isinstance(isotherm(323.0, 12159.0), np.float64)

    def test_isotherm_is_hashable_value(self):
        """Equal parameter sets compare and hash equal."""
        a = LangmuirIsotherm(q_m=5.5, b0=6.0e-7, DeltaH_ads=38.0)
        b = LangmuirIsotherm(q_m=5.5, b0=6.0e-7, DeltaH_ads=38.0)
        assert a == b
        assert hash(a) == hash(b)

    def test_custom_gas_constant(self):
        """R is a parameter of the isotherm, not a global."""
        iso = LangmuirIsotherm(q_m=5.5, b0=6.0e-7, DeltaH_ads=38.0, R=8.314462618)
        expected = 6.0e-7 * np.exp(38000.0 / (8.314462618 * 323.0))
        assert iso.affinity(323.0) == pytest.approx(expected, rel=1e-12)


class TestWorkingCapacity:
    """Tests for the adsorption/regeneration loading swing."""

    def test_reference_design_point(self, isotherm):
        """Loadings at 323 K / 12% and 473 K / 90% CO2 at 1 atm."""
        wc = working_capacity(isotherm, 323.0, 473.0, 0.12, 0.90, 101325.0, 0.85)
        assert wc.P_CO2_ads == pytest.approx(12159.0)
        assert wc.P_CO2_reg == pytest.approx(91192.5)
        assert wc.q_ads == pytest.approx(5.01, rel=0.01)
        assert wc.q_reg == pytest.approx(2.545, rel=0.01)
        assert wc.Delta_q == pytest.approx(2.095, rel=0.01)

    def test_moisture_derating(self, isotherm):
        wc = working_capacity(isotherm, 323.0, 473.0, 0.12, 0.90, 101325.0, 0.85)
        assert wc.Delta_q_raw == pytest.approx(wc.q_ads - wc.q_reg)
        assert wc.Delta_q == pytest.approx(wc.Delta_q_raw * 0.85)

    def test_no_temperature_swing_can_be_negative(self, isotherm):
        """Without a temperature swing the richer regeneration gas loads more."""
        wc = working_capacity(isotherm, 323.0, 323.0, 0.12, 0.90, 101325.0, 1.0)
        assert wc.Delta_q < 0

    def test_matches_direct_isotherm_calls(self, isotherm):
        wc = working_capacity(isotherm, 330.0, 450.0, 0.10, 0.80, 120000.0, 1.0)
        assert_allclose(wc.q_ads, isotherm(330.0, 0.10 * 120000.0))
        assert_allclose(wc.q_reg, isotherm(450.0, 0.80 * 120000.0))
