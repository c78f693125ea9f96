# tests/test_reporting.py
"""
Unit Tests for Result Tables and Design Advisories
==================================================
"""

import os
import sys

import numpy as np
import pandas as pd
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bioco2_tsa.data_model import ModelInputs
from bioco2_tsa.engine import compute
from bioco2_tsa.reporting import (
    cycle_timing_table,
    detect_design_issues,
    energy_breakdown,
    energy_closure_summary,
    isotherm_curve,
    outputs_to_series,
    thermal_demand_summary,
)


@pytest.fixture
def inputs():
    return ModelInputs.from_defaults()


@pytest.fixture
def outputs(inputs):
    return compute(inputs)


class TestSummaryTables:
    """Tests for the tabular views of an output record."""

    def test_outputs_to_series(self, outputs):
        s = outputs_to_series(outputs)
        assert isinstance(s, pd.Series)
        assert s["binding_constraint"] == "cooling"
        assert s["CO2_tpd"] == outputs.CO2_tpd
        assert s["thermal_ok"]
        assert s["thermal_T_max"] == pytest.approx(758.0)
        assert "isotherm" not in s.index
        assert "constraints" not in s.index

    def test_energy_breakdown(self, outputs):
        df = energy_breakdown(outputs)
        assert list(df["component"]) == ["Zeolite", "Steel", "Desorption", "Purge", "Losses"]
        assert df["energy_MJ"].sum() * 1e6 == pytest.approx(outputs.Q_total, rel=1e-9)
        assert df["share_pct"].sum() == pytest.approx(100.0)

    def test_cycle_timing_table(self, outputs):
        df = cycle_timing_table(outputs)
        assert list(df["phase"]) == ["Adsorption", "Regeneration", "Cooling"]
        assert df["binding"].sum() == 1
        assert df.loc[df["binding"], "phase"].item() == "Cooling"
        assert df.loc[df["binding"], "time_s"].item() == outputs.t_cycle_effective


class TestIsothermCurve:
    """Tests for the sampled isotherm curve."""

    def test_default_grid(self, outputs):
        df = isotherm_curve(outputs.isotherm, 323.0, 473.0)
        assert len(df) == 61
        assert df["P_kPa"].iloc[0] == 0.0
        assert df["P_kPa"].iloc[-1] == pytest.approx(30.0)
        assert df["q_ads_T"].iloc[0] == 0.0

    def test_colder_curve_loads_more(self, outputs):
        df = isotherm_curve(outputs.isotherm, 323.0, 473.0)
        assert np.all(df["q_ads_T"] >= df["q_reg_T"])
        assert np.all(np.diff(df["q_ads_T"]) > 0)

    def test_matches_engine_loading(self, outputs):
        df = isotherm_curve(outputs.isotherm, 323.0, 473.0, p_max_kpa=12.159, step_kpa=12.159)
        assert df["q_ads_T"].iloc[-1] == pytest.approx(outputs.q_ads)

    def test_non_positive_step_raises(self, outputs):
        with pytest.raises(ValueError, match="step_kpa"):
            isotherm_curve(outputs.isotherm, 323.0, 473.0, step_kpa=0.0)


class TestThermalAndClosure:
    """Tests for the thermal demand and energy closure summaries."""

    def test_reference_thermal_demand(self, outputs):
        summary = thermal_demand_summary(outputs)
        assert summary["Q_dot_avail_kW"] == outputs.Q_dot_avail
        assert summary["Q_thermal_per_cycle_MJ"] == pytest.approx(outputs.Q_total / 1e6)
        assert 0 < summary["utilization_pct"] < 75
        assert summary["status"] == "ok"

    def test_regeneration_limited_draws_all_heat(self):
        """When regeneration sets the cycle, demand equals the heat available."""
        out = compute(
            ModelInputs.from_defaults(m_dot_cool=5.0, use_Q_override=True, Q_dot_manual=50.0)
        )
        assert out.binding_constraint.value == "regeneration"
        summary = thermal_demand_summary(out)
        assert summary["utilization_pct"] == pytest.approx(100.0)
        assert summary["status"] == "over"

    def test_no_heat_available(self):
        out = compute(ModelInputs.from_defaults(use_Q_override=True, Q_dot_manual=0.0))
        assert thermal_demand_summary(out)["utilization_pct"] == 0.0

    def test_energy_closure_summary(self, outputs):
        summary = energy_closure_summary(outputs)
        assert summary["gap_fraction"] == pytest.approx(0.11, rel=0.05)
        assert summary["gap_MJ"] == pytest.approx(summary["Q_in_MJ"] - summary["Q_out_MJ"])
        assert summary["within_tolerance"] is False


class TestDetectDesignIssues:
    """Tests for rule-based design advisories."""

    def test_reference_cooling_bottleneck(self, inputs, outputs):
        issues = detect_design_issues(inputs, outputs)
        assert [i["type"] for i in issues] == ["Cooling"]
        assert issues[0]["severity"] == "MEDIUM"
        assert "0.50 kg/s" in issues[0]["recommendation"]
        assert set(issues[0]) == {"severity", "type", "message", "recommendation"}

    def test_no_working_capacity(self):
        inputs = ModelInputs.from_defaults(b0=0.0)
        issues = detect_design_issues(inputs, compute(inputs))
        assert [i["type"] for i in issues] == ["Capacity", "Cycle"]
        assert all(i["severity"] == "HIGH" for i in issues)

    def test_thermal_limit(self):
        inputs = ModelInputs.from_defaults(T_reg=800.0)
        issues = detect_design_issues(inputs, compute(inputs))
        thermal = [i for i in issues if i["type"] == "Thermal"]
        assert len(thermal) == 1
        assert "758" in thermal[0]["message"]

    def test_no_heat(self):
        inputs = ModelInputs.from_defaults(use_Q_override=True, Q_dot_manual=0.0)
        issues = detect_design_issues(inputs, compute(inputs))
        assert [i["type"] for i in issues] == ["Thermal", "Cycle"]
        assert "No heat available" in issues[0]["message"]

    def test_well_balanced_design_has_no_issues(self):
        inputs = ModelInputs.from_defaults(m_dot_cool=2.0)
        assert detect_design_issues(inputs, compute(inputs)) == []
