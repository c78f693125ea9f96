# reporting.py
"""
BioCO2 TSA - Result Tables and Design Advisories
================================================

Read-only views of a ``ModelOutputs`` record:
- Flat summary series of every scalar output
- Regeneration energy breakdown and cycle-timing tables
- Isotherm working-capacity curve sampled from the returned isotherm
- BioCHP thermal demand and energy-closure summaries
- Rule-based advisories for degenerate or constrained designs

Nothing here recomputes the engine; each function only reshapes numbers
already present on the output record.
"""

import logging
from typing import Any

import numpy as np
import pandas as pd

from .config import (
    COOLING_BOTTLENECK_RATIO,
    ENERGY_CLOSURE_TOLERANCE,
    ENERGY_SINKS,
    ISOTHERM_CURVE_P_MAX_KPA,
    ISOTHERM_CURVE_STEP_KPA,
    MAX_SUGGESTED_COOLING_FLOW,
    THERMAL_UTILIZATION_BANDS,
)
from .data_model import BindingConstraint, ModelInputs, ModelOutputs
from .isotherm import LangmuirIsotherm

logger = logging.getLogger(__name__)

__all__ = [
    "outputs_to_series",
    "energy_breakdown",
    "cycle_timing_table",
    "isotherm_curve",
    "thermal_demand_summary",
    "energy_closure_summary",
    "detect_design_issues",
]


# =============================================================================
# SUMMARY TABLES
# =============================================================================


def outputs_to_series(outputs: ModelOutputs) -> pd.Series:
    """
    Every scalar output as a flat Series indexed by field name.

    Constraint records are flattened to ``thermal_ok``, ``thermal_T_max``,
    ``thermal_margin``, ``cooling_ok`` and ``cooling_t_available``; the
    binding constraint is stored by value.
    """
    values: dict[str, Any] = outputs.scalar_fields()
    values["binding_constraint"] = outputs.binding_constraint.value

    thermal = outputs.constraints.thermal
    cooling = outputs.constraints.cooling
    values.update(
        {
            "thermal_ok": thermal.ok,
            "thermal_T_max": thermal.T_max,
            "thermal_margin": thermal.margin,
            "cooling_ok": cooling.ok,
            "cooling_t_available": cooling.t_available,
        }
    )
    return pd.Series(values, dtype=object, name="value")


def energy_breakdown(outputs: ModelOutputs) -> pd.DataFrame:
    """
    Regeneration heat per bed per cycle split by sink.

    Returns
    -------
    pd.DataFrame
        Columns ``component``, ``energy_MJ`` and ``share_pct`` (share of
        Q_total; nan when Q_total is zero).
    """
    energies = np.array([getattr(outputs, field) for _, field in ENERGY_SINKS], dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        share = energies / outputs.Q_total * 100

    return pd.DataFrame(
        {
            "component": [label for label, _ in ENERGY_SINKS],
            "energy_MJ": energies / 1e6,
            "share_pct": share,
        }
    )


def cycle_timing_table(outputs: ModelOutputs) -> pd.DataFrame:
    """Phase durations (s) with the binding phase flagged."""
    phases = [
        (BindingConstraint.ADSORPTION, outputs.t_ads),
        (BindingConstraint.REGENERATION, outputs.t_reg_required),
        (BindingConstraint.COOLING, outputs.t_cool_required),
    ]
    return pd.DataFrame(
        {
            "phase": [phase.value.capitalize() for phase, _ in phases],
            "time_s": [t for _, t in phases],
            "binding": [phase == outputs.binding_constraint for phase, _ in phases],
        }
    )


def isotherm_curve(
    isotherm: LangmuirIsotherm,
    T_ads: float,
    T_reg: float,
    p_max_kpa: float = ISOTHERM_CURVE_P_MAX_KPA,
    step_kpa: float = ISOTHERM_CURVE_STEP_KPA,
) -> pd.DataFrame:
    """
    Loading against CO2 partial pressure at the adsorption and regeneration
    temperatures.

    Parameters
    ----------
    isotherm : LangmuirIsotherm
        Usually ``outputs.isotherm``
    T_ads, T_reg : float
        Temperatures (K) of the two curves
    p_max_kpa : float
        Upper end of the pressure axis (kPa); 0 is always the first point
    step_kpa : float
        Pressure spacing (kPa)

    Returns
    -------
    pd.DataFrame
        Columns ``P_kPa``, ``q_ads_T``, ``q_reg_T`` (mol/kg)
    """
    if step_kpa <= 0:
        raise ValueError(f"step_kpa must be positive (got {step_kpa})")

    n_points = int(np.floor(p_max_kpa / step_kpa + 1e-9)) + 1
    P_kpa = np.arange(n_points) * step_kpa
    P_pa = P_kpa * 1000

    return pd.DataFrame(
        {
            "P_kPa": P_kpa,
            "q_ads_T": isotherm(T_ads, P_pa),
            "q_reg_T": isotherm(T_reg, P_pa),
        }
    )


# =============================================================================
# THERMAL DEMAND & CLOSURE
# =============================================================================


def thermal_demand_summary(outputs: ModelOutputs) -> dict[str, Any]:
    """
    Heat the TSA skid draws from the BioCHP exhaust.

    Utilization is the hourly-average thermal demand as a percentage of
    Q_dot_avail (0 when nothing is available). Status bands: ``"ok"`` up to
    75 %, ``"tight"`` up to 95 %, ``"over"`` beyond.
    """
    available = outputs.Q_dot_avail
    utilization = outputs.thermal_kWh_per_hr / available * 100 if available > 0 else 0.0

    if utilization <= THERMAL_UTILIZATION_BANDS["ok"]:
        status = "ok"
    elif utilization <= THERMAL_UTILIZATION_BANDS["tight"]:
        status = "tight"
    else:
        status = "over"

    return {
        "Q_thermal_per_cycle_MJ": outputs.Q_total / 1e6,
        "Q_thermal_hourly_kW": outputs.thermal_kWh_per_hr,
        "Q_dot_demand_kW": outputs.Q_dot_demand,
        "Q_dot_avail_kW": available,
        "utilization_pct": utilization,
        "status": status,
    }


def energy_closure_summary(outputs: ModelOutputs) -> dict[str, Any]:
    """Heat in vs. heat accounted for; explanatory, not a pass/fail gate."""
    return {
        "Q_in_MJ": outputs.Q_in / 1e6,
        "Q_out_MJ": outputs.Q_out / 1e6,
        "gap_MJ": (outputs.Q_in - outputs.Q_out) / 1e6,
        "gap_fraction": outputs.energy_closure,
        "within_tolerance": bool(outputs.energy_closure < ENERGY_CLOSURE_TOLERANCE),
    }


# =============================================================================
# DESIGN ADVISORIES
# =============================================================================


def detect_design_issues(inputs: ModelInputs, outputs: ModelOutputs) -> list[dict[str, Any]]:
    """
    Flag designs that are degenerate or limited by a fixable constraint.

    Checks:
    1. Cooling is the bottleneck by a wide margin over regeneration
    2. Regeneration temperature above the heat-exchanger ceiling
    3. Working capacity ≤ 0
    4. No heat available for regeneration
    5. Cycle time is not finite

    Parameters
    ----------
    inputs : ModelInputs
        Design point that produced ``outputs``
    outputs : ModelOutputs

    Returns
    -------
    list of dict
        Each dict contains: severity, type, message, recommendation
    """
    issues = []

    # Check 1: cooling bottleneck
    if (
        outputs.binding_constraint == BindingConstraint.COOLING
        and outputs.t_cool_required > outputs.t_reg_required * COOLING_BOTTLENECK_RATIO
    ):
        if outputs.t_reg_required > 0:
            scaled_flow = inputs.m_dot_cool * outputs.t_cool_required / outputs.t_reg_required
        else:
            scaled_flow = np.inf
        suggested = min(MAX_SUGGESTED_COOLING_FLOW, scaled_flow)
        issues.append(
            {
                "severity": "MEDIUM",
                "type": "Cooling",
                "message": (
                    f"Cooling is the bottleneck ({outputs.t_cool_required:.0f} s vs "
                    f"regeneration {outputs.t_reg_required:.0f} s)."
                ),
                "recommendation": (
                    f"Increase cooling flow to ≥{suggested:.2f} kg/s to bring the cycle "
                    f"down to regeneration-limited."
                ),
            }
        )

    # Check 2: thermal ceiling
    thermal = outputs.constraints.thermal
    if not thermal.ok:
        issues.append(
            {
                "severity": "HIGH",
                "type": "Thermal",
                "message": (
                    f"T_reg ({thermal.T_reg:.0f} K) exceeds the heat-exchanger limit "
                    f"({thermal.T_max:.0f} K)."
                ),
                "recommendation": (
                    "Reduce the regeneration temperature or increase the BioCHP exhaust temperature."
                ),
            }
        )

    # Check 3: working capacity
    if not outputs.Delta_q > 0:
        issues.append(
            {
                "severity": "HIGH",
                "type": "Capacity",
                "message": (
                    f"Working capacity is {outputs.Delta_q:.3g} mol/kg; regeneration does not "
                    f"release CO2 relative to the adsorption loading."
                ),
                "recommendation": (
                    "Check b0 (kPa⁻¹), the T_reg - T_ads differential and the CO2 partial pressures."
                ),
            }
        )

    # Check 4: heat supply
    if not outputs.Q_dot_avail > 0:
        issues.append(
            {
                "severity": "HIGH",
                "type": "Thermal",
                "message": f"No heat available for regeneration (Q_dot_avail = {outputs.Q_dot_avail:.3g} kW).",
                "recommendation": (
                    "Exhaust must leave the heat exchanger hotter than the bed inlet, "
                    "or set a positive manual heat override."
                ),
            }
        )

    # Check 5: cycle time
    if not np.isfinite(outputs.t_cycle_effective):
        issues.append(
            {
                "severity": "HIGH",
                "type": "Cycle",
                "message": (
                    f"Cycle time is {outputs.t_cycle_effective} s "
                    f"(limited by {outputs.binding_constraint.value}); no CO2 is captured."
                ),
                "recommendation": "Resolve the issues above; the plant has no finite cycle.",
            }
        )

    if issues:
        logger.debug(f"Design advisories: {[issue['type'] for issue in issues]}")
    return issues
