# config.py
"""
BioCO2 TSA - Configuration Module
=================================

Centralized constants, defaults and thresholds for the TSA performance model.
Physical constants live in an immutable ``PhysicalConstants`` record so the
engine can be handed an alternative set without touching module globals.
"""

from dataclasses import dataclass
from typing import Any, TypedDict

import numpy as np


class ShomateCoefficients(TypedDict):
    """NIST Shomate coefficients for Cp° = A + B·t + C·t² + D·t³ + E/t²."""

    A: float
    B: float
    C: float
    D: float
    E: float


# =============================================================================
# VERSION INFO
# =============================================================================
from . import __version__ as VERSION

__all__ = [
    # Version
    "VERSION",
    # Physical constants
    "PhysicalConstants",
    "DEFAULT_CONSTANTS",
    "R_GAS_CONSTANT",
    "M_CO2",
    "M_N2",
    "PI",
    "GAS_VISCOSITY",
    "EXHAUST_OFFSET_K",
    "SHOMATE_COEFFICIENTS",
    # Engine constants
    "ERGUN_VISCOUS_COEFF",
    "ERGUN_INERTIAL_COEFF",
    "SECONDS_PER_HOUR",
    "J_PER_KWH",
    # Defaults
    "DEFAULT_INPUTS",
    # Validation constants
    "POSITIVE_FIELDS",
    "FRACTION_FIELDS",
    "OPEN_FRACTION_FIELDS",
    # Reporting thresholds
    "ENERGY_CLOSURE_TOLERANCE",
    "THERMAL_UTILIZATION_BANDS",
    "COOLING_BOTTLENECK_RATIO",
    "MAX_SUGGESTED_COOLING_FLOW",
    "ISOTHERM_CURVE_P_MAX_KPA",
    "ISOTHERM_CURVE_STEP_KPA",
    "ENERGY_SINKS",
]

# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================
R_GAS_CONSTANT = 8.314  # J/(mol·K)
M_CO2 = 0.04401  # kg/mol
M_N2 = 0.02802  # kg/mol
PI = np.pi
GAS_VISCOSITY = 1.8e-5  # Pa·s, exhaust treated as N2 at ~350 K
EXHAUST_OFFSET_K = 30.0  # post-HX exhaust temperature above T_ads


@dataclass(frozen=True)
class PhysicalConstants:
    """
    Constants shared by every engine component.

    Attributes
    ----------
    R : float
        Universal gas constant (J/(mol·K))
    M_CO2 : float
        Molar mass of CO2 (kg/mol)
    M_N2 : float
        Molar mass of N2, used for the whole inert fraction (kg/mol)
    mu_gas : float
        Dynamic viscosity of the exhaust in the Ergun equation (Pa·s)
    exhaust_offset_K : float
        Exhaust temperature at the bed inlet relative to T_ads (K)
    """

    R: float = R_GAS_CONSTANT
    M_CO2: float = M_CO2
    M_N2: float = M_N2
    mu_gas: float = GAS_VISCOSITY
    exhaust_offset_K: float = EXHAUST_OFFSET_K


DEFAULT_CONSTANTS = PhysicalConstants()

# NIST Chemistry WebBook (Chase, 1998), 298-1200 K
SHOMATE_COEFFICIENTS: dict[str, ShomateCoefficients] = {
    "CO2": {"A": 24.99735, "B": 55.18696, "C": -33.69137, "D": 7.948387, "E": -0.136638},
    "N2": {"A": 28.98641, "B": 1.853978, "C": -9.647459, "D": 16.63537, "E": 0.000117},
}

# =============================================================================
# ENGINE CONSTANTS
# =============================================================================
ERGUN_VISCOUS_COEFF = 150.0
ERGUN_INERTIAL_COEFF = 1.75
SECONDS_PER_HOUR = 3600.0
J_PER_KWH = 3.6e6

# =============================================================================
# DEFAULT DESIGN POINT
# =============================================================================
DEFAULT_INPUTS: dict[str, Any] = {
    # BioCHP boundary
    "m_dot_exh": 0.85,  # kg/s
    "y_CO2": 0.12,
    "T_exh_biochp": 773.0,  # K, raw exhaust before the HX
    "P_exh": 101325.0,  # Pa
    "T_ambient": 303.0,  # K, HX cold-side inlet
    "DeltaT_approach": 15.0,  # K
    "use_Q_override": False,
    "Q_dot_manual": 120.0,  # kW
    # Bed design
    "N_bed": 4,
    "m_ads": 500.0,  # kg per bed
    "rho_bulk": 650.0,  # kg/m³
    "d_p": 0.003,  # m
    "epsilon": 0.37,
    "L_over_D": 2.5,
    "t_wall": 0.006,  # m
    "rho_steel": 7850.0,  # kg/m³
    # Operating conditions
    "T_ads": 323.0,  # K
    "T_reg": 473.0,  # K
    "y_CO2_reg": 0.90,
    "m_dot_purge": 0.05,  # kg/s
    "m_dot_cool": 0.15,  # kg/s
    "eta_blower": 0.72,
    # Adsorbent and shell
    "Cp_ads": 920.0,  # J/(kg·K)
    "Cp_steel": 500.0,  # J/(kg·K)
    "f_loss": 0.10,
    # Isotherm
    "q_m": 5.5,  # mmol/g == mol/kg
    "DeltaH_ads": 38.0,  # kJ/mol, positive magnitude
    "b0": 6.0e-7,  # kPa⁻¹
    "f_moisture": 0.85,
    # Cooling
    "T_cool_in": 303.0,  # K
    "Cp_cool": 1010.0,  # J/(kg·K)
}

# =============================================================================
# VALIDATION CONSTANTS
# =============================================================================
# Quantities that are meaningless at or below zero
POSITIVE_FIELDS: tuple[str, ...] = (
    "m_dot_exh",
    "T_exh_biochp",
    "P_exh",
    "T_ambient",
    "N_bed",
    "m_ads",
    "rho_bulk",
    "d_p",
    "L_over_D",
    "t_wall",
    "rho_steel",
    "T_ads",
    "T_reg",
    "Cp_ads",
    "Cp_steel",
    "q_m",
    "DeltaH_ads",
    "T_cool_in",
    "Cp_cool",
)

# Closed interval [0, 1]
FRACTION_FIELDS: tuple[str, ...] = (
    "y_CO2",
    "y_CO2_reg",
    "f_loss",
    "f_moisture",
)

# Half-open interval (0, 1]
OPEN_FRACTION_FIELDS: tuple[str, ...] = (
    "epsilon",
    "eta_blower",
)

# =============================================================================
# REPORTING THRESHOLDS
# =============================================================================
ENERGY_CLOSURE_TOLERANCE = 0.05
THERMAL_UTILIZATION_BANDS = {"ok": 75.0, "tight": 95.0}  # % of available heat
COOLING_BOTTLENECK_RATIO = 1.2
MAX_SUGGESTED_COOLING_FLOW = 0.5  # kg/s
ISOTHERM_CURVE_P_MAX_KPA = 30.0
ISOTHERM_CURVE_STEP_KPA = 0.5

# Regeneration sinks in display order: (label, ModelOutputs field)
ENERGY_SINKS: tuple[tuple[str, str], ...] = (
    ("Zeolite", "Q_zeolite"),
    ("Steel", "Q_steel"),
    ("Desorption", "Q_des"),
    ("Purge", "Q_purge"),
    ("Losses", "Q_losses"),
)
