# data_model.py
"""
BioCO2 TSA - Input and Output Records
=====================================

``ModelInputs`` is the complete, immutable design point handed to the engine.
``ModelOutputs`` is the derived record it returns. Both are frozen dataclasses:
inputs are hashable (usable as a memoization key) and outputs compare by value;
a record with a nan field, like a nan float, is unequal to itself.
"""

import dataclasses
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from .config import DEFAULT_INPUTS
from .isotherm import LangmuirIsotherm

__all__ = [
    "ModelInputs",
    "ModelOutputs",
    "BindingConstraint",
    "ThermalConstraint",
    "CoolingConstraint",
    "Constraints",
]


class BindingConstraint(str, Enum):
    """Cycle phase that sets the effective cycle time."""

    ADSORPTION = "adsorption"
    REGENERATION = "regeneration"
    COOLING = "cooling"


# =============================================================================
# INPUTS
# =============================================================================


@dataclass(frozen=True)
class ModelInputs:
    """
    Design and operating point of the TSA skid.

    Every field is required. Bounds are not enforced here (see
    ``validation.validate_model_inputs``); only types are checked.
    """

    # BioCHP boundary
    m_dot_exh: float  # exhaust mass flow, kg/s
    y_CO2: float  # exhaust CO2 mole fraction
    T_exh_biochp: float  # raw exhaust temperature, K
    P_exh: float  # Pa
    T_ambient: float  # HX cold-side inlet, K
    DeltaT_approach: float  # HX minimum approach, K
    use_Q_override: bool
    Q_dot_manual: float  # kW

    # Bed design
    N_bed: int
    m_ads: float  # adsorbent per bed, kg
    rho_bulk: float  # kg/m³
    d_p: float  # pellet diameter, m
    epsilon: float  # bed porosity
    L_over_D: float
    t_wall: float  # m
    rho_steel: float  # kg/m³

    # Operating conditions
    T_ads: float  # K
    T_reg: float  # K
    y_CO2_reg: float
    m_dot_purge: float  # kg/s
    m_dot_cool: float  # kg/s
    eta_blower: float

    # Adsorbent and shell
    Cp_ads: float  # J/(kg·K)
    Cp_steel: float  # J/(kg·K)
    f_loss: float

    # Isotherm
    q_m: float  # mmol/g == mol/kg
    DeltaH_ads: float  # kJ/mol, positive magnitude
    b0: float  # kPa⁻¹
    f_moisture: float

    # Cooling
    T_cool_in: float  # K
    Cp_cool: float  # J/(kg·K)

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.name == "use_Q_override":
                if not isinstance(value, (bool, np.bool_)):
                    raise TypeError(
                        f"use_Q_override must be a bool (got {type(value).__name__})"
                    )
                continue
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
                raise TypeError(
                    f"{f.name} must be a real number (got {type(value).__name__}: {value!r})"
                )

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Names of all input fields in declaration order."""
        return tuple(f.name for f in dataclasses.fields(cls))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ModelInputs":
        """
        Build inputs from a complete mapping.

        Raises
        ------
        KeyError
            If the mapping has keys that are not input fields.
        TypeError
            If a field is missing or has a non-numeric value.
        """
        unknown = sorted(set(values) - set(cls.field_names()))
        if unknown:
            raise KeyError(f"Unknown input field(s): {', '.join(unknown)}")
        return cls(**values)

    @classmethod
    def from_defaults(cls, **overrides: Any) -> "ModelInputs":
        """Reference design point with selected fields replaced."""
        return cls.from_mapping({**DEFAULT_INPUTS, **overrides})

    def replace(self, **changes: Any) -> "ModelInputs":
        """Copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


# =============================================================================
# CONSTRAINTS
# =============================================================================


@dataclass(frozen=True)
class ThermalConstraint:
    """Regeneration temperature against the heat-exchanger ceiling."""

    ok: bool
    T_reg: float  # K
    T_max: float  # K
    margin: float  # K, positive when feasible


@dataclass(frozen=True)
class CoolingConstraint:
    """Cooling duration against the effective cycle time."""

    ok: bool
    t_cool: float  # s
    t_available: float  # s


@dataclass(frozen=True)
class Constraints:
    thermal: ThermalConstraint
    cooling: CoolingConstraint


# =============================================================================
# OUTPUTS
# =============================================================================


def _plain(value: Any) -> Any:
    """Unwrap numpy scalars so output fields are builtin floats/bools."""
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, np.floating):
        return float(value)
    return value


@dataclass(frozen=True)
class ModelOutputs:
    """
    Steady-cycle performance of one design point.

    Energies are J per bed per cycle, times are s, powers are W unless the
    field name says kW. Degenerate designs show up as inf/nan fields rather
    than exceptions.
    """

    # Heat exchanger
    T_regen_air_max: float  # K
    T_exh: float  # K, bed inlet
    M_mix: float  # kg/mol
    Cp_exh_avg: float  # J/(kg·K)
    Q_dot_calc: float  # kW
    Q_dot_avail: float  # kW

    # Geometry
    V_bed: float  # m³
    D: float  # m
    L: float  # m
    A_cross: float  # m²
    V_steel: float  # m³
    m_steel: float  # kg

    # CO2 flow
    rho_CO2: float  # kg/m³
    rho_N2: float  # kg/m³
    m_dot_CO2: float  # kg/s

    # Isotherm
    P_CO2_ads: float  # Pa
    P_CO2_reg: float  # Pa
    q_ads: float  # mol/kg
    q_reg: float  # mol/kg
    Delta_q_raw: float  # mol/kg
    Delta_q: float  # mol/kg
    n_CO2: float  # mol per bed per cycle
    m_CO2_bed: float  # kg per bed per cycle

    # Regeneration energy
    DeltaT_reg: float  # K
    Q_zeolite: float
    Q_steel: float
    Q_des: float
    Q_core: float
    t_reg_initial: float  # s
    Cp_purge_avg: float  # J/(kg·K)
    Q_purge: float
    Q_subtotal: float
    Q_losses: float
    Q_total: float
    t_reg_required: float  # s

    # Cooling
    Q_cool: float
    T_bed_avg: float  # K
    Q_dot_cool: float  # W
    t_cool_required: float  # s

    # Pressure drop
    rho_exh: float  # kg/m³
    volumetric_flow: float  # m³/s
    v_sup: float  # m/s
    dP_over_L: float  # Pa/m
    DeltaP: float  # Pa
    W_blower: float  # W

    # Cycle timing
    t_ads: float  # s
    t_cycle_effective: float  # s
    binding_constraint: BindingConstraint

    # Capture rate and specific energy
    cycles_per_hour: float
    CO2_per_hour: float  # kg/h
    CO2_tpd: float  # t/day
    CO2_tph: float  # t/h
    thermal_kWh: float  # per bed per cycle
    thermal_kWh_per_hr: float  # average thermal demand, kW
    electrical_kW: float
    total_kWh_per_hr: float
    kWh_per_ton: float
    Q_dot_demand: float  # kW drawn while regenerating

    # Energy closure
    Q_in: float
    Q_out: float
    energy_closure: float

    constraints: Constraints
    isotherm: LangmuirIsotherm

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            plain = _plain(value)
            if plain is not value:
                object.__setattr__(self, f.name, plain)

    @property
    def thermal_feasible(self) -> bool:
        return self.constraints.thermal.ok

    @property
    def Q_thermal_per_cycle(self) -> float:
        return self.Q_total

    def langmuir(self, T: Any, P_CO2_pa: Any) -> Any:
        """Evaluate the isotherm used by this computation."""
        return self.isotherm(T, P_CO2_pa)

    def scalar_fields(self) -> dict[str, Any]:
        """Every scalar field (constraints and isotherm excluded)."""
        return {
            f.name: getattr(self, f.name)
            for f in dataclasses.fields(self)
            if f.name not in ("constraints", "isotherm")
        }
