# engine.py
"""
BioCO2 TSA - Steady-Cycle Calculation Engine
============================================

Single forward pass from a ``ModelInputs`` design point to ``ModelOutputs``:

1. Heat-exchanger energy balance (heat available for regeneration)
2. Bed geometry (diameter, length, steel shell mass)
3. CO2 mass-flow partition of the exhaust
4. Langmuir working capacity (see ``isotherm``)
5. Regeneration energy with a one-step purge bootstrap
6. Cooling time
7. Ergun pressure drop and blower power
8. Cycle timing and binding constraint
9. Plant-level capture rate and specific energy
10. Energy-closure diagnostic

Every component runs with IEEE-754 float semantics: division by zero gives
inf, 0/0 gives nan, and those values propagate to dependent fields instead
of raising. Only caller contract violations (wrong types, unknown species)
raise.
"""

import functools
import logging
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass
from typing import Any, TypeVar

import numpy as np

from .config import (
    DEFAULT_CONSTANTS,
    ERGUN_INERTIAL_COEFF,
    ERGUN_VISCOUS_COEFF,
    J_PER_KWH,
    PI,
    SECONDS_PER_HOUR,
    PhysicalConstants,
)
from .data_model import (
    BindingConstraint,
    Constraints,
    CoolingConstraint,
    ModelInputs,
    ModelOutputs,
    ThermalConstraint,
)
from .gas_properties import cp_mix, cp_mix_avg, ideal_gas_density, mixture_molar_mass
from .isotherm import LangmuirIsotherm, working_capacity

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])

__all__ = [
    # Entry points
    "compute",
    "compute_cached",
    "try_compute",
    "EngineResult",
    # Components
    "heat_exchanger_balance",
    "bed_geometry",
    "co2_mass_flow",
    "regeneration_energy",
    "cooling_time",
    "pressure_drop",
    "adsorption_time",
    "resolve_binding_constraint",
    "capture_performance",
    "energy_closure",
    "thermal_constraint",
    "cooling_constraint",
    "BINDING_PRECEDENCE",
]


def _as_float(value: Any) -> Any:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.number)):
        return value
    return np.float64(value)


def _ieee_arithmetic(func: _F) -> _F:
    """
    Run a component on float64 scalars with numpy's floating-point errors
    silenced, so x/0 -> inf and 0/0 -> nan instead of ZeroDivisionError.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        args = tuple(_as_float(a) for a in args)
        kwargs = {k: _as_float(v) for k, v in kwargs.items()}
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# =============================================================================
# COMPONENT RESULTS
# =============================================================================


@dataclass(frozen=True)
class HeatExchangerBalance:
    T_regen_air_max: float
    T_exh: float
    M_mix: float
    Cp_exh_avg: float
    Q_dot_calc: float
    Q_dot_avail: float


@dataclass(frozen=True)
class BedGeometry:
    V_bed: float
    D: float
    L: float
    A_cross: float
    V_steel: float
    m_steel: float


@dataclass(frozen=True)
class CO2MassFlow:
    rho_CO2: float
    rho_N2: float
    m_dot_CO2: float


@dataclass(frozen=True)
class RegenerationEnergy:
    n_CO2: float
    m_CO2_bed: float
    DeltaT_reg: float
    Q_zeolite: float
    Q_steel: float
    Q_des: float
    Q_core: float
    t_reg_initial: float
    Cp_purge_avg: float
    Q_purge: float
    Q_subtotal: float
    Q_losses: float
    Q_total: float
    t_reg_required: float
    Q_dot_demand: float


@dataclass(frozen=True)
class CoolingDemand:
    Q_cool: float
    T_bed_avg: float
    Q_dot_cool: float
    t_cool_required: float


@dataclass(frozen=True)
class PressureDrop:
    rho_exh: float
    volumetric_flow: float
    v_sup: float
    dP_over_L: float
    DeltaP: float
    W_blower: float


@dataclass(frozen=True)
class CycleTiming:
    t_ads: float
    t_reg_required: float
    t_cool_required: float
    t_cycle_effective: float
    binding_constraint: BindingConstraint


@dataclass(frozen=True)
class CapturePerformance:
    cycles_per_hour: float
    CO2_per_hour: float
    CO2_tpd: float
    CO2_tph: float
    thermal_kWh: float
    thermal_kWh_per_hr: float
    electrical_kW: float
    total_kWh_per_hr: float
    kWh_per_ton: float


@dataclass(frozen=True)
class EnergyClosure:
    Q_in: float
    Q_out: float
    energy_closure: float


# =============================================================================
# HEAT EXCHANGER
# =============================================================================


@_ieee_arithmetic
def heat_exchanger_balance(
    m_dot_exh: float,
    y_CO2: float,
    T_exh_biochp: float,
    T_ads: float,
    DeltaT_approach: float,
    use_Q_override: bool,
    Q_dot_manual: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> HeatExchangerBalance:
    """
    Heat recoverable from the BioCHP exhaust by a gas-to-gas exchanger.

    The exhaust leaves the exchanger at T_ads + offset (30 K by default) on
    its way to the beds. Cp is evaluated at the mean of inlet and outlet and
    converted to a mass basis with the mixture molar mass. Q_dot is in kW;
    the manual value replaces the computed one when the override is set.
    """
    T_regen_air_max = T_exh_biochp - DeltaT_approach
    T_exh = T_ads + constants.exhaust_offset_K

    M_mix = mixture_molar_mass(y_CO2, constants)
    Cp_exh_avg = cp_mix((T_exh_biochp + T_exh) / 2, y_CO2) / M_mix

    Q_dot_calc = m_dot_exh * Cp_exh_avg * (T_exh_biochp - T_exh) / 1000
    Q_dot_avail = Q_dot_manual if use_Q_override else Q_dot_calc

    return HeatExchangerBalance(
        T_regen_air_max=T_regen_air_max,
        T_exh=T_exh,
        M_mix=M_mix,
        Cp_exh_avg=Cp_exh_avg,
        Q_dot_calc=Q_dot_calc,
        Q_dot_avail=Q_dot_avail,
    )


# =============================================================================
# GEOMETRY
# =============================================================================


@_ieee_arithmetic
def bed_geometry(
    m_ads: float, rho_bulk: float, L_over_D: float, t_wall: float, rho_steel: float
) -> BedGeometry:
    """
    Cylindrical bed sized from adsorbent mass and aspect ratio.

    V = m/rho, D = (4V / (π·L/D))^(1/3), L = (L/D)·D. The steel shell is a
    thin wall π·D·L·t_wall; end caps are ignored.
    """
    V_bed = m_ads / rho_bulk
    D = np.power(4 * V_bed / (PI * L_over_D), 1 / 3)
    L = D * L_over_D
    A_cross = PI * D * D / 4
    V_steel = PI * D * L * t_wall

    return BedGeometry(
        V_bed=V_bed,
        D=D,
        L=L,
        A_cross=A_cross,
        V_steel=V_steel,
        m_steel=V_steel * rho_steel,
    )


# =============================================================================
# CO2 FLOW
# =============================================================================


@_ieee_arithmetic
def co2_mass_flow(
    m_dot_exh: float,
    y_CO2: float,
    T_exh: float,
    P_exh: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> CO2MassFlow:
    """CO2 share of the exhaust mass flow from density-weighted mole fractions."""
    rho_CO2 = ideal_gas_density(T_exh, P_exh, constants.M_CO2, constants)
    rho_N2 = ideal_gas_density(T_exh, P_exh, constants.M_N2, constants)
    m_dot_CO2 = m_dot_exh * (y_CO2 * rho_CO2) / (y_CO2 * rho_CO2 + (1 - y_CO2) * rho_N2)

    return CO2MassFlow(rho_CO2=rho_CO2, rho_N2=rho_N2, m_dot_CO2=m_dot_CO2)


# =============================================================================
# REGENERATION ENERGY
# =============================================================================


def _regeneration_time(Q: float, Q_dot_avail_kW: float) -> float:
    return Q / (Q_dot_avail_kW * 1000) if Q_dot_avail_kW > 0 else np.inf


@_ieee_arithmetic
def regeneration_energy(
    m_ads: float,
    Delta_q: float,
    m_steel: float,
    Cp_ads: float,
    Cp_steel: float,
    T_ads: float,
    T_reg: float,
    DeltaH_ads: float,
    f_loss: float,
    m_dot_purge: float,
    y_CO2: float,
    Q_dot_avail: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> RegenerationEnergy:
    """
    Heat needed to regenerate one bed, and the time it takes at Q_dot_avail.

    Sinks: adsorbent and steel sensible heat, desorption enthalpy, purge-gas
    sensible heat, and a fractional loss on top.

    Purge heating is a rate, so it needs the regeneration time, which in
    turn depends on the total heat. This is resolved in one pass:

    1. t_reg_initial from the core sinks inflated by (1 + f_loss)
    2. Q_purge = m_dot_purge · Cp_purge_avg · ΔT · t_reg_initial
    3. losses applied to the full subtotal, t_reg_required = Q_total / Q_dot_avail

    The result is not iterated to a fixed point. A non-positive Q_dot_avail
    gives infinite times.
    """
    n_CO2 = m_ads * Delta_q
    m_CO2_bed = n_CO2 * constants.M_CO2

    DeltaT_reg = T_reg - T_ads
    Q_zeolite = m_ads * Cp_ads * DeltaT_reg
    Q_steel = m_steel * Cp_steel * DeltaT_reg
    Q_des = n_CO2 * DeltaH_ads * 1000

    Q_core = Q_zeolite + Q_steel + Q_des
    t_reg_initial = _regeneration_time(Q_core * (1 + f_loss), Q_dot_avail)

    Cp_purge_avg = cp_mix_avg(T_ads, T_reg, y_CO2) / mixture_molar_mass(y_CO2, constants)
    Q_purge = m_dot_purge * Cp_purge_avg * DeltaT_reg * t_reg_initial

    Q_subtotal = Q_zeolite + Q_steel + Q_des + Q_purge
    Q_losses = f_loss * Q_subtotal
    Q_total = Q_subtotal + Q_losses
    t_reg_required = _regeneration_time(Q_total, Q_dot_avail)

    return RegenerationEnergy(
        n_CO2=n_CO2,
        m_CO2_bed=m_CO2_bed,
        DeltaT_reg=DeltaT_reg,
        Q_zeolite=Q_zeolite,
        Q_steel=Q_steel,
        Q_des=Q_des,
        Q_core=Q_core,
        t_reg_initial=t_reg_initial,
        Cp_purge_avg=Cp_purge_avg,
        Q_purge=Q_purge,
        Q_subtotal=Q_subtotal,
        Q_losses=Q_losses,
        Q_total=Q_total,
        t_reg_required=t_reg_required,
        Q_dot_demand=Q_total / t_reg_required / 1000 if t_reg_required > 0 else 0.0,
    )


# =============================================================================
# COOLING
# =============================================================================


@_ieee_arithmetic
def cooling_time(
    m_ads: float,
    Cp_ads: float,
    m_steel: float,
    Cp_steel: float,
    T_ads: float,
    T_reg: float,
    m_dot_cool: float,
    Cp_cool: float,
    T_cool_in: float,
) -> CoolingDemand:
    """
    Time to take the bed from T_reg back to T_ads with the cooling flow.

    Only the adsorbent and steel sensible heat is removed. The driving
    temperature difference is the bed mean (T_reg + T_ads)/2 minus the
    coolant inlet; no cooling power means infinite time.
    """
    Q_cool = (m_ads * Cp_ads + m_steel * Cp_steel) * (T_reg - T_ads)
    T_bed_avg = (T_reg + T_ads) / 2
    Q_dot_cool = m_dot_cool * Cp_cool * (T_bed_avg - T_cool_in)

    return CoolingDemand(
        Q_cool=Q_cool,
        T_bed_avg=T_bed_avg,
        Q_dot_cool=Q_dot_cool,
        t_cool_required=Q_cool / Q_dot_cool if Q_dot_cool > 0 else np.inf,
    )


# =============================================================================
# PRESSURE DROP (ERGUN)
# =============================================================================


@_ieee_arithmetic
def pressure_drop(
    m_dot_exh: float,
    M_mix: float,
    T_exh: float,
    P_exh: float,
    A_cross: float,
    L: float,
    epsilon: float,
    d_p: float,
    eta_blower: float,
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
) -> PressureDrop:
    """
    Ergun pressure drop over the packed bed and the blower power to drive it.

    ΔP/L = 150(1-ε)²μv / (ε³d_p²) + 1.75(1-ε)ρv² / (ε³d_p)

    Reference: Ergun, S. (1952). Chem. Eng. Prog., 48(2), 89-94.
    """
    rho_exh = ideal_gas_density(T_exh, P_exh, M_mix, constants)
    volumetric_flow = m_dot_exh / rho_exh
    v_sup = volumetric_flow / A_cross

    eps3 = epsilon**3
    viscous = ERGUN_VISCOUS_COEFF * (1 - epsilon) ** 2 * constants.mu_gas * v_sup / (eps3 * d_p * d_p)
    inertial = ERGUN_INERTIAL_COEFF * (1 - epsilon) * rho_exh * v_sup * v_sup / (eps3 * d_p)
    dP_over_L = viscous + inertial
    DeltaP = dP_over_L * L

    return PressureDrop(
        rho_exh=rho_exh,
        volumetric_flow=volumetric_flow,
        v_sup=v_sup,
        dP_over_L=dP_over_L,
        DeltaP=DeltaP,
        W_blower=DeltaP * volumetric_flow / eta_blower,
    )


# =============================================================================
# CYCLE TIMING
# =============================================================================

# On an exact tie the earlier entry wins; adsorption is the fallback.
BINDING_PRECEDENCE: tuple[BindingConstraint, ...] = (
    BindingConstraint.COOLING,
    BindingConstraint.REGENERATION,
)


@_ieee_arithmetic
def adsorption_time(m_CO2_bed: float, m_dot_CO2: float, N_bed: float) -> float:
    """Time for one bed to take up its working capacity (s); inf if nothing is captured."""
    if m_CO2_bed > 0 and m_dot_CO2 > 0:
        return m_CO2_bed / (m_dot_CO2 / N_bed)
    return np.inf


@_ieee_arithmetic
def resolve_binding_constraint(
    t_ads: float, t_reg_required: float, t_cool_required: float
) -> CycleTiming:
    """
    Effective cycle time and the phase that sets it.

    t_cycle = max(t_ads, t_reg, t_cool) with nan propagating. Ties are broken
    by ``BINDING_PRECEDENCE``: cooling over regeneration over adsorption.
    """
    durations = {
        BindingConstraint.ADSORPTION: t_ads,
        BindingConstraint.REGENERATION: t_reg_required,
        BindingConstraint.COOLING: t_cool_required,
    }
    t_cycle = np.max(list(durations.values()))

    binding = next(
        (phase for phase in BINDING_PRECEDENCE if durations[phase] == t_cycle),
        BindingConstraint.ADSORPTION,
    )

    return CycleTiming(
        t_ads=t_ads,
        t_reg_required=t_reg_required,
        t_cool_required=t_cool_required,
        t_cycle_effective=t_cycle,
        binding_constraint=binding,
    )


# =============================================================================
# CAPTURE RATE & SPECIFIC ENERGY
# =============================================================================


@_ieee_arithmetic
def capture_performance(
    m_CO2_bed: float, N_bed: float, t_cycle_effective: float, Q_total: float, W_blower: float
) -> CapturePerformance:
    """
    Scale one bed and one cycle to plant throughput and energy intensity.

    Specific energy combines the hourly thermal demand with blower power and
    is inf when no CO2 is captured.
    """
    if np.isfinite(t_cycle_effective) and t_cycle_effective > 0:
        cycles_per_hour = SECONDS_PER_HOUR / t_cycle_effective
    else:
        cycles_per_hour = np.float64(0.0)

    CO2_per_hour = m_CO2_bed * N_bed * cycles_per_hour
    CO2_tph = CO2_per_hour / 1000

    thermal_kWh = Q_total / J_PER_KWH
    thermal_kWh_per_hr = thermal_kWh * cycles_per_hour
    electrical_kW = W_blower / 1000
    total_kWh_per_hr = thermal_kWh_per_hr + electrical_kW

    return CapturePerformance(
        cycles_per_hour=cycles_per_hour,
        CO2_per_hour=CO2_per_hour,
        CO2_tpd=CO2_per_hour * 24 / 1000,
        CO2_tph=CO2_tph,
        thermal_kWh=thermal_kWh,
        thermal_kWh_per_hr=thermal_kWh_per_hr,
        electrical_kW=electrical_kW,
        total_kWh_per_hr=total_kWh_per_hr,
        kWh_per_ton=total_kWh_per_hr / CO2_tph if CO2_tph > 0 else np.inf,
    )


# =============================================================================
# DIAGNOSTICS
# =============================================================================


@_ieee_arithmetic
def energy_closure(Q_total: float, Q_des: float, Q_cool: float) -> EnergyClosure:
    """
    Relative gap between heat supplied and heat accounted for by desorption
    and cooling. Q_total also carries heat that Q_out omits, so the gap is
    normally non-zero; it is reported, never enforced.
    """
    Q_in = Q_total
    Q_out = Q_des + Q_cool
    gap = np.abs(Q_in - Q_out) / Q_in if Q_in > 0 else np.float64(0.0)
    return EnergyClosure(Q_in=Q_in, Q_out=Q_out, energy_closure=gap)


@_ieee_arithmetic
def thermal_constraint(T_reg: float, T_regen_air_max: float) -> ThermalConstraint:
    """Regeneration air cannot be hotter than exhaust minus the approach ΔT."""
    return ThermalConstraint(
        ok=bool(T_reg <= T_regen_air_max),
        T_reg=T_reg,
        T_max=T_regen_air_max,
        margin=T_regen_air_max - T_reg,
    )


@_ieee_arithmetic
def cooling_constraint(t_cool_required: float, t_cycle_effective: float) -> CoolingConstraint:
    return CoolingConstraint(
        ok=bool(t_cool_required <= t_cycle_effective),
        t_cool=t_cool_required,
        t_available=t_cycle_effective,
    )


# =============================================================================
# ENGINE
# =============================================================================


def compute(inputs: ModelInputs, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> ModelOutputs:
    """
    Steady-cycle performance of a TSA design point.

    Pure function: identical inputs and constants always give an identical
    record. Degenerate designs yield inf/nan fields; nothing is raised for
    out-of-range values.

    Parameters
    ----------
    inputs : ModelInputs
        Complete design point
    constants : PhysicalConstants
        Gas constant, molar masses, viscosity and exhaust offset

    Returns
    -------
    ModelOutputs
    """
    if not isinstance(inputs, ModelInputs):
        raise TypeError(f"compute() expects ModelInputs, got {type(inputs).__name__}")

    p = inputs
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        hx = heat_exchanger_balance(
            p.m_dot_exh,
            p.y_CO2,
            p.T_exh_biochp,
            p.T_ads,
            p.DeltaT_approach,
            p.use_Q_override,
            p.Q_dot_manual,
            constants,
        )
        if not hx.Q_dot_avail > 0:
            logger.debug(f"No heat available for regeneration (Q_dot_avail={hx.Q_dot_avail:.4g} kW)")

        geometry = bed_geometry(p.m_ads, p.rho_bulk, p.L_over_D, p.t_wall, p.rho_steel)
        flow = co2_mass_flow(p.m_dot_exh, p.y_CO2, hx.T_exh, p.P_exh, constants)

        isotherm = LangmuirIsotherm(q_m=p.q_m, b0=p.b0, DeltaH_ads=p.DeltaH_ads, R=constants.R)
        capacity = working_capacity(
            isotherm, p.T_ads, p.T_reg, p.y_CO2, p.y_CO2_reg, p.P_exh, p.f_moisture
        )
        if not capacity.Delta_q > 0:
            logger.debug(f"Non-positive working capacity (Delta_q={capacity.Delta_q:.4g} mol/kg)")

        regen = regeneration_energy(
            p.m_ads,
            capacity.Delta_q,
            geometry.m_steel,
            p.Cp_ads,
            p.Cp_steel,
            p.T_ads,
            p.T_reg,
            p.DeltaH_ads,
            p.f_loss,
            p.m_dot_purge,
            p.y_CO2,
            hx.Q_dot_avail,
            constants,
        )
        cooling = cooling_time(
            p.m_ads,
            p.Cp_ads,
            geometry.m_steel,
            p.Cp_steel,
            p.T_ads,
            p.T_reg,
            p.m_dot_cool,
            p.Cp_cool,
            p.T_cool_in,
        )
        dp = pressure_drop(
            p.m_dot_exh,
            hx.M_mix,
            hx.T_exh,
            p.P_exh,
            geometry.A_cross,
            geometry.L,
            p.epsilon,
            p.d_p,
            p.eta_blower,
            constants,
        )

        t_ads = adsorption_time(regen.m_CO2_bed, flow.m_dot_CO2, p.N_bed)
        timing = resolve_binding_constraint(t_ads, regen.t_reg_required, cooling.t_cool_required)
        if not np.isfinite(timing.t_cycle_effective):
            logger.debug(
                f"Cycle time is not finite ({timing.t_cycle_effective}); "
                f"binding constraint: {timing.binding_constraint.value}"
            )

        performance = capture_performance(
            regen.m_CO2_bed, p.N_bed, timing.t_cycle_effective, regen.Q_total, dp.W_blower
        )
        closure = energy_closure(regen.Q_total, regen.Q_des, cooling.Q_cool)

        constraints = Constraints(
            thermal=thermal_constraint(p.T_reg, hx.T_regen_air_max),
            cooling=cooling_constraint(cooling.t_cool_required, timing.t_cycle_effective),
        )

    fields: dict[str, Any] = {}
    for part in (hx, geometry, flow, capacity, regen, cooling, dp, timing, performance, closure):
        fields.update(asdict(part))

    return ModelOutputs(**fields, constraints=constraints, isotherm=isotherm)


# Memoized on the full value of (inputs, constants); both are frozen and hashable.
compute_cached = functools.lru_cache(maxsize=256)(compute)


@dataclass
class EngineResult:
    """Outcome of ``try_compute``: either outputs or a single error message."""

    success: bool
    outputs: ModelOutputs | None = None
    error: str | None = None


def try_compute(
    inputs: ModelInputs | Mapping[str, Any], constants: PhysicalConstants = DEFAULT_CONSTANTS
) -> EngineResult:
    """
    Run ``compute`` and report failure instead of raising.

    Accepts a ``ModelInputs`` or a complete mapping of field values; contract
    violations (missing or unknown fields, non-numeric values) become the
    error message.
    """
    try:
        if not isinstance(inputs, ModelInputs):
            inputs = ModelInputs.from_mapping(inputs)
        return EngineResult(success=True, outputs=compute(inputs, constants))
    except Exception as e:
        logger.error(f"TSA model computation failed: {e}")
        return EngineResult(success=False, error=str(e))
