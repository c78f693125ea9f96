# isotherm.py
"""
BioCO2 TSA - Langmuir Isotherm & Working Capacity
=================================================

Temperature-dependent Langmuir isotherm for CO2 on the adsorbent:

    b(T) = b0 · exp(ΔH_ads / (R·T))
    q    = q_m · b(T)·P / (1 + b(T)·P)

ΔH_ads is stored as a positive magnitude (kJ/mol) so that affinity rises as
temperature falls. ``b0`` is in kPa⁻¹ and pressures are converted from Pa to
kPa before use. Constants reported in Pa⁻¹, bar⁻¹ or atm⁻¹ must be converted
first; a mismatch is silently off by 10³-10⁶.

Reference: Langmuir, I. (1918). J. Am. Chem. Soc., 40(9), 1361-1403.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from .config import R_GAS_CONSTANT

__all__ = [
    "LangmuirIsotherm",
    "WorkingCapacity",
    "working_capacity",
]


@dataclass(frozen=True)
class LangmuirIsotherm:
    """
    Langmuir isotherm bound to one adsorbent parameter set.

    Instances are immutable values: calling one any number of times, after the
    computation that produced it has returned, always gives the same loading.

    Attributes
    ----------
    q_m : float
        Saturation capacity (mmol/g, numerically equal to mol/kg)
    b0 : float
        Pre-exponential affinity constant (kPa⁻¹)
    DeltaH_ads : float
        Heat of adsorption magnitude (kJ/mol)
    R : float
        Gas constant (J/(mol·K))
    """

    q_m: float
    b0: float
    DeltaH_ads: float
    R: float = R_GAS_CONSTANT

    def affinity(self, T: ArrayLike) -> Any:
        """Affinity b(T) in kPa⁻¹."""
        T = np.asarray(T, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            b = self.b0 * np.exp(self.DeltaH_ads * 1000.0 / (self.R * T))
        return b if b.ndim else np.float64(b)

    def __call__(self, T: ArrayLike, P_CO2_pa: ArrayLike) -> Any:
        """
        Equilibrium loading at temperature ``T`` (K) and CO2 partial pressure
        ``P_CO2_pa`` (Pa).

        Returns loading in mol/kg; arrays broadcast. Written as
        q_m / (1 + 1/bP) so an overflowing affinity at low T saturates at
        q_m instead of giving inf/inf.
        """
        P_kpa = np.asarray(P_CO2_pa, dtype=float) / 1000.0
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            bP = self.affinity(T) * P_kpa
            q = np.where(P_kpa == 0, 0.0, self.q_m / (1.0 + 1.0 / bP))
        return q if np.ndim(q) else np.float64(q)


@dataclass(frozen=True)
class WorkingCapacity:
    """Adsorption/regeneration loadings and the cyclic swing between them."""

    P_CO2_ads: float  # Pa
    P_CO2_reg: float  # Pa
    q_ads: float  # mol/kg
    q_reg: float  # mol/kg
    Delta_q_raw: float  # mol/kg
    Delta_q: float  # mol/kg, after moisture derating


def working_capacity(
    isotherm: LangmuirIsotherm,
    T_ads: float,
    T_reg: float,
    y_CO2: float,
    y_CO2_reg: float,
    P_exh: float,
    f_moisture: float,
) -> WorkingCapacity:
    """
    Loading swing between adsorption and regeneration conditions.

    Delta_q = (q(T_ads, y_CO2·P) − q(T_reg, y_CO2_reg·P)) · f_moisture

    A non-positive result means regeneration does not release the adsorbed
    CO2; it is returned as-is.
    """
    P_CO2_ads = y_CO2 * P_exh
    P_CO2_reg = y_CO2_reg * P_exh
    q_ads = isotherm(T_ads, P_CO2_ads)
    q_reg = isotherm(T_reg, P_CO2_reg)
    Delta_q_raw = q_ads - q_reg

    return WorkingCapacity(
        P_CO2_ads=P_CO2_ads,
        P_CO2_reg=P_CO2_reg,
        q_ads=q_ads,
        q_reg=q_reg,
        Delta_q_raw=Delta_q_raw,
        Delta_q=Delta_q_raw * f_moisture,
    )
