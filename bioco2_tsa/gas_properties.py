# gas_properties.py
"""
BioCO2 TSA - Gas Property Correlations
======================================

Heat capacity and density of CO2/N2 exhaust mixtures:
- NIST Shomate polynomial for the molar heat capacity of each species
- Mole-fraction weighted mixture heat capacity
- Ideal-gas density and mixture molar mass

All functions accept floats or numpy arrays and propagate non-finite values.
"""

from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from .config import DEFAULT_CONSTANTS, SHOMATE_COEFFICIENTS, PhysicalConstants

__all__ = [
    "shomate_cp",
    "cp_mix",
    "cp_mix_avg",
    "ideal_gas_density",
    "mixture_molar_mass",
]


def shomate_cp(T: ArrayLike, species: str) -> Any:
    """
    Molar heat capacity from the Shomate equation: Cp = A + B·t + C·t² + D·t³ + E/t²

    Parameters
    ----------
    T : float or array
        Temperature (K); the polynomial is evaluated in t = T/1000
    species : str
        ``"CO2"`` or ``"N2"``

    Returns
    -------
    float or array
        Cp in J/(mol·K)

    Raises
    ------
    ValueError
        If ``species`` has no coefficient set.
    """
    try:
        c = SHOMATE_COEFFICIENTS[species]
    except (KeyError, TypeError):
        raise ValueError(
            f"No Shomate coefficients for species {species!r}; "
            f"expected one of {sorted(SHOMATE_COEFFICIENTS)}"
        ) from None

    t = np.asarray(T, dtype=float) / 1000.0
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        cp = c["A"] + c["B"] * t + c["C"] * t * t + c["D"] * t * t * t + c["E"] / (t * t)
    return cp if cp.ndim else np.float64(cp)


def cp_mix(T: ArrayLike, y_CO2: float) -> Any:
    """Mixture molar heat capacity (J/(mol·K)) weighted by CO2 mole fraction."""
    return y_CO2 * shomate_cp(T, "CO2") + (1 - y_CO2) * shomate_cp(T, "N2")


def cp_mix_avg(T1: ArrayLike, T2: ArrayLike, y_CO2: float) -> Any:
    """Arithmetic mean of the mixture heat capacity at two temperatures."""
    return (cp_mix(T1, y_CO2) + cp_mix(T2, y_CO2)) / 2


def ideal_gas_density(
    T: ArrayLike, P: ArrayLike, M: float, constants: PhysicalConstants = DEFAULT_CONSTANTS
) -> Any:
    """
    Ideal-gas density rho = P·M / (R·T).

    Parameters
    ----------
    T : temperature (K)
    P : pressure (Pa)
    M : molar mass (kg/mol)

    Returns rho in kg/m³; T = 0 yields inf (or nan when P·M = 0).
    """
    T = np.asarray(T, dtype=float)
    P = np.asarray(P, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        rho = (P * M) / (constants.R * T)
    return rho if rho.ndim else np.float64(rho)


def mixture_molar_mass(y_CO2: float, constants: PhysicalConstants = DEFAULT_CONSTANTS) -> float:
    """Molar mass (kg/mol) of a binary CO2/N2 mixture."""
    return y_CO2 * constants.M_CO2 + (1 - y_CO2) * constants.M_N2
