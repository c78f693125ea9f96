# bioco2_tsa/__init__.py
"""
BioCO2 TSA - Temperature-Swing Adsorption Performance Model
===========================================================

Steady-cycle model of a TSA CO2 capture skid regenerated with waste heat
from a biomass combined-heat-and-power (BioCHP) exhaust:
- Bed geometry, working capacity and regeneration energy
- Cycle timing with the binding phase (adsorption, regeneration or cooling)
- Plant-level capture rate and specific energy
- Ergun pressure drop and blower power

Usage:
    # Evaluate the reference design point from the command line
    bioco2-tsa --set T_reg=453 --set N_bed=6

    # Or via Python
    python -m bioco2_tsa

    # Or programmatic access
    from bioco2_tsa import engine, reporting, validation

Example:
    >>> from bioco2_tsa.data_model import ModelInputs
    >>> from bioco2_tsa.engine import compute
    >>> outputs = compute(ModelInputs.from_defaults(T_reg=453.0))
    >>> outputs.binding_constraint.value
    'cooling'
"""

try:
    from importlib.metadata import version
    __version__ = version("bioco2-tsa")
except Exception:
    __version__ = "dev"
__license__ = "MIT"

# Public API - lazy imports for fast startup
__all__ = [
    "__version__",
    "main",
    "config",
    "data_model",
    "engine",
    "gas_properties",
    "isotherm",
    "reporting",
    "validation",
]

_SUBMODULES = (
    "cli",
    "config",
    "data_model",
    "engine",
    "gas_properties",
    "isotherm",
    "reporting",
    "validation",
)


def main() -> None:
    """
    Entry point for the ``bioco2-tsa`` console script.

    Example:
        >>> import bioco2_tsa
        >>> bioco2_tsa.main()  # Prints the reference design point
    """
    import sys

    from .cli import run

    sys.exit(run(sys.argv[1:]))


import types as types_module


def _lazy_import(name: str) -> types_module.ModuleType:
    """Lazy import submodules for faster startup."""
    import importlib

    return importlib.import_module(f".{name}", __package__)


def __getattr__(name: str) -> types_module.ModuleType:
    """Enable lazy loading of submodules."""
    if name in _SUBMODULES:
        return _lazy_import(name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
