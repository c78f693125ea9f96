# validation.py
"""
BioCO2 TSA - Input Validation Module
====================================

Bounds checking for design points before they reach the engine.

The engine itself never calls these: it accepts any numeric design point
and lets degenerate values propagate as inf/nan. This module is for the
input-collection side (forms, sliders, scripts) that wants to tell a user
why a design point is unphysical.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from .config import FRACTION_FIELDS, OPEN_FRACTION_FIELDS, POSITIVE_FIELDS
from .data_model import ModelInputs

__all__ = [
    # Classes
    "ValidationLevel",
    "ValidationResult",
    "ValidationReport",
    # Basic validators
    "validate_positive",
    "validate_range",
    # Design point
    "validate_model_inputs",
    # Utilities
    "format_validation_errors",
]

# =============================================================================
# VALIDATION RESULT CLASSES
# =============================================================================


class ValidationLevel(Enum):
    """Validation severity levels."""

    ERROR = "error"  # Unphysical - results will be meaningless
    WARNING = "warning"  # Legal but probably not intended
    INFO = "info"  # Informational only


@dataclass
class ValidationResult:
    """
    Result of a validation check.

    Attributes
    ----------
    is_valid : bool
        Whether the validation passed
    level : ValidationLevel
        Severity level of any issues
    message : str
        Human-readable description
    field : str
        Name of the field being validated
    value : Any
        The actual value that was validated
    suggestion : str, optional
        Suggested fix for the issue
    """

    is_valid: bool
    level: ValidationLevel
    message: str
    field: str
    value: Any = None
    suggestion: str | None = None

    def __bool__(self) -> bool:
        return self.is_valid


@dataclass
class ValidationReport:
    """
    Aggregated validation results.

    ``is_valid`` is True when there are no errors; warnings are allowed.
    """

    is_valid: bool
    errors: list[ValidationResult]
    warnings: list[ValidationResult]
    info: list[ValidationResult]

    def __bool__(self) -> bool:
        return self.is_valid

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0

    @property
    def results(self) -> list[ValidationResult]:
        """All validation results (errors + warnings + info) combined."""
        return self.errors + self.warnings + self.info

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "is_valid": self.is_valid,
            "errors": [{"message": e.message, "field": e.field} for e in self.errors],
            "warnings": [{"message": w.message, "field": w.field} for w in self.warnings],
            "info": [{"message": i.message, "field": i.field} for i in self.info],
        }


# =============================================================================
# BASIC VALIDATORS
# =============================================================================


def validate_positive(value: float | int, field: str, allow_zero: bool = False) -> ValidationResult:
    """
    Check that a design value is a finite number above zero.

    Parameters
    ----------
    value : float or int
    field : str
        Input field name used in messages
    allow_zero : bool
        Accept exactly zero (flows that may be switched off)

    Returns
    -------
    ValidationResult
    """
    bound = "non-negative" if allow_zero else "positive"
    try:
        val = float(value)
    except (TypeError, ValueError):
        hint = f"Enter a {bound} number for {field}"
        return ValidationResult(
            False, ValidationLevel.ERROR, f"{field} must be a number", field, value, hint
        )

    if not np.isfinite(val):
        message = f"{field} cannot be NaN or infinite"
        return ValidationResult(False, ValidationLevel.ERROR, message, field, value)
    if val < 0 or (val == 0 and not allow_zero):
        message = f"{field} must be {bound} (got {val})"
        return ValidationResult(
            False, ValidationLevel.ERROR, message, field, val, f"Use a {bound} value"
        )
    return ValidationResult(True, ValidationLevel.INFO, f"{field} is valid", field, val)


def validate_range(
    value: float | int,
    field: str,
    min_val: float | None = None,
    max_val: float | None = None,
) -> ValidationResult:
    """
    Check that a design value lies in the closed interval [min_val, max_val].

    Either bound may be omitted. NaN and non-numeric values are errors.
    """
    try:
        val = float(value)
    except (TypeError, ValueError):
        message = f"{field} must be a number"
        return ValidationResult(False, ValidationLevel.ERROR, message, field, value)

    if np.isnan(val):
        problem = "cannot be NaN"
    elif min_val is not None and val < min_val:
        problem = f"must be ≥ {min_val} (got {val})"
    elif max_val is not None and val > max_val:
        problem = f"must be ≤ {max_val} (got {val})"
    else:
        return ValidationResult(True, ValidationLevel.INFO, f"{field} is within range", field, val)

    return ValidationResult(False, ValidationLevel.ERROR, f"{field} {problem}", field, val)


# =============================================================================
# DESIGN POINT VALIDATION
# =============================================================================


def _warning(field: str, value: Any, message: str, suggestion: str) -> ValidationResult:
    return ValidationResult(
        is_valid=True,
        level=ValidationLevel.WARNING,
        message=message,
        field=field,
        value=value,
        suggestion=suggestion,
    )


def validate_model_inputs(inputs: ModelInputs) -> ValidationReport:
    """
    Check a design point against physical bounds.

    Errors: non-positive temperatures, masses, densities, heat capacities and
    the like; fractions outside [0, 1]; porosity or blower efficiency outside
    (0, 1]; negative flows or losses.

    Warnings: regeneration not hotter than adsorption, coolant not colder
    than the adsorption temperature, regeneration temperature above what
    the heat exchanger can deliver.

    Parameters
    ----------
    inputs : ModelInputs

    Returns
    -------
    ValidationReport
    """
    errors: list[ValidationResult] = []
    warnings: list[ValidationResult] = []
    info: list[ValidationResult] = []

    checks = [validate_positive(getattr(inputs, name), name) for name in POSITIVE_FIELDS]
    checks += [
        validate_range(getattr(inputs, name), name, min_val=0.0, max_val=1.0)
        for name in FRACTION_FIELDS
    ]
    checks += [
        validate_positive(getattr(inputs, name), name)
        if getattr(inputs, name) <= 0
        else validate_range(getattr(inputs, name), name, max_val=1.0)
        for name in OPEN_FRACTION_FIELDS
    ]
    checks += [
        validate_positive(getattr(inputs, name), name, allow_zero=True)
        for name in ("m_dot_purge", "m_dot_cool", "DeltaT_approach", "b0")
    ]
    if inputs.use_Q_override:
        checks.append(validate_positive(inputs.Q_dot_manual, "Q_dot_manual"))

    for result in checks:
        (info if result.is_valid else errors).append(result)

    if inputs.T_reg <= inputs.T_ads:
        warnings.append(
            _warning(
                "T_reg",
                inputs.T_reg,
                f"T_reg ({inputs.T_reg} K) is not above T_ads ({inputs.T_ads} K); "
                "there is no temperature swing.",
                "Raise the regeneration temperature above the adsorption temperature",
            )
        )

    if inputs.T_cool_in >= inputs.T_ads:
        warnings.append(
            _warning(
                "T_cool_in",
                inputs.T_cool_in,
                f"Cooling inlet ({inputs.T_cool_in} K) is not below T_ads ({inputs.T_ads} K).",
                "Use a colder cooling stream",
            )
        )

    T_max = inputs.T_exh_biochp - inputs.DeltaT_approach
    if inputs.T_reg > T_max:
        warnings.append(
            _warning(
                "T_reg",
                inputs.T_reg,
                f"T_reg ({inputs.T_reg} K) is above the heat-exchanger limit "
                f"({T_max:.0f} K).",
                "Reduce the regeneration temperature or increase the exhaust temperature",
            )
        )

    return ValidationReport(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
        info=info,
    )


# =============================================================================
# UTILITIES
# =============================================================================


def format_validation_errors(report: ValidationReport) -> str:
    """
    Format validation report for display.

    Parameters
    ----------
    report : ValidationReport
        Validation report

    Returns
    -------
    str
        Formatted message
    """
    lines = []

    if report.errors:
        lines.append("Errors:")
        for e in report.errors:
            lines.append(f"- {e.message}")
            if e.suggestion:
                lines.append(f"  hint: {e.suggestion}")

    if report.warnings:
        lines.append("Warnings:")
        for w in report.warnings:
            lines.append(f"- {w.message}")
            if w.suggestion:
                lines.append(f"  hint: {w.suggestion}")

    return "\n".join(lines) if lines else "All validations passed"
