# tests/test_validation.py
"""
Unit Tests for Validation Module
================================

Bounds checking of design points and report formatting.
"""

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bioco2_tsa.data_model import ModelInputs
from bioco2_tsa.engine import compute
from bioco2_tsa.validation import (
    ValidationLevel,
    ValidationReport,
    ValidationResult,
    format_validation_errors,
    validate_model_inputs,
    validate_positive,
    validate_range,
)

# =============================================================================
# BASIC VALIDATOR TESTS
# =============================================================================


class TestValidatePositive:
    """Tests for validate_positive."""

    def test_positive_value(self):
        result = validate_positive(5.0, "m_ads")
        assert result.is_valid
        assert result.level == ValidationLevel.INFO

    def test_zero_rejected_by_default(self):
        result = validate_positive(0, "m_ads")
        assert not result.is_valid
        assert "positive" in result.message

    def test_zero_allowed(self):
        assert validate_positive(0, "m_dot_purge", allow_zero=True).is_valid

    def test_negative(self):
        result = validate_positive(-1.0, "m_ads")
        assert not result.is_valid
        assert result.level == ValidationLevel.ERROR
        assert result.suggestion

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite(self, value):
        result = validate_positive(value, "T_reg")
        assert not result.is_valid
        assert "NaN or infinite" in result.message

    def test_not_a_number(self):
        result = validate_positive("abc", "T_reg")
        assert not result.is_valid
        assert "must be a number" in result.message


class TestValidateRange:
    """Tests for validate_range."""

    def test_in_range(self):
        assert validate_range(0.5, "y_CO2", 0.0, 1.0).is_valid

    def test_inclusive_bounds(self):
        assert validate_range(0.0, "y_CO2", 0.0, 1.0).is_valid
        assert validate_range(1.0, "y_CO2", 0.0, 1.0).is_valid

    def test_above_max(self):
        result = validate_range(1.5, "y_CO2", 0.0, 1.0)
        assert not result.is_valid
        assert "≤ 1.0" in result.message

    def test_nan(self):
        assert not validate_range(math.nan, "y_CO2", 0.0, 1.0).is_valid


# =============================================================================
# DESIGN POINT TESTS
# =============================================================================


class TestValidateModelInputs:
    """Tests for whole design-point validation."""

    def test_reference_design_is_clean(self):
        report = validate_model_inputs(ModelInputs.from_defaults())
        assert report.is_valid
        assert report.error_count == 0
        assert not report.has_warnings

    @pytest.mark.parametrize(
        "field, value",
        [
            ("m_ads", -1.0),
            ("rho_bulk", 0.0),
            ("T_reg", 0.0),
            ("N_bed", 0),
            ("y_CO2", 1.5),
            ("f_moisture", -0.1),
            ("epsilon", 0.0),
            ("eta_blower", 1.2),
            ("m_dot_cool", -0.1),
            ("b0", -1e-7),
        ],
    )
    def test_out_of_bounds_is_error(self, field, value):
        report = validate_model_inputs(ModelInputs.from_defaults(**{field: value}))
        assert not report.is_valid
        assert field in [e.field for e in report.errors]

    def test_zero_flows_are_allowed(self):
        report = validate_model_inputs(ModelInputs.from_defaults(m_dot_purge=0.0, m_dot_cool=0.0))
        assert report.is_valid

    def test_manual_heat_checked_only_with_override(self):
        assert validate_model_inputs(ModelInputs.from_defaults(Q_dot_manual=0.0)).is_valid
        report = validate_model_inputs(
            ModelInputs.from_defaults(use_Q_override=True, Q_dot_manual=0.0)
        )
        assert [e.field for e in report.errors] == ["Q_dot_manual"]

    def test_no_temperature_swing_warns(self):
        report = validate_model_inputs(ModelInputs.from_defaults(T_reg=300.0))
        assert report.is_valid
        assert "T_reg" in [w.field for w in report.warnings]

    def test_hot_coolant_warns(self):
        report = validate_model_inputs(ModelInputs.from_defaults(T_cool_in=330.0))
        assert [w.field for w in report.warnings] == ["T_cool_in"]

    def test_regeneration_above_exchanger_limit_warns(self):
        report = validate_model_inputs(ModelInputs.from_defaults(T_reg=760.0))
        assert report.is_valid
        assert any("heat-exchanger limit" in w.message for w in report.warnings)

    def test_regeneration_at_exchanger_limit_is_clean(self):
        """T_reg equal to the ceiling is feasible and raises no warning."""
        inputs = ModelInputs.from_defaults(T_reg=758.0)
        report = validate_model_inputs(inputs)
        assert not report.has_warnings
        assert compute(inputs).constraints.thermal.ok

    def test_to_dict(self):
        report = validate_model_inputs(ModelInputs.from_defaults(y_CO2=1.5))
        d = report.to_dict()
        assert d["is_valid"] is False
        assert d["errors"][0]["field"] == "y_CO2"


class TestFormatValidationErrors:
    """Tests for error formatting."""

    def test_format_with_errors(self):
        report = ValidationReport(
            is_valid=False,
            errors=[
                ValidationResult(
                    False, ValidationLevel.ERROR, "Test error", "field", suggestion="Fix it"
                )
            ],
            warnings=[],
            info=[],
        )
        formatted = format_validation_errors(report)
        assert formatted.startswith("Errors:")
        assert "- Test error" in formatted
        assert "hint: Fix it" in formatted

    def test_format_with_warnings(self):
        report = validate_model_inputs(ModelInputs.from_defaults(T_cool_in=330.0))
        formatted = format_validation_errors(report)
        assert "Warnings:" in formatted
        assert "Errors:" not in formatted

    def test_format_clean(self):
        report = validate_model_inputs(ModelInputs.from_defaults())
        assert format_validation_errors(report) == "All validations passed"
