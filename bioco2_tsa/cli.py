# cli.py
"""
Command-line evaluation of a single design point.

    bioco2-tsa                                # reference design point
    bioco2-tsa --set T_reg=453 --set N_bed=6  # overrides
    bioco2-tsa --q-override 120 --json        # manual heat, JSON summary

Exit status: 0 on success, 1 if the computation fails, 2 for bad arguments.
"""

import argparse
import json
import logging
import math
from collections.abc import Sequence
from typing import Any

import pandas as pd

from .config import DEFAULT_INPUTS
from .data_model import ModelInputs
from .engine import try_compute
from .reporting import (
    cycle_timing_table,
    detect_design_issues,
    energy_breakdown,
    energy_closure_summary,
    thermal_demand_summary,
)
from .validation import format_validation_errors, validate_model_inputs

logger = logging.getLogger(__name__)

# Headline figures printed in the summary, in display order: (label, field)
SUMMARY_FIELDS: tuple[tuple[str, str], ...] = (
    ("CO2 captured (t/day)", "CO2_tpd"),
    ("Specific energy (kWh/t)", "kWh_per_ton"),
    ("Cycle time (s)", "t_cycle_effective"),
    ("Binding constraint", "binding_constraint"),
    ("Working capacity (mol/kg)", "Delta_q"),
    ("Heat available (kW)", "Q_dot_avail"),
    ("Regeneration heat (MJ/cycle)", "Q_total"),
    ("Bed D x L (m)", "D"),
    ("Pressure drop (Pa)", "DeltaP"),
    ("Blower power (kW)", "electrical_kW"),
)


def _parse_assignment(text: str) -> tuple[str, Any]:
    """Parse ``FIELD=VALUE`` into a typed pair for ModelInputs."""
    field, sep, raw = text.partition("=")
    field = field.strip()
    if not sep or not field:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {text!r}")
    if field not in DEFAULT_INPUTS:
        raise argparse.ArgumentTypeError(f"unknown input field {field!r}")

    raw = raw.strip()
    if isinstance(DEFAULT_INPUTS[field], bool):
        if raw.lower() not in ("true", "false", "1", "0", "yes", "no"):
            raise argparse.ArgumentTypeError(f"{field} expects true/false, got {raw!r}")
        return field, raw.lower() in ("true", "1", "yes")
    try:
        value: Any = int(raw) if isinstance(DEFAULT_INPUTS[field], int) else float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{field} expects a number, got {raw!r}") from None
    return field, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bioco2-tsa",
        description="Steady-cycle performance of a BioCHP-driven TSA CO2 capture skid.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="FIELD=VALUE",
        action="append",
        type=_parse_assignment,
        default=[],
        help="override one input of the reference design point (repeatable)",
    )
    parser.add_argument(
        "--q-override",
        type=float,
        metavar="KW",
        help="use a manual regeneration heat supply instead of the exchanger balance",
    )
    parser.add_argument("--json", action="store_true", help="print the summary as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def _json_value(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return getattr(value, "value", value)


def run(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, evaluate the design point and print the report."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    overrides = dict(args.overrides)
    if args.q_override is not None:
        overrides.update(use_Q_override=True, Q_dot_manual=args.q_override)

    inputs = ModelInputs.from_defaults(**overrides)
    report = validate_model_inputs(inputs)

    result = try_compute(inputs)
    if not result.success:
        print(f"Model error: {result.error}")
        return 1
    outputs = result.outputs
    issues = detect_design_issues(inputs, outputs)

    if args.json:
        payload = {
            "summary": {field: _json_value(getattr(outputs, field)) for _, field in SUMMARY_FIELDS},
            "thermal_demand": {k: _json_value(v) for k, v in thermal_demand_summary(outputs).items()},
            "energy_closure": {k: _json_value(v) for k, v in energy_closure_summary(outputs).items()},
            "validation": report.to_dict(),
            "issues": issues,
        }
        print(json.dumps(payload, indent=2))
        return 0

    if report.errors or report.has_warnings:
        print(format_validation_errors(report))
        print()

    summary = pd.Series(
        {label: _json_value(getattr(outputs, field)) for label, field in SUMMARY_FIELDS}
    )
    summary["Bed D x L (m)"] = f"{outputs.D:.3f} x {outputs.L:.3f}"
    print(summary.to_string())
    print()
    print(energy_breakdown(outputs).to_string(index=False, float_format="{:.2f}".format))
    print()
    print(cycle_timing_table(outputs).to_string(index=False, float_format="{:.1f}".format))

    for issue in issues:
        print(f"\n[{issue['severity']}] {issue['type']}: {issue['message']}")
        print(f"  -> {issue['recommendation']}")
    return 0
