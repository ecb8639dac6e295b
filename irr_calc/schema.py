from __future__ import annotations
import math
from typing import Dict, Any

from .finance.curve import MAX_CURVE_POINTS, curve_point_count

# Setting schema: units, type, min/max ranges, and description.
SCHEMA: Dict[str, Dict[str, Any]] = {
    "initial_guess":  {"unit": "fraction", "type": "float", "min": -0.99,  "max": 10.0,    "desc": "Newton-Raphson starting rate"},
    "max_iterations": {"unit": "count",    "type": "int",   "min": 1,      "max": 100000,  "desc": "Iteration cap before returning the last estimate"},
    "tolerance":      {"unit": "fraction", "type": "float", "min": 1e-12,  "max": 0.1,     "desc": "Stop when successive rates differ by less than this"},
    "rate_min":       {"unit": "fraction", "type": "float", "min": -0.99,  "max": 10.0,    "desc": "Lowest discount rate on the NPV curve"},
    "rate_max":       {"unit": "fraction", "type": "float", "min": -0.99,  "max": 10.0,    "desc": "Highest discount rate on the NPV curve"},
    "rate_step":      {"unit": "fraction", "type": "float", "min": 1e-6,   "max": 1.0,     "desc": "Spacing between NPV curve samples"},
}

DEFAULTS: Dict[str, Any] = {
    "initial_guess": 0.10,
    "max_iterations": 1000,
    "tolerance": 0.0001,
    "rate_min": -0.5,
    "rate_max": 0.5,
    "rate_step": 0.01,
}

# Sections whose keys are settings; everything in them is flattened to one level.
SECTIONS = ("solver", "curve")

# Input keys that are not settings.
INPUT_KEYS = ("name", "initial_investment", "cash_flows")

def _f(p: Dict[str, Any], key: str) -> float:
    return float(p.get(key, DEFAULTS[key]))


def _finite(p: Dict[str, Any], key: str) -> bool:
    return math.isfinite(_f(p, key))


# Composite constraints evaluated after the numeric type checks, in every
# validation mode; the first failing entry is reported.
COMPOSITE_CONSTRAINTS = [
    {
        "name": "solver_tolerance_positive",
        "check": lambda p: _finite(p, "tolerance") and _f(p, "tolerance") > 0,
        "message": "tolerance must be a positive finite number.",
    },
    {
        "name": "solver_iterations_positive",
        "check": lambda p: _finite(p, "max_iterations") and _f(p, "max_iterations") >= 1,
        "message": "max_iterations must be at least 1.",
    },
    {
        "name": "solver_guess_finite",
        "check": lambda p: _finite(p, "initial_guess"),
        "message": "initial_guess must be finite.",
    },
    {
        "name": "curve_step_positive",
        "check": lambda p: _finite(p, "rate_step") and _f(p, "rate_step") > 0,
        "message": "rate_step must be a positive finite number.",
    },
    {
        "name": "curve_range_ordered",
        "check": lambda p: _finite(p, "rate_min") and _finite(p, "rate_max") and _f(p, "rate_min") <= _f(p, "rate_max"),
        "message": "rate_min must not exceed rate_max.",
    },
    {
        "name": "curve_points_bounded",
        "check": lambda p: curve_point_count(_f(p, "rate_min"), _f(p, "rate_max"), _f(p, "rate_step")) <= MAX_CURVE_POINTS,
        "message": f"NPV curve would exceed {MAX_CURVE_POINTS} points; widen rate_step.",
    },
]
