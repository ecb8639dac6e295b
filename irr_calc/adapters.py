# irr_calc/adapters.py
from __future__ import annotations

import math
import warnings
from typing import Any, Dict, List, Optional

import numpy_financial as npf

from irr_calc.config import CalculatorConfig, config_from_dict
from irr_calc.finance.cashflow import format_rate, timeline
from irr_calc.finance.curve import sweep, zero_crossings
from irr_calc.finance.metrics import evaluate_npv, solve


# ------------------------------
# Small helpers (no policy here)
# ------------------------------
def _finite_or_none(v: Any) -> Optional[float]:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    return x if math.isfinite(x) else None


def reference_irr(flows: List[float]) -> Optional[float]:
    """
    numpy-financial's IRR on the same series, for side-by-side comparison.
    None when it cannot produce a finite rate.
    """
    if len(flows) < 2:
        return None
    return _finite_or_none(npf.irr(flows))


# ------------------------------
# Public adapter(s)
# ------------------------------
def run_irr(params: Dict[str, Any] | CalculatorConfig) -> Dict[str, Any]:
    """
    One calculation, recomputed from scratch:
      1) Assemble the CashFlowSeries (initial investment at t=0).
      2) Solve IRR by Newton-Raphson.
      3) Sweep NPV over the configured rate range.

    Returns:
      {
        'name': str,
        'irr': float|None, 'irr_pct': str, 'status': str, 'converged': bool,
        'iterations': int, 'reason': str,
        'npv_at_irr': float|None,
        'reference_irr': float|None,   # numpy-financial, for comparison
        'n_periods': int,
        'break_even_rates': [float, ...],
        'curve': [{'rate': float, 'npv': float|None}, ...],
        'timeline': [{'year': int, 'cash_flow': float, 'type': str}, ...],
      }
    """
    cfg = params if isinstance(params, CalculatorConfig) else config_from_dict(params)
    flows = cfg.flows()

    result = solve(
        flows,
        initial_guess=cfg.initial_guess,
        max_iterations=cfg.max_iterations,
        tolerance=cfg.tolerance,
    )
    if result.ok and not result.converged:
        warnings.warn(f"{cfg.name}: {result.reason}")

    npv_at_irr = evaluate_npv(result.rate, flows).npv if result.rate is not None else None
    points = sweep(flows, cfg.rate_min, cfg.rate_max, cfg.rate_step)

    summary: Dict[str, Any] = {"name": cfg.name}
    summary.update(result.as_dict())
    summary["irr"] = summary.pop("rate")
    summary.update({
        "irr_pct": format_rate(result),
        "npv_at_irr": _finite_or_none(npv_at_irr),
        "reference_irr": reference_irr(flows),
        "n_periods": len(flows) - 1,
        "break_even_rates": zero_crossings(points),
        "curve": [{"rate": p.rate, "npv": _finite_or_none(p.npv)} for p in points],
        "timeline": timeline(cfg.initial_investment, cfg.cash_flows),
    })
    return summary
