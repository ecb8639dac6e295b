"""
Finance metrics façade.

Design:
- IRR/NPV implementations live only in irr_calc.finance.irr (singleton).
- This module must not *define* irr/npv (no 'def irr' / 'def npv' here).
- It re-exports the public calculator surface used by adapters and tests.
"""
from .irr import (  # re-exports only
    IRRResult as IRRResult,
    IRRStatus as IRRStatus,
    NPVEvaluation as NPVEvaluation,
    compute_irr as compute_irr,
    evaluate_npv as evaluate_npv,
    irr as irr,
    npv as npv,
    solve as solve,
)
from .curve import CurvePoint as CurvePoint, compute_npv_curve as compute_npv_curve, sweep as sweep

__all__ = [
    "IRRResult",
    "IRRStatus",
    "NPVEvaluation",
    "CurvePoint",
    "compute_irr",
    "compute_npv_curve",
    "evaluate_npv",
    "irr",
    "npv",
    "solve",
    "sweep",
]
