"""IRR calculator: Newton-Raphson IRR, NPV evaluation and NPV-vs-rate curves."""
from .finance.metrics import (
    CurvePoint,
    IRRResult,
    IRRStatus,
    NPVEvaluation,
    compute_irr,
    compute_npv_curve,
    evaluate_npv,
)

__version__ = "0.1.0"

__all__ = [
    "CurvePoint",
    "IRRResult",
    "IRRStatus",
    "NPVEvaluation",
    "compute_irr",
    "compute_npv_curve",
    "evaluate_npv",
]
