from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List

from irr_calc.finance.irr import IRRResult, IRRStatus

INITIAL_LABEL = "Initial Investment"
INFLOW_LABEL = "Cash Inflow"

_FAILURE_MESSAGES = {
    IRRStatus.NO_SIGN_CHANGE: "IRR undefined: cash flows never change sign",
    IRRStatus.DEGENERATE_DERIVATIVE: "IRR undefined: add at least one cash flow after the initial investment",
    IRRStatus.DIVERGED_OR_INVALID_RATE: "IRR not found: iteration left the valid rate range (below -100%)",
}
# Slope hit zero at some Newton step, so the series itself was fine
_FLAT_SLOPE_MESSAGE = "IRR not found: NPV slope vanished during iteration; try another initial guess"


def _as_float(v: Any, where: str) -> float:
    try:
        x = float(v)
    except (TypeError, ValueError):
        raise ValueError(f"{where}: not a number: {v!r}") from None
    if not math.isfinite(x):
        raise ValueError(f"{where}: must be finite, got {v!r}")
    return x


def build_flows(initial_investment: float, cash_flows: Iterable[Any]) -> List[float]:
    """
    CashFlowSeries: [initial_investment] + [flow for years 1..N].
    The outlay is taken as given (normally negative).
    """
    out: List[float] = [_as_float(initial_investment, "initial_investment")]
    out.extend(_as_float(cf, f"cash_flows[{i}]") for i, cf in enumerate(cash_flows))
    return out


def timeline(initial_investment: float, cash_flows: Iterable[Any]) -> List[Dict[str, Any]]:
    """Rows for a per-year cash-flow bar chart; year 0 is the outlay."""
    flows = build_flows(initial_investment, cash_flows)
    return [
        {"year": t, "cash_flow": cf, "type": INITIAL_LABEL if t == 0 else INFLOW_LABEL}
        for t, cf in enumerate(flows)
    ]


def format_rate(result: IRRResult) -> str:
    """'21.47%' for a usable rate; a plain message otherwise (never 'nan%')."""
    if result.ok and result.rate is not None and math.isfinite(result.rate):
        text = f"{result.rate * 100.0:.2f}%"
        if not result.converged:
            text += " (not converged)"
        return text
    if result.status is IRRStatus.DEGENERATE_DERIVATIVE and result.iterations > 0:
        return _FLAT_SLOPE_MESSAGE
    return _FAILURE_MESSAGES.get(result.status, f"IRR unavailable: {result.reason}")
