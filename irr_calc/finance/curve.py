# irr_calc/finance/curve.py
"""
NPV-vs-discount-rate sweep for charting.

Thin loop over finance.irr.evaluate_npv; recomputed from scratch per call.
"""
from __future__ import annotations

import math
from typing import Iterable, List, NamedTuple

import pandas as pd

from .irr import evaluate_npv

DEFAULT_RATE_MIN = -0.5
DEFAULT_RATE_MAX = 0.5
DEFAULT_RATE_STEP = 0.01

MAX_CURVE_POINTS = 100_000


class CurvePoint(NamedTuple):
    rate: float
    npv: float


def curve_point_count(rate_min: float, rate_max: float, step: float) -> float:
    """Number of samples rate_grid would produce; inf when the span overflows."""
    span = (rate_max - rate_min) / step
    if not math.isfinite(span):
        return math.inf
    return math.floor(span + 1e-9) + 1


def rate_grid(rate_min: float, rate_max: float, step: float) -> List[float]:
    """
    Inclusive grid rate_min, rate_min+step, ... <= rate_max.
    Built from the index, not by repeated addition, so -0.5..0.5 by 0.01
    is exactly 101 points. At most MAX_CURVE_POINTS samples.
    """
    if not (step > 0 and math.isfinite(step)):
        raise ValueError(f"step must be a positive finite number, got {step}")
    if not (math.isfinite(rate_min) and math.isfinite(rate_max)):
        raise ValueError("rate range bounds must be finite")
    if rate_min > rate_max:
        raise ValueError(f"rate_min {rate_min} is above rate_max {rate_max}")
    count = curve_point_count(rate_min, rate_max, step)
    if count > MAX_CURVE_POINTS:
        raise ValueError(f"rate grid would need {count} points, more than {MAX_CURVE_POINTS}; widen the step")
    return [rate_min + i * step for i in range(int(count))]


def sweep(
    flows: Iterable[float],
    rate_min: float = DEFAULT_RATE_MIN,
    rate_max: float = DEFAULT_RATE_MAX,
    step: float = DEFAULT_RATE_STEP,
) -> List[CurvePoint]:
    cfs = [float(cf) for cf in flows]
    return [CurvePoint(r, evaluate_npv(r, cfs).npv) for r in rate_grid(rate_min, rate_max, step)]


def compute_npv_curve(
    initial_investment: float,
    cash_flows: Iterable[float],
    rate_min: float = DEFAULT_RATE_MIN,
    rate_max: float = DEFAULT_RATE_MAX,
    rate_step: float = DEFAULT_RATE_STEP,
) -> List[CurvePoint]:
    cfs = [float(initial_investment)]
    cfs.extend(float(cf) for cf in cash_flows)
    return sweep(cfs, rate_min, rate_max, rate_step)


def zero_crossings(points: Iterable[CurvePoint]) -> List[float]:
    """
    Break-even rates where the sampled curve changes sign, linearly
    interpolated between neighbouring samples. Non-finite samples break
    the chain.
    """
    out: List[float] = []
    prev = None
    for p in points:
        if not math.isfinite(p.npv):
            prev = None
            continue
        if p.npv == 0.0:
            out.append(p.rate)
        elif prev is not None and prev.npv != 0.0 and (prev.npv < 0) != (p.npv < 0):
            frac = prev.npv / (prev.npv - p.npv)
            out.append(prev.rate + frac * (p.rate - prev.rate))
        prev = p
    return out


def curve_frame(points: Iterable[CurvePoint]) -> pd.DataFrame:
    """Chart-ready frame: rate, rate_pct (one decimal), npv (whole currency units)."""
    df = pd.DataFrame(list(points), columns=["rate", "npv"])
    df["rate_pct"] = (df["rate"] * 100.0).round(1)
    df["npv_display"] = df["npv"].round(0)
    return df[["rate", "rate_pct", "npv", "npv_display"]]
