# irr_calc/finance/irr.py
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, NamedTuple, Optional, Sequence, Tuple

import numpy as np

DEFAULT_GUESS = 0.10
DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_TOLERANCE = 0.0001


class NPVEvaluation(NamedTuple):
    npv: float
    derivative: float


class IRRStatus(str, Enum):
    CONVERGED = "converged"
    NOT_CONVERGED = "not_converged"
    DEGENERATE_DERIVATIVE = "degenerate_derivative"
    DIVERGED_OR_INVALID_RATE = "diverged_or_invalid_rate"
    NO_SIGN_CHANGE = "no_sign_change"


# Statuses that still carry a usable rate
_RATE_STATUSES = (IRRStatus.CONVERGED, IRRStatus.NOT_CONVERGED)


@dataclass(frozen=True)
class IRRResult:
    """
    Outcome of one IRR solve.

    `rate` is populated for CONVERGED and NOT_CONVERGED (best estimate when
    the iteration cap was hit); every other status is a hard failure and
    leaves it as None.
    """

    status: IRRStatus
    rate: Optional[float] = None
    iterations: int = 0
    reason: str = ""

    @classmethod
    def success(cls, rate: float, iterations: int, *, converged: bool = True) -> "IRRResult":
        if converged:
            return cls(IRRStatus.CONVERGED, float(rate), iterations)
        return cls(
            IRRStatus.NOT_CONVERGED,
            float(rate),
            iterations,
            f"tolerance not met after {iterations} iterations; returning last estimate",
        )

    @classmethod
    def failure(cls, status: IRRStatus, reason: str, iterations: int = 0) -> "IRRResult":
        if status in _RATE_STATUSES:
            raise ValueError(f"{status.value} is not a failure status")
        return cls(status, None, iterations, reason)

    @property
    def ok(self) -> bool:
        return self.status in _RATE_STATUSES

    @property
    def converged(self) -> bool:
        return self.status is IRRStatus.CONVERGED

    def as_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "rate": self.rate,
            "converged": self.converged,
            "iterations": self.iterations,
            "reason": self.reason,
        }


# ---------- NPV ----------
def evaluate_npv(rate: float, flows: Iterable[float]) -> NPVEvaluation:
    """
    Net present value and its first derivative with respect to rate:
        NPV(r)  = sum_{t=0..N}  CF[t] / (1+r)^t
        NPV'(r) = sum_{t=0..N} -t * CF[t] / (1+r)^(t+1)

    Never raises on numeric input. A discount factor that is zero (rate == -1)
    or underflows to zero comes back as inf/nan for the caller to inspect.
    """
    cfs = np.asarray([float(cf) for cf in flows], dtype=np.float64)
    if cfs.size == 0:
        return NPVEvaluation(0.0, 0.0)

    base = 1.0 + float(rate)
    t = np.arange(cfs.size, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        factors = np.power(base, t)
        value = np.sum(cfs / factors)
        # t=0 contributes nothing to the slope, even when base is 0
        slope = np.sum(-t[1:] * cfs[1:] / (factors[1:] * base))
    return NPVEvaluation(float(value), float(slope))


def npv(rate: float, cashflows: Iterable[float]) -> float:
    """Discounted sum only; see evaluate_npv."""
    return evaluate_npv(rate, cashflows).npv


# ---------- IRR (Newton-Raphson) ----------
def _sign_changes(cashflows: Sequence[float]) -> bool:
    has_pos = any(cf > 0 for cf in cashflows)
    has_neg = any(cf < 0 for cf in cashflows)
    return has_pos and has_neg


def _newton_steps(
    cashflows: Sequence[float], guess: float
) -> Iterator[Tuple[float, float, NPVEvaluation]]:
    """Yield (rate, next_rate, evaluation) for each Newton step from `guess`."""
    rate = guess
    while True:
        ev = evaluate_npv(rate, cashflows)
        if ev.derivative == 0.0 or not math.isfinite(ev.derivative):
            nxt = math.nan
        else:
            nxt = rate - ev.npv / ev.derivative
        yield rate, nxt, ev
        rate = nxt


def solve(
    cashflows: Iterable[float],
    initial_guess: float = DEFAULT_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> IRRResult:
    """
    Periodic IRR by Newton-Raphson on NPV(r) = 0.

    Stops when two successive estimates differ by less than `tolerance`.
    Hitting `max_iterations` is not fatal: the last estimate comes back with
    status NOT_CONVERGED. Numeric breakdowns (zero slope, rate <= -100%,
    non-finite NPV) and series without a sign change are reported as typed
    failures instead of NaN.
    """
    if int(max_iterations) < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
    if not (tolerance > 0 and math.isfinite(tolerance)):
        raise ValueError(f"tolerance must be a positive finite number, got {tolerance}")
    if not math.isfinite(initial_guess):
        raise ValueError(f"initial_guess must be finite, got {initial_guess}")

    cfs = [float(x) for x in cashflows]
    if len(cfs) < 2:
        return IRRResult.failure(
            IRRStatus.DEGENERATE_DERIVATIVE,
            "at least two cash flows are required; NPV does not depend on the rate",
        )
    if not _sign_changes(cfs):
        return IRRResult.failure(
            IRRStatus.NO_SIGN_CHANGE,
            "cash flows never change sign, so no IRR exists",
        )

    steps = _newton_steps(cfs, float(initial_guess))
    last = float(initial_guess)
    for i in range(1, int(max_iterations) + 1):
        rate, nxt, ev = next(steps)
        if rate <= -1.0 or not math.isfinite(ev.npv):
            return IRRResult.failure(
                IRRStatus.DIVERGED_OR_INVALID_RATE,
                f"rate {rate:.6g} leaves the discount factor undefined",
                i,
            )
        if ev.derivative == 0.0 or not math.isfinite(ev.derivative):
            return IRRResult.failure(
                IRRStatus.DEGENERATE_DERIVATIVE,
                f"NPV slope is {ev.derivative} at rate {rate:.6g}",
                i,
            )
        if not math.isfinite(nxt):
            return IRRResult.failure(
                IRRStatus.DIVERGED_OR_INVALID_RATE,
                f"Newton step from rate {rate:.6g} is not finite",
                i,
            )
        if abs(nxt - rate) < tolerance:
            return IRRResult.success(nxt, i)
        last = nxt
    return IRRResult.success(last, int(max_iterations), converged=False)


def irr(
    cashflows: Iterable[float],
    initial_guess: float = DEFAULT_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Optional[float]:
    """
    Decimal rate (0.18 = 18%) or None when the solve fails outright.
    A NOT_CONVERGED best estimate is still returned.
    """
    return solve(cashflows, initial_guess, max_iterations, tolerance).rate


def compute_irr(
    initial_investment: float,
    cash_flows: Iterable[float],
    *,
    initial_guess: float = DEFAULT_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> IRRResult:
    """IRR of [initial_investment, *cash_flows]."""
    cfs = [float(initial_investment)]
    cfs.extend(float(cf) for cf in cash_flows)
    return solve(cfs, initial_guess, max_iterations, tolerance)
