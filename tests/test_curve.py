import math

import pytest

from irr_calc.finance.curve import (
    MAX_CURVE_POINTS,
    CurvePoint,
    compute_npv_curve,
    curve_frame,
    rate_grid,
    sweep,
    zero_crossings,
)
from irr_calc.finance.irr import evaluate_npv

PROJECT = [-100000.0, 25000.0, 30000.0, 35000.0, 40000.0, 45000.0]


def test_default_sweep_has_101_points():
    pts = sweep(PROJECT)
    assert len(pts) == 101
    assert pts[0].rate == pytest.approx(-0.5)
    assert pts[-1].rate == pytest.approx(0.5)
    assert pts[50].rate == pytest.approx(0.0, abs=1e-12)


def test_points_match_evaluator():
    for p in sweep(PROJECT, -0.2, 0.2, 0.1):
        assert isinstance(p, CurvePoint)
        assert p.npv == evaluate_npv(p.rate, PROJECT).npv


def test_compute_npv_curve_prepends_outlay():
    a = compute_npv_curve(-100000, PROJECT[1:], -0.5, 0.5, 0.01)
    assert a == sweep(PROJECT)


def test_single_point_range():
    assert rate_grid(0.1, 0.1, 0.05) == [0.1]


@pytest.mark.parametrize(
    "args",
    [(-0.5, 0.5, 0.0), (-0.5, 0.5, -0.01), (0.5, -0.5, 0.01), (-0.5, float("inf"), 0.01)],
)
def test_bad_ranges_raise(args):
    with pytest.raises(ValueError):
        rate_grid(*args)


def test_grid_size_is_capped():
    assert len(rate_grid(0.0, MAX_CURVE_POINTS - 1.0, 1.0)) == MAX_CURVE_POINTS
    with pytest.raises(ValueError, match="points"):
        rate_grid(0.0, float(MAX_CURVE_POINTS), 1.0)
    with pytest.raises(ValueError, match="points"):
        rate_grid(-0.5, 0.5, 1e-9)
    # span overflows to inf
    with pytest.raises(ValueError, match="points"):
        rate_grid(-0.5, 0.5, 5e-324)


def test_minus_one_in_range_does_not_raise():
    pts = sweep([-100.0, 110.0], -1.0, -0.9, 0.05)
    assert len(pts) == 3
    assert not math.isfinite(pts[0].npv)
    assert all(math.isfinite(p.npv) for p in pts[1:])


def test_single_crossing_for_two_equal_inflows():
    pts = compute_npv_curve(-100000, [100000, 100000], -0.5, 1.0, 0.01)
    crossings = zero_crossings(pts)
    assert len(crossings) == 1
    assert crossings[0] == pytest.approx((math.sqrt(5.0) - 1.0) / 2.0, abs=0.01)


def test_no_crossing_inside_default_range_when_irr_outside():
    pts = compute_npv_curve(-100000, [100000, 100000])
    assert zero_crossings(pts) == []


def test_exact_zero_sample_counts_once():
    pts = [CurvePoint(0.0, 5.0), CurvePoint(0.1, 0.0), CurvePoint(0.2, -5.0)]
    assert zero_crossings(pts) == [0.1]


def test_curve_frame_columns_and_display_rounding():
    df = curve_frame(sweep(PROJECT))
    assert list(df.columns) == ["rate", "rate_pct", "npv", "npv_display"]
    assert len(df) == 101
    assert df["rate_pct"].iloc[0] == -50.0
    assert df["npv_display"].iloc[50] == round(sum(PROJECT))
