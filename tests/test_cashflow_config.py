import io
import re

import pytest

from irr_calc.config import CalculatorConfig, config_from_dict, dump_config, load_calculator_config
from irr_calc.finance.cashflow import build_flows, format_rate, timeline
from irr_calc.finance.irr import IRRResult, IRRStatus, solve

GROUPED = """\
name: demo
initial_investment: -100000
cash_flows: [25000, 30000, 35000, 40000, 45000]
solver: { tolerance: 0.000001, max_iterations: 50 }
curve: { rate_min: -0.2, rate_max: 0.4, rate_step: 0.05 }
"""


def test_build_flows_prepends_initial_investment():
    assert build_flows(-100, [1, "2", 3.5]) == [-100.0, 1.0, 2.0, 3.5]


@pytest.mark.parametrize("bad", [["x"], [None], [float("nan")], [float("inf")]])
def test_build_flows_rejects_non_numbers(bad):
    with pytest.raises(ValueError):
        build_flows(-100, bad)


def test_timeline_labels_year_zero_as_outlay():
    rows = timeline(-100000, [25000, 30000])
    assert rows == [
        {"year": 0, "cash_flow": -100000.0, "type": "Initial Investment"},
        {"year": 1, "cash_flow": 25000.0, "type": "Cash Inflow"},
        {"year": 2, "cash_flow": 30000.0, "type": "Cash Inflow"},
    ]


def test_format_rate_two_decimals():
    assert format_rate(IRRResult.success(0.1, 1)) == "10.00%"
    text = format_rate(solve([-100000, 25000, 30000, 35000, 40000, 45000]))
    assert re.fullmatch(r"\d+\.\d{2}%", text)


def test_format_rate_flags_non_converged_estimate():
    assert format_rate(IRRResult.success(0.1234, 1000, converged=False)) == "12.34% (not converged)"


@pytest.mark.parametrize(
    "status",
    [IRRStatus.NO_SIGN_CHANGE, IRRStatus.DEGENERATE_DERIVATIVE, IRRStatus.DIVERGED_OR_INVALID_RATE],
)
def test_format_rate_failures_never_show_nan(status):
    text = format_rate(IRRResult.failure(status, "why"))
    assert "nan" not in text.lower()
    assert "%" not in text or "-100%" in text


def test_format_rate_slope_vanishing_mid_iteration_is_not_blamed_on_inputs():
    res = solve([-1.0, 2.0, -1.0], initial_guess=0.0)
    assert res.status is IRRStatus.DEGENERATE_DERIVATIVE
    text = format_rate(res)
    assert "slope vanished" in text
    assert "add at least one cash flow" not in text
    assert "add at least one cash flow" in format_rate(solve([-100.0]))


def test_load_grouped_yaml_flattens_sections():
    cfg = load_calculator_config(io.StringIO(GROUPED))
    assert cfg.name == "demo"
    assert cfg.initial_investment == -100000.0
    assert cfg.cash_flows == [25000.0, 30000.0, 35000.0, 40000.0, 45000.0]
    assert cfg.tolerance == 1e-6
    assert cfg.max_iterations == 50
    assert (cfg.rate_min, cfg.rate_max, cfg.rate_step) == (-0.2, 0.4, 0.05)
    assert cfg.initial_guess == 0.10
    assert cfg.flows()[0] == -100000.0


def test_load_from_path(tmp_path):
    p = tmp_path / "in.yaml"
    p.write_text("initial_investment: -10\ncash_flows: [11]\n", encoding="utf-8")
    cfg = load_calculator_config(p)
    assert cfg.flows() == [-10.0, 11.0]
    assert cfg.rate_step == 0.01


def test_json_document_is_accepted():
    cfg = load_calculator_config(io.StringIO('{"initial_investment": -5, "cash_flows": [6]}'))
    assert cfg.flows() == [-5.0, 6.0]


def test_missing_initial_investment_raises():
    with pytest.raises(ValueError, match="initial_investment"):
        config_from_dict({"cash_flows": [1, 2]})


def test_malformed_yaml_raises_value_error():
    with pytest.raises(ValueError):
        load_calculator_config(io.StringIO("cash_flows: [1, 2\n"))


def test_dump_config_reads_back():
    cfg = CalculatorConfig(initial_investment=-50.0, cash_flows=[20.0, 40.0], name="rt", tolerance=1e-5)
    assert load_calculator_config(io.StringIO(dump_config(cfg))) == cfg
