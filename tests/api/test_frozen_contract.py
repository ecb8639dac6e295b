import importlib
import inspect


def _param_names(fn):
    return [p.name for p in inspect.signature(fn).parameters.values()]


def test_package_exposes_calculator_surface():
    m = importlib.import_module("irr_calc")
    for name in ("compute_irr", "compute_npv_curve", "evaluate_npv", "IRRResult", "IRRStatus", "CurvePoint"):
        assert hasattr(m, name), f"irr_calc is missing {name}"


def test_entrypoint_signatures_are_stable():
    m = importlib.import_module("irr_calc")
    assert _param_names(m.compute_irr)[:2] == ["initial_investment", "cash_flows"]
    assert _param_names(m.compute_npv_curve) == [
        "initial_investment", "cash_flows", "rate_min", "rate_max", "rate_step",
    ]
    assert _param_names(m.evaluate_npv) == ["rate", "flows"]


def test_solver_defaults_are_stable():
    irr = importlib.import_module("irr_calc.finance.irr")
    sig = inspect.signature(irr.solve)
    assert sig.parameters["initial_guess"].default == 0.10
    assert sig.parameters["max_iterations"].default == 1000
    assert sig.parameters["tolerance"].default == 0.0001


def test_status_values_are_stable():
    irr = importlib.import_module("irr_calc.finance.irr")
    assert {s.value for s in irr.IRRStatus} == {
        "converged", "not_converged", "degenerate_derivative",
        "diverged_or_invalid_rate", "no_sign_change",
    }


def test_metrics_facade_only_reexports():
    metrics = importlib.import_module("irr_calc.finance.metrics")
    irr = importlib.import_module("irr_calc.finance.irr")
    assert metrics.irr is irr.irr
    assert metrics.npv is irr.npv
    assert metrics.solve is irr.solve


def test_validate_exports_are_stable():
    v = importlib.import_module("irr_calc.validate")
    for name in ("validate_params_dict", "load_params_from_file"):
        obj = getattr(v, name, None)
        assert callable(obj), f"Missing or non-callable export: {name}"


def test_adapters_run_irr_result_shape():
    a = importlib.import_module("irr_calc.adapters")
    res = a.run_irr({"initial_investment": -1.0, "cash_flows": [1.5]})
    assert isinstance(res, dict)
    for k in ("irr", "irr_pct", "status", "converged", "npv_at_irr", "reference_irr", "curve", "timeline"):
        assert k in res
