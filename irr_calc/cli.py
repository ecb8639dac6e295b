# irr_calc/cli.py
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

# Only imports the thin runner; the math stays behind adapters/finance
from .scenario_runner import RunResult, default_outputs_dir, run_dir, validate_and_run


def _parse_flows(text: str) -> list[float]:
    parts = [s for s in text.replace(";", ",").split(",") if s.strip()]
    try:
        return [float(s) for s in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"--flows expects comma-separated numbers, got {text!r}") from None


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="irr_calc",
        description="Internal Rate of Return calculator (Newton-Raphson) with NPV curve export",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to a single YAML/JSON input, or a directory of inputs.",
    )
    p.add_argument(
        "--initial",
        type=float,
        default=None,
        help="Initial investment (normally negative). Use with --flows instead of --config.",
    )
    p.add_argument(
        "--flows",
        type=_parse_flows,
        default=None,
        help=(
            "Comma-separated cash flows for years 1..N, e.g. 25000,30000,35000. "
            "When the first value is negative, attach it with '=': --flows=-50,200."
        ),
    )
    p.add_argument(
        "--outputs-dir",
        default=None,
        help="Directory to write result files (default: $IRR_CALC_OUTPUTS or outputs).",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for curve/timeline files (default: csv).",
    )
    p.add_argument(
        "--save-curve",
        action="store_true",
        help="If set, write the NPV curve and cash-flow timeline alongside the summary.",
    )
    p.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the summary as JSON instead of a one-line result.",
    )
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (unknown keys and out-of-range settings raise).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (unknown keys ignored).",
    )
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"


def _report(summary: dict, as_json: bool) -> None:
    if as_json:
        print(json.dumps({k: v for k, v in summary.items() if k not in ("curve", "timeline")}, indent=2))
    elif summary.get("irr") is None:
        print(f"{summary.get('name', 'calculation')}: {summary['irr_pct']}")
    else:
        print(f"{summary.get('name', 'calculation')}: IRR {summary['irr_pct']}")


def _exit_code(summaries: list[dict]) -> int:
    # 1 when any calculation produced no usable rate
    return 0 if all(s.get("irr") is not None for s in summaries) else 1


def main(argv: list[str] | None = None) -> int:
    ns = parse_args(argv)
    _apply_validation_mode(ns)

    if ns.config is None and (ns.initial is None or ns.flows is None):
        print("ERROR: provide --config, or both --initial and --flows", file=sys.stderr)
        return 2

    try:
        if ns.config is None:
            summary = validate_and_run(
                {"name": "cli", "initial_investment": ns.initial, "cash_flows": ns.flows}
            )
            _report(summary, ns.as_json)
            return _exit_code([summary])

        outputs_dir = Path(ns.outputs_dir) if ns.outputs_dir else default_outputs_dir()
        res = run_dir(Path(ns.config).resolve(), outputs_dir.resolve(), fmt=ns.fmt, save_curve=ns.save_curve)
    except SystemExit as e:
        # Validation failures surface as SystemExit(message)
        if isinstance(e.code, int):
            return e.code
        print(f"ERROR: {e.code}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    runs = [res] if isinstance(res, RunResult) else list(res.values())
    for r in runs:
        _report(r.summary, ns.as_json)
    return _exit_code([r.summary for r in runs])


__all__ = ["main", "parse_args"]
