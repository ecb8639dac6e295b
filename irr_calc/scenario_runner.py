# irr_calc/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, List, Optional
import math
import os
import json

import pandas as pd

from .validate import (
    iter_input_files,
    load_params_from_file,
    mode_from_env_or_flag,
    validate_params_dict,
)
from .adapters import run_irr
from .finance.curve import CurvePoint, curve_frame

# Summary keys written to summary.json; the bulky series go to their own files.
SERIES_KEYS = ("curve", "timeline")


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    curve_path: Optional[Path] = None
    timeline_path: Optional[Path] = None


def _write_frame(path: Path, df: pd.DataFrame, fmt: str) -> None:
    if fmt == "jsonl":
        if df.empty:
            path.write_text("", encoding="utf-8")
        else:
            df.to_json(path, orient="records", lines=True)
    elif fmt == "csv":
        df.to_csv(path, index=False)
    else:
        raise SystemExit(f"unknown fmt: {fmt}")


def _curve_table(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    # Summary rows carry None for undefined NPV; the frame wants NaN
    points = [CurvePoint(r["rate"], math.nan if r["npv"] is None else r["npv"]) for r in rows]
    return curve_frame(points)


def validate_and_run(params: Dict[str, Any], *, mode: Optional[str] = None) -> Dict[str, Any]:
    validate_params_dict(params, mode=mode_from_env_or_flag(mode))
    return run_irr(params)


def run_file(
    cfg_path: str | Path,
    out_dir: str | Path,
    *,
    fmt: str = "jsonl",
    save_curve: bool = False,
    mode: Optional[str] = None,
) -> RunResult:
    cfg_path = Path(cfg_path)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    params = load_params_from_file(cfg_path)
    params.setdefault("name", cfg_path.stem)
    full = validate_and_run(params, mode=mode)

    summary = {k: v for k, v in full.items() if k not in SERIES_KEYS}
    summary_path = out / f"{cfg_path.stem}_summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")

    curve_path: Optional[Path] = None
    timeline_path: Optional[Path] = None
    if save_curve:
        curve_path = out / f"{cfg_path.stem}_curve.{fmt}"
        _write_frame(curve_path, _curve_table(full["curve"]), fmt)
        timeline_path = out / f"{cfg_path.stem}_timeline.{fmt}"
        _write_frame(timeline_path, pd.DataFrame(full["timeline"]), fmt)

    return RunResult(
        summary=summary,
        summary_path=summary_path,
        curve_path=curve_path,
        timeline_path=timeline_path,
    )


def run_dir(
    config: str | Path,
    out_dir: str | Path,
    *,
    fmt: str = "jsonl",
    save_curve: bool = False,
    mode: Optional[str] = None,
) -> RunResult | Dict[str, RunResult]:
    """
    Run a single input file, or every YAML/JSON file in a directory.
    A directory returns {file name: RunResult}; validation failures raise SystemExit.
    """
    if fmt not in ("csv", "jsonl"):
        raise SystemExit(f"unknown fmt: {fmt}")

    cfg_path = Path(config)
    if not cfg_path.exists():
        raise SystemExit(f"{cfg_path}: no such file or directory")
    if cfg_path.is_file():
        return run_file(cfg_path, out_dir, fmt=fmt, save_curve=save_curve, mode=mode)

    results: Dict[str, RunResult] = {}
    for f in iter_input_files(cfg_path):
        results[f.name] = run_file(f, out_dir, fmt=fmt, save_curve=save_curve, mode=mode)
    if not results:
        raise SystemExit(f"{cfg_path}: no scenario files found")

    index = [dict(file=name, **{k: r.summary.get(k) for k in ("irr", "status", "converged")})
             for name, r in results.items()]
    (Path(out_dir) / "index.json").write_text(json.dumps(index, indent=2), encoding="utf-8")
    return results


def default_outputs_dir() -> Path:
    return Path(os.getenv("IRR_CALC_OUTPUTS", "outputs"))
