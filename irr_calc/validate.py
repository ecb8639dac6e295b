# irr_calc/validate.py
from __future__ import annotations
import os, sys, json
from pathlib import Path
from typing import Any, Dict, Iterable, List
import yaml

from .schema import SCHEMA, SECTIONS, INPUT_KEYS, COMPOSITE_CONSTRAINTS
from .config import flatten_grouped

def mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"

def _is_number(v: Any) -> bool:
    if isinstance(v, bool):
        return False
    try:
        float(v)
    except (TypeError, ValueError):
        return False
    return True

def validate_params_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> None:
    """
    Guardrails on a raw calculator document:
      - both modes: require {initial_investment, cash_flows} with numeric
                    entries, numeric settings, and settings the solver and
                    curve can run with (COMPOSITE_CONSTRAINTS)
      - strict    : also reject unknown keys, out-of-range settings and
                    a series with nothing after the initial investment
    """
    missing = [k for k in ("initial_investment", "cash_flows") if k not in data]
    if missing:
        raise SystemExit(f"missing required keys: {missing}")

    if not _is_number(data["initial_investment"]):
        raise SystemExit(f"initial_investment must be a number, got {data['initial_investment']!r}")
    flows = data["cash_flows"]
    if not isinstance(flows, list):
        raise SystemExit("cash_flows must be a list of numbers")
    bad = [i for i, cf in enumerate(flows) if not _is_number(cf)]
    if bad:
        raise SystemExit(f"cash_flows entries are not numbers at positions {bad}")

    flat = flatten_grouped(data)
    for k in SCHEMA:
        if k in flat and not _is_number(flat[k]):
            raise SystemExit(f"{k} must be a number, got {flat[k]!r}")
    for c in COMPOSITE_CONSTRAINTS:
        if not c["check"](flat):
            raise SystemExit(f"{c['name']}: {c['message']}")

    if mode != "strict":
        return

    allowed = set(INPUT_KEYS) | set(SECTIONS) | set(SCHEMA)
    unknown = [k for k in data.keys() if k not in allowed]
    for section in SECTIONS:
        sub = data.get(section)
        if sub is None:
            continue
        if not isinstance(sub, dict):
            raise SystemExit(f"{section} must be a mapping")
        unknown += [f"{section}.{k}" for k in sub.keys() if k not in SCHEMA]
    if unknown:
        raise SystemExit(f"unknown keys (strict mode): {unknown}")

    if not flows:
        raise SystemExit("strict mode requires at least one cash flow after the initial investment")

    for k, bounds in SCHEMA.items():
        if k not in flat:
            continue
        v = float(flat[k])
        lo, hi = float(bounds["min"]), float(bounds["max"])
        if not (lo <= v <= hi):
            raise SystemExit(f"{k} outside allowed range [{lo}, {hi}]: {v}")

def load_params_from_file(path: Path) -> Dict[str, Any]:
    p = Path(path)
    if p.is_dir():
        # scenario_runner handles directories; keep this function file-only
        raise SystemExit(f"{p} is a directory (expected a file)")
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, dict):
        raise SystemExit(f"{p}: expected a mapping at the top level")
    return data

def iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.glob(ext))

def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="irr_calc.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in iter_input_files(target):
            any_seen = True
            try:
                data = load_params_from_file(f)
                validate_params_dict(data, mode=mode)
                print(f"OK: {f}")
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
            except (OSError, ValueError, yaml.YAMLError) as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0

if __name__ == "__main__":
    raise SystemExit(_main())
