from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List
import io
import os
import yaml

from .schema import DEFAULTS, SECTIONS
from .finance.cashflow import build_flows


@dataclass(frozen=True)
class CalculatorConfig:
    initial_investment: float
    cash_flows: List[float] = field(default_factory=list)
    name: str = "calculation"
    initial_guess: float = DEFAULTS["initial_guess"]
    max_iterations: int = DEFAULTS["max_iterations"]
    tolerance: float = DEFAULTS["tolerance"]
    rate_min: float = DEFAULTS["rate_min"]
    rate_max: float = DEFAULTS["rate_max"]
    rate_step: float = DEFAULTS["rate_step"]

    def flows(self) -> List[float]:
        """CashFlowSeries with the initial investment at t=0."""
        return build_flows(self.initial_investment, self.cash_flows)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def flatten_grouped(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten the settings groups ('solver', 'curve') into one level.
    Prefers top-level keys if collisions occur.
    """
    flat: Dict[str, Any] = {k: v for k, v in cfg.items() if k not in SECTIONS}
    for k in SECTIONS:
        v = cfg.get(k)
        if isinstance(v, dict):
            for sk, sv in v.items():
                flat.setdefault(sk, sv)
    return flat


def parse_document(text: str) -> Dict[str, Any]:
    """YAML (a JSON document is valid YAML too). Non-mapping documents become {}."""
    cfg = yaml.safe_load(text) or {}
    return cfg if isinstance(cfg, dict) else {}


def config_from_dict(data: Dict[str, Any]) -> CalculatorConfig:
    """Build a CalculatorConfig from a raw (grouped or flat) input mapping."""
    flat = flatten_grouped(data)
    if "initial_investment" not in flat:
        raise ValueError("missing required key: initial_investment")
    raw_flows = flat.get("cash_flows") or []
    if not isinstance(raw_flows, (list, tuple)):
        raise ValueError(f"cash_flows must be a list, got {type(raw_flows).__name__}")

    # build_flows coerces and rejects non-numeric entries
    flows = build_flows(flat["initial_investment"], raw_flows)
    return CalculatorConfig(
        initial_investment=flows[0],
        cash_flows=flows[1:],
        name=str(flat.get("name", "calculation")),
        initial_guess=float(flat.get("initial_guess", DEFAULTS["initial_guess"])),
        max_iterations=int(float(flat.get("max_iterations", DEFAULTS["max_iterations"]))),
        tolerance=float(flat.get("tolerance", DEFAULTS["tolerance"])),
        rate_min=float(flat.get("rate_min", DEFAULTS["rate_min"])),
        rate_max=float(flat.get("rate_max", DEFAULTS["rate_max"])),
        rate_step=float(flat.get("rate_step", DEFAULTS["rate_step"])),
    )


def load_calculator_config(
    source: str | os.PathLike | io.StringIO,
) -> CalculatorConfig:
    """
    Load YAML (or JSON) from a path or text stream.
    Raises ValueError on malformed documents or missing inputs.
    """
    text: str
    if hasattr(source, "read"):
        text = str(source.read())
    else:
        p = os.fspath(source)
        with open(p, "r", encoding="utf-8") as f:
            text = f.read()

    try:
        data = parse_document(text)
    except yaml.YAMLError as e:
        raise ValueError(f"could not parse calculator input: {e}") from e
    return config_from_dict(data)


def dump_config(cfg: CalculatorConfig) -> str:
    """Grouped YAML document that load_calculator_config reads back."""
    d = cfg.as_dict()
    doc = {
        "name": d["name"],
        "initial_investment": d["initial_investment"],
        "cash_flows": list(d["cash_flows"]),
        "solver": {k: d[k] for k in ("initial_guess", "max_iterations", "tolerance")},
        "curve": {k: d[k] for k in ("rate_min", "rate_max", "rate_step")},
    }
    return yaml.safe_dump(doc, sort_keys=False)
