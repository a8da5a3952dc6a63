from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from pkp_report.models.report import ReportInput


def load_yaml(path: str | Path) -> Any:
    p = Path(path)
    raw = p.read_text(encoding="utf-8")
    return yaml.safe_load(raw)


def load_report(path: str | Path) -> ReportInput:
    """Load a report document (YAML or JSON).

    Top-level keys: `pkp`, `pks`, `pkp_details`, `pks_details`, `car_results`,
    `excluded_cars`, `car_thresholds`. Missing lists are empty.
    """
    data = load_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"report document must be a mapping: {path}")
    return ReportInput.model_validate(data)
