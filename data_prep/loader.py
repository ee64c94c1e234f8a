from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from core.config import ProjectionConfig
from core.schema import Contract, RealizedWithdrawal

from .portfolio_builder import build_portfolio, build_realized, canonicalize_inputs, parse_selected_weeks

PathLike = Union[str, Path]


def load_json(path: PathLike) -> Dict[str, Any]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: root must be a JSON object")
    return data


def load_portfolio_csv(path: PathLike) -> List[Contract]:
    """
    Load contracts from a CSV with columns name, principal, start_date, term_days, daily_rate
    (application aliases such as val/date/days/rate are accepted).
    """
    return build_portfolio(pd.read_csv(path))


def load_realized_csv(path: PathLike) -> List[RealizedWithdrawal]:
    return build_realized(pd.read_csv(path))


def load_profile(path: PathLike) -> Dict[str, Any]:
    """
    Load a saved profile: {"inputs": {...}, "portfolio": [...], "selectedWeeks": [...],
    "realizedWithdrawals": [...]}.

    Returns a dict with config, portfolio, selected_weeks and realized_withdrawals, ready to be
    splatted into engine.run_projection().
    """
    data = load_json(path)
    inputs = data.get("inputs", {})
    if not isinstance(inputs, dict):
        raise ValueError(f"{path}: inputs must be a JSON object")

    return {
        "config": ProjectionConfig.from_inputs(canonicalize_inputs(inputs)),
        "portfolio": build_portfolio(data.get("portfolio") or []),
        "selected_weeks": parse_selected_weeks(data.get("selectedWeeks") or data.get("selected_weeks") or []),
        "realized_withdrawals": build_realized(
            data.get("realizedWithdrawals") or data.get("realized_withdrawals") or []
        ),
    }
