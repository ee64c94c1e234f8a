"""
Build engine inputs from caller records and frames.

Saved profiles use the application's camelCase field names (dataInicio, capitalInicial, val, days, …);
these are mapped onto the canonical snake_case names the engine types expect.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from core.schema import PORTFOLIO_COLUMNS, REALIZED_COLUMNS, Contract, RealizedWithdrawal
from core.utils import coerce_bool, coerce_int, require_columns

_INPUT_ALIASES: Dict[str, str] = {
    "dataInicio": "start_date",
    "withdrawalDaySelect": "withdrawal_weekday",
    "viewPeriodSelect": "view_days",
    "currentWalletBalance": "personal_balance",
    "personalBalance": "personal_balance",
    "revenueBalance": "revenue_balance",
    "taskDailyValue": "daily_income",
    "monthlyExtraIncome": "monthly_income",
    "fixedIncomes": "fixed_incomes",
    "futureToggle": "simulator_enabled",
    "capitalInicial": "sim_initial_capital",
    "simStartDate": "sim_start_date",
    "diasCiclo": "cycle_days",
    "taxaDiaria": "daily_rate",
    "repeticoesCiclo": "cycle_repetitions",
    "bonusTier1": "bonus_tier1",
    "minTier1": "min_tier1",
    "limitTier1": "limit_tier1",
    "bonusTier2": "bonus_tier2",
    "mergeSimToggle": "merge_returns",
    "withdrawStrategy": "strategy",
    "withdrawTarget": "withdraw_target",
}

_PORTFOLIO_ALIASES: Dict[str, str] = {
    "val": "principal",
    "value": "principal",
    "amount": "principal",
    "date": "start_date",
    "start": "start_date",
    "days": "term_days",
    "term": "term_days",
    "rate": "daily_rate",
}

_REALIZED_ALIASES: Dict[str, str] = {
    "val": "amount",
    "value": "amount",
}


def canonicalize_inputs(inputs: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map application field names onto ProjectionConfig.from_inputs keys.

    The monthly-income toggle gates the fixed income list: when it is present and off,
    fixed incomes are dropped.
    """
    out: Dict[str, Any] = {}
    for key, value in inputs.items():
        canonical = _INPUT_ALIASES.get(key, key)
        # an explicit canonical key wins over its alias
        if canonical in out and key != canonical:
            continue
        out[canonical] = value

    if "monthlyIncomeToggle" in inputs and not coerce_bool(inputs["monthlyIncomeToggle"]):
        out["fixed_incomes"] = []
    out.pop("monthlyIncomeToggle", None)
    return out


def canonicalize_columns(df: pd.DataFrame, aliases: Mapping[str, str]) -> pd.DataFrame:
    """Return a copy with alias column names renamed; an existing canonical column is kept."""
    ren = {c: aliases[c] for c in df.columns if c in aliases and aliases[c] not in df.columns}
    return df.rename(columns=ren).copy()


def build_portfolio(records: Iterable[Mapping[str, Any]] | pd.DataFrame) -> List[Contract]:
    """Contracts from a frame or an iterable of (possibly aliased) records, in input order."""
    df = records if isinstance(records, pd.DataFrame) else pd.DataFrame(list(records))
    if df.empty:
        return []
    df = canonicalize_columns(df, _PORTFOLIO_ALIASES)
    require_columns(df, ["principal", "start_date", "term_days", "daily_rate"])
    if "name" not in df.columns:
        df["name"] = [f"Contract {i + 1}" for i in range(len(df))]

    df = df[list(PORTFOLIO_COLUMNS)].astype(object).where(df.notna(), None)
    return [Contract.from_record(row) for row in df.to_dict(orient="records")]


def build_realized(records: Iterable[Mapping[str, Any]] | pd.DataFrame) -> List[RealizedWithdrawal]:
    """Realized withdrawals from a frame or records; rows without a parseable date are dropped."""
    df = records if isinstance(records, pd.DataFrame) else pd.DataFrame(list(records))
    if df.empty:
        return []
    df = canonicalize_columns(df, _REALIZED_ALIASES)
    require_columns(df, list(REALIZED_COLUMNS))

    df = df[list(REALIZED_COLUMNS)].astype(object).where(df.notna(), None)
    out = [RealizedWithdrawal.from_record(row) for row in df.to_dict(orient="records")]
    return [w for w in out if w.date]


def parse_selected_weeks(weeks: Iterable[Any]) -> List[int]:
    """Week numbers 1-5, de-duplicated and sorted; anything else is dropped."""
    parsed = {coerce_int(w) for w in weeks or ()}
    return sorted(w for w in parsed if 1 <= w <= 5)
