"""
Ledger roll-ups for tables, calendars, charts and exports.

The engine hands back a dict of DayLedgerEntry keyed by date. These helpers turn it into
frames and period totals; none of them format currency, that stays with the caller.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

import pandas as pd

from core.schema import LEDGER_COLUMNS, DayLedgerEntry
from core.utils import parse_iso_date

_FLOW_COLUMNS = [
    "capital_in",
    "income",
    "income_task",
    "income_recurring",
    "returns",
    "returns_profit",
    "reinvested",
    "merged",
    "withdrawn_gross",
    "withdrawn",
]


def ledger_to_dataframe(ledger: Mapping[str, DayLedgerEntry]) -> pd.DataFrame:
    """One row per simulated day, indexed by date (DatetimeIndex, ascending)."""
    if not ledger:
        return pd.DataFrame(columns=list(LEDGER_COLUMNS), index=pd.DatetimeIndex([], name="date"))

    df = pd.DataFrame([entry.to_row() for entry in ledger.values()], index=list(ledger.keys()))
    df.index = pd.to_datetime(df.index)
    df.index.name = "date"
    return df.sort_index()[list(LEDGER_COLUMNS)]


def aggregate_ledger_by_month(ledger: Mapping[str, DayLedgerEntry]) -> pd.DataFrame:
    """
    Monthly totals of every flow column plus opening/closing balance of the month.

    Returns a DataFrame indexed by month Period with flow sums, opening_balance (first day),
    closing_balance (last day), n_withdrawals and n_cycle_ends.
    """
    df = ledger_to_dataframe(ledger)
    if df.empty:
        return pd.DataFrame(
            columns=_FLOW_COLUMNS + ["opening_balance", "closing_balance", "n_withdrawals", "n_cycle_ends"]
        )

    month = df.index.to_period("M")
    grouped = df.groupby(month)

    out = grouped[_FLOW_COLUMNS].sum()
    out["opening_balance"] = grouped["opening_balance"].first()
    out["closing_balance"] = grouped["closing_balance"].last()
    out["n_withdrawals"] = grouped["withdrawn_gross"].apply(lambda s: int((s > 0).sum()))
    out["n_cycle_ends"] = grouped["is_cycle_end"].sum().astype(int)
    out.index.name = "month"
    return out


def summarize_period(
    ledger: Mapping[str, DayLedgerEntry],
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> Dict[str, int]:
    """
    Totals over [start, end] (either bound optional, ISO dates, inclusive).

    income   : task + recurring income
    invest   : contract interest received + reinvestment-cycle growth
    withdraw : net withdrawals
    net      : income + invest
    """
    lo = parse_iso_date(start)
    hi = parse_iso_date(end)

    income = invest = withdraw = 0
    for date in sorted(ledger):
        ts = pd.Timestamp(date)
        if lo is not None and ts < lo:
            continue
        if hi is not None and ts > hi:
            break
        entry = ledger[date]
        income += entry.income
        invest += entry.returns_profit + entry.reinvested
        withdraw += entry.withdrawn

    return {"income": income, "invest": invest, "withdraw": withdraw, "net": income + invest}
