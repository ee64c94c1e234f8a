"""
Summary KPIs over a completed day ledger.

Net profit, ROI, average monthly yield, and the break-even scan that yields
the break-even date and payback period (in days from the start).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

import numpy as np

from core.schema import DayLedgerEntry


@dataclass(frozen=True)
class KpiSummary:
    net_profit: int
    roi: float  # percent
    avg_monthly_yield: float  # minor units per 30 simulated days
    break_even_date: Optional[str]
    payback_days: Optional[int]


def find_break_even(
    ledger: Mapping[str, DayLedgerEntry],
    total_invested: int,
) -> Tuple[Optional[str], Optional[int]]:
    """
    First day where closing balance + net withdrawn so far >= capital invested.

    Returns (date, zero-based index in date order), or (None, None) if never reached.
    """
    if not ledger:
        return None, None

    dates = sorted(ledger)
    closing = np.array([ledger[d].closing_balance for d in dates], dtype=np.int64)
    withdrawn = np.array([ledger[d].withdrawn for d in dates], dtype=np.int64)

    reached = closing + np.cumsum(withdrawn) >= total_invested
    if not reached.any():
        return None, None

    idx = int(np.argmax(reached))
    return dates[idx], idx


def compute_kpis(
    ledger: Mapping[str, DayLedgerEntry],
    *,
    total_invested: int,
    final_wallet: int,
    final_pool: int,
    total_withdrawn: int,
    simulation_days: int,
) -> KpiSummary:
    """
    Parameters
    ----------
    ledger : mapping of ISO date -> DayLedgerEntry
        Full engine ledger
    total_invested : int
        Starting wallet + simulator capital + contract principals
    final_wallet, final_pool : int
        Balances after the last simulated day
    total_withdrawn : int
        Cumulative net (after fee) withdrawals
    simulation_days : int
        Last simulated day index; months = simulation_days / 30, at least 1
    """
    net_profit = final_pool + final_wallet + total_withdrawn - total_invested
    roi = net_profit / total_invested * 100 if total_invested > 0 else 0.0
    total_months = max(1.0, simulation_days / 30)

    break_even_date, payback_days = find_break_even(ledger, total_invested)

    return KpiSummary(
        net_profit=net_profit,
        roi=float(roi),
        avg_monthly_yield=net_profit / total_months,
        break_even_date=break_even_date,
        payback_days=payback_days,
    )
