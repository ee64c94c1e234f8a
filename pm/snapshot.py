"""
Dashboard snapshot — the "as of today" figures a summary screen shows.

  - How much was withdrawn this calendar month?
  - Where will the balance be at month end?
  - What is the balance today?
  - Which withdrawals come next?
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

import pandas as pd
from dateutil.relativedelta import relativedelta

from core.schema import DayLedgerEntry, WithdrawalRecord
from core.utils import from_minor_units, iso

UPCOMING_WITHDRAWALS = 8


@dataclass
class DashboardSnapshot:
    today: str
    current_month_withdrawn: int
    projected_end_of_month_balance: int
    current_balance_today: int
    next_withdrawals: List[WithdrawalRecord] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Display-friendly table, amounts in currency units."""
        rows = [
            {"Metric": "Today", "Value": self.today},
            {"Metric": "Withdrawn This Month", "Value": from_minor_units(self.current_month_withdrawn)},
            {"Metric": "Projected Month-End Balance", "Value": from_minor_units(self.projected_end_of_month_balance)},
            {"Metric": "Balance Today", "Value": from_minor_units(self.current_balance_today)},
        ]
        for w in self.next_withdrawals:
            rows.append({"Metric": f"Upcoming ({w.status})", "Value": f"{w.date}: {from_minor_units(w.amount):.2f}"})
        return pd.DataFrame(rows)


def build_snapshot(
    ledger: Mapping[str, DayLedgerEntry],
    withdrawal_history: Sequence[WithdrawalRecord],
    *,
    today: str,
) -> DashboardSnapshot:
    """
    Parameters
    ----------
    ledger : mapping of ISO date -> DayLedgerEntry
    withdrawal_history : sequence of WithdrawalRecord
        Every withdrawal the run produced, net of fee
    today : str
        ISO date the snapshot is taken on

    Balances fall back to the last ledger day (month end) or the first ledger day (today)
    when the date lies outside the simulated range.
    """
    ts = pd.Timestamp(today)
    month_prefix = ts.strftime("%Y-%m")
    month_end = iso(ts + relativedelta(day=31))
    dates = sorted(ledger)

    current_month_withdrawn = sum(w.amount for w in withdrawal_history if w.date.startswith(month_prefix))

    if month_end in ledger:
        end_of_month = ledger[month_end].closing_balance
    else:
        end_of_month = ledger[dates[-1]].closing_balance if dates else 0

    if today in ledger:
        balance_today = ledger[today].closing_balance
    else:
        balance_today = ledger[dates[0]].closing_balance if dates else 0

    upcoming = sorted((w for w in withdrawal_history if w.date >= today), key=lambda w: w.date)

    return DashboardSnapshot(
        today=today,
        current_month_withdrawn=current_month_withdrawn,
        projected_end_of_month_balance=end_of_month,
        current_balance_today=balance_today,
        next_withdrawals=upcoming[:UPCOMING_WITHDRAWALS],
    )
