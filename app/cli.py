"""
Command-line runner for a saved profile.

Run: wallet-projection profile.json [--today 2025-03-01] [--ledger-csv out.csv] [--monthly]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import pandas as pd

from core.utils import from_minor_units
from data_prep.loader import load_profile
from data_prep.validators import validate_config, validate_portfolio, validate_realized
from engine.runner import run_projection
from pm.aggregator import aggregate_ledger_by_month, ledger_to_dataframe


def _results_table(results) -> pd.DataFrame:
    nxt = results.next_withdrawal
    rows = [
        {"Metric": "Total Invested", "Value": f"{from_minor_units(results.total_invested):,.2f}"},
        {"Metric": "Final Balance", "Value": f"{from_minor_units(results.final_balance):,.2f}"},
        {"Metric": "Total Withdrawn (net)", "Value": f"{from_minor_units(results.total_withdrawn):,.2f}"},
        {"Metric": "Net Profit", "Value": f"{from_minor_units(results.net_profit):,.2f}"},
        {"Metric": "ROI", "Value": f"{results.roi:.2f}%"},
        {"Metric": "Avg Monthly Yield", "Value": f"{results.avg_monthly_yield / 100:,.2f}"},
        {"Metric": "Break-even Date", "Value": results.break_even_date or "N/A"},
        {"Metric": "Payback Days", "Value": "---" if results.payback_days is None else str(results.payback_days)},
        {
            "Metric": "Next Withdrawal",
            "Value": "-" if nxt is None else f"{nxt.date}: {from_minor_units(nxt.amount):,.2f}",
        },
    ]
    return pd.DataFrame(rows)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="wallet-projection", description=__doc__.strip().splitlines()[0])
    parser.add_argument("profile", help="saved profile JSON (inputs, portfolio, selectedWeeks, realizedWithdrawals)")
    parser.add_argument("--today", default=None, help="ISO date for forward-looking figures (default: UTC today)")
    parser.add_argument("--ledger-csv", default=None, help="write the per-day ledger to this CSV")
    parser.add_argument("--monthly", action="store_true", help="print the monthly roll-up")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
    )

    profile = load_profile(args.profile)
    checks = (
        validate_config(profile["config"], selected_weeks=profile["selected_weeks"])
        .merge(validate_portfolio(profile["portfolio"]))
        .merge(validate_realized(profile["realized_withdrawals"]))
    )
    print(checks.summary())

    projection = run_projection(**profile, today=args.today)
    if projection is None:
        print("Projection not configured: set a start date.", file=sys.stderr)
        return 1

    print()
    print(_results_table(projection.results).to_string(index=False))
    if projection.results.snapshot is not None:
        print()
        print(projection.results.snapshot.to_dataframe().to_string(index=False))

    if args.monthly:
        print()
        print(aggregate_ledger_by_month(projection.ledger).to_string())

    if args.ledger_csv:
        ledger_to_dataframe(projection.ledger).to_csv(args.ledger_csv)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
