"""
PM outputs — KPIs, ledger roll-ups, and the dashboard snapshot.
"""

from .metrics import compute_kpis
from .aggregator import aggregate_ledger_by_month, ledger_to_dataframe, summarize_period
from .snapshot import build_snapshot

__all__ = [
    "compute_kpis",
    "aggregate_ledger_by_month",
    "ledger_to_dataframe",
    "summarize_period",
    "build_snapshot",
]
