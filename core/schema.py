"""
Record and result types shared by the engine and its callers.
All money values are integer minor units (cents).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Mapping, Optional, Tuple

from .utils import coerce_decimal, coerce_int, iso, parse_iso_date, to_minor_units

if TYPE_CHECKING:
    from pm.snapshot import DashboardSnapshot

WithdrawalStatus = Literal["none", "planned", "realized"]

# Canonical portfolio columns (caller records / CSV headers after canonicalisation).
PORTFOLIO_COLUMNS: Tuple[str, ...] = (
    "name",
    "principal",
    "start_date",
    "term_days",
    "daily_rate",
)

REALIZED_COLUMNS: Tuple[str, ...] = ("date", "amount")

# Column order of the per-day ledger frame (pm.aggregator.ledger_to_dataframe).
LEDGER_COLUMNS: Tuple[str, ...] = (
    "day_index",
    "opening_balance",
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
    "closing_balance",
    "tier",
    "is_cycle_end",
    "status",
    "n_maturing",
)


@dataclass(frozen=True)
class Contract:
    """Fixed-term portfolio entry earning simple daily interest."""

    name: str
    principal: int
    start_date: Optional[str]
    term_days: int
    daily_rate: Decimal  # percent per day

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Contract":
        start = parse_iso_date(record.get("start_date"))
        return cls(
            name=str(record.get("name") or ""),
            principal=to_minor_units(record.get("principal")),
            start_date=iso(start) if start is not None else None,
            term_days=coerce_int(record.get("term_days")),
            daily_rate=coerce_decimal(record.get("daily_rate")),
        )


@dataclass(frozen=True)
class RealizedWithdrawal:
    """A withdrawal the user confirmed; overrides strategy planning on its date."""

    date: str
    amount: int

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "RealizedWithdrawal":
        day = parse_iso_date(record.get("date"))
        return cls(
            date=iso(day) if day is not None else "",
            amount=to_minor_units(record.get("amount")),
        )


@dataclass(frozen=True)
class MaturityDetail:
    name: str
    principal: int
    profit: int
    total: int


@dataclass(frozen=True)
class DayLedgerEntry:
    """
    One simulated day.

    closing_balance == opening_balance + capital_in + income + returns
                       + reinvested - withdrawn_gross
    """

    date: str
    day_index: int
    opening_balance: int
    closing_balance: int
    capital_in: int = 0
    income: int = 0
    income_task: int = 0
    income_recurring: int = 0
    returns: int = 0
    returns_profit: int = 0
    reinvested: int = 0
    merged: int = 0
    withdrawn: int = 0  # net of fee
    withdrawn_gross: int = 0  # removed from wallet/pool
    maturing: Tuple[MaturityDetail, ...] = ()
    tier: int = 0
    is_cycle_end: bool = False
    status: WithdrawalStatus = "none"

    def to_row(self) -> Dict[str, Any]:
        row = {col: getattr(self, col) for col in LEDGER_COLUMNS if col != "n_maturing"}
        row["n_maturing"] = len(self.maturing)
        return row


@dataclass(frozen=True)
class WithdrawalRecord:
    date: str
    amount: int  # net of fee
    status: WithdrawalStatus


@dataclass(frozen=True)
class NextWithdrawal:
    date: str
    amount: int


@dataclass(frozen=True)
class ChartPoint:
    date: str
    balance: float  # currency units
    income_task: int
    income_recurring: int
    returns: int
    withdrawn: int
    status: WithdrawalStatus
    is_cycle_end: bool
    is_start: bool


@dataclass(frozen=True)
class SimulationSummary:
    """Reinvestment simulator capital tracked on its own, without income or returns."""

    initial: int = 0
    final: int = 0
    profit: int = 0
    cycles: int = 0
    cycle_days: int = 0
    total_days: int = 0


@dataclass
class ProjectionResults:
    net_profit: int
    total_income: int
    total_investment_profit: int
    total_withdrawn: int
    total_invested: int
    final_balance: int
    final_wallet: int
    final_pool: int
    roi: float
    avg_monthly_yield: float
    payback_days: Optional[int]
    break_even_date: Optional[str]
    next_withdrawal: Optional[NextWithdrawal]
    withdrawal_history: List[WithdrawalRecord] = field(default_factory=list)
    chart_series: List[ChartPoint] = field(default_factory=list)
    simulation: SimulationSummary = field(default_factory=SimulationSummary)
    snapshot: Optional["DashboardSnapshot"] = None


@dataclass
class Projection:
    """Everything one engine run hands back to its caller."""

    results: ProjectionResults
    ledger: Dict[str, DayLedgerEntry]
    cycle_ends: List[str]
