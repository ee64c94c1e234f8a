"""
Core package — configuration, record/result types, and money & date utilities.
No projection logic lives here.
"""

from .config import BonusSchedule, ProjectionConfig, RecurringIncome
from .schema import (
    Contract,
    DayLedgerEntry,
    Projection,
    ProjectionResults,
    RealizedWithdrawal,
)
from .utils import from_minor_units, require_columns, to_minor_units

__all__ = [
    "BonusSchedule",
    "ProjectionConfig",
    "RecurringIncome",
    "Contract",
    "DayLedgerEntry",
    "Projection",
    "ProjectionResults",
    "RealizedWithdrawal",
    "from_minor_units",
    "require_columns",
    "to_minor_units",
]
