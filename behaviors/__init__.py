"""
Withdrawal strategies — decide on which target weekdays a tier withdrawal is planned.
"""

from __future__ import annotations

from typing import Iterable

from .base import WithdrawalDay, WithdrawalStrategy
from .constant import FixedTargetStrategy, MaxTierStrategy, NoWithdrawalStrategy
from .scenario import WeeklyStrategy


def build_strategy(name: str, *, target: int = 0, selected_weeks: Iterable = ()) -> WithdrawalStrategy:
    """Map a strategy selector to its strategy object. Unknown names plan nothing."""
    if name == "max":
        return MaxTierStrategy()
    if name == "fixed":
        return FixedTargetStrategy(target=target)
    if name == "weekly":
        return WeeklyStrategy.from_weeks(selected_weeks)
    return NoWithdrawalStrategy()


__all__ = [
    "WithdrawalDay",
    "WithdrawalStrategy",
    "NoWithdrawalStrategy",
    "MaxTierStrategy",
    "FixedTargetStrategy",
    "WeeklyStrategy",
    "build_strategy",
]
