"""
WeeklyStrategy — withdraw only in selected weeks of the month.

Week numbers are ordinal within the month: days 1-7 are week 1, 8-14 week 2, and so on
up to week 5 (days 29-31).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from core.utils import coerce_int

from .base import WithdrawalDay, WithdrawalStrategy


@dataclass(frozen=True)
class WeeklyStrategy(WithdrawalStrategy):
    selected_weeks: FrozenSet[int] = frozenset()
    name: str = "weekly"

    @classmethod
    def from_weeks(cls, weeks: Iterable) -> "WeeklyStrategy":
        return cls(selected_weeks=frozenset(coerce_int(w) for w in weeks or ()))

    def plan(self, day: WithdrawalDay) -> bool:
        return day.tier > 0 and day.week_of_month in self.selected_weeks
