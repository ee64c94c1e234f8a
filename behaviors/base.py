"""
Base classes for withdrawal strategies.
A strategy only decides WHETHER a withdrawal is planned; the amount is always the resolved tier.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WithdrawalDay:
    """What a strategy sees on a candidate withdrawal day."""

    date: str
    weekday: int  # 0 = Sunday
    week_of_month: int
    tier: int  # resolved tier for the current pool, 0 if none


class WithdrawalStrategy:
    """Interface for deciding whether to plan a withdrawal on a target weekday."""

    name: str = "base"

    def plan(self, day: WithdrawalDay) -> bool:
        raise NotImplementedError
