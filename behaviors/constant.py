"""
Tier-driven strategies: never withdraw, withdraw the top tier, or wait for a target tier.
"""

from __future__ import annotations

from dataclasses import dataclass

from .base import WithdrawalDay, WithdrawalStrategy


@dataclass(frozen=True)
class NoWithdrawalStrategy(WithdrawalStrategy):
    """Baseline: nothing is ever planned (manual realized withdrawals still apply)."""

    name: str = "none"

    def plan(self, day: WithdrawalDay) -> bool:
        return False


@dataclass(frozen=True)
class MaxTierStrategy(WithdrawalStrategy):
    """Withdraw the highest tier the pool qualifies for, every target weekday."""

    name: str = "max"

    def plan(self, day: WithdrawalDay) -> bool:
        return day.tier > 0


@dataclass(frozen=True)
class FixedTargetStrategy(WithdrawalStrategy):
    """
    Withdraw only once the resolved tier reaches a target amount.

    The withdrawn amount is still the tier, not the target.
    """

    target: int = 0
    name: str = "fixed"

    def plan(self, day: WithdrawalDay) -> bool:
        return day.tier > 0 and day.tier >= self.target
