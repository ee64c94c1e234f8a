"""
Withdrawal evaluation — decides, for one simulated day, whether money leaves the pool.

Precedence:
  1. A manual realized record for the date always wins (status "realized", its amount).
  2. Otherwise, on the target weekday (never day 0), the strategy may plan a withdrawal
     of exactly the resolved tier (status "planned").

The gross amount leaves the balances; the fee-reduced net amount is what the user receives.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from behaviors.base import WithdrawalDay, WithdrawalStrategy
from core.schema import WithdrawalStatus
from core.utils import apply_fee


@dataclass(frozen=True)
class WithdrawalEvent:
    """Result of evaluating one day's withdrawal rules."""

    status: WithdrawalStatus
    gross: int  # requested amount, removed from wallet then pool
    net: int  # gross minus the flat fee, floored
    tier: int
    forecast_net: int  # fee-reduced tier value, used for the next-withdrawal forecast

    @property
    def withdraws(self) -> bool:
        return self.gross > 0


def evaluate_withdrawal(
    *,
    day: WithdrawalDay,
    day_index: int,
    target_weekday: int,
    strategy: WithdrawalStrategy,
    realized_amount: Optional[int],
    fee_percent: Decimal,
) -> WithdrawalEvent:
    """
    Evaluate strategy planning and manual overrides for one day.

    Parameters
    ----------
    day : WithdrawalDay
        Date, weekday, week of month and resolved tier for the current pool
    day_index : int
        Simulation day; day 0 never plans a withdrawal
    target_weekday : int
        Configured withdrawal weekday (0 = Sunday)
    strategy : WithdrawalStrategy
        Planning rule (none / max / fixed / weekly)
    realized_amount : int or None
        Manually confirmed withdrawal for this date, if any
    fee_percent : Decimal
        Flat fee deducted from every withdrawal
    """
    planned = day_index > 0 and day.weekday == target_weekday and strategy.plan(day)

    if realized_amount is not None:
        status: WithdrawalStatus = "realized"
        gross = max(realized_amount, 0)
    elif planned:
        status = "planned"
        gross = day.tier
    else:
        status = "none"
        gross = 0

    return WithdrawalEvent(
        status=status,
        gross=gross,
        net=apply_fee(gross, fee_percent) if gross > 0 else 0,
        tier=day.tier,
        forecast_net=apply_fee(day.tier, fee_percent),
    )


def apply_withdrawal(wallet: int, pool: int, amount: int) -> Tuple[int, int, int]:
    """
    Take ``amount`` from the wallet first, then from the reinvestment pool.

    The pool is clamped at zero. Returns (wallet, pool, amount actually removed).
    """
    if amount <= 0:
        return wallet, pool, 0
    if wallet >= amount:
        return wallet - amount, pool, amount
    remaining = amount - wallet
    taken_from_pool = min(remaining, pool)
    return 0, pool - taken_from_pool, wallet + taken_from_pool
