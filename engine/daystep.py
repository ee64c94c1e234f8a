"""
Single-day transition of the projection state machine.

step_day(state, day_index, ctx) -> (state', ledger entry, withdrawal event)

Order within a day is fixed; later steps read balances written by earlier ones:
  0. simulator capital enters the pool on its start day
  1. task / monthly / fixed-day income          -> wallet
  2. contract maturities                         -> wallet
  3. reinvestment cycle close (bonus + profit)   -> pool
  4. merge: maturity returns moved wallet -> pool
  5. withdrawal: wallet first, then pool (clamped at zero)
  6. ledger entry
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Dict, FrozenSet, Tuple

from behaviors.base import WithdrawalDay, WithdrawalStrategy
from core.config import BonusSchedule, RecurringIncome
from core.schema import DayLedgerEntry
from core.utils import floor_amount

from .events import WithdrawalEvent, apply_withdrawal, evaluate_withdrawal
from .maturities import MaturitySchedule
from .tiers import WITHDRAWAL_TIERS, resolve_tier


@dataclass(frozen=True)
class SimulationState:
    """Carried across days. Nothing else survives from one day to the next."""

    wallet: int
    pool: int = 0
    sim_capital: int = 0
    total_withdrawn: int = 0
    cycle_timer: int = 1
    completed_cycles: int = 0

    @property
    def balance(self) -> int:
        return self.wallet + self.pool


@dataclass(frozen=True)
class StepContext:
    """Immutable lookup tables built once before the loop."""

    dates: Tuple[str, ...]
    weekdays: Tuple[int, ...]
    weeks_of_month: Tuple[int, ...]
    days_of_month: Tuple[int, ...]
    maturities: MaturitySchedule
    realized_by_date: Dict[str, int]
    strategy: WithdrawalStrategy

    daily_income: int = 0
    monthly_income: int = 0
    monthly_income_interval_days: int = 30
    fixed_incomes: Tuple[RecurringIncome, ...] = ()
    non_accrual_weekday: int = 0

    simulator_enabled: bool = False
    sim_initial_capital: int = 0
    sim_start_index: int = 0
    total_cycles: int = 0
    cycle_days: int = 1
    daily_rate: Decimal = Decimal(0)  # fraction per day
    bonus: BonusSchedule = field(default_factory=BonusSchedule)
    merge_returns: bool = False

    withdrawal_weekday: int = 1
    withdrawal_fee: Decimal = Decimal(10)
    tiers: Tuple[int, ...] = WITHDRAWAL_TIERS
    fixed_income_days: FrozenSet[int] = frozenset()


def _compound(capital: int, ctx: StepContext) -> int:
    """One cycle close: bonus on the capital's band, then floor(active × rate × days) profit."""
    active = floor_amount(Decimal(capital) * (1 + ctx.bonus.rate_for(capital)))
    profit = floor_amount(Decimal(active) * ctx.daily_rate * ctx.cycle_days)
    return active + profit


def step_day(
    state: SimulationState,
    day_index: int,
    ctx: StepContext,
) -> Tuple[SimulationState, DayLedgerEntry, WithdrawalEvent]:
    date = ctx.dates[day_index]
    weekday = ctx.weekdays[day_index]
    opening = state.balance

    wallet = state.wallet
    pool = state.pool
    sim_capital = state.sim_capital
    cycle_timer = state.cycle_timer
    completed = state.completed_cycles

    # 0. Simulator capital injection
    capital_in = 0
    if ctx.simulator_enabled and day_index == ctx.sim_start_index and ctx.sim_initial_capital > 0:
        capital_in = ctx.sim_initial_capital
        pool += capital_in
        sim_capital += capital_in

    # 1. Income
    income_task = 0
    income_recurring = 0
    if day_index > 0:
        if weekday != ctx.non_accrual_weekday:
            income_task = ctx.daily_income
        if day_index % ctx.monthly_income_interval_days == 0:
            income_recurring += ctx.monthly_income
        day_of_month = ctx.days_of_month[day_index]
        if day_of_month in ctx.fixed_income_days:
            income_recurring += sum(
                item.amount for item in ctx.fixed_incomes if item.day == day_of_month and item.amount > 0
            )
    income = income_task + income_recurring
    wallet += income

    # 2. Maturities
    returns, maturing = ctx.maturities.releases_on(date)
    wallet += returns
    returns_profit = sum(m.profit for m in maturing)

    # 3. Reinvestment cycle
    reinvested = 0
    is_cycle_end = False
    if (
        ctx.simulator_enabled
        and completed < ctx.total_cycles
        and day_index > 0
        and day_index >= ctx.sim_start_index
    ):
        cycle_timer -= 1
        if cycle_timer == 0:
            previous = pool
            pool = _compound(pool, ctx)
            reinvested = pool - previous
            sim_capital = _compound(sim_capital, ctx)
            is_cycle_end = True
            completed += 1
            cycle_timer = ctx.cycle_days

    # 4. Merge maturity returns into the pool
    merged = 0
    if ctx.merge_returns and ctx.simulator_enabled and returns > 0:
        merged = returns
        wallet -= merged
        pool += merged

    # 5. Withdrawal
    tier = resolve_tier(wallet + pool, ctx.tiers)
    event = evaluate_withdrawal(
        day=WithdrawalDay(
            date=date,
            weekday=weekday,
            week_of_month=ctx.weeks_of_month[day_index],
            tier=tier,
        ),
        day_index=day_index,
        target_weekday=ctx.withdrawal_weekday,
        strategy=ctx.strategy,
        realized_amount=ctx.realized_by_date.get(date),
        fee_percent=ctx.withdrawal_fee,
    )
    wallet, pool, removed = apply_withdrawal(wallet, pool, event.gross)
    withdrawn = event.net if event.withdraws else 0

    # 6. Ledger
    entry = DayLedgerEntry(
        date=date,
        day_index=day_index,
        opening_balance=opening,
        closing_balance=wallet + pool,
        capital_in=capital_in,
        income=income,
        income_task=income_task,
        income_recurring=income_recurring,
        returns=returns,
        returns_profit=returns_profit,
        reinvested=reinvested,
        merged=merged,
        withdrawn=withdrawn,
        withdrawn_gross=removed,
        maturing=maturing,
        tier=tier,
        is_cycle_end=is_cycle_end,
        status=event.status,
    )

    new_state = replace(
        state,
        wallet=wallet,
        pool=pool,
        sim_capital=sim_capital,
        total_withdrawn=state.total_withdrawn + withdrawn,
        cycle_timer=cycle_timer,
        completed_cycles=completed,
    )
    return new_state, entry, event
