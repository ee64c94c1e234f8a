"""
Projection configuration.
Money fields are integer minor units (cents); rates are Decimal percents.
Raw caller input (strings, decimal currency amounts) goes through ProjectionConfig.from_inputs().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Literal, Mapping, Optional, Tuple

from .utils import coerce_bool, coerce_decimal, coerce_int, parse_iso_date, iso, to_minor_units

StrategyName = Literal["none", "max", "fixed", "weekly"]
STRATEGIES: Tuple[str, ...] = ("none", "max", "fixed", "weekly")


@dataclass(frozen=True)
class BonusSchedule:
    """
    Two-tier bonus applied to the reinvestment pool at each cycle close.

    pool in [tier1_min, tier1_limit] -> tier1_bonus
    pool > tier1_limit               -> tier2_bonus
    otherwise                        -> no bonus
    """

    tier1_bonus: Decimal = Decimal("3")
    tier1_min: int = 5000
    tier1_limit: int = 9900
    tier2_bonus: Decimal = Decimal("6")

    def rate_for(self, pool: int) -> Decimal:
        """Bonus as a fraction (0.03 for 3%)."""
        if self.tier1_min <= pool <= self.tier1_limit:
            return self.tier1_bonus / 100
        if pool > self.tier1_limit:
            return self.tier2_bonus / 100
        return Decimal(0)


@dataclass(frozen=True)
class RecurringIncome:
    """Fixed income credited on a calendar day of the month."""

    amount: int
    day: int


@dataclass(frozen=True)
class ProjectionConfig:
    start_date: Optional[str] = None
    withdrawal_weekday: int = 1  # 0 = Sunday
    view_days: int = 30

    # wallets (tracked as one combined pool by the engine)
    personal_balance: int = 0
    revenue_balance: int = 0

    # income
    daily_income: int = 0
    monthly_income: int = 0
    fixed_incomes: Tuple[RecurringIncome, ...] = ()
    non_accrual_weekday: int = 0
    monthly_income_interval_days: int = 30

    # reinvestment-cycle simulator
    simulator_enabled: bool = False
    sim_initial_capital: int = 0
    sim_start_date: Optional[str] = None  # None -> start_date
    cycle_days: int = 3
    daily_rate: Decimal = Decimal("1.2")
    cycle_repetitions: int = 1
    bonus: BonusSchedule = field(default_factory=BonusSchedule)
    merge_returns: bool = False

    # withdrawal strategy
    strategy: StrategyName = "none"
    withdraw_target: int = 0
    withdrawal_fee: Decimal = Decimal("10")

    @property
    def wallet_start(self) -> int:
        return self.personal_balance + self.revenue_balance

    @property
    def sim_capital(self) -> int:
        return self.sim_initial_capital if self.simulator_enabled else 0

    @property
    def total_cycles(self) -> int:
        return self.cycle_repetitions if self.simulator_enabled else 0

    @property
    def simulation_days(self) -> int:
        """Last simulated day index: the view window or the full cycle schedule plus 30 days."""
        return max(self.view_days, self.total_cycles * self.cycle_days + 30)

    @classmethod
    def from_inputs(cls, inputs: Mapping[str, Any]) -> "ProjectionConfig":
        """
        Build a config from raw form-style input.

        Currency amounts are decimal (e.g. "1000.50"), rates are percents.
        Malformed numbers become zero; absent keys keep the defaults.
        """
        defaults = cls()
        bonus_defaults = BonusSchedule()

        def money(key: str, default: int) -> int:
            return to_minor_units(inputs[key]) if key in inputs else default

        def integer(key: str, default: int) -> int:
            return coerce_int(inputs.get(key), default)

        def rate(key: str, default: Decimal) -> Decimal:
            return coerce_decimal(inputs[key]) if key in inputs else default

        start = parse_iso_date(inputs.get("start_date"))
        sim_start = parse_iso_date(inputs.get("sim_start_date"))
        strategy = str(inputs.get("strategy") or "none").strip().lower()

        fixed_incomes = tuple(
            RecurringIncome(amount=to_minor_units(item.get("amount")), day=coerce_int(item.get("day")))
            for item in (inputs.get("fixed_incomes") or [])
            if isinstance(item, Mapping)
        )

        return cls(
            start_date=iso(start) if start is not None else None,
            withdrawal_weekday=integer("withdrawal_weekday", defaults.withdrawal_weekday),
            view_days=max(integer("view_days", defaults.view_days), 0),
            personal_balance=money("personal_balance", defaults.personal_balance),
            revenue_balance=money("revenue_balance", defaults.revenue_balance),
            daily_income=money("daily_income", defaults.daily_income),
            monthly_income=money("monthly_income", defaults.monthly_income),
            fixed_incomes=fixed_incomes,
            non_accrual_weekday=integer("non_accrual_weekday", defaults.non_accrual_weekday),
            monthly_income_interval_days=max(
                integer("monthly_income_interval_days", defaults.monthly_income_interval_days), 1
            ),
            simulator_enabled=coerce_bool(inputs.get("simulator_enabled", False)),
            sim_initial_capital=money("sim_initial_capital", defaults.sim_initial_capital),
            sim_start_date=iso(sim_start) if sim_start is not None else None,
            cycle_days=max(integer("cycle_days", defaults.cycle_days), 1),
            daily_rate=rate("daily_rate", defaults.daily_rate),
            cycle_repetitions=max(integer("cycle_repetitions", defaults.cycle_repetitions), 1),
            bonus=BonusSchedule(
                tier1_bonus=rate("bonus_tier1", bonus_defaults.tier1_bonus),
                tier1_min=money("min_tier1", bonus_defaults.tier1_min),
                tier1_limit=money("limit_tier1", bonus_defaults.tier1_limit),
                tier2_bonus=rate("bonus_tier2", bonus_defaults.tier2_bonus),
            ),
            merge_returns=coerce_bool(inputs.get("merge_returns", False)),
            strategy=strategy if strategy in STRATEGIES else "none",
            withdraw_target=money("withdraw_target", defaults.withdraw_target),
            withdrawal_fee=rate("withdrawal_fee", defaults.withdrawal_fee),
        )
