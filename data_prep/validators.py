"""
Input sanity checks for callers, run before the engine.

The engine itself never rejects input (it coerces and clamps); these checks let a caller
surface problems to the user instead:
- Missing start date (run not configured)
- Negative balances or rates
- Strategy settings that can never trigger
- Contracts that never mature
- Realized withdrawals that collide on a date
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from core.config import ProjectionConfig
from core.schema import Contract, RealizedWithdrawal


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a set of inputs."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(errors=self.errors + other.errors, warnings=self.warnings + other.warnings)

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_config(config: ProjectionConfig, *, selected_weeks: Sequence[int] = ()) -> ValidationResult:
    result = ValidationResult()

    if not config.start_date:
        result.errors.append("Start date is not set; the projection will not run.")

    # --- Balances ---
    for label, value in [
        ("personal balance", config.personal_balance),
        ("revenue balance", config.revenue_balance),
        ("daily income", config.daily_income),
        ("monthly income", config.monthly_income),
        ("simulator capital", config.sim_initial_capital),
    ]:
        if value < 0:
            result.errors.append(f"Negative {label}: {value / 100:.2f}.")

    n_bad_fixed = sum(1 for item in config.fixed_incomes if not 1 <= item.day <= 31)
    if n_bad_fixed:
        result.warnings.append(f"{n_bad_fixed} fixed incomes have a day outside 1-31 and will never be paid.")

    if config.view_days <= 0:
        result.warnings.append("View horizon is zero days.")

    # --- Withdrawal strategy ---
    if not 0 <= config.withdrawal_weekday <= 6:
        result.warnings.append(
            f"Withdrawal weekday {config.withdrawal_weekday} is outside 0-6; no withdrawal will be planned."
        )
    if config.strategy == "fixed" and config.withdraw_target <= 0:
        result.warnings.append("Fixed strategy without a target amount behaves like 'max'.")
    if config.strategy == "weekly" and not selected_weeks:
        result.warnings.append("Weekly strategy with no selected weeks never plans a withdrawal.")
    if not 0 <= config.withdrawal_fee <= 100:
        result.errors.append(f"Withdrawal fee {config.withdrawal_fee}% is outside 0-100%.")

    # --- Simulator ---
    if config.simulator_enabled:
        if config.sim_initial_capital == 0:
            result.warnings.append("Simulator is enabled with zero initial capital.")
        if config.daily_rate < 0:
            result.errors.append("Simulator daily rate is negative.")
        if config.bonus.tier1_min > config.bonus.tier1_limit:
            result.warnings.append("Bonus tier-1 minimum exceeds its limit; tier 1 can never apply.")
        if config.sim_start_date and config.start_date and config.sim_start_date < config.start_date:
            result.warnings.append("Simulator start date is before the projection start; it starts on day 0.")
    elif config.merge_returns:
        result.warnings.append("Merge is enabled but the simulator is off; returns stay in the wallet.")

    return result


def validate_portfolio(contracts: Iterable[Contract]) -> ValidationResult:
    result = ValidationResult()
    contracts = list(contracts)

    n_no_date = sum(1 for c in contracts if not c.start_date)
    if n_no_date:
        result.warnings.append(f"{n_no_date} contracts have no start date and will never mature.")

    n_neg = sum(1 for c in contracts if c.principal < 0)
    if n_neg:
        result.errors.append(f"{n_neg} contracts have a negative principal.")
    n_zero = sum(1 for c in contracts if c.principal == 0)
    if n_zero:
        result.warnings.append(f"{n_zero} contracts have a zero principal.")

    n_term = sum(1 for c in contracts if c.term_days <= 0)
    if n_term:
        result.warnings.append(f"{n_term} contracts have a zero or negative term.")

    n_neg_rate = sum(1 for c in contracts if c.daily_rate < 0)
    if n_neg_rate:
        result.errors.append(f"{n_neg_rate} contracts have a negative daily rate.")
    # Rates are percents per day (1.2 means 1.2%)
    n_high = sum(1 for c in contracts if c.daily_rate > 100)
    if n_high:
        result.warnings.append(f"{n_high} contracts have a daily rate above 100% — verify units.")

    n_dup = sum(n - 1 for n in Counter(c.name for c in contracts).values() if n > 1)
    if n_dup:
        result.warnings.append(f"{n_dup} duplicate contract names found.")

    return result


def validate_realized(withdrawals: Iterable[RealizedWithdrawal]) -> ValidationResult:
    result = ValidationResult()
    withdrawals = list(withdrawals)

    n_dup = sum(n - 1 for n in Counter(w.date for w in withdrawals).values() if n > 1)
    if n_dup:
        result.warnings.append(f"{n_dup} realized withdrawals share a date; only the first per date applies.")

    n_nonpos = sum(1 for w in withdrawals if w.amount <= 0)
    if n_nonpos:
        result.warnings.append(f"{n_nonpos} realized withdrawals have a zero or negative amount.")

    return result
