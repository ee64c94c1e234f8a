"""
Projection runner — builds the lookup tables once, then folds step_day over every simulated day.

One call is a pure function of its inputs:
  config + portfolio + selected weeks + realized withdrawals  ->  Projection (results, ledger, cycle ends)

Days 0 … max(view_days, cycles × cycle_days + 30) are simulated (inclusive), so the ledger
covers both the viewing window and the full reinvestment schedule plus a margin.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from behaviors import build_strategy
from core.config import ProjectionConfig
from core.schema import (
    ChartPoint,
    Contract,
    DayLedgerEntry,
    NextWithdrawal,
    Projection,
    ProjectionResults,
    RealizedWithdrawal,
    SimulationSummary,
    WithdrawalRecord,
)
from core.utils import coerce_decimal, days_between, from_minor_units, iso, parse_iso_date
from pm.metrics import compute_kpis
from pm.snapshot import build_snapshot

from .daystep import SimulationState, StepContext, step_day
from .maturities import build_maturity_schedule

logger = logging.getLogger(__name__)

ContractLike = Union[Contract, Mapping]
RealizedLike = Union[RealizedWithdrawal, Mapping]


def _as_contracts(portfolio: Iterable[ContractLike]) -> List[Contract]:
    return [p if isinstance(p, Contract) else Contract.from_record(p) for p in portfolio or ()]


def _realized_by_date(realized: Iterable[RealizedLike]) -> Dict[str, int]:
    """First record per date wins; records without a date are ignored."""
    out: Dict[str, int] = {}
    for item in realized or ():
        record = item if isinstance(item, RealizedWithdrawal) else RealizedWithdrawal.from_record(item)
        if record.date and record.date not in out:
            out[record.date] = record.amount
    return out


def _utc_today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def build_step_context(
    config: ProjectionConfig,
    contracts: Sequence[Contract],
    selected_weeks: Iterable,
    realized: Mapping[str, int],
    simulation_days: int,
) -> StepContext:
    """Precompute every per-day lookup (calendar, maturities, realized map) ahead of the loop."""
    calendar = pd.date_range(pd.Timestamp(config.start_date), periods=simulation_days + 1, freq="D")
    days_of_month = tuple(int(d) for d in calendar.day)

    sim_start_index = 0
    if config.simulator_enabled and config.sim_start_date:
        sim_start_index = max(0, days_between(config.start_date, config.sim_start_date))

    return StepContext(
        dates=tuple(calendar.strftime("%Y-%m-%d")),
        weekdays=tuple(int(d + 1) % 7 for d in calendar.dayofweek),
        weeks_of_month=tuple((d + 6) // 7 for d in days_of_month),
        days_of_month=days_of_month,
        maturities=build_maturity_schedule(contracts),
        realized_by_date=dict(realized),
        strategy=build_strategy(
            config.strategy,
            target=config.withdraw_target,
            selected_weeks=selected_weeks,
        ),
        daily_income=config.daily_income,
        monthly_income=config.monthly_income,
        monthly_income_interval_days=config.monthly_income_interval_days,
        fixed_incomes=config.fixed_incomes,
        non_accrual_weekday=config.non_accrual_weekday,
        simulator_enabled=config.simulator_enabled,
        sim_initial_capital=config.sim_capital,
        sim_start_index=sim_start_index,
        total_cycles=config.total_cycles,
        cycle_days=config.cycle_days,
        daily_rate=config.daily_rate / 100,
        bonus=config.bonus,
        merge_returns=config.merge_returns,
        withdrawal_weekday=config.withdrawal_weekday,
        withdrawal_fee=config.withdrawal_fee,
        fixed_income_days=frozenset(item.day for item in config.fixed_incomes),
    )


def _chart_point(entry: DayLedgerEntry) -> ChartPoint:
    return ChartPoint(
        date=entry.date,
        balance=from_minor_units(entry.closing_balance),
        income_task=entry.income_task,
        income_recurring=entry.income_recurring,
        returns=entry.returns,
        withdrawn=entry.withdrawn,
        status=entry.status,
        is_cycle_end=entry.is_cycle_end,
        is_start=entry.day_index == 0,
    )


def run_projection(
    config: ProjectionConfig,
    portfolio: Iterable[ContractLike] = (),
    selected_weeks: Iterable = (),
    realized_withdrawals: Iterable[RealizedLike] = (),
    *,
    today: Optional[str] = None,
) -> Optional[Projection]:
    """
    Run the day-stepped projection.

    Parameters
    ----------
    config : ProjectionConfig
        Run configuration (see ProjectionConfig.from_inputs for raw input)
    portfolio : iterable of Contract or mapping
        Fixed-term contracts; mappings are coerced with Contract.from_record
    selected_weeks : iterable of int
        Weeks of the month used by the "weekly" strategy
    realized_withdrawals : iterable of RealizedWithdrawal or mapping
        Manually confirmed withdrawals ({date, amount}); override planning on their date
    today : str, optional
        ISO date used for forward-looking figures (next withdrawal, dashboard snapshot).
        Defaults to the current UTC date, as does a value that does not parse as a date.

    Returns
    -------
    Projection, or None when the config has no start date (run not configured yet).
    """
    start = parse_iso_date(config.start_date)
    if start is None:
        logger.debug("No start date configured; skipping projection")
        return None
    sim_start = parse_iso_date(config.sim_start_date)
    config = replace(
        config,
        start_date=iso(start),
        sim_start_date=iso(sim_start) if sim_start is not None else None,
        view_days=max(config.view_days, 0),
        cycle_days=max(config.cycle_days, 1),
        monthly_income_interval_days=max(config.monthly_income_interval_days, 1),
        daily_rate=coerce_decimal(config.daily_rate),
        withdrawal_fee=coerce_decimal(config.withdrawal_fee),
        bonus=replace(
            config.bonus,
            tier1_bonus=coerce_decimal(config.bonus.tier1_bonus),
            tier2_bonus=coerce_decimal(config.bonus.tier2_bonus),
        ),
    )

    # ledger keys are zero-padded ISO strings; unparseable dates mean "now"
    parsed_today = parse_iso_date(today)
    today = iso(parsed_today) if parsed_today is not None else _utc_today()
    contracts = _as_contracts(portfolio)
    realized = _realized_by_date(realized_withdrawals)
    simulation_days = config.simulation_days

    ctx = build_step_context(config, contracts, selected_weeks, realized, simulation_days)
    total_invested = config.wallet_start + config.sim_capital + ctx.maturities.total_principal

    logger.debug(
        "Projecting %d days from %s (%d contracts, strategy=%s, simulator=%s)",
        simulation_days + 1,
        config.start_date,
        len(contracts),
        config.strategy,
        config.simulator_enabled,
    )

    # ========= MAIN DAY LOOP =========
    state = SimulationState(wallet=config.wallet_start, cycle_timer=config.cycle_days)
    ledger: Dict[str, DayLedgerEntry] = {}
    chart_series: List[ChartPoint] = []
    history: List[WithdrawalRecord] = []
    cycle_ends: List[str] = []
    next_withdrawal: Optional[NextWithdrawal] = None
    total_income = 0
    total_investment_profit = 0

    for d in range(simulation_days + 1):
        state, entry, event = step_day(state, d, ctx)
        ledger[entry.date] = entry

        total_income += entry.income
        total_investment_profit += entry.returns_profit
        if entry.is_cycle_end:
            cycle_ends.append(entry.date)

        if event.withdraws:
            history.append(WithdrawalRecord(date=entry.date, amount=event.net, status=event.status))
            if next_withdrawal is None and event.forecast_net > 0 and entry.date >= today:
                next_withdrawal = NextWithdrawal(date=entry.date, amount=event.forecast_net)

        if d <= config.view_days or d % 5 == 0:
            chart_series.append(_chart_point(entry))

    kpis = compute_kpis(
        ledger,
        total_invested=total_invested,
        final_wallet=state.wallet,
        final_pool=state.pool,
        total_withdrawn=state.total_withdrawn,
        simulation_days=simulation_days,
    )

    results = ProjectionResults(
        net_profit=kpis.net_profit,
        total_income=total_income,
        total_investment_profit=total_investment_profit,
        total_withdrawn=state.total_withdrawn,
        total_invested=total_invested,
        final_balance=state.balance,
        final_wallet=state.wallet,
        final_pool=state.pool,
        roi=kpis.roi,
        avg_monthly_yield=kpis.avg_monthly_yield,
        payback_days=kpis.payback_days,
        break_even_date=kpis.break_even_date,
        next_withdrawal=next_withdrawal,
        withdrawal_history=history,
        chart_series=chart_series,
        simulation=SimulationSummary(
            initial=config.sim_capital,
            final=state.sim_capital,
            profit=state.sim_capital - config.sim_capital,
            cycles=config.total_cycles,
            cycle_days=config.cycle_days,
            total_days=config.total_cycles * config.cycle_days,
        ),
    )
    results.snapshot = build_snapshot(ledger, history, today=today)

    logger.debug(
        "Projection done: final=%d withdrawn=%d roi=%.2f%% break_even=%s",
        results.final_balance,
        results.total_withdrawn,
        results.roi,
        results.break_even_date,
    )
    return Projection(results=results, ledger=ledger, cycle_ends=cycle_ends)
