"""End-to-end projections. 2025-01-01 is a Wednesday; withdrawals default to Mondays."""

import re

from core.config import BonusSchedule, ProjectionConfig, RecurringIncome
from core.schema import Contract, RealizedWithdrawal
from engine.runner import run_projection

TODAY = "2025-01-01"


def _contract(principal=10000, start="2025-01-01", term=10, rate="1"):
    return {"name": "C1", "principal": principal / 100, "start_date": start, "term_days": term, "daily_rate": rate}


def _run(config, **kwargs):
    kwargs.setdefault("today", TODAY)
    return run_projection(config, **kwargs)


def _assert_ledger_balanced(projection):
    for entry in projection.ledger.values():
        assert entry.closing_balance == (
            entry.opening_balance
            + entry.capital_in
            + entry.income
            + entry.returns
            + entry.reinvested
            - entry.withdrawn_gross
        ), entry.date
        assert entry.closing_balance >= 0


def test_unconfigured_run_returns_none():
    assert run_projection(ProjectionConfig()) is None
    assert run_projection(ProjectionConfig(start_date="not a date")) is None


def test_idle_wallet_stays_flat(make_config):
    projection = _run(make_config(personal_balance=100000))
    assert len(projection.ledger) == 31
    assert all(e.closing_balance == e.opening_balance == 100000 for e in projection.ledger.values())
    assert projection.results.final_balance == 100000
    assert projection.results.net_profit == 0
    assert projection.results.withdrawal_history == []
    assert projection.results.next_withdrawal is None


def test_single_contract_matures_and_breaks_even(make_config):
    projection = _run(make_config(), portfolio=[_contract()])
    entry = projection.ledger["2025-01-11"]
    assert entry.returns == 11000
    assert entry.returns_profit == 1000
    assert len(entry.maturing) == 1
    assert entry.maturing[0].name == "C1"

    results = projection.results
    assert results.total_invested == 10000
    assert results.break_even_date == "2025-01-11"
    assert results.payback_days == 10
    assert results.net_profit == 1000
    assert results.roi == 10.0
    assert results.avg_monthly_yield == 1000.0
    assert results.total_investment_profit == 1000
    _assert_ledger_balanced(projection)


def test_accepts_contract_and_realized_objects(make_config):
    projection = _run(
        make_config(personal_balance=50000),
        portfolio=[Contract.from_record(_contract())],
        realized_withdrawals=[RealizedWithdrawal(date="2025-01-03", amount=10000)],
    )
    assert projection.ledger["2025-01-11"].returns == 11000
    assert projection.ledger["2025-01-03"].status == "realized"


def test_fixed_strategy_waits_for_target(make_config):
    never = _run(make_config(personal_balance=50000, strategy="fixed", withdraw_target=100000))
    assert never.results.withdrawal_history == []

    once = _run(make_config(personal_balance=50000, strategy="fixed", withdraw_target=40000))
    entry = once.ledger["2025-01-06"]
    assert entry.status == "planned"
    assert entry.withdrawn_gross == 40000
    assert entry.withdrawn == 36000
    assert entry.closing_balance == 10000
    assert [w.date for w in once.results.withdrawal_history] == ["2025-01-06"]


def test_max_strategy_walks_down_the_ladder(make_config):
    projection = _run(make_config(personal_balance=50000, strategy="max"))
    history = projection.results.withdrawal_history
    assert [(w.date, w.amount) for w in history] == [
        ("2025-01-06", 36000),
        ("2025-01-13", 3600),
        ("2025-01-20", 3600),
    ]
    assert all(w.status == "planned" for w in history)
    assert projection.results.total_withdrawn == 43200
    assert projection.results.final_balance == 2000
    assert projection.ledger["2025-01-27"].status == "none"
    _assert_ledger_balanced(projection)


def test_weekly_strategy_uses_week_of_month(make_config):
    projection = _run(make_config(personal_balance=50000, strategy="weekly"), selected_weeks=[2])
    history = projection.results.withdrawal_history
    assert [(w.date, w.amount) for w in history] == [("2025-01-13", 36000)]


def test_realized_withdrawal_overrides_strategy(make_config):
    projection = _run(
        make_config(personal_balance=50000),
        realized_withdrawals=[{"date": "2025-01-03", "amount": "100.00"}],
    )
    entry = projection.ledger["2025-01-03"]
    assert entry.status == "realized"
    assert entry.withdrawn == 9000
    assert entry.closing_balance == 40000


def test_realized_first_record_per_date_wins(make_config):
    projection = _run(
        make_config(personal_balance=50000),
        realized_withdrawals=[
            {"date": "2025-01-03", "amount": "123.45"},
            {"date": "2025-01-03", "amount": "5.00"},
        ],
    )
    assert projection.ledger["2025-01-03"].withdrawn == 11110


def test_overdraw_clamps_balance_at_zero(make_config):
    projection = _run(
        make_config(personal_balance=10000),
        realized_withdrawals=[{"date": "2025-01-02", "amount": "1000.00"}],
    )
    entry = projection.ledger["2025-01-02"]
    assert entry.closing_balance == 0
    assert entry.withdrawn_gross == 10000
    assert entry.withdrawn == 90000
    assert projection.results.final_balance == 0


def test_single_reinvestment_cycle(make_config):
    projection = _run(make_config(simulator_enabled=True, sim_initial_capital=8000))
    assert projection.cycle_ends == ["2025-01-04"]
    assert len(projection.ledger) == 34
    entry = projection.ledger["2025-01-04"]
    assert entry.is_cycle_end
    assert entry.reinvested == 536
    assert entry.closing_balance == 8536

    sim = projection.results.simulation
    assert sim.initial == 8000
    assert sim.final == 8536
    assert sim.profit == 536
    assert sim.cycles == 1
    assert sim.total_days == 3
    assert projection.results.total_invested == 8000
    _assert_ledger_balanced(projection)


def test_cycle_bonus_bands(make_config):
    tier2 = _run(make_config(simulator_enabled=True, sim_initial_capital=20000))
    assert tier2.results.final_pool == 21963

    no_bonus = _run(make_config(simulator_enabled=True, sim_initial_capital=4000))
    assert no_bonus.results.final_pool == 4144


def test_repeated_cycles_compound(make_config):
    projection = _run(make_config(simulator_enabled=True, sim_initial_capital=8000, cycle_repetitions=2))
    assert projection.cycle_ends == ["2025-01-04", "2025-01-07"]
    assert projection.ledger["2025-01-07"].closing_balance == 9108


def test_simulator_start_date_delays_capital(make_config):
    projection = _run(
        make_config(simulator_enabled=True, sim_initial_capital=8000, sim_start_date="2025-01-05")
    )
    assert projection.ledger["2025-01-05"].capital_in == 8000
    assert projection.ledger["2025-01-04"].closing_balance == 0
    # the start day itself counts towards the first cycle
    assert projection.cycle_ends == ["2025-01-07"]


def test_merge_moves_maturity_into_pool(make_config):
    projection = _run(
        make_config(simulator_enabled=True, sim_initial_capital=8000, merge_returns=True),
        portfolio=[_contract()],
    )
    entry = projection.ledger["2025-01-11"]
    assert entry.merged == 11000
    assert projection.results.final_pool == 19536
    assert projection.results.final_wallet == 0


def test_withdrawal_takes_wallet_before_pool(make_config):
    projection = _run(
        make_config(personal_balance=1000, simulator_enabled=True, sim_initial_capital=8000),
        realized_withdrawals=[{"date": "2025-01-02", "amount": "50.00"}],
    )
    assert projection.ledger["2025-01-02"].closing_balance == 4000
    assert projection.ledger["2025-01-04"].closing_balance == 4144
    # simulator capital is tracked apart from withdrawals
    assert projection.results.simulation.final == 8536
    _assert_ledger_balanced(projection)


def test_income_streams(make_config):
    projection = _run(make_config(daily_income=500, monthly_income=100000))
    # 30 days after the start, 4 of them Sundays
    assert projection.results.total_income == 26 * 500 + 100000
    assert projection.ledger["2025-01-31"].income_recurring == 100000
    assert projection.ledger["2025-01-05"].income == 0


def test_fixed_day_income(make_config):
    projection = _run(make_config(fixed_incomes=(RecurringIncome(amount=2000, day=15),)))
    assert projection.ledger["2025-01-15"].income_recurring == 2000
    assert projection.results.total_income == 2000


def test_next_withdrawal_looks_forward_from_today(make_config):
    config = make_config(personal_balance=50000, strategy="max")

    early = _run(config, today="2025-01-01").results.next_withdrawal
    assert (early.date, early.amount) == ("2025-01-06", 36000)

    later = _run(config, today="2025-01-10").results.next_withdrawal
    assert (later.date, later.amount) == ("2025-01-13", 3600)


def test_chart_series_thins_days_past_the_view(make_config):
    short = _run(make_config())
    assert len(short.results.chart_series) == 31
    assert short.results.chart_series[0].is_start

    long = _run(make_config(simulator_enabled=True, sim_initial_capital=8000, cycle_repetitions=10))
    assert len(long.ledger) == 61
    assert len(long.results.chart_series) == 37
    assert long.results.chart_series[-1].date == "2025-03-02"


def test_snapshot_is_attached(make_config):
    projection = _run(make_config(personal_balance=50000, strategy="max"), today="2025-01-10")
    snapshot = projection.results.snapshot
    assert snapshot.today == "2025-01-10"
    assert snapshot.current_month_withdrawn == 43200
    assert snapshot.current_balance_today == 10000
    assert snapshot.projected_end_of_month_balance == 2000
    assert [w.date for w in snapshot.next_withdrawals] == ["2025-01-13", "2025-01-20"]


def test_runs_are_deterministic(make_config):
    config = make_config(
        personal_balance=50000,
        strategy="max",
        simulator_enabled=True,
        sim_initial_capital=8000,
        cycle_repetitions=3,
    )
    first = _run(config, portfolio=[_contract()])
    second = _run(config, portfolio=[_contract()])
    assert first.ledger == second.ledger
    assert first.results == second.results


def test_conservation_over_the_whole_run(make_config):
    config = make_config(
        personal_balance=30000,
        daily_income=300,
        monthly_income=5000,
        strategy="max",
        simulator_enabled=True,
        sim_initial_capital=9000,
        cycle_repetitions=4,
        merge_returns=True,
    )
    projection = _run(
        config,
        portfolio=[_contract(), _contract(principal=20000, start="2025-01-03", term=7, rate="1.5")],
        realized_withdrawals=[{"date": "2025-01-09", "amount": "25.00"}],
    )
    entries = list(projection.ledger.values())
    inflow = sum(e.capital_in + e.income + e.returns + e.reinvested for e in entries)
    outflow = sum(e.withdrawn_gross for e in entries)
    assert projection.results.final_balance == config.wallet_start + inflow - outflow
    _assert_ledger_balanced(projection)


def test_today_is_normalised_before_comparing_dates(make_config):
    config = make_config(personal_balance=50000, strategy="max")
    results = _run(config, today="2025-1-1").results
    assert (results.next_withdrawal.date, results.next_withdrawal.amount) == ("2025-01-06", 36000)
    assert results.snapshot.today == "2025-01-01"
    assert results.snapshot.current_month_withdrawn == 43200


def test_unparseable_today_falls_back_to_current_date(make_config):
    projection = _run(make_config(personal_balance=50000, strategy="max"), today="not-a-date")
    assert projection is not None
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", projection.results.snapshot.today)


def test_float_rates_are_coerced(make_config):
    config = make_config(
        simulator_enabled=True,
        sim_initial_capital=8000,
        daily_rate=1.2,
        withdrawal_fee=10.0,
        bonus=BonusSchedule(tier1_bonus=3.0, tier2_bonus=6.0),
    )
    projection = _run(config, realized_withdrawals=[{"date": "2025-01-08", "amount": "10.00"}])
    assert projection.ledger["2025-01-04"].closing_balance == 8536
    assert projection.ledger["2025-01-08"].withdrawn == 900
