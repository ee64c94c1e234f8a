from decimal import Decimal

from core.schema import Contract
from engine.maturities import build_maturity_schedule, contract_interest, maturity_date


def _make_contract(name="A", principal=10000, start="2025-01-01", term=10, rate="1"):
    return Contract(name=name, principal=principal, start_date=start, term_days=term, daily_rate=Decimal(rate))


def test_interest_is_floored_on_exact_decimals():
    assert contract_interest(_make_contract(principal=10000, term=10, rate="1")) == 1000
    assert contract_interest(_make_contract(principal=33333, term=7, rate="1.5")) == 3499


def test_maturity_date_crosses_month_end():
    assert maturity_date(_make_contract(start="2025-01-25", term=10)) == "2025-02-04"


def test_schedule_aggregates_same_day_payouts():
    schedule = build_maturity_schedule(
        [
            _make_contract(name="A", principal=10000, term=10, rate="1"),
            _make_contract(name="B", principal=5000, start="2025-01-06", term=5, rate="2"),
            _make_contract(name="C", principal=7000, term=20, rate="0"),
        ]
    )
    total, details = schedule.releases_on("2025-01-11")
    assert total == 11000 + 5500
    assert [d.name for d in details] == ["A", "B"]
    assert details[1].profit == 500
    assert details[1].total == 5500

    assert schedule.releases_on("2025-01-21")[0] == 7000
    assert schedule.releases_on("2025-01-12") == (0, ())
    assert schedule.total_principal == 22000


def test_contract_without_start_date_counts_principal_only():
    schedule = build_maturity_schedule([_make_contract(start=None, principal=9000)])
    assert schedule.total_principal == 9000
    assert schedule.payouts_by_date == {}


def test_contract_from_record_coerces_fields():
    contract = Contract.from_record(
        {"name": "X", "principal": "100.00", "start_date": "2025-01-01", "term_days": "10", "daily_rate": "1.2"}
    )
    assert contract == Contract("X", 10000, "2025-01-01", 10, Decimal("1.2"))

    bad = Contract.from_record({"principal": "abc", "start_date": "nope"})
    assert bad.principal == 0
    assert bad.start_date is None
    assert bad.term_days == 0
