"""
Portfolio maturity scheduler — precomputes every contract's payout date and amount.

payout = principal + floor(principal × rate/100 × term), computed on exact Decimals
so the floor never depends on binary float error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from core.schema import Contract, MaturityDetail
from core.utils import add_days, floor_amount

logger = logging.getLogger(__name__)


def contract_interest(contract: Contract) -> int:
    """Simple interest over the whole term, floored to the cent."""
    return floor_amount(Decimal(contract.principal) * (contract.daily_rate / 100) * contract.term_days)


def maturity_date(contract: Contract) -> str:
    return add_days(contract.start_date, contract.term_days)


@dataclass(frozen=True)
class MaturitySchedule:
    payouts_by_date: Dict[str, int] = field(default_factory=dict)
    details_by_date: Dict[str, Tuple[MaturityDetail, ...]] = field(default_factory=dict)
    total_principal: int = 0

    def releases_on(self, date: str) -> Tuple[int, Tuple[MaturityDetail, ...]]:
        """(total payout, per-contract breakdown) for a date; (0, ()) if nothing matures."""
        return self.payouts_by_date.get(date, 0), self.details_by_date.get(date, ())


def build_maturity_schedule(contracts: Iterable[Contract]) -> MaturitySchedule:
    """
    Group contract payouts by maturity date.

    Contracts without a usable start date still count towards total_principal
    (they are capital the user put in) but never pay out.
    """
    payouts: Dict[str, int] = {}
    details: Dict[str, List[MaturityDetail]] = {}
    total_principal = 0

    for contract in contracts:
        total_principal += contract.principal
        if not contract.start_date:
            logger.debug("Contract %r has no start date; no maturity scheduled", contract.name)
            continue

        end = maturity_date(contract)
        profit = contract_interest(contract)
        total = contract.principal + profit

        payouts[end] = payouts.get(end, 0) + total
        details.setdefault(end, []).append(
            MaturityDetail(name=contract.name, principal=contract.principal, profit=profit, total=total)
        )

    return MaturitySchedule(
        payouts_by_date=payouts,
        details_by_date={d: tuple(items) for d, items in details.items()},
        total_principal=total_principal,
    )
