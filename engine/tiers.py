from __future__ import annotations

from bisect import bisect_right
from typing import Sequence, Tuple

# Withdrawal bands in cents: 40.00 … 38,000.00. Policy constant, ascending.
WITHDRAWAL_TIERS: Tuple[int, ...] = (
    4000,
    13000,
    40000,
    130000,
    420000,
    850000,
    1900000,
    3800000,
)


def resolve_tier(balance: int, tiers: Sequence[int] = WITHDRAWAL_TIERS) -> int:
    """Largest tier not exceeding ``balance``, or 0 if the balance is below the first tier."""
    idx = bisect_right(tiers, balance)
    return tiers[idx - 1] if idx > 0 else 0
