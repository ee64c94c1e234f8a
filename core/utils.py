from __future__ import annotations

import logging
import math
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

import pandas as pd

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def _parse_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # repr keeps the shortest round-tripping form (1.005 -> "1.005")
        value = repr(float(value))
    try:
        parsed = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


def coerce_decimal(value: Any, default: Decimal = Decimal(0)) -> Decimal:
    """Parse a number-like value into a finite Decimal; anything else is ``default``."""
    parsed = _parse_decimal(value)
    if parsed is None:
        if value not in (None, ""):
            logger.debug("Coercing non-numeric value %r to %s", value, default)
        return default
    return parsed


def coerce_int(value: Any, default: int = 0) -> int:
    """Integer part of a number-like value, else ``default``."""
    parsed = _parse_decimal(value)
    if parsed is None:
        return default
    return int(parsed)


def coerce_bool(value: Any) -> bool:
    """Toggle inputs arrive as bools or as the strings "true"/"false"."""
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return bool(value)


def to_minor_units(value: Any) -> int:
    """Decimal currency amount -> integer cents, rounded half-up. Bad input is 0."""
    amount = coerce_decimal(value)
    return int((amount / _CENT).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> float:
    return cents / 100


def floor_amount(value: Decimal) -> int:
    """Floor an exact Decimal product to whole cents (interest never rounds up)."""
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def apply_fee(amount: int, fee_percent: Decimal) -> int:
    """Net amount left after a flat percentage fee, floored."""
    return floor_amount(Decimal(amount) * (1 - fee_percent / 100))


def parse_iso_date(value: Any) -> pd.Timestamp | None:
    """Normalise a YYYY-MM-DD string (or date-like) to a naive midnight Timestamp."""
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return None
    ts = pd.Timestamp(ts)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.normalize()


def iso(ts: pd.Timestamp) -> str:
    return ts.strftime("%Y-%m-%d")


def add_days(date_str: str, days: int) -> str:
    """Calendar arithmetic on ISO dates, UTC calendar (no DST drift)."""
    return iso(pd.Timestamp(date_str) + pd.Timedelta(days=days))


def days_between(start: str, end: str) -> int:
    return int((pd.Timestamp(end) - pd.Timestamp(start)).days)
