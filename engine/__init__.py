"""
Projection engine — maturity scheduling, tier ladder, withdrawal rules and the day-stepped runner.
"""

from .maturities import MaturitySchedule, build_maturity_schedule
from .runner import run_projection
from .tiers import WITHDRAWAL_TIERS, resolve_tier

__all__ = [
    "MaturitySchedule",
    "build_maturity_schedule",
    "run_projection",
    "WITHDRAWAL_TIERS",
    "resolve_tier",
]
