"""
Data preparation — loading saved profiles and CSVs, mapping field names, validation.
"""

from .loader import load_json, load_portfolio_csv, load_profile, load_realized_csv
from .portfolio_builder import (
    build_portfolio,
    build_realized,
    canonicalize_columns,
    canonicalize_inputs,
    parse_selected_weeks,
)
from .validators import ValidationResult, validate_config, validate_portfolio, validate_realized

__all__ = [
    "load_json",
    "load_portfolio_csv",
    "load_profile",
    "load_realized_csv",
    "build_portfolio",
    "build_realized",
    "canonicalize_columns",
    "canonicalize_inputs",
    "parse_selected_weeks",
    "ValidationResult",
    "validate_config",
    "validate_portfolio",
    "validate_realized",
]
