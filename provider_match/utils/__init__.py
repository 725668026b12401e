"""Utilities package for the provider matching engine.

Re-export stable helper functions from the component modules.
"""
# This module intentionally re-exports symbols from submodules. Flake8 F401
# warnings are expected for re-exported names and are silenced locally.
# flake8: noqa: F401

from .availability import is_available, time_to_minutes
from .errors import PricingError, PricingErrorType, ProviderMatchingError, ProviderMatchingErrorType
from .pricing import DEFAULT_PRICING_CONFIG, build_addons, calculate_price, format_price, to_cents
from .scoring import MatchingDefaults, calculate_distances, distance_miles, matches_to_dataframe
from .validation import validate_coordinates, validate_time_string

__all__ = [
    # Geo and availability
    "calculate_distances",
    "distance_miles",
    "is_available",
    "time_to_minutes",
    # Matching
    "MatchingDefaults",
    "matches_to_dataframe",
    "validate_coordinates",
    "validate_time_string",
    # Pricing
    "DEFAULT_PRICING_CONFIG",
    "build_addons",
    "calculate_price",
    "format_price",
    "to_cents",
    # Errors
    "PricingError",
    "PricingErrorType",
    "ProviderMatchingError",
    "ProviderMatchingErrorType",
]
