"""
Configuration and secrets management for the provider matching engine.

This module provides a centralized way to access configuration and secrets,
with fallbacks for every key. Values are read from Streamlit's secrets store
(``.streamlit/secrets.toml``) so the booking front end and this library share
one configuration file.

Usage:
    from provider_match.utils.config import get_api_config, get_matching_config

    # Radius-search RPC connection
    rpc_config = get_api_config('radius_search')
    base_url = rpc_config.get('supabase_url')

    # Matching defaults
    defaults = get_matching_config()
    min_rating = defaults['default_min_rating']
"""

import logging
from typing import Any, Dict, Optional

import streamlit as st

from ..models import HomeSize, PricingConfig, PricingTimeSlot

logger = logging.getLogger(__name__)

DEFAULT_BASE_PRICES = {
    HomeSize.SMALL: 100,
    HomeSize.MEDIUM: 150,
    HomeSize.LARGE: 200,
    HomeSize.XLARGE: 300,
}

DEFAULT_TIME_SLOT_MULTIPLIERS = {
    PricingTimeSlot.STANDARD: 1.0,
    PricingTimeSlot.PEAK: 1.25,
    PricingTimeSlot.OFF_PEAK: 0.85,
}


def get_secret(key_path: str, default: Any = None) -> Any:
    """
    Safely retrieve a secret from Streamlit's secrets management.

    Args:
        key_path: Dot-notation path to the secret (e.g., 'radius_search.supabase_url')
        default: Default value if secret is not found

    Returns:
        The secret value or default if not found

    Examples:
        >>> get_secret('radius_search.supabase_url', '')
        >>> get_secret('matching.default_min_rating', 3)
        >>> get_secret('app.debug_mode', False)
    """
    try:
        keys = key_path.split(".")
        value = st.secrets

        for key in keys:
            try:
                value = value[key]
            except Exception:
                return default

        return value
    except Exception as e:
        logger.warning(f"Failed to retrieve secret '{key_path}': {e}")
        return default


def get_api_config(api_name: str) -> Dict[str, Any]:
    """
    Get configuration for a specific API or service.

    Args:
        api_name: Name of the API/service (currently only 'radius_search')

    Returns:
        Dictionary containing the API configuration
    """
    if api_name == "radius_search":
        return {
            "supabase_url": get_secret("radius_search.supabase_url", ""),
            "supabase_key": get_secret("radius_search.supabase_key", ""),
            "function_name": get_secret("radius_search.function_name", "find_providers_in_radius"),
            "request_timeout": get_secret("radius_search.request_timeout", 10),
        }
    else:
        return {}


def get_matching_config() -> Dict[str, Any]:
    """
    Get default constraints for provider matching.

    Returns:
        Dictionary containing matching defaults
    """
    from .scoring import (
        DEFAULT_MAX_DISTANCE,
        DEFAULT_MIN_COMPLETED_JOBS,
        DEFAULT_MIN_RATING,
        EXPERIENCE_SATURATION_JOBS,
    )

    return {
        "default_min_rating": get_secret("matching.default_min_rating", DEFAULT_MIN_RATING),
        "default_min_completed_jobs": get_secret("matching.default_min_completed_jobs", DEFAULT_MIN_COMPLETED_JOBS),
        "default_max_distance": get_secret("matching.default_max_distance", DEFAULT_MAX_DISTANCE),
        "experience_saturation_jobs": get_secret("matching.experience_saturation_jobs", EXPERIENCE_SATURATION_JOBS),
    }


def get_pricing_config() -> PricingConfig:
    """
    Build the pricing configuration, overlaying secrets on the built-in prices.

    Returns:
        PricingConfig with one entry per home size and time slot
    """
    base_pricing = {
        size: get_secret(f"pricing.base_prices.{size.value}", price) for size, price in DEFAULT_BASE_PRICES.items()
    }
    multipliers = {
        slot: get_secret(f"pricing.time_slot_multipliers.{slot.value}", multiplier)
        for slot, multiplier in DEFAULT_TIME_SLOT_MULTIPLIERS.items()
    }
    return PricingConfig(base_pricing=base_pricing, time_slot_multipliers=multipliers)


def get_app_config() -> Dict[str, Any]:
    """
    Get general application configuration.

    Returns:
        Dictionary containing app configuration
    """
    return {
        "environment": get_secret("app.environment", "production"),
        "debug_mode": get_secret("app.debug_mode", False),
        "log_level": get_secret("app.log_level", "INFO"),
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Send log records to the console at the configured level."""
    level_name = str(level or get_app_config()["log_level"]).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def is_api_enabled(api_name: str) -> bool:
    """
    Check if a specific API is enabled and properly configured.

    Args:
        api_name: Name of the API to check

    Returns:
        True if the API is enabled and has required configuration
    """
    if api_name == "radius_search":
        config = get_api_config("radius_search")
        return bool(config["supabase_url"]) and bool(config["supabase_key"])
    else:
        return False


def validate_configuration() -> Dict[str, str]:
    """
    Validate the configuration and return any warnings or errors.

    Returns:
        Dictionary with configuration validation results
    """
    issues = {}

    rpc_config = get_api_config("radius_search")
    if rpc_config["supabase_url"] and not str(rpc_config["supabase_url"]).startswith(("https://", "http://")):
        issues["radius_search"] = "Supabase URL must start with http:// or https://"
    elif rpc_config["supabase_url"] and not rpc_config["supabase_key"]:
        issues["radius_search"] = "Supabase URL provided but API key is missing"

    pricing = get_pricing_config()
    bad_prices = [size.value for size, price in pricing.base_pricing.items() if not price or price <= 0]
    if bad_prices:
        issues["pricing"] = f"Base prices must be positive: {', '.join(bad_prices)}"

    app_config = get_app_config()
    if app_config["environment"] not in ["development", "staging", "production"]:
        issues["app"] = f"Unknown environment: {app_config['environment']}"

    return issues


if __name__ == "__main__":
    print("Provider Match - Configuration Status")
    print("=" * 50)

    issues = validate_configuration()
    if issues:
        print("⚠️  Configuration Issues Found:")
        for component, issue in issues.items():
            print(f"  - {component}: {issue}")
    else:
        print("✅ Configuration validation passed")

    status = "✅ Enabled" if is_api_enabled("radius_search") else "❌ Disabled/Not configured"
    print(f"\n📋 Radius search: {status}")
    print(f"\n🔧 Environment: {get_app_config()['environment']}")
