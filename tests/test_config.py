"""Test suite for configuration helpers.

Streamlit's secrets store is replaced with a plain dict via ``mock_secrets``.
"""
import logging

from provider_match.models import HomeSize, PricingTimeSlot
from provider_match.utils.config import (
    configure_logging,
    get_api_config,
    get_app_config,
    get_matching_config,
    get_pricing_config,
    get_secret,
    is_api_enabled,
    validate_configuration,
)
from provider_match.utils.scoring import MatchingDefaults


class TestGetSecret:
    def test_nested_lookup(self, mock_secrets):
        mock_secrets["radius_search"] = {"supabase_url": "https://proj.supabase.co"}

        assert get_secret("radius_search.supabase_url") == "https://proj.supabase.co"

    def test_missing_key_returns_default(self, mock_secrets):
        assert get_secret("radius_search.supabase_url", "fallback") == "fallback"

    def test_partial_path_returns_default(self, mock_secrets):
        mock_secrets["app"] = "not-a-table"

        assert get_secret("app.debug_mode", False) is False


class TestApiConfig:
    def test_defaults(self, mock_secrets):
        config = get_api_config("radius_search")

        assert config == {
            "supabase_url": "",
            "supabase_key": "",
            "function_name": "find_providers_in_radius",
            "request_timeout": 10,
        }
        assert is_api_enabled("radius_search") is False

    def test_enabled_when_url_and_key_set(self, mock_secrets):
        mock_secrets["radius_search"] = {"supabase_url": "https://proj.supabase.co", "supabase_key": "k"}

        assert is_api_enabled("radius_search") is True

    def test_unknown_api(self, mock_secrets):
        assert get_api_config("geocoding") == {}
        assert is_api_enabled("geocoding") is False


class TestMatchingConfig:
    def test_builtin_defaults(self, mock_secrets):
        config = get_matching_config()

        assert config["default_min_rating"] == 3
        assert config["default_min_completed_jobs"] == 10
        assert config["default_max_distance"] == 50
        assert config["experience_saturation_jobs"] == 100

    def test_overrides_feed_matching_defaults(self, mock_secrets):
        mock_secrets["matching"] = {"default_min_rating": 4, "default_max_distance": 25}

        defaults = MatchingDefaults.from_config()

        assert defaults.min_rating == 4.0
        assert defaults.max_distance == 25.0
        assert defaults.min_completed_jobs == 10


class TestPricingConfig:
    def test_builtin_prices(self, mock_secrets):
        config = get_pricing_config()

        assert config.base_pricing[HomeSize.XLARGE] == 300
        assert config.time_slot_multipliers[PricingTimeSlot.OFF_PEAK] == 0.85

    def test_overrides(self, mock_secrets):
        mock_secrets["pricing"] = {"base_prices": {"SMALL": 120}, "time_slot_multipliers": {"PEAK": 1.5}}

        config = get_pricing_config()

        assert config.base_pricing[HomeSize.SMALL] == 120
        assert config.base_pricing[HomeSize.MEDIUM] == 150
        assert config.time_slot_multipliers[PricingTimeSlot.PEAK] == 1.5


class TestValidateConfiguration:
    def test_clean_configuration(self, mock_secrets):
        assert validate_configuration() == {}

    def test_url_without_scheme(self, mock_secrets):
        mock_secrets["radius_search"] = {"supabase_url": "proj.supabase.co", "supabase_key": "k"}

        assert "radius_search" in validate_configuration()

    def test_url_without_key(self, mock_secrets):
        mock_secrets["radius_search"] = {"supabase_url": "https://proj.supabase.co"}

        assert "API key is missing" in validate_configuration()["radius_search"]

    def test_non_positive_price(self, mock_secrets):
        mock_secrets["pricing"] = {"base_prices": {"LARGE": 0}}

        assert "LARGE" in validate_configuration()["pricing"]

    def test_unknown_environment(self, mock_secrets):
        mock_secrets["app"] = {"environment": "qa"}

        assert "app" in validate_configuration()


class TestAppConfig:
    def test_defaults(self, mock_secrets):
        assert get_app_config() == {"environment": "production", "debug_mode": False, "log_level": "INFO"}

    def test_configure_logging_uses_level(self, mock_secrets, monkeypatch):
        captured = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
        mock_secrets["app"] = {"log_level": "debug"}

        configure_logging()

        assert captured["level"] == logging.DEBUG

    def test_explicit_level_wins(self, mock_secrets, monkeypatch):
        captured = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

        configure_logging("warning")

        assert captured["level"] == logging.WARNING
