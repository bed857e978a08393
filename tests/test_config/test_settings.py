"""Tests for application settings."""

import sys
from unittest.mock import patch

import pytest
from pydantic import ValidationError

sys.path.append("src")
import structlog

from marketlens.config.logging import _parse_file_size, setup_logging
from marketlens.config.settings import Settings, get_settings


class TestSettings:
    """Test settings defaults and validation."""

    def test_defaults(self, settings):
        assert settings.cache_default_ttl == 300.0
        assert settings.market_overview_ttl == 120.0
        assert settings.historical_ttl == 900.0
        assert settings.profile_ttl == 3600.0
        assert settings.alpha_vantage_min_interval == 12.0
        assert settings.news_relevance_floor == 0.1
        assert settings.news_relevance_tie_band == 0.2
        assert settings.alert_min_priority == 6

    def test_watchlist_symbols_are_normalized(self):
        settings = Settings(_env_file=None, default_watchlist=" aapl, msft ,,tsla")
        assert settings.watchlist_symbols() == ["AAPL", "MSFT", "TSLA"]

    def test_watchlist_from_environment(self):
        with patch.dict("os.environ", {"DEFAULT_WATCHLIST": "nvda,amd"}):
            settings = Settings(_env_file=None)
        assert settings.watchlist_symbols() == ["NVDA", "AMD"]

    def test_blank_and_placeholder_keys_are_missing(self):
        settings = Settings(
            _env_file=None,
            twelve_data_api_key="   ",
            news_api_key="your_key_here",
        )
        assert settings.twelve_data_api_key is None
        assert settings.news_api_key is None

    def test_configured_providers(self, keyed_settings, settings):
        assert all(keyed_settings.configured_providers().values())

        configured = settings.configured_providers()
        assert configured["yahoo_finance"] is True
        assert configured["twelve_data"] is False
        assert configured["fred"] is False

    def test_invalid_environment(self):
        with pytest.raises(ValidationError, match="Environment must be one of"):
            Settings(_env_file=None, environment="staging")

    def test_environment_is_lower_cased(self):
        assert Settings(_env_file=None, environment="PRODUCTION").environment == "production"

    def test_log_level_is_upper_cased(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="Log level must be one of"):
            Settings(_env_file=None, log_level="verbose")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError, match="Log format must be one of"):
            Settings(_env_file=None, log_format="xml")

    def test_durations_must_be_positive(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            Settings(_env_file=None, cache_default_ttl=0)

    def test_rate_limit_interval_cannot_be_negative(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Settings(_env_file=None, alpha_vantage_min_interval=-1)

    def test_relevance_thresholds_in_unit_interval(self):
        with pytest.raises(ValidationError, match="between 0 and 1"):
            Settings(_env_file=None, news_relevance_tie_band=1.5)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestLoggingHelpers:
    """Test logging configuration helpers."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            ("10MB", 10 * 1024 * 1024),
            ("512kb", 512 * 1024),
            ("1GB", 1024**3),
            ("2048", 2048),
        ],
    )
    def test_parse_file_size(self, size, expected):
        assert _parse_file_size(size) == expected

    def test_invalid_file_size(self):
        with pytest.raises(ValueError, match="Invalid file size"):
            _parse_file_size("ten megabytes")

    @pytest.mark.parametrize(
        "log_format,renderer",
        [
            ("structured", structlog.processors.JSONRenderer),
            ("plain", structlog.dev.ConsoleRenderer),
        ],
    )
    def test_renderer_follows_log_format(self, log_format, renderer):
        settings = Settings(_env_file=None, log_format=log_format)
        with patch("marketlens.config.logging.structlog.configure") as configure, patch(
            "marketlens.config.logging.logging.basicConfig"
        ):
            setup_logging(settings)
        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], renderer)

    def test_file_handler_added_when_enabled(self, tmp_path):
        settings = Settings(
            _env_file=None,
            log_file_enabled=True,
            log_file_path=str(tmp_path / "logs" / "marketlens.log"),
            log_max_file_size="1MB",
            log_backup_count=2,
        )
        with patch("marketlens.config.logging.structlog.configure"), patch(
            "marketlens.config.logging.logging.basicConfig"
        ) as basic_config:
            setup_logging(settings)
        handlers = basic_config.call_args.kwargs["handlers"]
        assert len(handlers) == 2
        assert handlers[1].maxBytes == 1024**2
        assert handlers[1].backupCount == 2
        assert (tmp_path / "logs").is_dir()
        handlers[1].close()
