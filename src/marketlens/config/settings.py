"""Application settings and configuration management using Pydantic."""

from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Main application settings combining all configuration sections."""

    # Environment and deployment
    environment: str = "development"

    # Provider credentials (a missing key removes the provider from fan-out)
    twelve_data_api_key: Optional[str] = None
    alpha_vantage_api_key: Optional[str] = None
    news_api_key: Optional[str] = None
    fred_api_key: Optional[str] = None

    # Cache lifetimes in seconds
    cache_default_ttl: float = 300.0
    market_overview_ttl: float = 120.0
    historical_ttl: float = 900.0
    profile_ttl: float = 3600.0

    # Minimum spacing between requests to the same provider, in seconds
    twelve_data_min_interval: float = 1.0
    news_api_min_interval: float = 1.0
    yahoo_finance_min_interval: float = 0.5
    alpha_vantage_min_interval: float = 12.0
    fred_min_interval: float = 1.0

    provider_timeout_seconds: float = 10.0

    # News ranking
    news_relevance_floor: float = 0.1
    news_relevance_tie_band: float = 0.2

    # Aggregation defaults
    default_sector: str = "Technology"
    search_result_limit: int = 10
    average_volume_days: int = 20
    default_watchlist: str = "AAPL,TSLA,GOOGL,MSFT,NVDA"
    alert_min_priority: int = 6

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "structured"  # 'structured' or 'plain'
    log_file_enabled: bool = False
    log_file_path: str = "data/marketlens.log"
    log_max_file_size: str = "10MB"
    log_backup_count: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        valid_environments = ["development", "testing", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator(
        "twelve_data_api_key", "alpha_vantage_api_key", "news_api_key", "fred_api_key"
    )
    @classmethod
    def blank_key_is_missing(cls, v):
        """Treat empty strings and template placeholders as unset credentials."""
        if v is None:
            return None
        v = v.strip()
        if not v or v == "your_key_here":
            return None
        return v

    @field_validator(
        "cache_default_ttl",
        "market_overview_ttl",
        "historical_ttl",
        "profile_ttl",
        "provider_timeout_seconds",
    )
    @classmethod
    def validate_positive_duration(cls, v):
        """Durations must be strictly positive."""
        if v <= 0:
            raise ValueError("Duration must be greater than zero")
        return v

    @field_validator(
        "twelve_data_min_interval",
        "news_api_min_interval",
        "yahoo_finance_min_interval",
        "alpha_vantage_min_interval",
        "fred_min_interval",
    )
    @classmethod
    def validate_interval(cls, v):
        """Rate limit spacing cannot be negative."""
        if v < 0:
            raise ValueError("Minimum request interval cannot be negative")
        return v

    @field_validator("news_relevance_floor", "news_relevance_tie_band")
    @classmethod
    def validate_unit_interval(cls, v):
        """Relevance thresholds live on the [0, 1] relevance scale."""
        if v < 0 or v > 1:
            raise ValueError("Relevance thresholds must be between 0 and 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        valid_formats = ["structured", "plain"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    def watchlist_symbols(self) -> List[str]:
        """Default watchlist as upper-cased symbols."""
        return [s.strip().upper() for s in self.default_watchlist.split(",") if s.strip()]

    def configured_providers(self) -> Dict[str, bool]:
        """Report which keyed providers have credentials."""
        return {
            "twelve_data": bool(self.twelve_data_api_key),
            "alpha_vantage": bool(self.alpha_vantage_api_key),
            "news_api": bool(self.news_api_key),
            "fred": bool(self.fred_api_key),
            "yahoo_finance": True,
        }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
