"""Shared test configuration and fixtures."""

import sys
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest

sys.path.append("src")

from marketlens.config.settings import Settings, get_settings
from marketlens.models import (
    Classification,
    CompanyProfile,
    DataSource,
    NewsArticle,
    NewsCategory,
    PriceImpact,
    ProviderHealth,
    Quote,
)
from marketlens.providers.registry import ProviderRegistry
from marketlens.services.classification.keywords import load_keyword_tables

NOW = datetime(2024, 6, 3, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time used by time-dependent tests."""
    return NOW


@pytest.fixture
def settings():
    """Settings isolated from the developer's .env file and credentials."""
    return Settings(
        _env_file=None,
        environment="testing",
        twelve_data_api_key=None,
        alpha_vantage_api_key=None,
        news_api_key=None,
        fred_api_key=None,
        yahoo_finance_min_interval=0.0,
    )


@pytest.fixture
def keyed_settings():
    """Settings with every provider credential configured."""
    return Settings(
        _env_file=None,
        environment="testing",
        twelve_data_api_key="td_test_key",
        alpha_vantage_api_key="av_test_key",
        news_api_key="na_test_key",
        fred_api_key="fred_test_key",
        twelve_data_min_interval=0.0,
        news_api_min_interval=0.0,
        yahoo_finance_min_interval=0.0,
        alpha_vantage_min_interval=0.0,
        fred_min_interval=0.0,
    )


@pytest.fixture
def make_quote():
    """Factory for quotes with an optional company profile."""

    def _make(
        symbol="AAPL",
        price=190.0,
        change_percent=0.0,
        volume=50_000_000,
        sector="Technology",
        name="Apple Inc.",
        average_volume=None,
        source=DataSource.YAHOO_FINANCE,
    ):
        profile = CompanyProfile(
            symbol=symbol,
            name=name,
            sector=sector,
            average_volume=average_volume,
            source=source,
        )
        return Quote(
            symbol=symbol,
            price=price,
            change=round(price * change_percent / 100, 2),
            change_percent=change_percent,
            volume=volume,
            previous_close=price,
            source=source,
            profile=profile,
        )

    return _make


@pytest.fixture
def make_article():
    """Factory for raw (unclassified) articles."""

    def _make(
        title="Market update",
        summary=None,
        url=None,
        published_at=NOW,
        provider="news_api",
        content=None,
    ):
        return NewsArticle(
            title=title,
            summary=summary,
            content=content,
            url=url,
            published_at=published_at,
            provider=provider,
        )

    return _make


@pytest.fixture
def make_classified():
    """Factory for articles carrying a hand-built classification."""

    def _make(
        title="Apple news",
        category=NewsCategory.STOCK_SPECIFIC,
        relevance=0.9,
        price_impact=PriceImpact.UNKNOWN,
        sentiment=0.0,
        published_at=NOW,
        url=None,
        competitor=None,
    ):
        article = NewsArticle(
            title=title,
            url=url,
            published_at=published_at,
            provider="news_api",
        )
        return article.classified(
            Classification(
                category=category,
                subcategory="general",
                relevance=relevance,
                sentiment=sentiment,
                urgency=0.5,
                price_impact=price_impact,
                confidence=0.8,
                reason="test",
                affected_competitor=competitor,
            )
        )

    return _make


def make_mock_provider(name, **methods):
    """Provider double whose capability methods are AsyncMocks."""
    provider = Mock()
    provider.name = name
    provider.display_name = name.replace("_", " ").title()
    provider.check_health = AsyncMock(
        return_value=ProviderHealth(service=provider.display_name, status="healthy")
    )
    for method, return_value in methods.items():
        if isinstance(return_value, BaseException):
            setattr(provider, method, AsyncMock(side_effect=return_value))
        else:
            setattr(provider, method, AsyncMock(return_value=return_value))
    return provider


@pytest.fixture
def mock_provider():
    return make_mock_provider


@pytest.fixture
def empty_registry():
    return ProviderRegistry()


@pytest.fixture
def mock_aiohttp():
    """Mock aiohttp sessions so HTTP providers never reach the network."""

    class MockResponseContext:
        def __init__(self, response):
            self.response = response

        async def __aenter__(self):
            return self.response

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    class MockSessionContext:
        def __init__(self, session):
            self.session = session

        async def __aenter__(self):
            return self.session

        async def __aexit__(self, exc_type, exc_val, exc_tb):
            return None

    with patch("marketlens.providers.http.aiohttp.ClientSession") as mock_client_session:
        mock_response = AsyncMock()
        mock_response.status = 200
        mock_response.json = AsyncMock(return_value={})
        mock_response.text = AsyncMock(return_value="")

        mock_session = Mock()
        mock_session.get = Mock(return_value=MockResponseContext(mock_response))

        mock_client_session.return_value = MockSessionContext(mock_session)

        yield {
            "session": mock_session,
            "response": mock_response,
            "client_session": mock_client_session,
        }


@pytest.fixture(autouse=True)
def clean_lru_cache():
    """Clear LRU caches between tests to avoid state pollution."""
    yield

    load_keyword_tables.cache_clear()
    get_settings.cache_clear()
