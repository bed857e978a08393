"""Tests for movement driver analysis."""

import sys

import pytest

sys.path.append("src")
from marketlens.models import NewsCategory, PriceImpact
from marketlens.services.correlation import (
    Alignment,
    CorrelationStrength,
    DriverType,
    MarketCorrelator,
    sector_etf,
)
from marketlens.services.correlation.correlator import (
    alignment,
    correlation_strength,
    volume_pattern,
    volume_significance,
)


@pytest.fixture
def correlator():
    return MarketCorrelator()


class TestHeuristics:
    """Test the sign-alignment and bucketing helpers."""

    @pytest.mark.parametrize(
        "change,other,expected",
        [
            (1.0, 2.0, Alignment.SAME),
            (-1.0, -0.5, Alignment.SAME),
            (1.0, -2.0, Alignment.OPPOSITE),
            (0.0, 2.0, Alignment.NEUTRAL),
            (1.0, 0.0, Alignment.NEUTRAL),
        ],
    )
    def test_alignment(self, change, other, expected):
        assert alignment(change, other) == expected

    def test_strength_buckets(self):
        assert correlation_strength(0.8) == CorrelationStrength.STRONG
        assert correlation_strength(-0.8) == CorrelationStrength.STRONG
        assert correlation_strength(0.5) == CorrelationStrength.MEDIUM
        assert correlation_strength(0.1) == CorrelationStrength.WEAK

    @pytest.mark.parametrize(
        "ratio,pattern,significance",
        [
            (0.4, "very low", "low"),
            (0.7, "low", "normal"),
            (1.0, "normal", "normal"),
            (1.6, "high", "medium"),
            (2.2, "very high", "medium"),
            (2.6, "very high", "high"),
            (3.5, "extremely high", "high"),
        ],
    )
    def test_volume_buckets(self, ratio, pattern, significance):
        assert volume_pattern(ratio) == pattern
        assert volume_significance(ratio) == significance

    def test_sector_etf(self):
        assert sector_etf("Technology") == "XLK"
        assert sector_etf("Financial Services") == "XLF"
        assert sector_etf("Consumer Cyclical") == "XLY"
        assert sector_etf("Automotive") is None
        assert sector_etf(None) is None


class TestAnalyzeMovement:
    """Test the driver cascade and confidence adjustment."""

    def test_high_impact_company_news(self, correlator, make_quote, make_classified):
        news = [make_classified(price_impact=PriceImpact.HIGH)]

        analysis = correlator.analyze_movement("aapl", make_quote(change_percent=-6.2), news)

        assert analysis.symbol == "AAPL"
        assert analysis.driver.primary == DriverType.STOCK_SPECIFIC_NEWS
        assert analysis.confidence == pytest.approx(0.9)
        assert analysis.news_analysis.has_high_impact_news
        assert analysis.explanation.startswith("Movement primarily driven by company-specific news.")
        assert "1 relevant articles" in analysis.explanation

    def test_quiet_day_without_news(self, correlator, make_quote):
        analysis = correlator.analyze_movement("AAPL", make_quote(change_percent=0.2), [])

        assert analysis.driver.primary == DriverType.UNEXPLAINED_MARKET
        assert analysis.confidence == pytest.approx(0.4)
        assert analysis.market.strength == CorrelationStrength.WEAK
        assert analysis.factors == []

    def test_market_driven(self, correlator, make_quote):
        analysis = correlator.analyze_movement(
            "AAPL", make_quote(change_percent=0.2), [], market_change=1.0
        )

        assert analysis.driver.primary == DriverType.MARKET_DRIVEN
        assert analysis.confidence == pytest.approx(0.9)
        assert analysis.market.market_direction == "up"
        assert "broader market (up)" in analysis.explanation
        assert [f.type for f in analysis.factors] == ["market-correlation"]

    def test_many_company_articles(self, correlator, make_quote, make_classified):
        news = [make_classified(title=f"Apple {i}") for i in range(3)]

        analysis = correlator.analyze_movement("AAPL", make_quote(change_percent=1.5), news)

        assert analysis.driver.primary == DriverType.STOCK_SPECIFIC_NEWS
        assert analysis.news_analysis.explanation_power == 1.0
        assert analysis.confidence == pytest.approx(0.9)
        assert analysis.factors[-1].type == "news-stock-specific"
        assert analysis.factors[-1].strength == "high"
        assert analysis.factors[-1].description == "3 stock specific news articles"

    def test_industry_sector(self, correlator, make_quote, make_classified):
        news = [
            make_classified(title=f"Peer {i}", category=NewsCategory.COMPETITOR, relevance=0.5)
            for i in range(3)
        ]

        analysis = correlator.analyze_movement("AAPL", make_quote(change_percent=1.5), news)

        assert analysis.driver.primary == DriverType.INDUSTRY_SECTOR
        assert analysis.confidence == pytest.approx(0.7)

    def test_sector_driven(self, correlator, make_quote):
        analysis = correlator.analyze_movement(
            "AAPL",
            make_quote(change_percent=2.0),
            [],
            sector_change=1.5,
            sector="Technology",
        )

        assert analysis.driver.primary == DriverType.SECTOR_DRIVEN
        assert analysis.confidence == pytest.approx(0.8)
        assert analysis.sector.outperformance == pytest.approx(0.5)
        assert analysis.explanation.startswith("Movement follows Technology sector trend.")

    def test_unusual_activity(self, correlator, make_quote):
        analysis = correlator.analyze_movement(
            "AAPL",
            make_quote(change_percent=4.0, volume=30_000_000),
            [],
            average_volume=10_000_000,
        )

        assert analysis.volume_analysis.ratio == pytest.approx(3.0)
        assert analysis.driver.primary == DriverType.UNUSUAL_ACTIVITY
        assert analysis.confidence == pytest.approx(0.6)
        assert analysis.factors[0].type == "volume-pattern"

    def test_macro_events(self, correlator, make_quote, make_classified):
        news = [
            make_classified(title=f"Fed {i}", category=NewsCategory.MACRO, relevance=0.5)
            for i in range(3)
        ]

        analysis = correlator.analyze_movement(
            "AAPL", make_quote(change_percent=1.0), news, market_change=1.0
        )

        assert analysis.driver.primary == DriverType.MACRO_EVENTS
        assert analysis.confidence == pytest.approx(0.7)

    def test_opposite_market_with_news_lowers_confidence(
        self, correlator, make_quote, make_classified
    ):
        news = [make_classified(price_impact=PriceImpact.HIGH)]

        analysis = correlator.analyze_movement(
            "AAPL", make_quote(change_percent=-1.0), news, market_change=1.0
        )

        assert analysis.market.alignment == Alignment.OPPOSITE
        assert analysis.confidence == pytest.approx(0.8)

    def test_confidence_is_clamped(self, correlator, make_quote, make_classified):
        news = [make_classified(title=f"Apple {i}", price_impact=PriceImpact.HIGH) for i in range(3)]

        analysis = correlator.analyze_movement(
            "AAPL",
            make_quote(change_percent=2.0),
            news,
            market_change=1.0,
            sector_change=1.0,
            sector="Technology",
        )

        assert analysis.confidence == 0.95

    def test_low_relevance_news_is_ignored(self, correlator, make_quote, make_classified):
        news = [make_classified(relevance=0.3, price_impact=PriceImpact.HIGH)]

        analysis = correlator.analyze_movement("AAPL", make_quote(change_percent=-6.2), news)

        assert analysis.news_analysis.total_relevant == 0
        assert analysis.driver.primary == DriverType.UNEXPLAINED_MARKET

    def test_unknown_average_volume_is_normal(self, correlator, make_quote):
        analysis = correlator.analyze_movement(
            "AAPL", make_quote(volume=90_000_000), [], average_volume=0
        )

        assert analysis.volume_analysis.ratio == 1.0
        assert analysis.volume_analysis.significance == "normal"

    def test_no_sector_without_sector_change(self, correlator, make_quote):
        analysis = correlator.analyze_movement("AAPL", make_quote(change_percent=1.0), [])

        assert analysis.sector is None
