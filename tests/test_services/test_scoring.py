"""Tests for priority scores, alerts and digest insights."""

import sys

import pytest

sys.path.append("src")
from marketlens.models import IndexSnapshot, NewsCategory, PriceImpact
from marketlens.services.correlation import DriverType, MarketCorrelator
from marketlens.services.digest import (
    AlertSeverity,
    AlertType,
    CategoryBreakdown,
    MovementSummary,
    StockDigest,
    StockSnapshot,
    calculate_priority_score,
    generate_alerts,
    generate_insights,
    market_direction,
)


@pytest.fixture
def score(make_quote):
    """Score and alerts for a quote and news, analyzed with default market inputs."""
    correlator = MarketCorrelator()

    def _score(change_percent=0.0, news=(), volume=50_000_000, average_volume=None):
        quote = make_quote(change_percent=change_percent, volume=volume)
        analysis = correlator.analyze_movement(
            "AAPL", quote, list(news), average_volume=average_volume
        )
        return (
            calculate_priority_score(quote, list(news), analysis),
            generate_alerts(quote, list(news), analysis),
            analysis,
        )

    return _score


def make_stock(symbol, explanation="No clear catalyst", sector="Technology", change=0.0, priority=0):
    return StockDigest(
        symbol=symbol,
        stock=StockSnapshot(
            name=symbol,
            price=100.0,
            change=change,
            change_percent=change,
            volume=None,
            sector=sector,
        ),
        movement=MovementSummary(explanation=explanation, confidence=0.5, primary_driver="x"),
        news_breakdown=CategoryBreakdown(),
        top_news=[],
        priority_score=priority,
        alerts=[],
    )


class TestPriorityScore:
    """Test the additive priority score."""

    def test_big_drop_with_high_impact_news(self, score, make_classified):
        news = [make_classified(price_impact=PriceImpact.HIGH)]

        priority, alerts, analysis = score(-6.2, news)

        # 4 (price) + 2 (relevance) + 1.5 (stock-specific) + 2 (impact) rounds half up
        assert priority == 10
        assert analysis.driver.primary == DriverType.STOCK_SPECIFIC_NEWS
        price_alerts = [a for a in alerts if a.alert_type == AlertType.PRICE_MOVEMENT]
        assert price_alerts[0].severity == AlertSeverity.HIGH
        assert price_alerts[0].message == "AAPL dropped 6.2%"

    def test_quiet_day_scores_zero(self, score):
        priority, alerts, _ = score(0.2)

        assert priority == 0
        assert alerts == []

    @pytest.mark.parametrize(
        "change,expected", [(0.5, 0), (1.5, 1), (2.5, 2), (3.5, 3), (5.5, 4), (-5.5, 4)]
    )
    def test_price_tiers(self, score, change, expected):
        assert score(change)[0] == expected

    def test_monotonic_in_price_change(self, score):
        scores = [score(change)[0] for change in (0, 1.2, 2.2, 3.2, 5.2, 9.0)]
        assert scores == sorted(scores)

    def test_relevance_and_stock_counts_are_capped(self, score, make_classified):
        news = [make_classified(title=f"Apple {i}") for i in range(6)]

        # min(12, 6) + min(9, 4)
        assert score(0.0, news)[0] == 10

    def test_industry_news_counts_relevance_only(self, score, make_classified):
        news = [make_classified(category=NewsCategory.INDUSTRY, relevance=0.8)]

        assert score(0.0, news)[0] == 2

    def test_volume_significance(self, score):
        assert score(0.0, volume=30_000_000, average_volume=10_000_000)[0] == 2
        assert score(0.0, volume=18_000_000, average_volume=10_000_000)[0] == 1

    def test_always_within_bounds(self, score, make_classified):
        news = [make_classified(title=f"Apple {i}", price_impact=PriceImpact.HIGH) for i in range(8)]

        priority = score(-12.0, news, volume=90_000_000, average_volume=10_000_000)[0]

        assert priority == 10


class TestAlerts:
    """Test independent alert rules."""

    def test_medium_price_alert(self, score):
        _, alerts, _ = score(4.0)

        assert len(alerts) == 1
        assert alerts[0].severity == AlertSeverity.MEDIUM
        assert alerts[0].message == "AAPL moved 4.0%"

    def test_surge_message(self, score):
        _, alerts, _ = score(7.34)
        assert alerts[0].message == "AAPL surged 7.3%"

    def test_news_volume_and_high_impact_alerts(self, score, make_classified):
        news = [make_classified(title="Apple deal", price_impact=PriceImpact.HIGH)] + [
            make_classified(title=f"Apple {i}") for i in range(2)
        ]

        _, alerts, _ = score(0.0, news)

        by_type = {a.alert_type: a for a in alerts}
        assert by_type[AlertType.HIGH_IMPACT_NEWS].message == "1 high-impact news article for AAPL"
        assert by_type[AlertType.NEWS_VOLUME].message == "High news activity for AAPL (3 articles)"
        assert AlertType.PRICE_MOVEMENT not in by_type

    def test_volume_spike(self, score):
        _, alerts, _ = score(0.0, volume=30_000_000, average_volume=10_000_000)

        assert [a.alert_type for a in alerts] == [AlertType.VOLUME_SPIKE]
        assert alerts[0].explanation == "Trading volume is 3.0x average"

    def test_alerts_co_occur(self, score, make_classified):
        news = [make_classified(title=f"Apple {i}", price_impact=PriceImpact.HIGH) for i in range(3)]

        _, alerts, _ = score(-8.0, news, volume=30_000_000, average_volume=10_000_000)

        assert {a.alert_type for a in alerts} == set(AlertType)
        assert "3 high-impact news articles" in next(
            a.message for a in alerts if a.alert_type == AlertType.HIGH_IMPACT_NEWS
        )


class TestInsights:
    """Test cross-symbol insights."""

    def test_market_correlation(self):
        stocks = [
            make_stock("AAPL", "Movement correlates strongly with broader market (up)."),
            make_stock("MSFT", "Movement correlates strongly with broader market (up)."),
            make_stock("GOOGL", "Movement correlates strongly with broader market (up)."),
            make_stock("TSLA", "Unusual trading volume detected."),
        ]

        insights = generate_insights(stocks)

        insight = next(i for i in insights if i.type == "market_correlation")
        assert insight.message == "3/4 stocks moving with broader market"
        assert insight.symbols == ["AAPL", "MSFT", "GOOGL"]

    def test_no_market_insight_at_sixty_percent(self):
        stocks = [make_stock(s, "broader market") for s in ("A", "B", "C")] + [
            make_stock("D", "Unusual"),
            make_stock("E", "Unusual"),
        ]

        assert all(i.type != "market_correlation" for i in generate_insights(stocks))

    def test_sector_movement(self):
        stocks = [
            make_stock("AAPL", "x", change=3.0),
            make_stock("MSFT", "x", change=4.0),
            make_stock("XOM", "x", sector="Energy", change=-5.0),
        ]

        insights = generate_insights(stocks)

        [sector] = [i for i in insights if i.type == "sector_movement"]
        assert sector.message == "Technology sector up 3.5% on average"
        assert sector.significance == "high"

    def test_medium_sector_movement(self):
        stocks = [make_stock("AAPL", "x", change=-2.5), make_stock("MSFT", "x", change=-2.1)]

        [sector] = [i for i in generate_insights(stocks) if i.type == "sector_movement"]

        assert sector.message == "Technology sector down 2.3% on average"
        assert sector.significance == "medium"

    def test_high_priority(self):
        stocks = [make_stock("AAPL", "x", priority=8), make_stock("MSFT", "x", priority=7)]

        [insight] = [i for i in generate_insights(stocks) if i.type == "high_priority"]

        assert insight.symbols == ["AAPL"]
        assert insight.message == "1 stocks require immediate attention"

    def test_no_stocks(self):
        assert generate_insights([]) == []


class TestMarketDirection:
    def test_direction(self):
        def indices(*changes):
            return {
                f"I{i}": IndexSnapshot(symbol=f"I{i}", change_percent=c)
                for i, c in enumerate(changes)
            }

        assert market_direction(indices(0.8, 0.4)) == "bullish"
        assert market_direction(indices(-1.0, -0.2)) == "bearish"
        assert market_direction(indices(0.5)) == "neutral"
        assert market_direction({}) == "neutral"
