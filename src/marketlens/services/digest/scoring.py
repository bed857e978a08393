"""Priority scores, alerts and cross-symbol insights."""

import math
from collections import defaultdict
from typing import Dict, List, Mapping, Sequence

from ...models import IndexSnapshot, NewsArticle, NewsCategory, PriceImpact, Quote
from ..correlation import CorrelationAnalysis
from .models import Alert, AlertSeverity, AlertType, Insight, StockDigest

MAX_PRIORITY = 10
HIGH_PRIORITY_THRESHOLD = 7


def _price_tier(magnitude: float) -> int:
    if magnitude > 5:
        return 4
    if magnitude > 3:
        return 3
    if magnitude > 2:
        return 2
    if magnitude > 1:
        return 1
    return 0


def calculate_priority_score(
    quote: Quote, news: Sequence[NewsArticle], analysis: CorrelationAnalysis
) -> int:
    """
    Score how much attention a symbol needs, from 0 to 10.

    Combines the price move tier, high-relevance and stock-specific news
    counts, volume significance and high-impact news count. Rounded half-up
    and capped.
    """
    score = float(_price_tier(abs(quote.change_percent)))

    high_relevance = sum(1 for a in news if a.relevance > 0.7)
    stock_specific = sum(1 for a in news if a.category == NewsCategory.STOCK_SPECIFIC)
    high_impact = _high_impact(news)

    score += min(high_relevance * 2, 6)
    score += min(stock_specific * 1.5, 4)

    significance = analysis.volume_analysis.significance
    if significance == "high":
        score += 2
    elif significance == "medium":
        score += 1

    score += len(high_impact) * 2

    return max(0, min(int(math.floor(score + 0.5)), MAX_PRIORITY))


def _high_impact(news: Sequence[NewsArticle]) -> List[NewsArticle]:
    return [
        a
        for a in news
        if a.classification is not None and a.classification.price_impact == PriceImpact.HIGH
    ]


def generate_alerts(
    quote: Quote, news: Sequence[NewsArticle], analysis: CorrelationAnalysis
) -> List[Alert]:
    """Independent alert rules; any number of them may fire together."""
    alerts = []
    symbol = quote.symbol
    change = quote.change_percent
    magnitude = abs(change)

    if magnitude > 5:
        alerts.append(
            Alert(
                symbol=symbol,
                alert_type=AlertType.PRICE_MOVEMENT,
                severity=AlertSeverity.HIGH,
                message=f"{symbol} {'surged' if change > 0 else 'dropped'} {magnitude:.1f}%",
                explanation=analysis.explanation or "Significant price movement detected",
            )
        )
    elif magnitude > 3:
        alerts.append(
            Alert(
                symbol=symbol,
                alert_type=AlertType.PRICE_MOVEMENT,
                severity=AlertSeverity.MEDIUM,
                message=f"{symbol} moved {magnitude:.1f}%",
                explanation=analysis.explanation or "Notable price movement",
            )
        )

    high_impact = _high_impact(news)
    if high_impact:
        count = len(high_impact)
        alerts.append(
            Alert(
                symbol=symbol,
                alert_type=AlertType.HIGH_IMPACT_NEWS,
                severity=AlertSeverity.HIGH,
                message=f"{count} high-impact news article{'s' if count > 1 else ''} for {symbol}",
                explanation="Major developments that could significantly affect stock price",
            )
        )

    stock_specific = [a for a in news if a.category == NewsCategory.STOCK_SPECIFIC]
    if len(stock_specific) > 2:
        alerts.append(
            Alert(
                symbol=symbol,
                alert_type=AlertType.NEWS_VOLUME,
                severity=AlertSeverity.MEDIUM,
                message=f"High news activity for {symbol} ({len(stock_specific)} articles)",
                explanation="Increased media attention may indicate important developments",
            )
        )

    volume = analysis.volume_analysis
    if volume.significance == "high":
        alerts.append(
            Alert(
                symbol=symbol,
                alert_type=AlertType.VOLUME_SPIKE,
                severity=AlertSeverity.MEDIUM,
                message=f"Unusual trading volume for {symbol}",
                explanation=f"Trading volume is {volume.ratio:.1f}x average",
            )
        )

    return alerts


def generate_insights(stocks: Sequence[StockDigest]) -> List[Insight]:
    """Market breadth, sector concentration and high-priority symbols."""
    insights = []
    if not stocks:
        return insights

    with_market = [
        s
        for s in stocks
        if "market" in s.movement.explanation or "correlation" in s.movement.explanation
    ]
    if len(with_market) > len(stocks) * 0.6:
        insights.append(
            Insight(
                type="market_correlation",
                message=f"{len(with_market)}/{len(stocks)} stocks moving with broader market",
                significance="high",
                symbols=[s.symbol for s in with_market],
            )
        )

    by_sector: Dict[str, List[StockDigest]] = defaultdict(list)
    for stock in stocks:
        by_sector[stock.stock.sector or "Unknown"].append(stock)

    for sector, members in by_sector.items():
        if len(members) < 2:
            continue
        average = sum(s.stock.change_percent for s in members) / len(members)
        if abs(average) > 2:
            insights.append(
                Insight(
                    type="sector_movement",
                    message=(
                        f"{sector} sector {'up' if average > 0 else 'down'} "
                        f"{abs(average):.1f}% on average"
                    ),
                    significance="high" if abs(average) > 3 else "medium",
                    symbols=[s.symbol for s in members],
                )
            )

    high_priority = [s for s in stocks if s.priority_score > HIGH_PRIORITY_THRESHOLD]
    if high_priority:
        insights.append(
            Insight(
                type="high_priority",
                message=f"{len(high_priority)} stocks require immediate attention",
                significance="high",
                symbols=[s.symbol for s in high_priority],
            )
        )

    return insights


def market_direction(indices: Mapping[str, IndexSnapshot]) -> str:
    if not indices:
        return "neutral"
    average = sum(index.change_percent for index in indices.values()) / len(indices)
    if average > 0.5:
        return "bullish"
    if average < -0.5:
        return "bearish"
    return "neutral"
