"""Sign-alignment heuristics explaining a stock's price move."""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ...config.logging import get_logger
from ...models import NewsArticle, NewsCategory, PriceImpact, Quote
from .models import (
    Alignment,
    ContributingFactor,
    CorrelationAnalysis,
    CorrelationStrength,
    DriverType,
    MarketCorrelation,
    MovementDriver,
    NewsAnalysis,
    SectorCorrelation,
    VolumeAnalysis,
)

logger = get_logger(__name__)

# Sector names as reported by the various providers, mapped to the SPDR sector ETF
SECTOR_PROXIES: Dict[str, str] = {
    "Technology": "XLK",
    "Information Technology": "XLK",
    "Healthcare": "XLV",
    "Health Care": "XLV",
    "Financial": "XLF",
    "Financials": "XLF",
    "Financial Services": "XLF",
    "Finance": "XLF",
    "Energy": "XLE",
    "Consumer": "XLY",
    "Consumer Discretionary": "XLY",
    "Consumer Cyclical": "XLY",
    "Utilities": "XLU",
    "Materials": "XLB",
    "Basic Materials": "XLB",
    "Industrial": "XLI",
    "Industrials": "XLI",
    "Real Estate": "XLRE",
    "Communication": "XLC",
    "Communication Services": "XLC",
}

# Coarse proxy coefficients; strength thresholds below are calibrated to them
COEFFICIENTS = {
    Alignment.SAME: 0.8,
    Alignment.OPPOSITE: -0.8,
    Alignment.NEUTRAL: 0.1,
}

EXPLANATION_WEIGHTS = {
    NewsCategory.STOCK_SPECIFIC: 0.4,
    NewsCategory.COMPETITOR: 0.25,
    NewsCategory.INDUSTRY: 0.2,
    NewsCategory.MACRO: 0.15,
}

RELEVANT_THRESHOLD = 0.3

EXPLANATIONS = {
    DriverType.STOCK_SPECIFIC_NEWS: (
        "Movement primarily driven by company-specific news. "
        "{stock_count} relevant articles identified."
    ),
    DriverType.INDUSTRY_SECTOR: (
        "Movement likely driven by industry/sector developments. "
        "Check competitor and sector news for insights."
    ),
    DriverType.MARKET_DRIVEN: (
        "Movement correlates strongly with broader market ({market_direction}). "
        "No significant company-specific news identified."
    ),
    DriverType.SECTOR_DRIVEN: (
        "Movement follows {sector} sector trend. Sector-wide factors likely at play."
    ),
    DriverType.UNUSUAL_ACTIVITY: (
        "Unusual trading volume detected. "
        "May indicate institutional activity or unreported catalyst."
    ),
    DriverType.MACRO_EVENTS: (
        "Movement likely related to macro economic events affecting the broader market."
    ),
    DriverType.UNEXPLAINED_MARKET: (
        "No clear catalyst identified. Movement may be due to general market "
        "sentiment, profit-taking, or unknown factors."
    ),
}


def sector_etf(sector: Optional[str]) -> Optional[str]:
    return SECTOR_PROXIES.get(sector) if sector else None


def alignment(change: float, other: float) -> Alignment:
    if (change > 0 and other > 0) or (change < 0 and other < 0):
        return Alignment.SAME
    if (change > 0 and other < 0) or (change < 0 and other > 0):
        return Alignment.OPPOSITE
    return Alignment.NEUTRAL


def correlation_strength(coefficient: float) -> CorrelationStrength:
    magnitude = abs(coefficient)
    if magnitude > 0.7:
        return CorrelationStrength.STRONG
    if magnitude > 0.3:
        return CorrelationStrength.MEDIUM
    return CorrelationStrength.WEAK


def volume_pattern(ratio: float) -> str:
    if ratio > 3:
        return "extremely high"
    if ratio > 2:
        return "very high"
    if ratio > 1.5:
        return "high"
    if ratio > 0.8:
        return "normal"
    if ratio > 0.5:
        return "low"
    return "very low"


def volume_significance(ratio: float) -> str:
    if ratio > 2.5:
        return "high"
    if ratio > 1.5:
        return "medium"
    if ratio < 0.6:
        return "low"
    return "normal"


def _direction(change: float) -> str:
    return "up" if change > 0 else "down" if change < 0 else "flat"


class MarketCorrelator:
    """
    Chooses a movement driver from market, sector, volume and news signals.

    Correlations here are sign comparisons of single-day changes, not
    statistical correlations over a price history.
    """

    def __init__(self):
        self.logger = logger.bind(component="market_correlator")

    def analyze_movement(
        self,
        symbol: str,
        quote: Quote,
        news: Sequence[NewsArticle],
        market_change: float = 0.0,
        sector_change: Optional[float] = None,
        sector: Optional[str] = None,
        average_volume: Optional[float] = None,
    ) -> CorrelationAnalysis:
        """
        Explain a symbol's move.

        Args:
            symbol: Ticker being analyzed
            quote: Current quote; change_percent and volume are used
            news: Classified articles for the symbol
            market_change: Mean percent change of the broad market indices
            sector_change: Percent change of the symbol's sector proxy, if known
            sector: Sector name reported in the sector correlation
            average_volume: Typical daily volume; unknown means normal volume

        Returns:
            CorrelationAnalysis with the chosen driver, explanation and factors
        """
        change = quote.change_percent

        market = self.market_correlation(change, market_change)
        sector_corr = (
            self.sector_correlation(change, sector_change, sector or "Unknown")
            if sector_change is not None
            else None
        )
        volume = self.volume_analysis(quote.volume, average_volume)
        news_analysis = self.news_analysis(news)

        driver = self.determine_driver(market, sector_corr, volume, news_analysis, abs(change))
        driver = replace(
            driver, confidence=self.adjust_confidence(driver, market, sector_corr, news_analysis)
        )

        analysis = CorrelationAnalysis(
            symbol=symbol.upper(),
            price_change=change,
            volume=quote.volume,
            market=market,
            sector=sector_corr,
            volume_analysis=volume,
            news_analysis=news_analysis,
            driver=driver,
            explanation=self.explain(driver, market, sector_corr, news_analysis),
            factors=self.contributing_factors(market, sector_corr, volume, news_analysis),
        )

        self.logger.debug(
            "Movement analyzed",
            symbol=analysis.symbol,
            driver=driver.primary.value,
            confidence=round(driver.confidence, 2),
        )
        return analysis

    def market_correlation(self, change: float, market_change: float) -> MarketCorrelation:
        aligned = alignment(change, market_change)
        coefficient = COEFFICIENTS[aligned]
        return MarketCorrelation(
            coefficient=coefficient,
            market_direction=_direction(market_change),
            market_magnitude=abs(market_change),
            alignment=aligned,
            strength=correlation_strength(coefficient),
        )

    def sector_correlation(
        self, change: float, sector_change: float, sector: str
    ) -> SectorCorrelation:
        aligned = alignment(change, sector_change)
        coefficient = COEFFICIENTS[aligned]
        return SectorCorrelation(
            sector=sector,
            sector_change=sector_change,
            coefficient=coefficient,
            alignment=aligned,
            strength=correlation_strength(coefficient),
            outperformance=change - sector_change,
        )

    def volume_analysis(
        self, volume: Optional[int], average_volume: Optional[float]
    ) -> VolumeAnalysis:
        if volume is None or not average_volume:
            ratio = 1.0
        else:
            ratio = volume / average_volume
        return VolumeAnalysis(
            ratio=ratio,
            pattern=volume_pattern(ratio),
            significance=volume_significance(ratio),
        )

    def news_analysis(self, news: Sequence[NewsArticle]) -> NewsAnalysis:
        relevant = [a for a in news if a.relevance > RELEVANT_THRESHOLD]
        categories: Dict[NewsCategory, List[NewsArticle]] = {
            category: [a for a in relevant if a.category == category]
            for category in EXPLANATION_WEIGHTS
        }

        power = 0.0
        if relevant:
            power = min(
                1.0,
                sum(len(categories[c]) * weight for c, weight in EXPLANATION_WEIGHTS.items()),
            )

        return NewsAnalysis(
            total_relevant=len(relevant),
            has_high_impact_news=any(
                a.classification.price_impact == PriceImpact.HIGH for a in relevant
            ),
            categories=categories,
            explanation_power=power,
        )

    def determine_driver(
        self,
        market: MarketCorrelation,
        sector: Optional[SectorCorrelation],
        volume: VolumeAnalysis,
        news: NewsAnalysis,
        magnitude: float,
    ) -> MovementDriver:
        """Decision cascade; the first satisfied branch wins."""
        power = news.explanation_power
        stock_news = news.categories[NewsCategory.STOCK_SPECIFIC]

        if any(a.classification.price_impact == PriceImpact.HIGH for a in stock_news):
            return MovementDriver(
                DriverType.STOCK_SPECIFIC_NEWS, 0.9, "High-impact company-specific news identified"
            )

        if power > 0.7 and stock_news:
            return MovementDriver(
                DriverType.STOCK_SPECIFIC_NEWS,
                0.8,
                "Multiple relevant company-specific news articles",
            )

        if power > 0.5 and (
            news.count(NewsCategory.COMPETITOR) or news.count(NewsCategory.INDUSTRY)
        ):
            return MovementDriver(
                DriverType.INDUSTRY_SECTOR,
                0.7,
                "Industry or competitor news likely driving movement",
            )

        if market.strength == CorrelationStrength.STRONG and power < 0.3:
            return MovementDriver(
                DriverType.MARKET_DRIVEN,
                0.8,
                "Strong correlation with market movement, minimal specific news",
            )

        if sector and sector.strength == CorrelationStrength.STRONG and power < 0.4:
            return MovementDriver(
                DriverType.SECTOR_DRIVEN,
                0.7,
                f"Strong correlation with {sector.sector} sector movement",
            )

        if volume.significance == "high" and magnitude > 3:
            return MovementDriver(
                DriverType.UNUSUAL_ACTIVITY,
                0.6,
                "Unusual volume suggests institutional activity or unknown catalyst",
            )

        if news.count(NewsCategory.MACRO) and market.strength != CorrelationStrength.WEAK:
            return MovementDriver(
                DriverType.MACRO_EVENTS, 0.6, "Macro economic events affecting broader market"
            )

        return MovementDriver(
            DriverType.UNEXPLAINED_MARKET,
            0.4,
            "No clear catalyst identified - likely broad market forces",
        )

    def adjust_confidence(
        self,
        driver: MovementDriver,
        market: MarketCorrelation,
        sector: Optional[SectorCorrelation],
        news: NewsAnalysis,
    ) -> float:
        confidence = driver.confidence
        if market.strength == CorrelationStrength.STRONG:
            confidence += 0.1
        if sector and sector.strength == CorrelationStrength.STRONG:
            confidence += 0.1
        if news.explanation_power > 0.8:
            confidence += 0.1
        if market.alignment == Alignment.OPPOSITE and news.total_relevant > 0:
            confidence -= 0.2
        return max(0.1, min(0.95, confidence))

    def explain(
        self,
        driver: MovementDriver,
        market: MarketCorrelation,
        sector: Optional[SectorCorrelation],
        news: NewsAnalysis,
    ) -> str:
        return EXPLANATIONS[driver.primary].format(
            stock_count=news.count(NewsCategory.STOCK_SPECIFIC),
            market_direction=market.market_direction,
            sector=sector.sector if sector else "its",
        )

    def contributing_factors(
        self,
        market: MarketCorrelation,
        sector: Optional[SectorCorrelation],
        volume: VolumeAnalysis,
        news: NewsAnalysis,
    ) -> List[ContributingFactor]:
        factors = []

        if market.strength != CorrelationStrength.WEAK:
            factors.append(
                ContributingFactor(
                    type="market-correlation",
                    strength=market.strength.value,
                    description=(
                        f"{market.strength.value} correlation with market "
                        f"({market.market_direction})"
                    ),
                )
            )

        if sector and sector.strength != CorrelationStrength.WEAK:
            factors.append(
                ContributingFactor(
                    type="sector-correlation",
                    strength=sector.strength.value,
                    description=f"{sector.strength.value} correlation with {sector.sector} sector",
                )
            )

        if volume.significance != "normal":
            factors.append(
                ContributingFactor(
                    type="volume-pattern",
                    strength=volume.significance,
                    description=f"{volume.pattern} trading volume ({volume.ratio:.1f}x average)",
                )
            )

        for category, articles in news.categories.items():
            count = len(articles)
            if not count:
                continue
            strength = "high" if count > 2 else "medium" if count > 1 else "low"
            label = category.value.replace("-", " ")
            factors.append(
                ContributingFactor(
                    type=f"news-{category.value}",
                    strength=strength,
                    description=f"{count} {label} news articles",
                )
            )

        return factors
