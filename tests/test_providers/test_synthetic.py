"""Tests for the synthetic last-resort quote generator."""

import sys

import pytest

sys.path.append("src")
from marketlens.models import DataSource
from marketlens.providers.synthetic import REFERENCE_PRICES, SyntheticQuoteProvider


class TestSyntheticQuoteProvider:
    """Test deterministic placeholder quotes."""

    @pytest.mark.asyncio
    async def test_repeated_calls_are_identical(self):
        provider = SyntheticQuoteProvider()

        first = await provider.get_quote("AAPL")
        second = await SyntheticQuoteProvider().get_quote("aapl")

        assert first.model_dump(exclude={"timestamp"}) == second.model_dump(exclude={"timestamp"})

    @pytest.mark.asyncio
    async def test_quote_is_tagged_synthetic(self):
        quote = await SyntheticQuoteProvider().get_quote("msft")

        assert quote.symbol == "MSFT"
        assert quote.source == DataSource.SYNTHETIC
        assert quote.is_synthetic
        assert quote.profile.source == DataSource.SYNTHETIC

    @pytest.mark.asyncio
    async def test_reference_symbol_stays_near_base_price(self):
        quote = await SyntheticQuoteProvider().get_quote("NVDA")
        reference = REFERENCE_PRICES["NVDA"]

        assert abs(quote.price - reference.base) <= 2.51
        assert quote.name == reference.name
        assert quote.sector == reference.sector

    @pytest.mark.asyncio
    async def test_unknown_symbol_gets_derived_reference(self):
        provider = SyntheticQuoteProvider()
        reference = provider.reference_for("ZZZZ")
        quote = await provider.get_quote("ZZZZ")

        assert 100 <= reference.base <= 600
        assert reference == provider.reference_for("zzzz")
        assert quote.name == "ZZZZ Inc."
        assert quote.sector == "Technology"

    @pytest.mark.asyncio
    async def test_change_percent_is_consistent(self):
        quote = await SyntheticQuoteProvider().get_quote("TSLA")

        assert quote.change_percent == pytest.approx(
            quote.change / quote.previous_close * 100, abs=0.05
        )

    @pytest.mark.asyncio
    async def test_always_healthy(self):
        health = await SyntheticQuoteProvider().check_health()
        assert health.status == "healthy"
        assert health.service == "Synthetic Data"
