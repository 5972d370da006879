"""Tests for YahooQuoteProvider: range quotes, error mapping and search.

All yfinance calls are mocked via unittest.mock.patch. No real API calls.

Covers:
- weekly/daily ranges request the right period and compute pct_change
- chart metadata supplies prev_close and the display name
- empty frames raise TickerNotFoundError
- missing/zero/NaN closes raise MalformedQuoteError
- yfinance exceptions and timeouts raise DataSourceUnavailableError
- search maps quotes to SearchResults and never raises
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from Stockfin.models.stock import SearchResult
from Stockfin.services.quote_provider import (
    DAILY_PERIOD,
    WEEKLY_PERIOD,
    YahooQuoteProvider,
    _parse_search_quotes,
)
from Stockfin.utils.exceptions import (
    DataSourceUnavailableError,
    MalformedQuoteError,
    QuoteFetchError,
    TickerNotFoundError,
)

PATCH_YF = "Stockfin.services.quote_provider.yf"

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def provider() -> YahooQuoteProvider:
    return YahooQuoteProvider(timeout=5.0)


def _history(closes: list[float]) -> pd.DataFrame:
    dates = pd.date_range("2025-01-13", periods=len(closes), freq="B", tz="US/Eastern")
    return pd.DataFrame(
        {
            "Open": closes,
            "High": closes,
            "Low": closes,
            "Close": closes,
            "Volume": [1_000_000] * len(closes),
        },
        index=dates,
    )


def _mock_ticker(df: pd.DataFrame, metadata: dict[str, object]) -> MagicMock:
    ticker = MagicMock()
    ticker.history.return_value = df
    ticker.history_metadata = metadata
    return ticker


# ---------------------------------------------------------------------------
# Range quotes
# ---------------------------------------------------------------------------


class TestRanges:
    @pytest.mark.asyncio()
    async def test_weekly_range(self, provider: YahooQuoteProvider) -> None:
        ticker = _mock_ticker(
            _history([181.0, 183.5, 186.0, 184.0, 189.0]),
            {"chartPreviousClose": 180.0, "shortName": "Apple Inc."},
        )
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Ticker.return_value = ticker
            quote = await provider.weekly_range("aapl")

        mock_yf.Ticker.assert_called_once_with("AAPL")
        ticker.history.assert_called_once_with(period=WEEKLY_PERIOD, interval="1d")
        assert quote.prev_close == 180.0
        assert quote.last_close == 189.0
        assert quote.pct_change == pytest.approx(0.05)
        assert quote.name == "Apple Inc."

    @pytest.mark.asyncio()
    async def test_daily_range(self, provider: YahooQuoteProvider) -> None:
        ticker = _mock_ticker(_history([95.0]), {"chartPreviousClose": 100.0})
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Ticker.return_value = ticker
            quote = await provider.daily_range("NVDA")

        ticker.history.assert_called_once_with(period=DAILY_PERIOD, interval="1d")
        assert quote.pct_change == pytest.approx(-0.05)
        assert quote.name is None

    @pytest.mark.asyncio()
    async def test_long_name_fallback(self, provider: YahooQuoteProvider) -> None:
        ticker = _mock_ticker(
            _history([10.0]),
            {"chartPreviousClose": 9.0, "shortName": "  ", "longName": "Long Name Corp"},
        )
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Ticker.return_value = ticker
            quote = await provider.daily_range("LNC")
        assert quote.name == "Long Name Corp"


class TestRangeErrors:
    @pytest.mark.asyncio()
    async def test_empty_frame_is_ticker_not_found(self, provider: YahooQuoteProvider) -> None:
        ticker = _mock_ticker(pd.DataFrame(), {})
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Ticker.return_value = ticker
            with pytest.raises(TickerNotFoundError) as exc_info:
                await provider.daily_range("NOPE")
        assert exc_info.value.ticker == "NOPE"
        assert exc_info.value.source == "yfinance"

    @pytest.mark.asyncio()
    @pytest.mark.parametrize(
        ("closes", "metadata"),
        [
            ([10.0], {}),
            ([10.0], {"chartPreviousClose": None}),
            ([10.0], {"chartPreviousClose": 0.0}),
            ([float("nan")], {"chartPreviousClose": 9.0}),
        ],
    )
    async def test_unusable_closes_are_malformed(
        self,
        provider: YahooQuoteProvider,
        closes: list[float],
        metadata: dict[str, object],
    ) -> None:
        ticker = _mock_ticker(_history(closes), metadata)
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Ticker.return_value = ticker
            with pytest.raises(MalformedQuoteError):
                await provider.daily_range("ODD")

    @pytest.mark.asyncio()
    async def test_missing_close_column(self, provider: YahooQuoteProvider) -> None:
        df = _history([10.0]).drop(columns=["Close"])
        ticker = _mock_ticker(df, {"chartPreviousClose": 9.0})
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Ticker.return_value = ticker
            with pytest.raises(MalformedQuoteError):
                await provider.weekly_range("ODD")

    @pytest.mark.asyncio()
    async def test_yfinance_exception_is_unavailable(self, provider: YahooQuoteProvider) -> None:
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Ticker.return_value.history.side_effect = ConnectionError("reset")
            with pytest.raises(DataSourceUnavailableError, match="reset"):
                await provider.weekly_range("AAPL")

    @pytest.mark.asyncio()
    async def test_timeout_is_unavailable(self) -> None:
        provider = YahooQuoteProvider(timeout=0.01)

        async def _hang(*_args: object) -> object:
            await asyncio.sleep(1)
            return None

        with patch("Stockfin.services.quote_provider.asyncio.to_thread", side_effect=_hang):
            with pytest.raises(DataSourceUnavailableError, match="timed out"):
                await provider.daily_range("SLOW")

    def test_all_errors_share_base(self) -> None:
        for exc_type in (TickerNotFoundError, MalformedQuoteError, DataSourceUnavailableError):
            assert issubclass(exc_type, QuoteFetchError)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSearch:
    @pytest.mark.asyncio()
    async def test_maps_quotes(self, provider: YahooQuoteProvider) -> None:
        raw = [
            {"symbol": "AAPL", "shortname": "Apple Inc.", "longname": "Apple Inc."},
            {"symbol": "APLE", "longname": "Apple Hospitality REIT, Inc."},
            {"symbol": "APC.F"},
            {"shortname": "No symbol"},
        ]
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Search.return_value.quotes = raw
            results = await provider.search("apple")

        assert results == [
            SearchResult(symbol="AAPL", name="Apple Inc."),
            SearchResult(symbol="APLE", name="Apple Hospitality REIT, Inc."),
            SearchResult(symbol="APC.F", name="APC.F"),
        ]

    @pytest.mark.asyncio()
    async def test_failure_returns_empty(self, provider: YahooQuoteProvider) -> None:
        with patch(PATCH_YF) as mock_yf:
            mock_yf.Search.side_effect = RuntimeError("HTTP 500")
            assert await provider.search("apple") == []

    @pytest.mark.asyncio()
    async def test_blank_query_skips_lookup(self, provider: YahooQuoteProvider) -> None:
        with patch(PATCH_YF) as mock_yf:
            assert await provider.search("   ") == []
        mock_yf.Search.assert_not_called()

    def test_parse_preserves_order(self) -> None:
        raw: list[dict[str, object]] = [{"symbol": "B"}, {"symbol": "A"}]
        assert [r.symbol for r in _parse_search_quotes(raw)] == ["B", "A"]
