"""Quote provider client wrapping yfinance for range quotes and symbol search.

All yfinance calls are synchronous and wrapped in ``asyncio.to_thread()`` to
avoid blocking the event loop, with ``asyncio.wait_for`` bounding latency.
Results are converted to typed Pydantic models before returning. Range
failures raise ``QuoteFetchError`` subclasses; search never raises.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Final, Protocol

import pandas as pd
import yfinance as yf  # type: ignore[import-untyped]
from pydantic import ValidationError

from Stockfin.models.stock import RangeQuote, SearchResult
from Stockfin.services._helpers import (
    EXTERNAL_CALL_TIMEOUT_SECONDS,
    YFINANCE_SOURCE,
    clean_name,
    safe_float,
)
from Stockfin.utils.exceptions import (
    DataSourceUnavailableError,
    MalformedQuoteError,
    TickerNotFoundError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BAR_INTERVAL: Final[str] = "1d"
WEEKLY_PERIOD: Final[str] = "5d"
DAILY_PERIOD: Final[str] = "1d"
MAX_SEARCH_RESULTS: Final[int] = 10


class QuoteProvider(Protocol):
    """Request/response contract the refresh scheduler depends on."""

    async def weekly_range(self, ticker: str) -> RangeQuote: ...

    async def daily_range(self, ticker: str) -> RangeQuote: ...

    async def search(self, query: str) -> list[SearchResult]: ...


class YahooQuoteProvider:
    """Async quote provider backed by yfinance.

    Usage::

        provider = YahooQuoteProvider()

        week = await provider.weekly_range("AAPL")
        day = await provider.daily_range("AAPL")
        hits = await provider.search("apple")
    """

    def __init__(self, timeout: float = EXTERNAL_CALL_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def weekly_range(self, ticker: str) -> RangeQuote:
        """Close before the last five sessions versus the latest close."""
        return await self._range(ticker, WEEKLY_PERIOD)

    async def daily_range(self, ticker: str) -> RangeQuote:
        """Previous session close versus the latest close."""
        return await self._range(ticker, DAILY_PERIOD)

    async def search(self, query: str) -> list[SearchResult]:
        """Look up symbols matching *query*.

        Returns an empty list on any failure rather than raising, since a
        failed lookup just means "no suggestions".
        """
        query = query.strip()
        if not query:
            return []

        def _sync_search() -> list[dict[str, object]]:
            quotes: list[dict[str, object]] = yf.Search(
                query,
                max_results=MAX_SEARCH_RESULTS,
                news_count=0,
            ).quotes
            return quotes

        try:
            raw_quotes = await asyncio.wait_for(
                asyncio.to_thread(_sync_search),
                timeout=self._timeout,
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Symbol search for %r failed: %s", query, exc)
            return []

        return _parse_search_quotes(raw_quotes)

    # ------------------------------------------------------------------
    # Range fetching
    # ------------------------------------------------------------------

    async def _range(self, ticker: str, period: str) -> RangeQuote:
        ticker = ticker.upper().strip()
        try:
            df, metadata = await asyncio.wait_for(
                asyncio.to_thread(self._fetch_raw_history, ticker, period),
                timeout=self._timeout,
            )
        except TimeoutError as exc:
            raise DataSourceUnavailableError(
                f"Range({ticker}, {period}) timed out after {self._timeout:.0f}s",
                ticker=ticker,
                source=YFINANCE_SOURCE,
            ) from exc
        except Exception as exc:  # noqa: BLE001
            # yfinance raises inconsistent types for network and parse failures
            raise DataSourceUnavailableError(
                f"Range({ticker}, {period}) failed: {exc}",
                ticker=ticker,
                source=YFINANCE_SOURCE,
            ) from exc

        quote = self._to_range_quote(df, metadata, ticker, period)
        logger.debug(
            "Fetched %s range for %s: %.4f -> %.4f",
            period,
            ticker,
            quote.prev_close,
            quote.last_close,
        )
        return quote

    @staticmethod
    def _fetch_raw_history(
        ticker: str,
        period: str,
    ) -> tuple[pd.DataFrame, dict[str, object]]:
        """Blocking yfinance call; run via ``asyncio.to_thread``."""
        t = yf.Ticker(ticker)
        df: pd.DataFrame = t.history(period=period, interval=BAR_INTERVAL)
        metadata: dict[str, object] = t.history_metadata or {}
        return df, metadata

    @staticmethod
    def _to_range_quote(
        df: pd.DataFrame,
        metadata: dict[str, object],
        ticker: str,
        period: str,
    ) -> RangeQuote:
        """Validate a history frame plus chart metadata into a RangeQuote."""
        if df is None or df.empty:
            raise TickerNotFoundError(
                f"No data returned for ticker '{ticker}' with period '{period}'",
                ticker=ticker,
                source=YFINANCE_SOURCE,
            )
        if "Close" not in df.columns:
            raise MalformedQuoteError(
                f"Missing Close column in {period} history for {ticker}",
                ticker=ticker,
                source=YFINANCE_SOURCE,
            )

        prev_close = safe_float(metadata.get("chartPreviousClose"))
        last_close = safe_float(df["Close"].iloc[-1])
        if prev_close is None or last_close is None:
            raise MalformedQuoteError(
                f"Missing previous or last close for {ticker} ({period})",
                ticker=ticker,
                source=YFINANCE_SOURCE,
            )

        name = clean_name(metadata.get("shortName")) or clean_name(metadata.get("longName"))
        try:
            return RangeQuote(prev_close=prev_close, last_close=last_close, name=name)
        except ValidationError as exc:
            raise MalformedQuoteError(
                f"Unusable closes for {ticker} ({period}): {exc.errors()[0]['msg']}",
                ticker=ticker,
                source=YFINANCE_SOURCE,
            ) from exc


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _parse_search_quotes(raw_quotes: list[dict[str, object]]) -> list[SearchResult]:
    """Map raw yfinance search quotes to SearchResults, skipping symbol-less rows."""
    results: list[SearchResult] = []
    for raw in raw_quotes:
        symbol = clean_name(raw.get("symbol"))
        if symbol is None:
            continue
        name = clean_name(raw.get("shortname")) or clean_name(raw.get("longname")) or symbol
        results.append(SearchResult(symbol=symbol, name=name))
    return results
