"""Shared test fixtures for the Stockfin test suite.

Provides a controllable quote provider so scheduler tests can decide the
exact order in which fetches settle, plus realistic sample responses.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict, deque
from pathlib import Path

import pytest

from Stockfin.core.aggregate import AggregateChange
from Stockfin.core.registry import StockRegistry
from Stockfin.core.scheduler import DAILY, WEEKLY, RefreshScheduler
from Stockfin.core.sorted_view import SortedView
from Stockfin.data.persistence import TickerStore
from Stockfin.models.stock import RangeQuote, SearchResult
from Stockfin.utils.exceptions import DataSourceUnavailableError


class ControlledProvider:
    """QuoteProvider whose range fetches settle only when the test says so.

    Every call parks on a future keyed by ``(kind, ticker)``; ``resolve``
    completes the oldest parked call for that key with a quote or an error.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.search_results: list[SearchResult] = []
        self._parked: defaultdict[tuple[str, str], deque[asyncio.Future[RangeQuote]]] = (
            defaultdict(deque)
        )

    async def weekly_range(self, ticker: str) -> RangeQuote:
        return await self._park(WEEKLY, ticker)

    async def daily_range(self, ticker: str) -> RangeQuote:
        return await self._park(DAILY, ticker)

    async def search(self, query: str) -> list[SearchResult]:
        return list(self.search_results)

    async def _park(self, kind: str, ticker: str) -> RangeQuote:
        self.calls.append((kind, ticker))
        future: asyncio.Future[RangeQuote] = asyncio.get_running_loop().create_future()
        self._parked[(kind, ticker)].append(future)
        return await future

    def parked(self, kind: str, ticker: str) -> int:
        return len(self._parked[(kind, ticker)])

    def resolve(self, kind: str, ticker: str, outcome: RangeQuote | Exception) -> None:
        future = self._parked[(kind, ticker)].popleft()
        if isinstance(outcome, Exception):
            future.set_exception(outcome)
        else:
            future.set_result(outcome)

    def fail_all(self) -> None:
        """Fail every parked call so no task is left pending at teardown."""
        for (_kind, ticker), futures in self._parked.items():
            while futures:
                futures.popleft().set_exception(provider_error(ticker))


async def settle(rounds: int = 3) -> None:
    """Let ready tasks run up to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def quote(prev_close: float, last_close: float, name: str | None = None) -> RangeQuote:
    return RangeQuote(prev_close=prev_close, last_close=last_close, name=name)


def provider_error(ticker: str) -> DataSourceUnavailableError:
    return DataSourceUnavailableError("connection reset", ticker=ticker, source="test")


@pytest.fixture()
def provider() -> ControlledProvider:
    return ControlledProvider()


@pytest.fixture()
def registry() -> StockRegistry:
    return StockRegistry()


@pytest.fixture()
def view(registry: StockRegistry) -> SortedView:
    return SortedView(registry)


@pytest.fixture()
def aggregate() -> AggregateChange:
    return AggregateChange()


@pytest.fixture()
def scheduler(
    registry: StockRegistry,
    view: SortedView,
    provider: ControlledProvider,
    aggregate: AggregateChange,
) -> RefreshScheduler:
    return RefreshScheduler(registry, view, provider, aggregate, interval=3600)


@pytest.fixture()
def ticker_store(tmp_path: Path) -> TickerStore:
    return TickerStore(tmp_path / "stockfin" / "tickers.json")


@pytest.fixture()
def sample_search_results() -> list[SearchResult]:
    return [
        SearchResult(symbol="AAPL", name="Apple Inc."),
        SearchResult(symbol="APLE", name="Apple Hospitality REIT, Inc."),
    ]
