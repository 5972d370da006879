"""Application facade tying the registry, view, scheduler and storage together.

The UI layer and the CLI talk to ``StockTracker`` only; every tracked-set
change is persisted in full and followed by an immediate refresh cycle.
"""

from __future__ import annotations

import logging

from Stockfin.core.aggregate import AggregateChange
from Stockfin.core.registry import StockRegistry
from Stockfin.core.scheduler import RefreshScheduler
from Stockfin.core.sorted_view import SortedView
from Stockfin.data.persistence import TickerStore
from Stockfin.models.stock import SearchResult, Stock
from Stockfin.services.quote_provider import QuoteProvider

logger = logging.getLogger(__name__)


class StockTracker:
    """Owns one tracked set and the machinery that keeps it fresh.

    Usage::

        tracker = StockTracker(provider, TickerStore(config.tickers_path), interval=60)
        tracker.load()
        tracker.start()
        tracker.add("NVDA", "NVIDIA Corporation")
        for stock in tracker.view.items():
            ...
    """

    def __init__(
        self,
        provider: QuoteProvider,
        store: TickerStore,
        *,
        interval: float,
        aggregate: AggregateChange | None = None,
    ) -> None:
        self.provider = provider
        self.store = store
        self.aggregate = aggregate if aggregate is not None else AggregateChange()
        self.registry = StockRegistry()
        self.view = SortedView(self.registry)
        self.scheduler = RefreshScheduler(
            self.registry,
            self.view,
            provider,
            self.aggregate,
            interval=interval,
        )

    def load(self) -> int:
        """Seed the registry from storage. Returns the number loaded."""
        tickers = self.store.load()
        for ticker, name in tickers:
            self.registry.create(ticker, name)
        return len(tickers)

    def start(self) -> None:
        self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()

    # ------------------------------------------------------------------
    # Tracked-set changes
    # ------------------------------------------------------------------

    def add(self, ticker: str, name: str | None = None) -> Stock:
        ticker = ticker.upper().strip()
        stock = self.registry.create(ticker, name)
        self._tracked_set_changed()
        return stock

    def add_result(self, result: SearchResult) -> Stock:
        """Track a symbol picked from search results, keeping its name."""
        return self.add(result.symbol, result.name)

    def remove(self, position: int) -> Stock:
        """Remove by registry position.

        Raises:
            IndexError: If *position* is out of range.
        """
        stock = self.registry.remove(position)
        self._tracked_set_changed()
        return stock

    def remove_sorted(self, position: int) -> Stock:
        """Remove the stock shown at *position* in the ranked view."""
        if not 0 <= position < len(self.view):
            raise IndexError(f"No tracked stock at ranked position {position}")
        stock = self.view[position]
        registry_position = self.view.registry_position(stock)
        if registry_position is None:
            raise IndexError(f"No tracked stock at ranked position {position}")
        return self.remove(registry_position)

    async def search(self, query: str) -> list[SearchResult]:
        return await self.provider.search(query)

    def _tracked_set_changed(self) -> None:
        self.store.save(self.registry.tickers())
        if self.scheduler.running:
            self.scheduler.refresh()
