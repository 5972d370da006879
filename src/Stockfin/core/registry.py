"""Ordered registry of tracked stocks.

All mutation happens on the event loop thread, so there is no locking.
Listeners receive ``(position, removed, added)`` after each membership
change, mirroring a list-model ``items-changed`` signal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from Stockfin.models.stock import PLACEHOLDER_NAME, Stock

logger = logging.getLogger(__name__)

ItemsChangedCallback = Callable[[int, int, int], None]


class StockRegistry:
    """Authoritative ordered collection of tracked instruments.

    Duplicate tickers are admitted; each ``create`` call yields a distinct
    entity. Insertion order is the tie-break order for the ranked view.
    """

    def __init__(self) -> None:
        self._stocks: list[Stock] = []
        self._listeners: list[ItemsChangedCallback] = []

    def connect(self, callback: ItemsChangedCallback) -> None:
        self._listeners.append(callback)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def create(self, ticker: str, name: str | None = None) -> Stock:
        """Append a new Stock with zeroed price and changes."""
        stock = Stock(ticker=ticker, name=name or PLACEHOLDER_NAME)
        position = len(self._stocks)
        self._stocks.append(stock)
        logger.info("Tracking %s at position %d", ticker, position)
        self._emit(position, 0, 1)
        return stock

    def remove(self, position: int) -> Stock:
        """Delete the entry at *position* and return it.

        Raises:
            IndexError: If *position* is out of range.
        """
        if not 0 <= position < len(self._stocks):
            raise IndexError(f"No tracked stock at position {position}")
        stock = self._stocks.pop(position)
        logger.info("Stopped tracking %s (position %d)", stock.ticker, position)
        self._emit(position, 1, 0)
        return stock

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def snapshot(self) -> list[Stock]:
        """Current ordered membership, as a new list safe to iterate."""
        return list(self._stocks)

    def tickers(self) -> list[tuple[str, str]]:
        """(ticker, name) pairs in registry order, as persisted."""
        return [(stock.ticker, stock.name) for stock in self._stocks]

    def contains(self, stock: Stock) -> bool:
        return any(candidate is stock for candidate in self._stocks)

    def position_of(self, stock: Stock) -> int | None:
        """Registry position of *stock* by identity, or None."""
        for position, candidate in enumerate(self._stocks):
            if candidate is stock:
                return position
        return None

    def __len__(self) -> int:
        return len(self._stocks)

    def __iter__(self) -> Iterator[Stock]:
        return iter(self.snapshot())

    def __getitem__(self, position: int) -> Stock:
        return self._stocks[position]

    def _emit(self, position: int, removed: int, added: int) -> None:
        for callback in list(self._listeners):
            callback(position, removed, added)
