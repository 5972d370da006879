"""Read-only ranking of the registry by daily change, best first."""

from __future__ import annotations

import logging
from collections.abc import Callable

from Stockfin.core.registry import StockRegistry
from Stockfin.models.stock import Stock

logger = logging.getLogger(__name__)

ViewChangedCallback = Callable[[], None]


class SortedView:
    """Projection of a StockRegistry ordered by ``pct_change_1d`` descending.

    The ordering is recomputed lazily: ``invalidate()`` (called by the
    scheduler after each daily fetch, and automatically on any registry
    membership change) marks it stale and notifies listeners, and the next
    read re-sorts. ``sorted`` is stable, so equal changes keep registry
    insertion order.
    """

    def __init__(self, registry: StockRegistry) -> None:
        self._registry = registry
        self._order: list[Stock] = []
        self._stale = True
        self._listeners: list[ViewChangedCallback] = []
        registry.connect(self._on_items_changed)

    def connect(self, callback: ViewChangedCallback) -> None:
        self._listeners.append(callback)

    def invalidate(self) -> None:
        self._stale = True
        for callback in list(self._listeners):
            callback()

    def items(self) -> list[Stock]:
        """The ranked entities, recomputing first if stale."""
        if self._stale:
            self._order = sorted(
                self._registry.snapshot(),
                key=lambda stock: stock.pct_change_1d,
                reverse=True,
            )
            self._stale = False
        return list(self._order)

    def registry_position(self, stock: Stock) -> int | None:
        """Map a ranked entity back to its registry position (identity scan)."""
        return self._registry.position_of(stock)

    def __len__(self) -> int:
        return len(self._registry)

    def __getitem__(self, position: int) -> Stock:
        return self.items()[position]

    def _on_items_changed(self, position: int, removed: int, added: int) -> None:
        logger.debug("Registry changed at %d (-%d/+%d), re-ranking", position, removed, added)
        self.invalidate()
