"""Concurrent refresh of every tracked stock against the quote provider.

Each refresh cycle launches two independent tasks per stock, a weekly and a
daily range fetch, with no batching or throttling. All task continuations
run on the single event loop thread, so registry and view updates never
race even though many fetches are outstanding at once. Completion order is
arbitrary: whichever of a stock's two fetches lands last sets its price.

Cycles may overlap (the timer can fire before the previous cycle settles);
fetches are idempotent reads so this is harmless. Removing a stock does not
cancel its fetches; they finish against the detached entity.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, Final

from Stockfin.config import DEFAULT_REFRESH_INTERVAL
from Stockfin.core.aggregate import AggregateChange
from Stockfin.core.registry import StockRegistry
from Stockfin.core.sorted_view import SortedView
from Stockfin.models.stock import Stock
from Stockfin.services.quote_provider import QuoteProvider
from Stockfin.utils.exceptions import QuoteFetchError

logger = logging.getLogger(__name__)

WEEKLY: Final[str] = "weekly"
DAILY: Final[str] = "daily"


class RefreshScheduler:
    """Drive periodic and on-demand refresh cycles.

    Usage::

        scheduler = RefreshScheduler(registry, view, provider, aggregate, interval=30)
        scheduler.start()          # immediate cycle, then every 30s
        scheduler.refresh()        # extra cycle after add/remove
        await scheduler.stop()
    """

    def __init__(
        self,
        registry: StockRegistry,
        view: SortedView,
        provider: QuoteProvider,
        aggregate: AggregateChange,
        interval: float = DEFAULT_REFRESH_INTERVAL,
    ) -> None:
        self._registry = registry
        self._view = view
        self._provider = provider
        self._aggregate = aggregate
        self._interval = interval
        self._timer: asyncio.Task[None] | None = None
        # Strong references so in-flight fetches are not garbage collected
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def pending(self) -> int:
        """Number of fetch tasks still in flight across all cycles."""
        return len(self._pending)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the timer loop; the first cycle runs immediately."""
        if self.running:
            return
        self._timer = asyncio.get_running_loop().create_task(
            self._run(), name="stockfin-refresh-timer"
        )
        logger.info("Refresh scheduler started (every %.0fs)", self._interval)

    async def stop(self) -> None:
        """Stop the timer loop. In-flight fetches are left to settle."""
        if self._timer is None:
            return
        self._timer.cancel()
        try:
            await self._timer
        except asyncio.CancelledError:
            pass
        self._timer = None
        logger.info("Refresh scheduler stopped")

    async def drain(self) -> None:
        """Wait until every outstanding fetch has settled."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _run(self) -> None:
        while True:
            self.refresh()
            await asyncio.sleep(self._interval)

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------

    def refresh(self) -> list[asyncio.Task[None]]:
        """Fan out one weekly and one daily fetch per tracked stock.

        Must be called from the event loop thread. Returns the spawned
        tasks; callers normally ignore them.
        """
        stocks = self._registry.snapshot()
        tasks: list[asyncio.Task[None]] = []
        for stock in stocks:
            tasks.append(self._spawn(self._update_weekly(stock), stock, WEEKLY))
            tasks.append(self._spawn(self._update_daily(stock), stock, DAILY))
        logger.debug("Refresh cycle started for %d stocks", len(stocks))
        return tasks

    def _spawn(
        self,
        coro: Coroutine[Any, Any, None],
        stock: Stock,
        kind: str,
    ) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(
            coro, name=f"stockfin-{kind}-{stock.ticker}"
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _update_weekly(self, stock: Stock) -> None:
        try:
            quote = await self._provider.weekly_range(stock.ticker)
        except QuoteFetchError as exc:
            logger.warning("Weekly fetch for %s skipped: %s", stock.ticker, exc)
            return
        except Exception:  # noqa: BLE001
            logger.exception("Weekly fetch for %s failed unexpectedly", stock.ticker)
            return

        if quote.name:
            stock.name = quote.name
        stock.pct_change_1w = quote.pct_change
        stock.price = quote.last_close

    async def _update_daily(self, stock: Stock) -> None:
        try:
            try:
                quote = await self._provider.daily_range(stock.ticker)
            except QuoteFetchError as exc:
                logger.warning("Daily fetch for %s skipped: %s", stock.ticker, exc)
                return
            except Exception:  # noqa: BLE001
                logger.exception("Daily fetch for %s failed unexpectedly", stock.ticker)
                return

            stock.pct_change_1d = quote.pct_change
            stock.price = quote.last_close
            if self._registry.contains(stock):
                self._aggregate.set(quote.pct_change)
            else:
                logger.debug("Daily fetch for removed %s settled, ignoring", stock.ticker)
        finally:
            self._view.invalidate()
