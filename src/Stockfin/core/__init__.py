"""Synchronization engine: registry, ranked view, refresh scheduler, aggregate.

Re-exports the engine classes so consumers can import directly:
    from Stockfin.core import StockRegistry, SortedView, RefreshScheduler
"""

from Stockfin.core.aggregate import AggregateChange, build_status, classify
from Stockfin.core.registry import StockRegistry
from Stockfin.core.scheduler import RefreshScheduler
from Stockfin.core.sorted_view import SortedView
from Stockfin.core.tracker import StockTracker

__all__ = [
    "AggregateChange",
    "RefreshScheduler",
    "SortedView",
    "StockRegistry",
    "StockTracker",
    "build_status",
    "classify",
]
