"""Durable storage for the tracked-ticker list.

Re-exports the persistence gateway:
    from Stockfin.data import TickerStore
"""

from Stockfin.data.persistence import TickerStore

__all__ = ["TickerStore"]
