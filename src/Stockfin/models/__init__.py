"""Pydantic v2 models and enums.

Re-exports all public models so consumers can import directly:
    from Stockfin.models import Stock, SearchResult, StatusPayload
"""

from Stockfin.models.enums import SignalDirection, StockField
from Stockfin.models.status import StatusPayload
from Stockfin.models.stock import PLACEHOLDER_NAME, RangeQuote, SearchResult, Stock

__all__ = [
    # Enums
    "SignalDirection",
    "StockField",
    # Entities
    "PLACEHOLDER_NAME",
    "Stock",
    # Provider responses
    "RangeQuote",
    "SearchResult",
    # IPC
    "StatusPayload",
]
