"""StrEnum types for the tracker domain.

Values are lowercase strings because they are emitted verbatim as the
``alt`` and ``class`` fields of the status payload.
"""

from enum import StrEnum


class SignalDirection(StrEnum):
    """Three-way classification of the aggregate daily change."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class StockField(StrEnum):
    """Mutable fields of a Stock that emit change notifications."""

    NAME = "name"
    PRICE = "price"
    PCT_CHANGE_1D = "pct_change_1d"
    PCT_CHANGE_1W = "pct_change_1w"
