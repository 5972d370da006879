"""Stock entity and provider response models.

``Stock`` is the only mutable model: the refresh scheduler writes into it
and observers (the UI layer) redraw on per-field change notifications.
``RangeQuote`` and ``SearchResult`` are frozen snapshots returned by the
quote provider.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Callable
from typing import Any, Final

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    computed_field,
    field_validator,
)

from Stockfin.models.enums import StockField

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME: Final[str] = "?"

StockObserver = Callable[["Stock", StockField], None]

_handler_ids = itertools.count(1)


class Stock(BaseModel):
    """A tracked instrument.

    The ticker is assigned at creation and treated as a stable key, but
    entities are compared by identity wherever position lookups happen;
    two Stocks with the same ticker are distinct entries.
    """

    model_config = ConfigDict(validate_assignment=True)

    ticker: str = Field(frozen=True)
    name: str = PLACEHOLDER_NAME
    price: float = 0.0
    pct_change_1d: float = 0.0
    pct_change_1w: float = 0.0

    _observers: dict[int, StockObserver] = PrivateAttr(default_factory=dict)

    def connect(self, callback: StockObserver) -> int:
        """Subscribe *callback* to field changes. Returns a handler id."""
        handler_id = next(_handler_ids)
        self._observers[handler_id] = callback
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        """Remove a previously connected observer (no-op if unknown)."""
        self._observers.pop(handler_id, None)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or name not in type(self).model_fields:
            super().__setattr__(name, value)
            return

        previous = getattr(self, name)
        super().__setattr__(name, value)
        if getattr(self, name) != previous:
            self._notify(StockField(name))

    def _notify(self, field: StockField) -> None:
        for callback in list(self._observers.values()):
            try:
                callback(self, field)
            except Exception:  # noqa: BLE001
                logger.exception("Observer failed for %s.%s", self.ticker, field)

    def __repr__(self) -> str:
        return (
            f"Stock(ticker={self.ticker!r}, name={self.name!r}, price={self.price}, "
            f"pct_change_1d={self.pct_change_1d}, pct_change_1w={self.pct_change_1w})"
        )


class RangeQuote(BaseModel):
    """First and last close over a requested range.

    Frozen because a range response is a point-in-time snapshot.
    """

    model_config = ConfigDict(frozen=True)

    prev_close: float
    last_close: float
    name: str | None = None

    @field_validator("prev_close", "last_close")
    @classmethod
    def _require_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("close must be a finite number")
        return value

    @field_validator("prev_close")
    @classmethod
    def _require_nonzero(cls, value: float) -> float:
        if value == 0:
            raise ValueError("prev_close must be non-zero")
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pct_change(self) -> float:
        """Signed fractional change: (last - prev) / prev."""
        return (self.last_close - self.prev_close) / self.prev_close


class SearchResult(BaseModel):
    """One symbol lookup hit, carrying its own (symbol, name) pair."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
