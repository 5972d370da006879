"""The shared aggregate daily-change scalar and its status rendering.

The value is written by the refresh scheduler after every successful daily
fetch and read by the IPC publisher. It is *last write wins*: despite being
shown as the overall daily change, it is the most recent instrument's
daily change, not a mean over the tracked set.
"""

from __future__ import annotations

import threading

from Stockfin.models.enums import SignalDirection
from Stockfin.models.status import StatusPayload


class AggregateChange:
    """Lock-guarded float shared between one writer and any number of readers.

    The D-Bus serving path may run outside the event loop thread, so every
    read and write goes through the lock.
    """

    def __init__(self, initial: float = 0.0) -> None:
        self._lock = threading.Lock()
        self._value = initial

    def get(self) -> float:
        with self._lock:
            return self._value

    def set(self, value: float) -> None:
        with self._lock:
            self._value = value


def classify(percentage: float) -> SignalDirection:
    """Bare sign split: positive is bullish, negative bearish, zero neutral."""
    if percentage > 0:
        return SignalDirection.BULLISH
    if percentage < 0:
        return SignalDirection.BEARISH
    return SignalDirection.NEUTRAL


def format_percentage(percentage: float) -> str:
    """Two-decimal percentage with a leading ``+`` for non-negative values."""
    sign = "+" if percentage >= 0 else ""
    return f"{sign}{percentage:.2f}%"


def build_status(value: float) -> StatusPayload:
    """Render a fractional change (0.1 == 10%) as the status payload."""
    # Adding 0.0 turns -0.0 into 0.0 so it formats as "+0.00%"
    percentage = value * 100 + 0.0
    direction = classify(percentage)
    text = format_percentage(percentage)
    return StatusPayload(
        text=text,
        alt=direction,
        class_=direction,
        tooltip=f"Daily change: {text} (most recent update)",
    )
