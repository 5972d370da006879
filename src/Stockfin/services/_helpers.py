"""Shared helpers for the yfinance-backed quote provider."""

from __future__ import annotations

import math
from typing import Final

YFINANCE_SOURCE: Final[str] = "yfinance"
EXTERNAL_CALL_TIMEOUT_SECONDS: Final[float] = 30.0


def safe_float(value: object) -> float | None:
    """Convert a numeric value to float, treating NaN/inf/None as missing."""
    if value is None:
        return None
    try:
        float_val = float(str(value))
    except (ValueError, TypeError):
        return None
    if math.isnan(float_val) or math.isinf(float_val):
        return None
    return float_val


def clean_name(value: object) -> str | None:
    """Strip a display-name field, returning None when blank or absent."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
