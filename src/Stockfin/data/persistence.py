"""JSON file persistence for the tracked-ticker list.

The file holds an array of ``[ticker, name]`` pairs in registry order.
Files written by earlier versions hold bare ticker strings; those load with
the placeholder name. Every add/remove rewrites the whole file. There is no
locking: a single running instance is assumed.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from Stockfin.models.stock import PLACEHOLDER_NAME

logger = logging.getLogger(__name__)

TrackedTicker = tuple[str, str]

_STORED_LIST: TypeAdapter[list[tuple[str, str] | str]] = TypeAdapter(
    list[tuple[str, str] | str]
)


class TickerStore:
    """Load and save ``(ticker, name)`` pairs at a fixed path.

    Neither operation raises: a missing or malformed file loads as an empty
    list, and write failures are logged.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[TrackedTicker]:
        self._ensure_dir()
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            logger.debug("No ticker file at %s, starting empty", self._path)
            return []
        except OSError as exc:
            logger.warning("Could not read %s, starting empty: %s", self._path, exc)
            return []

        # Bytes go straight to the JSON parser so invalid UTF-8 is a ValidationError
        try:
            entries = _STORED_LIST.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Malformed ticker file %s, starting empty (%d errors)",
                self._path,
                exc.error_count(),
            )
            return []

        tickers = [
            (entry, PLACEHOLDER_NAME) if isinstance(entry, str) else entry for entry in entries
        ]
        logger.info("Loaded %d tracked tickers from %s", len(tickers), self._path)
        return tickers

    def save(self, tickers: list[TrackedTicker]) -> None:
        self._ensure_dir()
        payload = json.dumps([[ticker, name] for ticker, name in tickers])
        try:
            self._path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not save tickers to %s: %s", self._path, exc)
            return
        logger.debug("Saved %d tracked tickers to %s", len(tickers), self._path)

    def _ensure_dir(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            # Surfaced by the read/write that follows, if at all
            pass
