"""Logging setup shared by every ``stockfin`` subcommand.

Records go to stderr so that ``stockfin status`` keeps stdout to the single
JSON line a status bar reads, and so the live table drawn by ``stockfin run``
is not interleaved with log output.

The root level comes from the ``-v``/``-q`` flags, then the ``level``
argument, then ``LOG_LEVEL``. Each area of the tracker can be tuned on its
own with ``LOG_LEVEL_CORE`` (scheduler and aggregate), ``LOG_LEVEL_SERVICES``
(Yahoo quote provider), ``LOG_LEVEL_IPC`` (D-Bus status service) and
``LOG_LEVEL_DATA`` (ticker file).
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Env suffix -> logger of the package area it controls
_AREA_LOGGERS: dict[str, str] = {
    "CORE": "Stockfin.core",
    "SERVICES": "Stockfin.services",
    "IPC": "Stockfin.ipc",
    "DATA": "Stockfin.data",
}

# Third-party loggers that repeat failures the quote provider already reports
_QUIETED_LOGGERS: tuple[str, ...] = ("yfinance",)


def _resolve_level(name: str | None) -> int | None:
    """Map a level name such as ``"debug"`` to its number, or None if unknown."""
    if not name:
        return None
    resolved = logging.getLevelName(name.strip().upper())
    return resolved if isinstance(resolved, int) else None


def _root_level(level: str, *, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    for candidate in (level, os.environ.get("LOG_LEVEL")):
        resolved = _resolve_level(candidate)
        if resolved is not None:
            return resolved
    return logging.INFO


def configure_logging(
    *,
    level: str = "",
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """Install the stderr handler and apply per-area overrides.

    Safe to call more than once: earlier handlers are replaced. Unknown
    level names fall through to the next source; an unknown
    ``LOG_LEVEL_{AREA}`` value leaves that area inheriting from the root.
    """
    logging.basicConfig(
        level=_root_level(level, verbose=verbose, quiet=quiet),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )

    for name in _QUIETED_LOGGERS:
        logging.getLogger(name).setLevel(logging.CRITICAL)

    for area, logger_name in _AREA_LOGGERS.items():
        area_level = _resolve_level(os.environ.get(f"LOG_LEVEL_{area}"))
        if area_level is not None:
            logging.getLogger(logger_name).setLevel(area_level)
