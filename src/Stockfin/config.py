"""Runtime configuration.

Defaults live here as typed constants; ``StockfinConfig.from_env()`` applies
``STOCKFIN_*`` environment overrides and CLI options override both.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

APP_NAME: Final[str] = "stockfin"
TICKERS_FILENAME: Final[str] = "tickers.json"

DEFAULT_REFRESH_INTERVAL: Final[float] = 60.0
MIN_REFRESH_INTERVAL: Final[float] = 1.0
MAX_REFRESH_INTERVAL: Final[float] = 3600.0

ENV_REFRESH_INTERVAL: Final[str] = "STOCKFIN_REFRESH_INTERVAL"
ENV_CONFIG_DIR: Final[str] = "STOCKFIN_CONFIG_DIR"


def default_config_dir() -> Path:
    """Per-user configuration directory (XDG base directory layout)."""
    override = os.environ.get(ENV_CONFIG_DIR)
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / APP_NAME


class StockfinConfig(BaseModel):
    """Validated settings for one tracker process."""

    model_config = ConfigDict(frozen=True)

    refresh_interval: float = Field(
        default=DEFAULT_REFRESH_INTERVAL,
        ge=MIN_REFRESH_INTERVAL,
        le=MAX_REFRESH_INTERVAL,
    )
    config_dir: Path = Field(default_factory=default_config_dir)

    @property
    def tickers_path(self) -> Path:
        return self.config_dir / TICKERS_FILENAME

    @classmethod
    def from_env(cls, **overrides: object) -> StockfinConfig:
        """Build a config from env vars, then explicit non-None overrides.

        An unparseable env value is logged and the default kept; explicit
        overrides are validated strictly.
        """
        values: dict[str, object] = {}
        raw_interval = os.environ.get(ENV_REFRESH_INTERVAL)
        if raw_interval:
            try:
                checked = cls(refresh_interval=float(raw_interval))
                values["refresh_interval"] = checked.refresh_interval
            except (ValueError, ValidationError):
                logger.warning(
                    "Ignoring invalid %s=%r, using %.0fs",
                    ENV_REFRESH_INTERVAL,
                    raw_interval,
                    DEFAULT_REFRESH_INTERVAL,
                )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
