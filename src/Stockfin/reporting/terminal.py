"""Rich-based terminal tables for the ranked view and search results.

Color scheme: green = bullish, red = bearish, yellow = flat.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.table import Table

from Stockfin.core.aggregate import build_status, classify, format_percentage
from Stockfin.models.enums import SignalDirection
from Stockfin.models.stock import SearchResult, Stock

# --- Color scheme ---
COLOR_BULLISH: str = "green"
COLOR_BEARISH: str = "red"
COLOR_NEUTRAL: str = "yellow"
COLOR_HEADER: str = "bold cyan"
COLOR_MUTED: str = "dim"


def _direction_color(direction: SignalDirection) -> str:
    """Map a signal direction to its terminal color."""
    if direction == SignalDirection.BULLISH:
        return COLOR_BULLISH
    if direction == SignalDirection.BEARISH:
        return COLOR_BEARISH
    return COLOR_NEUTRAL


def _change_cell(change: float) -> str:
    percentage = change * 100 + 0.0
    color = _direction_color(classify(percentage))
    return f"[{color}]{format_percentage(percentage)}[/{color}]"


def render_stock_table(
    stocks: Sequence[Stock],
    aggregate: float,
    *,
    title: str = "Stockfin",
) -> Table:
    """Ranked stocks with price and 1D/1W change columns.

    The caption shows the status-bar text for *aggregate*.
    """
    status = build_status(aggregate)
    table = Table(
        title=title,
        title_style=COLOR_HEADER,
        caption=status.tooltip,
        caption_style=_direction_color(status.alt),
    )
    table.add_column("#", justify="right", style=COLOR_MUTED)
    table.add_column("Ticker", style="bold")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    table.add_column("1D", justify="right")
    table.add_column("1W", justify="right")

    for position, stock in enumerate(stocks):
        table.add_row(
            str(position),
            stock.ticker,
            stock.name,
            f"${stock.price:.2f}",
            _change_cell(stock.pct_change_1d),
            _change_cell(stock.pct_change_1w),
        )
    return table


def render_search_results(results: Sequence[SearchResult]) -> Table:
    table = Table(title="Search results", title_style=COLOR_HEADER)
    table.add_column("#", justify="right", style=COLOR_MUTED)
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    for index, result in enumerate(results):
        table.add_row(str(index), result.symbol, result.name)
    return table
