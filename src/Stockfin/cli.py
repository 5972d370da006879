"""CLI entry point for Stockfin.

Provides the ``stockfin`` command: ``run`` starts the tracker with its live
table and D-Bus status service; the other subcommands edit the tracked list
or talk to a running instance.

This is the ONLY module that writes to stdout. All other modules use
``logging``. Async internals are bridged to typer's synchronous interface via
``asyncio.run()``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

import typer
from rich.console import Console, RenderableType
from rich.live import Live

from Stockfin.config import MAX_REFRESH_INTERVAL, MIN_REFRESH_INTERVAL, StockfinConfig
from Stockfin.core.aggregate import build_status
from Stockfin.core.tracker import StockTracker
from Stockfin.data.persistence import TickerStore
from Stockfin.ipc.client import fetch_status, request_activate
from Stockfin.ipc.publisher import StatusPublisher
from Stockfin.logging_config import configure_logging
from Stockfin.reporting.terminal import render_search_results, render_stock_table
from Stockfin.services.quote_provider import YahooQuoteProvider

logger = logging.getLogger(__name__)

app = typer.Typer(name="stockfin", help="Track a handful of tickers and feed a status bar")

console = Console()

# Seconds between live-table redraws
LIVE_REFRESH_SECONDS: float = 1.0


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only warnings and errors")] = False,
) -> None:
    """Configure logging before any subcommand runs."""
    configure_logging(verbose=verbose, quiet=quiet)


def _load_config(interval: float | None = None) -> StockfinConfig:
    return StockfinConfig.from_env(refresh_interval=interval)


def _store(config: StockfinConfig) -> TickerStore:
    return TickerStore(config.tickers_path)


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


async def _run_tracker(config: StockfinConfig) -> None:
    tracker = StockTracker(
        YahooQuoteProvider(),
        _store(config),
        interval=config.refresh_interval,
    )
    loaded = tracker.load()
    logger.info("Starting with %d tracked tickers", loaded)

    def _render() -> RenderableType:
        return render_stock_table(tracker.view.items(), tracker.aggregate.get())

    with Live(_render(), console=console, auto_refresh=False) as live:

        def _on_activate() -> None:
            live.update(_render(), refresh=True)

        publisher = StatusPublisher(tracker.aggregate, on_activate=_on_activate)
        await publisher.start()
        tracker.start()
        try:
            while True:
                live.update(_render(), refresh=True)
                await asyncio.sleep(LIVE_REFRESH_SECONDS)
        finally:
            await tracker.stop()
            await publisher.stop()


@app.command()
def run(
    interval: Annotated[
        float | None,
        typer.Option(
            min=MIN_REFRESH_INTERVAL,
            max=MAX_REFRESH_INTERVAL,
            help="Seconds between refresh cycles (default: STOCKFIN_REFRESH_INTERVAL or 60)",
        ),
    ] = None,
) -> None:
    """Run the tracker with a live ranked table until Ctrl+C."""
    if asyncio.run(request_activate()):
        console.print("[yellow]Stockfin is already running; asked it to come forward.[/yellow]")
        return

    config = _load_config(interval)
    try:
        asyncio.run(_run_tracker(config))
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


# ---------------------------------------------------------------------------
# Tracked-list commands
# ---------------------------------------------------------------------------


def _refuse_if_running() -> None:
    """Exit if a live instance owns the ticker file; it would overwrite our edit."""
    if asyncio.run(fetch_status()) is not None:
        console.print(
            "[red]Stockfin is running and owns the tracked list. "
            "Stop it before adding or removing tickers.[/red]"
        )
        raise typer.Exit(code=1)


def _offline_tracker(config: StockfinConfig) -> StockTracker:
    tracker = StockTracker(
        YahooQuoteProvider(),
        _store(config),
        interval=config.refresh_interval,
    )
    tracker.load()
    return tracker


@app.command()
def add(
    ticker: Annotated[str, typer.Argument(help="Ticker symbol, e.g. AAPL")],
    name: Annotated[str | None, typer.Option(help="Display name")] = None,
) -> None:
    """Track TICKER. Refused while an instance is running."""
    _refuse_if_running()
    tracker = _offline_tracker(_load_config())
    stock = tracker.add(ticker, name)
    console.print(f"Tracking [bold]{stock.ticker}[/bold] ({stock.name})")


@app.command()
def remove(
    position: Annotated[int, typer.Argument(help="Position as shown by 'stockfin list'")],
) -> None:
    """Stop tracking the ticker at POSITION."""
    _refuse_if_running()
    tracker = _offline_tracker(_load_config())
    try:
        stock = tracker.remove(position)
    except IndexError:
        console.print(f"[red]No tracked ticker at position {position}.[/red]")
        raise typer.Exit(code=1) from None
    console.print(f"Removed [bold]{stock.ticker}[/bold]")


@app.command("list")
def list_tickers() -> None:
    """Show the tracked tickers in stored order."""
    tracker = _offline_tracker(_load_config())
    if len(tracker.registry) == 0:
        console.print("[dim]No tickers tracked. Add one with 'stockfin add TICKER'.[/dim]")
        return
    console.print(render_stock_table(tracker.registry.snapshot(), 0.0, title="Tracked tickers"))


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Company name or symbol fragment")],
    add_index: Annotated[
        int | None, typer.Option("--add", help="Track the result at this index")
    ] = None,
) -> None:
    """Look up symbols matching QUERY."""
    if add_index is not None:
        _refuse_if_running()
    tracker = _offline_tracker(_load_config())
    results = asyncio.run(tracker.search(query))
    if not results:
        console.print(f"[yellow]No matches for {query!r}.[/yellow]")
        raise typer.Exit(code=1)

    console.print(render_search_results(results))
    if add_index is None:
        return
    if not 0 <= add_index < len(results):
        console.print(f"[red]No result at index {add_index}.[/red]")
        raise typer.Exit(code=1)
    stock = tracker.add_result(results[add_index])
    console.print(f"Tracking [bold]{stock.ticker}[/bold] ({stock.name})")


# ---------------------------------------------------------------------------
# IPC commands
# ---------------------------------------------------------------------------


@app.command()
def status() -> None:
    """Print the running instance's status JSON (one line, for status bars)."""
    payload = asyncio.run(fetch_status())
    if payload is None:
        payload = build_status(0.0).to_json()
    typer.echo(payload)


@app.command()
def activate() -> None:
    """Bring a running instance to the foreground."""
    if not asyncio.run(request_activate()):
        console.print("[yellow]Stockfin is not running.[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
