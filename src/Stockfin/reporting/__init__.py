"""Terminal rendering of the tracked set."""

from Stockfin.reporting.terminal import render_search_results, render_stock_table

__all__ = ["render_search_results", "render_stock_table"]
