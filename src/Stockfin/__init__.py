"""Stockfin: a small tracked-ticker monitor with a status-bar feed."""

__version__ = "0.3.0"
