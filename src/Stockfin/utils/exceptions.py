"""Custom exception hierarchy for Stockfin.

All quote-provider failures inherit from QuoteFetchError, which carries
contextual information about what went wrong during a fetch. The refresh
scheduler treats any of them as "no update for this instrument this cycle".
"""


class QuoteFetchError(Exception):
    """Base exception for all quote-fetching failures.

    Attributes:
        ticker: The ticker symbol involved in the failure.
        source: The data source that failed (e.g., "yfinance").
    """

    def __init__(
        self,
        message: str,
        *,
        ticker: str,
        source: str,
    ) -> None:
        self.ticker = ticker
        self.source = source
        super().__init__(message)


class TickerNotFoundError(QuoteFetchError):
    """Raised when a ticker symbol does not exist in the data source."""


class DataSourceUnavailableError(QuoteFetchError):
    """Raised when a data source is unreachable, times out, or errors."""


class MalformedQuoteError(QuoteFetchError):
    """Raised when a response is missing fields or carries unusable values."""
