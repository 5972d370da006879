"""Quote provider services.

Re-exports the public provider types so consumers can import directly:
    from Stockfin.services import QuoteProvider, YahooQuoteProvider
"""

from Stockfin.services.quote_provider import QuoteProvider, YahooQuoteProvider

__all__ = [
    "QuoteProvider",
    "YahooQuoteProvider",
]
