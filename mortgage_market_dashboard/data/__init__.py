"""Data fetching and fallback generation."""

from .fred_fetcher import FredFetcher
from .poller import MarketDataPoller, MarketSnapshot
from .synthetic import generate_synthetic_series

__all__ = ["FredFetcher", "MarketDataPoller", "MarketSnapshot", "generate_synthetic_series"]
