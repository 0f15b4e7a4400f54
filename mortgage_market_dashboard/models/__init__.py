"""Market data models."""

from mortgage_market_dashboard.models.market_data import (
    MISSING_VALUE,
    ChangeSummary,
    DataSource,
    MarketDataPoint,
    Series,
    SeriesResult,
)

__all__ = [
    "MISSING_VALUE",
    "ChangeSummary",
    "DataSource",
    "MarketDataPoint",
    "Series",
    "SeriesResult",
]
