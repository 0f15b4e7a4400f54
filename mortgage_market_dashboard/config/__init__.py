"""Settings and series catalog."""

from mortgage_market_dashboard.config.settings import (
    FRED_SERIES,
    PLACEHOLDER_API_KEY,
    SeriesDefinition,
    Settings,
)

__all__ = ["FRED_SERIES", "PLACEHOLDER_API_KEY", "SeriesDefinition", "Settings"]
