"""Data models for market data."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


# FRED marks periods without data with a single dot
MISSING_VALUE = "."


@dataclass(frozen=True)
class MarketDataPoint:
    """Single normalized observation from a series."""

    date: str  # ISO-8601, YYYY-MM-DD
    value: float


# Ascending by date, no duplicate dates
Series = tuple[MarketDataPoint, ...]


@dataclass(frozen=True)
class ChangeSummary:
    """Difference between the last two points of a series."""

    current: float = 0.0
    previous: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0


class DataSource(str, Enum):
    """Where a series came from."""

    FRED = "fred"
    SYNTHETIC = "synthetic"
    NONE = "none"


@dataclass(frozen=True)
class SeriesResult:
    """A fetched series along with its provenance."""

    key: str
    series_id: str
    points: Series
    source: DataSource
    fetched_at: datetime

    @property
    def is_synthetic(self) -> bool:
        return self.source is DataSource.SYNTHETIC
