"""Caller-driven polling of market series."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from datetime import datetime

from mortgage_market_dashboard.config import FRED_SERIES
from mortgage_market_dashboard.data.fred_fetcher import FredFetcher
from mortgage_market_dashboard.indicators.calculator import calculate_change
from mortgage_market_dashboard.models import ChangeSummary, SeriesResult


logger = logging.getLogger(__name__)

# Short windows for metric cards
OVERVIEW_LIMITS: dict[str, int] = {
    key: definition.overview_limit for key, definition in FRED_SERIES.items()
}


def trim_results(results: dict[str, SeriesResult], limits: dict[str, int]) -> dict[str, SeriesResult]:
    """Keep the most recent `limits[key]` points of each result, source unchanged."""
    return {
        key: replace(result, points=result.points[-limits[key]:] if limits.get(key, 0) > 0 else ())
        for key, result in results.items()
    }


@dataclass(frozen=True)
class MarketSnapshot:
    """Results of one refresh cycle."""

    results: dict[str, SeriesResult]
    refreshed_at: datetime

    def summary(self, key: str) -> ChangeSummary:
        return calculate_change(self.results[key].points)

    @property
    def synthetic_keys(self) -> list[str]:
        return [key for key, result in self.results.items() if result.is_synthetic]


class MarketDataPoller:
    """
    Periodically refreshes market series through a FredFetcher.

    The latest snapshot is overwritten on every refresh; there is no
    staleness check and no retry beyond the next scheduled cycle.
    """

    def __init__(
        self,
        fetcher: FredFetcher,
        interval: float | None = None,
        limits: dict[str, int] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.fetcher = fetcher
        self.interval = interval if interval is not None else fetcher.settings.refresh_interval
        self.limits = dict(OVERVIEW_LIMITS) if limits is None else limits
        self.sleep = sleep
        self.clock = clock
        self.latest: MarketSnapshot | None = None

    async def refresh(self) -> MarketSnapshot:
        """Fetch every configured series once and store the snapshot."""
        results = await self.fetcher.fetch_all(self.limits)
        snapshot = MarketSnapshot(results=results, refreshed_at=self.clock())
        self.latest = snapshot

        if snapshot.synthetic_keys:
            logger.info(f"Refreshed with synthetic data for: {snapshot.synthetic_keys}")
        else:
            logger.info(f"Refreshed {len(results)} series")
        return snapshot

    async def run(
        self,
        iterations: int | None = None,
        on_update: Callable[[MarketSnapshot], None] | None = None,
    ) -> None:
        """
        Refresh, notify, then sleep for the interval, repeatedly.

        Args:
            iterations: Stop after this many refreshes (forever if None)
            on_update: Called with each new snapshot
        """
        count = 0
        while iterations is None or count < iterations:
            snapshot = await self.refresh()
            if on_update is not None:
                on_update(snapshot)
            count += 1
            if iterations is None or count < iterations:
                await self.sleep(self.interval)
