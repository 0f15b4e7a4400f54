"""FRED API data fetcher with synthetic fallback."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

import httpx
import numpy as np
import pandas as pd

from mortgage_market_dashboard.config import FRED_SERIES, SeriesDefinition, Settings
from mortgage_market_dashboard.data.synthetic import generate_synthetic_series
from mortgage_market_dashboard.indicators.calculator import calculate_change
from mortgage_market_dashboard.models import (
    MISSING_VALUE,
    DataSource,
    MarketDataPoint,
    Series,
    SeriesResult,
)


logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 30


class FredFetcher:
    """
    Fetches mortgage market series from the FRED API.

    Never raises on source failures: network errors, non-2xx responses and
    malformed payloads are logged and replaced with a synthetic series.
    Holds no state between calls apart from the HTTP client.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] = datetime.now,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.clock = clock
        self.rng = rng or np.random.default_rng()
        self._client = client
        self._owns_client = client is None

        if not self.settings.has_fred_key():
            logger.warning("FRED_API_KEY not set, requests will likely fall back to synthetic data")

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.request_timeout)
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """Close HTTP client if we created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FredFetcher":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def _fetch_observations(self, series_id: str, limit: int) -> pd.DataFrame:
        """
        Fetch the most recent observations, newest first.

        Returns:
            DataFrame with raw string date and value columns
        """
        response = await self.client.get(
            f"{self.settings.fred_base_url}/series/observations",
            params={
                "series_id": series_id,
                "api_key": self.settings.fred_api_key,
                "file_type": "json",
                "limit": limit,
                "sort_order": "desc",
            },
        )
        response.raise_for_status()
        data = response.json()

        observations = data["observations"]
        if not isinstance(observations, list):
            raise ValueError(f"Malformed observations payload for {series_id}")

        return pd.DataFrame(observations, columns=["date", "value"])

    @staticmethod
    def _normalize(df: pd.DataFrame, limit: int) -> Series:
        """Drop missing values and order the observations oldest first."""
        df = df[df["value"] != MISSING_VALUE].copy()
        df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d")
        df["value"] = df["value"].astype(float)
        df = df[np.isfinite(df["value"])]
        df = df.drop_duplicates(subset="date").sort_values("date").tail(limit)

        return tuple(
            MarketDataPoint(date=ts.strftime("%Y-%m-%d"), value=float(value))
            for ts, value in zip(df["date"], df["value"])
        )

    def _definition(self, key: str) -> SeriesDefinition:
        if key not in FRED_SERIES:
            raise ValueError(f"Unknown series: {key}. Available: {', '.join(FRED_SERIES)}")
        return FRED_SERIES[key]

    def _result(self, definition: SeriesDefinition, points: Series, source: DataSource) -> SeriesResult:
        return SeriesResult(
            key=definition.key,
            series_id=definition.series_id,
            points=points,
            source=source,
            fetched_at=self.clock(),
        )

    def _fallback(self, definition: SeriesDefinition) -> SeriesResult:
        points = generate_synthetic_series(definition, self.clock().date(), self.rng)
        return self._result(definition, points, DataSource.SYNTHETIC)

    async def fetch_series(self, key: str, limit: int = DEFAULT_LIMIT) -> SeriesResult:
        """
        Fetch a single series by catalog key.

        Args:
            key: Key in FRED_SERIES (e.g. "mortgage_rate")
            limit: Maximum number of most recent observations; <= 0 returns
                an empty series without a request

        Returns:
            SeriesResult with live points, or synthetic points on failure

        Raises:
            ValueError: If the key is not in the catalog
        """
        definition = self._definition(key)
        if limit <= 0:
            return self._result(definition, (), DataSource.NONE)

        logger.info(f"Fetching {definition.series_id} (limit={limit})...")

        try:
            df = await self._fetch_observations(definition.series_id, limit)
            points = self._normalize(df, limit)
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"HTTP error fetching {definition.series_id}: {e.response.status_code}, "
                "using synthetic data"
            )
            return self._fallback(definition)
        except Exception as e:
            logger.warning(
                f"Error fetching {definition.series_id}: {type(e).__name__}: {e}, "
                "using synthetic data"
            )
            return self._fallback(definition)

        logger.info(f"  Received {len(points)} observations for {definition.series_id}")
        return self._result(definition, points, DataSource.FRED)

    async def fetch_all(self, limit: int | dict[str, int] = DEFAULT_LIMIT) -> dict[str, SeriesResult]:
        """
        Fetch several series concurrently.

        Args:
            limit: One limit for every catalog series, or a mapping of
                key to limit restricting the fetch to those keys

        Returns:
            Dict mapping key to SeriesResult
        """
        limits = limit if isinstance(limit, dict) else dict.fromkeys(FRED_SERIES, limit)
        for key in limits:
            self._definition(key)

        results = await asyncio.gather(
            *(self.fetch_series(key, key_limit) for key, key_limit in limits.items())
        )
        return dict(zip(limits, results))

    async def fetch_mortgage_rates(self, limit: int = DEFAULT_LIMIT) -> Series:
        """30-year fixed mortgage rate, weekly."""
        return (await self.fetch_series("mortgage_rate", limit)).points

    async def fetch_home_price_index(self, limit: int = DEFAULT_LIMIT) -> Series:
        """Case-Shiller national home price index, monthly."""
        return (await self.fetch_series("home_price_index", limit)).points

    async def fetch_unemployment_rate(self, limit: int = DEFAULT_LIMIT) -> Series:
        """Unemployment rate, a proxy for foreclosure risk."""
        return (await self.fetch_series("unemployment_rate", limit)).points

    async def fetch_delinquency_rate(self, limit: int = DEFAULT_LIMIT) -> Series:
        return (await self.fetch_series("delinquency_rate", limit)).points


async def _fetch_for_cli(limits: dict[str, int]) -> dict[str, SeriesResult]:
    async with FredFetcher() as fetcher:
        return await fetcher.fetch_all(limits)


async def _watch_for_cli(
    limits: dict[str, int],
    interval: float | None,
    iterations: int | None,
    on_update: Callable,
) -> None:
    # poller imports this module
    from mortgage_market_dashboard.data.poller import MarketDataPoller

    async with FredFetcher() as fetcher:
        poller = MarketDataPoller(fetcher, interval=interval, limits=limits)
        await poller.run(iterations=iterations, on_update=on_update)


def _print_results(results: dict[str, SeriesResult]) -> None:
    print("\nMarket Data:")
    print("-" * 86)
    for key, result in results.items():
        summary = calculate_change(result.points)
        last = result.points[-1].date if result.points else "N/A"
        print(
            f"{key:18} | {result.source.value:9} | {len(result.points):4} pts | "
            f"Last: {last:10} | {summary.current:>8.2f} ({summary.change_percent:+.2f}%)"
        )


def main() -> None:
    """CLI entry point for fetching data."""
    import argparse
    import sys

    parser = argparse.ArgumentParser(description="Fetch FRED mortgage market data")
    parser.add_argument(
        "--series",
        type=str,
        help="Fetch specific series only",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help="Number of most recent observations to request",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep polling and print each refresh",
    )
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between refreshes in watch mode (default: MARKET_REFRESH_INTERVAL)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        help="Stop watch mode after this many refreshes",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.series and args.series not in FRED_SERIES:
        print(f"Unknown series: {args.series}")
        print(f"Available: {', '.join(FRED_SERIES.keys())}")
        sys.exit(1)

    keys = [args.series] if args.series else list(FRED_SERIES)
    limits = dict.fromkeys(keys, args.limit)

    if args.watch:
        try:
            asyncio.run(_watch_for_cli(
                limits,
                args.interval,
                args.iterations,
                lambda snapshot: _print_results(snapshot.results),
            ))
        except KeyboardInterrupt:
            print("\nStopped.")
        return

    _print_results(asyncio.run(_fetch_for_cli(limits)))


if __name__ == "__main__":
    main()
