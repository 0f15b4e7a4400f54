"""
Tests for MarketDataPoller refresh and polling loop.
"""
from datetime import datetime, timedelta

import httpx
import pytest

from mortgage_market_dashboard.data.poller import OVERVIEW_LIMITS, MarketDataPoller, trim_results
from mortgage_market_dashboard.models import DataSource, MarketDataPoint, SeriesResult


class FakeClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        current = self.now
        self.now += timedelta(minutes=10)
        return current


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds):
        sleeps.append(seconds)

    return _sleep


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_uses_overview_limits(self, make_fetcher, observations, fake_sleep):
        seen = {}

        def handler(request):
            seen[request.url.params["series_id"]] = request.url.params["limit"]
            return observations(("2024-02-01", "2.0"), ("2024-01-01", "1.0"))

        poller = MarketDataPoller(make_fetcher(handler), sleep=fake_sleep)
        snapshot = await poller.refresh()

        assert set(snapshot.results) == set(OVERVIEW_LIMITS)
        assert set(seen.values()) == {"12"}
        assert poller.latest is snapshot
        assert snapshot.synthetic_keys == []
        assert snapshot.summary("mortgage_rate").change_percent == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_last_write_wins(self, make_fetcher, observations):
        values = iter(["6.5", "7.1"])
        current = {}

        def handler(request):
            return observations(("2024-01-01", current["value"]))

        poller = MarketDataPoller(
            make_fetcher(handler),
            limits={"mortgage_rate": 1},
            clock=FakeClock(datetime(2024, 1, 1)),
        )

        current["value"] = next(values)
        first = await poller.refresh()
        current["value"] = next(values)
        second = await poller.refresh()

        assert poller.latest is second
        assert second.refreshed_at > first.refreshed_at
        assert poller.latest.results["mortgage_rate"].points[-1].value == 7.1

    @pytest.mark.asyncio
    async def test_reports_synthetic_keys(self, make_fetcher, observations):
        def handler(request):
            if request.url.params["series_id"] == "CSUSHPINSA":
                return httpx.Response(429)
            return observations(("2024-01-01", "1.0"))

        poller = MarketDataPoller(make_fetcher(handler))
        snapshot = await poller.refresh()

        assert snapshot.synthetic_keys == ["home_price_index"]


class TestRun:
    @pytest.mark.asyncio
    async def test_bounded_iterations(self, make_fetcher, observations, fake_sleep, sleeps):
        calls = []
        updates = []

        def handler(request):
            calls.append(request)
            return observations(("2024-01-01", "1.0"))

        poller = MarketDataPoller(
            make_fetcher(handler),
            interval=300,
            limits={"mortgage_rate": 5},
            sleep=fake_sleep,
        )
        await poller.run(iterations=3, on_update=updates.append)

        assert len(calls) == 3
        assert len(updates) == 3
        assert sleeps == [300, 300]
        assert poller.latest is updates[-1]

    @pytest.mark.asyncio
    async def test_interval_defaults_to_settings(self, make_fetcher, observations, fake_sleep, sleeps):
        poller = MarketDataPoller(
            make_fetcher(lambda request: observations()),
            limits={"mortgage_rate": 5},
            sleep=fake_sleep,
        )
        await poller.run(iterations=2)

        assert sleeps == [60.0]

    @pytest.mark.asyncio
    async def test_explicit_empty_limits_fetch_nothing(self, make_fetcher, observations):
        calls = []

        def handler(request):
            calls.append(request)
            return observations(("2024-01-01", "1.0"))

        poller = MarketDataPoller(make_fetcher(handler), limits={})
        snapshot = await poller.refresh()

        assert poller.limits == {}
        assert snapshot.results == {}
        assert calls == []


class TestTrimResults:
    def make_result(self, key, count, source=DataSource.FRED):
        points = tuple(
            MarketDataPoint(date=f"2024-{i + 1:02d}-01", value=float(i)) for i in range(count)
        )
        return SeriesResult(
            key=key, series_id=key.upper(), points=points, source=source,
            fetched_at=datetime(2024, 3, 31),
        )

    def test_keeps_most_recent_points_and_source(self):
        results = {
            "mortgage_rate": self.make_result("mortgage_rate", 10),
            "unemployment_rate": self.make_result("unemployment_rate", 10, DataSource.SYNTHETIC),
        }

        trimmed = trim_results(results, {"mortgage_rate": 3, "unemployment_rate": 12})

        assert [p.value for p in trimmed["mortgage_rate"].points] == [7.0, 8.0, 9.0]
        assert len(trimmed["unemployment_rate"].points) == 10
        assert trimmed["unemployment_rate"].is_synthetic
        assert not trimmed["mortgage_rate"].is_synthetic
        assert len(results["mortgage_rate"].points) == 10

    def test_missing_or_zero_limit_empties(self):
        results = {"mortgage_rate": self.make_result("mortgage_rate", 5)}

        assert trim_results(results, {})["mortgage_rate"].points == ()
        assert trim_results(results, {"mortgage_rate": 0})["mortgage_rate"].points == ()
