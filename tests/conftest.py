"""Shared fixtures for all test modules."""

from datetime import datetime

import httpx
import numpy as np
import pytest

from mortgage_market_dashboard.config import Settings
from mortgage_market_dashboard.data.fred_fetcher import FredFetcher


BASE_URL = "https://fred.test"
FIXED_NOW = datetime(2024, 3, 31, 12, 0, 0)


@pytest.fixture
def settings():
    return Settings(
        fred_api_key="test_key",
        fred_base_url=BASE_URL,
        request_timeout=5.0,
        refresh_interval=60.0,
    )


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_fetcher(settings, clock):
    """Build a FredFetcher whose HTTP calls go to `handler`."""

    def _make(handler, **kwargs):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return FredFetcher(
            settings=kwargs.pop("settings", settings),
            client=client,
            clock=kwargs.pop("clock", clock),
            rng=kwargs.pop("rng", np.random.default_rng(42)),
        )

    return _make


@pytest.fixture
def observations():
    """FRED-style JSON response for (date, value) pairs, newest first."""

    def _response(*pairs):
        return httpx.Response(
            200,
            json={"observations": [{"date": d, "value": v} for d, v in pairs]},
        )

    return _response
