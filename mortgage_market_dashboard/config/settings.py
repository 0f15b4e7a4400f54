"""Configuration settings for the dashboard."""

from dataclasses import dataclass, field
import os

from dotenv import load_dotenv


load_dotenv()


PLACEHOLDER_API_KEY = "demo_key"


@dataclass(frozen=True)
class SeriesDefinition:
    """A FRED series and the shape of its synthetic fallback."""

    key: str
    series_id: str
    title: str
    units: str
    cadence: str  # "weekly" or "monthly"
    base: float
    noise: float  # full width of the uniform perturbation
    floor: float
    ceiling: float
    trend: float = 0.0  # per step, positive = rising toward today
    overview_limit: int = 12
    chart_limit: int = 36


# FRED series shown on the market overview
FRED_SERIES: dict[str, SeriesDefinition] = {
    "mortgage_rate": SeriesDefinition(
        key="mortgage_rate",
        series_id="MORTGAGE30US",
        title="30-Year Fixed Mortgage Rate",
        units="%",
        cadence="weekly",
        base=6.8,
        noise=0.3,
        floor=3.0,
        ceiling=8.0,
        chart_limit=52,  # 1 year of weekly data
    ),
    "home_price_index": SeriesDefinition(
        key="home_price_index",
        series_id="CSUSHPINSA",
        title="Case-Shiller Home Price Index",
        units="index",
        cadence="monthly",
        base=310.0,
        noise=5.0,
        floor=250.0,
        ceiling=400.0,
        trend=0.5,
    ),
    "unemployment_rate": SeriesDefinition(
        key="unemployment_rate",
        series_id="UNRATE",
        title="Unemployment Rate",
        units="%",
        cadence="monthly",
        base=3.8,
        noise=0.5,
        floor=2.0,
        ceiling=6.0,
    ),
    "delinquency_rate": SeriesDefinition(
        key="delinquency_rate",
        series_id="DRSFRMACBS",
        title="Mortgage Delinquency Rate",
        units="%",
        cadence="monthly",
        base=2.1,
        noise=0.3,
        floor=1.0,
        ceiling=4.0,
        chart_limit=20,
    ),
}


@dataclass
class Settings:
    """Application settings."""

    fred_api_key: str = field(
        default_factory=lambda: os.getenv("FRED_API_KEY", PLACEHOLDER_API_KEY)
    )
    fred_base_url: str = field(
        default_factory=lambda: os.getenv("FRED_BASE_URL", "https://api.stlouisfed.org/fred")
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("FRED_TIMEOUT", "30"))
    )
    refresh_interval: float = field(
        default_factory=lambda: float(os.getenv("MARKET_REFRESH_INTERVAL", "600"))
    )

    def has_fred_key(self) -> bool:
        """Check if a real FRED API key is configured."""
        return bool(self.fred_api_key) and self.fred_api_key != PLACEHOLDER_API_KEY
