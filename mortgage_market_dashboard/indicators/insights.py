"""Market opportunity and risk notes derived from the latest series."""

from collections.abc import Mapping
from dataclasses import dataclass

from mortgage_market_dashboard.indicators.calculator import calculate_change
from mortgage_market_dashboard.models import Series


UNEMPLOYMENT_RISK_THRESHOLD = 5.0
DELINQUENCY_RISK_THRESHOLD = 3.0


@dataclass(frozen=True)
class Insight:
    """One line of commentary on a series."""

    key: str
    category: str  # "opportunity" or "risk"
    badge: str
    title: str
    message: str
    elevated: bool = False


def _mortgage_rate(series: Series) -> Insight:
    summary = calculate_change(series)
    if summary.change < 0:
        outlook = "Declining rates may increase refinancing opportunities."
    else:
        outlook = "Rising rates may create distressed asset opportunities."
    return Insight(
        key="mortgage_rate",
        category="opportunity",
        badge="Rate Watch",
        title="Mortgage Rate Trends",
        message=f"Current 30-year fixed rate: {series[-1].value:.2f}%. {outlook}",
    )


def _home_price_index(series: Series) -> Insight:
    summary = calculate_change(series)
    if summary.change_percent > 0:
        outlook = "Continued appreciation supports collateral values."
    else:
        outlook = "Price corrections may present buying opportunities."
    return Insight(
        key="home_price_index",
        category="opportunity",
        badge="Price Trend",
        title="Home Price Movement",
        message=f"Home price index: {series[-1].value:.1f}. {outlook}",
    )


def _unemployment_rate(series: Series) -> Insight:
    current = series[-1].value
    elevated = current > UNEMPLOYMENT_RISK_THRESHOLD
    if elevated:
        outlook = "Elevated unemployment may increase default risk."
    else:
        outlook = "Low unemployment supports borrower stability."
    return Insight(
        key="unemployment_rate",
        category="risk",
        badge="Economic",
        title="Employment Conditions",
        message=f"Unemployment rate: {current:.1f}%. {outlook}",
        elevated=elevated,
    )


def _delinquency_rate(series: Series) -> Insight:
    current = series[-1].value
    elevated = current > DELINQUENCY_RISK_THRESHOLD
    if elevated:
        outlook = "Elevated delinquencies signal increased credit risk."
    else:
        outlook = "Low delinquency rates indicate healthy loan performance."
    return Insight(
        key="delinquency_rate",
        category="risk",
        badge="Credit",
        title="Loan Performance",
        message=f"Delinquency rate: {current:.2f}%. {outlook}",
        elevated=elevated,
    )


RULES = {
    "mortgage_rate": _mortgage_rate,
    "home_price_index": _home_price_index,
    "unemployment_rate": _unemployment_rate,
    "delinquency_rate": _delinquency_rate,
}


def market_insights(series_by_key: Mapping[str, Series]) -> list[Insight]:
    """
    Build opportunity and risk insights for the series present.

    Series that are missing or empty are skipped.

    Args:
        series_by_key: Catalog key to Series (e.g. "mortgage_rate")

    Returns:
        Insights in catalog order, opportunities before risks
    """
    insights = []
    for key, rule in RULES.items():
        series = series_by_key.get(key)
        if series:
            insights.append(rule(series))
    return insights
