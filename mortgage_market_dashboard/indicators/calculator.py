"""Change summaries and chart shaping for market series."""

import pandas as pd

from mortgage_market_dashboard.models import ChangeSummary, Series


def calculate_change(series: Series) -> ChangeSummary:
    """
    Compare the last two points of a series.

    Fewer than two points yields an all-zero summary. A previous value of
    zero yields a change percent of zero.
    """
    if len(series) < 2:
        return ChangeSummary()

    current = series[-1].value
    previous = series[-2].value
    change = current - previous
    change_percent = (change / previous) * 100 if previous != 0 else 0.0

    return ChangeSummary(
        current=current,
        previous=previous,
        change=change,
        change_percent=change_percent,
    )


RESERVED_CHART_KEYS = frozenset({"date", "formattedDate"})


def format_chart_data(series: Series, label: str) -> list[dict]:
    """
    Rows keyed by date, label and a short axis date like "Jan 15".

    Raises:
        ValueError: If label is "date" or "formattedDate", which would
            overwrite the raw fields
    """
    if label in RESERVED_CHART_KEYS:
        raise ValueError(f"Chart label {label!r} collides with a reserved key")

    rows = []
    for point in series:
        ts = pd.Timestamp(point.date)
        rows.append({
            "date": point.date,
            label: point.value,
            "formattedDate": f"{ts:%b} {ts.day}",
        })
    return rows


def series_to_frame(series: Series) -> pd.DataFrame:
    """Series as a DataFrame with a DatetimeIndex and a value column."""
    if not series:
        return pd.DataFrame(columns=["value"])

    df = pd.DataFrame(
        {"value": [point.value for point in series]},
        index=pd.to_datetime([point.date for point in series]),
    )
    df.index.name = "date"
    return df
