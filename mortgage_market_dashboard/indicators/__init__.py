"""Derived metrics for market series."""

from mortgage_market_dashboard.indicators.calculator import (
    calculate_change,
    format_chart_data,
    series_to_frame,
)
from mortgage_market_dashboard.indicators.insights import Insight, market_insights

__all__ = ["Insight", "calculate_change", "format_chart_data", "market_insights", "series_to_frame"]
