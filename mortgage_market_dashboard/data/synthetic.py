"""Synthetic fallback series for when FRED is unavailable."""

from datetime import date, timedelta

import numpy as np
import pandas as pd

from mortgage_market_dashboard.config import SeriesDefinition
from mortgage_market_dashboard.models import MarketDataPoint, Series


SYNTHETIC_LENGTH = 30


def _step_back(today: date, cadence: str, steps: int) -> date:
    """Date `steps` periods before today at the series' cadence."""
    if cadence == "weekly":
        return today - timedelta(days=7 * steps)
    # DateOffset clamps to month end (Mar 31 -> Feb 28/29)
    return (pd.Timestamp(today) - pd.DateOffset(months=steps)).date()


def generate_synthetic_series(
    definition: SeriesDefinition,
    today: date,
    rng: np.random.Generator | None = None,
    length: int = SYNTHETIC_LENGTH,
) -> Series:
    """
    Build a plausible series ending today.

    Each point is the definition's base value, shifted by its trend and a
    uniform perturbation of width `noise`, then clamped to [floor, ceiling].

    Args:
        definition: Series catalog entry
        today: Date of the last point
        rng: Random generator (a fresh unseeded one if omitted)
        length: Number of points

    Returns:
        Series ordered oldest first
    """
    rng = rng or np.random.default_rng()
    variations = (rng.random(length) - 0.5) * definition.noise

    points = []
    for offset, steps_back in enumerate(range(length - 1, -1, -1)):
        raw = definition.base - steps_back * definition.trend + variations[offset]
        value = min(definition.ceiling, max(definition.floor, round(float(raw), 2)))
        points.append(
            MarketDataPoint(
                date=_step_back(today, definition.cadence, steps_back).isoformat(),
                value=value,
            )
        )

    return tuple(points)
