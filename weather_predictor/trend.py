"""
Linear Trend Fitter for Weather Predictor

Fits an ordinary least-squares line to an ordered series of daily values,
using the position in the series (0..n-1) as x, and projects it forward.

    slope     = (n*Sxy - Sx*Sy) / (n*Sxx - Sx^2)
    intercept = (Sy - slope*Sx) / n

Projected values are rounded half away from zero (84.5 -> 85, -2.5 -> -3)
so negative winter temperatures round symmetrically with positive ones.
"""

import logging
from typing import List, Sequence

import numpy as np

from weather_predictor.models import InvalidSeriesError, Number, TrendModel

logger = logging.getLogger(__name__)

# A line needs two distinct x positions
MIN_FIT_POINTS = 2


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    magnitude = abs(value)
    whole = np.floor(magnitude)
    # compare the fraction instead of adding 0.5, which can round up below a tie
    if magnitude - whole >= 0.5:
        whole += 1
    return int(np.sign(value) * whole)


def fit_trend(values: Sequence[Number]) -> TrendModel:
    """
    Fit y = intercept + slope * x over x = 0..n-1.

    Raises:
        InvalidSeriesError: fewer than two values (zero denominator)
    """
    n = len(values)
    if n < MIN_FIT_POINTS:
        raise InvalidSeriesError(f"Trend fit needs at least {MIN_FIT_POINTS} values, got {n}")

    ys = np.asarray(values, dtype=float)
    xs = np.arange(n, dtype=float)

    sum_x = xs.sum()
    sum_y = ys.sum()
    sum_xy = (xs * ys).sum()
    sum_xx = (xs * xs).sum()

    denominator = n * sum_xx - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    logger.debug(f"[fit_trend] n={n} slope={slope:.4f} intercept={intercept:.4f}")
    return TrendModel(slope=float(slope), intercept=float(intercept))


def project_values(values: Sequence[Number], days_ahead: int) -> List[int]:
    """
    Project the fitted trend `days_ahead` steps past the end of `values`.

    Returns:
        Rounded values at x = n, n+1, ..., n+days_ahead-1
    """
    if days_ahead < 0:
        raise InvalidSeriesError(f"days_ahead must be >= 0, got {days_ahead}")

    model = fit_trend(values)
    n = len(values)
    return [round_half_away(model.at(n + i)) for i in range(days_ahead)]
