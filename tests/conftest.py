"""Shared fixtures for the Weather Predictor tests."""

from datetime import date, timedelta

import pytest

from weather_predictor.models import DailyObservation


def _series(highs, lows=None, start=date(2025, 1, 1)):
    if lows is None:
        lows = [h - 20 for h in highs]
    return [
        DailyObservation(date=start + timedelta(days=i), high=h, low=l)
        for i, (h, l) in enumerate(zip(highs, lows))
    ]


@pytest.fixture
def make_series():
    """Factory: make_series(highs, lows=None, start=date) -> [DailyObservation]."""
    return _series


@pytest.fixture
def warming_week():
    """Seven days warming 2°F/day: 70, 72, ... 82 (lows 50..62)."""
    return _series([70, 72, 74, 76, 78, 80, 82])
