"""
Weather Predictor

Daily high/low temperature predictions for a handful of US cities, built by
reconciling a local least-squares trend against two independent forecast
providers.

Architecture:
    providers/     - Data fetching:
                     * open_meteo.py - past 14 days + 7-day forecast
                     * nws.py        - National Weather Service Periods
    trend.py       - OLS trend fit and projection
    reconcile.py   - Confidence-scored predictions + trend-only line
    dashboard.py   - Concurrent fetch, partial-failure handling
    report.py      - Prediction card, forecast table, chart frame

Entry Point:
    main.py        - python main.py --city Chicago
"""

from weather_predictor.models import (
    Confidence,
    DailyObservation,
    ExternalForecastPoint,
    InvalidSeriesError,
    PredictionRecord,
    TrendModel,
)
from weather_predictor.reconcile import ReconciliationEngine, project, reconcile
from weather_predictor.trend import fit_trend, project_values

__version__ = "1.0.0"

__all__ = [
    "Confidence",
    "DailyObservation",
    "ExternalForecastPoint",
    "InvalidSeriesError",
    "PredictionRecord",
    "TrendModel",
    "ReconciliationEngine",
    "project",
    "reconcile",
    "fit_trend",
    "project_values",
]
