"""
Text rendering for Weather Predictor

Turns a DashboardData into:
- the "Tomorrow's Prediction" card
- the per-day forecast comparison table (pandas)
- a date-indexed chart frame merging history, forecasts and the trend line
- a JSON-ready dict for machine consumers
"""

from typing import Any, Dict, List, Sequence

import pandas as pd

from weather_predictor.dashboard import DashboardData
from weather_predictor.models import DailyObservation, PredictionRecord
from weather_predictor.reconcile import ReconciliationEngine

MISSING = "--"


def _slug(source: str) -> str:
    return source.lower().replace("-", "_").replace(".", "_").replace(" ", "_")


def _source_names(predictions: Sequence[PredictionRecord]) -> List[str]:
    names: List[str] = []
    for p in predictions:
        for name in p.per_source_high:
            if name not in names:
                names.append(name)
    return names


def _format_day(d) -> str:
    return f"{d:%A, %B} {d.day}"


def render_prediction_card(predictions: Sequence[PredictionRecord], city_name: str) -> str:
    """Card for the first predicted day; empty string when there is none."""
    if not predictions:
        return ""

    tomorrow = predictions[0]
    lines = [
        f"Tomorrow's Prediction - {city_name}",
        _format_day(tomorrow.date),
        f"High: {tomorrow.predicted_high}°F   Low: {tomorrow.predicted_low}°F",
        f"{tomorrow.confidence.value.upper()} CONFIDENCE",
    ]

    if tomorrow.agreeing_sources:
        lines.append(f"Agrees with: {', '.join(tomorrow.agreeing_sources)}")
    else:
        lines.append("Diverges from all forecast sources")

    insight = f"Predicted {city_name} high: {tomorrow.predicted_high}°F"
    for name, high in tomorrow.per_source_high.items():
        if high is not None:
            insight += f" | {name}: {high}°F"
    lines.append(f"Market insight: {insight}")

    return "\n".join(lines)


def forecast_table(predictions: Sequence[PredictionRecord]) -> pd.DataFrame:
    """One row per predicted day; absent source values are None."""
    sources = _source_names(predictions)
    columns = ["Date", "Predicted High", "Predicted Low"]
    for name in sources:
        columns += [f"{name} High", f"{name} Low"]
    columns.append("Confidence")

    rows = []
    for p in predictions:
        row: Dict[str, Any] = {
            "Date": p.date.isoformat(),
            "Predicted High": p.predicted_high,
            "Predicted Low": p.predicted_low,
        }
        for name in sources:
            row[f"{name} High"] = p.per_source_high.get(name)
            row[f"{name} Low"] = p.per_source_low.get(name)
        row["Confidence"] = p.confidence.value.upper()
        rows.append(row)

    return pd.DataFrame(rows, columns=columns)


def render_forecast_table(predictions: Sequence[PredictionRecord]) -> str:
    if not predictions:
        return "No prediction available (insufficient historical data)."
    return forecast_table(predictions).to_string(index=False, na_rep=MISSING)


def _series_frame(series: Sequence[DailyObservation], prefix: str) -> pd.DataFrame:
    return pd.DataFrame(
        {
            f"{prefix}_high": [d.high for d in series],
            f"{prefix}_low": [d.low for d in series],
        },
        index=pd.Index([d.date for d in series], name="date"),
    )


def chart_frame(data: DashboardData) -> pd.DataFrame:
    """
    Date-indexed frame with one high/low column pair per series:
    historical, each forecast source, and the trend line.
    """
    frames = [_series_frame(data.historical, "historical")]
    for name, series in data.forecasts.items():
        frames.append(_series_frame(series, _slug(name)))
    frames.append(_series_frame(data.prediction_line, "trend"))

    return pd.concat(frames, axis=1).sort_index()


def to_json(data: DashboardData) -> Dict[str, Any]:
    engine = ReconciliationEngine()
    return {
        "city": data.city.name,
        "error": data.error,
        "source_ok": dict(data.source_ok),
        "historical": [d.to_dict() for d in data.historical],
        "forecasts": {
            name: [d.to_dict() for d in series] for name, series in data.forecasts.items()
        },
        "predictions": [p.to_dict() for p in data.predictions],
        "prediction_line": [d.to_dict() for d in data.prediction_line],
        "summary": engine.summarize(data.predictions),
    }
