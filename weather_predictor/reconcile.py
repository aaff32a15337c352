"""
Forecast Reconciliation Engine for Weather Predictor

Projects the historical high/low trend forward and scores it against each
external forecast source.

Key Features:
1. Least-squares trend of daily highs and lows (trend.py)
2. Date-aligned lookup of every configured source's forecast
3. Confidence scoring based on source agreement (highs only)
4. Trend-only projection line for charting

CONFIDENCE (tolerance 5°F, inclusive):
- HIGH: every configured source agrees with the predicted high
- MEDIUM: at least one source agrees
- LOW: no source agrees (a source with no value for the day never agrees)

Fewer than 3 historical days is "no prediction available": both
reconcile() and project() return an empty list instead of raising.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from weather_predictor.models import (
    Confidence,
    DailyObservation,
    ExternalForecastPoint,
    InvalidSeriesError,
    PredictionRecord,
)
from weather_predictor.trend import MIN_FIT_POINTS, project_values

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """
    Trend projection + multi-source agreement scoring.

    Stateless apart from its two thresholds, so one instance can be shared
    between concurrent callers.
    """

    # Agreement tolerance (Fahrenheit)
    AGREEMENT_TOLERANCE_F = 5.0

    # Historical days required before a trend is trusted
    MIN_HISTORY_DAYS = 3

    def __init__(self, tolerance: Optional[float] = None, min_history: Optional[int] = None):
        self.tolerance = self.AGREEMENT_TOLERANCE_F if tolerance is None else float(tolerance)
        self.min_history = self.MIN_HISTORY_DAYS if min_history is None else int(min_history)

        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.min_history < MIN_FIT_POINTS:
            raise ValueError(
                f"min_history must be >= {MIN_FIT_POINTS} for a trend fit, got {self.min_history}"
            )

        logger.debug(f"[ReconciliationEngine] tolerance={self.tolerance}°F, "
                     f"min_history={self.min_history}")

    def has_enough_history(self, historical: Sequence[DailyObservation]) -> bool:
        return len(historical) >= self.min_history

    def _trend(
        self,
        historical: Sequence[DailyObservation],
        days_ahead: int
    ) -> Tuple[List[int], List[int]]:
        """Project highs and lows independently."""
        if not isinstance(days_ahead, int) or isinstance(days_ahead, bool) or days_ahead < 1:
            raise InvalidSeriesError(f"days_ahead must be a positive integer, got {days_ahead!r}")

        highs = [d.high for d in historical]
        lows = [d.low for d in historical]
        return project_values(highs, days_ahead), project_values(lows, days_ahead)

    @staticmethod
    def _target_dates(historical: Sequence[DailyObservation], days_ahead: int) -> List[date]:
        last_date = historical[-1].date
        return [last_date + timedelta(days=i + 1) for i in range(days_ahead)]

    def classify(self, agreeing: int, total: int) -> Confidence:
        """Map an agreement count out of `total` configured sources to a label."""
        if total > 0 and agreeing >= total:
            return Confidence.HIGH
        if agreeing >= 1:
            return Confidence.MEDIUM
        return Confidence.LOW

    def reconcile(
        self,
        historical: Sequence[DailyObservation],
        external_forecasts: Mapping[str, Sequence[ExternalForecastPoint]],
        days_ahead: int
    ) -> List[PredictionRecord]:
        """
        Produce one scored prediction per future day.

        Args:
            historical: Observed days, ascending by date
            external_forecasts: Source name -> forecast points (may be empty)
            days_ahead: Number of days after the last historical date

        Returns:
            PredictionRecords in ascending date order, or [] when there is
            not enough history
        """
        if not self.has_enough_history(historical):
            logger.info(f"[ReconciliationEngine] Insufficient history "
                        f"({len(historical)} < {self.min_history} days), no prediction")
            return []

        predicted_highs, predicted_lows = self._trend(historical, days_ahead)

        # Index each source by date; the first point for a date wins
        source_names = list(external_forecasts.keys())
        by_date: Dict[str, Dict[date, ExternalForecastPoint]] = {}
        for name in source_names:
            index: Dict[date, ExternalForecastPoint] = {}
            for point in external_forecasts[name] or ():
                index.setdefault(point.date, point)
            by_date[name] = index

        records: List[PredictionRecord] = []
        for i, target in enumerate(self._target_dates(historical, days_ahead)):
            pred_high = predicted_highs[i]
            pred_low = predicted_lows[i]

            source_highs: Dict[str, Optional[float]] = {}
            source_lows: Dict[str, Optional[float]] = {}
            agreeing: List[str] = []

            for name in source_names:
                point = by_date[name].get(target)
                if point is None:
                    source_highs[name] = None
                    source_lows[name] = None
                    continue

                source_highs[name] = point.high
                source_lows[name] = point.low
                if abs(point.high - pred_high) <= self.tolerance:
                    agreeing.append(name)

            confidence = self.classify(len(agreeing), len(source_names))

            logger.debug(f"[ReconciliationEngine] {target.isoformat()}: high={pred_high} "
                         f"low={pred_low} sources={source_highs} -> {confidence.value}")

            records.append(PredictionRecord(
                date=target,
                predicted_high=pred_high,
                predicted_low=pred_low,
                per_source_high=source_highs,
                per_source_low=source_lows,
                confidence=confidence,
                agreeing_sources=tuple(agreeing),
            ))

        logger.info(f"[ReconciliationEngine] Reconciled {len(records)} days against "
                    f"{len(source_names)} sources")
        return records

    def project(
        self,
        historical: Sequence[DailyObservation],
        days_ahead: int
    ) -> List[DailyObservation]:
        """Trend-only extrapolation (no source merge, no confidence)."""
        if not self.has_enough_history(historical):
            logger.info(f"[ReconciliationEngine] Insufficient history "
                        f"({len(historical)} < {self.min_history} days), no projection")
            return []

        highs, lows = self._trend(historical, days_ahead)
        return [
            DailyObservation(date=target, high=highs[i], low=lows[i])
            for i, target in enumerate(self._target_dates(historical, days_ahead))
        ]

    def summarize(self, records: Sequence[PredictionRecord]) -> Dict[str, object]:
        """
        Summary across a prediction run.

        Returns:
            Counts per confidence level and the largest source-vs-trend
            high difference seen
        """
        if not records:
            return {"total": 0}

        levels = {c.value: 0 for c in Confidence}
        max_spread = 0.0

        for r in records:
            levels[r.confidence.value] += 1
            for value in r.per_source_high.values():
                if value is not None:
                    max_spread = max(max_spread, abs(value - r.predicted_high))

        return {
            "total": len(records),
            "confidence_counts": levels,
            "max_spread_f": round(max_spread, 1),
            "has_low": levels[Confidence.LOW.value] > 0,
        }


_DEFAULT_ENGINE = ReconciliationEngine()


def reconcile(
    historical: Sequence[DailyObservation],
    external_forecasts: Mapping[str, Sequence[ExternalForecastPoint]],
    days_ahead: int = 3
) -> List[PredictionRecord]:
    """
    Reconcile with the default thresholds.

    Example:
        records = reconcile(history, {"Open-Meteo": om, "NWS": nws}, 3)
    """
    return _DEFAULT_ENGINE.reconcile(historical, external_forecasts, days_ahead)


def project(historical: Sequence[DailyObservation], days_ahead: int = 7) -> List[DailyObservation]:
    """Trend-only projection with the default thresholds."""
    return _DEFAULT_ENGINE.project(historical, days_ahead)
