"""
Value types shared by the trend fitter, the reconciliation engine and the
providers.

All records are frozen dataclasses so a prediction run can be handed to any
number of readers without copying.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

Number = Union[int, float]


class InvalidSeriesError(ValueError):
    """Raised when a series cannot be fed to the regression."""


class Confidence(Enum):
    """Qualitative agreement between the trend and the external forecasts."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class DailyObservation:
    """One calendar day of temperatures (°F)."""
    date: date
    high: Number
    low: Number

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "high": self.high, "low": self.low}


# Forecast points from a provider have the same shape as observations
ExternalForecastPoint = DailyObservation


@dataclass(frozen=True)
class TrendModel:
    """Least-squares line over the series index."""
    slope: float
    intercept: float

    def at(self, x: float) -> float:
        return self.intercept + self.slope * x


@dataclass(frozen=True)
class PredictionRecord:
    """Reconciled prediction for one future day."""
    date: date
    predicted_high: int
    predicted_low: int
    per_source_high: Mapping[str, Optional[Number]]
    per_source_low: Mapping[str, Optional[Number]]
    confidence: Confidence
    agreeing_sources: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Freeze the per-source mappings as well as the record itself
        object.__setattr__(self, "per_source_high", MappingProxyType(dict(self.per_source_high)))
        object.__setattr__(self, "per_source_low", MappingProxyType(dict(self.per_source_low)))
        object.__setattr__(self, "agreeing_sources", tuple(self.agreeing_sources))

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "predicted_high": self.predicted_high,
            "predicted_low": self.predicted_low,
            "per_source_high": dict(self.per_source_high),
            "per_source_low": dict(self.per_source_low),
            "confidence": self.confidence.value,
            "agreeing_sources": list(self.agreeing_sources),
        }
