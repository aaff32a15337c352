"""
Dashboard orchestration for Weather Predictor

Workflow:
1. Fetch Open-Meteo (history + forecast) and NWS concurrently, with retry
2. Reconcile the historical trend against both forecasts
3. Build the trend-only projection line for the chart

A source that fails after its retries is treated as an empty series; the
run only reports an error when every source failed.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import httpx

from weather_predictor.cities import City
from weather_predictor.config import DEFAULT_SETTINGS, Settings
from weather_predictor.models import DailyObservation, PredictionRecord
from weather_predictor.providers.nws import SOURCE_NAME as NWS, NWSProvider
from weather_predictor.providers.open_meteo import SOURCE_NAME as OPEN_METEO, fetch_open_meteo
from weather_predictor.reconcile import ReconciliationEngine
from weather_predictor.resilience import RetryConfig, retry_async

logger = logging.getLogger(__name__)

ALL_SOURCES_FAILED = "Failed to fetch weather data from all sources."


@dataclass(frozen=True)
class DashboardData:
    """Everything the presentation layer renders for one city."""
    city: City
    historical: Tuple[DailyObservation, ...] = ()
    forecasts: Mapping[str, Tuple[DailyObservation, ...]] = field(default_factory=dict)
    predictions: Tuple[PredictionRecord, ...] = ()
    prediction_line: Tuple[DailyObservation, ...] = ()
    source_ok: Mapping[str, bool] = field(default_factory=dict)
    error: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "forecasts", MappingProxyType(dict(self.forecasts)))
        object.__setattr__(self, "source_ok", MappingProxyType(dict(self.source_ok)))


async def load_dashboard(
    city: City,
    settings: Settings = DEFAULT_SETTINGS,
    client: Optional[httpx.AsyncClient] = None,
    retry_config: Optional[RetryConfig] = None,
    today: Optional[date] = None
) -> DashboardData:
    """
    Fetch both sources for `city` and run the prediction engine.

    Args:
        city: Location to forecast
        settings: Horizons, thresholds and HTTP options
        client: Shared HTTP client (one is created per provider call if None)
        retry_config: Retry behaviour for both providers
        today: Local calendar day splitting past from forecast (defaults to
            today in the city's timezone)
    """
    logger.info(f"[load_dashboard] Loading {city.name}...")

    nws_provider = NWSProvider(
        user_agent=settings.nws_user_agent,
        client=client,
        timeout=settings.http_timeout,
    )

    om_result, nws_result = await asyncio.gather(
        retry_async(
            fetch_open_meteo, OPEN_METEO, retry_config,
            city, settings.past_days, settings.forecast_days, today, client, settings.http_timeout,
        ),
        retry_async(
            nws_provider.fetch_daily_forecast, NWS, retry_config,
            city.lat, city.lon,
        ),
    )

    historical: Tuple[DailyObservation, ...] = ()
    om_forecast: Tuple[DailyObservation, ...] = ()
    nws_forecast: Tuple[DailyObservation, ...] = ()

    if om_result is not None:
        historical = tuple(om_result.historical)
        om_forecast = tuple(om_result.forecast)
    else:
        logger.error("[load_dashboard] Open-Meteo fetch failed")

    if nws_result is not None:
        nws_forecast = tuple(nws_result)
    else:
        logger.error("[load_dashboard] NWS fetch failed")

    forecasts = {OPEN_METEO: om_forecast, NWS: nws_forecast}
    source_ok = {OPEN_METEO: om_result is not None, NWS: nws_result is not None}

    predictions: Tuple[PredictionRecord, ...] = ()
    prediction_line: Tuple[DailyObservation, ...] = ()

    if historical:
        engine = ReconciliationEngine(tolerance=settings.tolerance_f, min_history=settings.min_history)
        predictions = tuple(engine.reconcile(historical, forecasts, settings.days_ahead))
        prediction_line = tuple(engine.project(historical, settings.projection_days))
    else:
        logger.warning("[load_dashboard] No historical data, skipping prediction")

    error = None if any(source_ok.values()) else ALL_SOURCES_FAILED
    if error:
        logger.error(f"[load_dashboard] {error}")

    return DashboardData(
        city=city,
        historical=historical,
        forecasts=forecasts,
        predictions=predictions,
        prediction_line=prediction_line,
        source_ok=source_ok,
        error=error,
    )
