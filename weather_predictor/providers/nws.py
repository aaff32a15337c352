"""
National Weather Service (NWS) Provider for Weather Predictor

Fetches the official US forecast from api.weather.gov in two steps:
1. /points/{lat},{lon} resolves the forecast office gridpoint
2. the gridpoint 'forecast' endpoint returns day/night Periods

A daytime Period's temperature is that day's high and a night Period's is
its low. Only days with both are reported.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, TypedDict

import httpx

from weather_predictor.models import DailyObservation

logger = logging.getLogger(__name__)

SOURCE_NAME = "NWS"


class NWSPeriod(TypedDict, total=False):
    number: int
    name: str
    startTime: str
    isDaytime: bool
    temperature: int
    temperatureUnit: str


def periods_to_daily(periods: List[NWSPeriod]) -> List[DailyObservation]:
    """
    Pair day/night Periods into daily highs/lows keyed by startTime date.

    Example startTime: 2025-12-14T18:00:00-05:00 -> 2025-12-14
    """
    daily_map: Dict[str, Dict[str, Optional[int]]] = {}

    for p in periods:
        start_time = p.get("startTime", "")
        temp = p.get("temperature")
        if not start_time or temp is None:
            continue

        date_str = start_time[:10]
        day = daily_map.setdefault(date_str, {"high": None, "low": None})
        if p.get("isDaytime"):
            day["high"] = temp
        else:
            day["low"] = temp

    forecast = [
        DailyObservation(date=date.fromisoformat(d), high=t["high"], low=t["low"])
        for d, t in daily_map.items()
        if t["high"] is not None and t["low"] is not None
    ]
    forecast.sort(key=lambda o: o.date)

    logger.info(f"[NWSProvider] {len(forecast)} complete days from {len(periods)} periods")
    return forecast


class NWSProvider:
    """Provider for api.weather.gov daily forecasts."""

    POINTS_URL = "https://api.weather.gov/points/{lat},{lon}"

    def __init__(
        self,
        user_agent: str = "WeatherPredictor/1.0",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 15.0
    ):
        # NWS API policy requires an identifying User-Agent
        self.headers = {
            "User-Agent": user_agent,
            "Accept": "application/geo+json",
        }
        self.client = client
        self.timeout = timeout

    async def _get_json(self, client: httpx.AsyncClient, url: str) -> Dict[str, Any]:
        resp = await client.get(url, headers=self.headers)
        resp.raise_for_status()
        return resp.json()

    async def fetch_forecast_periods(self, lat: float, lon: float) -> List[NWSPeriod]:
        """
        Resolve the gridpoint for (lat, lon) and return its forecast Periods.

        Raises:
            httpx.HTTPError on transport or status failures
            KeyError when a response lacks the expected properties
        """
        points_url = self.POINTS_URL.format(lat=lat, lon=lon)
        logger.info(f"[NWSProvider] Resolving gridpoint via {points_url}")

        if self.client is None:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await self._fetch_periods(client, points_url)
        return await self._fetch_periods(self.client, points_url)

    async def _fetch_periods(self, client: httpx.AsyncClient, points_url: str) -> List[NWSPeriod]:
        points = await self._get_json(client, points_url)
        forecast_url = points["properties"]["forecast"]

        logger.info(f"[NWSProvider] Fetching forecast periods from {forecast_url}")
        data = await self._get_json(client, forecast_url)
        periods = data["properties"]["periods"]

        logger.info(f"[NWSProvider] Retrieved {len(periods)} forecast periods")
        return periods

    async def fetch_daily_forecast(self, lat: float, lon: float) -> List[DailyObservation]:
        """Daily high/low forecast for (lat, lon), ascending by date."""
        periods = await self.fetch_forecast_periods(lat, lon)
        return periods_to_daily(periods)
