"""
Open-Meteo Provider for Weather Predictor

One request returns both the recent past (observed highs/lows) and the
forecast, so Open-Meteo supplies the historical series the trend is fitted
to as well as one of the two external forecasts.

Temperatures are requested in Fahrenheit in the city's local timezone and
rounded half away from zero.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import httpx

from weather_predictor.cities import City
from weather_predictor.models import DailyObservation
from weather_predictor.trend import round_half_away

logger = logging.getLogger(__name__)

SOURCE_NAME = "Open-Meteo"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


@dataclass(frozen=True)
class OpenMeteoResult:
    historical: List[DailyObservation] = field(default_factory=list)
    forecast: List[DailyObservation] = field(default_factory=list)


def parse_open_meteo_daily(data: Dict[str, Any], today: date) -> OpenMeteoResult:
    """
    Split an Open-Meteo `daily` block into past and future days.

    Days up to and including `today` are historical, later days are forecast.
    Days with a missing max or min are dropped.
    """
    daily = data["daily"]
    times = daily["time"]
    highs = daily["temperature_2m_max"]
    lows = daily["temperature_2m_min"]

    historical: List[DailyObservation] = []
    forecast: List[DailyObservation] = []

    for i, date_str in enumerate(times):
        high, low = highs[i], lows[i]
        if high is None or low is None:
            logger.debug(f"[open_meteo] Skipping {date_str}: missing max/min")
            continue

        day = DailyObservation(
            date=date.fromisoformat(date_str),
            high=round_half_away(high),
            low=round_half_away(low),
        )
        if day.date <= today:
            historical.append(day)
        else:
            forecast.append(day)

    return OpenMeteoResult(historical=historical, forecast=forecast)


async def fetch_open_meteo(
    city: City,
    past_days: int = 14,
    forecast_days: int = 7,
    today: Optional[date] = None,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 15.0
) -> OpenMeteoResult:
    """
    Fetch past and forecast daily highs/lows for `city`.

    Raises:
        httpx.HTTPError on transport or status failures
        KeyError when the response has no daily block
    """
    logger.info(f"[fetch_open_meteo] {city.name} ({city.lat}, {city.lon}): "
                f"past_days={past_days}, forecast_days={forecast_days}")

    params = {
        "latitude": city.lat,
        "longitude": city.lon,
        "daily": "temperature_2m_max,temperature_2m_min",
        "timezone": city.timezone,
        "past_days": past_days,
        "forecast_days": forecast_days,
        "temperature_unit": "fahrenheit",
    }

    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as owned:
            resp = await owned.get(FORECAST_URL, params=params)
    else:
        resp = await client.get(FORECAST_URL, params=params)

    logger.info(f"[fetch_open_meteo] Response status: {resp.status_code}")
    resp.raise_for_status()
    data = resp.json()

    if today is None:
        today = datetime.now(ZoneInfo(city.timezone)).date()

    result = parse_open_meteo_daily(data, today)
    logger.info(f"[fetch_open_meteo] {len(result.historical)} historical days, "
                f"{len(result.forecast)} forecast days")
    return result
