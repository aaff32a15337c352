"""
Providers package for Weather Predictor

Two independent sources feed the reconciliation engine:

1. Open-Meteo - past 14 days of observed highs/lows (the trend input)
   plus a 7-day forecast
2. NWS - National Weather Service day/night Period forecast
"""

from weather_predictor.providers.open_meteo import (
    SOURCE_NAME as OPEN_METEO,
    OpenMeteoResult,
    fetch_open_meteo,
    parse_open_meteo_daily,
)

from weather_predictor.providers.nws import (
    SOURCE_NAME as NWS,
    NWSPeriod,
    NWSProvider,
    periods_to_daily,
)

__all__ = [
    "OPEN_METEO",
    "OpenMeteoResult",
    "fetch_open_meteo",
    "parse_open_meteo_daily",
    "NWS",
    "NWSPeriod",
    "NWSProvider",
    "periods_to_daily",
]
