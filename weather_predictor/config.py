"""
Runtime settings for Weather Predictor.

Values come from the environment (a local .env file is loaded first) and
fall back to the defaults below.

    WP_CITY              Default city name (New York)
    WP_DAYS_AHEAD        Reconciled prediction days (3)
    WP_PROJECTION_DAYS   Trend-only chart line days (7)
    WP_TOLERANCE_F       Agreement tolerance in °F (5)
    WP_MIN_HISTORY       Historical days required for a trend (3)
    WP_PAST_DAYS         Open-Meteo past days requested (14)
    WP_FORECAST_DAYS     Open-Meteo forecast days requested (7)
    WP_HTTP_TIMEOUT      Provider request timeout in seconds (15)
    WP_NWS_USER_AGENT    User-Agent sent to api.weather.gov
    LOG_LEVEL            Logging level (INFO)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    city: str = "New York"
    days_ahead: int = 3
    projection_days: int = 7
    tolerance_f: float = 5.0
    min_history: int = 3
    past_days: int = 14
    forecast_days: int = 7
    http_timeout: float = 15.0
    nws_user_agent: str = "WeatherPredictor/1.0"
    log_level: str = "INFO"


DEFAULT_SETTINGS = Settings()


def _env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"[config] {name}={raw!r} is not an integer, using {default}")
        return default
    if minimum is not None and value < minimum:
        logger.warning(f"[config] {name}={value} is below {minimum}, using {default}")
        return default
    return value


def _env_float(name: str, default: float, minimum: Optional[float] = None) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"[config] {name}={raw!r} is not a number, using {default}")
        return default
    if minimum is not None and value < minimum:
        logger.warning(f"[config] {name}={value} is below {minimum}, using {default}")
        return default
    return value


def load_settings(load_env_file: bool = True) -> Settings:
    """Build Settings from the environment."""
    if load_env_file:
        load_dotenv(find_dotenv(usecwd=True))

    d = DEFAULT_SETTINGS
    return Settings(
        city=os.getenv("WP_CITY", d.city),
        days_ahead=_env_int("WP_DAYS_AHEAD", d.days_ahead, minimum=1),
        projection_days=_env_int("WP_PROJECTION_DAYS", d.projection_days, minimum=1),
        tolerance_f=_env_float("WP_TOLERANCE_F", d.tolerance_f, minimum=0.0),
        min_history=_env_int("WP_MIN_HISTORY", d.min_history, minimum=2),
        past_days=_env_int("WP_PAST_DAYS", d.past_days, minimum=0),
        forecast_days=_env_int("WP_FORECAST_DAYS", d.forecast_days, minimum=1),
        http_timeout=_env_float("WP_HTTP_TIMEOUT", d.http_timeout),
        nws_user_agent=os.getenv("WP_NWS_USER_AGENT", d.nws_user_agent),
        log_level=os.getenv("LOG_LEVEL", d.log_level),
    )
