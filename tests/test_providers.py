"""
Tests for the Open-Meteo and NWS providers and the retry wrapper.

HTTP is served by httpx.MockTransport; no network access is needed.

Run with: python -m pytest tests/test_providers.py -v
"""

import logging
from datetime import date

import httpx
import pytest

from weather_predictor.cities import get_city
from weather_predictor.models import DailyObservation
from weather_predictor.providers.nws import NWSProvider, periods_to_daily
from weather_predictor.providers.open_meteo import fetch_open_meteo, parse_open_meteo_daily
from weather_predictor.resilience import ErrorType, RetryConfig, backoff_delay, classify_failure, retry_async

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

NO_WAIT = RetryConfig(max_retries=2, base_delay_seconds=0.0, max_delay_seconds=0.0, jitter=False)

OPEN_METEO_PAYLOAD = {
    "daily": {
        "time": ["2025-01-08", "2025-01-09", "2025-01-10", "2025-01-11", "2025-01-12"],
        "temperature_2m_max": [40.4, 41.5, None, 44.2, 45.5],
        "temperature_2m_min": [30.1, -2.5, 31.0, 33.9, 35.0],
    }
}

NWS_POINTS_URL = "https://api.weather.gov/points/40.7128,-74.006"
NWS_FORECAST_URL = "https://api.weather.gov/gridpoints/OKX/33,35/forecast"

NWS_PERIODS = [
    {"number": 1, "name": "Tonight", "startTime": "2025-01-10T18:00:00-05:00",
     "isDaytime": False, "temperature": 29},
    {"number": 2, "name": "Saturday", "startTime": "2025-01-11T06:00:00-05:00",
     "isDaytime": True, "temperature": 44},
    {"number": 3, "name": "Saturday Night", "startTime": "2025-01-11T18:00:00-05:00",
     "isDaytime": False, "temperature": 33},
    {"number": 4, "name": "Sunday", "startTime": "2025-01-12T06:00:00-05:00",
     "isDaytime": True, "temperature": 46},
    {"number": 5, "name": "Sunday Night", "startTime": "2025-01-12T18:00:00-05:00",
     "isDaytime": False, "temperature": 35},
]


class TestOpenMeteo:

    def test_parse_splits_on_today(self):
        result = parse_open_meteo_daily(OPEN_METEO_PAYLOAD, today=date(2025, 1, 10))
        logger.info(f"[TEST] Parsed: {result}")

        # 2025-01-10 has no max and is dropped
        assert [d.date for d in result.historical] == [date(2025, 1, 8), date(2025, 1, 9)]
        assert [d.date for d in result.forecast] == [date(2025, 1, 11), date(2025, 1, 12)]

    def test_parse_rounds_half_away_from_zero(self):
        result = parse_open_meteo_daily(OPEN_METEO_PAYLOAD, today=date(2025, 1, 10))
        assert result.historical[0] == DailyObservation(date(2025, 1, 8), 40, 30)
        assert result.historical[1] == DailyObservation(date(2025, 1, 9), 42, -3)
        assert result.forecast[1] == DailyObservation(date(2025, 1, 12), 46, 35)

    def test_parse_missing_daily_block(self):
        with pytest.raises(KeyError):
            parse_open_meteo_daily({}, today=date(2025, 1, 10))

    @pytest.mark.asyncio
    async def test_fetch_sends_city_params(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(200, json=OPEN_METEO_PAYLOAD)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await fetch_open_meteo(
                get_city("chicago"), past_days=14, forecast_days=7,
                today=date(2025, 1, 10), client=client,
            )

        logger.info(f"[TEST] Request params: {seen}")
        assert seen["latitude"] == "41.8781"
        assert seen["timezone"] == "America/Chicago"
        assert seen["temperature_unit"] == "fahrenheit"
        assert seen["past_days"] == "14"
        assert seen["daily"] == "temperature_2m_max,temperature_2m_min"
        assert len(result.historical) == 2
        assert len(result.forecast) == 2

    @pytest.mark.asyncio
    async def test_fetch_raises_on_server_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await fetch_open_meteo(get_city("Denver"), client=client, today=date(2025, 1, 10))


class TestNWS:

    def test_periods_pair_into_days(self):
        days = periods_to_daily(NWS_PERIODS)
        logger.info(f"[TEST] NWS days: {days}")

        # 2025-01-10 only has a night period
        assert days == [
            DailyObservation(date(2025, 1, 11), 44, 33),
            DailyObservation(date(2025, 1, 12), 46, 35),
        ]

    def test_periods_sorted_by_date(self):
        days = periods_to_daily(list(reversed(NWS_PERIODS)))
        assert [d.date for d in days] == [date(2025, 1, 11), date(2025, 1, 12)]

    def test_periods_without_temperature_skipped(self):
        periods = [
            {"startTime": "2025-01-11T06:00:00-05:00", "isDaytime": True, "temperature": None},
            {"startTime": "2025-01-11T18:00:00-05:00", "isDaytime": False, "temperature": 33},
        ]
        assert periods_to_daily(periods) == []

    def test_empty_periods(self):
        assert periods_to_daily([]) == []

    @pytest.mark.asyncio
    async def test_fetch_daily_forecast_follows_points(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if str(request.url) == NWS_POINTS_URL:
                return httpx.Response(200, json={"properties": {"forecast": NWS_FORECAST_URL}})
            if str(request.url) == NWS_FORECAST_URL:
                return httpx.Response(200, json={"properties": {"periods": NWS_PERIODS}})
            return httpx.Response(404)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            provider = NWSProvider(user_agent="TestAgent/0.1", client=client)
            days = await provider.fetch_daily_forecast(40.7128, -74.006)

        assert [str(r.url) for r in requests] == [NWS_POINTS_URL, NWS_FORECAST_URL]
        assert all(r.headers["User-Agent"] == "TestAgent/0.1" for r in requests)
        assert len(days) == 2

    @pytest.mark.asyncio
    async def test_fetch_missing_forecast_url(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"properties": {}}))
        async with httpx.AsyncClient(transport=transport) as client:
            provider = NWSProvider(client=client)
            with pytest.raises(KeyError):
                await provider.fetch_daily_forecast(40.7128, -74.006)


class TestResilience:

    def _status_error(self, status):
        request = httpx.Request("GET", "https://example.test")
        response = httpx.Response(status, request=request)
        return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)

    @pytest.mark.parametrize("make_error, expected", [
        (lambda s: s._status_error(429), (ErrorType.RATE_LIMIT, True)),
        (lambda s: s._status_error(503), (ErrorType.API_ERROR, True)),
        (lambda s: s._status_error(404), (ErrorType.API_ERROR, False)),
        (lambda s: httpx.ReadTimeout("slow"), (ErrorType.TIMEOUT, True)),
        (lambda s: httpx.ConnectError("refused"), (ErrorType.API_ERROR, True)),
        (lambda s: KeyError("daily"), (ErrorType.PARSE_ERROR, False)),
        (lambda s: RuntimeError("?"), (ErrorType.UNKNOWN, True)),
    ])
    def test_classify_failure(self, make_error, expected):
        assert classify_failure(make_error(self)) == expected

    def test_backoff_doubles_and_is_capped(self):
        config = RetryConfig(base_delay_seconds=1.0, max_delay_seconds=5.0, jitter=False)
        assert [backoff_delay(r, config) for r in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 5.0]

    def test_backoff_jitter_bounded(self):
        config = RetryConfig(base_delay_seconds=2.0, max_delay_seconds=5.0, jitter=True)
        assert 2.0 <= backoff_delay(1, config) <= 2.5

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        calls = []

        async def flaky(value):
            calls.append(1)
            if len(calls) < 3:
                raise self._status_error(503)
            return value

        assert await retry_async(flaky, "Test", NO_WAIT, "ok") == "ok"
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_gives_up_returns_none(self):
        calls = []

        async def always_timeout():
            calls.append(1)
            raise httpx.ConnectTimeout("down")

        assert await retry_async(always_timeout, "Test", NO_WAIT) is None
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_non_retryable_status_stops_early(self):
        calls = []

        async def not_found():
            calls.append(1)
            raise self._status_error(404)

        assert await retry_async(not_found, "Test", NO_WAIT) is None
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_parse_error_not_retried(self):
        calls = []

        async def malformed():
            calls.append(1)
            raise KeyError("properties")

        assert await retry_async(malformed, "Test", NO_WAIT) is None
        assert len(calls) == 1
